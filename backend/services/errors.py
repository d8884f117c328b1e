# backend/services/errors.py


class ServiceError(Exception):
    """Domain failure with the HTTP status the API layer should answer with."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class BadRequest(ServiceError):
    status_code = 400


class Unauthorized(ServiceError):
    status_code = 401


class Forbidden(ServiceError):
    status_code = 403


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    status_code = 409


class Gone(ServiceError):
    status_code = 410


class Unprocessable(ServiceError):
    status_code = 422


class UpstreamError(ServiceError):
    """External dependency (LLM, storage) failed; the user may retry."""

    status_code = 502


ALREADY_SUBMITTED = "Already submitted"
INVALID_LINK = "Invalid link"
