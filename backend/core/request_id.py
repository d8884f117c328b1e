# backend/core/request_id.py
import uuid
from contextvars import ContextVar
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

HEADER = "X-Request-ID"

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    return _request_id.get()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id (client-supplied or fresh) for log correlation."""

    def __init__(self, app: ASGIApp, header_name: str = HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request, call_next: Callable):
        req_id = request.headers.get(self.header_name) or uuid.uuid4().hex
        request.state.request_id = req_id
        reset_token = _request_id.set(req_id)
        try:
            response = await call_next(request)
        finally:
            _request_id.reset(reset_token)
        response.headers[self.header_name] = req_id
        return response
