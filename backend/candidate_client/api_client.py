# backend/candidate_client/api_client.py
"""Thin httpx wrapper over the candidate endpoints, bound to one assessment token."""
from typing import Any, Dict, List, Optional

import httpx

VIDEO_CONTENT_TYPE = "video/webm"


class ClientError(Exception):
    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return resp.text


class AssessmentClient:
    def __init__(self, base_url: str, token: str, http: Optional[httpx.Client] = None, timeout: float = 30.0):
        self.token = token
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        resp = self.http.post(path, json={"token": self.token, **body})
        if resp.status_code >= 400:
            raise ClientError(resp.status_code, _detail(resp))
        return resp.json()

    # ---- application ----
    def load(self) -> Dict[str, Any]:
        return self._post("/api/application/load", {})["assessment"]

    def save(self, answers_patch: Optional[Dict[str, Any]] = None, current_step: Optional[int] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if answers_patch is not None:
            body["answersPatch"] = answers_patch
        if current_step is not None:
            body["currentStep"] = current_step
        return self._post("/api/application/save", body)

    def submit(self) -> Dict[str, Any]:
        return self._post("/api/application/submit", {})

    def log(self, events: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self._post("/api/application/log", {"events": events})

    # ---- video ----
    def upload_url(self, question_index: int) -> Dict[str, str]:
        return self._post("/api/video/upload-url", {"questionIndex": question_index})

    def put_video(self, signed_url: str, data: bytes) -> None:
        # signed URLs are absolute and point at storage, not at the API
        resp = self.http.put(signed_url, content=data, headers={"Content-Type": VIDEO_CONTENT_TYPE})
        if resp.status_code >= 400:
            raise ClientError(resp.status_code, f"Upload failed: {resp.status_code}")

    def commit(self, recording: Dict[str, Any]) -> Dict[str, Any]:
        return self._post("/api/video/commit", recording)
