# backend/services/video_uploads.py
"""
Two-phase video upload: hand out a signed PUT destination, then record the
metadata once the client reports the object is stored. A client that dies
between the two phases leaves an object with no recording entry; nothing
reconciles those.
"""
import time
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from core.catalog import VIDEO_QUESTION_COUNT
from core.s3_client import StorageError, create_signed_upload_url
from core.timeutils import iso, utcnow
from db.models import Assessment
from services import assessments
from services.errors import BadRequest, ServiceError


def storage_prefix(assessment_id: str) -> str:
    return f"videos/{assessment_id}/"


def build_storage_path(assessment_id: str, question_index: int, now_ms: Optional[int] = None) -> str:
    safe_index = max(0, min(VIDEO_QUESTION_COUNT - 1, int(question_index)))
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{storage_prefix(assessment_id)}q{safe_index + 1}-{now_ms}.webm"


def replace_recording(answers: Optional[dict], recording: dict) -> dict:
    """
    Return new answers with ``recording`` as the only entry for its
    questionIndex; recordings for other indices are kept as they were.
    """
    answers = dict(answers or {})
    video = dict(answers.get("video") or {})
    index = recording["questionIndex"]
    recordings: List[dict] = [
        r for r in (video.get("recordings") or []) if r.get("questionIndex") != index
    ]
    recordings.append(recording)
    video["recordings"] = recordings
    answers["video"] = video
    return answers


def _require_index(question_index: Any) -> int:
    # bool is an int subclass; JSON true must not become question 2
    if isinstance(question_index, bool) or not isinstance(question_index, int):
        raise BadRequest("Missing questionIndex")
    return question_index


def create_upload_destination(db: Session, token: str, question_index: Any) -> Dict[str, str]:
    question_index = _require_index(question_index)

    assessment = assessments.get_by_token(db, token)
    assessments.ensure_editable(assessment)

    storage_path = build_storage_path(assessment.id, question_index)
    try:
        signed_url = create_signed_upload_url(storage_path)
    except StorageError as exc:
        raise ServiceError(str(exc)) from exc
    return {"signedUrl": signed_url, "storagePath": storage_path}


def commit_recording(
    db: Session,
    token: str,
    *,
    question_index: Any,
    storage_path: str,
    duration_sec: Optional[float] = None,
    size_bytes: Optional[int] = None,
    created_at_iso: Optional[str] = None,
) -> Assessment:
    question_index = _require_index(question_index)
    assessment = assessments.get_by_token(db, token)
    assessments.ensure_editable(assessment)

    if not 0 <= question_index < VIDEO_QUESTION_COUNT:
        raise BadRequest(f"questionIndex must be between 0 and {VIDEO_QUESTION_COUNT - 1}")
    if not storage_path:
        raise BadRequest("Missing storagePath")
    if not storage_path.startswith(storage_prefix(assessment.id)):
        raise BadRequest("storagePath does not belong to this assessment")

    recording = {
        "questionIndex": question_index,
        "storagePath": storage_path,
        "durationSec": duration_sec or 0,
        "sizeBytes": size_bytes or 0,
        "createdAtIso": created_at_iso or iso(utcnow()),
    }
    assessment.answers = replace_recording(assessment.answers, recording)
    db.add(assessment)
    db.commit()
    db.refresh(assessment)
    return assessment
