# backend/services/assessments.py
"""Candidate assessment records, looked up by their shareable token."""
import logging
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from core import security
from core.s3_client import delete_objects
from core.timeutils import utcnow
from db.models import Assessment, AssessmentStatus
from services.answer_merge import deep_merge
from services.errors import ALREADY_SUBMITTED, INVALID_LINK, BadRequest, Conflict, NotFound, Unprocessable
from services.step_flow import StepGateError, all_videos_uploaded, check_step_change

logger = logging.getLogger(__name__)

LIST_LIMIT = 200


def create_assessment(db: Session, admin_label: Optional[str] = None, created_by: Optional[str] = None) -> Assessment:
    label = (admin_label or "").strip() or None
    assessment = Assessment(
        token=security.generate_assessment_token(),
        admin_label=label,
        status=AssessmentStatus.in_progress,
        current_step=1,
        answers={},
        proctoring={"counts": {}, "events": []},
        ai_evaluations={},
        created_by_trainer_id=created_by,
    )
    db.add(assessment)
    db.commit()
    db.refresh(assessment)
    logger.info("assessment link created", extra={"assessment_id": assessment.id})
    return assessment


def get_by_token(db: Session, token: Optional[str]) -> Assessment:
    if not token:
        raise BadRequest("Missing token")
    assessment = db.query(Assessment).filter(Assessment.token == token).one_or_none()
    if assessment is None:
        raise NotFound(INVALID_LINK)
    return assessment


def get_by_id(db: Session, assessment_id: str) -> Assessment:
    assessment = db.get(Assessment, assessment_id)
    if assessment is None:
        raise NotFound("Assessment not found")
    return assessment


def ensure_editable(assessment: Assessment) -> None:
    if assessment.is_submitted:
        raise Conflict(ALREADY_SUBMITTED)


def save_answers(
    db: Session,
    token: str,
    answers_patch: Optional[dict],
    current_step: Optional[int] = None,
) -> Assessment:
    """
    Merge a partial answers document into the stored one and optionally move
    the persisted wizard step. Rejected without any write once submitted.
    """
    if answers_patch is None and current_step is None:
        raise BadRequest("Missing answersPatch")
    if answers_patch is not None and not isinstance(answers_patch, dict):
        raise BadRequest("answersPatch must be an object")

    assessment = get_by_token(db, token)
    ensure_editable(assessment)

    merged = deep_merge(assessment.answers or {}, answers_patch or {})
    if current_step is not None:
        try:
            assessment.current_step = check_step_change(merged, assessment.current_step or 1, current_step)
        except StepGateError as exc:
            raise Unprocessable(exc.message) from exc

    assessment.answers = merged
    db.add(assessment)
    db.commit()
    db.refresh(assessment)
    return assessment


def submit(db: Session, token: str) -> Assessment:
    assessment = get_by_token(db, token)
    if assessment.is_submitted:
        return assessment
    if not all_videos_uploaded(assessment.answers or {}):
        raise Unprocessable("All video answers must be uploaded before submitting")

    assessment.status = AssessmentStatus.submitted
    assessment.submitted_at = utcnow()
    db.add(assessment)
    db.commit()
    db.refresh(assessment)
    logger.info("assessment submitted", extra={"assessment_id": assessment.id})
    return assessment


def list_recent(db: Session, limit: int = LIST_LIMIT) -> List[Assessment]:
    return (
        db.query(Assessment)
        .order_by(Assessment.updated_at.desc())
        .limit(limit)
        .all()
    )


def recording_paths(assessment: Assessment) -> List[str]:
    recordings = ((assessment.answers or {}).get("video") or {}).get("recordings") or []
    return [r["storagePath"] for r in recordings if isinstance(r, dict) and r.get("storagePath")]


def delete_assessments(db: Session, ids: Any) -> int:
    if not isinstance(ids, (list, tuple)):
        raise BadRequest("Invalid request: ids array required")
    ids = [str(i) for i in ids if i]
    if not ids:
        raise BadRequest("Invalid request: ids array required")

    items = db.query(Assessment).filter(Assessment.id.in_(ids)).all()
    paths = [p for item in items for p in recording_paths(item)]
    if paths:
        # storage failures are logged and never block the row delete
        _, failed = delete_objects(paths)
        if failed:
            logger.error("storage deletion failed for %d video(s)", len(failed))

    for item in items:
        db.delete(item)
    db.commit()
    return len(ids)


def save_video_behavior(db: Session, assessment_id: str, behavior: dict) -> Assessment:
    assessment = get_by_id(db, assessment_id)
    assessment.video_behavior = behavior
    db.add(assessment)
    db.commit()
    db.refresh(assessment)
    return assessment
