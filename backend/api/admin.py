# backend/api/admin.py
import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from api.deps import ADMIN_COOKIE, get_db, require_staff, set_auth_cookie
from core import security
from core.config import settings
from core.s3_client import StorageError, create_signed_download_url
from db import models as db_models
from schemas.admin import AdminLoginIn, CreateLinkIn, CreateLinkOut, DeleteIn
from schemas.assessment import AssessmentOut, SubmissionDetailOut, VideoLink
from services import assessments, scoring, video_access

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger(__name__)


@router.post("/login")
def admin_login(payload: AdminLoginIn, response: Response):
    """Shared admin password -> signed flag cookie (no identity attached)."""
    if not security.check_admin_password(payload.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    set_auth_cookie(
        response,
        ADMIN_COOKIE,
        security.create_admin_flag_token(),
        settings.admin_cookie_max_age,
    )
    return {"ok": True}


@router.post("/create-link", response_model=CreateLinkOut)
def create_link(
    payload: CreateLinkIn,
    db: Session = Depends(get_db),
    staff: Optional[db_models.Admin] = Depends(require_staff),
):
    assessment = assessments.create_assessment(
        db,
        admin_label=payload.adminLabel,
        created_by=staff.id if staff is not None else None,
    )
    base = settings.public_base_url.rstrip("/")
    return CreateLinkOut(token=assessment.token, url=f"{base}/apply/{assessment.token}")


@router.get("/submissions")
def list_submissions(db: Session = Depends(get_db), _staff=Depends(require_staff)):
    items = assessments.list_recent(db)
    return {"items": [AssessmentOut.model_validate(a).model_dump(mode="json") for a in items]}


@router.get("/submissions/{assessment_id}", response_model=SubmissionDetailOut)
def submission_detail(assessment_id: str, db: Session = Depends(get_db), _staff=Depends(require_staff)):
    assessment = assessments.get_by_id(db, assessment_id)
    recordings = ((assessment.answers or {}).get("video") or {}).get("recordings") or []

    links = []
    for r in recordings:
        try:
            url = create_signed_download_url(r["storagePath"], settings.admin_video_url_expires)
        except (StorageError, KeyError) as e:
            # one unsignable recording should not hide the others
            logger.warning("skipping video link for %s: %s", assessment.id, e)
            continue
        links.append(VideoLink(questionIndex=r["questionIndex"], url=url))

    return SubmissionDetailOut(item=AssessmentOut.model_validate(assessment), videoLinks=links)


@router.get("/download/{assessment_id}")
def download(assessment_id: str, db: Session = Depends(get_db), _staff=Depends(require_staff)):
    assessment = assessments.get_by_id(db, assessment_id)
    body = json.dumps(AssessmentOut.model_validate(assessment).model_dump(mode="json"), indent=2)
    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="assessment-{assessment.id}.json"'},
    )


@router.post("/delete")
def delete(payload: DeleteIn, db: Session = Depends(get_db), _staff=Depends(require_staff)):
    deleted = assessments.delete_assessments(db, payload.ids)
    return {"success": True, "deleted": deleted}


@router.post("/run-ai-score/{assessment_id}")
def run_ai_score(assessment_id: str, db: Session = Depends(get_db), _staff=Depends(require_staff)):
    scoring.run_ai_score(db, assessment_id)
    return {"ok": True}


@router.post("/save-video-behavior/{assessment_id}")
def save_video_behavior(
    assessment_id: str,
    behavior: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    _staff=Depends(require_staff),
):
    assessments.save_video_behavior(db, assessment_id, behavior)
    return {"ok": True}


@router.post("/video-tokens/{assessment_id}")
def generate_video_tokens(assessment_id: str, db: Session = Depends(get_db), _staff=Depends(require_staff)):
    return {"tokens": video_access.generate_tokens(db, assessment_id)}


@router.get("/cleanup-expired-videos")
def preview_cleanup(db: Session = Depends(get_db), _staff=Depends(require_staff)):
    return video_access.preview_expired(db)


@router.post("/cleanup-expired-videos")
def run_cleanup(db: Session = Depends(get_db), _staff=Depends(require_staff)):
    return video_access.cleanup_expired(db)
