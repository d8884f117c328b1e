# backend/api/video.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.deps import get_db
from schemas.assessment import CommitIn, UploadUrlIn
from services import video_uploads

router = APIRouter(prefix="/api/video", tags=["video"])


@router.post("/upload-url")
def upload_url(payload: UploadUrlIn, db: Session = Depends(get_db)):
    """
    Signed PUT destination for one answer. The client uploads the webm
    directly to storage, then calls /commit.
    """
    return video_uploads.create_upload_destination(db, payload.token, payload.questionIndex)


@router.post("/commit")
def commit(payload: CommitIn, db: Session = Depends(get_db)):
    video_uploads.commit_recording(
        db,
        payload.token,
        question_index=payload.questionIndex,
        storage_path=payload.storagePath,
        duration_sec=payload.durationSec,
        size_bytes=payload.sizeBytes,
        created_at_iso=payload.createdAtIso,
    )
    return {"ok": True}
