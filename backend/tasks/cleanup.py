# backend/tasks/cleanup.py
import logging

from celery_app import app
from db.session import SessionLocal
from services import video_access

log = logging.getLogger(__name__)


@app.task(name="tasks.cleanup.cleanup_expired_videos")
def cleanup_expired_videos() -> dict:
    """Beat-scheduled sweep of expired video access tokens and their videos."""
    db = SessionLocal()
    try:
        summary = video_access.cleanup_expired(db)
    finally:
        db.close()
    log.info("cleanup sweep finished: %s", summary.get("message"))
    return summary
