# backend/services/video_access.py
"""
One-time, password-protected links to a single recorded answer.

A token is minted per recording by an admin, redeemed at most once by
whoever holds the password, and reaped (row + stored video) after expiry.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from core import security
from core.config import settings
from core.s3_client import StorageError, create_signed_download_url, delete_objects
from core.timeutils import iso, utcnow
from db.models import VideoAccessToken
from services import assessments
from services.errors import BadRequest, Gone, NotFound, ServiceError, Unauthorized

logger = logging.getLogger(__name__)

# link lifetime per second of recorded video
MINUTES_PER_VIDEO_SECOND = 15

MSG_NOT_FOUND = "Invalid or expired link"
MSG_WRONG_PASSWORD = "Incorrect password"
MSG_EXPIRED = "This link has expired"
MSG_USED = "This link has already been used"


def token_lifetime(duration_sec: Optional[float]) -> timedelta:
    return timedelta(minutes=(duration_sec or 0) * MINUTES_PER_VIDEO_SECOND)


def generate_tokens(db: Session, assessment_id: str, now: Optional[datetime] = None) -> List[Dict]:
    assessment = assessments.get_by_id(db, assessment_id)
    now = now or utcnow()
    recordings = ((assessment.answers or {}).get("video") or {}).get("recordings") or []

    tokens = []
    for recording in recordings:
        expires_at = now + token_lifetime(recording.get("durationSec"))
        token = VideoAccessToken(
            assessment_id=assessment.id,
            question_index=recording["questionIndex"],
            storage_path=recording["storagePath"],
            password=security.generate_video_password(),
            expires_at=expires_at,
            is_used=False,
            created_at=now,
        )
        db.add(token)
        tokens.append(token)
    db.commit()

    logger.info("video access tokens generated", extra={"assessment_id": assessment.id, "count": len(tokens)})
    return [
        {
            "questionIndex": t.question_index,
            "tokenId": t.id,
            "password": t.password,
            "expiresAt": iso(t.expires_at),
        }
        for t in tokens
    ]


def redeem(db: Session, token_id: str, password: Optional[str], now: Optional[datetime] = None) -> Dict:
    """
    Checks run in a fixed order and a failed check never consumes the token:
    exists (404) -> password (401) -> not expired (410) -> not used (410).
    """
    if not password:
        raise BadRequest("Password is required")

    token = db.get(VideoAccessToken, token_id)
    if token is None:
        raise NotFound(MSG_NOT_FOUND)
    if token.password != password:
        raise Unauthorized(MSG_WRONG_PASSWORD)

    now = now or utcnow()
    if now > token.expires_at:
        raise Gone(MSG_EXPIRED)
    if token.is_used:
        raise Gone(MSG_USED)

    try:
        video_url = create_signed_download_url(token.storage_path, settings.video_access_url_expires)
    except StorageError as exc:
        logger.exception("signing video url failed")
        raise ServiceError("Failed to generate video URL") from exc

    # check-and-set in one statement: two concurrent redeemers cannot both win
    claimed = (
        db.query(VideoAccessToken)
        .filter(VideoAccessToken.id == token.id, VideoAccessToken.is_used.is_(False))
        .update({"is_used": True, "accessed_at": now}, synchronize_session=False)
    )
    db.commit()
    if claimed != 1:
        raise Gone(MSG_USED)

    return {"videoUrl": video_url, "questionIndex": token.question_index}


def _expired(db: Session, now: datetime):
    return db.query(VideoAccessToken).filter(VideoAccessToken.expires_at < now)


def preview_expired(db: Session, now: Optional[datetime] = None) -> Dict:
    now = now or utcnow()
    rows = _expired(db, now).all()
    return {
        "expiredTokenCount": len(rows),
        "uniqueVideosToDelete": len({r.storage_path for r in rows}),
        "tokens": [{"storage_path": r.storage_path, "expires_at": iso(r.expires_at)} for r in rows],
    }


def cleanup_expired(db: Session, now: Optional[datetime] = None) -> Dict:
    """Delete stored videos behind expired tokens (once per path), then the tokens."""
    now = now or utcnow()
    rows = _expired(db, now).all()
    if not rows:
        return {"message": "No expired videos to clean up", "deleted": 0}

    unique_paths = list(dict.fromkeys(r.storage_path for r in rows))
    deleted_paths, failed_paths = delete_objects(unique_paths)

    _expired(db, now).delete(synchronize_session=False)
    db.commit()

    logger.info(
        "expired video cleanup",
        extra={"expired_tokens": len(rows), "videos_deleted": len(deleted_paths), "videos_failed": len(failed_paths)},
    )
    return {
        "message": "Cleanup completed",
        "expiredTokens": len(rows),
        "videosDeleted": len(deleted_paths),
        "videosFailed": len(failed_paths),
        "deletedPaths": deleted_paths,
        "failedPaths": failed_paths,
    }
