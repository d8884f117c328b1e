# backend/services/auth.py
"""
Staff accounts (super admins and trainers) and their cookie sessions.

Raw session tokens are handed to the browser once; only their SHA-256
digest is stored, so a leaked sessions table cannot be replayed.
"""
import logging
import re
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from core import security
from core.config import settings
from core.timeutils import iso, utcnow
from db.models import Admin, AdminRole, AdminSession, Assessment, AssessmentStatus
from services.errors import BadRequest, NotFound

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

SORT_MODES = ("recent", "high_score", "low_score", "submitted")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def admin_public(admin: Admin) -> Dict[str, Any]:
    return {
        "id": admin.id,
        "email": admin.email,
        "role": admin.role.value if isinstance(admin.role, AdminRole) else admin.role,
        "name": admin.name,
    }


def trainer_public(admin: Admin) -> Dict[str, Any]:
    out = admin_public(admin)
    out.update({
        "is_active": admin.is_active,
        "created_at": iso(admin.created_at),
        "created_by": admin.created_by,
    })
    return out


# ---------------------------
# Authentication / sessions
# ---------------------------

def authenticate(db: Session, email: str, password: str) -> Optional[Admin]:
    admin = db.query(Admin).filter(Admin.email == normalize_email(email)).one_or_none()
    if admin is None or not admin.is_active:
        return None
    if not security.verify_password(password, admin.password_hash):
        return None
    return admin


def create_session(db: Session, admin: Admin, now: Optional[datetime] = None) -> str:
    """Persist a new session and return the raw token for the cookie."""
    now = now or utcnow()
    token = security.generate_session_token()
    db.add(AdminSession(
        admin_id=admin.id,
        token_hash=security.hash_session_token(token),
        expires_at=now + timedelta(days=settings.session_duration_days),
        created_at=now,
    ))
    db.commit()
    return token


def get_session_admin(db: Session, token: Optional[str], now: Optional[datetime] = None) -> Optional[Admin]:
    if not token:
        return None
    now = now or utcnow()
    session = (
        db.query(AdminSession)
        .filter(
            AdminSession.token_hash == security.hash_session_token(token),
            AdminSession.expires_at > now,
        )
        .one_or_none()
    )
    if session is None:
        return None

    admin = session.admin
    if admin is None or not admin.is_active:
        db.delete(session)
        db.commit()
        return None
    return admin


def delete_session(db: Session, token: Optional[str]) -> None:
    if not token:
        return
    (
        db.query(AdminSession)
        .filter(AdminSession.token_hash == security.hash_session_token(token))
        .delete(synchronize_session=False)
    )
    db.commit()


def _delete_sessions_for(db: Session, admin_id: str) -> None:
    db.query(AdminSession).filter(AdminSession.admin_id == admin_id).delete(synchronize_session=False)


# ---------------------------
# Trainer management
# ---------------------------

def list_trainers(db: Session) -> List[Admin]:
    return (
        db.query(Admin)
        .filter(Admin.role == AdminRole.trainer)
        .order_by(Admin.created_at.desc())
        .all()
    )


def create_trainer(db: Session, *, email: str, name: str, password: str, created_by: Optional[str]) -> Admin:
    if not email or not name or not password:
        raise BadRequest("Email, name, and password are required")
    if not EMAIL_RE.match(email):
        raise BadRequest("Invalid email format")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise BadRequest(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    email = normalize_email(email)
    if db.query(Admin.id).filter(Admin.email == email).first() is not None:
        raise BadRequest("Email already exists")

    trainer = Admin(
        email=email,
        name=name,
        password_hash=security.get_password_hash(password),
        role=AdminRole.trainer,
        is_active=True,
        created_by=created_by,
    )
    db.add(trainer)
    db.commit()
    db.refresh(trainer)
    logger.info("trainer created", extra={"trainer_id": trainer.id})
    return trainer


def set_trainer_active(db: Session, trainer_id: str, is_active: Any) -> None:
    """Super admins are never touched; deactivation also ends every session."""
    if not isinstance(is_active, bool):
        raise BadRequest("is_active must be a boolean")

    trainer = (
        db.query(Admin)
        .filter(Admin.id == trainer_id, Admin.role == AdminRole.trainer)
        .one_or_none()
    )
    if trainer is None:
        raise NotFound("Trainer not found")

    trainer.is_active = is_active
    if not is_active:
        _delete_sessions_for(db, trainer.id)
    db.commit()


def ensure_super_admin(db: Session, *, email: str, name: str, password: str) -> Admin:
    """Create the super admin, or reset password/role/activation if the email exists."""
    email = normalize_email(email)
    admin = db.query(Admin).filter(Admin.email == email).one_or_none()
    if admin is None:
        admin = Admin(email=email, name=name)
        db.add(admin)
    admin.name = name or admin.name
    admin.role = AdminRole.super_admin
    admin.is_active = True
    admin.password_hash = security.get_password_hash(password)
    db.commit()
    db.refresh(admin)
    return admin


# ---------------------------
# Super admin dashboard
# ---------------------------

def overall_score(assessment: Assessment) -> float:
    overall = (assessment.ai_evaluations or {}).get("overall") or {}
    return overall.get("overallScore0to100") or 0


def dashboard(db: Session, sort_by: str = "recent", limit: int = 50, offset: int = 0) -> Dict[str, Any]:
    """
    Score sorts order the requested page in memory: the score lives inside
    the JSON document, so a page is fetched first and then sorted.
    """
    if sort_by not in SORT_MODES:
        sort_by = "recent"
    limit = max(1, limit)
    offset = max(0, offset)

    query = db.query(Assessment)
    if sort_by == "submitted":
        query = query.filter(Assessment.status == AssessmentStatus.submitted).order_by(
            Assessment.submitted_at.desc()
        )
    else:
        query = query.order_by(Assessment.created_at.desc())
    page = query.offset(offset).limit(limit).all()

    if sort_by in ("high_score", "low_score"):
        page.sort(key=overall_score, reverse=sort_by == "high_score")

    every = db.query(Assessment.status, Assessment.ai_evaluations).all()
    stats = {
        "total": len(every),
        "submitted": sum(1 for status, _ in every if status == AssessmentStatus.submitted),
        "in_progress": sum(1 for status, _ in every if status == AssessmentStatus.in_progress),
        "evaluated": sum(1 for _, evals in every if (evals or {}).get("overall")),
    }

    return {
        "assessments": page,
        "stats": stats,
        "pagination": {"limit": limit, "offset": offset, "hasMore": len(page) == limit},
    }
