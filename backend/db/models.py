# db/models.py
import enum
import uuid

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Boolean,
    JSON,
)
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from core.timeutils import utcnow
from .session import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _empty_proctoring() -> dict:
    return {"counts": {}, "events": []}


class AssessmentStatus(str, enum.Enum):
    in_progress = "in_progress"
    submitted = "submitted"


class AdminRole(str, enum.Enum):
    super_admin = "super_admin"
    trainer = "trainer"


class Admin(Base):
    __tablename__ = "admins"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(SAEnum(AdminRole, native_enum=False), nullable=False, default=AdminRole.trainer)
    password_hash = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(String(36), ForeignKey("admins.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    sessions = relationship("AdminSession", back_populates="admin", cascade="all, delete-orphan")


class AdminSession(Base):
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=_uuid)
    admin_id = Column(String(36), ForeignKey("admins.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(64), unique=True, index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    admin = relationship("Admin", back_populates="sessions")


class Assessment(Base):
    __tablename__ = "candidate_assessments"

    id = Column(String(36), primary_key=True, default=_uuid)
    token = Column(String(64), unique=True, index=True, nullable=False)
    admin_label = Column(String(255), nullable=True)
    status = Column(
        SAEnum(AssessmentStatus, native_enum=False),
        nullable=False,
        default=AssessmentStatus.in_progress,
    )
    current_step = Column(Integer, nullable=False, default=1)

    # JSON documents are always replaced wholesale on write (never mutated in place)
    answers = Column(JSON, nullable=False, default=dict)
    proctoring = Column(JSON, nullable=False, default=_empty_proctoring)
    ai_evaluations = Column(JSON, nullable=False, default=dict)
    video_behavior = Column(JSON, nullable=True)

    created_by_trainer_id = Column(String(36), ForeignKey("admins.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    submitted_at = Column(DateTime, nullable=True)

    creator = relationship("Admin", foreign_keys=[created_by_trainer_id])
    video_tokens = relationship(
        "VideoAccessToken",
        back_populates="assessment",
        cascade="all, delete-orphan",
    )

    @property
    def is_submitted(self) -> bool:
        return self.status == AssessmentStatus.submitted


class VideoAccessToken(Base):
    __tablename__ = "video_access_tokens"

    id = Column(String(36), primary_key=True, default=_uuid)
    assessment_id = Column(
        String(36),
        ForeignKey("candidate_assessments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_index = Column(Integer, nullable=False)
    storage_path = Column(String(1024), nullable=False)
    password = Column(String(16), nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    is_used = Column(Boolean, default=False, nullable=False)
    accessed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    assessment = relationship("Assessment", back_populates="video_tokens")
