# backend/schemas/assessment.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from core.timeutils import iso
from db.models import AssessmentStatus


# ---------- candidate requests ----------
class TokenIn(BaseModel):
    token: Optional[str] = None


class SaveIn(TokenIn):
    # Any on purpose: a non-object patch is a 400 from the service, not a 422
    answersPatch: Optional[Any] = None
    currentStep: Optional[int] = None


class LogIn(TokenIn):
    events: Optional[Any] = None


class UploadUrlIn(TokenIn):
    questionIndex: Optional[Any] = None


class CommitIn(TokenIn):
    questionIndex: Optional[Any] = None
    storagePath: Optional[str] = None
    durationSec: Optional[float] = None
    sizeBytes: Optional[int] = None
    createdAtIso: Optional[str] = None


class RedeemIn(BaseModel):
    password: Optional[str] = None


# ---------- responses ----------
class AssessmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    token: str
    admin_label: Optional[str] = None
    status: AssessmentStatus
    current_step: int
    answers: Dict[str, Any] = Field(default_factory=dict)
    proctoring: Dict[str, Any] = Field(default_factory=dict)
    ai_evaluations: Dict[str, Any] = Field(default_factory=dict)
    video_behavior: Optional[Dict[str, Any]] = None
    created_by_trainer_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None

    @field_serializer("created_at", "updated_at", "submitted_at")
    def _dt(self, value: Optional[datetime]) -> Optional[str]:
        return iso(value)


class CreatorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str


class DashboardItemOut(AssessmentOut):
    creator: Optional[CreatorOut] = None
    score: float = 0


class VideoLink(BaseModel):
    questionIndex: int
    url: str


class SubmissionDetailOut(BaseModel):
    item: AssessmentOut
    videoLinks: List[VideoLink] = Field(default_factory=list)
