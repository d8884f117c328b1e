# backend/api/application.py
"""Candidate-facing endpoints. The shareable token in the body is the only credential."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.deps import get_db
from schemas.assessment import AssessmentOut, LogIn, SaveIn, TokenIn
from services import assessments, proctoring

router = APIRouter(prefix="/api/application", tags=["application"])


@router.post("/load")
def load(payload: TokenIn, db: Session = Depends(get_db)):
    assessment = assessments.get_by_token(db, payload.token)
    return {"ok": True, "assessment": AssessmentOut.model_validate(assessment).model_dump(mode="json")}


@router.post("/save")
def save(payload: SaveIn, db: Session = Depends(get_db)):
    assessment = assessments.save_answers(
        db,
        payload.token,
        payload.answersPatch,
        current_step=payload.currentStep,
    )
    return {"ok": True, "currentStep": assessment.current_step}


@router.post("/submit")
def submit(payload: TokenIn, db: Session = Depends(get_db)):
    assessments.submit(db, payload.token)
    return {"ok": True}


@router.post("/log")
def log(payload: LogIn, db: Session = Depends(get_db)):
    accepted = proctoring.log_events(db, payload.token, payload.events)
    return {"ok": True, "accepted": accepted}
