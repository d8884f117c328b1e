# backend/services/scoring.py
import logging
from typing import Any, Dict

from pydantic import ValidationError
from sqlalchemy.orm import Session

from ai.groq_client import GroqError, chat_json
from core.catalog import role_label
from schemas.evaluation import Evaluation
from services import assessments
from services.errors import UpstreamError

logger = logging.getLogger(__name__)


def build_scoring_input(assessment) -> Dict[str, Any]:
    answers = assessment.answers or {}
    role_id = (answers.get("domain") or {}).get("selectedRoleId")
    return {
        "roleLabel": role_label(role_id),
        "answers": answers,
        "proctoring": assessment.proctoring or {},
        "videoBehavior": assessment.video_behavior,
        "outputSchema": Evaluation.model_json_schema(),
    }


def evaluate(payload: Dict[str, Any]) -> Dict[str, Any]:
    try:
        raw = chat_json(payload)
    except GroqError as e:
        raise UpstreamError(str(e)) from e

    try:
        evaluation = Evaluation.model_validate(raw)
    except ValidationError as e:
        logger.warning("scoring output failed validation: %s", e.errors()[:5])
        raise UpstreamError("AI service returned an unexpected format. Please try again.") from e
    return evaluation.model_dump(exclude_none=True)


def run_ai_score(db: Session, assessment_id: str) -> Dict[str, Any]:
    """Score one assessment and store the result under ai_evaluations["overall"]."""
    assessment = assessments.get_by_id(db, assessment_id)
    result = evaluate(build_scoring_input(assessment))

    evaluations = dict(assessment.ai_evaluations or {})
    evaluations["overall"] = result
    assessment.ai_evaluations = evaluations
    db.add(assessment)
    db.commit()

    logger.info(
        "assessment scored",
        extra={"assessment_id": assessment.id, "overall": result.get("overallScore0to100")},
    )
    return result
