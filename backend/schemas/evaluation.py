# backend/schemas/evaluation.py
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class SectionScores(BaseModel):
    honestySignal0to10: float = Field(..., ge=0, le=10)
    aiTooling0to10: float = Field(..., ge=0, le=10)
    promptEngineering0to10: float = Field(..., ge=0, le=10)
    domainBasics0to10: float = Field(..., ge=0, le=10)
    codingBasics0to10: Optional[float] = Field(default=None, ge=0, le=10)
    communication0to10: Optional[float] = Field(default=None, ge=0, le=10)
    integrityRisk0to10: float = Field(..., ge=0, le=10)


class TrainerSummary(BaseModel):
    knowledgeLevel: str = Field(..., max_length=200)
    availability: str = Field(..., max_length=200)
    bestFit: str = Field(..., max_length=200)
    trainingNeeds: str = Field(..., max_length=200)
    readyToStart: Literal["Yes", "With basic training", "Needs significant training"]


class Evaluation(BaseModel):
    """Shape the scoring model must return; stored as ai_evaluations.overall."""

    overallScore0to100: float = Field(..., ge=0, le=100)
    sectionScores: SectionScores
    answerValidations: Dict[str, bool]
    strengths: List[str] = Field(..., max_length=8)
    risks: List[str] = Field(..., max_length=8)
    recommendedNextSteps: List[str] = Field(..., max_length=8)
    shortSummary: str = Field(..., max_length=600)
    trainerSummary: TrainerSummary
