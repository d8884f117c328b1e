# backend/api/roles.py
from fastapi import APIRouter

from core.catalog import ROLE_MARKET, VIDEO_MAX_SECONDS, VIDEO_QUESTIONS, VIDEO_THINK_SECONDS

router = APIRouter(prefix="/api/roles", tags=["roles"])


@router.get("")
def list_roles():
    return {
        "roles": ROLE_MARKET,
        "videoQuestions": VIDEO_QUESTIONS,
        "videoThinkSeconds": VIDEO_THINK_SECONDS,
        "videoMaxSeconds": VIDEO_MAX_SECONDS,
    }
