# backend/api/video_access.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.deps import get_db
from schemas.assessment import RedeemIn
from services import video_access

router = APIRouter(prefix="/api/video-access", tags=["video-access"])


@router.post("/{token_id}")
def redeem(token_id: str, payload: RedeemIn, db: Session = Depends(get_db)):
    return video_access.redeem(db, token_id, payload.password)
