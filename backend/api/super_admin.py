# backend/api/super_admin.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_db, require_super_admin
from db import models as db_models
from schemas.admin import TrainerCreateIn, TrainerPatchIn
from schemas.assessment import DashboardItemOut
from services import auth as auth_service

router = APIRouter(prefix="/api/super-admin", tags=["super-admin"])


@router.get("/dashboard")
def dashboard(
    sortBy: str = Query("recent"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    _admin: db_models.Admin = Depends(require_super_admin),
):
    data = auth_service.dashboard(db, sort_by=sortBy, limit=limit, offset=offset)
    data["assessments"] = [
        DashboardItemOut.model_validate(a)
        .model_copy(update={"score": auth_service.overall_score(a)})
        .model_dump(mode="json")
        for a in data["assessments"]
    ]
    return data


@router.get("/trainers")
def list_trainers(db: Session = Depends(get_db), _admin: db_models.Admin = Depends(require_super_admin)):
    return {"trainers": [auth_service.trainer_public(t) for t in auth_service.list_trainers(db)]}


@router.post("/trainers", status_code=201)
def create_trainer(
    payload: TrainerCreateIn,
    db: Session = Depends(get_db),
    admin: db_models.Admin = Depends(require_super_admin),
):
    trainer = auth_service.create_trainer(
        db,
        email=payload.email,
        name=payload.name,
        password=payload.password,
        created_by=admin.id,
    )
    return {"trainer": auth_service.trainer_public(trainer)}


@router.patch("/trainers/{trainer_id}")
def update_trainer(
    trainer_id: str,
    payload: TrainerPatchIn,
    db: Session = Depends(get_db),
    _admin: db_models.Admin = Depends(require_super_admin),
):
    auth_service.set_trainer_active(db, trainer_id, payload.is_active)
    return {"success": True}


@router.delete("/trainers/{trainer_id}")
def deactivate_trainer(
    trainer_id: str,
    db: Session = Depends(get_db),
    _admin: db_models.Admin = Depends(require_super_admin),
):
    """Soft delete: the account stays, its sessions do not."""
    auth_service.set_trainer_active(db, trainer_id, False)
    return {"success": True}
