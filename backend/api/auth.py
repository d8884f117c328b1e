# api/auth.py
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from api import deps
from core.config import settings
from db import models as db_models
from schemas.admin import LoginIn, StaffOut
from services import auth as auth_service


router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
def login(payload: LoginIn, response: Response, db: Session = Depends(deps.get_db)) -> Any:
    """
    Email + password login for trainers and super admins.
    Sets the httpOnly session cookie; the token itself is never returned.
    """
    if not payload.email or not payload.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required",
        )

    admin = auth_service.authenticate(db, payload.email, payload.password)
    if admin is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    token = auth_service.create_session(db, admin)
    deps.set_auth_cookie(
        response,
        deps.SESSION_COOKIE,
        token,
        settings.session_duration_days * 24 * 60 * 60,
    )
    return {"success": True, "admin": StaffOut(**auth_service.admin_public(admin))}


@router.post("/logout")
def logout(request: Request, response: Response, db: Session = Depends(deps.get_db)):
    auth_service.delete_session(db, request.cookies.get(deps.SESSION_COOKIE))
    deps.clear_auth_cookie(response, deps.SESSION_COOKIE)
    return {"success": True}


@router.get("/me")
def read_myself(current: db_models.Admin = Depends(deps.require_session)):
    return {"admin": StaffOut(**auth_service.admin_public(current))}
