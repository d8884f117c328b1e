# api/deps.py
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from core import security
from core.config import settings
from db import models as db_models
from db.session import SessionLocal
from services import auth as auth_service

ADMIN_COOKIE = "assessment_admin"
SESSION_COOKIE = "assessment_session"


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def set_auth_cookie(response: Response, name: str, value: str, max_age: int) -> None:
    response.set_cookie(
        name,
        value,
        max_age=max_age,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
        path="/",
    )


def clear_auth_cookie(response: Response, name: str) -> None:
    response.delete_cookie(name, path="/")


def get_session_admin(request: Request, db: Session = Depends(get_db)) -> Optional[db_models.Admin]:
    return auth_service.get_session_admin(db, request.cookies.get(SESSION_COOKIE))


def has_admin_flag(request: Request) -> bool:
    return security.verify_admin_flag_token(request.cookies.get(ADMIN_COOKIE))


def require_session(admin: Optional[db_models.Admin] = Depends(get_session_admin)) -> db_models.Admin:
    if admin is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return admin


def require_staff(
    request: Request,
    admin: Optional[db_models.Admin] = Depends(get_session_admin),
) -> Optional[db_models.Admin]:
    """
    Admin pages accept either the shared-password flag cookie or any active
    staff session. Returns the session admin, or None for flag-cookie access.
    """
    if admin is not None:
        return admin
    if has_admin_flag(request):
        return None
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def require_super_admin(admin: Optional[db_models.Admin] = Depends(get_session_admin)) -> db_models.Admin:
    if admin is None or admin.role != db_models.AdminRole.super_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized: Super admin access required",
        )
    return admin
