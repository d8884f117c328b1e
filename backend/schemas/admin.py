# backend/schemas/admin.py
from typing import Any, Optional

from pydantic import BaseModel


class AdminLoginIn(BaseModel):
    password: Optional[str] = None


class CreateLinkIn(BaseModel):
    adminLabel: Optional[str] = None


class CreateLinkOut(BaseModel):
    ok: bool = True
    token: str
    url: str


class DeleteIn(BaseModel):
    ids: Optional[Any] = None


class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class StaffOut(BaseModel):
    id: str
    email: str
    role: str
    name: str


class TrainerCreateIn(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    password: Optional[str] = None


class TrainerPatchIn(BaseModel):
    is_active: Optional[Any] = None
