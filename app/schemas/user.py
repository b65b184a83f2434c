"""Pydantic schemas for User CRUD and authentication."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from app.models.user import Role, UserStatus
from app.schemas.common import Email, EntityId, Password, PersonName


class RegisterRequest(BaseModel):
    email: Email
    name: PersonName
    password: Password


class LoginRequest(BaseModel):
    email: Email
    password: str


class UserCreate(BaseModel):
    email: Email
    name: PersonName
    password: Password
    role: Role = Role.USER
    status: UserStatus = UserStatus.ACTIVE
    favorite_center_id: EntityId | None = None


class UserUpdate(BaseModel):
    """Administrative update. Presence (``center_id``) is not updatable here."""

    name: PersonName | None = None
    email: Email | None = None
    role: Role | None = None
    status: UserStatus | None = None
    favorite_center_id: EntityId | None = None


class ProfileUpdate(BaseModel):
    name: PersonName | None = None
    email: Email | None = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: Password


class FavoriteCenterUpdate(BaseModel):
    center_id: EntityId | None


class UserRead(BaseModel):
    id: str
    email: str
    name: str
    role: Role
    status: UserStatus
    center_id: str | None
    favorite_center_id: str | None
    created_at: datetime | None

    model_config = {"from_attributes": True}


class CenterRef(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class MeRead(UserRead):
    center: CenterRef | None = None
    favorite_center: CenterRef | None = None


class AuthResponse(BaseModel):
    user: UserRead
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
