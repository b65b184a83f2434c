"""Pydantic schemas for gym classes."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from app.schemas.user import UserRead


class GymClassCreate(BaseModel):
    name: str
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v


class GymClassUpdate(BaseModel):
    name: str | None = None
    description: str | None = None


class GymClassRead(BaseModel):
    id: str
    name: str
    description: str | None
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class EnrollmentResponse(BaseModel):
    success: bool = True
    message: str
    user: UserRead
