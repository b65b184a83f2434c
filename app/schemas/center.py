"""Pydantic schemas for Center CRUD."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from app.schemas.common import Email


class CenterBase(BaseModel):
    description: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    phone: str | None = None
    email: Email | None = None


class CenterCreate(CenterBase):
    name: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v


class CenterUpdate(CenterBase):
    name: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v


class CenterRead(CenterBase):
    id: str
    name: str
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class CenterSummary(BaseModel):
    id: str
    name: str
    city: str | None
    country: str | None
    created_at: datetime | None

    model_config = {"from_attributes": True}
