"""Pydantic schemas for membership plans."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class MembershipPlanCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    price: float = Field(ge=0)
    duration_months: int = Field(ge=1)
    features: list[str] = Field(default_factory=list)
    is_active: bool = True


class MembershipPlanUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    duration_months: int | None = Field(default=None, ge=1)
    features: list[str] | None = None
    is_active: bool | None = None


class MembershipPlanRead(BaseModel):
    id: str
    name: str
    description: str | None
    price: float
    duration_months: int
    features: list[str]
    is_active: bool
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}
