"""Pydantic schemas for the meal library."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.common import OptionalUrl


class MealCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    instructions: str | None = None
    image_url: OptionalUrl = None
    calories: float | None = Field(default=None, ge=0)
    protein: float | None = Field(default=None, ge=0)
    carbs: float | None = Field(default=None, ge=0)
    fats: float | None = Field(default=None, ge=0)
    fiber: float | None = Field(default=None, ge=0)


class MealUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    instructions: str | None = None
    image_url: OptionalUrl = None
    calories: float | None = Field(default=None, ge=0)
    protein: float | None = Field(default=None, ge=0)
    carbs: float | None = Field(default=None, ge=0)
    fats: float | None = Field(default=None, ge=0)
    fiber: float | None = Field(default=None, ge=0)


class MealRead(BaseModel):
    id: str
    name: str
    description: str | None
    instructions: str | None
    image_url: str | None
    calories: float | None
    protein: float | None
    carbs: float | None
    fats: float | None
    fiber: float | None
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class MealImport(BaseModel):
    meals: list[MealCreate] = Field(min_length=1)
