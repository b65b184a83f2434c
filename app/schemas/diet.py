"""Pydantic schemas for diets and their meal entries."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.diet import MealType
from app.schemas.common import DayOfWeek, EntityId
from app.schemas.meal import MealRead


class DietCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    # Staff may build a diet for someone else; defaults to the caller.
    user_id: EntityId | None = None


class DietUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None


class DietMealCreate(BaseModel):
    meal_id: EntityId
    day_of_week: DayOfWeek
    meal_type: MealType
    order: int = Field(ge=0)
    quantity: float | None = Field(default=None, gt=0)
    notes: str | None = None


class DietMealUpdate(BaseModel):
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    meal_type: MealType | None = None
    order: int | None = Field(default=None, ge=0)
    quantity: float | None = Field(default=None, gt=0)
    notes: str | None = None


class DietMealRead(BaseModel):
    id: str
    diet_id: str
    meal_id: str
    day_of_week: int
    meal_type: MealType
    order: int
    quantity: float | None
    notes: str | None

    model_config = {"from_attributes": True}


class DietEntryRead(DietMealRead):
    meal: MealRead


class DietRead(BaseModel):
    id: str
    user_id: str
    name: str
    description: str | None
    created_at: datetime | None
    updated_at: datetime | None
    meals: list[DietEntryRead]

    model_config = {"from_attributes": True}


class MealPlacement(BaseModel):
    id: EntityId
    day_of_week: DayOfWeek
    meal_type: MealType
    order: int = Field(ge=0)


class DietReorder(BaseModel):
    meals: list[MealPlacement] = Field(min_length=1)
