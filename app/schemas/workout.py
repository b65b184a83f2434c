"""Pydantic schemas for workouts and their exercise entries."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.common import DayOfWeek, EntityId
from app.schemas.exercise import ExerciseRead


class WorkoutCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    # Staff may build a workout for someone else; defaults to the caller.
    user_id: EntityId | None = None


class WorkoutUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None


class WorkoutExerciseCreate(BaseModel):
    exercise_id: EntityId
    day_of_week: DayOfWeek
    order: int = Field(ge=0)
    sets: int | None = Field(default=None, gt=0)
    reps: int | None = Field(default=None, gt=0)
    weight: float | None = Field(default=None, gt=0)
    duration: int | None = Field(default=None, gt=0)
    rest_seconds: int | None = Field(default=None, ge=0)
    notes: str | None = None


class WorkoutExerciseUpdate(BaseModel):
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    order: int | None = Field(default=None, ge=0)
    sets: int | None = Field(default=None, gt=0)
    reps: int | None = Field(default=None, gt=0)
    weight: float | None = Field(default=None, gt=0)
    duration: int | None = Field(default=None, gt=0)
    rest_seconds: int | None = Field(default=None, ge=0)
    notes: str | None = None


class WorkoutExerciseRead(BaseModel):
    id: str
    workout_id: str
    exercise_id: str
    day_of_week: int
    order: int
    sets: int | None
    reps: int | None
    weight: float | None
    duration: int | None
    rest_seconds: int | None
    notes: str | None

    model_config = {"from_attributes": True}


class WorkoutEntryRead(WorkoutExerciseRead):
    exercise: ExerciseRead


class WorkoutRead(BaseModel):
    id: str
    user_id: str
    name: str
    description: str | None
    created_at: datetime | None
    updated_at: datetime | None
    exercises: list[WorkoutEntryRead]

    model_config = {"from_attributes": True}


class ExercisePlacement(BaseModel):
    id: EntityId
    day_of_week: DayOfWeek
    order: int = Field(ge=0)


class WorkoutReorder(BaseModel):
    exercises: list[ExercisePlacement] = Field(min_length=1)
