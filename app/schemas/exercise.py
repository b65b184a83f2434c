"""Pydantic schemas for the exercise library."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.machine import MachineType
from app.schemas.common import OptionalUrl


class ExerciseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    instructions: str | None = None
    image_url: OptionalUrl = None
    video_url: OptionalUrl = None
    machine_type: MachineType | None = None


class ExerciseUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    instructions: str | None = None
    image_url: OptionalUrl = None
    video_url: OptionalUrl = None
    machine_type: MachineType | None = None


class ExerciseRead(BaseModel):
    id: str
    name: str
    description: str | None
    instructions: str | None
    image_url: str | None
    video_url: str | None
    machine_type: MachineType | None
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class ExerciseImport(BaseModel):
    exercises: list[ExerciseCreate] = Field(min_length=1)


class ImportResult(BaseModel):
    """Outcome of a bulk import. Names already in the library are skipped."""

    success: bool = True
    created: int
    skipped: int
