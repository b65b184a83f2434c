"""Pydantic schemas for machines."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from app.models.machine import MachineStatus, MachineType
from app.schemas.common import EntityId


class MachineCreate(BaseModel):
    name: str
    type: MachineType
    status: MachineStatus = MachineStatus.OPERATIONAL
    center_id: EntityId

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v


class MachineUpdate(BaseModel):
    name: str | None = None
    type: MachineType | None = None
    status: MachineStatus | None = None
    center_id: EntityId | None = None


class MachineRead(BaseModel):
    id: str
    name: str
    type: MachineType
    status: MachineStatus
    center_id: str
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}
