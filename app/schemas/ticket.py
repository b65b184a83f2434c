"""Pydantic schemas for contact tickets."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from app.models.ticket import TicketStatus
from app.schemas.common import Email, EntityId, PersonName


class TicketCreate(BaseModel):
    name: PersonName
    email: Email
    phone: str | None = None
    center_id: EntityId
    subject: str
    description: str

    @field_validator("subject")
    @classmethod
    def _subject(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3 or len(v) > 200:
            raise ValueError("Subject must be 3-200 characters")
        return v

    @field_validator("description")
    @classmethod
    def _description(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 10 or len(v) > 5000:
            raise ValueError("Description must be 10-5000 characters")
        return v


class TicketUpdate(BaseModel):
    status: TicketStatus | None = None


class TicketRead(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None
    subject: str
    description: str
    status: TicketStatus
    center_id: str
    created_at: datetime | None
    updated_at: datetime | None
    completed_at: datetime | None

    model_config = {"from_attributes": True}
