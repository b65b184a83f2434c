"""Pydantic schemas for in-app notifications."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from app.models.notification import NotificationType


class NotificationRead(BaseModel):
    id: str
    title: str
    message: str
    type: NotificationType
    link: str | None
    is_read: bool
    created_at: datetime | None

    model_config = {"from_attributes": True}


class UnreadCount(BaseModel):
    count: int


class MarkedRead(BaseModel):
    success: bool = True
    updated: int
