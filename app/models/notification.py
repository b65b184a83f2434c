"""
Notification model: in-app messages addressed to a single user.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, String, Text

from app.db.base import Base, generate_id


class NotificationType(str, enum.Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(Base):
    __tablename__ = "notifications"

    id: str = Column(String(32), primary_key=True, default=generate_id)  # type: ignore[assignment]
    user_id: str = Column(  # type: ignore[assignment]
        String(32),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    message: str = Column(Text, nullable=False)  # type: ignore[assignment]
    type: NotificationType = Column(  # type: ignore[assignment]
        Enum(NotificationType, name="notification_type", native_enum=False, values_callable=lambda e: [m.value for m in e], length=20),
        nullable=False,
        default=NotificationType.INFO,
    )
    link: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    is_read: bool = Column(Boolean, nullable=False, default=False)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
