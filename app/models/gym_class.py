"""
Gym class model and the user enrollment association table.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_id

class_enrollments = Table(
    "class_enrollments",
    Base.metadata,
    Column("user_id", String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("class_id", String(32), ForeignKey("gym_classes.id", ondelete="CASCADE"), primary_key=True),
)


class GymClass(Base):
    __tablename__ = "gym_classes"

    id: str = Column(String(32), primary_key=True, default=generate_id)  # type: ignore[assignment]
    name: str = Column(String(200), unique=True, nullable=False)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    members = relationship(
        "User",
        secondary=class_enrollments,
        back_populates="classes",
        lazy="raise",
        passive_deletes=True,
    )
