"""
Exercise model: the shared exercise library used to build workouts.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, String, Text

from app.db.base import Base, generate_id
from app.models.machine import MachineType


class Exercise(Base):
    __tablename__ = "exercises"

    id: str = Column(String(32), primary_key=True, default=generate_id)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False, index=True)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    instructions: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    image_url: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    video_url: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    # Kind of equipment the exercise is performed on, if any.
    machine_type: MachineType | None = Column(  # type: ignore[assignment]
        Enum(MachineType, name="machine_type", native_enum=False, values_callable=lambda e: [m.value for m in e], length=20),
        nullable=True,
        index=True,
    )
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
