"""
Meal model: the shared meal library used to build diets.

Nutrition values are per serving; all are optional.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, String, Text

from app.db.base import Base, generate_id


class Meal(Base):
    __tablename__ = "meals"

    id: str = Column(String(32), primary_key=True, default=generate_id)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False, index=True)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    instructions: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    image_url: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    calories: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    protein: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    carbs: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    fats: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    fiber: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
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
