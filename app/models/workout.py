"""
Workout model: a user's weekly training plan.

A workout owns its entries; each entry places a library exercise on a day
of the week (0 = Sunday) at a position within that day.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_id


class Workout(Base):
    __tablename__ = "workouts"

    id: str = Column(String(32), primary_key=True, default=generate_id)  # type: ignore[assignment]
    user_id: str = Column(  # type: ignore[assignment]
        String(32),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
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

    exercises = relationship(
        "WorkoutExercise",
        back_populates="workout",
        order_by=lambda: (WorkoutExercise.day_of_week, WorkoutExercise.order),
        cascade="all, delete-orphan",
        lazy="raise",
        passive_deletes=True,
    )


class WorkoutExercise(Base):
    __tablename__ = "workout_exercises"

    id: str = Column(String(32), primary_key=True, default=generate_id)  # type: ignore[assignment]
    workout_id: str = Column(  # type: ignore[assignment]
        String(32),
        ForeignKey("workouts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    exercise_id: str = Column(  # type: ignore[assignment]
        String(32),
        ForeignKey("exercises.id", ondelete="CASCADE"),
        nullable=False,
    )
    day_of_week: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    order: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]
    sets: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    reps: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    weight: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    # Seconds, for timed exercises.
    duration: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    rest_seconds: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    notes: str | None = Column(Text, nullable=True)  # type: ignore[assignment]

    workout = relationship("Workout", back_populates="exercises", lazy="raise")
    exercise = relationship("Exercise", lazy="raise")
