"""
Diet model: a user's weekly meal plan built from library meals.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_id


class MealType(str, enum.Enum):
    BREAKFAST = "breakfast"
    MORNING_SNACK = "morning_snack"
    LUNCH = "lunch"
    AFTERNOON_SNACK = "afternoon_snack"
    DINNER = "dinner"


class Diet(Base):
    __tablename__ = "diets"

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

    meals = relationship(
        "DietMeal",
        back_populates="diet",
        order_by=lambda: (DietMeal.day_of_week, DietMeal.order),
        cascade="all, delete-orphan",
        lazy="raise",
        passive_deletes=True,
    )


class DietMeal(Base):
    __tablename__ = "diet_meals"

    id: str = Column(String(32), primary_key=True, default=generate_id)  # type: ignore[assignment]
    diet_id: str = Column(  # type: ignore[assignment]
        String(32),
        ForeignKey("diets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    meal_id: str = Column(  # type: ignore[assignment]
        String(32),
        ForeignKey("meals.id", ondelete="CASCADE"),
        nullable=False,
    )
    day_of_week: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    meal_type: MealType = Column(  # type: ignore[assignment]
        Enum(MealType, name="meal_type", native_enum=False, values_callable=lambda e: [m.value for m in e], length=20),
        nullable=False,
    )
    order: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]
    quantity: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    notes: str | None = Column(Text, nullable=True)  # type: ignore[assignment]

    diet = relationship("Diet", back_populates="meals", lazy="raise")
    meal = relationship("Meal", lazy="raise")
