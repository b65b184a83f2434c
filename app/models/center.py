"""
Center model: a physical gym location.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from app.db.base import Base, generate_id


class Center(Base):
    __tablename__ = "centers"

    id: str = Column(String(32), primary_key=True, default=generate_id)  # type: ignore[assignment]
    name: str = Column(String(200), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    address: str | None = Column(String(300), nullable=True)  # type: ignore[assignment]
    city: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    country: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    phone: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    email: str | None = Column(String(320), nullable=True)  # type: ignore[assignment]
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
