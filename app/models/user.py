"""
User model: authentication, role-based access control and physical presence.

``center_id`` is where the user is physically present right now and is only
written by the access engine. ``favorite_center_id`` is a permanent
preference and never participates in presence checks.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_id


class Role(str, enum.Enum):
    SUPERADMIN = "SUPERADMIN"
    ADMIN_CENTER = "ADMIN_CENTER"
    TRAINER = "TRAINER"
    CLEANER = "CLEANER"
    USER = "USER"


class UserStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class User(Base):
    __tablename__ = "users"

    id: str = Column(String(32), primary_key=True, default=generate_id)  # type: ignore[assignment]
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    hashed_password: str = Column(String(128), nullable=False)  # type: ignore[assignment]
    role: Role = Column(  # type: ignore[assignment]
        Enum(Role, name="user_role", native_enum=False, length=20),
        nullable=False,
        default=Role.USER,
    )
    status: UserStatus = Column(  # type: ignore[assignment]
        Enum(UserStatus, name="user_status", native_enum=False, length=20),
        nullable=False,
        default=UserStatus.PENDING,
    )
    center_id: str | None = Column(  # type: ignore[assignment]
        String(32),
        ForeignKey("centers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    favorite_center_id: str | None = Column(  # type: ignore[assignment]
        String(32),
        ForeignKey("centers.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    center = relationship("Center", foreign_keys=[center_id], lazy="raise")
    favorite_center = relationship("Center", foreign_keys=[favorite_center_id], lazy="raise")
    classes = relationship(
        "GymClass",
        secondary="class_enrollments",
        back_populates="members",
        lazy="raise",
        passive_deletes=True,
    )

    @property
    def managed_center_id(self) -> str | None:
        """Center an ADMIN_CENTER account administers (current, else favorite)."""
        return self.center_id or self.favorite_center_id
