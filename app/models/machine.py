"""
Machine model: equipment installed at a center.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_id


class MachineType(str, enum.Enum):
    CARDIO = "cardio"
    STRENGTH = "strength"
    FREE_WEIGHT = "free_weight"
    FUNCTIONAL = "functional"
    OTHER = "other"


class MachineStatus(str, enum.Enum):
    OPERATIONAL = "operational"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out_of_service"


class Machine(Base):
    __tablename__ = "machines"

    id: str = Column(String(32), primary_key=True, default=generate_id)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    type: MachineType = Column(  # type: ignore[assignment]
        Enum(MachineType, name="machine_type", native_enum=False, values_callable=lambda e: [m.value for m in e], length=20),
        nullable=False,
    )
    status: MachineStatus = Column(  # type: ignore[assignment]
        Enum(MachineStatus, name="machine_status", native_enum=False, values_callable=lambda e: [m.value for m in e], length=20),
        nullable=False,
        default=MachineStatus.OPERATIONAL,
    )
    center_id: str = Column(  # type: ignore[assignment]
        String(32),
        ForeignKey("centers.id", ondelete="CASCADE"),
        nullable=False,
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

    center = relationship("Center", lazy="raise")
