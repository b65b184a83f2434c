"""Pydantic schemas for the QR access endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.models.user import Role, UserStatus
from app.schemas.common import Email, EntityId


class QRData(BaseModel):
    """Payload encoded in a member's QR code. Unsigned; only freshness is checked."""

    id: EntityId
    timestamp: datetime
    email: Email | None = None
    name: str | None = None

    @field_validator("timestamp")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class ScanRequest(BaseModel):
    # Scanner clients send camelCase keys.
    qr_data: QRData = Field(alias="qrData")
    center_id: EntityId = Field(alias="centerId")

    model_config = {"populate_by_name": True}


class ScanUser(BaseModel):
    """Scanned member, keyed in camelCase like the rest of the scanner contract."""

    id: str
    email: str
    name: str
    role: Role
    status: UserStatus
    center_id: str | None = Field(alias="centerId")
    favorite_center_id: str | None = Field(alias="favoriteCenterId")
    created_at: datetime | None = Field(alias="createdAt")

    model_config = {"from_attributes": True, "populate_by_name": True}


class ScanResponse(BaseModel):
    success: bool = True
    type: Literal["entry", "exit"]
    message: str
    user: ScanUser


class QRPayloadResponse(BaseModel):
    qr_data: QRData = Field(alias="qrData")
    expires_at: datetime = Field(alias="expiresAt")

    model_config = {"populate_by_name": True}
