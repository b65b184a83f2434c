"""
QR access endpoints.

- POST /access/scan: SUPERADMIN or ADMIN_CENTER scanning at its own center.
- GET /access/qr: any active user fetches the payload to render as their QR.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_current_active_user, get_db, require_policy
from app.core.config import settings
from app.core.permissions import ensure_center_access
from app.models.user import User
from app.schemas.access import (QRPayloadResponse, ScanRequest, ScanResponse,
                                ScanUser)
from app.services.access import build_qr_payload, process_scan

router = APIRouter(prefix="/access", tags=["access"])


@router.post("/scan", response_model=ScanResponse)
async def scan_qr(
    body: ScanRequest,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("access.scan")),
) -> ScanResponse:
    """Register an entry or exit for the member identified by the scanned QR."""
    ensure_center_access(operator, body.center_id)

    result = await process_scan(db, body.qr_data, body.center_id)

    verb = "Entry" if result.kind == "entry" else "Exit"
    return ScanResponse(
        type=result.kind,
        message=f"{verb} registered for {result.user.name}",
        user=ScanUser.model_validate(result.user),
    )


@router.get("/qr", response_model=QRPayloadResponse)
async def my_qr_payload(
    current_user: User = Depends(get_current_active_user),
) -> QRPayloadResponse:
    """Return a freshly timestamped QR payload for the caller."""
    now = datetime.now(timezone.utc)
    return QRPayloadResponse(
        qr_data=build_qr_payload(current_user, now),
        expires_at=now + timedelta(minutes=settings.QR_VALIDITY_MINUTES),
    )
