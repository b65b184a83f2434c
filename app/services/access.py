"""
QR access engine: decides entry vs. exit and moves a user's presence.

A user is either ABSENT (``center_id`` is NULL) or PRESENT at exactly one
center. Scanning at the center the user is present at is an exit; any other
scan is an entry, which is refused while the user is present elsewhere.

Presence is only ever written through single conditional UPDATE statements,
so two scans racing for the same user cannot both succeed: the loser sees
zero affected rows, re-reads the row and reports the conflict.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Literal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (AlreadyRegisteredElsewhereError,
                                 CenterNotFoundError, ConflictError,
                                 ExpiredTokenError, NotRegisteredHereError,
                                 UserNotFoundError)
from app.models.center import Center
from app.models.user import User
from app.schemas.access import QRData

logger = logging.getLogger(__name__)

ScanKind = Literal["entry", "exit"]


@dataclass(frozen=True)
class ScanResult:
    kind: ScanKind
    user: User


def is_qr_fresh(timestamp: datetime, now: datetime | None = None) -> bool:
    """True if a QR issued at *timestamp* is still inside the validity window.

    Timestamps further in the future than the allowed clock skew are
    treated as invalid too.
    """
    now = now or datetime.now(timezone.utc)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    age = now - timestamp
    if age < -timedelta(seconds=settings.QR_CLOCK_SKEW_SECONDS):
        return False
    return age < timedelta(minutes=settings.QR_VALIDITY_MINUTES)


def build_qr_payload(user: User, now: datetime | None = None) -> QRData:
    """Return the payload a member's app renders as a QR code."""
    return QRData(
        id=user.id,
        timestamp=now or datetime.now(timezone.utc),
        email=user.email,
        name=user.name,
    )


async def _load_user(db: AsyncSession, user_id: str) -> User | None:
    result = await db.execute(
        select(User)
        .where(User.id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _center_exists(db: AsyncSession, center_id: str) -> bool:
    result = await db.execute(select(Center.id).where(Center.id == center_id))
    return result.scalar_one_or_none() is not None


async def register_entry(db: AsyncSession, user: User, center_id: str) -> User:
    """Mark *user* present at *center_id*.

    *user* is the snapshot the decision was taken on. Re-entering the center
    the user is already at returns the user unchanged.
    """
    if not await _center_exists(db, center_id):
        raise CenterNotFoundError()

    if user.center_id is not None and user.center_id != center_id:
        raise AlreadyRegisteredElsewhereError()
    if user.center_id == center_id:
        return user

    result = await db.execute(
        update(User)
        .where(User.id == user.id, User.center_id.is_(None))
        .values(center_id=center_id)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    fresh = await _load_user(db, user.id)
    if fresh is None:
        raise UserNotFoundError()
    if result.rowcount == 0:
        # Someone else moved this user between our read and our write.
        if fresh.center_id == center_id:
            return fresh
        if fresh.center_id is not None:
            logger.warning(
                "Entry race lost for user %s at center %s (now at %s)",
                user.id, center_id, fresh.center_id,
            )
            raise AlreadyRegisteredElsewhereError()
        raise ConflictError("Presence changed while scanning. Please scan again.")
    return fresh


async def register_exit(db: AsyncSession, user: User, center_id: str) -> User:
    """Clear *user*'s presence at *center_id*."""
    result = await db.execute(
        update(User)
        .where(User.id == user.id, User.center_id == center_id)
        .values(center_id=None)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    fresh = await _load_user(db, user.id)
    if fresh is None:
        raise UserNotFoundError()
    if result.rowcount == 0:
        raise NotRegisteredHereError()
    return fresh


async def process_scan(
    db: AsyncSession,
    qr: QRData,
    center_id: str,
    now: datetime | None = None,
) -> ScanResult:
    """Validate a scanned QR payload and register an entry or an exit."""
    if not is_qr_fresh(qr.timestamp, now):
        logger.info("Rejected expired QR for user %s at center %s", qr.id, center_id)
        raise ExpiredTokenError()

    user = await _load_user(db, qr.id)
    if user is None:
        raise UserNotFoundError()

    if user.center_id == center_id:
        updated = await register_exit(db, user, center_id)
        logger.info("Exit registered for user %s at center %s", user.id, center_id)
        return ScanResult(kind="exit", user=updated)

    updated = await register_entry(db, user, center_id)
    logger.info("Entry registered for user %s at center %s", user.id, center_id)
    return ScanResult(kind="entry", user=updated)
