"""
In-app notifications.

These helpers only add rows to the session; the caller commits them
together with the change that triggered them.
"""

from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notification import Notification, NotificationType
from app.models.user import Role, User


def notify(
    db: AsyncSession,
    user_id: str,
    title: str,
    message: str,
    type: NotificationType = NotificationType.INFO,
    link: str | None = None,
) -> Notification:
    notification = Notification(
        user_id=user_id, title=title, message=message, type=type, link=link
    )
    db.add(notification)
    return notification


async def notify_center_admins(
    db: AsyncSession,
    center_id: str,
    title: str,
    message: str,
    type: NotificationType = NotificationType.WARNING,
    link: str | None = None,
) -> int:
    """Notify every ADMIN_CENTER administering *center_id*. Returns the count."""
    result = await db.execute(
        select(User.id).where(
            User.role == Role.ADMIN_CENTER,
            or_(User.center_id == center_id, User.favorite_center_id == center_id),
        )
    )
    admin_ids = list(result.scalars().all())
    for admin_id in admin_ids:
        notify(db, admin_id, title, message, type=type, link=link)
    return len(admin_ids)
