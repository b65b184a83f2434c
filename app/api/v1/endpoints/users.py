"""
User management and self-service profile endpoints.

- /users/me/* : any active user, acting on their own account.
- /users and /users/{id} : SUPERADMIN anywhere. ADMIN_CENTER only for
  non-admin users of its own center: reads and deletes cover users present
  there or favoring it, edits only users assigned (favoring) it.

Presence (``center_id``) is never writable here; only the access engine
moves it.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.v1.deps import get_current_active_user, get_db, require_policy
from app.core.exceptions import (AuthorizationError, ConflictError,
                                 NotFoundError, ValidationError)
from app.core.permissions import ensure_center_access
from app.core.security import get_password_hash, verify_password
from app.models.center import Center
from app.models.gym_class import GymClass
from app.models.notification import NotificationType
from app.models.user import Role, User, UserStatus
from app.schemas.common import MessageResponse
from app.schemas.gym_class import GymClassRead
from app.schemas.user import (FavoriteCenterUpdate, PasswordChange,
                              ProfileUpdate, UserCreate, UserRead, UserUpdate)
from app.services.notifications import notify

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


# ── Helpers ─────────────────────────────────────────────────────────
async def _get_user_or_404(db: AsyncSession, user_id: str) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


async def _ensure_center_exists(db: AsyncSession, center_id: str) -> None:
    result = await db.execute(select(Center.id).where(Center.id == center_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Center not found")


async def _ensure_email_free(db: AsyncSession, email: str, exclude_id: str | None = None) -> None:
    query = select(User.id).where(User.email == email)
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    result = await db.execute(query)
    if result.scalar_one_or_none() is not None:
        raise ConflictError("Email already in use")


def _scope_center(operator: User, target: User) -> str | None:
    """Center a target user is judged against when *operator* manages it."""
    managed = operator.managed_center_id
    if managed is not None and managed in (target.center_id, target.favorite_center_id):
        return managed
    return target.favorite_center_id or target.center_id


def _ensure_can_administer(operator: User, target: User, center_id: str | None) -> None:
    """Center admins manage their own center's members and staff, never admins."""
    if (
        operator.role != Role.SUPERADMIN
        and target.id != operator.id
        and target.role in (Role.SUPERADMIN, Role.ADMIN_CENTER)
    ):
        raise AuthorizationError("You cannot manage administrator accounts")
    ensure_center_access(operator, center_id)


# ── Self-service ────────────────────────────────────────────────────
@router.patch("/me", response_model=UserRead)
async def update_profile(
    body: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> User:
    """Update the caller's own name and/or email."""
    data = body.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in data:
        await _ensure_email_free(db, data["email"], exclude_id=current_user.id)

    for field, value in data.items():
        setattr(current_user, field, value)

    await db.commit()
    await db.refresh(current_user)
    return current_user


@router.patch("/me/password", response_model=MessageResponse)
async def change_password(
    body: PasswordChange,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    if not verify_password(body.current_password, current_user.hashed_password):
        raise ValidationError("Current password is incorrect")

    current_user.hashed_password = get_password_hash(body.new_password)
    await db.commit()
    logger.info("Password changed for user %s", current_user.id)
    return MessageResponse(message="Password updated")


@router.patch("/me/favorite-center", response_model=UserRead)
async def set_favorite_center(
    body: FavoriteCenterUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> User:
    """Set or clear the caller's favorite center. Presence is unaffected."""
    if body.center_id is not None:
        await _ensure_center_exists(db, body.center_id)

    current_user.favorite_center_id = body.center_id
    await db.commit()
    await db.refresh(current_user)
    return current_user


@router.get("/me/classes", response_model=list[GymClassRead])
async def my_classes(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[GymClass]:
    """Classes the caller is enrolled in, by name."""
    result = await db.execute(
        select(User)
        .options(selectinload(User.classes))
        .where(User.id == current_user.id)
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one()
    return sorted(user.classes, key=lambda c: c.name)


# ── Administration ──────────────────────────────────────────────────
@router.get("", response_model=list[UserRead])
async def list_users(
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("users.list")),
) -> list[User]:
    """SUPERADMIN sees everyone; ADMIN_CENTER sees its own center's users."""
    query = select(User).order_by(User.created_at.asc())
    if operator.role != Role.SUPERADMIN:
        managed = operator.managed_center_id
        if managed is None:
            raise AuthorizationError("You have no assigned center")
        query = query.where(
            or_(User.center_id == managed, User.favorite_center_id == managed)
        )
    result = await db.execute(query)
    return list(result.scalars().all())


@router.post("", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("users.create")),
) -> User:
    """Create an account directly (no pending step unless requested)."""
    favorite = body.favorite_center_id
    if operator.role != Role.SUPERADMIN:
        if body.role in (Role.SUPERADMIN, Role.ADMIN_CENTER):
            raise AuthorizationError("You cannot assign this role")
        favorite = favorite or operator.managed_center_id
        ensure_center_access(operator, favorite)

    if favorite is not None:
        await _ensure_center_exists(db, favorite)
    await _ensure_email_free(db, body.email)

    user = User(
        email=body.email,
        name=body.name,
        hashed_password=get_password_hash(body.password),
        role=body.role,
        status=body.status,
        favorite_center_id=favorite,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("User %s created by %s", user.id, operator.id)
    return user


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("users.read")),
) -> User:
    user = await _get_user_or_404(db, user_id)
    _ensure_can_administer(operator, user, _scope_center(operator, user))
    return user


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: str,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("users.update")),
) -> User:
    user = await _get_user_or_404(db, user_id)
    # Edits belong to the center a user is assigned to, not one they are visiting.
    _ensure_can_administer(operator, user, user.favorite_center_id)

    data = body.model_dump(exclude_unset=True)
    if operator.role != Role.SUPERADMIN:
        if data.get("role") in (Role.SUPERADMIN, Role.ADMIN_CENTER):
            raise AuthorizationError("You cannot assign this role")
        if data.get("favorite_center_id") not in (None, operator.managed_center_id):
            raise AuthorizationError("You cannot assign users to other centers")

    for key in ("name", "email", "role", "status"):
        if key in data and data[key] is None:
            raise ValidationError(f"'{key}' cannot be null")
    if data.get("favorite_center_id") is not None:
        await _ensure_center_exists(db, data["favorite_center_id"])
    if "email" in data:
        await _ensure_email_free(db, data["email"], exclude_id=user.id)

    activated = data.get("status") == UserStatus.ACTIVE and user.status != UserStatus.ACTIVE
    for field, value in data.items():
        setattr(user, field, value)
    if activated:
        notify(
            db,
            user.id,
            "Account activated",
            "Your account is active. You can now sign in.",
            type=NotificationType.SUCCESS,
        )

    await db.commit()
    await db.refresh(user)
    if activated:
        logger.info("User %s activated by %s", user.id, operator.id)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("users.delete")),
) -> Response:
    user = await _get_user_or_404(db, user_id)
    if user.id == operator.id:
        raise ValidationError("You cannot delete your own account")
    _ensure_can_administer(operator, user, _scope_center(operator, user))

    await db.delete(user)
    await db.commit()
    logger.info("User %s deleted by %s", user_id, operator.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
