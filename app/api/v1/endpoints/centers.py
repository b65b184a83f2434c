"""
Center endpoints.

Listing and reading are open to any authenticated user. Creation and
deletion are SUPERADMIN-only; ADMIN_CENTER may edit its own center.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_current_active_user, get_db, require_policy
from app.core.exceptions import ConflictError, NotFoundError
from app.core.permissions import ensure_center_access
from app.models.center import Center
from app.models.user import User
from app.schemas.center import CenterCreate, CenterRead, CenterSummary, CenterUpdate
from app.schemas.user import UserRead

router = APIRouter(prefix="/centers", tags=["centers"])
logger = logging.getLogger(__name__)


async def _get_center_or_404(db: AsyncSession, center_id: str) -> Center:
    result = await db.execute(select(Center).where(Center.id == center_id))
    center = result.scalar_one_or_none()
    if center is None:
        raise NotFoundError("Center not found")
    return center


async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: str | None = None) -> None:
    query = select(Center.id).where(Center.name == name)
    if exclude_id is not None:
        query = query.where(Center.id != exclude_id)
    result = await db.execute(query)
    if result.scalar_one_or_none() is not None:
        raise ConflictError("A center with this name already exists")


@router.get("", response_model=list[CenterSummary])
async def list_centers(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[Center]:
    result = await db.execute(select(Center).order_by(Center.name.asc()))
    return list(result.scalars().all())


@router.get("/{center_id}", response_model=CenterRead)
async def get_center(
    center_id: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> Center:
    return await _get_center_or_404(db, center_id)


@router.post("", response_model=CenterRead, status_code=201)
async def create_center(
    body: CenterCreate,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("centers.create")),
) -> Center:
    await _ensure_name_free(db, body.name)

    center = Center(**body.model_dump())
    db.add(center)
    await db.commit()
    await db.refresh(center)
    logger.info("Center %s (%s) created by %s", center.id, center.name, operator.id)
    return center


@router.patch("/{center_id}", response_model=CenterRead)
async def update_center(
    center_id: str,
    body: CenterUpdate,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("centers.update")),
) -> Center:
    ensure_center_access(operator, center_id)
    center = await _get_center_or_404(db, center_id)

    data = body.model_dump(exclude_unset=True)
    if data.get("name") is not None:
        await _ensure_name_free(db, data["name"], exclude_id=center.id)
    elif "name" in data:
        data.pop("name")

    for field, value in data.items():
        setattr(center, field, value)

    await db.commit()
    await db.refresh(center)
    return center


@router.delete("/{center_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_center(
    center_id: str,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("centers.delete")),
) -> Response:
    """Delete a center. Users present there become absent."""
    center = await _get_center_or_404(db, center_id)
    await db.delete(center)
    await db.commit()
    logger.info("Center %s deleted by %s", center_id, operator.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{center_id}/users", response_model=list[UserRead])
async def users_in_center(
    center_id: str,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("centers.users")),
) -> list[User]:
    """Users currently present at the center."""
    ensure_center_access(operator, center_id)
    await _get_center_or_404(db, center_id)

    result = await db.execute(
        select(User).where(User.center_id == center_id).order_by(User.name.asc())
    )
    return list(result.scalars().all())
