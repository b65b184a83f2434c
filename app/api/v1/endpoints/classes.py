"""
Gym class endpoints and member enrollment.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.v1.deps import get_current_active_user, get_db, require_policy
from app.core.exceptions import ConflictError, NotFoundError
from app.models.gym_class import GymClass
from app.models.user import User
from app.schemas.gym_class import (EnrollmentResponse, GymClassCreate,
                                   GymClassRead, GymClassUpdate)
from app.schemas.user import UserRead

router = APIRouter(prefix="/classes", tags=["classes"])
logger = logging.getLogger(__name__)


async def _get_class_or_404(db: AsyncSession, class_id: str, with_members: bool = False) -> GymClass:
    query = select(GymClass).where(GymClass.id == class_id)
    if with_members:
        query = query.options(selectinload(GymClass.members))
    result = await db.execute(query)
    gym_class = result.scalar_one_or_none()
    if gym_class is None:
        raise NotFoundError("Class not found")
    return gym_class


async def _load_with_classes(db: AsyncSession, user_id: str) -> User:
    result = await db.execute(
        select(User)
        .options(selectinload(User.classes))
        .where(User.id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: str | None = None) -> None:
    query = select(GymClass.id).where(GymClass.name == name)
    if exclude_id is not None:
        query = query.where(GymClass.id != exclude_id)
    result = await db.execute(query)
    if result.scalar_one_or_none() is not None:
        raise ConflictError("A class with this name already exists")


@router.get("", response_model=list[GymClassRead])
async def list_classes(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[GymClass]:
    result = await db.execute(select(GymClass).order_by(GymClass.name.asc()))
    return list(result.scalars().all())


@router.get("/{class_id}", response_model=GymClassRead)
async def get_class(
    class_id: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> GymClass:
    return await _get_class_or_404(db, class_id)


@router.post("", response_model=GymClassRead, status_code=201)
async def create_class(
    body: GymClassCreate,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("classes.write")),
) -> GymClass:
    await _ensure_name_free(db, body.name)
    gym_class = GymClass(name=body.name, description=body.description)
    db.add(gym_class)
    await db.commit()
    await db.refresh(gym_class)
    logger.info("Class %s created by %s", gym_class.id, operator.id)
    return gym_class


@router.patch("/{class_id}", response_model=GymClassRead)
async def update_class(
    class_id: str,
    body: GymClassUpdate,
    db: AsyncSession = Depends(get_db),
    _operator: User = Depends(require_policy("classes.write")),
) -> GymClass:
    gym_class = await _get_class_or_404(db, class_id)
    data = body.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in data:
        data["name"] = data["name"].strip()
        await _ensure_name_free(db, data["name"], exclude_id=gym_class.id)

    for field, value in data.items():
        setattr(gym_class, field, value)

    await db.commit()
    await db.refresh(gym_class)
    return gym_class


@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_class(
    class_id: str,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("classes.write")),
) -> Response:
    gym_class = await _get_class_or_404(db, class_id)
    await db.delete(gym_class)
    await db.commit()
    logger.info("Class %s deleted by %s", class_id, operator.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{class_id}/users", response_model=list[UserRead])
async def class_members(
    class_id: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[User]:
    gym_class = await _get_class_or_404(db, class_id, with_members=True)
    return sorted(gym_class.members, key=lambda u: u.name)


@router.post("/{class_id}/join", response_model=EnrollmentResponse)
async def join_class(
    class_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> EnrollmentResponse:
    gym_class = await _get_class_or_404(db, class_id)
    user = await _load_with_classes(db, current_user.id)
    if any(c.id == gym_class.id for c in user.classes):
        raise ConflictError("You are already enrolled in this class")

    user.classes.append(gym_class)
    await db.commit()
    await db.refresh(user)
    return EnrollmentResponse(
        message=f"Joined {gym_class.name}", user=UserRead.model_validate(user)
    )


@router.delete("/{class_id}/join", response_model=EnrollmentResponse)
async def leave_class(
    class_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> EnrollmentResponse:
    gym_class = await _get_class_or_404(db, class_id)
    user = await _load_with_classes(db, current_user.id)
    enrolled = next((c for c in user.classes if c.id == gym_class.id), None)
    if enrolled is None:
        raise NotFoundError("You are not enrolled in this class")

    user.classes.remove(enrolled)
    await db.commit()
    await db.refresh(user)
    return EnrollmentResponse(
        message=f"Left {gym_class.name}", user=UserRead.model_validate(user)
    )
