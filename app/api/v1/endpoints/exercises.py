"""
Exercise library endpoints.

Every active user may browse the library; staff curate it and admins can
bulk-import entries.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_current_active_user, get_db, require_policy
from app.core.exceptions import NotFoundError, ValidationError
from app.models.exercise import Exercise
from app.models.machine import MachineType
from app.models.user import User
from app.schemas.exercise import (ExerciseCreate, ExerciseImport, ExerciseRead,
                                  ExerciseUpdate, ImportResult)

router = APIRouter(prefix="/exercises", tags=["exercises"])
logger = logging.getLogger(__name__)


async def _get_exercise_or_404(db: AsyncSession, exercise_id: str) -> Exercise:
    result = await db.execute(select(Exercise).where(Exercise.id == exercise_id))
    exercise = result.scalar_one_or_none()
    if exercise is None:
        raise NotFoundError("Exercise not found")
    return exercise


@router.get("", response_model=list[ExerciseRead])
async def list_exercises(
    machine_type: MachineType | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[Exercise]:
    query = select(Exercise).order_by(Exercise.created_at.desc())
    if machine_type is not None:
        query = query.where(Exercise.machine_type == machine_type)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.post("/import", response_model=ImportResult)
async def import_exercises(
    body: ExerciseImport,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("exercises.import")),
) -> ImportResult:
    """Add every exercise whose name is not in the library yet."""
    names = {item.name for item in body.exercises}
    result = await db.execute(select(Exercise.name).where(Exercise.name.in_(names)))
    seen = set(result.scalars().all())

    created = skipped = 0
    for item in body.exercises:
        if item.name in seen:
            skipped += 1
            continue
        db.add(Exercise(**item.model_dump()))
        seen.add(item.name)
        created += 1

    await db.commit()
    logger.info("Exercise import by %s: %d created, %d skipped", operator.id, created, skipped)
    return ImportResult(created=created, skipped=skipped)


@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(
    exercise_id: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> Exercise:
    return await _get_exercise_or_404(db, exercise_id)


@router.post("", response_model=ExerciseRead, status_code=201)
async def create_exercise(
    body: ExerciseCreate,
    db: AsyncSession = Depends(get_db),
    _operator: User = Depends(require_policy("exercises.write")),
) -> Exercise:
    exercise = Exercise(**body.model_dump())
    db.add(exercise)
    await db.commit()
    await db.refresh(exercise)
    return exercise


@router.patch("/{exercise_id}", response_model=ExerciseRead)
async def update_exercise(
    exercise_id: str,
    body: ExerciseUpdate,
    db: AsyncSession = Depends(get_db),
    _operator: User = Depends(require_policy("exercises.write")),
) -> Exercise:
    exercise = await _get_exercise_or_404(db, exercise_id)
    # Explicit nulls clear optional fields; the name is required.
    data = body.model_dump(exclude_unset=True)
    if "name" in data and data["name"] is None:
        raise ValidationError("'name' cannot be null")

    for field, value in data.items():
        setattr(exercise, field, value)

    await db.commit()
    await db.refresh(exercise)
    return exercise


@router.delete("/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exercise(
    exercise_id: str,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("exercises.write")),
) -> Response:
    exercise = await _get_exercise_or_404(db, exercise_id)
    await db.delete(exercise)
    await db.commit()
    logger.info("Exercise %s deleted by %s", exercise_id, operator.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
