"""
Workout plans.

A workout belongs to one user. Its owner and staff (trainers and admins)
may change it; everyone else only sees their own plans.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.v1.deps import get_current_active_user, get_db
from app.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.core.permissions import ensure_owner_or_policy, has_role, policy_roles
from app.models.exercise import Exercise
from app.models.user import User
from app.models.workout import Workout, WorkoutExercise
from app.schemas.workout import (WorkoutCreate, WorkoutExerciseCreate,
                                 WorkoutExerciseRead, WorkoutExerciseUpdate,
                                 WorkoutRead, WorkoutReorder, WorkoutUpdate)

router = APIRouter(prefix="/workouts", tags=["workouts"])
logger = logging.getLogger(__name__)

_MANAGE_ANY = "workouts.manage_any"


async def _get_workout_or_404(db: AsyncSession, workout_id: str) -> Workout:
    result = await db.execute(
        select(Workout)
        .options(selectinload(Workout.exercises).selectinload(WorkoutExercise.exercise))
        .where(Workout.id == workout_id)
        .execution_options(populate_existing=True)
    )
    workout = result.scalar_one_or_none()
    if workout is None:
        raise NotFoundError("Workout not found")
    return workout


async def _get_entry_or_404(db: AsyncSession, entry_id: str) -> WorkoutExercise:
    result = await db.execute(
        select(WorkoutExercise)
        .options(selectinload(WorkoutExercise.workout))
        .where(WorkoutExercise.id == entry_id)
    )
    entry = result.scalar_one_or_none()
    if entry is None:
        raise NotFoundError("Workout exercise not found")
    return entry


async def _ensure_exercise_exists(db: AsyncSession, exercise_id: str) -> None:
    result = await db.execute(select(Exercise.id).where(Exercise.id == exercise_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Exercise not found")


async def _ensure_user_exists(db: AsyncSession, user_id: str) -> None:
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("User not found")


@router.get("", response_model=list[WorkoutRead])
async def list_workouts(
    user_id: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[Workout]:
    """Staff may list anyone's workouts; other users get their own."""
    if not has_role(current_user, policy_roles(_MANAGE_ANY)):
        if user_id not in (None, current_user.id):
            raise AuthorizationError("You can only list your own workouts")
        user_id = current_user.id

    query = (
        select(Workout)
        .options(selectinload(Workout.exercises).selectinload(WorkoutExercise.exercise))
        .order_by(Workout.created_at.desc())
    )
    if user_id is not None:
        query = query.where(Workout.user_id == user_id)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.post("", response_model=WorkoutRead, status_code=201)
async def create_workout(
    body: WorkoutCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Workout:
    owner_id = body.user_id or current_user.id
    ensure_owner_or_policy(current_user, owner_id, _MANAGE_ANY)
    if owner_id != current_user.id:
        await _ensure_user_exists(db, owner_id)

    workout = Workout(user_id=owner_id, name=body.name, description=body.description)
    db.add(workout)
    await db.commit()
    logger.info("Workout %s created for %s by %s", workout.id, owner_id, current_user.id)
    return await _get_workout_or_404(db, workout.id)


@router.get("/{workout_id}", response_model=WorkoutRead)
async def get_workout(
    workout_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Workout:
    workout = await _get_workout_or_404(db, workout_id)
    ensure_owner_or_policy(current_user, workout.user_id, _MANAGE_ANY)
    return workout


@router.patch("/{workout_id}", response_model=WorkoutRead)
async def update_workout(
    workout_id: str,
    body: WorkoutUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Workout:
    workout = await _get_workout_or_404(db, workout_id)
    ensure_owner_or_policy(current_user, workout.user_id, _MANAGE_ANY)

    data = body.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in data.items():
        setattr(workout, field, value)

    await db.commit()
    return await _get_workout_or_404(db, workout_id)


@router.delete("/{workout_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workout(
    workout_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Response:
    workout = await _get_workout_or_404(db, workout_id)
    ensure_owner_or_policy(current_user, workout.user_id, _MANAGE_ANY)

    await db.delete(workout)
    await db.commit()
    logger.info("Workout %s deleted by %s", workout_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{workout_id}/duplicate", response_model=WorkoutRead, status_code=201)
async def duplicate_workout(
    workout_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Workout:
    """Copy a workout and all its entries into a new plan owned by the caller."""
    source = await _get_workout_or_404(db, workout_id)
    ensure_owner_or_policy(current_user, source.user_id, _MANAGE_ANY)

    duplicate = Workout(
        user_id=current_user.id,
        name=f"{source.name} (copy)"[:200],
        description=source.description,
    )
    duplicate.exercises = [
        WorkoutExercise(
            exercise_id=entry.exercise_id,
            day_of_week=entry.day_of_week,
            order=entry.order,
            sets=entry.sets,
            reps=entry.reps,
            weight=entry.weight,
            duration=entry.duration,
            rest_seconds=entry.rest_seconds,
            notes=entry.notes,
        )
        for entry in source.exercises
    ]
    db.add(duplicate)
    await db.commit()
    logger.info("Workout %s duplicated as %s", workout_id, duplicate.id)
    return await _get_workout_or_404(db, duplicate.id)


@router.post("/{workout_id}/exercises", response_model=WorkoutExerciseRead, status_code=201)
async def add_exercise(
    workout_id: str,
    body: WorkoutExerciseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> WorkoutExercise:
    workout = await _get_workout_or_404(db, workout_id)
    ensure_owner_or_policy(current_user, workout.user_id, _MANAGE_ANY)
    await _ensure_exercise_exists(db, body.exercise_id)

    entry = WorkoutExercise(workout_id=workout.id, **body.model_dump())
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


@router.post("/{workout_id}/reorder", response_model=WorkoutRead)
async def reorder_exercises(
    workout_id: str,
    body: WorkoutReorder,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Workout:
    """Move entries to new days and positions in one request."""
    workout = await _get_workout_or_404(db, workout_id)
    ensure_owner_or_policy(current_user, workout.user_id, _MANAGE_ANY)

    entries = {entry.id: entry for entry in workout.exercises}
    unknown = [p.id for p in body.exercises if p.id not in entries]
    if unknown:
        raise ValidationError("Some exercises do not belong to this workout")

    for placement in body.exercises:
        entry = entries[placement.id]
        entry.day_of_week = placement.day_of_week
        entry.order = placement.order

    await db.commit()
    return await _get_workout_or_404(db, workout_id)


@router.patch("/exercises/{entry_id}", response_model=WorkoutExerciseRead)
async def update_exercise_entry(
    entry_id: str,
    body: WorkoutExerciseUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> WorkoutExercise:
    entry = await _get_entry_or_404(db, entry_id)
    ensure_owner_or_policy(current_user, entry.workout.user_id, _MANAGE_ANY)

    # Explicit nulls clear the optional targets.
    data = body.model_dump(exclude_unset=True)
    for key in ("day_of_week", "order"):
        if key in data and data[key] is None:
            raise ValidationError(f"'{key}' cannot be null")

    for field, value in data.items():
        setattr(entry, field, value)

    await db.commit()
    await db.refresh(entry)
    return entry


@router.delete("/exercises/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_exercise_entry(
    entry_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Response:
    entry = await _get_entry_or_404(db, entry_id)
    ensure_owner_or_policy(current_user, entry.workout.user_id, _MANAGE_ANY)

    await db.delete(entry)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
