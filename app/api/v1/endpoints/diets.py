"""
Diet plans: weekly meal schedules owned by a user.
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
from app.models.diet import Diet, DietMeal
from app.models.meal import Meal
from app.models.user import User
from app.schemas.diet import (DietCreate, DietMealCreate, DietMealRead,
                              DietMealUpdate, DietRead, DietReorder, DietUpdate)

router = APIRouter(prefix="/diets", tags=["diets"])
logger = logging.getLogger(__name__)

_MANAGE_ANY = "diets.manage_any"


async def _get_diet_or_404(db: AsyncSession, diet_id: str) -> Diet:
    result = await db.execute(
        select(Diet)
        .options(selectinload(Diet.meals).selectinload(DietMeal.meal))
        .where(Diet.id == diet_id)
        .execution_options(populate_existing=True)
    )
    diet = result.scalar_one_or_none()
    if diet is None:
        raise NotFoundError("Diet not found")
    return diet


async def _get_entry_or_404(db: AsyncSession, entry_id: str) -> DietMeal:
    result = await db.execute(
        select(DietMeal).options(selectinload(DietMeal.diet)).where(DietMeal.id == entry_id)
    )
    entry = result.scalar_one_or_none()
    if entry is None:
        raise NotFoundError("Diet meal not found")
    return entry


@router.get("", response_model=list[DietRead])
async def list_diets(
    user_id: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[Diet]:
    if not has_role(current_user, policy_roles(_MANAGE_ANY)):
        if user_id not in (None, current_user.id):
            raise AuthorizationError("You can only list your own diets")
        user_id = current_user.id

    query = (
        select(Diet)
        .options(selectinload(Diet.meals).selectinload(DietMeal.meal))
        .order_by(Diet.created_at.desc())
    )
    if user_id is not None:
        query = query.where(Diet.user_id == user_id)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.post("", response_model=DietRead, status_code=201)
async def create_diet(
    body: DietCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Diet:
    owner_id = body.user_id or current_user.id
    ensure_owner_or_policy(current_user, owner_id, _MANAGE_ANY)
    if owner_id != current_user.id:
        result = await db.execute(select(User.id).where(User.id == owner_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError("User not found")

    diet = Diet(user_id=owner_id, name=body.name, description=body.description)
    db.add(diet)
    await db.commit()
    logger.info("Diet %s created for %s by %s", diet.id, owner_id, current_user.id)
    return await _get_diet_or_404(db, diet.id)


@router.get("/{diet_id}", response_model=DietRead)
async def get_diet(
    diet_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Diet:
    diet = await _get_diet_or_404(db, diet_id)
    ensure_owner_or_policy(current_user, diet.user_id, _MANAGE_ANY)
    return diet


@router.patch("/{diet_id}", response_model=DietRead)
async def update_diet(
    diet_id: str,
    body: DietUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Diet:
    diet = await _get_diet_or_404(db, diet_id)
    ensure_owner_or_policy(current_user, diet.user_id, _MANAGE_ANY)

    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(diet, field, value)

    await db.commit()
    return await _get_diet_or_404(db, diet_id)


@router.delete("/{diet_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_diet(
    diet_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Response:
    diet = await _get_diet_or_404(db, diet_id)
    ensure_owner_or_policy(current_user, diet.user_id, _MANAGE_ANY)

    await db.delete(diet)
    await db.commit()
    logger.info("Diet %s deleted by %s", diet_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{diet_id}/meals", response_model=DietMealRead, status_code=201)
async def add_meal(
    diet_id: str,
    body: DietMealCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> DietMeal:
    diet = await _get_diet_or_404(db, diet_id)
    ensure_owner_or_policy(current_user, diet.user_id, _MANAGE_ANY)
    result = await db.execute(select(Meal.id).where(Meal.id == body.meal_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Meal not found")

    entry = DietMeal(diet_id=diet.id, **body.model_dump())
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


@router.post("/{diet_id}/reorder", response_model=DietRead)
async def reorder_meals(
    diet_id: str,
    body: DietReorder,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Diet:
    """Reschedule entries (day, slot and position) in one request."""
    diet = await _get_diet_or_404(db, diet_id)
    ensure_owner_or_policy(current_user, diet.user_id, _MANAGE_ANY)

    entries = {entry.id: entry for entry in diet.meals}
    if any(p.id not in entries for p in body.meals):
        raise ValidationError("Some meals do not belong to this diet")

    for placement in body.meals:
        entry = entries[placement.id]
        entry.day_of_week = placement.day_of_week
        entry.meal_type = placement.meal_type
        entry.order = placement.order

    await db.commit()
    return await _get_diet_or_404(db, diet_id)


@router.patch("/meals/{entry_id}", response_model=DietMealRead)
async def update_meal_entry(
    entry_id: str,
    body: DietMealUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> DietMeal:
    entry = await _get_entry_or_404(db, entry_id)
    ensure_owner_or_policy(current_user, entry.diet.user_id, _MANAGE_ANY)

    data = body.model_dump(exclude_unset=True)
    for key in ("day_of_week", "meal_type", "order"):
        if key in data and data[key] is None:
            raise ValidationError(f"'{key}' cannot be null")

    for field, value in data.items():
        setattr(entry, field, value)

    await db.commit()
    await db.refresh(entry)
    return entry


@router.delete("/meals/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_meal_entry(
    entry_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Response:
    entry = await _get_entry_or_404(db, entry_id)
    ensure_owner_or_policy(current_user, entry.diet.user_id, _MANAGE_ANY)

    await db.delete(entry)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
