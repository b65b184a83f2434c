"""
Meal library endpoints.

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
from app.models.meal import Meal
from app.models.user import User
from app.schemas.exercise import ImportResult
from app.schemas.meal import MealCreate, MealImport, MealRead, MealUpdate

router = APIRouter(prefix="/meals", tags=["meals"])
logger = logging.getLogger(__name__)


async def _get_meal_or_404(db: AsyncSession, meal_id: str) -> Meal:
    result = await db.execute(select(Meal).where(Meal.id == meal_id))
    meal = result.scalar_one_or_none()
    if meal is None:
        raise NotFoundError("Meal not found")
    return meal


@router.get("", response_model=list[MealRead])
async def list_meals(
    search: str | None = Query(default=None, min_length=1, max_length=100),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[Meal]:
    """Meals ordered by name, optionally filtered by a name fragment."""
    query = select(Meal).order_by(Meal.name.asc())
    if search is not None:
        query = query.where(Meal.name.ilike(f"%{search}%"))
    result = await db.execute(query)
    return list(result.scalars().all())


@router.post("/import", response_model=ImportResult)
async def import_meals(
    body: MealImport,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("meals.import")),
) -> ImportResult:
    """Add every meal whose name is not in the library yet."""
    names = {item.name for item in body.meals}
    result = await db.execute(select(Meal.name).where(Meal.name.in_(names)))
    seen = set(result.scalars().all())

    created = skipped = 0
    for item in body.meals:
        if item.name in seen:
            skipped += 1
            continue
        db.add(Meal(**item.model_dump()))
        seen.add(item.name)
        created += 1

    await db.commit()
    logger.info("Meal import by %s: %d created, %d skipped", operator.id, created, skipped)
    return ImportResult(created=created, skipped=skipped)


@router.get("/{meal_id}", response_model=MealRead)
async def get_meal(
    meal_id: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> Meal:
    return await _get_meal_or_404(db, meal_id)


@router.post("", response_model=MealRead, status_code=201)
async def create_meal(
    body: MealCreate,
    db: AsyncSession = Depends(get_db),
    _operator: User = Depends(require_policy("meals.write")),
) -> Meal:
    meal = Meal(**body.model_dump())
    db.add(meal)
    await db.commit()
    await db.refresh(meal)
    return meal


@router.patch("/{meal_id}", response_model=MealRead)
async def update_meal(
    meal_id: str,
    body: MealUpdate,
    db: AsyncSession = Depends(get_db),
    _operator: User = Depends(require_policy("meals.write")),
) -> Meal:
    meal = await _get_meal_or_404(db, meal_id)
    # Explicit nulls clear optional fields; the name is required.
    data = body.model_dump(exclude_unset=True)
    if "name" in data and data["name"] is None:
        raise ValidationError("'name' cannot be null")

    for field, value in data.items():
        setattr(meal, field, value)

    await db.commit()
    await db.refresh(meal)
    return meal


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(
    meal_id: str,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("meals.write")),
) -> Response:
    meal = await _get_meal_or_404(db, meal_id)
    await db.delete(meal)
    await db.commit()
    logger.info("Meal %s deleted by %s", meal_id, operator.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
