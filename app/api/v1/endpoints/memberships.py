"""
Membership plan catalogue.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_current_active_user, get_db, require_policy
from app.core.exceptions import NotFoundError
from app.models.membership import MembershipPlan
from app.models.user import Role, User
from app.schemas.membership import (MembershipPlanCreate, MembershipPlanRead,
                                    MembershipPlanUpdate)

router = APIRouter(prefix="/memberships", tags=["memberships"])
logger = logging.getLogger(__name__)


async def _get_plan_or_404(db: AsyncSession, plan_id: str) -> MembershipPlan:
    result = await db.execute(select(MembershipPlan).where(MembershipPlan.id == plan_id))
    plan = result.scalar_one_or_none()
    if plan is None:
        raise NotFoundError("Membership plan not found")
    return plan


@router.get("", response_model=list[MembershipPlanRead])
async def list_plans(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[MembershipPlan]:
    """Active plans, cheapest first. SUPERADMIN also sees retired plans."""
    query = select(MembershipPlan).order_by(
        MembershipPlan.is_active.desc(), MembershipPlan.price.asc()
    )
    if current_user.role != Role.SUPERADMIN:
        query = query.where(MembershipPlan.is_active.is_(True))
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/{plan_id}", response_model=MembershipPlanRead)
async def get_plan(
    plan_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MembershipPlan:
    plan = await _get_plan_or_404(db, plan_id)
    # Retired plans are hidden from everyone but SUPERADMIN.
    if not plan.is_active and current_user.role != Role.SUPERADMIN:
        raise NotFoundError("Membership plan not found")
    return plan


@router.post("", response_model=MembershipPlanRead, status_code=201)
async def create_plan(
    body: MembershipPlanCreate,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("memberships.write")),
) -> MembershipPlan:
    plan = MembershipPlan(**body.model_dump())
    db.add(plan)
    await db.commit()
    await db.refresh(plan)
    logger.info("Membership plan %s created by %s", plan.id, operator.id)
    return plan


@router.patch("/{plan_id}", response_model=MembershipPlanRead)
async def update_plan(
    plan_id: str,
    body: MembershipPlanUpdate,
    db: AsyncSession = Depends(get_db),
    _operator: User = Depends(require_policy("memberships.write")),
) -> MembershipPlan:
    plan = await _get_plan_or_404(db, plan_id)
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(plan, field, value)

    await db.commit()
    await db.refresh(plan)
    return plan


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plan(
    plan_id: str,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("memberships.write")),
) -> Response:
    plan = await _get_plan_or_404(db, plan_id)
    await db.delete(plan)
    await db.commit()
    logger.info("Membership plan %s deleted by %s", plan_id, operator.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
