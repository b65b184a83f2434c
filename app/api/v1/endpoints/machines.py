"""
Machine inventory endpoints. Writes are scoped to the operator's center.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_current_active_user, get_db, require_policy
from app.core.exceptions import NotFoundError
from app.core.permissions import ensure_center_access
from app.models.center import Center
from app.models.machine import Machine, MachineStatus
from app.models.user import User
from app.schemas.machine import MachineCreate, MachineRead, MachineUpdate

router = APIRouter(prefix="/machines", tags=["machines"])
logger = logging.getLogger(__name__)


async def _get_machine_or_404(db: AsyncSession, machine_id: str) -> Machine:
    result = await db.execute(select(Machine).where(Machine.id == machine_id))
    machine = result.scalar_one_or_none()
    if machine is None:
        raise NotFoundError("Machine not found")
    return machine


async def _ensure_center_exists(db: AsyncSession, center_id: str) -> None:
    result = await db.execute(select(Center.id).where(Center.id == center_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Center not found")


@router.get("", response_model=list[MachineRead])
async def list_machines(
    center_id: str | None = Query(default=None),
    status_filter: MachineStatus | None = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[Machine]:
    query = select(Machine).order_by(Machine.name.asc())
    if center_id is not None:
        query = query.where(Machine.center_id == center_id)
    if status_filter is not None:
        query = query.where(Machine.status == status_filter)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/{machine_id}", response_model=MachineRead)
async def get_machine(
    machine_id: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> Machine:
    return await _get_machine_or_404(db, machine_id)


@router.post("", response_model=MachineRead, status_code=201)
async def create_machine(
    body: MachineCreate,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("machines.write")),
) -> Machine:
    ensure_center_access(operator, body.center_id)
    await _ensure_center_exists(db, body.center_id)

    machine = Machine(**body.model_dump())
    db.add(machine)
    await db.commit()
    await db.refresh(machine)
    logger.info("Machine %s added to center %s", machine.id, machine.center_id)
    return machine


@router.patch("/{machine_id}", response_model=MachineRead)
async def update_machine(
    machine_id: str,
    body: MachineUpdate,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("machines.write")),
) -> Machine:
    machine = await _get_machine_or_404(db, machine_id)
    ensure_center_access(operator, machine.center_id)

    data = body.model_dump(exclude_unset=True, exclude_none=True)
    new_center = data.get("center_id")
    if new_center is not None and new_center != machine.center_id:
        # Moving a machine needs rights over the destination as well.
        ensure_center_access(operator, new_center)
        await _ensure_center_exists(db, new_center)

    for field, value in data.items():
        setattr(machine, field, value)

    await db.commit()
    await db.refresh(machine)
    return machine


@router.delete("/{machine_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_machine(
    machine_id: str,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("machines.write")),
) -> Response:
    machine = await _get_machine_or_404(db, machine_id)
    ensure_center_access(operator, machine.center_id)

    await db.delete(machine)
    await db.commit()
    logger.info("Machine %s deleted by %s", machine_id, operator.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
