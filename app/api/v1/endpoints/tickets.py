"""
Contact tickets.

Anyone may open a ticket for a center (no auth). Staff of that center
triage, update and close them.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db, require_policy
from app.core.exceptions import AuthorizationError, NotFoundError
from app.core.permissions import ensure_center_access
from app.models.center import Center
from app.models.ticket import Ticket, TicketStatus
from app.models.user import Role, User
from app.schemas.ticket import TicketCreate, TicketRead, TicketUpdate
from app.services.notifications import notify_center_admins

router = APIRouter(prefix="/tickets", tags=["tickets"])
logger = logging.getLogger(__name__)


async def _get_ticket_or_404(db: AsyncSession, ticket_id: str) -> Ticket:
    result = await db.execute(select(Ticket).where(Ticket.id == ticket_id))
    ticket = result.scalar_one_or_none()
    if ticket is None:
        raise NotFoundError("Ticket not found")
    return ticket


@router.post("", response_model=TicketRead, status_code=201)
async def create_ticket(
    body: TicketCreate,
    db: AsyncSession = Depends(get_db),
) -> Ticket:
    """Public contact form."""
    result = await db.execute(select(Center.id).where(Center.id == body.center_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Center not found")

    ticket = Ticket(**body.model_dump())
    db.add(ticket)
    await notify_center_admins(
        db,
        ticket.center_id,
        "New contact ticket",
        f"{ticket.name}: {ticket.subject}",
    )
    await db.commit()
    await db.refresh(ticket)
    logger.info("Ticket %s opened for center %s", ticket.id, ticket.center_id)
    return ticket


@router.get("", response_model=list[TicketRead])
async def list_tickets(
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("tickets.manage")),
) -> list[Ticket]:
    query = select(Ticket).order_by(Ticket.created_at.desc())
    if operator.role != Role.SUPERADMIN:
        managed = operator.managed_center_id
        if managed is None:
            raise AuthorizationError("You have no assigned center")
        query = query.where(Ticket.center_id == managed)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/{ticket_id}", response_model=TicketRead)
async def get_ticket(
    ticket_id: str,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("tickets.manage")),
) -> Ticket:
    ticket = await _get_ticket_or_404(db, ticket_id)
    ensure_center_access(operator, ticket.center_id)
    return ticket


@router.patch("/{ticket_id}", response_model=TicketRead)
async def update_ticket(
    ticket_id: str,
    body: TicketUpdate,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("tickets.manage")),
) -> Ticket:
    ticket = await _get_ticket_or_404(db, ticket_id)
    ensure_center_access(operator, ticket.center_id)

    if body.status is not None:
        ticket.status = body.status
        if body.status == TicketStatus.COMPLETED:
            ticket.completed_at = datetime.now(timezone.utc)
        else:
            ticket.completed_at = None

    await db.commit()
    await db.refresh(ticket)
    logger.info("Ticket %s set to %s by %s", ticket.id, ticket.status.value, operator.id)
    return ticket


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ticket(
    ticket_id: str,
    db: AsyncSession = Depends(get_db),
    operator: User = Depends(require_policy("tickets.manage")),
) -> Response:
    ticket = await _get_ticket_or_404(db, ticket_id)
    ensure_center_access(operator, ticket.center_id)

    await db.delete(ticket)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
