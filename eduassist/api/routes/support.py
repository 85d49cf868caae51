"""Support ticket routes. Tickets may be opened without signing in."""

import logging
from uuid import UUID

from fastapi import APIRouter, status

from eduassist.api.deps import CurrentUser, DbSession, OptionalUser, verify_ownership_or_404
from eduassist.db import repository
from eduassist.schemas.support import (
    SupportTicketCreate,
    SupportTicketRead,
    SupportTicketStatusUpdate,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/support", tags=["support"])


@router.post("/tickets", response_model=SupportTicketRead, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    data: SupportTicketCreate,
    current_user: OptionalUser,
    db: DbSession,
) -> SupportTicketRead:
    """Open a ticket. Linked to the caller when signed in; always starts as 'open'."""
    ticket = await repository.create_support_ticket(
        db,
        user_id=current_user.id if current_user else None,
        **data.model_dump(),
    )
    await db.commit()
    logger.info("Support ticket %s opened (%s)", ticket.id, "anonymous" if current_user is None else current_user.id)
    return SupportTicketRead.model_validate(ticket)


@router.get("/tickets", response_model=list[SupportTicketRead])
async def list_tickets(current_user: CurrentUser, db: DbSession) -> list[SupportTicketRead]:
    tickets = await repository.list_user_support_tickets(db, current_user.id)
    return [SupportTicketRead.model_validate(t) for t in tickets]


@router.patch("/tickets/{ticket_id}", response_model=SupportTicketRead)
async def update_ticket_status(
    ticket_id: UUID,
    data: SupportTicketStatusUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> SupportTicketRead:
    """Move one of the caller's tickets along its status workflow."""
    ticket = await repository.get_support_ticket(db, ticket_id)
    verify_ownership_or_404(ticket, current_user)

    updated = await repository.update_support_ticket_status(db, ticket, data.status.value)
    await db.commit()
    return SupportTicketRead.model_validate(updated)
