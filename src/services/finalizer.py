"""
Service finalizer.

Turns the ticket held by a desk into either a completed service (the desk
had started service) or an abandoned ticket (the holder never showed up).
Only call-next, logout and end-of-service invoke it.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from models.desk import ServiceDesk
from models.history import AbandonedTicket, CompletedService
from models.queue import QueueState
from models.ticket import CalledEntry
from utils.logging_config import get_logger
from utils.time_utils import elapsed_ms

logger = get_logger(__name__)


def find_last_call(history: List[CalledEntry], ticket_number: str) -> Optional[CalledEntry]:
    """Most recent call of ``ticket_number``. History is scanned, not indexed."""
    for entry in sorted(history, key=lambda e: e.called_at, reverse=True):
        if entry.ticket_number == ticket_number:
            return entry
    return None


def finalize_current_ticket(desk: ServiceDesk, state: QueueState, now: datetime) -> QueueState:
    """
    Record the outcome of the desk's current ticket.

    The desk itself is not modified here; callers clear or replace its ticket
    fields as part of the same transition. No user or no ticket means no-op.
    """
    ticket = desk.current_ticket
    if desk.user is None or ticket is None:
        return state

    if desk.service_started_at is not None:
        record = CompletedService(
            ticket_number=ticket.number,
            type=ticket.type,
            service=ticket.service,
            desk_id=desk.id,
            user_id=desk.user.id,
            user_name=desk.user.display_name,
            wait_time_ms=elapsed_ms(ticket.dispensed_at, desk.service_started_at),
            service_duration_ms=elapsed_ms(desk.service_started_at, now),
            completed_at=now,
        )
        logger.info(
            "Service completed",
            extra={"ticket_number": ticket.number, "desk_id": desk.id},
        )
        return state.model_copy(
            update={"completed_services": [record, *state.completed_services]}
        )

    last_call = find_last_call(state.called_history, ticket.number)
    called_at = last_call.called_at if last_call else now
    record = AbandonedTicket(
        ticket_number=ticket.number,
        type=ticket.type,
        service=ticket.service,
        desk_id=desk.id,
        user_id=desk.user.id,
        user_name=desk.user.display_name,
        called_at=called_at,
        abandoned_at=now,
        wait_time_ms=elapsed_ms(ticket.dispensed_at, called_at),
    )
    logger.info(
        "Ticket abandoned",
        extra={"ticket_number": ticket.number, "desk_id": desk.id},
    )
    return state.model_copy(update={"abandoned_tickets": [record, *state.abandoned_tickets]})
