"""Return abandoned tickets to the waiting lists."""

from __future__ import annotations

from datetime import datetime
from typing import Tuple

from models.queue import QueueState
from models.response import ReinsertDetails, ReinsertResult
from models.ticket import WaitingTicket
from utils.logging_config import get_logger

logger = get_logger(__name__)


def reinsert(
    state: QueueState, ticket_number: str, now: datetime
) -> Tuple[QueueState, ReinsertResult]:
    """
    Move an abandoned ticket back to the end of its waiting list.

    Matching is case-insensitive. A ticket that was already served is refused
    with the desk, user and completion time so the operator can explain why.
    The wait-time clock restarts at ``now``. Waiting lists and desks are not
    checked for the same number.
    """
    number = (ticket_number or "").strip().upper()

    completed = next(
        (c for c in state.completed_services if c.ticket_number.upper() == number), None
    )
    if completed is not None:
        return state, ReinsertResult(
            success=False,
            message="This ticket has already been serviced.",
            details=ReinsertDetails(
                desk_id=completed.desk_id,
                user=completed.user_name,
                timestamp=completed.completed_at,
            ),
        )

    abandoned = next(
        (a for a in state.abandoned_tickets if a.ticket_number.upper() == number), None
    )
    if abandoned is None:
        return state, ReinsertResult(
            success=False, message="Ticket not found among abandoned tickets or invalid."
        )

    ticket = WaitingTicket(
        number=abandoned.ticket_number,
        type=abandoned.type,
        service=abandoned.service,
        dispensed_at=now,
    )
    remaining = [a for a in state.abandoned_tickets if a.ticket_number.upper() != number]
    next_state = state.with_waiting_list(
        ticket.type, [*state.waiting_list(ticket.type), ticket]
    ).model_copy(update={"abandoned_tickets": remaining})

    logger.info("Ticket reinserted", extra={"ticket_number": ticket.number})
    return next_state, ReinsertResult(
        success=True, message=f"Ticket {number} reinserted into the queue."
    )
