"""
Ticket sequencer.

Two independent counters (normal, preferential) produce numbers such as
``N007`` and ``P012``. Counters never wrap: past 999 the numeric part just
gets wider.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple

from models.queue import QueueState
from models.ticket import TicketType, WaitingTicket


def format_ticket_number(ticket_type: TicketType, counter: int) -> str:
    """``<prefix><counter zero-padded to 3 digits>``."""
    return f"{ticket_type.prefix}{counter:03d}"


def issue_ticket(
    state: QueueState,
    ticket_type: TicketType,
    service: str,
    now: datetime,
    number: Optional[str] = None,
) -> Tuple[QueueState, WaitingTicket]:
    """
    Advance the counter and enqueue the new ticket in one step.

    When ``number`` is given it was assigned by the durable sequence backend;
    the ticket is enqueued as-is and the in-memory counters stay untouched.
    """
    updates = {}
    if number is None:
        if ticket_type is TicketType.NORMAL:
            counter = state.next_normal_ticket
            updates["next_normal_ticket"] = counter + 1
        else:
            counter = state.next_preferential_ticket
            updates["next_preferential_ticket"] = counter + 1
        number = format_ticket_number(ticket_type, counter)

    ticket = WaitingTicket(number=number, type=ticket_type, service=service, dispensed_at=now)
    waiting = [*state.waiting_list(ticket_type), ticket]
    next_state = state.with_waiting_list(ticket_type, waiting).model_copy(update=updates)
    return next_state, ticket
