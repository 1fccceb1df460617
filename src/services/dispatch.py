"""
Dispatch policy.

Picks the next ticket for a desk from the two waiting lists. Preferential
tickets are called while they make up at most a third of all calls so far
(``called_pref <= called_norm / 2``); either class is served when the other
has no eligible ticket, so neither list starves.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from models.queue import QueueState
from models.ticket import CalledEntry, TicketType, WaitingTicket
from services.finalizer import finalize_current_ticket
from utils.logging_config import get_logger

logger = get_logger(__name__)


def count_calls(history: Iterable[CalledEntry]) -> Tuple[int, int]:
    """Return ``(preferential, normal)`` call counts over the whole history."""
    preferential = normal = 0
    for entry in history:
        if entry.type is TicketType.PREFERENTIAL:
            preferential += 1
        else:
            normal += 1
    return preferential, normal


def eligible(tickets: List[WaitingTicket], services: Iterable[str]) -> List[WaitingTicket]:
    allowed = set(services)
    return [t for t in tickets if t.service in allowed]


def select_next_ticket(state: QueueState, services: Iterable[str]) -> Optional[WaitingTicket]:
    """Head of the eligible list chosen by the fairness rule, or None."""
    services = list(services)
    preferential = eligible(state.waiting_preferential, services)
    normal = eligible(state.waiting_normal, services)
    called_pref, called_norm = count_calls(state.called_history)

    if preferential and (called_pref <= called_norm / 2 or not normal):
        return preferential[0]
    if normal:
        return normal[0]
    if preferential:
        return preferential[0]
    return None


def _remove(tickets: List[WaitingTicket], number: str) -> Optional[List[WaitingTicket]]:
    for index, ticket in enumerate(tickets):
        if ticket.number == number:
            return tickets[:index] + tickets[index + 1:]
    return None


def call_next(
    state: QueueState, desk_id: int, now: datetime
) -> Tuple[QueueState, Optional[WaitingTicket]]:
    """
    Finalize whatever the desk holds, then claim the next eligible ticket.

    Returns the new state and the called ticket (None when the desk went idle
    or the call was a no-op).
    """
    desk = state.desk(desk_id)
    if desk is None or desk.user is None or not desk.services:
        return state, None

    state = finalize_current_ticket(desk, state, now)

    ticket = select_next_ticket(state, desk.services)
    if ticket is None:
        return state.with_desk(desk.cleared()), None

    remaining = _remove(state.waiting_list(ticket.type), ticket.number)
    if remaining is None:
        logger.error(
            "Selected ticket missing from its waiting list",
            extra={"ticket_number": ticket.number, "desk_id": desk_id},
        )
        return state.with_desk(desk.cleared()), None

    entry = CalledEntry(
        ticket_number=ticket.number, desk_id=desk_id, called_at=now, type=ticket.type
    )
    state = state.with_waiting_list(ticket.type, remaining).model_copy(
        update={"called_history": [*state.called_history, entry]}
    )
    called_desk = desk.model_copy(update={"current_ticket": ticket, "service_started_at": None})
    logger.info("Ticket called", extra={"ticket_number": ticket.number, "desk_id": desk_id})
    return state.with_desk(called_desk), ticket
