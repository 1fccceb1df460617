"""
Desk lifecycle transitions.

UNATTENDED -> LOGGED_IN_IDLE (login) -> HAS_TICKET_WAITING_START (call-next)
-> IN_SERVICE (start) -> LOGGED_IN_IDLE (end, via the finalizer).
Logout returns any state to UNATTENDED.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Tuple

from models.desk import DeskUser
from models.queue import QueueState
from models.response import OperationResult
from services.finalizer import finalize_current_ticket
from utils.logging_config import get_logger

logger = get_logger(__name__)


def _missing_desk(desk_id: int) -> OperationResult:
    return OperationResult(success=False, message=f"Desk {desk_id} not found", not_found=True)


def login(
    state: QueueState, desk_id: int, user: DeskUser, services: List[str], now: datetime
) -> Tuple[QueueState, OperationResult]:
    """Attach a user and capability set. Ticket fields are left alone."""
    desk = state.desk(desk_id)
    if desk is None:
        return state, _missing_desk(desk_id)

    updated = desk.model_copy(update={"user": user, "services": list(dict.fromkeys(services))})
    logger.info("Desk login", extra={"desk_id": desk_id, "user_id": user.id})
    return state.with_desk(updated), OperationResult(
        success=True, message=f"{user.display_name} logged in at desk {desk_id}", desk=updated
    )


def logout(state: QueueState, desk_id: int, now: datetime) -> Tuple[QueueState, OperationResult]:
    """Finalize any held ticket, then clear the desk completely."""
    desk = state.desk(desk_id)
    if desk is None:
        return state, _missing_desk(desk_id)

    state = finalize_current_ticket(desk, state, now)
    updated = desk.model_copy(
        update={"user": None, "current_ticket": None, "service_started_at": None, "services": []}
    )
    logger.info("Desk logout", extra={"desk_id": desk_id})
    return state.with_desk(updated), OperationResult(
        success=True, message=f"Desk {desk_id} logged out", desk=updated
    )


def start_service(
    state: QueueState, desk_id: int, now: datetime
) -> Tuple[QueueState, OperationResult]:
    """
    Mark the start of service.

    The marker is set even on a desk without a ticket; it only means
    something once the finalizer reads it.
    """
    desk = state.desk(desk_id)
    if desk is None:
        return state, _missing_desk(desk_id)

    updated = desk.model_copy(update={"service_started_at": now})
    ticket_number = desk.current_ticket.number if desk.current_ticket else None
    logger.info("Service started", extra={"desk_id": desk_id, "ticket_number": ticket_number})
    return state.with_desk(updated), OperationResult(
        success=True,
        message=f"Service started at desk {desk_id}",
        ticket=desk.current_ticket,
        desk=updated,
    )


def end_service(state: QueueState, desk_id: int, now: datetime) -> Tuple[QueueState, OperationResult]:
    """Complete the ticket in service. Requires a ticket and a start marker."""
    desk = state.desk(desk_id)
    if desk is None:
        return state, _missing_desk(desk_id)
    if desk.current_ticket is None or desk.service_started_at is None:
        return state, OperationResult(
            success=False, message=f"Desk {desk_id} has no ticket in service", desk=desk
        )

    state = finalize_current_ticket(desk, state, now)
    updated = desk.cleared()
    return state.with_desk(updated), OperationResult(
        success=True,
        message=f"Service for {desk.current_ticket.number} finished",
        ticket=desk.current_ticket,
        desk=updated,
    )
