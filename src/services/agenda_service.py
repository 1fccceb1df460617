"""Agenda of scheduled follow-ups. Independent of tickets and desks."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Tuple

from models.agenda import AgendaEntry, AgendaEntryInput, AgendaStatus
from models.queue import QueueState
from models.response import AgendaResult


def _entry_id(ticket_number: str, now: datetime) -> str:
    return f"AGENDA-{int(now.timestamp() * 1000)}-{ticket_number}-{uuid.uuid4().hex[:6]}"


def add_entry(
    state: QueueState, data: AgendaEntryInput, now: datetime
) -> Tuple[QueueState, AgendaResult]:
    entry = AgendaEntry(
        **data.model_dump(),
        id=_entry_id(data.ticket_number, now),
        status=AgendaStatus.SCHEDULED,
        registered_at=now,
    )
    return state.model_copy(update={"agenda": [*state.agenda, entry]}), AgendaResult(
        success=True, message="Agenda entry scheduled.", entry=entry
    )


def update_entry(state: QueueState, updated: AgendaEntry) -> Tuple[QueueState, AgendaResult]:
    """Replace the entry with the same id."""
    if not any(entry.id == updated.id for entry in state.agenda):
        return state, AgendaResult(success=False, message=f"Agenda entry {updated.id} not found")

    agenda = [updated if entry.id == updated.id else entry for entry in state.agenda]
    return state.model_copy(update={"agenda": agenda}), AgendaResult(
        success=True, message="Agenda entry updated.", entry=updated
    )


def cancel_entry(state: QueueState, entry_id: str) -> Tuple[QueueState, AgendaResult]:
    """Soft delete: the record stays with status CANCELED."""
    target = next((entry for entry in state.agenda if entry.id == entry_id), None)
    if target is None:
        return state, AgendaResult(success=False, message=f"Agenda entry {entry_id} not found")

    canceled = target.model_copy(update={"status": AgendaStatus.CANCELED})
    agenda = [canceled if entry.id == entry_id else entry for entry in state.agenda]
    return state.model_copy(update={"agenda": agenda}), AgendaResult(
        success=True, message="Agenda entry canceled.", entry=canceled
    )
