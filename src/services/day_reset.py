"""Operating-day boundary: archive history and start a fresh queue."""

from __future__ import annotations

from typing import Optional, Tuple

from models.history import DayArchive
from models.queue import QueueState, new_queue_state


def reset_day(
    state: QueueState, day: str, total_desks: int
) -> Tuple[QueueState, Optional[DayArchive]]:
    """
    Start a new day. Tips, alert message and agenda survive; everything else
    is reinitialized. The archive is None when there is nothing to keep.
    """
    archive = DayArchive(
        date_key=day,
        completed_services=list(state.completed_services),
        abandoned_tickets=list(state.abandoned_tickets),
    )
    fresh = new_queue_state(
        total_desks,
        tips=list(state.tips),
        alert_message=state.alert_message,
        agenda=list(state.agenda),
    )
    return fresh, None if archive.is_empty() else archive


def merge_archives(existing: Optional[DayArchive], new: DayArchive) -> DayArchive:
    """Append a second reset of the same day to what was already archived."""
    if existing is None:
        return new
    return DayArchive(
        date_key=new.date_key,
        completed_services=[*new.completed_services, *existing.completed_services],
        abandoned_tickets=[*new.abandoned_tickets, *existing.abandoned_tickets],
    )
