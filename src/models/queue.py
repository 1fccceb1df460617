"""Aggregate queue state and snapshot migration."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from config.defaults import DEFAULT_TIPS, TOTAL_DESKS
from models.agenda import AgendaEntry
from models.desk import ServiceDesk
from models.history import AbandonedTicket, CompletedService
from models.ticket import CalledEntry, TicketType, WaitingTicket


class QueueState(BaseModel):
    """
    The whole queue: counters, waiting lists, desks and history.

    Instances are treated as immutable values. Transitions build a new state
    with ``model_copy(update=...)`` and fresh lists, so a snapshot handed to
    the storage layer never changes underneath it.
    """

    model_config = ConfigDict(frozen=True)

    next_normal_ticket: int = Field(default=1, ge=1)
    next_preferential_ticket: int = Field(default=1, ge=1)
    waiting_normal: List[WaitingTicket] = Field(default_factory=list)
    waiting_preferential: List[WaitingTicket] = Field(default_factory=list)
    called_history: List[CalledEntry] = Field(default_factory=list)
    desks: List[ServiceDesk] = Field(default_factory=list)
    completed_services: List[CompletedService] = Field(default_factory=list)
    abandoned_tickets: List[AbandonedTicket] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=lambda: list(DEFAULT_TIPS))
    alert_message: Optional[str] = None
    agenda: List[AgendaEntry] = Field(default_factory=list)

    def desk(self, desk_id: int) -> Optional[ServiceDesk]:
        for desk in self.desks:
            if desk.id == desk_id:
                return desk
        return None

    def with_desk(self, updated: ServiceDesk) -> "QueueState":
        """Return a copy with ``updated`` replacing the desk of the same id."""
        desks = [updated if desk.id == updated.id else desk for desk in self.desks]
        return self.model_copy(update={"desks": desks})

    def waiting_list(self, ticket_type: TicketType) -> List[WaitingTicket]:
        if ticket_type is TicketType.NORMAL:
            return self.waiting_normal
        return self.waiting_preferential

    def with_waiting_list(
        self, ticket_type: TicketType, tickets: List[WaitingTicket]
    ) -> "QueueState":
        field = "waiting_normal" if ticket_type is TicketType.NORMAL else "waiting_preferential"
        return self.model_copy(update={field: tickets})

    def ticket_locations(self, ticket_number: str) -> List[str]:
        """Where a ticket number currently lives; used to check exclusivity."""
        number = ticket_number.upper()
        places: List[str] = []
        places += ["waiting_normal" for t in self.waiting_normal if t.number.upper() == number]
        places += [
            "waiting_preferential"
            for t in self.waiting_preferential
            if t.number.upper() == number
        ]
        places += [
            f"desk:{d.id}"
            for d in self.desks
            if d.current_ticket and d.current_ticket.number.upper() == number
        ]
        places += [
            "completed" for c in self.completed_services if c.ticket_number.upper() == number
        ]
        places += [
            "abandoned" for a in self.abandoned_tickets if a.ticket_number.upper() == number
        ]
        return places


def initial_desks(total_desks: int = TOTAL_DESKS) -> List[ServiceDesk]:
    return [ServiceDesk(id=i + 1) for i in range(total_desks)]


def new_queue_state(total_desks: int = TOTAL_DESKS, **preserved: Any) -> QueueState:
    """Fresh operating-day state; ``preserved`` carries tips/alert/agenda over."""
    return QueueState(desks=initial_desks(total_desks), **preserved)


def migrate_snapshot(payload: Dict[str, Any], total_desks: int = TOTAL_DESKS) -> QueueState:
    """
    Build a state from a stored snapshot.

    Older snapshots may lack the abandoned list, tips, alert or agenda; those
    fall back to neutral defaults. The desk pool is rebuilt at the configured
    size and saved desks are merged in by id.
    """
    data = dict(payload)
    if data.get("tips") is None:
        data.pop("tips", None)
    for key in ("abandoned_tickets", "agenda"):
        if data.get(key) is None:
            data[key] = []

    saved_desks = {
        int(d["id"]): d for d in data.get("desks") or [] if isinstance(d, dict) and "id" in d
    }
    merged = []
    for default in initial_desks(total_desks):
        saved = saved_desks.get(default.id)
        merged.append({**default.model_dump(), **saved} if saved else default.model_dump())
    data["desks"] = merged

    return QueueState.model_validate(data)
