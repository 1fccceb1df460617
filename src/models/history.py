"""Finalized service records and the day archive."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from models.ticket import TicketType, UtcDatetime


class CompletedService(BaseModel):
    """A ticket that was called, started and finished at a desk."""

    model_config = ConfigDict(frozen=True)

    ticket_number: str
    type: TicketType
    service: str
    desk_id: int
    user_id: str
    user_name: str
    wait_time_ms: int
    service_duration_ms: int
    completed_at: UtcDatetime


class AbandonedTicket(BaseModel):
    """A ticket that was called but whose holder never showed up."""

    model_config = ConfigDict(frozen=True)

    ticket_number: str
    type: TicketType
    service: str
    desk_id: int
    user_id: str
    user_name: str
    called_at: UtcDatetime
    abandoned_at: UtcDatetime
    wait_time_ms: int = Field(description="Dispense to call, post-call time excluded")


class DayArchive(BaseModel):
    """Completed and abandoned history of one operating day."""

    date_key: str
    completed_services: List[CompletedService] = Field(default_factory=list)
    abandoned_tickets: List[AbandonedTicket] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.completed_services and not self.abandoned_tickets
