"""Ticket models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, field_validator

from utils.time_utils import as_utc

# Every stored timestamp is timezone-aware UTC, whatever the snapshot held.
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class TicketType(str, Enum):
    """Ticket classes served by the desks."""

    NORMAL = "NORMAL"
    PREFERENTIAL = "PREFERENTIAL"

    @classmethod
    def _missing_(cls, value):
        # Accept lower-case input and the legacy "PREFERENCIAL" spelling.
        if isinstance(value, str):
            normalized = value.strip().upper()
            if normalized == "PREFERENCIAL":
                return cls.PREFERENTIAL
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def prefix(self) -> str:
        return "N" if self is TicketType.NORMAL else "P"


class WaitingTicket(BaseModel):
    """Issued ticket that has not been called yet (or is held by a desk)."""

    model_config = ConfigDict(frozen=True)

    number: str
    type: TicketType
    service: str
    dispensed_at: UtcDatetime


class CalledEntry(BaseModel):
    """One call of a ticket by a desk. History is append-only."""

    model_config = ConfigDict(frozen=True)

    ticket_number: str
    desk_id: int
    called_at: UtcDatetime
    type: TicketType


class DispenseRequest(BaseModel):
    """Inbound payload for drawing a ticket."""

    type: TicketType
    service: str

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value):
        """Map loose spellings onto the enum before validation."""
        if isinstance(value, str):
            try:
                return TicketType(value)
            except ValueError:
                return value
        return value

    @field_validator("service")
    @classmethod
    def validate_service(cls, value: str) -> str:
        """A ticket must name the service it is waiting for."""
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("service must be provided")
        return cleaned


class IssuedTicket(BaseModel):
    """Response for ticket issuance, independent of the numbering backend."""

    ticket_number: str
    ticket_type: TicketType
    service: str
    created_at: UtcDatetime
    id: Optional[int] = None
    mode: str = "memory"
