"""Agenda models for scheduled follow-ups."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from models.ticket import UtcDatetime


class AgendaStatus(str, Enum):
    """Agenda entries are never deleted, only canceled."""

    SCHEDULED = "SCHEDULED"
    CANCELED = "CANCELED"


class AgendaEntryInput(BaseModel):
    """Fields supplied by the operator when scheduling a follow-up."""

    ticket_number: str
    client_name: str
    service: str
    scheduled_for: UtcDatetime
    notes: Optional[str] = None

    @field_validator("ticket_number", "client_name", "service")
    @classmethod
    def validate_required(cls, value: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("ticket_number, client_name and service must be provided")
        return cleaned


class AgendaEntry(AgendaEntryInput):
    """Stored agenda entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    status: AgendaStatus = AgendaStatus.SCHEDULED
    registered_at: UtcDatetime
