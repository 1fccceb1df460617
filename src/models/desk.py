"""Service desk models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.ticket import UtcDatetime, WaitingTicket


class DeskUser(BaseModel):
    """Staff member logged in at a desk."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str


class DeskStatus(str, Enum):
    """Lifecycle position of a desk, derived from its fields."""

    UNATTENDED = "unattended"
    LOGGED_IN_IDLE = "logged_in_idle"
    HAS_TICKET_WAITING_START = "has_ticket_waiting_start"
    IN_SERVICE = "in_service"


def _dedupe(services: List[str]) -> List[str]:
    seen = []
    for service in services:
        cleaned = (service or "").strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


class ServiceDesk(BaseModel):
    """One service position. ``services`` is treated as a set."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    user: Optional[DeskUser] = None
    current_ticket: Optional[WaitingTicket] = None
    service_started_at: Optional[UtcDatetime] = None
    services: List[str] = Field(default_factory=list)

    @field_validator("services")
    @classmethod
    def validate_services(cls, value: List[str]) -> List[str]:
        return _dedupe(value)

    @property
    def status(self) -> DeskStatus:
        if self.user is None:
            return DeskStatus.UNATTENDED
        if self.current_ticket is None:
            return DeskStatus.LOGGED_IN_IDLE
        if self.service_started_at is None:
            return DeskStatus.HAS_TICKET_WAITING_START
        return DeskStatus.IN_SERVICE

    def cleared(self) -> "ServiceDesk":
        """Copy of the desk with no ticket and no start marker."""
        return self.model_copy(update={"current_ticket": None, "service_started_at": None})


class LoginRequest(BaseModel):
    """Inbound payload for a desk login."""

    user_id: str
    display_name: str
    services: List[str] = Field(default_factory=list)

    @field_validator("user_id", "display_name")
    @classmethod
    def validate_required(cls, value: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("user_id and display_name must be provided")
        return cleaned

    @field_validator("services")
    @classmethod
    def validate_services(cls, value: List[str]) -> List[str]:
        return _dedupe(value)

    def to_user(self) -> DeskUser:
        return DeskUser(id=self.user_id, display_name=self.display_name)
