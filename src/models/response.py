"""Result values returned by queue operations."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from models.agenda import AgendaEntry
from models.desk import ServiceDesk
from models.ticket import WaitingTicket


class OperationResult(BaseModel):
    """Outcome of a ticket or desk operation. Rejections are values, not exceptions."""

    success: bool
    message: str
    ticket: Optional[WaitingTicket] = None
    desk: Optional[ServiceDesk] = None
    not_found: bool = False


class ReinsertDetails(BaseModel):
    """Who served a ticket that an operator tried to reinsert."""

    desk_id: int
    user: str
    timestamp: datetime


class ReinsertResult(BaseModel):
    """Outcome of returning an abandoned ticket to the queue."""

    success: bool
    message: str
    details: Optional[ReinsertDetails] = None


class AgendaResult(BaseModel):
    """Outcome of an agenda operation."""

    success: bool
    message: str
    entry: Optional[AgendaEntry] = None
