"""Pydantic models for the queue state and API payloads."""

from models.agenda import AgendaEntry, AgendaEntryInput, AgendaStatus  # noqa: F401
from models.desk import DeskStatus, DeskUser, LoginRequest, ServiceDesk  # noqa: F401
from models.history import AbandonedTicket, CompletedService, DayArchive  # noqa: F401
from models.queue import QueueState, migrate_snapshot, new_queue_state  # noqa: F401
from models.response import (  # noqa: F401
    AgendaResult,
    OperationResult,
    ReinsertDetails,
    ReinsertResult,
)
from models.ticket import (  # noqa: F401
    CalledEntry,
    DispenseRequest,
    IssuedTicket,
    TicketType,
    WaitingTicket,
)
