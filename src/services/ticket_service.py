"""
Ticket issuance service.

Numbers tickets either from the in-memory queue counters or from durable
PostgreSQL sequences. The mode is fixed when the service is built so the
two counter spaces never mix within one deployment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from models.ticket import DispenseRequest, IssuedTicket
from repositories.ticket_repo import TicketRepository
from services.queue_service import QueueService
from services.sequencer import format_ticket_number
from utils.error_handling import PersistenceError
from utils.logging_config import get_logger

logger = get_logger(__name__)

MEMORY_MODE = "memory"
DATABASE_MODE = "database"


@dataclass
class TicketService:
    """Issue tickets and enqueue them for the desks."""

    queue: QueueService
    repository: Optional[TicketRepository] = None

    def __post_init__(self) -> None:
        self.mode = DATABASE_MODE if self.repository is not None else MEMORY_MODE
        if self.repository is not None:
            self._probe()
        logger.info("Ticket numbering mode selected", extra={"mode": self.mode})

    def _probe(self) -> None:
        """Check the ticket table once; a missing table is reported, not fatal."""
        try:
            count = self.repository.count_waiting()
        except SQLAlchemyError as exc:
            logger.warning("Ticket database unreachable at startup", extra={"error": str(exc)})
            return
        if count is None:
            logger.warning("Connected, but table 'waiting_tickets' does not exist")
        else:
            logger.info("Ticket database ready", extra={"registered_tickets": count})

    def issue(self, request: DispenseRequest) -> IssuedTicket:
        """Draw the next number for ``request.type`` and enqueue the ticket."""
        if self.mode == MEMORY_MODE:
            result = self.queue.dispense(request.type, request.service)
            ticket = result.ticket
            return IssuedTicket(
                ticket_number=ticket.number,
                ticket_type=ticket.type,
                service=ticket.service,
                created_at=ticket.dispensed_at,
                mode=MEMORY_MODE,
            )

        try:
            row = self.repository.insert_ticket(request.type, request.service, format_ticket_number)
        except SQLAlchemyError as exc:
            logger.error(
                "Durable ticket numbering failed",
                extra={"error": str(exc), "ticket_type": request.type.value},
            )
            raise PersistenceError("Internal error while issuing ticket") from exc

        result = self.queue.dispense(request.type, request.service, number=row["ticket_number"])
        logger.info(
            "Ticket issued from database sequence",
            extra={"ticket_number": row["ticket_number"], "service": request.service},
        )
        return IssuedTicket(
            id=row.get("id"),
            ticket_number=row["ticket_number"],
            ticket_type=request.type,
            service=request.service,
            created_at=row.get("created_at") or result.ticket.dispensed_at,
            mode=DATABASE_MODE,
        )
