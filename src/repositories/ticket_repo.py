"""PostgreSQL ticket numbering using SQLAlchemy Core."""

from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ProgrammingError

from models.ticket import TicketType

SEQUENCES = {
    TicketType.NORMAL: "normal_ticket_sequence",
    TicketType.PREFERENTIAL: "preferential_ticket_sequence",
}


class TicketRepository:
    """Durable counters (one sequence per ticket type) and the issued-ticket table."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def next_value(self, conn, ticket_type: TicketType) -> int:
        # Sequence names come from the fixed map above, never from input.
        return int(conn.execute(text(f"SELECT nextval('{SEQUENCES[ticket_type]}')")).scalar())

    def insert_ticket(
        self, ticket_type: TicketType, service: str, ticket_number_for
    ) -> Dict[str, Any]:
        """
        Draw the next sequence value and record the ticket in one transaction.

        ``ticket_number_for`` formats the raw counter so numbering stays
        identical to the in-memory sequencer.
        """
        with self.engine.begin() as conn:
            counter = self.next_value(conn, ticket_type)
            row = conn.execute(
                text(
                    """
                    INSERT INTO waiting_tickets (ticket_number, ticket_type, service, status)
                    VALUES (:ticket_number, :ticket_type, :service, 'WAITING')
                    RETURNING id, ticket_number, ticket_type, service, status, created_at
                """
                ),
                {
                    "ticket_number": ticket_number_for(ticket_type, counter),
                    "ticket_type": ticket_type.value,
                    "service": service,
                },
            ).fetchone()
            return dict(row._mapping)

    def count_waiting(self) -> Optional[int]:
        """Number of recorded tickets, or None when the table is missing."""
        try:
            with self.engine.connect() as conn:
                return int(conn.execute(text("SELECT count(*) FROM waiting_tickets")).scalar())
        except ProgrammingError:
            return None
