"""
Ticket handlers.

POST /tickets draws a ticket through the ticket-issuance service (memory or
database numbering). POST /tickets/reinsert returns an abandoned ticket to
the queue.
"""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from models.ticket import DispenseRequest
from utils.error_handling import AppError, json_response, to_response
from utils.logging_config import get_logger
from utils.validators import ensure_present, load_json_body

logger = get_logger(__name__)

# Lazy-loaded services to avoid import-time connections
_ticket_service: Optional["TicketService"] = None
_queue_service: Optional["QueueService"] = None


def _get_ticket_service():
    """Lazy-load TicketService."""
    global _ticket_service
    if _ticket_service is None:
        from services.registry import get_ticket_service
        _ticket_service = get_ticket_service()
    return _ticket_service


def _get_queue_service():
    """Lazy-load QueueService."""
    global _queue_service
    if _queue_service is None:
        from services.registry import get_queue_service
        _queue_service = get_queue_service()
    return _queue_service


def lambda_handler(event, context):
    """Handle POST /tickets."""
    correlation_id = str(uuid.uuid4())
    try:
        payload = load_json_body(event)
        request = DispenseRequest.model_validate(payload)
        issued = _get_ticket_service().issue(request)
    except PydanticValidationError as exc:
        return json_response(
            422,
            {
                "message": "Invalid request",
                "error": str(exc),
                "correlation_id": correlation_id,
            },
        )
    except AppError as exc:
        logger.exception("Ticket issuance failed", extra={"correlation_id": correlation_id})
        return to_response(exc, correlation_id)

    logger.info(
        "Ticket issued",
        extra={"correlation_id": correlation_id, "ticket_number": issued.ticket_number},
    )
    return json_response(201, issued.model_dump_json())


def reinsert_handler(event, context):
    """Handle POST /tickets/reinsert with body {"ticket_number": "N007"}."""
    try:
        payload = load_json_body(event)
        ensure_present(payload.get("ticket_number"), "ticket_number")
    except AppError as exc:
        return to_response(exc)

    result = _get_queue_service().reinsert(str(payload["ticket_number"]))
    if result.success:
        status = 200
    elif result.details is not None:
        status = 409
    else:
        status = 404
    return json_response(status, result.model_dump_json())
