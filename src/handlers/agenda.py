"""
Agenda handlers.

POST /agenda schedules a follow-up, PUT /agenda/{id} replaces one and
POST /agenda/{id}/cancel cancels it (the record is kept).
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from models.agenda import AgendaEntry, AgendaEntryInput
from utils.error_handling import AppError, NotFoundError, json_response, to_response
from utils.logging_config import get_logger
from utils.validators import load_json_body

logger = get_logger(__name__)

_queue_service: Optional["QueueService"] = None


def _get_queue_service():
    """Lazy-load QueueService."""
    global _queue_service
    if _queue_service is None:
        from services.registry import get_queue_service
        _queue_service = get_queue_service()
    return _queue_service


def _route(event):
    method = event.get("requestContext", {}).get("http", {}).get("method", "").upper()
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    parts = [p for p in path.split("/") if p]
    entry_id = (event.get("pathParameters") or {}).get("id") or (parts[1] if len(parts) > 1 else None)
    return method, entry_id, parts


def lambda_handler(event, context):
    """Dispatch agenda requests by method and path."""
    service = _get_queue_service()
    method, entry_id, parts = _route(event)
    try:
        if method == "POST" and len(parts) == 1:
            data = AgendaEntryInput.model_validate(load_json_body(event))
            result = service.add_agenda_entry(data)
            status = 201
        elif method == "PUT" and entry_id:
            payload = load_json_body(event)
            payload["id"] = entry_id
            result = service.update_agenda_entry(AgendaEntry.model_validate(payload))
            status = 200
        elif method == "POST" and entry_id and parts[-1] == "cancel":
            result = service.cancel_agenda_entry(entry_id)
            status = 200
        else:
            raise NotFoundError("Route not found")
    except PydanticValidationError as exc:
        return json_response(422, {"message": "Invalid request", "error": str(exc)})
    except AppError as exc:
        return to_response(exc)

    if not result.success:
        return json_response(404, result.model_dump_json())
    logger.info("Agenda updated", extra={"entry_id": result.entry.id, "status": result.entry.status.value})
    return json_response(status, result.model_dump_json())
