"""Desk handlers for POST /desks/{id}/{action}."""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from models.desk import LoginRequest
from utils.error_handling import AppError, NotFoundError, json_response, to_response
from utils.logging_config import get_logger
from utils.validators import load_json_body, parse_desk_id

logger = get_logger(__name__)

_queue_service: Optional["QueueService"] = None

ACTIONS = ("login", "logout", "call-next", "start", "end")


def _get_queue_service():
    """Lazy-load QueueService."""
    global _queue_service
    if _queue_service is None:
        from services.registry import get_queue_service
        _queue_service = get_queue_service()
    return _queue_service


def _desk_and_action(event) -> Tuple[Optional[str], Optional[str]]:
    path_params = event.get("pathParameters") or {}
    if path_params.get("id") and path_params.get("action"):
        return path_params["id"], path_params["action"]
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    parts = [p for p in path.split("/") if p]
    # ["desks", "<id>", "<action>"]
    if len(parts) == 3 and parts[0] == "desks":
        return parts[1], parts[2]
    return path_params.get("id"), path_params.get("action")


def lambda_handler(event, context):
    """Run one desk lifecycle action."""
    service = _get_queue_service()
    raw_id, action = _desk_and_action(event)
    try:
        desk_id = parse_desk_id(raw_id, service.total_desks)
        if action not in ACTIONS:
            raise NotFoundError(f"Unknown desk action: {action}")

        if action == "login":
            login = LoginRequest.model_validate(load_json_body(event))
            result = service.login(desk_id, login.to_user(), login.services)
        elif action == "logout":
            result = service.logout(desk_id)
        elif action == "call-next":
            result = service.call_next(desk_id)
        elif action == "start":
            result = service.start_service(desk_id)
        else:
            result = service.end_service(desk_id)
    except PydanticValidationError as exc:
        return json_response(422, {"message": "Invalid request", "error": str(exc)})
    except AppError as exc:
        return to_response(exc)

    logger.info(
        "Desk action handled",
        extra={"desk_id": desk_id, "action": action, "success": result.success},
    )
    if result.not_found:
        status = 404
    else:
        status = 200 if result.success else 409
    return json_response(status, result.model_dump_json())
