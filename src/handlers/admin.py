"""
Administrative handlers.

POST /admin/reset closes the day, PUT /admin/tips replaces the waiting-room
tips, PUT/DELETE /admin/alert sets or clears the alert banner and
GET /admin/archive/{date} returns an archived day.
"""

import re
from typing import Optional

from utils.error_handling import AppError, NotFoundError, ValidationError, json_response, to_response
from utils.logging_config import get_logger
from utils.validators import ensure_present, load_json_body

logger = get_logger(__name__)

_queue_service: Optional["QueueService"] = None

DATE_KEY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _get_queue_service():
    """Lazy-load QueueService."""
    global _queue_service
    if _queue_service is None:
        from services.registry import get_queue_service
        _queue_service = get_queue_service()
    return _queue_service


def lambda_handler(event, context):
    """Dispatch admin requests by method and path."""
    service = _get_queue_service()
    method = event.get("requestContext", {}).get("http", {}).get("method", "").upper()
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    route = f"{method} {path.rstrip('/')}"

    try:
        if route == "POST /admin/reset":
            archive = service.reset()
            logger.info("Day reset requested")
            return json_response(
                200,
                {
                    "status": "reset",
                    "archived": archive.model_dump(mode="json") if archive else None,
                },
            )

        if route == "PUT /admin/tips":
            tips = load_json_body(event).get("tips")
            if not isinstance(tips, list):
                raise ValidationError("tips must be a list of strings")
            result = service.update_tips([str(t) for t in tips])
            return json_response(200, result.model_dump_json())

        if route == "PUT /admin/alert":
            message = load_json_body(event).get("message")
            ensure_present(message, "message")
            return json_response(200, service.set_alert_message(str(message)).model_dump_json())

        if route == "DELETE /admin/alert":
            return json_response(200, service.clear_alert_message().model_dump_json())

        if route.startswith("GET /admin/archive/"):
            day = path.rstrip("/").rsplit("/", 1)[-1]
            if not DATE_KEY.match(day):
                raise ValidationError("date must be formatted YYYY-MM-DD")
            archive = service.get_archive(day)
            if archive is None:
                raise NotFoundError(f"No archive for {day}")
            return json_response(200, archive.model_dump_json())
    except AppError as exc:
        return to_response(exc)

    return json_response(404, {"message": "Route not found", "route": route})
