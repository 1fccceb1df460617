"""
Queue state handlers.

GET /state returns the current snapshot. POST /state/sync is the change
notification channel: another writer posts the snapshot it just persisted
(or an empty body to make this process reload from storage), and the local
state is replaced wholesale.
"""

import json
from typing import Optional

from utils.error_handling import json_response
from utils.logging_config import get_logger

logger = get_logger(__name__)

_queue_service: Optional["QueueService"] = None


def _get_queue_service():
    """Lazy-load QueueService."""
    global _queue_service
    if _queue_service is None:
        from services.registry import get_queue_service
        _queue_service = get_queue_service()
    return _queue_service


def lambda_handler(event, context):
    """Handle GET /state."""
    service = _get_queue_service()
    return json_response(200, service.state.model_dump_json())


def sync_handler(event, context):
    """Handle POST /state/sync."""
    service = _get_queue_service()
    body = event.get("body")
    if not body:
        applied = service.refresh_from_storage()
        return json_response(200, {"applied": applied, "source": "storage"})

    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return json_response(422, {"message": "Snapshot is not valid JSON"})

    if not service.apply_external_snapshot(payload):
        return json_response(422, {"message": "Snapshot rejected"})
    return json_response(200, {"applied": True, "source": "notification"})
