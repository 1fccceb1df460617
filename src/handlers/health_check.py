"""Lightweight health check handler."""

import os
import json
from datetime import datetime, timezone


def lambda_handler(event, context):
    """Report liveness plus the storage and numbering modes in use."""
    from services.registry import get_queue_service, get_settings, get_ticket_service

    settings = get_settings()
    queue = get_queue_service()
    tickets = get_ticket_service()
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(
            {
                "status": "degraded" if queue.degraded else "ok",
                "environment": os.environ.get("ENVIRONMENT", "dev"),
                "storage": settings.storage_backend,
                "ticket_mode": tickets.mode,
                "waiting": {
                    "normal": len(queue.state.waiting_normal),
                    "preferential": len(queue.state.waiting_preferential),
                },
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        ),
    }
