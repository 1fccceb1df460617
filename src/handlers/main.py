"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

One process owns the queue state, so every route shares the same warm
QueueService instance.
"""

from typing import Callable, Dict, Tuple
import json

from . import admin, agenda, desks, health_check, state, tickets


def _response(status: int, body: Dict) -> Dict:
    """Format a JSON API Gateway HTTP API response."""
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def lambda_handler(event, context):
    """
    Entry point invoked by API Gateway HTTP API.

    The event contains the HTTP method and path; we route it to the correct
    handler module by prefix, most specific first.
    """
    method = event.get("requestContext", {}).get("http", {}).get("method", "")
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    route_key = f"{method.upper()} {path}"

    route_table: Tuple[Tuple[str, Callable], ...] = (
        ("GET /health", health_check.lambda_handler),
        ("POST /tickets/reinsert", tickets.reinsert_handler),
        ("POST /tickets", tickets.lambda_handler),
        ("POST /desks/", desks.lambda_handler),
        ("GET /state", state.lambda_handler),
        ("POST /state/sync", state.sync_handler),
        ("POST /agenda", agenda.lambda_handler),
        ("PUT /agenda/", agenda.lambda_handler),
        ("POST /admin/", admin.lambda_handler),
        ("PUT /admin/", admin.lambda_handler),
        ("DELETE /admin/", admin.lambda_handler),
        ("GET /admin/", admin.lambda_handler),
    )

    for prefix, handler in route_table:
        if route_key.startswith(prefix):
            return handler(event, context)

    return _response(404, {"message": "Route not found", "route": route_key})
