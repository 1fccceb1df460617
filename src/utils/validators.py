"""Lightweight validation helpers for handler input."""

import json
from typing import Any, Dict, Optional

from utils.error_handling import ValidationError


def ensure_present(value: Any, field: str) -> None:
    """Raise ValidationError if value is falsy."""
    if value in (None, "", []):
        raise ValidationError(f"{field} is required")


def parse_desk_id(raw: Optional[str], total_desks: int) -> int:
    """Turn a path parameter into a desk id within the configured pool."""
    ensure_present(raw, "desk id")
    try:
        desk_id = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"desk id must be an integer, got {raw!r}")
    if not 1 <= desk_id <= total_desks:
        raise ValidationError(f"desk id must be between 1 and {total_desks}")
    return desk_id


def ensure_object(payload: Any, field: str = "body") -> Dict[str, Any]:
    """Require a JSON object payload."""
    if not isinstance(payload, dict):
        raise ValidationError(f"{field} must be a JSON object")
    return payload


def load_json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the JSON body of an API Gateway event (empty body -> {})."""
    raw = event.get("body") or "{}"
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"body is not valid JSON: {exc.msg}")
    return ensure_object(payload)
