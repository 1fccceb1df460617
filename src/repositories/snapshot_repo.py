"""
Snapshot storage for the queue state.

The queue is persisted as one whole snapshot after every mutation. Each
snapshot is a single item, so a write either lands completely or not at all.
"""

import json
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol

import boto3

STATE_KEY = "queue_state"
ARCHIVE_PREFIX = "history#"


class SnapshotStorage(Protocol):
    """Port used by the queue service."""

    def load(self) -> Optional[Dict[str, Any]]: ...

    def save(self, payload: Dict[str, Any]) -> None: ...

    def archive_day(self, date_key: str, payload: Dict[str, Any]) -> None: ...

    def load_archive(self, date_key: str) -> Optional[Dict[str, Any]]: ...


class DynamoDbSnapshotRepository:
    """Keep snapshots as JSON strings in a DynamoDB table keyed by ``snapshot_key``."""

    def __init__(self, table_name: str, region_name: Optional[str] = None):
        self.table = boto3.resource("dynamodb", region_name=region_name).Table(table_name)

    def _get(self, key: str) -> Optional[Dict[str, Any]]:
        resp = self.table.get_item(Key={"snapshot_key": key}, ConsistentRead=True)
        item = resp.get("Item")
        if not item:
            return None
        return json.loads(item["payload"])

    def _put(self, key: str, payload: Dict[str, Any]) -> None:
        # JSON string avoids DynamoDB's Decimal conversion of numbers.
        self.table.put_item(
            Item={
                "snapshot_key": key,
                "payload": json.dumps(payload),
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }
        )

    def load(self) -> Optional[Dict[str, Any]]:
        """Return the current snapshot, if one was saved."""
        return self._get(STATE_KEY)

    def save(self, payload: Dict[str, Any]) -> None:
        """Replace the current snapshot."""
        self._put(STATE_KEY, payload)

    def archive_day(self, date_key: str, payload: Dict[str, Any]) -> None:
        """Store a day's history under its date key."""
        self._put(f"{ARCHIVE_PREFIX}{date_key}", payload)

    def load_archive(self, date_key: str) -> Optional[Dict[str, Any]]:
        return self._get(f"{ARCHIVE_PREFIX}{date_key}")


class InMemorySnapshotRepository:
    """Process-local storage for development and tests."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._items: Dict[str, str] = {}
        self._lock = threading.Lock()
        if initial is not None:
            self.save(initial)

    def load(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            raw = self._items.get(STATE_KEY)
        return json.loads(raw) if raw else None

    def save(self, payload: Dict[str, Any]) -> None:
        raw = json.dumps(payload)
        with self._lock:
            self._items[STATE_KEY] = raw

    def archive_day(self, date_key: str, payload: Dict[str, Any]) -> None:
        raw = json.dumps(payload)
        with self._lock:
            self._items[f"{ARCHIVE_PREFIX}{date_key}"] = raw

    def load_archive(self, date_key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            raw = self._items.get(f"{ARCHIVE_PREFIX}{date_key}")
        return json.loads(raw) if raw else None
