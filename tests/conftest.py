"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from handlers import desks` to work when running
tests, simulating the Lambda environment where code is deployed from the
src/ directory.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import boto3
import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add src/ to sys.path if missing."""
    repo_root = Path(__file__).resolve().parents[1]
    src_str = str(repo_root / "src")
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Ensure boto3 has offline-friendly defaults so tests do not require AWS access.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("AWS_SESSION_TOKEN", "test")
os.environ.setdefault("ENVIRONMENT", "dev")
os.environ.setdefault("QUEUE_STORAGE", "memory")
os.environ.setdefault("SNAPSHOT_TABLE", "test-queue-snapshots")
os.environ.pop("DATABASE_URL", None)
os.environ.pop("DB_SECRET_ARN", None)

# Create a default boto3 session so resources/clients do not error during import.
boto3.setup_default_session(region_name="eu-west-2")


class FakeClock:
    """Deterministic clock; every read returns the current instant."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds: float = 0, minutes: float = 0) -> datetime:
        self.now = self.now + timedelta(seconds=seconds, minutes=minutes)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    from repositories.snapshot_repo import InMemorySnapshotRepository

    return InMemorySnapshotRepository()


@pytest.fixture
def queue(storage, clock):
    from services.queue_service import QueueService

    return QueueService(storage=storage, clock=clock)


@pytest.fixture
def civil_clerk():
    from models.desk import DeskUser

    return DeskUser(id="u-1", display_name="Ana Clerk")


@pytest.fixture(autouse=True)
def reset_registry():
    """Handlers share process-wide services; start every test clean."""
    from services import registry

    registry.reset_services()
    yield
    registry.reset_services()


@pytest.fixture(autouse=True)
def reset_handler_services():
    """Drop services cached by handler modules between tests."""
    yield
    from handlers import admin, agenda, desks, state, tickets

    for module in (admin, agenda, desks, state, tickets):
        module._queue_service = None
    tickets._ticket_service = None
