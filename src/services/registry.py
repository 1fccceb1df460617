"""
Process-wide service instances.

The queue state has exactly one owner per process, so handlers share the
instances built here instead of constructing their own.
"""

from __future__ import annotations

import threading
from typing import Optional

from config.settings import Settings
from repositories.snapshot_repo import (
    DynamoDbSnapshotRepository,
    InMemorySnapshotRepository,
    SnapshotStorage,
)
from services.queue_service import QueueService
from services.ticket_service import TicketService
from utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)

_lock = threading.Lock()
_settings: Optional[Settings] = None
_queue_service: Optional[QueueService] = None
_ticket_service: Optional[TicketService] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_environment()
        configure_logging(_settings.log_level)
    return _settings


def build_storage(settings: Settings) -> SnapshotStorage:
    if settings.storage_backend == "dynamodb":
        return DynamoDbSnapshotRepository(settings.snapshot_table, region_name=settings.aws_region)
    if settings.storage_backend != "memory":
        logger.warning(
            "Unknown storage backend; using memory",
            extra={"storage_backend": settings.storage_backend},
        )
    return InMemorySnapshotRepository()


def get_queue_service() -> QueueService:
    """Lazy-load the single QueueService."""
    global _queue_service
    with _lock:
        if _queue_service is None:
            settings = get_settings()
            _queue_service = QueueService(
                storage=build_storage(settings),
                total_desks=settings.total_desks,
                office_timezone=settings.office_timezone,
            )
    return _queue_service


def get_ticket_service() -> TicketService:
    """Lazy-load TicketService, choosing database numbering when configured."""
    global _ticket_service
    queue = get_queue_service()
    with _lock:
        if _ticket_service is None:
            from repositories.database import get_db_engine
            from repositories.ticket_repo import TicketRepository

            settings = get_settings()
            engine = get_db_engine(settings.database_url, settings.db_secret_arn)
            repository = TicketRepository(engine) if engine is not None else None
            _ticket_service = TicketService(queue=queue, repository=repository)
    return _ticket_service


def reset_services() -> None:
    """Forget cached instances and dispose the database pool (used by tests)."""
    global _settings, _queue_service, _ticket_service
    from repositories.database import reset_engine

    with _lock:
        reset_engine()
        _settings = None
        _queue_service = None
        _ticket_service = None
