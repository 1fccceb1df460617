"""
Queue service: the single owner of the queue state.

Every public operation is one atomic transition run under a lock: read the
current state, compute the next one with a pure function, install it. The
snapshot is written after the transition commits; a failed write is logged
and the service keeps serving from memory (``degraded``).
"""

from __future__ import annotations

import json
import threading
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar, Union

from pydantic import ValidationError as PydanticValidationError

from models.agenda import AgendaEntry, AgendaEntryInput
from models.desk import DeskUser
from models.history import DayArchive
from models.queue import QueueState, migrate_snapshot, new_queue_state
from models.response import AgendaResult, OperationResult, ReinsertResult
from models.ticket import TicketType, WaitingTicket
from repositories.snapshot_repo import SnapshotStorage
from services import agenda_service, desk_lifecycle, dispatch, reinsertion, sequencer
from services.day_reset import merge_archives, reset_day
from utils.error_handling import PersistenceError
from utils.logging_config import get_logger
from utils.time_utils import date_key, utc_now

logger = get_logger(__name__)

R = TypeVar("R")


class QueueService:
    """Serializes all queue transitions and persists snapshots."""

    def __init__(
        self,
        storage: SnapshotStorage,
        clock: Callable[[], datetime] = utc_now,
        total_desks: int = 20,
        office_timezone: str = "UTC",
    ) -> None:
        self.storage = storage
        self.clock = clock
        self.total_desks = total_desks
        self.office_timezone = office_timezone
        self.degraded = False

        self._lock = threading.Lock()
        self._persist_lock = threading.Lock()
        self._version = 0
        self._saved_version = 0
        self._state = self._load_initial_state()

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> QueueState:
        return self._state

    def _load_initial_state(self) -> QueueState:
        try:
            payload = self.storage.load()
        except Exception as exc:
            logger.warning("Snapshot load failed; starting fresh", extra={"error": str(exc)})
            self.degraded = True
            return new_queue_state(self.total_desks)
        if not payload:
            return new_queue_state(self.total_desks)
        try:
            return migrate_snapshot(payload, self.total_desks)
        except (PydanticValidationError, ValueError, TypeError, AttributeError) as exc:
            logger.error("Stored snapshot is invalid; starting fresh", extra={"error": str(exc)})
            return new_queue_state(self.total_desks)

    def _transact(self, transition: Callable[[QueueState, datetime], Tuple[QueueState, R]]) -> R:
        """Run one transition atomically, then persist the committed state."""
        with self._lock:
            current = self._state
            next_state, result = transition(current, self.clock())
            if next_state is current:
                return result
            self._state = next_state
            self._version += 1
            version = self._version
        self._persist(next_state, version)
        return result

    def _persist(self, snapshot: QueueState, version: int) -> None:
        with self._persist_lock:
            # A later transition may already have written a newer snapshot.
            if version <= self._saved_version:
                return
            try:
                self.storage.save(snapshot.model_dump(mode="json"))
            except Exception as exc:
                self.degraded = True
                logger.warning(
                    "Snapshot save failed; continuing in memory",
                    extra={"error": str(exc), "version": version},
                )
                return
            self._saved_version = version
            self.degraded = False

    # ---------------------------------------------------------------- tickets

    def dispense(
        self, ticket_type: Union[TicketType, str], service: str, number: Optional[str] = None
    ) -> OperationResult:
        """Issue a ticket and enqueue it. Missing type or service is rejected."""
        try:
            ticket_type = TicketType(ticket_type)
        except ValueError:
            return OperationResult(success=False, message=f"Invalid ticket type: {ticket_type!r}")
        service = (service or "").strip()
        if not service:
            return OperationResult(success=False, message="service is required")

        ticket: WaitingTicket = self._transact(
            lambda state, now: sequencer.issue_ticket(state, ticket_type, service, now, number)
        )
        logger.info(
            "Ticket dispensed",
            extra={"ticket_number": ticket.number, "service": service},
        )
        return OperationResult(success=True, message=f"Ticket {ticket.number} issued", ticket=ticket)

    def call_next(self, desk_id: int) -> OperationResult:
        def transition(state: QueueState, now: datetime):
            desk = state.desk(desk_id)
            if desk is None:
                return state, OperationResult(
                    success=False, message=f"Desk {desk_id} not found", not_found=True
                )
            if desk.user is None or not desk.services:
                return state, OperationResult(
                    success=False, message=f"Desk {desk_id} is not ready to call", desk=desk
                )
            next_state, ticket = dispatch.call_next(state, desk_id, now)
            message = f"Calling {ticket.number}" if ticket else "No eligible ticket waiting"
            return next_state, OperationResult(
                success=True, message=message, ticket=ticket, desk=next_state.desk(desk_id)
            )

        return self._transact(transition)

    def reinsert(self, ticket_number: str) -> ReinsertResult:
        return self._transact(
            lambda state, now: reinsertion.reinsert(state, ticket_number, now)
        )

    # ------------------------------------------------------------------ desks

    def login(self, desk_id: int, user: DeskUser, services) -> OperationResult:
        return self._transact(
            lambda state, now: desk_lifecycle.login(state, desk_id, user, list(services), now)
        )

    def logout(self, desk_id: int) -> OperationResult:
        return self._transact(lambda state, now: desk_lifecycle.logout(state, desk_id, now))

    def start_service(self, desk_id: int) -> OperationResult:
        return self._transact(lambda state, now: desk_lifecycle.start_service(state, desk_id, now))

    def end_service(self, desk_id: int) -> OperationResult:
        return self._transact(lambda state, now: desk_lifecycle.end_service(state, desk_id, now))

    # ----------------------------------------------------------------- agenda

    def add_agenda_entry(self, data: AgendaEntryInput) -> AgendaResult:
        return self._transact(lambda state, now: agenda_service.add_entry(state, data, now))

    def update_agenda_entry(self, entry: AgendaEntry) -> AgendaResult:
        return self._transact(lambda state, now: agenda_service.update_entry(state, entry))

    def cancel_agenda_entry(self, entry_id: str) -> AgendaResult:
        return self._transact(lambda state, now: agenda_service.cancel_entry(state, entry_id))

    # ------------------------------------------------------------ panel/admin

    def update_tips(self, tips) -> OperationResult:
        cleaned = [tip.strip() for tip in tips if tip and tip.strip()]
        return self._transact(
            lambda state, now: (
                state.model_copy(update={"tips": cleaned}),
                OperationResult(success=True, message=f"{len(cleaned)} tips saved"),
            )
        )

    def set_alert_message(self, message: str) -> OperationResult:
        return self._transact(
            lambda state, now: (
                state.model_copy(update={"alert_message": message}),
                OperationResult(success=True, message="Alert message set"),
            )
        )

    def clear_alert_message(self) -> OperationResult:
        return self._transact(
            lambda state, now: (
                state.model_copy(update={"alert_message": None}),
                OperationResult(success=True, message="Alert message cleared"),
            )
        )

    def reset(self) -> Optional[DayArchive]:
        """
        Close the operating day.

        Completed and abandoned history is archived under today's date key
        (merged with an earlier reset of the same day) before the queue
        restarts. If the archive cannot be written the state is left as it
        was and ``PersistenceError`` is raised.
        """
        with self._lock:
            current = self._state
            fresh, archive = reset_day(
                current, date_key(self.clock(), self.office_timezone), self.total_desks
            )
            if archive is not None:
                archive = self._write_archive(archive)
            self._state = fresh
            self._version += 1
            version = self._version
        self._persist(fresh, version)

        if archive is None:
            logger.info("Day reset with no history to archive")
        else:
            logger.info(
                "Day archived",
                extra={
                    "date_key": archive.date_key,
                    "completed": len(archive.completed_services),
                    "abandoned": len(archive.abandoned_tickets),
                },
            )
        return archive

    def _write_archive(self, archive: DayArchive) -> DayArchive:
        try:
            existing_payload = self.storage.load_archive(archive.date_key)
            existing = DayArchive.model_validate(existing_payload) if existing_payload else None
            merged = merge_archives(existing, archive)
            self.storage.archive_day(merged.date_key, merged.model_dump(mode="json"))
        except Exception as exc:
            self.degraded = True
            logger.error(
                "Day archive failed; queue not reset",
                extra={"date_key": archive.date_key, "error": str(exc)},
            )
            raise PersistenceError(f"Could not archive {archive.date_key}; queue not reset") from exc
        return merged

    def get_archive(self, day: str) -> Optional[DayArchive]:
        try:
            payload = self.storage.load_archive(day)
            return DayArchive.model_validate(payload) if payload else None
        except Exception as exc:
            self.degraded = True
            logger.error("Archive lookup failed", extra={"date_key": day, "error": str(exc)})
            raise PersistenceError(f"Archive for {day} is unavailable") from exc

    # ------------------------------------------------------- external changes

    def apply_external_snapshot(self, payload: Union[Dict[str, Any], str]) -> bool:
        """
        Replace the local state with a snapshot persisted by another writer.

        Last writer wins; nothing is merged. An unreadable snapshot is logged
        and ignored.
        """
        try:
            if isinstance(payload, str):
                payload = json.loads(payload)
            replacement = migrate_snapshot(payload, self.total_desks)
        except (PydanticValidationError, ValueError, TypeError, AttributeError) as exc:
            logger.error("Ignoring unreadable external snapshot", extra={"error": str(exc)})
            return False

        with self._lock:
            self._state = replacement
            self._version += 1
            version = self._version
        with self._persist_lock:
            # Already stored by the writer that sent it.
            self._saved_version = max(self._saved_version, version)
        logger.info("Queue state replaced from external snapshot")
        return True

    def refresh_from_storage(self) -> bool:
        """Pull the stored snapshot and adopt it if present."""
        try:
            payload = self.storage.load()
        except Exception as exc:
            self.degraded = True
            logger.warning("Snapshot refresh failed", extra={"error": str(exc)})
            return False
        if not payload:
            return False
        return self.apply_external_snapshot(payload)
