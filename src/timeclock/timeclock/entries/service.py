from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable
from uuid import uuid4

from ..audit.model import AuditLogEntry
from ..audit.repository import AuditLog
from ..common.datetime_utils import now_utc, to_iso
from ..core.enums import AuditAction, EntrySource
from ..core.exceptions import ValidationError
from ..directory.service import DirectoryService
from .model import CanonicalEntry, PendingEvent
from .repository import EventStore

logger = logging.getLogger(__name__)


class ClockService:
    """Direct (online) clock writes from a connected terminal.

    A clock-in creates a new entry; a clock-out without a clock-in closes the
    employee's latest open entry.
    """

    def __init__(
        self,
        directory: DirectoryService,
        store: EventStore,
        audit: AuditLog,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._directory = directory
        self._store = store
        self._audit = audit
        self._clock = clock

    def record(self, event: PendingEvent) -> CanonicalEntry:
        if not event.human_employee_id:
            raise ValidationError("missing required fields")
        if event.clock_in is not None:
            return self.clock_in(event)
        if event.clock_out is not None:
            return self.clock_out(event)
        raise ValidationError("missing required fields")

    def clock_in(self, event: PendingEvent) -> CanonicalEntry:
        employee_ref, terminal_ref = self._directory.resolve_refs(event.human_employee_id, event.human_terminal_id)

        entry = CanonicalEntry(
            id=uuid4(),
            employee_ref=employee_ref,
            terminal_ref=terminal_ref,
            clock_in=event.clock_in,
            clock_out=event.clock_out,
            notes=event.notes,
            source=EntrySource.ONLINE,
        )
        # DuplicateEntryError propagates; the controller answers 409.
        entry = self._store.insert(entry)
        self._record_audit(entry, AuditAction.ONLINE_CLOCK_IN, event)
        return entry

    def clock_out(self, event: PendingEvent) -> CanonicalEntry:
        employee_ref, _ = self._directory.resolve_refs(event.human_employee_id, event.human_terminal_id)

        open_entry = self._store.find_latest_open(employee_ref)
        if open_entry is None:
            raise ValidationError("employee is not currently clocked in")

        if not self._store.close_entry(entry_id=open_entry.id, clock_out=event.clock_out, notes=event.notes):
            raise ValidationError("employee is not currently clocked in")

        closed = replace(open_entry, clock_out=event.clock_out, notes=event.notes or open_entry.notes)
        self._record_audit(closed, AuditAction.ONLINE_CLOCK_OUT, event)
        return closed

    def _record_audit(self, entry: CanonicalEntry, action: AuditAction, event: PendingEvent) -> None:
        new_data = entry.to_dict()
        new_data["capturedAt"] = to_iso(event.captured_at or self._clock())
        try:
            self._audit.append(
                AuditLogEntry(employee_ref=entry.employee_ref, action=action, record_id=entry.id, new_data=new_data)
            )
        except Exception:
            logger.exception("Audit append failed for entry %s", entry.id)
