from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union
from uuid import UUID, uuid4

from ..audit.model import AuditLogEntry
from ..audit.repository import AuditLog
from ..common.datetime_utils import now_utc, to_db_utc, to_iso
from ..core.enums import AuditAction, EntrySource
from ..core.exceptions import DuplicateEntryError, NotFoundError, StoreCommitError, ValidationError
from ..directory.service import DirectoryService
from ..entries.model import CanonicalEntry, PendingEvent
from ..entries.repository import EventStore
from .model import SyncOutcome, SyncResult
from .skew import ClockSkewPolicy

logger = logging.getLogger(__name__)

BatchItem = Union[PendingEvent, Mapping[str, Any]]


class ReconciliationService:
    """Merge a batch of offline-captured events into the event store.

    Each event is an independent unit of work: there is no transaction that
    spans events, and one failing event never aborts its siblings. Events are
    handled in the order supplied and outcomes keep that order.
    """

    def __init__(
        self,
        directory: DirectoryService,
        store: EventStore,
        audit: AuditLog,
        *,
        skew_policy: ClockSkewPolicy | None = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._directory = directory
        self._store = store
        self._audit = audit
        self._skew = skew_policy or ClockSkewPolicy()
        self._clock = clock

    def submit_batch(self, events: Sequence[BatchItem]) -> SyncResult:
        outcomes = [self._process(item) for item in events]
        result = SyncResult(outcomes=outcomes)
        logger.info(
            "Reconciled batch of %d: synced=%d duplicates=%d failed=%d",
            len(outcomes), result.succeeded, result.duplicates, result.failed,
        )
        return result

    def _process(self, item: BatchItem) -> SyncOutcome:
        original = _as_payload(item)
        try:
            event = item if isinstance(item, PendingEvent) else PendingEvent.from_payload(original)
        except ValidationError as e:
            return SyncOutcome.rejected(original, str(e))

        if not event.human_employee_id or event.dedup_clock_in is None:
            return SyncOutcome.rejected(original, "missing required fields")

        try:
            employee_ref, terminal_ref = self._directory.resolve_refs(
                event.human_employee_id, event.human_terminal_id
            )
        except NotFoundError as e:
            return SyncOutcome.not_found(original, which=e.which, human_id=e.human_id)

        clock_in = event.dedup_clock_in
        if self._store.find_by_employee_and_clock_in(employee_ref, clock_in) is not None:
            return SyncOutcome.duplicate(original)
        if event.is_clock_out_only:
            # A direct write may have applied this clock-out before its response was lost.
            if self._store.find_by_employee_and_clock_out(employee_ref, event.clock_out) is not None:
                return SyncOutcome.duplicate(original)

        server_now = self._clock()
        decision = self._skew.decide(server_now=server_now, captured_at=event.captured_at)

        if event.is_clock_out_only:
            closed = self._close_open_entry(employee_ref, event, decision.reason)
            if closed is not None:
                self._record_audit(closed, event)
                return SyncOutcome.success(
                    original, entry_id=closed.id, flagged=closed.flagged, flag_reason=closed.flag_reason
                )

        entry = CanonicalEntry(
            id=uuid4(),
            employee_ref=employee_ref,
            terminal_ref=terminal_ref,
            clock_in=clock_in,
            clock_out=event.clock_out,
            notes=event.notes,
            source=EntrySource.OFFLINE,
            flagged=decision.flagged,
            flag_reason=decision.reason,
            synced_at=server_now,
        )
        try:
            entry = self._store.insert(entry)
        except DuplicateEntryError:
            # Lost the race against a concurrent submission of the same event.
            return SyncOutcome.duplicate(original)
        except StoreCommitError as e:
            logger.warning("Commit failed for employee %s: %s", event.human_employee_id, e)
            return SyncOutcome.rejected(original, str(e))

        if decision.flagged:
            logger.info("Entry %s flagged: %s", entry.id, decision.reason)

        self._record_audit(entry, event)
        return SyncOutcome.success(original, entry_id=entry.id, flagged=entry.flagged, flag_reason=entry.flag_reason)

    def _close_open_entry(
        self, employee_ref: UUID, event: PendingEvent, flag_reason: Optional[str]
    ) -> Optional[CanonicalEntry]:
        """Close the employee's open entry with this clock-out, if one started before it."""
        open_entry = self._store.find_latest_open(employee_ref)
        if open_entry is None or to_db_utc(open_entry.clock_in) > to_db_utc(event.clock_out):
            return None
        if not self._store.close_entry(
            entry_id=open_entry.id, clock_out=event.clock_out, notes=event.notes, flag_reason=flag_reason
        ):
            return None
        if flag_reason:
            logger.info("Entry %s flagged: %s", open_entry.id, flag_reason)
        return replace(
            open_entry,
            clock_out=event.clock_out,
            notes=event.notes or open_entry.notes,
            flagged=open_entry.flagged or bool(flag_reason),
            flag_reason=flag_reason or open_entry.flag_reason,
        )

    def _record_audit(self, entry: CanonicalEntry, event: PendingEvent) -> None:
        new_data = entry.to_dict()
        new_data["capturedAt"] = to_iso(event.captured_at)
        try:
            self._audit.append(
                AuditLogEntry(
                    employee_ref=entry.employee_ref,
                    action=AuditAction.OFFLINE_SYNC,
                    record_id=entry.id,
                    new_data=new_data,
                )
            )
        except Exception:
            # The commit already happened; an audit failure must not undo it.
            logger.exception("Audit append failed for entry %s", entry.id)


def _as_payload(item: Any) -> Dict[str, Any]:
    if isinstance(item, PendingEvent):
        return item.to_payload()
    if isinstance(item, Mapping):
        return dict(item)
    return {"value": item}
