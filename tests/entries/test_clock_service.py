from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.timeclock.timeclock.core.enums import AuditAction, EntrySource
from src.timeclock.timeclock.core.exceptions import DuplicateEntryError, NotFoundError, ValidationError
from src.timeclock.timeclock.entries.model import PendingEvent

NINE = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)
FIVE_PM = datetime(2024, 1, 15, 17, 0, tzinfo=timezone.utc)


def test_clock_in_creates_online_entry(clock_service, store, audit, directory):
    entry = clock_service.record(PendingEvent(human_employee_id="E1", human_terminal_id="T1", clock_in=NINE))

    assert entry.source == EntrySource.ONLINE
    assert entry.employee_ref == directory.employees["E1"]
    assert entry.terminal_ref == directory.terminals["T1"]
    assert entry.clock_out is None
    assert store.entries[entry.id] == entry
    assert audit.entries[0].action == AuditAction.ONLINE_CLOCK_IN


def test_clock_in_twice_at_same_instant_is_duplicate(clock_service):
    clock_service.record(PendingEvent(human_employee_id="E1", clock_in=NINE))

    with pytest.raises(DuplicateEntryError):
        clock_service.record(PendingEvent(human_employee_id="E1", clock_in=NINE))


def test_clock_out_closes_latest_open_entry(clock_service, store, audit):
    opened = clock_service.record(PendingEvent(human_employee_id="E1", clock_in=NINE))

    closed = clock_service.record(PendingEvent(human_employee_id="E1", clock_out=FIVE_PM, notes="left early"))

    assert closed.id == opened.id
    assert closed.clock_out == FIVE_PM
    assert store.entries[opened.id].clock_out == FIVE_PM
    assert store.entries[opened.id].notes == "left early"
    assert [a.action for a in audit.entries] == [AuditAction.ONLINE_CLOCK_IN, AuditAction.ONLINE_CLOCK_OUT]


def test_clock_out_without_open_entry_is_invalid(clock_service):
    with pytest.raises(ValidationError, match="not currently clocked in"):
        clock_service.record(PendingEvent(human_employee_id="E1", clock_out=FIVE_PM))


def test_unknown_employee_is_not_found(clock_service, store):
    with pytest.raises(NotFoundError) as exc:
        clock_service.record(PendingEvent(human_employee_id="NOPE", clock_in=NINE))

    assert exc.value.which == "employee"
    assert store.entries == {}


def test_event_without_times_is_invalid(clock_service):
    with pytest.raises(ValidationError, match="missing required fields"):
        clock_service.record(PendingEvent(human_employee_id="E1"))


def test_audit_captured_at_defaults_to_server_time(clock_service, audit):
    clock_service.record(PendingEvent(human_employee_id="E2", clock_in=NINE))

    assert audit.entries[0].new_data["capturedAt"] == "2024-01-15T09:00:05Z"
