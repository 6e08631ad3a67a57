from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Optional
from uuid import UUID

import pytest

from src.timeclock.timeclock import create_app
from src.timeclock.timeclock.core.exceptions import DuplicateEntryError
from src.timeclock.timeclock.directory.model import Employee, Terminal
from src.timeclock.timeclock.directory.service import DirectoryService
from src.timeclock.timeclock.entries.model import CanonicalEntry
from src.timeclock.timeclock.entries.service import ClockService
from src.timeclock.timeclock.reconciliation.service import ReconciliationService
from src.timeclock.timeclock.reconciliation.skew import ClockSkewPolicy

EMPLOYEE_REFS = {
    "E1": UUID("00000000-0000-4000-8000-0000000000e1"),
    "E2": UUID("00000000-0000-4000-8000-0000000000e2"),
}
TERMINAL_REFS = {
    "T1": UUID("00000000-0000-4000-8000-0000000000a1"),
}


class InMemoryDirectory:
    def __init__(self, employees: dict[str, UUID], terminals: dict[str, UUID]):
        self.employees = dict(employees)
        self.terminals = dict(terminals)

    def resolve_employee(self, employee_code: str) -> Optional[UUID]:
        return self.employees.get(employee_code)

    def resolve_terminal(self, terminal_code: str) -> Optional[UUID]:
        return self.terminals.get(terminal_code)

    def list_active_employees(self):
        return [Employee(id=ref, employee_code=code, full_name=f"Employee {code}") for code, ref in self.employees.items()]

    def list_active_terminals(self):
        return [Terminal(id=ref, terminal_code=code, name=f"Terminal {code}") for code, ref in self.terminals.items()]


class InMemoryEventStore:
    """Keeps the (employee, clock_in) unique key like the MySQL table does."""

    def __init__(self):
        self.entries: dict[UUID, CanonicalEntry] = {}

    def find_by_employee_and_clock_in(self, employee_ref: UUID, clock_in: datetime) -> Optional[CanonicalEntry]:
        for e in self.entries.values():
            if e.employee_ref == employee_ref and e.clock_in == clock_in:
                return e
        return None

    def find_by_employee_and_clock_out(self, employee_ref: UUID, clock_out: datetime) -> Optional[CanonicalEntry]:
        for e in self.entries.values():
            if e.employee_ref == employee_ref and e.clock_out == clock_out:
                return e
        return None

    def insert(self, entry: CanonicalEntry) -> CanonicalEntry:
        if self.find_by_employee_and_clock_in(entry.employee_ref, entry.clock_in) is not None:
            raise DuplicateEntryError("Duplicate entry for key 'uq_clock_entries_employee_clock_in'")
        self.entries[entry.id] = entry
        return entry

    def find_latest_open(self, employee_ref: UUID) -> Optional[CanonicalEntry]:
        open_entries = [e for e in self.entries.values() if e.employee_ref == employee_ref and e.clock_out is None]
        open_entries.sort(key=lambda e: e.clock_in, reverse=True)
        return open_entries[0] if open_entries else None

    def close_entry(
        self,
        *,
        entry_id: UUID,
        clock_out: datetime,
        notes: Optional[str] = None,
        flag_reason: Optional[str] = None,
    ) -> bool:
        entry = self.entries.get(entry_id)
        if entry is None or entry.clock_out is not None:
            return False
        self.entries[entry_id] = replace(
            entry,
            clock_out=clock_out,
            notes=notes or entry.notes,
            flagged=entry.flagged or bool(flag_reason),
            flag_reason=flag_reason or entry.flag_reason,
        )
        return True


class InMemoryAuditLog:
    def __init__(self):
        self.entries = []
        self.fail = False

    def append(self, entry) -> None:
        if self.fail:
            raise RuntimeError("audit table unavailable")
        self.entries.append(entry)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 15, 9, 0, 5, tzinfo=timezone.utc)


@pytest.fixture
def directory() -> InMemoryDirectory:
    return InMemoryDirectory(EMPLOYEE_REFS, TERMINAL_REFS)


@pytest.fixture
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def audit() -> InMemoryAuditLog:
    return InMemoryAuditLog()


@pytest.fixture
def reconciliation_service(directory, store, audit, fixed_now) -> ReconciliationService:
    return ReconciliationService(
        DirectoryService(directory),
        store,
        audit,
        skew_policy=ClockSkewPolicy(threshold_minutes=2),
        clock=lambda: fixed_now,
    )


@pytest.fixture
def clock_service(directory, store, audit, fixed_now) -> ClockService:
    return ClockService(DirectoryService(directory), store, audit, clock=lambda: fixed_now)


@pytest.fixture
def app(monkeypatch, directory, reconciliation_service, clock_service):
    monkeypatch.setenv("APP_ENV", "testing")
    container = SimpleNamespace(
        directory_service=DirectoryService(directory),
        clock_service=clock_service,
        reconciliation_service=reconciliation_service,
    )
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()
