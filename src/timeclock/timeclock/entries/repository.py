from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol
from uuid import UUID

from .model import CanonicalEntry


class EventStore(Protocol):
    """Giao diện kho bản ghi chấm công chính thức.

    The store enforces a unique key on (employee_ref, clock_in). `insert`
    raises DuplicateEntryError when that key is violated and StoreCommitError
    for any other store-level failure.
    """

    def find_by_employee_and_clock_in(self, employee_ref: UUID, clock_in: datetime) -> Optional[CanonicalEntry]:
        raise NotImplementedError

    def find_by_employee_and_clock_out(self, employee_ref: UUID, clock_out: datetime) -> Optional[CanonicalEntry]:
        raise NotImplementedError

    def insert(self, entry: CanonicalEntry) -> CanonicalEntry:
        raise NotImplementedError

    def find_latest_open(self, employee_ref: UUID) -> Optional[CanonicalEntry]:
        raise NotImplementedError

    def close_entry(
        self,
        *,
        entry_id: UUID,
        clock_out: datetime,
        notes: Optional[str] = None,
        flag_reason: Optional[str] = None,
    ) -> bool:
        """Set clock_out on an open entry; False when it was already closed.

        A non-empty `flag_reason` also marks the entry flagged.
        """
        raise NotImplementedError
