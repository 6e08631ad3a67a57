from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from mysql.connector import errors as mysql_errors

from ..common.datetime_utils import from_db_utc, to_db_utc
from ..core.enums import EntrySource
from ..core.exceptions import DuplicateEntryError, StoreCommitError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import CanonicalEntry
from .repository import EventStore

_COLUMNS = "id, employee_id, terminal_id, clock_in, clock_out, notes, source, flagged, flag_reason, synced_at"


def _row_to_entry(r: Dict[str, Any]) -> CanonicalEntry:
    return CanonicalEntry(
        id=UUID(r["id"]),
        employee_ref=UUID(r["employee_id"]),
        terminal_ref=UUID(r["terminal_id"]) if r.get("terminal_id") else None,
        clock_in=from_db_utc(r["clock_in"]),
        clock_out=from_db_utc(r.get("clock_out")),
        notes=r.get("notes"),
        source=EntrySource(r["source"]),
        flagged=bool(r.get("flagged")),
        flag_reason=r.get("flag_reason"),
        synced_at=from_db_utc(r.get("synced_at")),
    )


class MySQLEventStore(EventStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_employee_and_clock_in(self, employee_ref: UUID, clock_in: datetime) -> Optional[CanonicalEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM clock_entries
                WHERE employee_id=%s AND clock_in=%s
                """,
                (str(employee_ref), to_db_utc(clock_in)),
            )
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def find_by_employee_and_clock_out(self, employee_ref: UUID, clock_out: datetime) -> Optional[CanonicalEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM clock_entries
                WHERE employee_id=%s AND clock_out=%s
                LIMIT 1
                """,
                (str(employee_ref), to_db_utc(clock_out)),
            )
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def insert(self, entry: CanonicalEntry) -> CanonicalEntry:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    INSERT INTO clock_entries({_COLUMNS})
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        str(entry.id),
                        str(entry.employee_ref),
                        str(entry.terminal_ref) if entry.terminal_ref else None,
                        to_db_utc(entry.clock_in),
                        to_db_utc(entry.clock_out) if entry.clock_out else None,
                        entry.notes,
                        entry.source.value,
                        int(entry.flagged),
                        entry.flag_reason,
                        to_db_utc(entry.synced_at) if entry.synced_at else None,
                    ),
                )
        except mysql_errors.Error as e:
            if is_duplicate_key(e):
                raise DuplicateEntryError(str(e.msg)) from e
            raise StoreCommitError(str(e.msg or e)) from e
        return entry

    def find_latest_open(self, employee_ref: UUID) -> Optional[CanonicalEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM clock_entries
                WHERE employee_id=%s AND clock_out IS NULL
                ORDER BY clock_in DESC
                LIMIT 1
                """,
                (str(employee_ref),),
            )
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def close_entry(
        self,
        *,
        entry_id: UUID,
        clock_out: datetime,
        notes: Optional[str] = None,
        flag_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE clock_entries
                SET clock_out=%s,
                    notes=COALESCE(%s, notes),
                    flagged=IF(%s IS NULL, flagged, 1),
                    flag_reason=COALESCE(%s, flag_reason)
                WHERE id=%s AND clock_out IS NULL
                """,
                (to_db_utc(clock_out), notes, flag_reason, flag_reason, str(entry_id)),
            )
            return cur.rowcount > 0
