from __future__ import annotations

import json
import logging
import sqlite3
import time
from typing import Iterable, Sequence

from ..core.exceptions import QueueStorageError, ValidationError
from ..entries.model import PendingEvent
from .local_store import LocalStore
from .repository import EventQueue, QueuedEvent

logger = logging.getLogger(__name__)


class SQLiteEventQueue(EventQueue):
    def __init__(self, store: LocalStore):
        self._store = store
        self._create_tables()

    def _create_tables(self) -> None:
        with self._store.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS pending_events (
                    queue_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    payload TEXT NOT NULL,
                    enqueued_at REAL NOT NULL
                )
                """
            )

    def append(self, event: PendingEvent) -> None:
        """Persist one event in its own transaction.

        Raises QueueStorageError when the medium refuses the write; the event
        is dropped in that case and earlier entries are untouched.
        """
        try:
            with self._store.transaction() as conn:
                conn.execute(
                    "INSERT INTO pending_events (payload, enqueued_at) VALUES (?, ?)",
                    (json.dumps(event.to_payload()), time.time()),
                )
        except sqlite3.Error as e:
            logger.error("Dropped clock event for %s: %s", event.human_employee_id, e)
            raise QueueStorageError(str(e)) from e

    def peek_all(self) -> Sequence[QueuedEvent]:
        with self._store.transaction() as conn:
            rows = conn.execute("SELECT queue_id, payload FROM pending_events ORDER BY queue_id ASC").fetchall()
        pending: list[QueuedEvent] = []
        for r in rows:
            try:
                event = PendingEvent.from_payload(json.loads(r["payload"]))
            except (ValueError, TypeError, AttributeError, ValidationError) as e:
                # Left in place for inspection; it never blocks the rest of the queue.
                logger.error("Skipping unreadable queued event %s: %s", r["queue_id"], e)
                continue
            pending.append(QueuedEvent(queue_id=int(r["queue_id"]), event=event))
        return pending

    def remove_acknowledged(self, queue_ids: Iterable[int]) -> None:
        ids = [int(i) for i in queue_ids]
        if not ids:
            return
        placeholders = ",".join("?" * len(ids))
        with self._store.transaction() as conn:
            conn.execute(f"DELETE FROM pending_events WHERE queue_id IN ({placeholders})", ids)
        logger.debug("Removed %d acknowledged events", len(ids))

    def count(self) -> int:
        with self._store.transaction() as conn:
            return int(conn.execute("SELECT COUNT(*) FROM pending_events").fetchone()[0])
