from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..core.enums import OutcomeKind
from ..core.exceptions import TransientTransportError
from ..entries.model import PendingEvent
from .api import SyncApiClient
from .connectivity import ConnectivityMonitor
from .repository import EventQueue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorrectionNotice:
    """Sự kiện bị máy chủ từ chối, cần người dùng sửa lại."""

    event: PendingEvent
    outcome: OutcomeKind
    error: Optional[str] = None
    which: Optional[str] = None


@dataclass(frozen=True)
class SyncReport:
    submitted: int
    removed: int
    synced: int
    duplicates: int
    needs_correction: tuple[CorrectionNotice, ...] = field(default_factory=tuple)


def _outcome_of(result: dict) -> Optional[OutcomeKind]:
    raw = result.get("outcome")
    if raw is not None:
        try:
            return OutcomeKind(raw)
        except ValueError:
            return None
    # Servers that predate the outcome field only report success.
    if result.get("success") is True:
        return OutcomeKind.SUCCESS
    return None


class SyncCoordinator:
    """Drains the local queue into the server, one batch per run.

    At most one run is in flight; a trigger that arrives while a run holds
    the busy lock is a no-op. Entries leave the queue only after the server
    returned an explicit per-event outcome for them.
    """

    def __init__(
        self,
        queue: EventQueue,
        api: SyncApiClient,
        *,
        timeout: Optional[float] = None,
        monitor: Optional[ConnectivityMonitor] = None,
        on_report: Optional[Callable[[SyncReport], None]] = None,
    ):
        self._queue = queue
        self._api = api
        self._timeout = timeout
        self._monitor = monitor
        self._on_report = on_report
        self._busy = threading.Lock()
        self._worker: Optional[threading.Thread] = None

    @property
    def is_syncing(self) -> bool:
        return self._busy.locked()

    def on_report(self, listener: Optional[Callable[[SyncReport], None]]) -> None:
        self._on_report = listener

    def pending_count(self) -> int:
        return self._queue.count()

    def trigger(self) -> None:
        """Start a background run unless one is already in flight."""
        if not self._busy.acquire(blocking=False):
            logger.debug("Sync already in progress; trigger ignored")
            return
        worker = threading.Thread(target=self._run_and_release, daemon=True, name="sync-coordinator")
        self._worker = worker
        try:
            worker.start()
        except RuntimeError:
            self._busy.release()
            raise

    def wait(self, timeout: Optional[float] = None) -> None:
        worker = self._worker
        if worker is not None:
            worker.join(timeout)

    def sync_now(self) -> Optional[SyncReport]:
        if not self._busy.acquire(blocking=False):
            logger.debug("Sync already in progress")
            return None
        return self._run_and_release()

    def _run_and_release(self) -> Optional[SyncReport]:
        deferred = False
        try:
            report = self._run()
            deferred = report is not None and report.removed < report.submitted
            return report
        except TransientTransportError:
            deferred = True
            return None
        except Exception:
            logger.exception("Sync run failed")
            return None
        finally:
            self._busy.release()
            if deferred and self._monitor is not None:
                # Marked offline so the next successful probe counts as a reconnect and retries.
                self._monitor.report(False)

    def _run(self) -> Optional[SyncReport]:
        snapshot = list(self._queue.peek_all())
        if not snapshot:
            return None

        logger.info("Syncing %d pending clock events", len(snapshot))
        try:
            results = self._api.submit_batch([q.event.to_payload() for q in snapshot], timeout=self._timeout)
        except TransientTransportError as e:
            logger.warning("Sync deferred, queue kept (%d events): %s", len(snapshot), e)
            raise

        acknowledged: list[int] = []
        corrections: list[CorrectionNotice] = []
        synced = duplicates = 0
        for queued, result in zip(snapshot, results):
            outcome = _outcome_of(result)
            if outcome is None:
                logger.warning("No usable outcome for queued event %d; kept for retry", queued.queue_id)
                continue
            acknowledged.append(queued.queue_id)
            if outcome == OutcomeKind.SUCCESS:
                synced += 1
            elif outcome == OutcomeKind.DUPLICATE:
                duplicates += 1
            elif outcome.needs_correction:
                corrections.append(
                    CorrectionNotice(
                        event=queued.event, outcome=outcome, error=result.get("error"), which=result.get("which")
                    )
                )

        self._queue.remove_acknowledged(acknowledged)

        report = SyncReport(
            submitted=len(snapshot),
            removed=len(acknowledged),
            synced=synced,
            duplicates=duplicates,
            needs_correction=tuple(corrections),
        )
        logger.info(
            "Sync complete: synced=%d duplicates=%d needs_correction=%d",
            report.synced,
            report.duplicates,
            len(report.needs_correction),
        )
        for notice in corrections:
            logger.warning(
                "Clock event for %s needs correction: %s", notice.event.human_employee_id, notice.error
            )

        listener = self._on_report
        if listener is not None:
            try:
                listener(report)
            except Exception as exc:
                logger.warning("Sync report listener failed: %s", exc)
        return report
