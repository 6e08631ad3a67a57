from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from ..common.datetime_utils import now_utc
from ..common.validators import optional_text
from ..core.enums import CaptureStatus
from ..core.exceptions import QueueStorageError, SubmissionRejectedError, TransientTransportError, ValidationError
from ..entries.model import PendingEvent
from .api import SyncApiClient
from .connectivity import ConnectivityMonitor
from .repository import EventQueue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaptureResult:
    status: CaptureStatus
    event: PendingEvent
    entry: Optional[dict[str, Any]] = None
    message: Optional[str] = None


class ClockClient:
    """Kiosk-side clock actions: submit directly when online, queue otherwise."""

    def __init__(
        self,
        api: SyncApiClient,
        queue: EventQueue,
        monitor: ConnectivityMonitor,
        *,
        terminal_code: Optional[str] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._api = api
        self._queue = queue
        self._monitor = monitor
        self._terminal_code = terminal_code
        self._clock = clock

    def clock_in(self, employee_code: str, *, notes: Optional[str] = None) -> CaptureResult:
        now = self._clock()
        return self.record(self._event(employee_code, notes, clock_in=now))

    def clock_out(self, employee_code: str, *, notes: Optional[str] = None) -> CaptureResult:
        now = self._clock()
        return self.record(self._event(employee_code, notes, clock_out=now))

    def _event(self, employee_code: str, notes: Optional[str], **times: datetime) -> PendingEvent:
        code = optional_text(employee_code)
        if not code:
            raise ValidationError("employee code is required")
        return PendingEvent(human_employee_id=code, human_terminal_id=self._terminal_code, notes=notes, **times)

    def record(self, event: PendingEvent) -> CaptureResult:
        event = event.with_captured_at(self._clock())

        if not self._monitor.is_online:
            return self._enqueue(event)

        try:
            entry = self._api.submit_entry(event.to_payload())
        except SubmissionRejectedError as e:
            logger.info("Clock event for %s rejected (HTTP %s): %s", event.human_employee_id, e.status_code, e)
            return CaptureResult(CaptureStatus.REJECTED, event, message=str(e))
        except TransientTransportError as e:
            logger.warning("Direct submit failed, queueing: %s", e)
            self._monitor.report(False)
            return self._enqueue(event)

        return CaptureResult(CaptureStatus.SUBMITTED, event, entry=entry)

    def _enqueue(self, event: PendingEvent) -> CaptureResult:
        try:
            self._queue.append(event)
        except QueueStorageError as e:
            return CaptureResult(CaptureStatus.DROPPED, event, message=str(e))
        logger.info("Queued offline clock event for %s", event.human_employee_id)
        return CaptureResult(CaptureStatus.QUEUED, event)
