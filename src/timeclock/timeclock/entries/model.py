from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Mapping, Optional
from uuid import UUID

from ..common.datetime_utils import to_iso
from ..common.validators import optional_text, optional_timestamp
from ..core.enums import EntrySource


@dataclass(frozen=True)
class PendingEvent:
    """Sự kiện chấm công do máy trạm ghi nhận (có thể khi mất mạng).

    Holds human-facing codes only; the terminal never learns canonical ids
    while offline. Fields are optional at this level so malformed input from
    the wire can still be represented and rejected per event.
    """

    human_employee_id: Optional[str]
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    captured_at: Optional[datetime] = None
    human_terminal_id: Optional[str] = None
    notes: Optional[str] = None

    @property
    def dedup_clock_in(self) -> Optional[datetime]:
        """Clock-in used for the (employee, clock_in) key.

        A clock-out captured without a matching clock-in is keyed on its
        clock-out time.
        """
        return self.clock_in or self.clock_out

    @property
    def is_clock_out_only(self) -> bool:
        """A clock-out with no clock-in of its own.

        Older terminals stamp clock_in = clock_out on such events; both forms
        count.
        """
        return self.clock_out is not None and (self.clock_in is None or self.clock_in == self.clock_out)

    def with_captured_at(self, captured_at: datetime) -> "PendingEvent":
        return replace(self, captured_at=captured_at)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PendingEvent":
        """Build from the camelCase wire form.

        Raises ValidationError when a timestamp field is present but unparseable.
        """
        return cls(
            human_employee_id=optional_text(payload.get("humanEmployeeId")),
            human_terminal_id=optional_text(payload.get("humanTerminalId")),
            clock_in=optional_timestamp(payload.get("clockIn"), "clockIn"),
            clock_out=optional_timestamp(payload.get("clockOut"), "clockOut"),
            notes=optional_text(payload.get("notes")),
            captured_at=optional_timestamp(payload.get("capturedAt"), "capturedAt"),
        )

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {
            "humanEmployeeId": self.human_employee_id,
            "clockIn": to_iso(self.clock_in),
            "capturedAt": to_iso(self.captured_at),
        }
        if self.human_terminal_id:
            payload["humanTerminalId"] = self.human_terminal_id
        if self.clock_out is not None:
            payload["clockOut"] = to_iso(self.clock_out)
        if self.notes:
            payload["notes"] = self.notes
        return payload


@dataclass(frozen=True)
class CanonicalEntry:
    """Thực thể miền (domain): Bản ghi chấm công chính thức phía máy chủ."""

    id: UUID
    employee_ref: UUID
    clock_in: datetime
    source: EntrySource
    terminal_ref: Optional[UUID] = None
    clock_out: Optional[datetime] = None
    notes: Optional[str] = None
    flagged: bool = False
    flag_reason: Optional[str] = None
    synced_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "employeeRef": str(self.employee_ref),
            "terminalRef": str(self.terminal_ref) if self.terminal_ref else None,
            "clockIn": to_iso(self.clock_in),
            "clockOut": to_iso(self.clock_out),
            "notes": self.notes,
            "source": self.source.value,
            "flagged": self.flagged,
            "flagReason": self.flag_reason,
            "syncedAt": to_iso(self.synced_at),
        }
