from __future__ import annotations

from enum import Enum


class EntrySource(str, Enum):
    """Nguồn gốc bản ghi chấm công: ghi trực tiếp hay đồng bộ từ hàng đợi offline."""

    ONLINE = "online"
    OFFLINE = "offline"


class OutcomeKind(str, Enum):
    """Kết quả xử lý từng sự kiện trong một batch đồng bộ."""

    SUCCESS = "success"
    DUPLICATE = "duplicate"
    ENTITY_NOT_FOUND = "entity_not_found"
    REJECTED = "rejected"

    @property
    def needs_correction(self) -> bool:
        return self in (OutcomeKind.ENTITY_NOT_FOUND, OutcomeKind.REJECTED)


class AuditAction(str, Enum):
    OFFLINE_SYNC = "OFFLINE_SYNC"
    ONLINE_CLOCK_IN = "ONLINE_CLOCK_IN"
    ONLINE_CLOCK_OUT = "ONLINE_CLOCK_OUT"


class ConnectivityState(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class CaptureStatus(str, Enum):
    """Client-side fate of a single clock action."""

    SUBMITTED = "SUBMITTED"
    QUEUED = "QUEUED"
    REJECTED = "REJECTED"
    DROPPED = "DROPPED"
