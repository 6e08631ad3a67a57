from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence
from uuid import UUID

from ..core.enums import OutcomeKind


@dataclass(frozen=True)
class SyncOutcome:
    """Kết quả đối soát của một sự kiện trong batch."""

    kind: OutcomeKind
    original_event: Dict[str, Any] = field(default_factory=dict)
    entry_id: Optional[UUID] = None
    which: Optional[str] = None
    reason: Optional[str] = None
    flagged: bool = False
    flag_reason: Optional[str] = None

    @classmethod
    def success(cls, original_event: Dict[str, Any], *, entry_id: UUID, flagged: bool, flag_reason: Optional[str]) -> "SyncOutcome":
        return cls(OutcomeKind.SUCCESS, original_event, entry_id=entry_id, flagged=flagged, flag_reason=flag_reason)

    @classmethod
    def duplicate(cls, original_event: Dict[str, Any]) -> "SyncOutcome":
        return cls(OutcomeKind.DUPLICATE, original_event, reason="Duplicate entry detected")

    @classmethod
    def not_found(cls, original_event: Dict[str, Any], *, which: str, human_id: Optional[str]) -> "SyncOutcome":
        return cls(
            OutcomeKind.ENTITY_NOT_FOUND,
            original_event,
            which=which,
            reason=f"{which.capitalize()} not found: {human_id}",
        )

    @classmethod
    def rejected(cls, original_event: Dict[str, Any], reason: str) -> "SyncOutcome":
        return cls(OutcomeKind.REJECTED, original_event, reason=reason)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {
            "entry": self.original_event,
            "success": self.kind == OutcomeKind.SUCCESS,
            "outcome": self.kind.value,
        }
        if self.kind == OutcomeKind.SUCCESS:
            out["entryId"] = str(self.entry_id)
            out["flagged"] = self.flagged
            if self.flag_reason:
                out["flagReason"] = self.flag_reason
        else:
            out["error"] = self.reason
        if self.which:
            out["which"] = self.which
        return out


@dataclass(frozen=True)
class SyncResult:
    outcomes: Sequence[SyncOutcome]

    def _count(self, *kinds: OutcomeKind) -> int:
        return sum(1 for o in self.outcomes if o.kind in kinds)

    @property
    def succeeded(self) -> int:
        return self._count(OutcomeKind.SUCCESS)

    @property
    def duplicates(self) -> int:
        return self._count(OutcomeKind.DUPLICATE)

    @property
    def failed(self) -> int:
        return self._count(OutcomeKind.ENTITY_NOT_FOUND, OutcomeKind.REJECTED)

    def to_dict(self) -> dict:
        return {
            "synced": self.succeeded,
            "duplicates": self.duplicates,
            "failed": self.failed,
            "results": [o.to_dict() for o in self.outcomes],
        }
