from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_db_utc
from ..core.constants import DEFAULT_CLOCK_SKEW_THRESHOLD_MINUTES


@dataclass(frozen=True)
class SkewDecision:
    flagged: bool
    reason: Optional[str] = None


@dataclass
class ClockSkewPolicy:
    """Flag entries whose capture time drifts too far from server time.

    Flagging never blocks a commit; it only marks the entry for review.
    """

    threshold_minutes: float = DEFAULT_CLOCK_SKEW_THRESHOLD_MINUTES

    def decide(self, *, server_now: datetime, captured_at: Optional[datetime]) -> SkewDecision:
        if captured_at is None:
            return SkewDecision(flagged=True, reason="Capture time missing; clock skew could not be verified")

        # Naive values are taken as UTC.
        skew_minutes = abs((to_db_utc(server_now) - to_db_utc(captured_at)).total_seconds()) / 60
        if skew_minutes > self.threshold_minutes:
            return SkewDecision(
                flagged=True,
                reason=(
                    f"Clock skew of {skew_minutes:.1f} minutes exceeds "
                    f"{self.threshold_minutes:g} minute threshold"
                ),
            )
        return SkewDecision(flagged=False)
