from __future__ import annotations

from datetime import datetime, timedelta, timezone

from src.timeclock.timeclock.reconciliation.skew import ClockSkewPolicy

SERVER_NOW = datetime(2024, 1, 15, 9, 0, 0, tzinfo=timezone.utc)


def test_exact_threshold_is_not_flagged():
    decision = ClockSkewPolicy(threshold_minutes=2).decide(
        server_now=SERVER_NOW, captured_at=SERVER_NOW - timedelta(minutes=2)
    )

    assert decision.flagged is False


def test_skew_is_absolute():
    policy = ClockSkewPolicy(threshold_minutes=2)

    ahead = policy.decide(server_now=SERVER_NOW, captured_at=SERVER_NOW + timedelta(minutes=3))
    behind = policy.decide(server_now=SERVER_NOW, captured_at=SERVER_NOW - timedelta(minutes=3))

    assert ahead.flagged and behind.flagged
    assert ahead.reason == behind.reason == "Clock skew of 3.0 minutes exceeds 2 minute threshold"


def test_missing_capture_time_is_flagged():
    decision = ClockSkewPolicy().decide(server_now=SERVER_NOW, captured_at=None)

    assert decision.flagged is True
    assert decision.reason == "Capture time missing; clock skew could not be verified"


def test_naive_capture_time_is_read_as_utc():
    decision = ClockSkewPolicy(threshold_minutes=2).decide(
        server_now=SERVER_NOW, captured_at=datetime(2024, 1, 15, 9, 5, 0)
    )

    assert decision.flagged is True
    assert decision.reason == "Clock skew of 5.0 minutes exceeds 2 minute threshold"
