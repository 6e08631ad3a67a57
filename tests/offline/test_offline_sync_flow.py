from __future__ import annotations

from datetime import timedelta

from src.timeclock.timeclock.core.enums import CaptureStatus, EntrySource
from src.timeclock.timeclock.offline.client import ClockClient
from src.timeclock.timeclock.offline.sync import SyncCoordinator


def test_queued_events_reach_server_on_reconnect(server_api, queue, offline_monitor, store, fixed_now):
    times = iter([fixed_now - timedelta(minutes=m) for m in (30, 30, 20, 20, 10, 10)])
    client = ClockClient(server_api, queue, offline_monitor, terminal_code="T1", clock=lambda: next(times))
    coordinator = SyncCoordinator(queue, server_api)
    offline_monitor.subscribe(coordinator.trigger)

    for code in ("E1", "E2", "E9"):
        assert client.clock_in(code).status == CaptureStatus.QUEUED

    offline_monitor.report(True)
    coordinator.wait(timeout=5)

    assert queue.count() == 0
    assert sorted(e.source for e in store.entries.values()) == [EntrySource.OFFLINE, EntrySource.OFFLINE]
    flagged = {e.employee_ref: e.flag_reason for e in store.entries.values()}
    assert all(reason and reason.startswith("Clock skew of") for reason in flagged.values())


def test_resync_after_lost_response_is_idempotent(server_api, queue, offline_monitor, store, fixed_now):
    client = ClockClient(server_api, queue, offline_monitor, clock=lambda: fixed_now)
    client.clock_in("E1")
    event = queue.peek_all()[0].event
    coordinator = SyncCoordinator(queue, server_api)

    first = coordinator.sync_now()
    queue.append(event)
    second = coordinator.sync_now()

    assert (first.synced, first.duplicates) == (1, 0)
    assert (second.synced, second.duplicates) == (0, 1)
    assert len(store.entries) == 1
    assert queue.count() == 0


def test_clock_out_with_lost_response_is_not_applied_twice(
    server_api, flask_network, queue, online_monitor, store, fixed_now
):
    start = fixed_now - timedelta(hours=1, seconds=5)
    times = iter([start, start, fixed_now, fixed_now])
    client = ClockClient(server_api, queue, online_monitor, clock=lambda: next(times))

    assert client.clock_in("E1").status == CaptureStatus.SUBMITTED
    flask_network.lose_next_response = True
    assert client.clock_out("E1").status == CaptureStatus.QUEUED

    report = SyncCoordinator(queue, server_api).sync_now()

    assert (report.synced, report.duplicates) == (0, 1)
    (entry,) = store.entries.values()
    assert entry.clock_in == start
    assert entry.clock_out == fixed_now
    assert queue.count() == 0
