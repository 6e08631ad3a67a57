from __future__ import annotations

import logging
import socket
import threading
from typing import Callable, Optional
from urllib.parse import urlparse

from ..core.constants import DEFAULT_CONNECTIVITY_CHECK_INTERVAL, DEFAULT_CONNECTIVITY_PROBE_TIMEOUT
from ..core.enums import ConnectivityState

logger = logging.getLogger(__name__)

Probe = Callable[[], bool]


def tcp_probe(host: str, port: int, timeout: float = DEFAULT_CONNECTIVITY_PROBE_TIMEOUT) -> Probe:
    """Reachability check: a TCP connect to host:port within `timeout`."""

    def probe() -> bool:
        try:
            with socket.create_connection((host, port), timeout=timeout):
                return True
        except OSError:
            return False

    return probe


def probe_for_url(url: str, timeout: float = DEFAULT_CONNECTIVITY_PROBE_TIMEOUT) -> Probe:
    parsed = urlparse(url)
    port = parsed.port or (443 if parsed.scheme == "https" else 80)
    return tcp_probe(parsed.hostname or "localhost", port, timeout)


class ConnectivityMonitor:
    """Two-state online/offline observable.

    State changes come from `report()` (an external reachability signal) or
    from `poll()`, which runs the probe. The subscriber is called once per
    offline->online transition.
    """

    def __init__(
        self,
        probe: Optional[Probe] = None,
        *,
        check_interval: float = DEFAULT_CONNECTIVITY_CHECK_INTERVAL,
        initial_state: ConnectivityState = ConnectivityState.OFFLINE,
    ):
        self._probe = probe
        self._check_interval = check_interval
        self._state = initial_state
        self._callback: Optional[Callable[[], None]] = None
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> ConnectivityState:
        with self._lock:
            return self._state

    @property
    def is_online(self) -> bool:
        return self.state == ConnectivityState.ONLINE

    def subscribe(self, callback: Callable[[], None]) -> None:
        self._callback = callback

    def report(self, online: bool) -> bool:
        """Record an observed state; returns True on an offline->online transition."""
        new_state = ConnectivityState.ONLINE if online else ConnectivityState.OFFLINE
        with self._lock:
            previous = self._state
            self._state = new_state

        if previous == new_state:
            return False

        logger.info("Connectivity changed: %s -> %s", previous.value, new_state.value)
        if new_state != ConnectivityState.ONLINE:
            return False

        callback = self._callback
        if callback is not None:
            try:
                callback()
            except Exception as exc:
                logger.warning("Connectivity callback failed: %s", exc)
        return True

    def poll(self) -> ConnectivityState:
        if self._probe is None:
            return self.state
        try:
            online = bool(self._probe())
        except Exception as exc:
            logger.debug("Connectivity probe failed: %s", exc)
            online = False
        self.report(online)
        return self.state

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._monitor_loop, daemon=True, name="connectivity-monitor")
        self._thread.start()
        logger.info("ConnectivityMonitor started (interval=%.0fs)", self._check_interval)

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None

    def _monitor_loop(self) -> None:
        while not self._stop_event.is_set():
            self.poll()
            self._stop_event.wait(self._check_interval)
