"""Terminal-side assembly: local store, queue, cache, monitor and sync.

Mirrors `container.build_container` for the kiosk process. Nothing here
touches MySQL or Flask.
"""
from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from dotenv import load_dotenv

from config import get_settings_module

from .common.logging_utils import configure_logging
from .core import constants
from .core.enums import ConnectivityState
from .offline.api import SyncApiClient
from .offline.cache import CacheStorage, CachingAdapter
from .offline.client import ClockClient
from .offline.connectivity import ConnectivityMonitor, probe_for_url
from .offline.local_store import LocalStore
from .offline.sqlite_event_queue import SQLiteEventQueue
from .offline.sync import SyncCoordinator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TerminalAgent:
    store: LocalStore
    queue: SQLiteEventQueue
    cache: CachingAdapter
    session: requests.Session
    api: SyncApiClient
    monitor: ConnectivityMonitor
    coordinator: SyncCoordinator
    clock_client: ClockClient

    precache_paths: tuple = constants.DEFAULT_PRECACHE_PATHS

    def start(self) -> None:
        """Wire the monitor to the coordinator, refresh the cache, start probing."""
        self.monitor.subscribe(self.coordinator.trigger)
        if self.monitor.poll() == ConnectivityState.ONLINE:
            self.cache.install(self.session, self.precache_paths)
            self.cache.activate()
        self.monitor.start()
        logger.info("Terminal started (pending=%d)", self.coordinator.pending_count())

    def stop(self) -> None:
        self.monitor.stop()
        self.coordinator.wait(timeout=5)
        self.session.close()
        self.store.close()


def build_terminal(settings=None, *, terminal_code: Optional[str] = None) -> TerminalAgent:
    if settings is None:
        settings = importlib.import_module(get_settings_module())

    server_url = str(getattr(settings, "SYNC_SERVER_URL"))
    timeout = float(getattr(settings, "SYNC_TIMEOUT_SECONDS", constants.DEFAULT_SYNC_TIMEOUT_SECONDS))

    store = LocalStore(str(getattr(settings, "OFFLINE_DB_PATH", constants.DEFAULT_OFFLINE_DB_PATH)))
    queue = SQLiteEventQueue(store)

    cache = CachingAdapter(
        CacheStorage(store),
        server_url,
        generation=str(getattr(settings, "CACHE_GENERATION", constants.DEFAULT_CACHE_GENERATION)),
        cacheable_prefixes=tuple(getattr(settings, "CACHEABLE_PREFIXES", constants.DEFAULT_CACHEABLE_PREFIXES)),
        fallback_path=str(getattr(settings, "OFFLINE_FALLBACK_PATH", constants.DEFAULT_OFFLINE_FALLBACK_PATH)),
    )
    session = requests.Session()
    session.mount(cache.origin + "/", cache)

    api = SyncApiClient(server_url, session, timeout=timeout)
    monitor = ConnectivityMonitor(
        probe_for_url(
            server_url,
            float(getattr(settings, "CONNECTIVITY_PROBE_TIMEOUT", constants.DEFAULT_CONNECTIVITY_PROBE_TIMEOUT)),
        ),
        check_interval=float(
            getattr(settings, "CONNECTIVITY_CHECK_INTERVAL", constants.DEFAULT_CONNECTIVITY_CHECK_INTERVAL)
        ),
    )
    coordinator = SyncCoordinator(queue, api, timeout=timeout, monitor=monitor)
    clock_client = ClockClient(
        api, queue, monitor, terminal_code=terminal_code or getattr(settings, "TERMINAL_CODE", None)
    )

    return TerminalAgent(
        store=store,
        queue=queue,
        cache=cache,
        session=session,
        api=api,
        monitor=monitor,
        coordinator=coordinator,
        clock_client=clock_client,
        precache_paths=tuple(getattr(settings, "PRECACHE_PATHS", constants.DEFAULT_PRECACHE_PATHS)),
    )


def run_terminal(terminal_code: Optional[str] = None) -> TerminalAgent:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(bool(getattr(settings, "DEBUG", False)))
    agent = build_terminal(settings, terminal_code=terminal_code)
    agent.start()
    return agent
