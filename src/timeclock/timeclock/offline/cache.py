from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Optional, Sequence
from urllib.parse import urljoin, urlsplit

import requests
from requests.adapters import BaseAdapter, HTTPAdapter
from requests.structures import CaseInsensitiveDict
from requests.utils import get_encoding_from_headers

from ..core.constants import (
    CLOCK_ENTRIES_ENDPOINT,
    DEFAULT_CACHE_GENERATION,
    DEFAULT_CACHEABLE_PREFIXES,
    DEFAULT_OFFLINE_FALLBACK_PATH,
    SYNC_ENDPOINT,
)
from .local_store import LocalStore

logger = logging.getLogger(__name__)

_WRITE_ENDPOINTS = (SYNC_ENDPOINT, CLOCK_ENTRIES_ENDPOINT)


@dataclass(frozen=True)
class CachedResponse:
    status: int
    headers: dict
    body: bytes
    url: str

    def to_response(self, request: requests.PreparedRequest) -> requests.Response:
        return _build_response(request, self.status, self.headers, self.body, reason="OK")


def _build_response(
    request: requests.PreparedRequest, status: int, headers: dict, body: bytes, *, reason: str
) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response.headers = CaseInsensitiveDict(headers)
    response._content = body
    response.encoding = get_encoding_from_headers(response.headers)
    response.url = request.url
    response.request = request
    return response


def _origin(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}".lower()


class CacheStorage:
    """Named cache generations kept in the terminal's local database."""

    def __init__(self, store: LocalStore):
        self._store = store
        with self._store.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS response_cache (
                    generation TEXT NOT NULL,
                    method TEXT NOT NULL,
                    url TEXT NOT NULL,
                    status INTEGER NOT NULL,
                    headers TEXT NOT NULL,
                    body BLOB NOT NULL,
                    stored_at REAL NOT NULL,
                    PRIMARY KEY (generation, method, url)
                )
                """
            )

    def put(self, generation: str, method: str, url: str, response: requests.Response) -> None:
        with self._store.transaction() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO response_cache (generation, method, url, status, headers, body, stored_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    generation,
                    method.upper(),
                    url,
                    int(response.status_code),
                    json.dumps(dict(response.headers)),
                    response.content or b"",
                    time.time(),
                ),
            )

    def match(self, generation: str, method: str, url: str) -> Optional[CachedResponse]:
        with self._store.transaction() as conn:
            row = conn.execute(
                "SELECT status, headers, body, url FROM response_cache WHERE generation=? AND method=? AND url=?",
                (generation, method.upper(), url),
            ).fetchone()
        if row is None:
            return None
        return CachedResponse(
            status=int(row["status"]), headers=json.loads(row["headers"]), body=bytes(row["body"]), url=row["url"]
        )

    def generations(self) -> list[str]:
        with self._store.transaction() as conn:
            rows = conn.execute("SELECT DISTINCT generation FROM response_cache ORDER BY generation").fetchall()
        return [r["generation"] for r in rows]

    def delete_generation(self, generation: str) -> None:
        with self._store.transaction() as conn:
            conn.execute("DELETE FROM response_cache WHERE generation=?", (generation,))


class CachingAdapter(BaseAdapter):
    """Transport adapter serving same-origin GETs cache-first.

    Mounted on the terminal session for the server origin. Non-GET and
    cross-origin requests go straight to the network. When the network is
    unreachable a navigation falls back to the cached fallback document and
    anything else gets a synthesized 503.
    """

    def __init__(
        self,
        storage: CacheStorage,
        origin: str,
        *,
        generation: str = DEFAULT_CACHE_GENERATION,
        cacheable_prefixes: Sequence[str] = DEFAULT_CACHEABLE_PREFIXES,
        fallback_path: str = DEFAULT_OFFLINE_FALLBACK_PATH,
        network: Optional[BaseAdapter] = None,
    ):
        super().__init__()
        self.network = network or HTTPAdapter()
        self.storage = storage
        self.origin = _origin(origin)
        self.generation = generation
        self.cacheable_prefixes = tuple(cacheable_prefixes)
        self.fallback_path = fallback_path

    def is_cacheable_path(self, path: str) -> bool:
        if path.startswith(_WRITE_ENDPOINTS):
            return False
        return path.startswith(self.cacheable_prefixes)

    def _intercepts(self, request: requests.PreparedRequest) -> bool:
        return request.method == "GET" and _origin(request.url) == self.origin

    def _should_store(self, request: requests.PreparedRequest, response: requests.Response) -> bool:
        if not 200 <= response.status_code < 300:
            return False
        if response.history or _origin(response.url or request.url) != self.origin:
            return False
        return self.is_cacheable_path(urlsplit(request.url).path or "/")

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        if not self._intercepts(request):
            return self.network.send(request, stream=stream, timeout=timeout, verify=verify, cert=cert, proxies=proxies)

        cached = self.storage.match(self.generation, request.method, request.url)
        if cached is not None:
            logger.debug("Cache hit %s", request.url)
            return cached.to_response(request)

        try:
            response = self.network.send(request, stream=stream, timeout=timeout, verify=verify, cert=cert, proxies=proxies)
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.warning("Network unavailable for %s: %s", request.url, exc)
            return self._offline_response(request)

        if self._should_store(request, response):
            self.storage.put(self.generation, request.method, request.url, response)
        return response

    def _offline_response(self, request: requests.PreparedRequest) -> requests.Response:
        if request.headers.get("Sec-Fetch-Mode") == "navigate":
            fallback = self.storage.match(self.generation, "GET", urljoin(self.origin + "/", self.fallback_path))
            if fallback is not None:
                return fallback.to_response(request)
        return _build_response(
            request, 503, {"Content-Type": "text/plain"}, b"Offline", reason="Service Unavailable"
        )

    def install(self, session: requests.Session, precache_paths: Sequence[str], *, timeout: float = 15) -> int:
        """Pre-cache the application shell into the current generation.

        Returns the number of paths stored. Paths that fail to load are
        logged and skipped.
        """
        stored = 0
        for path in precache_paths:
            url = urljoin(self.origin + "/", path)
            request = session.prepare_request(requests.Request("GET", url))
            try:
                response = self.network.send(request, timeout=timeout)
            except (requests.ConnectionError, requests.Timeout) as exc:
                logger.warning("Pre-cache failed for %s: %s", path, exc)
                continue
            if 200 <= response.status_code < 300:
                self.storage.put(self.generation, "GET", request.url, response)
                stored += 1
            else:
                logger.warning("Pre-cache skipped %s: HTTP %s", path, response.status_code)
        logger.info("Installed cache generation %s (%d/%d paths)", self.generation, stored, len(precache_paths))
        return stored

    def activate(self) -> list[str]:
        """Make this adapter's generation the only one; returns the generations deleted."""
        removed = [g for g in self.storage.generations() if g != self.generation]
        for generation in removed:
            self.storage.delete_generation(generation)
        if removed:
            logger.info("Deleted stale cache generations: %s", ", ".join(removed))
        return removed

    def close(self) -> None:
        self.network.close()
