from __future__ import annotations

import logging
from typing import Any, Optional, Sequence
from urllib.parse import urljoin

import requests

from ..core.constants import CLOCK_ENTRIES_ENDPOINT, DEFAULT_SYNC_TIMEOUT_SECONDS, SYNC_ENDPOINT
from ..core.exceptions import SubmissionRejectedError, TransientTransportError

logger = logging.getLogger(__name__)


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}"


class SyncApiClient:
    """Wraps the server's write endpoints for one terminal session."""

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        *,
        timeout: float = DEFAULT_SYNC_TIMEOUT_SECONDS,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))

    def submit_batch(self, payloads: Sequence[dict], *, timeout: Optional[float] = None) -> list[dict[str, Any]]:
        """POST a batch to /sync and return one result per payload, in order.

        Raises TransientTransportError when no usable answer came back: a
        network failure or timeout, a non-200 status, or a result list that
        is malformed or does not match the batch length.
        """
        try:
            response = self.session.post(
                self._url(SYNC_ENDPOINT),
                json={"entries": list(payloads)},
                timeout=timeout if timeout is not None else self.timeout,
            )
        except requests.RequestException as e:
            raise TransientTransportError(f"sync request failed: {e}") from e

        if response.status_code != 200:
            raise TransientTransportError(f"sync returned HTTP {response.status_code}: {_error_message(response)}")

        try:
            body = response.json()
        except ValueError as e:
            raise TransientTransportError("sync response is not JSON") from e

        results = body.get("results") if isinstance(body, dict) else None
        if not isinstance(results, list) or not all(isinstance(r, dict) for r in results):
            raise TransientTransportError("sync response has no result list")
        if len(results) != len(payloads):
            raise TransientTransportError(
                f"sync returned {len(results)} results for {len(payloads)} entries"
            )
        return results

    def submit_entry(self, payload: dict) -> dict[str, Any]:
        """POST one clock event to /clock-entries; returns the created entry.

        4xx answers raise SubmissionRejectedError. Network failures and 5xx
        answers raise TransientTransportError.
        """
        try:
            response = self.session.post(self._url(CLOCK_ENTRIES_ENDPOINT), json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransientTransportError(f"clock request failed: {e}") from e

        if 400 <= response.status_code < 500:
            raise SubmissionRejectedError(_error_message(response), response.status_code)
        if response.status_code != 201:
            raise TransientTransportError(f"clock request returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError:
            return {}
        if not isinstance(body, dict):
            return {}
        return body.get("entry") or {}
