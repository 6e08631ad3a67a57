from __future__ import annotations

from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from src.timeclock.timeclock.core.enums import ConnectivityState
from src.timeclock.timeclock.offline.api import SyncApiClient
from src.timeclock.timeclock.offline.connectivity import ConnectivityMonitor
from src.timeclock.timeclock.offline.local_store import LocalStore
from src.timeclock.timeclock.offline.sqlite_event_queue import SQLiteEventQueue

SERVER = "http://timeclock.test"


def make_response(request, status: int, body: bytes = b"", headers: dict | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.headers = CaseInsensitiveDict(headers or {})
    response._content = body
    response.url = request.url
    response.request = request
    return response


class FakeNetwork(BaseAdapter):
    """Canned responses keyed by (method, path); raises ConnectionError when offline."""

    def __init__(self):
        super().__init__()
        self.online = True
        self.routes: dict[tuple[str, str], tuple[int, bytes, dict]] = {}
        self.calls: list[tuple[str, str]] = []

    def route(self, method: str, path: str, status: int = 200, body: bytes = b"", headers: dict | None = None):
        self.routes[(method, path)] = (status, body, headers or {"Content-Type": "text/plain"})

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        path = urlsplit(request.url).path or "/"
        self.calls.append((request.method, path))
        if not self.online:
            raise requests.ConnectionError("network unreachable")
        status, body, headers = self.routes.get((request.method, path), (404, b"Not Found", {}))
        return make_response(request, status, body, headers)

    def close(self):
        pass


class FlaskNetwork(BaseAdapter):
    """Forwards prepared requests to a Flask test client.

    With `lose_next_response` set, the next request reaches the app but the
    caller sees a timeout instead of the answer.
    """

    def __init__(self, app):
        super().__init__()
        self.client = app.test_client()
        self.online = True
        self.lose_next_response = False
        self.calls: list[tuple[str, str]] = []

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        parts = urlsplit(request.url)
        self.calls.append((request.method, parts.path))
        if not self.online:
            raise requests.ConnectionError("network unreachable")
        resp = self.client.open(
            parts.path,
            method=request.method,
            query_string=parts.query,
            data=request.body,
            headers={k: v for k, v in request.headers.items() if k.lower() != "content-length"},
        )
        if self.lose_next_response:
            self.lose_next_response = False
            raise requests.Timeout("read timed out")
        return make_response(request, resp.status_code, resp.get_data(), dict(resp.headers))

    def close(self):
        pass


@pytest.fixture
def local_store(tmp_path):
    store = LocalStore(str(tmp_path / "terminal.db"))
    yield store
    store.close()


@pytest.fixture
def queue(local_store):
    return SQLiteEventQueue(local_store)


@pytest.fixture
def fake_network():
    return FakeNetwork()


@pytest.fixture
def flask_network(app):
    return FlaskNetwork(app)


@pytest.fixture
def server_api(flask_network):
    session = requests.Session()
    session.mount(SERVER + "/", flask_network)
    return SyncApiClient(SERVER, session, timeout=2)


@pytest.fixture
def online_monitor():
    return ConnectivityMonitor(initial_state=ConnectivityState.ONLINE)


@pytest.fixture
def offline_monitor():
    return ConnectivityMonitor(initial_state=ConnectivityState.OFFLINE)
