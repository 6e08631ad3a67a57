from __future__ import annotations

import pytest
import requests

from src.timeclock.timeclock.offline.cache import CacheStorage, CachingAdapter

SERVER = "http://timeclock.test"
SHELL = b"<html><body>Time clock</body></html>"


@pytest.fixture
def storage(local_store):
    return CacheStorage(local_store)


@pytest.fixture
def adapter(storage, fake_network):
    fake_network.route("GET", "/", 200, SHELL, {"Content-Type": "text/html"})
    fake_network.route("GET", "/manifest.json", 200, b'{"name": "Time Clock"}', {"Content-Type": "application/json"})
    fake_network.route("GET", "/static/app.js", 200, b"console.log('kiosk')")
    fake_network.route(
        "GET", "/api/employees", 200, b'{"employees": [{"employeeCode": "E1"}]}', {"Content-Type": "application/json"}
    )
    return CachingAdapter(storage, SERVER, generation="time-tracker-v1", network=fake_network)


@pytest.fixture
def session(adapter):
    s = requests.Session()
    s.mount(SERVER + "/", adapter)
    return s


def test_cached_asset_is_served_without_network(session, fake_network):
    first = session.get(SERVER + "/static/app.js")
    calls_after_first = len(fake_network.calls)

    second = session.get(SERVER + "/static/app.js")

    assert first.status_code == second.status_code == 200
    assert second.content == b"console.log('kiosk')"
    assert len(fake_network.calls) == calls_after_first


def test_cached_api_read_survives_going_offline(session, fake_network):
    session.get(SERVER + "/api/employees")
    fake_network.online = False

    resp = session.get(SERVER + "/api/employees")

    assert resp.status_code == 200
    assert resp.json()["employees"][0]["employeeCode"] == "E1"


def test_uncached_request_offline_gets_503(session, fake_network):
    fake_network.online = False

    resp = session.get(SERVER + "/static/missing.css")

    assert resp.status_code == 503
    assert resp.text == "Offline"


def test_navigation_offline_falls_back_to_cached_shell(adapter, session, fake_network):
    adapter.install(session, ["/"])
    fake_network.online = False

    resp = session.get(SERVER + "/history", headers={"Sec-Fetch-Mode": "navigate"})

    assert resp.status_code == 200
    assert resp.content == SHELL


def test_navigation_offline_without_shell_gets_503(session, fake_network):
    fake_network.online = False

    resp = session.get(SERVER + "/history", headers={"Sec-Fetch-Mode": "navigate"})

    assert resp.status_code == 503


def test_writes_pass_through(session, fake_network, storage):
    fake_network.route("POST", "/sync", 200, b'{"results": []}')

    resp = session.post(SERVER + "/sync", json={"entries": []})

    assert resp.status_code == 200
    assert ("POST", "/sync") in fake_network.calls
    assert storage.match("time-tracker-v1", "POST", SERVER + "/sync") is None

    fake_network.online = False
    with pytest.raises(requests.ConnectionError):
        session.post(SERVER + "/sync", json={"entries": []})


def test_error_responses_are_not_stored(session, fake_network):
    fake_network.route("GET", "/api/terminals", 500, b"boom")

    session.get(SERVER + "/api/terminals")
    session.get(SERVER + "/api/terminals")

    assert fake_network.calls.count(("GET", "/api/terminals")) == 2


def test_paths_off_the_allow_list_are_not_stored(session, fake_network):
    fake_network.route("GET", "/api/reports", 200, b"{}")

    session.get(SERVER + "/api/reports")
    session.get(SERVER + "/api/reports")

    assert fake_network.calls.count(("GET", "/api/reports")) == 2


def test_cross_origin_requests_are_not_intercepted(adapter, storage, fake_network):
    s = requests.Session()
    s.mount("http://", adapter)
    fake_network.route("GET", "/static/lib.js", 200, b"lib")

    s.get("http://cdn.example.test/static/lib.js")

    assert storage.generations() == []


def test_install_precaches_shell(adapter, session, storage, fake_network):
    stored = adapter.install(session, ["/", "/manifest.json", "/icon-192.png"])

    assert stored == 2
    assert storage.match("time-tracker-v1", "GET", SERVER + "/").body == SHELL
    assert storage.match("time-tracker-v1", "GET", SERVER + "/icon-192.png") is None


def test_activate_removes_other_generations(adapter, session, storage):
    old = CachingAdapter(storage, SERVER, generation="time-tracker-v0", network=adapter.network)
    old.install(session, ["/"])
    adapter.install(session, ["/"])
    assert storage.generations() == ["time-tracker-v0", "time-tracker-v1"]

    removed = adapter.activate()

    assert removed == ["time-tracker-v0"]
    assert storage.generations() == ["time-tracker-v1"]
