from __future__ import annotations


def test_clock_in_returns_201(client, store):
    resp = client.post(
        "/clock-entries",
        json={"humanEmployeeId": "E1", "humanTerminalId": "T1", "clockIn": "2024-01-15T09:00:00Z"},
    )

    assert resp.status_code == 201
    entry = resp.get_json()["entry"]
    assert entry["source"] == "online"
    assert entry["clockIn"] == "2024-01-15T09:00:00Z"
    assert len(store.entries) == 1


def test_duplicate_clock_in_returns_409(client):
    payload = {"humanEmployeeId": "E1", "clockIn": "2024-01-15T09:00:00Z"}
    client.post("/clock-entries", json=payload)

    resp = client.post("/clock-entries", json=payload)

    assert resp.status_code == 409
    assert resp.get_json() == {"error": "Duplicate entry detected"}


def test_unknown_terminal_returns_404(client):
    resp = client.post(
        "/clock-entries",
        json={"humanEmployeeId": "E1", "humanTerminalId": "T9", "clockIn": "2024-01-15T09:00:00Z"},
    )

    assert resp.status_code == 404
    assert resp.get_json() == {"error": "terminal not found: T9", "which": "terminal"}


def test_clock_out_without_clock_in_returns_400(client):
    resp = client.post("/clock-entries", json={"humanEmployeeId": "E2", "clockOut": "2024-01-15T17:00:00Z"})

    assert resp.status_code == 400
    assert "not currently clocked in" in resp.get_json()["error"]


def test_invalid_body_returns_400(client):
    assert client.post("/clock-entries", json=["E1"]).status_code == 400
    resp = client.post("/clock-entries", json={"humanEmployeeId": "E1", "clockIn": 42})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "invalid timestamp: clockIn"}
