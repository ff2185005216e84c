"""Tests for the JSON API."""

from events.datetimes import InvalidFormat
from events.repository import EventRepo


def _create(client, **overrides):
    body = {"name": "Launch Party", "location": "Main Hall", "start": "2025-12-27T14:30", **overrides}
    resp = client.post("/api/events", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_dbcheck(client):
    assert client.get("/dbcheck").json() == {"db": "ok"}


def test_create_returns_display_fields(client):
    data = _create(client)
    assert data["id"] > 0
    assert data["start"] == "2025-12-27 14:30:00"
    assert data["start_formatted"] == "December 27, 2025 at 2:30 PM"
    assert data["start_short"] == "Dec 27, 2025 - 2:30 PM"
    assert data["start_date"] == "December 27, 2025"
    assert data["start_time"] == "2:30 PM"


def test_create_rejects_bad_start(client):
    resp = client.post("/api/events", json={"name": "x", "location": "y", "start": "2025-12-27 14:30"})
    assert resp.status_code == 422


def test_create_requires_fields(client):
    resp = client.post("/api/events", json={"start": "2025-12-27T14:30"})
    assert resp.status_code == 422
    missing = {err["loc"][-1] for err in resp.json()["detail"]}
    assert missing == {"name", "location"}


def test_get_event(client):
    created = _create(client)
    resp = client.get(f"/api/events/{created['id']}")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Launch Party"


def test_get_missing_event(client):
    resp = client.get("/api/events/999")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Event not found"


def test_form_data_is_datetime_local(client):
    created = _create(client)
    resp = client.get(f"/api/events/{created['id']}/form")
    assert resp.json() == {
        "id": created["id"],
        "name": "Launch Party",
        "location": "Main Hall",
        "start": "2025-12-27T14:30",
    }


def test_update_event(client):
    created = _create(client)
    resp = client.put(
        f"/api/events/{created['id']}",
        json={"name": "Afterparty", "location": "Roof", "start": "2025-12-27T23:05"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Afterparty"
    assert data["start_time"] == "11:05 PM"


def test_update_missing_event(client):
    resp = client.put("/api/events/999", json={"name": "a", "location": "b", "start": "2025-12-27T23:05"})
    assert resp.status_code == 404


def test_delete_event(client):
    created = _create(client)
    assert client.delete(f"/api/events/{created['id']}").status_code == 204
    assert client.get(f"/api/events/{created['id']}").status_code == 404
    assert client.delete(f"/api/events/{created['id']}").status_code == 404


def test_per_page_options(client):
    assert client.get("/api/events/per_page_options").json() == {"options": [10, 20, 50, 100], "default_index": 1}


def test_list_paginates(client):
    for n in range(12):
        _create(client, name=f"Event {n}")

    first = client.get("/api/events", params={"per_page": 0}).json()
    assert [r["name"] for r in first["rows"]] == [f"Event {n}" for n in range(10)]
    assert first["pagination"]["total_pages"] == 2
    assert first["pagination"]["showing"] == "Showing 1 to 10 of 12 records."

    second = client.get("/api/events", params={"per_page": 0, "page": 2}).json()
    assert [r["name"] for r in second["rows"]] == ["Event 10", "Event 11"]


def test_list_default_per_page(client):
    for n in range(3):
        _create(client, name=f"Event {n}")
    data = client.get("/api/events", params={"per_page": 42}).json()
    assert data["pagination"]["per_page"] == 20
    assert len(data["rows"]) == 3


def test_list_empty(client):
    data = client.get("/api/events").json()
    assert data["rows"] == []
    assert data["pagination"]["total_rows"] == 0


def test_list_ignores_unusable_paging_params(client):
    _create(client)
    resp = client.get("/api/events", params={"per_page": "abc", "page": "xyz"})
    assert resp.status_code == 200
    pagination = resp.json()["pagination"]
    assert (pagination["page"], pagination["per_page"]) == (1, 20)


def test_early_year_form_data(client):
    created = _create(client, start="0999-01-01T10:00")
    assert created["start"] == "0999-01-01 10:00:00"
    resp = client.get(f"/api/events/{created['id']}/form")
    assert resp.status_code == 200
    assert resp.json()["start"] == "0999-01-01T10:00"


def test_invalid_format_on_api_is_json(client, monkeypatch):
    created = _create(client)

    def broken(db, event_id):
        raise InvalidFormat("999-01-01 10:00:00", "YYYY-MM-DD HH:MM[:SS]")

    monkeypatch.setattr(EventRepo, "get_form_data", staticmethod(broken))
    resp = client.get(f"/api/events/{created['id']}/form")
    assert resp.status_code == 422
    assert resp.headers["content-type"].startswith("application/json")
    assert "999-01-01 10:00:00" in resp.json()["detail"]
