from fastapi.testclient import TestClient
from okr_app.main import app

client = TestClient(app)


def test_create_cycle_in_the_past_is_completed():
    r = client.post("/api/v1/cycles", json={
        "name": "FY 2019", "start_date": "2019-01-01", "end_date": "2019-12-31",
    })
    assert r.status_code == 201
    body = r.json()
    assert body["id"].startswith("cycle_")
    assert body["status"] == "completed"


def test_create_cycle_far_future_is_planning():
    r = client.post("/api/v1/cycles", json={
        "name": "FY 2999", "start_date": "2999-01-01", "end_date": "2999-12-31",
    })
    assert r.json()["status"] == "planning"


def test_create_cycle_bad_range():
    r = client.post("/api/v1/cycles", json={
        "name": "Backwards", "start_date": "2026-06-01", "end_date": "2026-01-01",
    })
    assert r.status_code == 400
    assert r.json()["error"]["details"]["start_date"] == "2026-06-01"


def test_get_and_delete_cycle():
    cycle = client.post("/api/v1/cycles", json={
        "name": "Q3 2021", "start_date": "2021-07-01", "end_date": "2021-09-30",
    }).json()

    assert client.get(f"/api/v1/cycles/{cycle['id']}").json()["name"] == "Q3 2021"
    assert cycle["id"] in [c["id"] for c in client.get("/api/v1/cycles").json()]

    assert client.delete(f"/api/v1/cycles/{cycle['id']}").status_code == 204
    assert client.get(f"/api/v1/cycles/{cycle['id']}").status_code == 404


def test_refresh_status_is_stable():
    r = client.post("/api/v1/cycles/refresh-status")
    assert r.status_code == 200
    assert client.post("/api/v1/cycles/refresh-status").json() == []
