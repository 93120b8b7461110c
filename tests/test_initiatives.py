from fastapi.testclient import TestClient
from okr_app.main import app

client = TestClient(app)


def _create_initiative():
    objective = client.post("/api/v1/objectives", json={"title": "Improve onboarding"}).json()
    kr = client.post(f"/api/v1/objectives/{objective['id']}/krs", json={
        "title": "Activation rate", "base_value": 20, "target_value": 60, "unit": "percentage",
    }).json()
    r = client.post(f"/api/v1/key-results/{kr['id']}/initiatives", json={"title": "Guided setup"})
    assert r.status_code == 201
    return kr, r.json()


def test_create_initiative():
    kr, initiative = _create_initiative()
    assert initiative["key_result_id"] == kr["id"]
    assert initiative["status"] == "draft"
    assert initiative["dashboard"]["status_label"] == "no_metrics"

    r = client.get(f"/api/v1/key-results/{kr['id']}/initiatives")
    assert [i["id"] for i in r.json()] == [initiative["id"]]


def test_metric_update_flow():
    _, initiative = _create_initiative()

    r = client.post(f"/api/v1/initiatives/{initiative['id']}/metrics", json={
        "name": "Completed setups", "type": "increase_to", "base_value": 0, "target_value": 40,
    })
    assert r.status_code == 201
    metric = r.json()

    r = client.post(
        f"/api/v1/initiatives/{initiative['id']}/metrics/{metric['id']}/updates",
        json={"value": 34, "notes": "Week 3"},
    )
    assert r.status_code == 201
    assert r.json()["progress"]["percentage"] == 85
    assert r.json()["progress"]["status_label"] == "on_track"

    r = client.get(f"/api/v1/initiatives/{initiative['id']}")
    assert r.json()["status"] == "in_progress"

    r = client.get(f"/api/v1/initiatives/{initiative['id']}/metrics-dashboard")
    dashboard = r.json()
    assert dashboard["total_metrics"] == 1
    assert dashboard["score"] == 85
    assert dashboard["status_label"] == "on_track"


def test_add_metric_invalid_config():
    _, initiative = _create_initiative()
    r = client.post(f"/api/v1/initiatives/{initiative['id']}/metrics", json={
        "name": "Backwards", "type": "decrease_to", "base_value": 1, "target_value": 10,
    })
    assert r.status_code == 400
    assert "Base value must be greater than the target" in r.json()["error"]["message"]


def test_metric_update_unknown_initiative():
    r = client.post("/api/v1/initiatives/init_missing/metrics/metric_missing/updates", json={"value": 1})
    assert r.status_code == 404
    assert r.json()["error"]["details"]["resource"] == "Initiative"


def test_update_and_delete_initiative():
    _, initiative = _create_initiative()

    r = client.patch(f"/api/v1/initiatives/{initiative['id']}", json={"status": "canceled"})
    assert r.status_code == 200
    assert r.json()["status"] == "canceled"

    r = client.delete(f"/api/v1/initiatives/{initiative['id']}")
    assert r.status_code == 204
    assert client.get(f"/api/v1/initiatives/{initiative['id']}").status_code == 404


def test_non_finite_metric_values_rejected():
    _, initiative = _create_initiative()

    r = client.post(
        f"/api/v1/initiatives/{initiative['id']}/metrics",
        content='{"name": "Setups", "target_value": Infinity}',
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 422

    metric = client.post(f"/api/v1/initiatives/{initiative['id']}/metrics", json={
        "name": "Setups", "base_value": 0, "target_value": 40,
    }).json()
    r = client.post(
        f"/api/v1/initiatives/{initiative['id']}/metrics/{metric['id']}/updates",
        content='{"value": NaN}',
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 422


def test_patch_null_status_rejected():
    _, initiative = _create_initiative()

    r = client.patch(f"/api/v1/initiatives/{initiative['id']}", json={"status": None})
    assert r.status_code == 400
    assert client.get(f"/api/v1/initiatives/{initiative['id']}").json()["status"] == "draft"
