"""Tests for the REST endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from narrative_shock.api.evaluate import create_evaluate_router
from narrative_shock.core.monitor import ShockMonitor
from narrative_shock.store.cycle_store import CycleStateStore

from tests.test_snapshot import _quiet_snapshot


@pytest.fixture
def client() -> TestClient:
    monitor = ShockMonitor()
    app = FastAPI()
    app.include_router(create_evaluate_router(monitor, CycleStateStore(monitor)))
    return TestClient(app)


_STRAINED = {"demographicDrift": {"employmentRate": 0.8}}


class TestEvaluateEndpoint:
    def test_returns_alert_next_and_text(self, client: TestClient) -> None:
        resp = client.post("/api/evaluate", json={"snapshot": _quiet_snapshot(**_STRAINED)})
        assert resp.status_code == 200
        data = resp.json()
        assert data["alert"]["flag"] == "firing"
        assert data["alert"]["startCycle"] == 50
        assert data["next"]["alertFlag"] == "firing"
        assert data["next"]["cycleNumber"] == 50
        assert "STATUS: FIRING" in data["human_readable"]

    def test_prior_is_honoured(self, client: TestClient) -> None:
        body = {
            "snapshot": _quiet_snapshot(cycle=56),
            "prior": {"alertFlag": "fading", "alertStartCycle": 50, "cycleNumber": 55},
        }
        data = client.post("/api/evaluate", json=body).json()
        assert data["alert"]["flag"] == "resolved"
        assert data["alert"]["score"] == 1

    def test_missing_snapshot_evaluates_defaults(self, client: TestClient) -> None:
        resp = client.post("/api/evaluate", json={"snapshot": None, "prior": None})
        assert resp.status_code == 200
        assert resp.json()["alert"]["flag"] == "none"

    def test_malformed_field_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/evaluate", json={"snapshot": {"worldEvents": "lots"}})
        assert resp.status_code == 400
        assert resp.json()["detail"]["field"] == "snapshot.worldEvents"

    def test_malformed_prior_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/evaluate", json={"snapshot": {}, "prior": {"alertFlag": "panic"}})
        assert resp.status_code == 400
        assert resp.json()["detail"]["field"] == "prior.alertFlag"

    def test_non_object_body_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/evaluate", json=[1, 2, 3])
        assert resp.status_code == 400
        assert resp.json()["detail"]["field"] == "body"


class TestEnvironmentEndpoints:
    def test_cycles_carry_state(self, client: TestClient) -> None:
        for cycle in range(50, 53):
            assert client.post("/api/environments/oak/cycles", json=_quiet_snapshot(cycle=cycle, **_STRAINED)).status_code == 200
        data = client.post("/api/environments/oak/cycles", json=_quiet_snapshot(cycle=53, **_STRAINED)).json()
        assert data["alert"]["flag"] == "fading"
        assert data["alert"]["duration"] == 3

    def test_out_of_order_is_409(self, client: TestClient) -> None:
        client.post("/api/environments/oak/cycles", json=_quiet_snapshot(cycle=50))
        resp = client.post("/api/environments/oak/cycles", json=_quiet_snapshot(cycle=49))
        assert resp.status_code == 409

    def test_malformed_cycle_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/environments/oak/cycles", json={"civicLoad": "meltdown"})
        assert resp.status_code == 400
        assert resp.json()["detail"]["field"] == "snapshot.civicLoad"

    def test_state_roundtrip(self, client: TestClient) -> None:
        client.post("/api/environments/oak/cycles", json=_quiet_snapshot(cycle=50, **_STRAINED))
        resp = client.get("/api/environments/oak/state")
        assert resp.status_code == 200
        assert resp.json()["alertStartCycle"] == 50

    def test_unknown_state_is_404(self, client: TestClient) -> None:
        assert client.get("/api/environments/ghost/state").status_code == 404

    def test_delete(self, client: TestClient) -> None:
        client.post("/api/environments/oak/cycles", json=_quiet_snapshot(cycle=50))
        resp = client.delete("/api/environments/oak")
        assert resp.status_code == 200
        assert resp.json() == {"status": "forgotten", "environment_id": "oak"}
        assert client.delete("/api/environments/oak").status_code == 404


class TestHealth:
    def test_health(self) -> None:
        from narrative_shock.main import app

        data = TestClient(app).get("/health").json()
        assert data["status"] == "ok"
        assert data["base_thresholds"]["event_spike"] == 10
        assert "tracked_environments" in data
