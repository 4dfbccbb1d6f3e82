import time

import pytest
from fastapi.testclient import TestClient

from albiome.app.server import SimulationController, create_app
from albiome.config import AutotrophConfig, CanvasConfig, HeterotrophConfig, SimulationConfig


def small_config() -> SimulationConfig:
    return SimulationConfig(
        seed=4,
        canvas=CanvasConfig(width=200, height=200),
        heterotroph=HeterotrophConfig(count=1, spawn_spread=0.0, body_size=40.0),
        autotroph=AutotrophConfig(count=1, spawn_spread=0.0),
    )


@pytest.fixture
def client():
    controller = SimulationController(small_config(), start_paused=True)
    with TestClient(create_app(controller)) as test_client:
        yield test_client


def wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_status_before_first_tick(client):
    payload = client.get("/api/status").json()
    assert payload["running"] is False
    assert payload["tick"] == 0
    assert payload["population"] == 2
    assert payload["metrics"] is None


def test_click_then_step_selects_entity(client):
    response = client.post("/api/click", json={"x": 100, "y": 100})
    assert response.status_code == 200
    assert response.json() == {"pending": [100.0, 100.0]}

    assert client.post("/api/control/step").json()["tick"] == 1

    metrics = client.get("/api/status").json()["metrics"]
    assert metrics["tick"] == 0
    assert metrics["selected_id"] is not None
    assert metrics["click_resolved"] is True


@pytest.mark.parametrize("body", [{"x": "left", "y": 1}, {"x": 1}, [1, 2]])
def test_bad_click_is_unprocessable(client, body):
    assert client.post("/api/click", json=body).status_code == 422


def test_unknown_control_action_is_not_found(client):
    assert client.post("/api/control/explode").status_code == 404


def test_control_actions(client):
    assert client.post("/api/control/start").json()["running"] is True
    assert client.post("/api/control/stop").json()["running"] is False
    assert client.post("/api/control/speed", json={"multiplier": 50}).json()["multiplier"] == 5.0
    assert client.post("/api/control/speed", json={"multiplier": 0.01}).json()["multiplier"] == 0.1
    assert client.post("/api/control/speed", json={"multiplier": "fast"}).status_code == 422

    client.post("/api/control/step")
    client.post("/api/control/step")
    assert client.post("/api/control/reset").json()["tick"] == 0


def test_frame_is_png(client):
    client.post("/api/control/step")
    response = client.get("/api/frame.png")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")


def test_websocket_snapshot_and_ack_round(client):
    with client.websocket_connect("/ws") as socket:
        assert wait_for(lambda: client.get("/api/status").json()["clients"] == 1)
        client.post("/api/control/step")

        message = socket.receive_json()
        assert message["type"] == "snapshot"
        assert message["tick"] == 1
        assert len(message["payload"]["entities"]) == 2
        assert client.get("/api/status").json()["queued"] == 1

        socket.send_json({"type": "ack", "tick": message["tick"]})
        assert wait_for(lambda: client.get("/api/status").json()["queued"] == 0)

        socket.send_json({"type": "click", "x": 100, "y": 100})
        assert wait_for(lambda: client.app.state.controller.world.pending_click is not None)

    assert wait_for(lambda: client.get("/api/status").json()["clients"] == 0)
