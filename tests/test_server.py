import pytest
from fastapi.testclient import TestClient

from server.app import app, manager


@pytest.fixture
def client():
    with TestClient(app) as client:
        client.post("/reset")
        yield client
    manager.dispatcher.reset()


def test_state_reports_fleet(client):
    state = client.get("/state").json()

    assert state["pending"] == 0
    assert state["can_dispatch"] is False
    assert state["config"]["num_floors"] == 10
    assert state["elevators"] == [
        {"elevator_id": 1, "floor": 0, "load": 0, "capacity": 5},
        {"elevator_id": 2, "floor": 0, "load": 0, "capacity": 5},
    ]


def test_request_is_accepted(client):
    response = client.post("/requests", json={"floor": 3})

    assert response.status_code == 200
    body = response.json()
    assert body["accepted"] is True
    assert body["floor"] == 3
    assert body["pending"] == 1
    assert client.get("/state").json()["can_dispatch"] is True


@pytest.mark.parametrize("floor", [-1, 10])
def test_out_of_range_floor_is_a_bad_request(client, floor):
    response = client.post("/requests", json={"floor": floor})

    assert response.status_code == 400
    assert "between 0 and 9" in response.json()["detail"]
    assert client.get("/state").json()["pending"] == 0


def test_unparseable_floor_is_rejected(client):
    response = client.post("/requests", json={"floor": "top"})

    assert response.status_code == 422


def test_dispatch_moves_the_closest_elevator(client):
    client.post("/requests", json={"floor": 4})
    client.post("/requests", json={"floor": 7})

    body = client.post("/dispatch").json()

    assert body["events"] == [
        {"elevator_id": 1, "target_floor": 4, "kind": "moving"},
        {"elevator_id": 1, "target_floor": 7, "kind": "moving"},
    ]
    assert body["state"]["pending"] == 0
    assert manager.dispatcher.wait_for_movements(timeout=5)
    elevator = client.get("/elevators/1").json()
    assert elevator["floor"] in (4, 7)
    assert elevator["load"] == 0


def test_dispatch_with_nothing_queued(client):
    assert client.post("/dispatch").json()["events"] == []


def test_unknown_elevator_is_not_found(client):
    assert client.get("/elevators/9").status_code == 404


def test_reset_clears_queue_and_positions(client):
    client.post("/requests", json={"floor": 8})
    client.post("/dispatch")
    manager.dispatcher.wait_for_movements(timeout=5)
    client.post("/requests", json={"floor": 2})

    state = client.post("/reset").json()

    assert state["pending"] == 0
    assert state["dispatched"] == 0
    assert all(e["floor"] == 0 and e["load"] == 0 for e in state["elevators"])


def test_stream_sends_state_then_events(client):
    with client.websocket_connect("/ws/stream") as websocket:
        initial = websocket.receive_json()
        assert initial["event"] is None
        assert initial["state"]["pending"] == 0

        client.post("/requests", json={"floor": 2})

        message = websocket.receive_json()
        while message["event"]["kind"] != "request_accepted":
            message = websocket.receive_json()
        assert message["event"] == {"target_floor": 2, "pending": 1, "kind": "request_accepted"}
        assert message["state"]["pending"] == 1


class ClosedSocket:
    # Stands in for a client whose close frame was already sent
    async def send_text(self, message):
        raise RuntimeError('Cannot call "send" once a close message has been sent.')

    async def close(self):
        raise RuntimeError("already closed")


def receive_event(websocket, kind):
    message = websocket.receive_json()
    while message["event"]["kind"] != kind:
        message = websocket.receive_json()
    return message


def test_stream_keeps_running_after_a_failed_send(client):
    closed = ClosedSocket()
    manager.clients.add(closed)
    try:
        with client.websocket_connect("/ws/stream") as websocket:
            websocket.receive_json()

            client.post("/requests", json={"floor": 3})
            first = receive_event(websocket, "request_accepted")
            client.post("/requests", json={"floor": 5})
            second = receive_event(websocket, "request_accepted")

        assert first["event"]["target_floor"] == 3
        assert second["event"]["target_floor"] == 5
        assert closed not in manager.clients
    finally:
        manager.clients.discard(closed)


def test_shutdown_stops_the_worker_pool_and_startup_rebuilds_it():
    with TestClient(app):
        first = manager.dispatcher

    first.submit_request(3)
    with pytest.raises(RuntimeError):
        first.dispatch_pending()

    with TestClient(app) as client:
        assert manager.dispatcher is not first
        client.post("/requests", json={"floor": 3})
        body = client.post("/dispatch").json()
        assert body["events"] == [{"elevator_id": 1, "target_floor": 3, "kind": "moving"}]
        assert manager.dispatcher.wait_for_movements(timeout=5)
        assert client.get("/elevators/1").json()["floor"] == 3
