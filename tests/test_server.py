"""Tests for the HTTP and WebSocket transport."""

import pytest
from fastapi.testclient import TestClient

from space_war.server.main import app, sessions


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    sessions.cleanup_all()


def create_game(client, seed=42):
    response = client.post("/api/games", json={"seed": seed})
    assert response.status_code == 200
    return response.json()["gameId"]


def send(client, game_id, payload):
    response = client.post(f"/api/games/{game_id}/commands", json=payload)
    assert response.status_code == 200
    return response.json()


class TestHttpApi:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_create_game_returns_unstarted_state(self, client):
        response = client.post("/api/games", json={"seed": 7})
        body = response.json()

        assert body["seed"] == 7
        assert body["gameId"].startswith("game-")
        state = body["state"]
        assert state["id"] == body["gameId"]
        assert state["currentPlayerId"] is None
        assert len(state["systems"]) == 12
        assert state["players"] == []

    def test_get_state(self, client):
        game_id = create_game(client)
        response = client.get(f"/api/games/{game_id}/state")
        assert response.status_code == 200
        assert response.json()["gameId"] == game_id

    def test_unknown_game_is_404(self, client):
        assert client.get("/api/games/game-missing/state").status_code == 404
        response = client.post("/api/games/game-missing/commands", json={"type": "startGame"})
        assert response.status_code == 404

    def test_commands_drive_the_match(self, client):
        game_id = create_game(client)
        send(client, game_id, {"type": "joinGame", "playerName": "Ada"})
        send(client, game_id, {"type": "joinGame", "playerName": "Bob"})

        body = send(client, game_id, {"type": "startGame"})

        assert body["accepted"] is True
        assert body["command"] == "StartGame"
        assert body["error"] is None
        assert body["state"]["currentPlayerId"] == "p1"
        assert body["state"]["phase"] == "purchase"

    def test_rejected_command_returns_unchanged_state(self, client):
        game_id = create_game(client)
        send(client, game_id, {"type": "joinGame", "playerName": "Ada"})
        send(client, game_id, {"type": "startGame"})
        before = client.get(f"/api/games/{game_id}/state").json()["state"]

        body = send(client, game_id, {"type": "moveFleet", "playerName": "Ada",
                                      "fromSystemId": "sys-1", "toSystemId": "sys-2",
                                      "unitIds": ["u-0001"]})

        assert body["accepted"] is False
        assert body["error"]["code"] == "PHASE"
        assert body["state"] == before

    def test_malformed_command_rejected(self, client):
        game_id = create_game(client)
        body = send(client, game_id, {"type": "purchaseUnits", "count": -1})
        assert body["accepted"] is False
        assert body["error"]["code"] == "INVALID_COMMAND"

    def test_delete_game(self, client):
        game_id = create_game(client)
        assert client.delete(f"/api/games/{game_id}").status_code == 200
        assert client.delete(f"/api/games/{game_id}").status_code == 404


class TestWebSocket:
    def test_state_on_connect_and_after_commands(self, client):
        game_id = create_game(client)

        with client.websocket_connect(f"/ws/games/{game_id}") as ws:
            hello = ws.receive_json()
            assert hello["type"] == "gameState"
            assert hello["state"]["players"] == []

            ws.send_json({"type": "joinGame", "playerName": "Ada"})
            broadcast = ws.receive_json()
            ack = ws.receive_json()

            assert broadcast["type"] == "gameState"
            assert broadcast["state"]["players"][0]["displayName"] == "Ada"
            assert ack == {
                "type": "commandResult",
                "accepted": True,
                "command": "JoinGame",
                "error": None,
            }

    def test_rejection_still_broadcasts(self, client):
        game_id = create_game(client)

        with client.websocket_connect(f"/ws/games/{game_id}") as ws:
            ws.receive_json()
            ws.send_json({"type": "endTurn", "playerName": "Ghost"})
            broadcast = ws.receive_json()
            ack = ws.receive_json()

            assert broadcast["type"] == "gameState"
            assert ack["accepted"] is False
            assert ack["error"]["code"] == "ILLEGAL_STATE"

    def test_non_json_frame_rejected_and_socket_stays_open(self, client):
        game_id = create_game(client)

        with client.websocket_connect(f"/ws/games/{game_id}") as ws:
            ws.receive_json()
            ws.send_text("joinGame Ada {")
            broadcast = ws.receive_json()
            ack = ws.receive_json()

            assert broadcast["type"] == "gameState"
            assert ack["accepted"] is False
            assert ack["command"] is None
            assert ack["error"]["code"] == "INVALID_COMMAND"

            ws.send_json({"type": "PING"})
            assert ws.receive_json() == {"type": "PONG"}

    def test_ping(self, client):
        game_id = create_game(client)
        with client.websocket_connect(f"/ws/games/{game_id}") as ws:
            ws.receive_json()
            ws.send_json({"type": "PING"})
            assert ws.receive_json() == {"type": "PONG"}

    def test_http_command_reaches_socket(self, client):
        game_id = create_game(client)
        with client.websocket_connect(f"/ws/games/{game_id}") as ws:
            ws.receive_json()
            send(client, game_id, {"type": "joinGame", "playerName": "Bob"})
            pushed = ws.receive_json()
            assert pushed["type"] == "gameState"
            assert pushed["state"]["players"][0]["displayName"] == "Bob"
