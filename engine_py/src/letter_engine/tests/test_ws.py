"""
Tests for the HTTP API, websocket protocol and room broadcasting.
"""

import orjson
import pytest
from fastapi.testclient import TestClient

from letter_engine.constants import CardType
from letter_engine.engine import GameSession
from letter_engine.main import app
from letter_engine.ws import server
from letter_engine.ws.events import (
    ErrorCode, JoinEvent, PlayEvent, StartEvent, error_code_for,
    parse_inbound_event
)
from letter_engine.ws.server import ConnectionManager


@pytest.fixture
def client():
    return TestClient(app)


def play_payload(state, player_id):
    player = next(p for p in state["players"] if p["id"] == player_id)
    other = next(p for p in state["players"] if p["id"] != player_id)
    payload = {"type": "play", "card_type": player["current_card"]["type"],
               "card_id": player["current_card"]["id"]}
    if payload["card_type"] not in ("handmaid", "countess", "princess"):
        payload["target_player_id"] = other["id"]
    if payload["card_type"] == "guard":
        payload["guessed_card"] = "priest"
    return payload


# Event parsing

def test_parse_known_events():
    assert isinstance(parse_inbound_event({"type": "start"}), StartEvent)
    join = parse_inbound_event({"type": "join", "room_code": "0042", "player_id": "B", "name": "Bob"})
    assert isinstance(join, JoinEvent)
    play = parse_inbound_event({"type": "play", "card_type": "guard",
                                "target_player_id": "B", "guessed_card": "baron"})
    assert isinstance(play, PlayEvent)
    action = play.to_action("A")
    assert action.player_id == "A"
    assert action.card_type == CardType.GUARD
    assert action.guessed_card == CardType.BARON


@pytest.mark.parametrize("data", [
    [],
    {},
    {"type": "shuffle"},
    {"type": "join", "room_code": "0042"},
    {"type": "play", "card_type": "jester"},
    {"type": "chat", "text": ""},
])
def test_parse_rejects_malformed_events(data):
    with pytest.raises(ValueError):
        parse_inbound_event(data)


def test_engine_codes_map_to_wire_codes():
    assert error_code_for("NOT_YOUR_TURN") == ErrorCode.NOT_YOUR_TURN
    assert error_code_for("SOMETHING_ELSE") == ErrorCode.INTERNAL


# HTTP

def test_health_and_root(client):
    assert client.get("/").json()["message"] == "Letter Lover Game API"
    health = client.get("/health").json()
    assert health["status"] == "healthy"


def test_cards_endpoint(client):
    cards = client.get("/cards").json()
    assert len(cards) == 8
    assert cards["princess"]["value"] == 8
    assert cards["guard"]["requires_guess"] is True


def test_room_endpoints(client):
    code = server.engine.create_room("A", "Alice").room_code
    server.engine.join_room(code, "B", "Bob")

    assert code in [room["room_code"] for room in client.get("/rooms").json()]
    room = client.get(f"/rooms/{code}").json()
    assert room["player_count"] == 2
    state = client.get(f"/rooms/{code}/state").json()
    assert state["phase"] == "WAITING"
    assert [p["name"] for p in state["players"]] == ["Alice", "Bob"]

    server.engine.remove_room(code)
    assert client.get(f"/rooms/{code}").status_code == 404
    assert client.get(f"/rooms/{code}/state").status_code == 404


# Websocket protocol

def test_create_start_and_play(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "create_room", "player_id": "A", "name": "Alice"})
        created = ws.receive_json()
        assert created["type"] == "room_created"
        code = created["room"]["room_code"]
        lobby = ws.receive_json()
        assert lobby["type"] == "state_full"
        assert lobby["state"]["phase"] == "WAITING"

        server.engine.join_room(code, "B", "Bob")
        ws.send_json({"type": "start", "seed": 11})
        started = ws.receive_json()["state"]
        assert started["phase"] == "PLAYING"
        assert started["current_player_id"] == "A"
        assert started["deck_size"] == 13

        ws.send_json(play_payload(started, "A"))
        played = ws.receive_json()
        assert played["type"] == "state_full"
        assert played["state"]["version"] > started["version"]
        assert len(played["state"]["players"][0]["discarded_cards"]) == 1

        ws.send_json({"type": "request_state"})
        again = ws.receive_json()
        assert again["state"]["version"] == played["state"]["version"]

    assert server.engine.get_room(code) is None


def test_rejected_play_reports_error_to_sender(client):
    code = server.engine.create_room("A", "Alice").room_code
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "join", "room_code": code, "player_id": "B", "name": "Bob"})
        assert ws.receive_json()["type"] == "join_success"
        assert ws.receive_json()["type"] == "state_full"

        state = server.engine.start_game(code, seed=5)
        ws.send_json({"type": "play", "card_type": state.get_player("B").current_card.type.value,
                      "target_player_id": "A", "guessed_card": "priest"})
        error = ws.receive_json()
        assert error["type"] == "error"
        assert error["code"] == "NOT_YOUR_TURN"
        assert server.engine.get_game(code).version == state.version

    assert server.engine.get_room(code) is None


def test_chat_is_broadcast(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "create_room", "player_id": "A", "name": "Alice"})
        code = ws.receive_json()["room"]["room_code"]
        ws.receive_json()

        ws.send_json({"type": "chat", "text": "good luck"})
        chat = ws.receive_json()
        assert chat["type"] == "chat"
        assert chat["player_name"] == "Alice"
        assert chat["text"] == "good luck"

    assert server.engine.get_room(code) is None


def test_closing_last_connection_releases_room(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "create_room", "player_id": "A", "name": "Alice"})
        code = ws.receive_json()["room"]["room_code"]
        ws.receive_json()
        assert server.engine.get_room(code) is not None

    assert server.engine.get_room(code) is None
    assert not server.manager.has_connections(code)


def test_moving_to_another_room_releases_the_old_one(client):
    target = server.engine.create_room("H", "Hank").room_code
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "create_room", "player_id": "A", "name": "Alice"})
        first = ws.receive_json()["room"]["room_code"]
        ws.receive_json()

        ws.send_json({"type": "join", "room_code": target, "player_id": "A", "name": "Alice"})
        assert ws.receive_json()["type"] == "join_success"
        ws.receive_json()

        assert server.engine.get_room(first) is None
        assert server.engine.get_room(target).player_count == 2

    assert server.engine.get_room(target) is None


def test_room_with_connections_is_kept():
    code = server.engine.create_room("A", "Alice").room_code
    socket = FakeSocket()
    server.manager.bind(socket, code, "A")
    try:
        assert not server.release_room_if_idle(code)
        assert server.engine.get_room(code) is not None
    finally:
        server.manager.disconnect(socket)

    assert server.release_room_if_idle(code)
    assert server.engine.get_room(code) is None


@pytest.mark.parametrize("message,code", [
    ("not json", "INVALID_EVENT"),
    ('{"type": "shuffle"}', "INVALID_EVENT"),
    ('{"type": "start"}', "ACTION_NOT_ALLOWED"),
    ('{"type": "join", "room_code": "nope", "player_id": "B", "name": "Bob"}', "ROOM_NOT_FOUND"),
])
def test_bad_messages_get_error_events(client, message, code):
    with client.websocket_connect("/ws") as ws:
        ws.send_text(message)
        error = ws.receive_json()
        assert error["type"] == "error"
        assert error["code"] == code


# Broadcasting

class FakeSocket:
    def __init__(self, broken=False):
        self.broken = broken
        self.sent = []

    async def send_text(self, text):
        if self.broken:
            raise RuntimeError("connection closed")
        self.sent.append(orjson.loads(text))


@pytest.mark.asyncio
async def test_broadcast_reaches_only_the_room():
    manager = ConnectionManager()
    alice, bob, stranger = FakeSocket(), FakeSocket(), FakeSocket()
    manager.bind(alice, "1111", "A")
    manager.bind(bob, "1111", "B")
    manager.bind(stranger, "2222", "C")

    await manager.broadcast_state("1111", GameSession("1111", "A", "Alice").snapshot())

    assert len(alice.sent) == 1
    assert alice.sent == bob.sent
    assert alice.sent[0]["state"]["room_code"] == "1111"
    assert stranger.sent == []


@pytest.mark.asyncio
async def test_broken_connection_is_dropped():
    manager = ConnectionManager()
    good, broken = FakeSocket(), FakeSocket(broken=True)
    manager.bind(good, "1111", "A")
    manager.bind(broken, "1111", "B")

    await manager.broadcast_state("1111", GameSession("1111", "A", "Alice").snapshot())

    assert len(good.sent) == 1
    assert manager.connection_count() == 1
    assert broken not in manager.room_connections["1111"]


def test_rebinding_moves_connection():
    manager = ConnectionManager()
    socket = FakeSocket()
    manager.bind(socket, "1111", "A")
    manager.bind(socket, "2222", "A")

    assert "1111" not in manager.room_connections
    assert manager.connection_rooms[socket] == "2222"
    assert manager.disconnect(socket) == ("A", "2222")
    assert manager.connection_count() == 0
