"""
WebSocket transport for the Letter Lover game.

Actions arrive as JSON events, are applied through the engine, and every
committed change is broadcast to the whole room as a full state snapshot.
Rejected actions only produce an error for the sender.
"""

import logging
from collections import defaultdict
from typing import Dict, Optional, Set

import orjson
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from ..engine import LetterEngine
from ..errors import GameError
from ..models import GameState
from ..serialization import serialize_room_info, serialize_state
from .events import (
    ChatEvent, CreateRoomEvent, ErrorCode, JoinEvent, PlayEvent,
    RequestStateEvent, StartEvent, create_chat_event, create_error_event,
    create_join_success_event, create_room_created_event,
    create_state_full_event, error_code_for, parse_inbound_event
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Shared engine for the process
engine = LetterEngine()


def _dumps(event: BaseModel) -> str:
    return orjson.dumps(event.model_dump(mode="json")).decode()


class ConnectionManager:
    """Manages WebSocket connections and broadcasting."""

    def __init__(self):
        self.room_connections: Dict[str, Set[WebSocket]] = defaultdict(set)
        self.connection_players: Dict[WebSocket, str] = {}
        self.connection_rooms: Dict[WebSocket, str] = {}

    def bind(self, websocket: WebSocket, room_code: str, player_id: str):
        """Attach a connection to a room as the given player."""
        previous = self.connection_rooms.get(websocket)
        if previous and previous != room_code:
            self._leave(websocket, previous)
        self.room_connections[room_code].add(websocket)
        self.connection_players[websocket] = player_id
        self.connection_rooms[websocket] = room_code
        logger.info(f"Player {player_id} connected to room {room_code}")

    def disconnect(self, websocket: WebSocket):
        """Forget a connection."""
        player_id = self.connection_players.pop(websocket, None)
        room_code = self.connection_rooms.pop(websocket, None)

        if room_code:
            self._leave(websocket, room_code)

        if player_id:
            logger.info(f"Player {player_id} disconnected from room {room_code}")

        return player_id, room_code

    def _leave(self, websocket: WebSocket, room_code: str):
        connections = self.room_connections.get(room_code)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            del self.room_connections[room_code]

    def has_connections(self, room_code: str) -> bool:
        return bool(self.room_connections.get(room_code))

    def connection_count(self) -> int:
        return sum(len(conns) for conns in self.room_connections.values())

    async def send(self, websocket: WebSocket, event: BaseModel):
        await websocket.send_text(_dumps(event))

    async def broadcast_to_room(self, room_code: str, event: BaseModel):
        """Broadcast an event to all connections in a room."""
        payload = _dumps(event)
        for websocket in list(self.room_connections.get(room_code, ())):
            try:
                await websocket.send_text(payload)
            except Exception as e:
                logger.error(f"Error broadcasting to room {room_code}: {e}")
                # the endpoint drops the bindings when the socket closes
                self._leave(websocket, room_code)

    async def broadcast_state(self, room_code: str, state: GameState):
        await self.broadcast_to_room(room_code, create_state_full_event(serialize_state(state)))


manager = ConnectionManager()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Main WebSocket endpoint."""
    await websocket.accept()
    logger.info("WebSocket connection accepted")

    try:
        while True:
            raw_data = await websocket.receive_text()

            try:
                event = parse_inbound_event(orjson.loads(raw_data))
            except (orjson.JSONDecodeError, ValueError) as e:
                await manager.send(websocket, create_error_event(ErrorCode.INVALID_EVENT, str(e)))
                continue

            try:
                await handle_event(websocket, event)
            except GameError as e:
                logger.debug(f"Rejected {event.type.value}: {e}")
                await manager.send(websocket, create_error_event(error_code_for(e.code), e.message))
            except Exception:
                logger.exception(f"Error handling {event.type.value} event")
                await manager.send(websocket, create_error_event(ErrorCode.INTERNAL, "Internal server error"))

    except WebSocketDisconnect:
        logger.info("WebSocket disconnected")
    finally:
        _, room_code = manager.disconnect(websocket)
        if room_code:
            release_room_if_idle(room_code)


def release_room_if_idle(room_code: str) -> bool:
    """
    Drop a room from the engine once nobody is connected to it.

    A started room cannot be joined again, so a room without connections
    can never be played on.

    Returns:
        True if the room was removed
    """
    if manager.has_connections(room_code):
        return False
    removed = engine.remove_room(room_code)
    if removed:
        logger.info(f"Room {room_code} released, no connections left")
    return removed


async def handle_event(websocket: WebSocket, event):
    """Route an inbound event to its handler."""
    if isinstance(event, CreateRoomEvent):
        await handle_create_room(websocket, event)
    elif isinstance(event, JoinEvent):
        await handle_join(websocket, event)
    elif isinstance(event, StartEvent):
        await handle_start(websocket, event)
    elif isinstance(event, PlayEvent):
        await handle_play(websocket, event)
    elif isinstance(event, RequestStateEvent):
        await handle_request_state(websocket, event)
    elif isinstance(event, ChatEvent):
        await handle_chat(websocket, event)
    else:
        raise ValueError(f"Unhandled event type: {type(event)}")


async def _require_binding(websocket: WebSocket) -> Optional[tuple]:
    player_id = manager.connection_players.get(websocket)
    room_code = manager.connection_rooms.get(websocket)
    if not player_id or not room_code:
        await manager.send(websocket, create_error_event(ErrorCode.ACTION_NOT_ALLOWED, "Not in a room"))
        return None
    return player_id, room_code


async def handle_create_room(websocket: WebSocket, event: CreateRoomEvent):
    room = engine.create_room(event.player_id, event.name)
    previous = manager.connection_rooms.get(websocket)
    manager.bind(websocket, room.room_code, event.player_id)
    if previous:
        release_room_if_idle(previous)
    await manager.send(websocket, create_room_created_event(serialize_room_info(room)))
    await manager.broadcast_state(room.room_code, engine.get_game(room.room_code))


async def handle_join(websocket: WebSocket, event: JoinEvent):
    state = engine.join_room(event.room_code, event.player_id, event.name)
    previous = manager.connection_rooms.get(websocket)
    manager.bind(websocket, event.room_code, event.player_id)
    if previous and previous != event.room_code:
        release_room_if_idle(previous)
    await manager.send(websocket, create_join_success_event(event.player_id, event.room_code))
    await manager.broadcast_state(event.room_code, state)


async def handle_start(websocket: WebSocket, event: StartEvent):
    binding = await _require_binding(websocket)
    if not binding:
        return
    _, room_code = binding
    state = engine.start_game(room_code, event.seed)
    logger.info(f"Round {state.round_number} started for room {room_code}")
    await manager.broadcast_state(room_code, state)


async def handle_play(websocket: WebSocket, event: PlayEvent):
    binding = await _require_binding(websocket)
    if not binding:
        return
    player_id, room_code = binding
    state = engine.play_card(room_code, event.to_action(player_id))
    await manager.broadcast_state(room_code, state)


async def handle_request_state(websocket: WebSocket, event: RequestStateEvent):
    binding = await _require_binding(websocket)
    if not binding:
        return
    _, room_code = binding
    state = engine.get_game(room_code)
    if state is None:
        await manager.send(websocket, create_error_event(ErrorCode.ROOM_NOT_FOUND, "Room not found"))
        return
    await manager.send(websocket, create_state_full_event(serialize_state(state)))


async def handle_chat(websocket: WebSocket, event: ChatEvent):
    binding = await _require_binding(websocket)
    if not binding:
        return
    player_id, room_code = binding
    state = engine.get_game(room_code)
    player = state.get_player(player_id) if state else None
    if not player:
        await manager.send(websocket, create_error_event(ErrorCode.PLAYER_NOT_FOUND, "Player not found"))
        return
    await manager.broadcast_to_room(room_code, create_chat_event(player_id, player.name, event.text))
