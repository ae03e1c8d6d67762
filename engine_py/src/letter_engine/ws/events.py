"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from ..constants import CardType
from ..models import PlayAction


class EventType(str, Enum):
    """Inbound event types."""
    CREATE_ROOM = "create_room"
    JOIN = "join"
    START = "start"
    PLAY = "play"
    REQUEST_STATE = "request_state"
    CHAT = "chat"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    ROOM_CREATED = "room_created"
    JOIN_SUCCESS = "join_success"
    STATE_FULL = "state_full"
    ERROR = "error"
    CHAT = "chat"


class ErrorCode(str, Enum):
    """Error codes for client events."""
    INVALID_EVENT = "INVALID_EVENT"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"
    ROOM_FULL = "ROOM_FULL"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    PLAYER_ALREADY_IN_ROOM = "PLAYER_ALREADY_IN_ROOM"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    INVALID_CARD = "INVALID_CARD"
    COUNTESS_CONSTRAINT_VIOLATED = "COUNTESS_CONSTRAINT_VIOLATED"
    INVALID_TARGET = "INVALID_TARGET"
    INVALID_GUESS = "INVALID_GUESS"
    GAME_NOT_IN_PROGRESS = "GAME_NOT_IN_PROGRESS"
    ROOM_CODES_EXHAUSTED = "ROOM_CODES_EXHAUSTED"
    ACTION_NOT_ALLOWED = "ACTION_NOT_ALLOWED"
    INTERNAL = "INTERNAL"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    type: EventType


class CreateRoomEvent(BaseEvent):
    """Create room event; the sender becomes the host."""
    type: EventType = EventType.CREATE_ROOM
    player_id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=30)


class JoinEvent(BaseEvent):
    """Join room event."""
    type: EventType = EventType.JOIN
    room_code: str = Field(..., min_length=1, max_length=16)
    player_id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=30)


class StartEvent(BaseEvent):
    """Start game (or next round) event."""
    type: EventType = EventType.START
    seed: Optional[int] = None


class PlayEvent(BaseEvent):
    """Play card event."""
    type: EventType = EventType.PLAY
    card_id: Optional[str] = None
    card_type: CardType
    target_player_id: Optional[str] = None
    guessed_card: Optional[CardType] = None

    def to_action(self, player_id: str) -> PlayAction:
        return PlayAction(
            player_id=player_id,
            card_type=self.card_type,
            card_id=self.card_id,
            target_player_id=self.target_player_id,
            guessed_card=self.guessed_card,
        )


class RequestStateEvent(BaseEvent):
    """Request full state event."""
    type: EventType = EventType.REQUEST_STATE


class ChatEvent(BaseEvent):
    """Chat message event."""
    type: EventType = EventType.CHAT
    text: str = Field(..., min_length=1, max_length=200)


# Union type for all inbound events
InboundEvent = Union[
    CreateRoomEvent,
    JoinEvent,
    StartEvent,
    PlayEvent,
    RequestStateEvent,
    ChatEvent
]


# Outbound event models
class RoomCreatedEvent(BaseModel):
    """Room created confirmation event."""
    type: OutboundEventType = OutboundEventType.ROOM_CREATED
    room: Dict[str, Any]
    timestamp: float


class JoinSuccessEvent(BaseModel):
    """Join success confirmation event."""
    type: OutboundEventType = OutboundEventType.JOIN_SUCCESS
    player_id: str
    room_code: str
    timestamp: float


class StateFullEvent(BaseModel):
    """Full state event."""
    type: OutboundEventType = OutboundEventType.STATE_FULL
    state: Dict[str, Any]
    timestamp: float


class ErrorEvent(BaseModel):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: ErrorCode
    message: str
    timestamp: float


class ChatMessageEvent(BaseModel):
    """Chat message event."""
    type: OutboundEventType = OutboundEventType.CHAT
    player_id: str
    player_name: str
    text: str
    timestamp: float


EVENT_MAP = {
    EventType.CREATE_ROOM: CreateRoomEvent,
    EventType.JOIN: JoinEvent,
    EventType.START: StartEvent,
    EventType.PLAY: PlayEvent,
    EventType.REQUEST_STATE: RequestStateEvent,
    EventType.CHAT: ChatEvent,
}


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Raw event data from WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")

    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    event_class = EVENT_MAP[event_type]

    try:
        return event_class(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid event data: {e}")


def error_code_for(code: str) -> ErrorCode:
    """Map an engine error code onto the wire error codes."""
    try:
        return ErrorCode(code)
    except ValueError:
        return ErrorCode.INTERNAL


def create_error_event(code: ErrorCode, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(
        code=code,
        message=message,
        timestamp=time.time()
    )


def create_room_created_event(room: Dict[str, Any]) -> RoomCreatedEvent:
    """Create a room created event."""
    return RoomCreatedEvent(
        room=room,
        timestamp=time.time()
    )


def create_join_success_event(player_id: str, room_code: str) -> JoinSuccessEvent:
    """Create a join success event."""
    return JoinSuccessEvent(
        player_id=player_id,
        room_code=room_code,
        timestamp=time.time()
    )


def create_state_full_event(state: Dict[str, Any]) -> StateFullEvent:
    """Create a full state event."""
    return StateFullEvent(
        state=state,
        timestamp=time.time()
    )


def create_chat_event(player_id: str, player_name: str, text: str) -> ChatMessageEvent:
    """Create a chat message event."""
    return ChatMessageEvent(
        player_id=player_id,
        player_name=player_name,
        text=text,
        timestamp=time.time()
    )
