"""
State serialization utilities.

Snapshots are broadcast whole to every participant of a room; there is no
per-viewer sanitization.
"""

from typing import Any, Dict, Optional

from .constants import CARD_CATALOG, card_info
from .models import Card, GameState, Player, RoomInfo


def serialize_card(card: Optional[Card]) -> Optional[Dict[str, Any]]:
    if card is None:
        return None
    info = card_info(card.type)
    return {
        "id": card.id,
        "type": card.type.value,
        "name": info.name,
        "value": info.value,
    }


def serialize_player(player: Player) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "current_card": serialize_card(player.current_card),
        "discarded_cards": [serialize_card(c) for c in player.discarded_cards],
        "is_protected": player.is_protected,
        "is_eliminated": player.is_eliminated,
        "tokens": player.tokens,
    }


def serialize_state(state: GameState) -> Dict[str, Any]:
    """
    Serialize the full room state for transmission to clients.

    Args:
        state: Room state to serialize

    Returns:
        JSON-safe dictionary of the whole state
    """
    current = state.get_current_player()
    return {
        "room_code": state.room_code,
        "host_id": state.host_id,
        "version": state.version,
        "phase": state.phase,
        "round_number": state.round_number,
        "current_player_index": state.current_player_index,
        "current_player_id": current.id if current else None,
        "players": [serialize_player(p) for p in state.players],
        "deck_size": len(state.deck),
        "has_burned_card": state.burned_card is not None,
        "last_action": state.last_action,
        "winner_id": state.winner_id,
        "game_log": state.game_log.copy(),
    }


def serialize_room_info(room: RoomInfo) -> Dict[str, Any]:
    """Serialize room info for lobby listings."""
    return {
        "room_code": room.room_code,
        "host_id": room.host_id,
        "player_count": room.player_count,
        "max_players": room.max_players,
        "is_game_started": room.is_game_started,
    }


def serialize_catalog() -> Dict[str, Any]:
    """Serialize the card table so clients can render cards and guesses."""
    return {
        card_type.value: {
            "name": info.name,
            "value": info.value,
            "count": info.count,
            "requires_target": info.requires_target,
            "requires_guess": info.requires_guess,
            "icon": info.icon,
            "color": info.color,
            "ability": info.ability,
        }
        for card_type, info in CARD_CATALOG.items()
    }
