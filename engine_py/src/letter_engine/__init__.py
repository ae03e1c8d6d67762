"""Rules engine and websocket backend for the Letter Lover card game."""

from .constants import CARD_CATALOG, CardType
from .engine import GameSession, LetterEngine
from .errors import GameError
from .models import Card, GameState, PlayAction, Player, RoomInfo

__all__ = [
    "CARD_CATALOG",
    "Card",
    "CardType",
    "GameError",
    "GameSession",
    "GameState",
    "LetterEngine",
    "PlayAction",
    "Player",
    "RoomInfo",
]
