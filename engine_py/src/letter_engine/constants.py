"""Card catalog and game constants"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping


class CardType(str, Enum):
    GUARD = "guard"
    PRIEST = "priest"
    BARON = "baron"
    HANDMAID = "handmaid"
    PRINCE = "prince"
    KING = "king"
    COUNTESS = "countess"
    PRINCESS = "princess"


@dataclass(frozen=True)
class CardInfo:
    value: int
    count: int
    name: str
    requires_target: bool
    requires_guess: bool
    icon: str = ""
    color: str = ""
    ability: str = ""


CARD_CATALOG: Mapping[CardType, CardInfo] = MappingProxyType({
    CardType.GUARD: CardInfo(
        1, 5, "Guard", True, True, "🛡️", "#8B4513",
        "Name a card other than Guard. If the target holds it, they are out of the round."),
    CardType.PRIEST: CardInfo(
        2, 2, "Priest", True, False, "👁️", "#4169E1",
        "Look at another player's hand."),
    CardType.BARON: CardInfo(
        3, 2, "Baron", True, False, "⚔️", "#8B008B",
        "Compare hands with another player. The lower value is out of the round."),
    CardType.HANDMAID: CardInfo(
        4, 2, "Handmaid", False, False, "🌸", "#FF69B4",
        "You are protected until your next turn."),
    CardType.PRINCE: CardInfo(
        5, 2, "Prince", True, False, "👑", "#FF6347",
        "A player (possibly you) discards their hand and draws a new card."),
    CardType.KING: CardInfo(
        6, 1, "King", True, False, "♚", "#FFD700",
        "Trade hands with another player."),
    CardType.COUNTESS: CardInfo(
        7, 1, "Countess", False, False, "👸", "#DDA0DD",
        "Must be discarded if you also hold the King or the Prince."),
    CardType.PRINCESS: CardInfo(
        8, 1, "Princess", False, False, "💝", "#FF1493",
        "If you discard this card, you are out of the round."),
})

DECK_SIZE = sum(info.count for info in CARD_CATALOG.values())

# Cards that force the Countess to be played when held alongside her
COUNTESS_FORCING_TYPES = (CardType.KING, CardType.PRINCE)

# Game phases
PHASE_WAITING = "WAITING"
PHASE_PLAYING = "PLAYING"
PHASE_ROUND_END = "ROUND_END"
PHASE_GAME_END = "GAME_END"


def card_info(card_type: CardType) -> CardInfo:
    return CARD_CATALOG[CardType(card_type)]


def card_value(card_type: CardType) -> int:
    return card_info(card_type).value


def guessable_types() -> List[CardType]:
    """Card types a Guard may name (every type except the Guard itself)."""
    return [t for t in CardType if t is not CardType.GUARD]
