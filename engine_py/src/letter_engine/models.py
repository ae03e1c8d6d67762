"""Game models and data structures"""

from dataclasses import dataclass, field
from typing import List, Optional

from .constants import CardType, PHASE_WAITING, card_value


@dataclass(frozen=True)
class Card:
    id: str
    type: CardType

    @property
    def value(self) -> int:
        return card_value(self.type)


@dataclass
class Player:
    id: str
    name: str
    current_card: Optional[Card] = None
    discarded_cards: List[Card] = field(default_factory=list)
    is_protected: bool = False
    is_eliminated: bool = False
    tokens: int = 0

    def draw_card(self, card: Card):
        self.current_card = card

    def discard_current(self) -> Optional[Card]:
        """Move the held card onto the discard pile and return it."""
        card = self.current_card
        if card is not None:
            self.discarded_cards.append(card)
            self.current_card = None
        return card

    def held_value(self) -> int:
        return self.current_card.value if self.current_card else 0

    def reset_for_new_round(self):
        self.current_card = None
        self.discarded_cards = []
        self.is_protected = False
        self.is_eliminated = False


@dataclass
class GameState:
    room_code: str
    host_id: Optional[str] = None
    players: List[Player] = field(default_factory=list)  # seat order, never reordered
    deck: List[Card] = field(default_factory=list)  # top of the deck is index 0
    burned_card: Optional[Card] = None
    current_player_index: int = 0
    phase: str = PHASE_WAITING  # WAITING|PLAYING|ROUND_END|GAME_END
    round_number: int = 0
    last_action: Optional[str] = None
    winner_id: Optional[str] = None
    game_log: List[str] = field(default_factory=list)
    version: int = 0

    def get_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def get_current_player(self) -> Optional[Player]:
        if not self.players or self.current_player_index >= len(self.players):
            return None
        return self.players[self.current_player_index]

    def add_log_entry(self, entry: str):
        self.game_log.append(f"[Round {self.round_number}] {entry}")

    def increment_version(self):
        self.version += 1


@dataclass
class RoomInfo:
    room_code: str
    host_id: str
    player_count: int
    max_players: int = 4
    is_game_started: bool = False


@dataclass
class PlayAction:
    player_id: str
    card_type: CardType
    card_id: Optional[str] = None
    target_player_id: Optional[str] = None
    guessed_card: Optional[CardType] = None
