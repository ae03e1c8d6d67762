import itertools
from typing import Dict, Iterable, Optional

import orjson
import pytest

from letter_engine.constants import CardType, PHASE_PLAYING
from letter_engine.engine import GameSession, LetterEngine
from letter_engine.models import Card, GameState
from letter_engine.serialization import serialize_state

_card_ids = itertools.count(1)


def make_card(card_type: CardType) -> Card:
    return Card(id=f"{card_type.value}-t{next(_card_ids)}", type=card_type)


def rig_round(state: GameState, hands: Dict[str, CardType], deck: Iterable[CardType] = (),
              burned: Optional[CardType] = CardType.PRIEST, current: int = 0) -> GameState:
    """Put a state mid-round with chosen hands, deck and burned card."""
    for player in state.players:
        player.reset_for_new_round()
        if player.id in hands:
            player.draw_card(make_card(hands[player.id]))
    state.deck = [make_card(t) for t in deck]
    state.burned_card = make_card(burned) if burned else None
    state.current_player_index = current
    state.phase = PHASE_PLAYING
    state.round_number = max(state.round_number, 1)
    return state


@pytest.fixture
def engine():
    return LetterEngine()


@pytest.fixture
def make_session():
    def _make(player_count: int = 2) -> GameSession:
        session = GameSession("1234", "A", "Alice")
        for pid, name in list(zip("BCD", ["Bob", "Carol", "Dave"]))[:player_count - 1]:
            session.join(pid, name)
        return session
    return _make


@pytest.fixture
def rig():
    return rig_round


@pytest.fixture
def snapshot_bytes():
    def _dump(state: GameState) -> bytes:
        return orjson.dumps(serialize_state(state))
    return _dump


def _count_cards(state: GameState) -> int:
    hands = sum(1 for p in state.players if p.current_card)
    discards = sum(len(p.discarded_cards) for p in state.players)
    burned = 1 if state.burned_card else 0
    return len(state.deck) + hands + discards + burned


@pytest.fixture
def count_cards():
    """Count every card in play, wherever it currently sits."""
    return _count_cards
