"""
Deck building, shuffling and dealing.
"""

import logging
import random
from typing import List, Optional

from .constants import CARD_CATALOG, PHASE_PLAYING
from .models import Card, GameState

logger = logging.getLogger(__name__)


def create_deck() -> List[Card]:
    """Create the 16-card deck, ``count`` copies of every card type."""
    deck = []
    for card_type, info in CARD_CATALOG.items():
        for i in range(1, info.count + 1):
            deck.append(Card(id=f"{card_type.value}-{i}", type=card_type))
    return deck


def shuffle_deck(deck: List[Card], seed: Optional[int] = None) -> List[Card]:
    """
    Shuffle a deck deterministically if seed is provided.

    Args:
        deck: Cards to shuffle
        seed: Optional seed for deterministic shuffling

    Returns:
        Shuffled copy of the deck
    """
    deck_copy = deck.copy()

    if seed is not None:
        rng = random.Random(seed)
        rng.shuffle(deck_copy)
    else:
        random.shuffle(deck_copy)

    return deck_copy


def draw_from_deck(state: GameState) -> Optional[Card]:
    """Take the top card of the deck, or None when it is exhausted."""
    if not state.deck:
        return None
    return state.deck.pop(0)


def deal_round(state: GameState, seed: Optional[int] = None) -> GameState:
    """
    Start a new round in place.

    Every player is reset, a fresh deck is shuffled, the top card is burned
    face-down and each player receives one card in seat order.

    Args:
        state: Room state to deal into
        seed: Optional seed for a reproducible shuffle

    Returns:
        The same state, now in the PLAYING phase
    """
    for player in state.players:
        player.reset_for_new_round()

    state.deck = shuffle_deck(create_deck(), seed)
    state.burned_card = state.deck.pop(0)

    for player in state.players:
        player.draw_card(state.deck.pop(0))

    state.phase = PHASE_PLAYING
    state.current_player_index = 0
    state.round_number += 1
    state.last_action = None
    state.add_log_entry(f"New round started with {len(state.players)} players.")
    logger.info(f"Room {state.room_code}: round {state.round_number} dealt, {len(state.deck)} cards left")
    return state
