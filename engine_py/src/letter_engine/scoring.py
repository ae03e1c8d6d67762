# engine_py/src/letter_engine/scoring.py

import logging
from typing import Optional

from .constants import PHASE_GAME_END, PHASE_ROUND_END
from .models import GameState, Player
from .rules import RuleConfig, default_rules
from .turns import active_players

logger = logging.getLogger(__name__)


def determine_round_winner(state: GameState) -> Optional[Player]:
    """
    Pick the surviving player holding the highest card.

    Ties go to the earliest seat. A player without a card counts as 0.
    """
    winner = None
    for player in active_players(state):
        if winner is None or player.held_value() > winner.held_value():
            winner = player
    return winner


def check_round_end(state: GameState, rules: RuleConfig = default_rules) -> Optional[Player]:
    """
    End the round if only one player is left or the deck is exhausted.

    This function mutates the state: the round winner gains a token and the
    phase moves to ROUND_END, or to GAME_END when the winner reaches the
    token threshold for the table size.

    Args:
        state: The current GameState, with the last play fully resolved.
        rules: Rule configuration providing the token thresholds.

    Returns:
        The round winner, or None while the round continues.
    """
    active = active_players(state)
    if len(active) > 1 and state.deck:
        return None

    winner = determine_round_winner(state)
    if winner is None:
        return None  # nobody left standing; cannot happen with a valid deal

    winner.tokens += 1
    state.phase = PHASE_ROUND_END
    state.add_log_entry(f"Round over! {winner.name} wins the round and receives a token!")
    logger.info(f"Room {state.room_code}: round {state.round_number} won by {winner.name} ({winner.tokens} tokens)")

    if winner.tokens >= rules.tokens_to_win(len(state.players)):
        state.phase = PHASE_GAME_END
        state.winner_id = winner.id
        state.add_log_entry(f"GAME OVER! {winner.name} wins the game!")
        logger.info(f"Room {state.room_code}: game won by {winner.name}")

    return winner
