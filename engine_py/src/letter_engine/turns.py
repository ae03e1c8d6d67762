from typing import List

from .models import GameState, Player


def active_players(state: GameState) -> List[Player]:
    return [p for p in state.players if not p.is_eliminated]


def advance_turn(state: GameState):
    """
    Move the turn to the next non-eliminated player in seat order.

    With fewer than two active players the index is moved once and left
    there, so a lone survivor never spins the loop.
    """
    n = len(state.players)
    if n == 0:
        return
    while True:
        state.current_player_index = (state.current_player_index + 1) % n
        if not state.players[state.current_player_index].is_eliminated:
            return
        if len(active_players(state)) < 2:
            return
