"""
Card effects implementation.
"""

import copy
import logging
from typing import Optional

from .constants import CardType, PHASE_PLAYING, card_info
from .errors import raise_error
from .models import GameState, PlayAction, Player
from .rules import RuleConfig, default_rules
from .scoring import check_round_end
from .shuffle import draw_from_deck
from .turns import advance_turn
from .validate import validate_play

logger = logging.getLogger(__name__)


def apply_guard(state: GameState, player: Player, target: Player, guess: CardType):
    """
    Apply Guard effect - eliminate the target if the guess names their card.

    Args:
        state: Working room state
        player: Player who played the Guard
        target: Targeted player
        guess: Card type named by the player
    """
    guess_name = card_info(guess).name
    if target.current_card is not None and target.current_card.type == guess:
        target.is_eliminated = True
        state.add_log_entry(
            f"{player.name} guessed right! {target.name} held the {guess_name} and is out of the round."
        )
    else:
        state.add_log_entry(
            f"{player.name} guessed wrong. {target.name} does not hold the {guess_name}."
        )


def apply_priest(state: GameState, player: Player, target: Player):
    """Apply Priest effect - reveal the target's card in the log."""
    held = card_info(target.current_card.type).name if target.current_card else "nothing"
    state.add_log_entry(f"{player.name} looked at {target.name}'s card: {held}")


def apply_baron(state: GameState, player: Player, target: Player):
    """
    Apply Baron effect - the lower held card is out of the round.

    Args:
        state: Working room state
        player: Player who played the Baron
        target: Player challenged to the duel
    """
    player_value = player.held_value()
    target_value = target.held_value()

    if player_value > target_value:
        target.is_eliminated = True
        state.add_log_entry(
            f"{player.name} ({player_value}) beat {target.name} ({target_value}) in a duel!"
        )
    elif target_value > player_value:
        player.is_eliminated = True
        state.add_log_entry(
            f"{target.name} ({target_value}) beat {player.name} ({player_value}) in a duel!"
        )
    else:
        state.add_log_entry(
            f"{player.name} and {target.name} both hold {player_value}. The duel is a draw!"
        )


def apply_handmaid(state: GameState, player: Player):
    state.add_log_entry(f"{player.name} is protected until the next turn!")


def apply_prince(state: GameState, player: Player, target: Player):
    """
    Apply Prince effect - the target discards their card and draws again.

    A discarded Princess knocks the target out. Otherwise the replacement
    comes from the deck, or from the burned card once the deck is empty.

    Args:
        state: Working room state
        player: Player who played the Prince
        target: Player forced to discard (may be the player themselves)
    """
    discarded = target.discard_current()
    if discarded is None:
        state.add_log_entry(f"{target.name} had no card to discard.")
    elif discarded.type == CardType.PRINCESS:
        target.is_eliminated = True
        state.add_log_entry(f"{target.name} had to discard the Princess and is out of the round!")
        return
    else:
        state.add_log_entry(
            f"{player.name} made {target.name} discard the {card_info(discarded.type).name}."
        )

    replacement = draw_from_deck(state)
    if replacement is None and state.burned_card is not None:
        replacement = state.burned_card
        state.burned_card = None
        state.add_log_entry(f"{target.name} drew the burned card.")
    if replacement is not None:
        target.draw_card(replacement)


def apply_king(state: GameState, player: Player, target: Player):
    """Apply King effect - trade held cards with the target."""
    player.current_card, target.current_card = target.current_card, player.current_card
    state.add_log_entry(f"{player.name} traded hands with {target.name}!")


def apply_countess(state: GameState, player: Player):
    state.add_log_entry(f"{player.name} discarded the Countess.")


def apply_princess(state: GameState, player: Player):
    player.is_eliminated = True
    state.add_log_entry(f"{player.name} discarded the Princess and is out of the round!")


def _dispatch(state: GameState, card_type: CardType, player: Player,
              target: Optional[Player], guess: Optional[CardType]):
    if card_type == CardType.GUARD:
        apply_guard(state, player, target, guess)
    elif card_type == CardType.PRIEST:
        apply_priest(state, player, target)
    elif card_type == CardType.BARON:
        apply_baron(state, player, target)
    elif card_type == CardType.HANDMAID:
        apply_handmaid(state, player)
    elif card_type == CardType.PRINCE:
        apply_prince(state, player, target)
    elif card_type == CardType.KING:
        apply_king(state, player, target)
    elif card_type == CardType.COUNTESS:
        apply_countess(state, player)
    elif card_type == CardType.PRINCESS:
        apply_princess(state, player)
    else:
        raise ValueError(f"Unknown card type: {card_type}")


def _describe(player: Player, card_type: CardType, target: Optional[Player],
              guess: Optional[CardType]) -> str:
    text = f"{player.name} played {card_info(card_type).name}"
    if target is not None and target is not player:
        text += f" on {target.name}"
    if guess is not None:
        text += f" guessing {card_info(guess).name}"
    return text


def play_card(state: GameState, action: PlayAction,
              rules: RuleConfig = default_rules) -> GameState:
    """
    Validate and resolve a card play.

    The committed state is never touched: validation reads it, then all
    effects are applied to a deep copy which is returned.

    The actor draws the replacement card before the effect is dispatched,
    so Baron, King and Prince act on the freshly drawn card.

    Args:
        state: Current room state
        action: The play being made
        rules: Rule configuration (token thresholds)

    Returns:
        The new room state

    Raises:
        GameError: If the play is not allowed
    """
    result = validate_play(state, action)
    if not result.valid:
        logger.debug(f"Room {state.room_code}: rejected play by {action.player_id}: {result.error_message}")
        raise_error(result.error_code, result.error_message)

    new_state = copy.deepcopy(state)
    player = new_state.get_player(action.player_id)
    target = new_state.get_player(result.target_id) if result.target_id else None
    card_type = CardType(action.card_type)
    guess = CardType(action.guessed_card) if action.guessed_card is not None else None

    player.discard_current()
    replacement = draw_from_deck(new_state)
    if replacement is not None:
        player.draw_card(replacement)

    new_state.last_action = _describe(player, card_type, target, guess)

    if target is not None and target is not player and target.is_protected:
        new_state.add_log_entry(
            f"{player.name} tried to target {target.name} with the "
            f"{card_info(card_type).name}, but {target.name} is protected!"
        )
    else:
        _dispatch(new_state, card_type, player, target, guess)

    # Protection only lasts until the next play
    for p in new_state.players:
        p.is_protected = False
    if card_type == CardType.HANDMAID:
        player.is_protected = True

    check_round_end(new_state, rules)
    if new_state.phase == PHASE_PLAYING:
        advance_turn(new_state)

    new_state.increment_version()
    return new_state
