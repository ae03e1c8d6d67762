import itertools

from letter_engine.turns import active_players, advance_turn


def test_advance_wraps_around(make_session):
    state = make_session(3).state
    state.current_player_index = 2
    advance_turn(state)
    assert state.current_player_index == 0


def test_advance_skips_eliminated(make_session):
    state = make_session(4).state
    state.players[1].is_eliminated = True
    state.players[2].is_eliminated = True
    advance_turn(state)
    assert state.current_player_index == 3
    advance_turn(state)
    assert state.current_player_index == 0


def test_advance_stops_with_single_survivor(make_session):
    state = make_session(3).state
    state.players[1].is_eliminated = True
    state.players[2].is_eliminated = True
    advance_turn(state)  # must not loop forever
    assert state.current_player_index in (0, 1)


def test_advance_always_lands_on_active_player(make_session):
    for count in (2, 3, 4):
        for eliminated in itertools.product([False, True], repeat=count):
            for start in range(count):
                state = make_session(count).state
                for player, out in zip(state.players, eliminated):
                    player.is_eliminated = out
                state.current_player_index = start
                advance_turn(state)
                if len(active_players(state)) >= 2:
                    assert not state.players[state.current_player_index].is_eliminated
