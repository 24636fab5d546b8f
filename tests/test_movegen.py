import numpy as np

from morris.ai import RandomPolicy
from morris.core import (
    Capture,
    CompoundMove,
    MoveTo,
    Place,
    Player,
    SkipCapture,
    apply_compound_move,
    apply_move,
    has_legal_moves,
    initialize_game_state,
    legal_moves,
)

from tests.test_rules import custom_state, play


def test_placement_moves_cover_empty_positions_in_order() -> None:
    state = play(initialize_game_state(), 5, 7)
    moves = legal_moves(state)
    assert moves == [Place(pos) for pos in range(24) if pos not in (5, 7)]


def test_movement_moves_ordered_by_source_then_target() -> None:
    state = custom_state([0, 3, 10, 13], [1, 5, 22, 23])
    expected = [
        MoveTo(0, 9),
        MoveTo(3, 4),
        MoveTo(10, 9),
        MoveTo(10, 11),
        MoveTo(10, 18),
        MoveTo(13, 12),
        MoveTo(13, 14),
        MoveTo(13, 20),
    ]
    assert legal_moves(state) == expected


def test_flying_moves_reach_every_empty_position() -> None:
    state = custom_state([0, 1, 21], [3, 4, 12, 16, 20])
    moves = legal_moves(state)
    empty = state.empty_positions()
    assert len(moves) == 3 * len(empty)
    assert all(isinstance(move, MoveTo) for move in moves)
    assert {move.target for move in moves} == set(empty)


def test_capture_moves_during_pending_capture() -> None:
    state = play(initialize_game_state(), 0, 23, 1, 12, 2)
    assert legal_moves(state) == [Capture(12), Capture(23)]

    state.pending_capture = frozenset()
    assert legal_moves(state) == [SkipCapture()]


def test_no_moves_once_game_is_over() -> None:
    state = custom_state([1, 9, 14, 19], [0, 2, 21, 23])
    after = apply_move(state, MoveTo(19, 22))
    assert legal_moves(after) == []
    assert not has_legal_moves(after)


def test_generated_moves_are_always_accepted() -> None:
    rng = np.random.default_rng(7)
    policy = RandomPolicy(rng)
    state = initialize_game_state()
    for _ in range(120):
        if state.game_over:
            break
        for move in legal_moves(state):
            apply_move(state, move)
        state = apply_compound_move(state, policy.act(state))


def test_random_playout_keeps_counts_consistent() -> None:
    for seed in range(3):
        policy = RandomPolicy(np.random.default_rng(seed))
        state = initialize_game_state()
        lost = {Player.ONE: 0, Player.TWO: 0}
        while not state.game_over and state.ply_count < 150:
            compound = policy.act(state)
            assert isinstance(compound, CompoundMove)
            if isinstance(compound.capture, Capture):
                lost[state.current_player.opponent()] += 1
            state = apply_compound_move(state, compound)
            for player in Player:
                on_board = int(np.count_nonzero(state.board == int(player)))
                assert on_board == state.on_board(player)
                assert state.remaining(player) + state.on_board(player) == 9 - lost[player]
                assert state.remaining(player) >= 0
            assert state.pending_capture is None
            assert state.selected is None
