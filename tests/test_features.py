import numpy as np

from morris.core import Phase, Player, initialize_game_state
from morris.features import (
    AUX_VECTOR_SIZE,
    BOARD_CHANNELS,
    build_aux_vector,
    build_board_tensor,
    perspective_board,
    state_to_numpy,
)

from tests.test_rules import custom_state, play


def test_state_to_numpy_initial_board():
    board, aux = state_to_numpy(initialize_game_state())

    assert board.shape == (BOARD_CHANNELS, 24)
    assert aux.shape == (AUX_VECTOR_SIZE,)
    # every cell empty
    assert board[0].sum() == 24
    assert aux[0] == 1.0 and aux[2] == 1.0
    assert np.allclose(aux[5:7], 1.0)


def test_board_tensor_is_one_hot_per_cell():
    state = play(initialize_game_state(), 3, 20, 7)
    board = build_board_tensor(state)

    assert np.allclose(board.sum(axis=0), 1.0)
    assert board[1, 3] == 1.0 and board[1, 7] == 1.0
    assert board[2, 20] == 1.0


def test_aux_vector_tracks_phase_and_capture():
    state = custom_state([0, 1, 14, 18, 21], [3, 4, 5, 23])
    aux = build_aux_vector(state)
    assert state.phase == Phase.MOVEMENT
    assert aux[3] == 1.0
    assert aux[9] == 0.0

    state.pending_capture = frozenset({23})
    assert build_aux_vector(state)[9] == 1.0


def test_perspective_board_swaps_players():
    state = play(initialize_game_state(), 3, 20)
    mine = perspective_board(state, Player.TWO)
    assert mine[1, 20] == 1.0
    assert mine[2, 3] == 1.0
