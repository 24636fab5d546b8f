from __future__ import annotations

from typing import Tuple

import numpy as np

from morris.core import PIECES_PER_PLAYER, GameState, Phase, Player
from morris.core.topology import NUM_POSITIONS

BOARD_CHANNELS = 3  # empty / player one / player two
AUX_VECTOR_SIZE = 10  # mover one-hot (2) + phase one-hot (3) + counts (4) + capture flag (1)

_PHASES = (Phase.PLACEMENT, Phase.MOVEMENT, Phase.FLYING)


def build_board_tensor(state: GameState) -> np.ndarray:
    """Return a (3, 24) one-hot encoding of the board cells."""
    tensor = np.zeros((BOARD_CHANNELS, NUM_POSITIONS), dtype=np.float32)
    tensor[state.board.astype(np.intp), np.arange(NUM_POSITIONS)] = 1.0
    return tensor


def build_aux_vector(state: GameState) -> np.ndarray:
    aux = np.zeros((AUX_VECTOR_SIZE,), dtype=np.float32)
    aux[state.current_player.index] = 1.0
    aux[2 + _PHASES.index(state.phase)] = 1.0
    aux[5:7] = state.pieces_remaining.astype(np.float32) / PIECES_PER_PLAYER
    aux[7:9] = state.pieces_on_board.astype(np.float32) / PIECES_PER_PLAYER
    aux[9] = 1.0 if state.pending_capture is not None else 0.0
    return aux


def state_to_numpy(state: GameState) -> Tuple[np.ndarray, np.ndarray]:
    return build_board_tensor(state), build_aux_vector(state)


def perspective_board(state: GameState, player: Player) -> np.ndarray:
    """Board tensor with ``player``'s pieces always in channel 1."""
    tensor = build_board_tensor(state)
    if player == Player.TWO:
        tensor = tensor[[0, 2, 1]]
    return tensor
