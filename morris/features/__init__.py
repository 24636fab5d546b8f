from .observation import (
    AUX_VECTOR_SIZE,
    BOARD_CHANNELS,
    build_aux_vector,
    build_board_tensor,
    perspective_board,
    state_to_numpy,
)

__all__ = [
    "AUX_VECTOR_SIZE",
    "BOARD_CHANNELS",
    "build_aux_vector",
    "build_board_tensor",
    "perspective_board",
    "state_to_numpy",
]
