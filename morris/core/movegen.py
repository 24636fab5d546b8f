from __future__ import annotations

from typing import List

import numpy as np

from .rules import apply_move, flying_allowed
from .state import EMPTY, Capture, CompoundMove, GameState, Move, MoveTo, Phase, Place, SkipCapture
from .topology import ADJACENCY


def legal_moves(state: GameState) -> List[Move]:
    """Every move the current player may submit, in a fixed ascending order."""
    if state.game_over:
        return []

    if state.pending_capture is not None:
        if not state.pending_capture:
            return [SkipCapture()]
        return [Capture(pos) for pos in sorted(state.pending_capture)]

    empty = [int(pos) for pos in np.flatnonzero(state.board == EMPTY)]
    mover = state.current_player

    if state.phase == Phase.PLACEMENT:
        if state.remaining(mover) <= 0:
            return []
        return [Place(pos) for pos in empty]

    moves: List[Move] = []
    flying = flying_allowed(state)
    for source in state.positions_of(mover):
        if flying:
            moves.extend(MoveTo(source, target) for target in empty)
        else:
            neighbours = ADJACENCY[source]
            moves.extend(MoveTo(source, target) for target in empty if target in neighbours)
    return moves


def has_legal_moves(state: GameState) -> bool:
    return bool(legal_moves(state))


def apply_compound_move(state: GameState, compound: CompoundMove) -> GameState:
    next_state = state.copy()
    for step in compound.steps():
        apply_move(next_state, step, in_place=True)
    return next_state
