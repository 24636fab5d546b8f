from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from morris.core import EMPTY, GameState, Player
from morris.core.topology import (
    ADJACENCY_MATRIX,
    CORNERS,
    CROSS_POINTS,
    MILL_INDEX,
    MILLS_BY_POSITION,
    NUM_POSITIONS,
)

WIN_SCORE = 100_000


def _position_table() -> np.ndarray:
    table = np.ones(NUM_POSITIONS, dtype=np.int32)
    table[list(CORNERS)] = 2
    table[list(CROSS_POINTS)] = 3
    return table


POSITION_WEIGHTS = _position_table()


@dataclass
class HeuristicWeights:
    material: int = 60
    mills: int = 40
    position: int = 5
    mobility: int = 5
    mill_bonus: int = 30
    block_bonus: int = 25


DEFAULT_WEIGHTS = HeuristicWeights()


def evaluate(
    state: GameState,
    perspective: Player,
    weights: Optional[HeuristicWeights] = None,
) -> int:
    """Score ``state`` for ``perspective``; positive means better for it.

    Finished games score exactly ``+WIN_SCORE``/``-WIN_SCORE`` (0 for a
    draw); everything else stays strictly inside that range.
    """
    if state.game_over:
        if state.winner is None:
            return 0
        return WIN_SCORE if state.winner == perspective else -WIN_SCORE

    w = weights or DEFAULT_WEIGHTS
    board = state.board
    own = int(perspective)
    opp = int(perspective.opponent())

    own_mask = board == own
    opp_mask = board == opp
    empty_mask = board == EMPTY

    material = (
        int(state.pieces_remaining[perspective.index]) + int(state.pieces_on_board[perspective.index])
    ) - (
        int(state.pieces_remaining[perspective.opponent().index])
        + int(state.pieces_on_board[perspective.opponent().index])
    )

    lines = board[MILL_INDEX]
    mills = int(np.all(lines == own, axis=1).sum()) - int(np.all(lines == opp, axis=1).sum())

    position = int(POSITION_WEIGHTS[own_mask].sum()) - int(POSITION_WEIGHTS[opp_mask].sum())

    mobility = int((ADJACENCY_MATRIX[own_mask] & empty_mask).sum()) - int(
        (ADJACENCY_MATRIX[opp_mask] & empty_mask).sum()
    )

    score = (
        w.material * material
        + w.mills * mills
        + w.position * position
        + w.mobility * mobility
        + _last_move_bonus(state, perspective, w)
    )
    limit = WIN_SCORE - 1
    return int(max(-limit, min(limit, score)))


def _last_move_bonus(state: GameState, perspective: Player, w: HeuristicWeights) -> int:
    last = state.last_position
    if last is None:
        return 0
    occupant = int(state.board[last])
    if occupant == EMPTY:
        return 0
    mover = Player(occupant)
    opponent = int(mover.opponent())
    bonus = 0
    for mill in MILLS_BY_POSITION[last]:
        others = [int(state.board[p]) for p in mill if p != last]
        if all(cell == occupant for cell in others):
            bonus += w.mill_bonus
        elif all(cell == opponent for cell in others):
            bonus += w.block_bonus
    return bonus if mover == perspective else -bonus
