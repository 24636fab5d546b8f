from __future__ import annotations

from typing import Optional

import numpy as np

from morris.core import CompoundMove, GameState, apply_move, legal_moves

from .difficulty import DifficultyProfile
from .heuristic import HeuristicWeights
from .search import AlphaBetaSearch


class Policy:
    """Policy interface producing one compound move for the player to move."""

    def act(self, state: GameState) -> CompoundMove:
        raise NotImplementedError

    def spawn(self, seed: Optional[int] = None) -> "Policy":
        """Return an independent copy of this policy, e.g. for another game."""
        return self


class RandomPolicy(Policy):
    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self.rng = rng or np.random.default_rng()

    def act(self, state: GameState) -> CompoundMove:
        moves = legal_moves(state)
        if not moves:
            raise ValueError("No legal moves available.")
        move = moves[int(self.rng.integers(len(moves)))]
        after = apply_move(state, move)
        if after.pending_capture is None:
            return CompoundMove(move)
        captures = legal_moves(after)
        return CompoundMove(move, captures[int(self.rng.integers(len(captures)))])

    def spawn(self, seed: Optional[int] = None) -> "RandomPolicy":
        return RandomPolicy(np.random.default_rng(seed))


class SearchPolicy(Policy):
    def __init__(
        self,
        profile: DifficultyProfile,
        *,
        weights: Optional[HeuristicWeights] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.profile = profile
        self.weights = weights
        self.search = AlphaBetaSearch(profile, weights=weights, rng=rng or np.random.default_rng())

    def act(self, state: GameState) -> CompoundMove:
        return self.search.run(state).move

    def spawn(self, seed: Optional[int] = None) -> "SearchPolicy":
        return SearchPolicy(self.profile, weights=self.weights, rng=np.random.default_rng(seed))
