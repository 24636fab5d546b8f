from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np

from morris.core import (
    Capture,
    CompoundMove,
    GameState,
    Player,
    SkipCapture,
    apply_move,
    legal_moves,
)

from .difficulty import DifficultyProfile
from .heuristic import WIN_SCORE, HeuristicWeights, evaluate

logger = logging.getLogger(__name__)

INF = 10**9
CancelCheck = Callable[[], bool]
Child = Tuple[CompoundMove, GameState]


@dataclass
class SearchResult:
    move: CompoundMove
    score: int
    player: Player
    depth: int
    nodes: int
    candidates: List[Tuple[CompoundMove, int]] = field(default_factory=list)
    cancelled: bool = False


class AlphaBetaSearch:
    """Depth-limited minimax with alpha-beta pruning over compound moves.

    A placement or relocation that closes a mill is expanded together with a
    single capture: the one that leaves the mover with the best static score.
    Every child is built from a fresh copy so sibling branches never share
    mutable state with each other or with the caller's state.
    """

    def __init__(
        self,
        profile: DifficultyProfile,
        *,
        weights: Optional[HeuristicWeights] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.profile = profile
        self.weights = weights
        self.rng = rng or np.random.default_rng()
        self._perspective = Player.ONE
        self._nodes = 0

    # ------------------------------------------------------------------
    def run(self, state: GameState, *, cancel_check: Optional[CancelCheck] = None) -> SearchResult:
        root = state.copy()
        if root.game_over:
            raise ValueError("Cannot search from a finished game.")
        children = self.children(root)
        if not children:
            raise ValueError("Current player has no legal moves.")

        self._perspective = root.current_player
        self._nodes = 1
        depth = self.profile.depth
        exact = not self.profile.deterministic

        scored: List[Tuple[CompoundMove, int]] = []
        cancelled = False
        alpha = -INF
        for index, (compound, child) in enumerate(children):
            if index > 0 and cancel_check is not None and cancel_check():
                cancelled = True
                break
            if exact:
                score = self._alphabeta(child, depth - 1, -INF, INF)
            else:
                score = self._alphabeta(child, depth - 1, alpha, INF)
                alpha = max(alpha, score)
            scored.append((compound, score))

        move, score = self._pick(scored)
        logger.debug(
            "%s depth=%d nodes=%d candidates=%d best=%s score=%d%s",
            self._perspective.name,
            depth,
            self._nodes,
            len(scored),
            move,
            score,
            " (cancelled)" if cancelled else "",
        )
        return SearchResult(
            move=move,
            score=score,
            player=self._perspective,
            depth=depth,
            nodes=self._nodes,
            candidates=scored,
            cancelled=cancelled,
        )

    def children(self, state: GameState) -> List[Child]:
        """Expand ``state`` into (compound move, resulting state) pairs."""
        expanded: List[Child] = []
        for move in legal_moves(state):
            child = apply_move(state, move)
            if child.pending_capture is None:
                expanded.append((CompoundMove(move), child))
                continue
            capture, child = self._resolve_capture(child)
            expanded.append((CompoundMove(move, capture), child))
        return expanded

    # ------------------------------------------------------------------
    def _resolve_capture(self, state: GameState):
        if not state.pending_capture:
            return SkipCapture(), apply_move(state, SkipCapture())
        mover = state.current_player
        best = None
        for position in sorted(state.pending_capture):
            candidate = Capture(position)
            child = apply_move(state, candidate)
            score = evaluate(child, mover, self.weights)
            if best is None or score > best[0]:
                best = (score, candidate, child)
        return best[1], best[2]

    def _alphabeta(self, state: GameState, depth: int, alpha: int, beta: int) -> int:
        self._nodes += 1
        if state.game_over:
            score = evaluate(state, self._perspective, self.weights)
            # Prefer quick wins and slow losses.
            if score > 0:
                return score + depth
            if score < 0:
                return score - depth
            return score
        if depth <= 0:
            return evaluate(state, self._perspective, self.weights)

        children = self.children(state)
        if not children:
            return evaluate(state, self._perspective, self.weights)

        if state.current_player == self._perspective:
            value = -INF
            for _, child in children:
                value = max(value, self._alphabeta(child, depth - 1, alpha, beta))
                alpha = max(alpha, value)
                if alpha >= beta:
                    break
            return value

        value = INF
        for _, child in children:
            value = min(value, self._alphabeta(child, depth - 1, alpha, beta))
            beta = min(beta, value)
            if alpha >= beta:
                break
        return value

    def _pick(self, scored: List[Tuple[CompoundMove, int]]) -> Tuple[CompoundMove, int]:
        best = scored[0]
        for entry in scored[1:]:
            if entry[1] > best[1]:
                best = entry
        profile = self.profile
        if profile.deterministic or best[1] >= WIN_SCORE:
            return best

        adjusted: List[Tuple[int, int, CompoundMove]] = []
        for order, (compound, score) in enumerate(scored):
            if abs(score) < WIN_SCORE and profile.noise > 0 and self.rng.random() < profile.randomness:
                score += int(self.rng.integers(-profile.noise, profile.noise + 1))
            adjusted.append((score, order, compound))
        adjusted.sort(key=lambda item: (-item[0], item[1]))

        pool = [item for item in adjusted if item[0] > -WIN_SCORE] or adjusted
        if profile.top_k > 1 and self.rng.random() < profile.randomness:
            chosen = pool[int(self.rng.integers(0, min(profile.top_k, len(pool))))]
        else:
            chosen = pool[0]
        original = dict((compound, score) for compound, score in scored)
        return chosen[2], original[chosen[2]]


def choose_move(
    state: GameState,
    profile: DifficultyProfile,
    *,
    weights: Optional[HeuristicWeights] = None,
    rng: Optional[np.random.Generator] = None,
    cancel_check: Optional[CancelCheck] = None,
) -> CompoundMove:
    return AlphaBetaSearch(profile, weights=weights, rng=rng).run(state, cancel_check=cancel_check).move
