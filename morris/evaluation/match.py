from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from morris.ai.heuristic import POSITION_WEIGHTS
from morris.ai.policy import Policy
from morris.core import (
    EMPTY,
    Capture,
    CompoundMove,
    GameState,
    MoveTo,
    Phase,
    Place,
    Player,
    apply_compound_move,
    apply_move,
    forms_mill,
    initialize_game_state,
    legal_moves,
)
from morris.core.topology import MILLS_BY_POSITION

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    games_played: int
    player_one_wins: int
    player_two_wins: int
    draws: int
    average_length: float

    def winrate_player_one(self) -> float:
        return self.player_one_wins / max(1, self.games_played)

    def winrate_player_two(self) -> float:
        return self.player_two_wins / max(1, self.games_played)


class RuleBasedPolicy(Policy):
    """Scripted opponent used as an evaluation baseline.

    With probability ``placement_mill_chance`` (or ``movement_mill_chance``
    once pieces move) it plays the first move that closes a mill, otherwise a
    uniformly random legal move. Captures go to the piece sitting on the most
    open lines, ties broken by board position value.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        *,
        placement_mill_chance: float = 0.3,
        movement_mill_chance: float = 0.4,
    ) -> None:
        self.rng = rng or np.random.default_rng()
        self.placement_mill_chance = placement_mill_chance
        self.movement_mill_chance = movement_mill_chance

    def act(self, state: GameState) -> CompoundMove:
        moves = legal_moves(state)
        if not moves:
            raise ValueError("No legal moves available.")
        if state.pending_capture is not None:
            return CompoundMove(self._choose_capture(state))

        chance = (
            self.placement_mill_chance if state.phase == Phase.PLACEMENT else self.movement_mill_chance
        )
        move = None
        if self.rng.random() < chance:
            move = next((m for m in moves if self._closes_mill(state, m)), None)
        if move is None:
            move = moves[int(self.rng.integers(len(moves)))]

        after = apply_move(state, move)
        if after.pending_capture is None:
            return CompoundMove(move)
        return CompoundMove(move, self._choose_capture(after))

    def spawn(self, seed: Optional[int] = None) -> "RuleBasedPolicy":
        return RuleBasedPolicy(
            np.random.default_rng(seed),
            placement_mill_chance=self.placement_mill_chance,
            movement_mill_chance=self.movement_mill_chance,
        )

    @staticmethod
    def _closes_mill(state: GameState, move) -> bool:
        board = state.board.copy()
        if isinstance(move, Place):
            target = move.position
        elif isinstance(move, MoveTo):
            board[move.source] = EMPTY
            target = move.target
        else:
            return False
        board[target] = int(state.current_player)
        return forms_mill(board, target, state.current_player)

    @staticmethod
    def _choose_capture(state: GameState):
        moves = legal_moves(state)
        capturer = int(state.current_player)
        best = moves[0]
        best_score = None
        for move in moves:
            if not isinstance(move, Capture):
                return move
            open_lines = sum(
                1
                for mill in MILLS_BY_POSITION[move.position]
                if all(int(state.board[p]) != capturer for p in mill)
            )
            score = open_lines * 20 + int(POSITION_WEIGHTS[move.position]) * 5
            if best_score is None or score > best_score:
                best, best_score = move, score
        return best


def play_game(
    policy_one: Policy,
    policy_two: Policy,
    *,
    max_ply: int = 200,
    state: Optional[GameState] = None,
) -> Tuple[GameState, List[CompoundMove]]:
    """Play one game to completion (or ``max_ply`` turns) and return the final state."""
    current = state.copy() if state is not None else initialize_game_state()
    history: List[CompoundMove] = []
    while not current.game_over and current.ply_count < max_ply:
        policy = policy_one if current.current_player == Player.ONE else policy_two
        compound = policy.act(current.copy())
        current = apply_compound_move(current, compound)
        history.append(compound)
    return current, history


def evaluate_policies(
    policy_one: Policy,
    policy_two: Policy,
    *,
    episodes: int,
    max_ply: int = 200,
    swap_sides: bool = False,
) -> EvaluationResult:
    """Play ``episodes`` games; with ``swap_sides`` the policies alternate colours.

    Wins are always credited to the policy, i.e. ``player_one_wins`` counts
    games won by ``policy_one`` regardless of the colour it played.
    """
    one_wins = 0
    two_wins = 0
    draws = 0
    total_ply = 0

    for episode in range(episodes):
        swapped = swap_sides and episode % 2 == 1
        first, second = (policy_two, policy_one) if swapped else (policy_one, policy_two)
        final, history = play_game(first, second, max_ply=max_ply)
        total_ply += len(history)

        winner = final.winner
        if winner is not None and swapped:
            winner = winner.opponent()
        if winner == Player.ONE:
            one_wins += 1
        elif winner == Player.TWO:
            two_wins += 1
        else:
            draws += 1
        logger.debug("episode %d finished after %d moves, winner=%s", episode, len(history), winner)

    return EvaluationResult(
        games_played=episodes,
        player_one_wins=one_wins,
        player_two_wins=two_wins,
        draws=draws,
        average_length=total_ply / max(1, episodes),
    )
