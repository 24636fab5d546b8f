"""Stateful game controller used by front-ends.

``MillGame`` owns the single live :class:`GameState`, serialises commands
behind a lock and forwards rule events to registered listeners. Queries hand
out copies so callers can never mutate the live state.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Callable, FrozenSet, List, Optional, Tuple

import numpy as np

from . import rules
from .state import (
    Capture,
    GameEvent,
    GameState,
    MoveResult,
    MoveTo,
    Phase,
    Place,
    Player,
    RuleError,
    SelectForMove,
    SkipCapture,
)
from .topology import is_valid_position

if TYPE_CHECKING:
    from morris.ai.difficulty import DifficultyProfile
    from morris.ai.heuristic import HeuristicWeights
    from morris.ai.search import SearchResult

logger = logging.getLogger(__name__)

Listener = Callable[[GameEvent], None]


class MillGame:
    def __init__(self, state: Optional[GameState] = None) -> None:
        self._lock = threading.RLock()
        self._state = state.copy() if state is not None else rules.initialize_game_state()
        self._listeners: List[Listener] = []
        self.last_search: Optional["SearchResult"] = None

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def _publish(self, result: MoveResult) -> MoveResult:
        if result.ok:
            self._state = result.state
        for event in result.events:
            for listener in list(self._listeners):
                listener(event)
        return result

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def state(self) -> GameState:
        with self._lock:
            return self._state.copy()

    @property
    def board(self) -> Tuple[int, ...]:
        with self._lock:
            return tuple(int(cell) for cell in self._state.board)

    @property
    def current_player(self) -> Player:
        with self._lock:
            return self._state.current_player

    @property
    def phase(self) -> Phase:
        with self._lock:
            return self._state.phase

    @property
    def pieces_remaining(self) -> Tuple[int, int]:
        with self._lock:
            return (self._state.remaining(Player.ONE), self._state.remaining(Player.TWO))

    @property
    def pieces_on_board(self) -> Tuple[int, int]:
        with self._lock:
            return (self._state.on_board(Player.ONE), self._state.on_board(Player.TWO))

    @property
    def selected(self) -> Optional[int]:
        with self._lock:
            return self._state.selected

    @property
    def awaiting_capture(self) -> bool:
        with self._lock:
            return self._state.pending_capture is not None

    @property
    def removable_positions(self) -> FrozenSet[int]:
        with self._lock:
            pending = self._state.pending_capture
        return pending if pending is not None else frozenset()

    @property
    def game_over(self) -> bool:
        with self._lock:
            return self._state.game_over

    @property
    def winner(self) -> Optional[Player]:
        with self._lock:
            return self._state.winner

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def reset(self) -> None:
        with self._lock:
            self._state = rules.initialize_game_state()
            self.last_search = None
        logger.debug("game reset")

    def click(self, position: int) -> MoveResult:
        """Interpret a board click the way a pointing front-end would.

        During placement the click places a piece; afterwards a click on one
        of the mover's pieces selects (or deselects) it and any other click
        tries to move the selected piece there. Clicks during a pending
        capture are treated as capture targets.
        """
        with self._lock:
            state = self._state
            if state.pending_capture is not None:
                return self._publish(rules.capture(state, position))
            if state.phase == Phase.PLACEMENT:
                return self._publish(rules.place(state, position))
            if is_valid_position(position) and state.board[position] == int(state.current_player):
                return self._publish(rules.select(state, position))
            return self._publish(rules.move_to(state, position))

    def capture(self, position: int) -> MoveResult:
        with self._lock:
            return self._publish(rules.capture(self._state, position))

    def skip_capture(self) -> MoveResult:
        with self._lock:
            return self._publish(rules.skip_capture(self._state))

    def ai_move(
        self,
        profile: "DifficultyProfile",
        *,
        weights: Optional["HeuristicWeights"] = None,
        rng: Optional[np.random.Generator] = None,
        cancel_check: Optional[Callable[[], bool]] = None,
    ) -> MoveResult:
        """Let the search engine play one compound move for the current player.

        The search runs on a copy; the chosen steps are then submitted through
        the same commands a human would use. A finished game is reported as
        ``GAME_ALREADY_OVER`` without searching.
        """
        from morris.ai.search import AlphaBetaSearch

        with self._lock:
            if self._state.game_over:
                return MoveResult(self._state, RuleError.GAME_ALREADY_OVER)
            search = AlphaBetaSearch(profile, weights=weights, rng=rng)
            result = search.run(self._state, cancel_check=cancel_check)
            self.last_search = result

            events: List[GameEvent] = []
            for step in result.move.steps():
                outcome = self._submit(step)
                if not outcome.ok:
                    raise RuntimeError(
                        f"search produced an illegal step {step!r}: {outcome.error.value}"
                    )
                events.extend(outcome.events)
            logger.info(
                "%s (%s) played %s score=%d nodes=%d",
                result.player.name,
                profile.name,
                result.move,
                result.score,
                result.nodes,
            )
            return MoveResult(self._state, None, tuple(events))

    def _submit(self, step) -> MoveResult:
        state = self._state
        if isinstance(step, Place):
            return self._publish(rules.place(state, step.position))
        if isinstance(step, MoveTo):
            if state.selected != step.source:
                selected = self._publish(rules.select(state, step.source))
                if not selected.ok:
                    return selected
            return self._publish(rules.move_to(self._state, step.target))
        if isinstance(step, SelectForMove):
            return self._publish(rules.select(state, step.position))
        if isinstance(step, Capture):
            return self._publish(rules.capture(state, step.position))
        if isinstance(step, SkipCapture):
            return self._publish(rules.skip_capture(state))
        raise TypeError(f"Unknown move type: {type(step).__name__}")
