from __future__ import annotations

import logging
from typing import FrozenSet, List, Optional

import numpy as np

from .state import (
    EMPTY,
    FLYING_THRESHOLD,
    MIN_PIECES_ON_BOARD,
    PIECES_PER_PLAYER,
    BoardArray,
    Capture,
    EventKind,
    GameEvent,
    GameState,
    Move,
    MoveResult,
    MoveTo,
    Phase,
    Place,
    Player,
    RuleError,
    SelectForMove,
    SkipCapture,
    new_board,
)
from .topology import ADJACENCY, MILL_INDEX, MILLS_BY_POSITION, NUM_POSITIONS, is_valid_position

logger = logging.getLogger(__name__)

PLACE_OFFSET = 0
MOVE_OFFSET = PLACE_OFFSET + NUM_POSITIONS
CAPTURE_OFFSET = MOVE_OFFSET + NUM_POSITIONS * NUM_POSITIONS
SKIP_INDEX = CAPTURE_OFFSET + NUM_POSITIONS
ACTION_VECTOR_SIZE = SKIP_INDEX + 1


class IllegalMoveError(ValueError):
    """Raised by :func:`apply_move` when the rules reject a move."""

    def __init__(self, error: RuleError, move: Optional[Move] = None) -> None:
        super().__init__(f"{error.value}: {move!r}")
        self.error = error
        self.move = move


def encode_action(move: Move) -> int:
    if isinstance(move, Place):
        return PLACE_OFFSET + move.position
    if isinstance(move, MoveTo):
        return MOVE_OFFSET + move.source * NUM_POSITIONS + move.target
    if isinstance(move, Capture):
        return CAPTURE_OFFSET + move.position
    if isinstance(move, SkipCapture):
        return SKIP_INDEX
    raise ValueError(f"Move {move!r} has no action index.")


def decode_action(index: int) -> Move:
    if not 0 <= index < ACTION_VECTOR_SIZE:
        raise ValueError("Action index out of range.")
    if index < MOVE_OFFSET:
        return Place(index - PLACE_OFFSET)
    if index < CAPTURE_OFFSET:
        source, target = divmod(index - MOVE_OFFSET, NUM_POSITIONS)
        return MoveTo(source, target)
    if index < SKIP_INDEX:
        return Capture(index - CAPTURE_OFFSET)
    return SkipCapture()


def initialize_game_state() -> GameState:
    return GameState(
        board=new_board(),
        pieces_remaining=np.full(2, PIECES_PER_PLAYER, dtype=np.int16),
        pieces_on_board=np.zeros(2, dtype=np.int16),
        current_player=Player.ONE,
        phase=Phase.PLACEMENT,
    )


# ----------------------------------------------------------------------
# Board predicates
# ----------------------------------------------------------------------
def forms_mill(board: BoardArray, position: int, player: Player) -> bool:
    """True if ``player`` owns a complete line through ``position``."""
    value = int(player)
    return any(all(board[p] == value for p in mill) for mill in MILLS_BY_POSITION[position])


def count_mills(board: BoardArray, player: Player) -> int:
    return int(np.all(board[MILL_INDEX] == int(player), axis=1).sum())


def removable_positions(board: BoardArray, owner: Player) -> FrozenSet[int]:
    pieces = [int(p) for p in np.flatnonzero(board == int(owner))]
    free = [p for p in pieces if not forms_mill(board, p, owner)]
    return frozenset(free if free else pieces)


def is_protected(board: BoardArray, position: int) -> bool:
    owner = int(board[position])
    if owner == EMPTY:
        return False
    return position not in removable_positions(board, Player(owner))


def can_move(state: GameState, player: Player) -> bool:
    """Whether ``player`` has any relocation available on the current board."""
    empty = state.board == EMPTY
    if state.on_board(player) <= FLYING_THRESHOLD:
        return bool(empty.any())
    for pos in np.flatnonzero(state.board == int(player)):
        if any(empty[n] for n in ADJACENCY[int(pos)]):
            return True
    return False


def flying_allowed(state: GameState) -> bool:
    return (
        state.phase == Phase.FLYING
        and state.on_board(state.current_player) <= FLYING_THRESHOLD
    )


# ----------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------
def _check_turn(state: GameState) -> Optional[RuleError]:
    if state.game_over:
        return RuleError.GAME_ALREADY_OVER
    if state.pending_capture is not None:
        return RuleError.CAPTURE_PENDING
    return None


def _check_place(state: GameState, position: int) -> Optional[RuleError]:
    error = _check_turn(state)
    if error is not None:
        return error
    if not is_valid_position(position):
        return RuleError.OUT_OF_RANGE
    if state.phase != Phase.PLACEMENT:
        return RuleError.INVALID_PHASE
    if state.remaining(state.current_player) <= 0:
        return RuleError.NO_PIECES_REMAINING
    if state.board[position] != EMPTY:
        return RuleError.OCCUPIED_POSITION
    return None


def _check_select(state: GameState, position: int) -> Optional[RuleError]:
    error = _check_turn(state)
    if error is not None:
        return error
    if not is_valid_position(position):
        return RuleError.OUT_OF_RANGE
    if state.phase == Phase.PLACEMENT:
        return RuleError.INVALID_PHASE
    if state.board[position] != int(state.current_player):
        return RuleError.NOT_CURRENT_PLAYERS_PIECE
    return None


def _check_relocation(state: GameState, source: Optional[int], target: int) -> Optional[RuleError]:
    error = _check_turn(state)
    if error is not None:
        return error
    if not is_valid_position(target):
        return RuleError.OUT_OF_RANGE
    if state.phase == Phase.PLACEMENT:
        return RuleError.INVALID_PHASE
    if source is None:
        return RuleError.NO_SELECTION
    if not is_valid_position(source):
        return RuleError.OUT_OF_RANGE
    if state.board[source] != int(state.current_player):
        return RuleError.NOT_CURRENT_PLAYERS_PIECE
    if state.board[target] != EMPTY:
        return RuleError.OCCUPIED_POSITION
    if not flying_allowed(state) and target not in ADJACENCY[source]:
        return RuleError.NOT_ADJACENT
    return None


def _check_capture(state: GameState, position: int) -> Optional[RuleError]:
    if state.game_over:
        return RuleError.GAME_ALREADY_OVER
    if state.pending_capture is None:
        return RuleError.NOT_PENDING_CAPTURE
    if not is_valid_position(position):
        return RuleError.OUT_OF_RANGE
    if state.board[position] != int(state.current_player.opponent()):
        return RuleError.NOT_OPPONENT_PIECE
    if position not in state.pending_capture:
        return RuleError.PROTECTED_PIECE
    return None


def _check_skip(state: GameState) -> Optional[RuleError]:
    if state.game_over:
        return RuleError.GAME_ALREADY_OVER
    if state.pending_capture is None:
        return RuleError.NOT_PENDING_CAPTURE
    if state.pending_capture:
        return RuleError.CAPTURE_PENDING
    return None


# ----------------------------------------------------------------------
# Mutation helpers (inputs already validated)
# ----------------------------------------------------------------------
def _end_game(state: GameState, winner: Player, events: List[GameEvent]) -> None:
    state.game_over = True
    state.winner = winner
    state.selected = None
    events.append(GameEvent(EventKind.GAME_OVER, winner))
    logger.debug("game over after %d plies, winner=%s", state.ply_count, winner.name)


def _finish_turn(state: GameState, events: List[GameEvent]) -> None:
    mover = state.current_player
    upcoming = mover.opponent()
    state.selected = None
    state.ply_count += 1
    if not state.pieces_remaining.any():
        upcoming_phase = (
            Phase.FLYING if state.on_board(upcoming) <= FLYING_THRESHOLD else Phase.MOVEMENT
        )
        if upcoming_phase == Phase.MOVEMENT and not can_move(state, upcoming):
            _end_game(state, mover, events)
            return
        state.phase = upcoming_phase
    state.current_player = upcoming


def _after_arrival(state: GameState, position: int, events: List[GameEvent]) -> None:
    mover = state.current_player
    state.last_position = position
    if forms_mill(state.board, position, mover):
        removable = removable_positions(state.board, mover.opponent())
        state.pending_capture = removable
        events.append(GameEvent(EventKind.MILL_FORMED, mover, position))
        logger.debug("%s formed a mill at %d, removable=%s", mover.name, position, sorted(removable))
    else:
        _finish_turn(state, events)


def _do_place(state: GameState, position: int, events: List[GameEvent]) -> None:
    mover = state.current_player
    state.board[position] = int(mover)
    state.pieces_remaining[mover.index] -= 1
    state.pieces_on_board[mover.index] += 1
    _after_arrival(state, position, events)


def _do_select(state: GameState, position: int) -> None:
    state.selected = None if state.selected == position else position


def _do_relocate(state: GameState, source: int, target: int, events: List[GameEvent]) -> None:
    state.board[target] = state.board[source]
    state.board[source] = EMPTY
    state.selected = None
    _after_arrival(state, target, events)


def _do_capture(state: GameState, position: int, events: List[GameEvent]) -> None:
    mover = state.current_player
    victim = mover.opponent()
    state.board[position] = EMPTY
    state.pieces_on_board[victim.index] -= 1
    state.pending_capture = None
    events.append(GameEvent(EventKind.PIECE_CAPTURED, mover, position))
    logger.debug("%s captured %d", mover.name, position)

    if (state.on_board(victim) < MIN_PIECES_ON_BOARD and state.remaining(victim) == 0) or (
        state.phase != Phase.PLACEMENT and not can_move(state, victim)
    ):
        state.ply_count += 1
        _end_game(state, mover, events)
        return
    _finish_turn(state, events)


def _do_skip(state: GameState, events: List[GameEvent]) -> None:
    state.pending_capture = None
    _finish_turn(state, events)


# ----------------------------------------------------------------------
# Result-returning operations
# ----------------------------------------------------------------------
def _rejected(state: GameState, error: RuleError) -> MoveResult:
    return MoveResult(state=state, error=error)


def place(state: GameState, position: int) -> MoveResult:
    error = _check_place(state, position)
    if error is not None:
        return _rejected(state, error)
    events: List[GameEvent] = []
    next_state = state.copy()
    _do_place(next_state, int(position), events)
    return MoveResult(next_state, None, tuple(events))


def select(state: GameState, position: int) -> MoveResult:
    error = _check_select(state, position)
    if error is not None:
        return _rejected(state, error)
    next_state = state.copy()
    _do_select(next_state, int(position))
    return MoveResult(next_state)


def move_to(state: GameState, position: int) -> MoveResult:
    error = _check_relocation(state, state.selected, position)
    if error is not None:
        return _rejected(state, error)
    events: List[GameEvent] = []
    next_state = state.copy()
    _do_relocate(next_state, int(state.selected), int(position), events)
    return MoveResult(next_state, None, tuple(events))


def capture(state: GameState, position: int) -> MoveResult:
    error = _check_capture(state, position)
    if error is not None:
        return _rejected(state, error)
    events: List[GameEvent] = []
    next_state = state.copy()
    _do_capture(next_state, int(position), events)
    return MoveResult(next_state, None, tuple(events))


def skip_capture(state: GameState) -> MoveResult:
    error = _check_skip(state)
    if error is not None:
        return _rejected(state, error)
    events: List[GameEvent] = []
    next_state = state.copy()
    _do_skip(next_state, events)
    return MoveResult(next_state, None, tuple(events))


def apply_move(state: GameState, move: Move, *, in_place: bool = False) -> GameState:
    """Apply ``move`` and return the resulting state.

    Unlike the result-returning operations this raises :class:`IllegalMoveError`
    on rejection. The input is never touched when the move is rejected, even
    with ``in_place=True``.
    """
    if isinstance(move, Place):
        error = _check_place(state, move.position)
    elif isinstance(move, MoveTo):
        error = _check_relocation(state, move.source, move.target)
    elif isinstance(move, Capture):
        error = _check_capture(state, move.position)
    elif isinstance(move, SkipCapture):
        error = _check_skip(state)
    elif isinstance(move, SelectForMove):
        error = _check_select(state, move.position)
    else:
        raise TypeError(f"Unknown move type: {type(move).__name__}")
    if error is not None:
        raise IllegalMoveError(error, move)

    target_state = state if in_place else state.copy()
    events: List[GameEvent] = []
    if isinstance(move, Place):
        _do_place(target_state, int(move.position), events)
    elif isinstance(move, MoveTo):
        _do_relocate(target_state, int(move.source), int(move.target), events)
    elif isinstance(move, Capture):
        _do_capture(target_state, int(move.position), events)
    elif isinstance(move, SkipCapture):
        _do_skip(target_state, events)
    else:
        _do_select(target_state, int(move.position))
    return target_state
