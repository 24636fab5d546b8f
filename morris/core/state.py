from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import FrozenSet, List, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .topology import NUM_POSITIONS, render_board

BoardArray = NDArray[np.int8]

EMPTY = 0
PIECES_PER_PLAYER = 9
FLYING_THRESHOLD = 3
MIN_PIECES_ON_BOARD = 3


class Player(IntEnum):
    ONE = 1
    TWO = 2

    @property
    def index(self) -> int:
        return int(self) - 1

    def opponent(self) -> "Player":
        return Player.TWO if self == Player.ONE else Player.ONE


class Phase(Enum):
    PLACEMENT = "placement"
    MOVEMENT = "movement"
    FLYING = "flying"


class RuleError(Enum):
    OUT_OF_RANGE = "out_of_range"
    OCCUPIED_POSITION = "occupied_position"
    NOT_CURRENT_PLAYERS_PIECE = "not_current_players_piece"
    NOT_ADJACENT = "not_adjacent"
    NO_PIECES_REMAINING = "no_pieces_remaining"
    INVALID_PHASE = "invalid_phase"
    NO_SELECTION = "no_selection"
    NOT_PENDING_CAPTURE = "not_pending_capture"
    CAPTURE_PENDING = "capture_pending"
    PROTECTED_PIECE = "protected_piece"
    NOT_OPPONENT_PIECE = "not_opponent_piece"
    GAME_ALREADY_OVER = "game_already_over"


class EventKind(Enum):
    MILL_FORMED = "mill_formed"
    PIECE_CAPTURED = "piece_captured"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameEvent:
    kind: EventKind
    player: Optional[Player]
    position: Optional[int] = None


@dataclass(frozen=True)
class Place:
    position: int


@dataclass(frozen=True)
class SelectForMove:
    position: int


@dataclass(frozen=True)
class MoveTo:
    source: int
    target: int


@dataclass(frozen=True)
class Capture:
    position: int


@dataclass(frozen=True)
class SkipCapture:
    pass


Move = Union[Place, SelectForMove, MoveTo, Capture, SkipCapture]


@dataclass(frozen=True)
class CompoundMove:
    """A placement or relocation together with the capture it triggered."""

    move: Move
    capture: Optional[Union[Capture, SkipCapture]] = None

    def steps(self) -> Tuple[Move, ...]:
        if self.capture is None:
            return (self.move,)
        return (self.move, self.capture)


@dataclass
class GameState:
    board: BoardArray  # shape (24,), dtype=np.int8, values 0 (empty) or 1..2 player
    pieces_remaining: np.ndarray  # shape (2,), dtype=np.int16
    pieces_on_board: np.ndarray  # shape (2,), dtype=np.int16
    current_player: Player = Player.ONE
    phase: Phase = Phase.PLACEMENT
    selected: Optional[int] = None
    pending_capture: Optional[FrozenSet[int]] = None
    game_over: bool = False
    winner: Optional[Player] = None
    last_position: Optional[int] = None
    ply_count: int = 0

    def copy(self) -> "GameState":
        return GameState(
            board=self.board.copy(),
            pieces_remaining=self.pieces_remaining.copy(),
            pieces_on_board=self.pieces_on_board.copy(),
            current_player=self.current_player,
            phase=self.phase,
            selected=self.selected,
            pending_capture=self.pending_capture,
            game_over=self.game_over,
            winner=self.winner,
            last_position=self.last_position,
            ply_count=self.ply_count,
        )

    @property
    def awaiting_capture(self) -> bool:
        return self.pending_capture is not None

    def remaining(self, player: Player) -> int:
        return int(self.pieces_remaining[player.index])

    def on_board(self, player: Player) -> int:
        return int(self.pieces_on_board[player.index])

    def positions_of(self, player: Player) -> List[int]:
        return [int(pos) for pos in np.flatnonzero(self.board == int(player))]

    def empty_positions(self) -> List[int]:
        return [int(pos) for pos in np.flatnonzero(self.board == EMPTY)]

    def key(self) -> Tuple:
        """Hashable snapshot of every rule-relevant field."""
        return (
            tuple(int(cell) for cell in self.board),
            tuple(int(n) for n in self.pieces_remaining),
            tuple(int(n) for n in self.pieces_on_board),
            self.current_player,
            self.phase,
            self.selected,
            self.pending_capture,
            self.game_over,
            self.winner,
        )

    def render(self) -> str:
        return render_board(self.board, {EMPTY: ".", 1: "X", 2: "O"})

    def __repr__(self) -> str:
        return (
            f"GameState(current={self.current_player.name}, phase={self.phase.value}, "
            f"ply={self.ply_count}, over={self.game_over})\n"
            f"{self.render()}"
        )


@dataclass(frozen=True)
class MoveResult:
    state: GameState
    error: Optional[RuleError] = None
    events: Tuple[GameEvent, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.error is None


def new_board() -> BoardArray:
    return np.zeros(NUM_POSITIONS, dtype=np.int8)
