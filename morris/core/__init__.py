"""Core game logic for Nine Men's Morris."""

from .state import (
    EMPTY,
    FLYING_THRESHOLD,
    MIN_PIECES_ON_BOARD,
    PIECES_PER_PLAYER,
    Capture,
    CompoundMove,
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
)
from .topology import ADJACENCY, MILLS, MILLS_BY_POSITION, NUM_POSITIONS, are_adjacent
from .rules import (
    ACTION_VECTOR_SIZE,
    IllegalMoveError,
    apply_move,
    can_move,
    capture,
    count_mills,
    decode_action,
    encode_action,
    forms_mill,
    initialize_game_state,
    is_protected,
    move_to,
    place,
    removable_positions,
    select,
    skip_capture,
)
from .movegen import apply_compound_move, has_legal_moves, legal_moves
from .game import MillGame

__all__ = [
    "EMPTY",
    "FLYING_THRESHOLD",
    "MIN_PIECES_ON_BOARD",
    "PIECES_PER_PLAYER",
    "NUM_POSITIONS",
    "ADJACENCY",
    "MILLS",
    "MILLS_BY_POSITION",
    "ACTION_VECTOR_SIZE",
    "Capture",
    "CompoundMove",
    "EventKind",
    "GameEvent",
    "GameState",
    "IllegalMoveError",
    "MillGame",
    "Move",
    "MoveResult",
    "MoveTo",
    "Phase",
    "Place",
    "Player",
    "RuleError",
    "SelectForMove",
    "SkipCapture",
    "are_adjacent",
    "apply_compound_move",
    "apply_move",
    "can_move",
    "capture",
    "count_mills",
    "decode_action",
    "encode_action",
    "forms_mill",
    "has_legal_moves",
    "initialize_game_state",
    "is_protected",
    "legal_moves",
    "move_to",
    "place",
    "removable_positions",
    "select",
    "skip_capture",
]
