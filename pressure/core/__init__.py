"""Core game logic for Pressure."""

from .state import (
    BOARD_SIZE,
    DIRECTIONS,
    Color,
    Direction,
    GameResult,
    GameSnapshot,
    Grid,
    Position,
    Token,
)
from .errors import (
    ConfigError,
    GameNotActiveError,
    InvalidMoveError,
    PressureError,
    SimulationLeakError,
)
from .events import (
    COMMITTED_AI,
    REAL,
    SIMULATION,
    Event,
    EventBus,
    ExecutionContext,
)
from .capture import CapturedToken, check_and_transform, count_blocked_sides, is_surrounded
from .rules import (
    ACTION_VECTOR_SIZE,
    TOKENS_PER_PLAYER,
    Move,
    MoveEngine,
    MoveOutcome,
    PushMove,
    PushValidation,
    SimpleMove,
    action_vector_size,
    capture_winner,
    decode_action,
    encode_action,
    encode_move,
    find_move,
    generate_moves,
    initialize_grid,
    initialize_snapshot,
    validate_push,
)
from .history import HistoryEntry, HistoryManager

__all__ = [
    "BOARD_SIZE",
    "DIRECTIONS",
    "Color",
    "Direction",
    "GameResult",
    "GameSnapshot",
    "Grid",
    "Position",
    "Token",
    "ConfigError",
    "GameNotActiveError",
    "InvalidMoveError",
    "PressureError",
    "SimulationLeakError",
    "COMMITTED_AI",
    "REAL",
    "SIMULATION",
    "Event",
    "EventBus",
    "ExecutionContext",
    "CapturedToken",
    "check_and_transform",
    "count_blocked_sides",
    "is_surrounded",
    "ACTION_VECTOR_SIZE",
    "TOKENS_PER_PLAYER",
    "Move",
    "MoveEngine",
    "MoveOutcome",
    "PushMove",
    "PushValidation",
    "SimpleMove",
    "action_vector_size",
    "capture_winner",
    "decode_action",
    "encode_action",
    "encode_move",
    "find_move",
    "generate_moves",
    "initialize_grid",
    "initialize_snapshot",
    "validate_push",
    "HistoryEntry",
    "HistoryManager",
]
