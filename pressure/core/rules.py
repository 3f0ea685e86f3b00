from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .capture import CapturedToken, check_and_transform
from .errors import ConfigError, InvalidMoveError
from .events import (
    MOVE_EXECUTED,
    MOVE_EXECUTING,
    MOVE_PUSH,
    MOVE_SIMPLE,
    REAL,
    TOKEN_DEACTIVATED,
    EventBus,
    ExecutionContext,
)
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

TOKENS_PER_PLAYER = 6
MIN_BOARD_SIZE = 5

# Black starts in the upper-left; white occupies the 180 degree rotation.
INITIAL_BLACK_POSITIONS: Tuple[Position, ...] = ((2, 0), (1, 0), (2, 1), (0, 1), (1, 2), (0, 2))


def initial_white_positions(size: int = BOARD_SIZE) -> Tuple[Position, ...]:
    return tuple((size - 1 - r, size - 1 - c) for r, c in INITIAL_BLACK_POSITIONS)


def action_vector_size(size: int = BOARD_SIZE) -> int:
    return size * size * len(DIRECTIONS)


ACTION_VECTOR_SIZE = action_vector_size(BOARD_SIZE)


@dataclass(frozen=True)
class SimpleMove:
    from_pos: Position
    to_pos: Position
    direction: Direction

    @property
    def kind(self) -> str:
        return "move"

    def as_dict(self) -> dict:
        return {
            "type": self.kind,
            "from": list(self.from_pos),
            "to": list(self.to_pos),
            "direction": self.direction.label,
        }


@dataclass(frozen=True)
class PushMove:
    from_pos: Position
    to_pos: Position
    direction: Direction
    pushed_line: Tuple[Position, ...] = field(default_factory=tuple)

    @property
    def kind(self) -> str:
        return "push"

    def as_dict(self) -> dict:
        return {
            "type": self.kind,
            "from": list(self.from_pos),
            "to": list(self.to_pos),
            "direction": self.direction.label,
            "tokens": [list(pos) for pos in self.pushed_line],
        }


Move = Union[SimpleMove, PushMove]


@dataclass(frozen=True)
class PushValidation:
    valid: bool
    line: Tuple[Position, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MoveOutcome:
    move: Move
    player: Color
    captured: Tuple[CapturedToken, ...] = field(default_factory=tuple)
    deactivated: Tuple[Position, ...] = field(default_factory=tuple)


# ----------------------------------------------------------------------
# Setup
# ----------------------------------------------------------------------
def initialize_grid(size: int = BOARD_SIZE) -> Grid:
    if size < MIN_BOARD_SIZE:
        raise ConfigError(f"Board size must be at least {MIN_BOARD_SIZE}, got {size}.")
    grid = Grid(size)
    for position in INITIAL_BLACK_POSITIONS:
        grid.set_token_at(position, Token(Color.BLACK))
    for position in initial_white_positions(size):
        grid.set_token_at(position, Token(Color.WHITE))
    return grid


def initialize_snapshot(size: int = BOARD_SIZE) -> GameSnapshot:
    # White moves first.
    return GameSnapshot(
        grid=initialize_grid(size),
        current_player=Color.WHITE,
        result=GameResult.ONGOING,
        win_reason="",
        ply_count=0,
    )


# ----------------------------------------------------------------------
# Move generation
# ----------------------------------------------------------------------
def generate_moves(grid: Grid, color: Color) -> List[Move]:
    """Legal moves for ``color`` in row, column, direction order."""
    moves: List[Move] = []
    for row, col in grid.positions(color):
        if not grid.active[row, col] or grid.captured[row, col]:
            continue
        origin = (row, col)
        for direction in DIRECTIONS:
            destination = direction.step(origin)
            if not grid.is_within_bounds(destination):
                continue
            if grid.colors[destination] == 0:
                moves.append(SimpleMove(origin, destination, direction))
                continue
            validation = validate_push(grid, origin, direction)
            if validation.valid:
                moves.append(PushMove(origin, destination, direction, validation.line))
    return moves


def validate_push(grid: Grid, from_pos: Position, direction: Direction) -> PushValidation:
    """A push is valid iff the cell one past the contiguous run is on the board and empty."""
    pusher = grid.get_token_at(from_pos)
    if pusher is None or not pusher.is_active or pusher.is_captured:
        return PushValidation(valid=False)

    destination = direction.step(from_pos)
    if not grid.is_occupied(destination):
        return PushValidation(valid=False)

    line: List[Position] = []
    cursor = destination
    while grid.is_occupied(cursor):
        line.append(cursor)
        cursor = direction.step(cursor)
    return PushValidation(valid=grid.is_empty(cursor), line=tuple(line))


def has_legal_move(grid: Grid, color: Color) -> bool:
    return bool(generate_moves(grid, color))


def capture_winner(grid: Grid, mover: Color) -> Optional[Color]:
    """Winner by capture after ``mover``'s move, or ``None``.

    The mover's opponent is checked first, so if both sides lose their last
    token in the same move the mover wins.
    """
    if grid.all_captured(mover.opponent):
        return mover
    if grid.all_captured(mover):
        return mover.opponent
    return None


# ----------------------------------------------------------------------
# Action encoding (origin cell x direction)
# ----------------------------------------------------------------------
def encode_action(origin: Position, direction: Direction, size: int = BOARD_SIZE) -> int:
    base = origin[0] * size + origin[1]
    return base * len(DIRECTIONS) + DIRECTIONS.index(direction)


def decode_action(index: int, size: int = BOARD_SIZE) -> Tuple[Position, Direction]:
    if not 0 <= index < action_vector_size(size):
        raise ValueError("Action index out of range.")
    direction = DIRECTIONS[index % len(DIRECTIONS)]
    cell = index // len(DIRECTIONS)
    return (cell // size, cell % size), direction


def encode_move(move: Move, size: int = BOARD_SIZE) -> int:
    return encode_action(move.from_pos, move.direction, size)


def find_move(grid: Grid, color: Color, index: int) -> Optional[Move]:
    origin, direction = decode_action(index, grid.size)
    for move in generate_moves(grid, color):
        if move.from_pos == origin and move.direction == direction:
            return move
    return None


# ----------------------------------------------------------------------
# Execution
# ----------------------------------------------------------------------
class MoveEngine:
    """Executes moves on a grid and reports what happened on the event bus.

    The same instance serves the live game and search look-ahead; the
    ``ExecutionContext`` passed to each call decides how events are tagged.
    """

    def __init__(self, events: Optional[EventBus] = None) -> None:
        self.events = events

    def execute_move(
        self,
        grid: Grid,
        move: Move,
        color: Color,
        context: ExecutionContext = REAL,
        *,
        validate: bool = False,
    ) -> List[CapturedToken]:
        return list(self.apply(grid, move, color, context, validate=validate).captured)

    def play_turn(
        self,
        grid: Grid,
        move: Move,
        color: Color,
        context: ExecutionContext = REAL,
        *,
        validate: bool = False,
    ) -> MoveOutcome:
        """Start ``color``'s turn and execute ``move``.

        The mover's inactive tokens sat out this turn's move generation; they
        become active again before the move is carried out.
        """
        if validate:
            self._ensure_legal(grid, move, color)
        grid.reset_active_status(color)
        return self.apply(grid, move, color, context)

    def apply(
        self,
        grid: Grid,
        move: Move,
        color: Color,
        context: ExecutionContext = REAL,
        *,
        validate: bool = False,
    ) -> MoveOutcome:
        if validate:
            self._ensure_legal(grid, move, color)

        self._emit(MOVE_EXECUTING, {"move": move, "player": color}, context)

        if isinstance(move, PushMove):
            captured, deactivated = self._execute_push(grid, move, color, context)
            self._emit(
                MOVE_PUSH,
                {
                    "move": move,
                    "from": move.from_pos,
                    "to": move.to_pos,
                    "player": color,
                    "direction": move.direction.label,
                    "capturedTokens": list(captured),
                },
                context,
            )
        else:
            grid.move_token(move.from_pos, move.to_pos)
            captured = check_and_transform(grid, context, self.events)
            deactivated = []
            self._emit(
                MOVE_SIMPLE,
                {
                    "move": move,
                    "from": move.from_pos,
                    "to": move.to_pos,
                    "player": color,
                    "direction": move.direction.label,
                    "capturedTokens": list(captured),
                },
                context,
            )

        outcome = MoveOutcome(
            move=move,
            player=color,
            captured=tuple(captured),
            deactivated=tuple(deactivated),
        )
        self._emit(
            MOVE_EXECUTED,
            {"move": move, "player": color, "capturedTokens": list(outcome.captured)},
            context,
        )
        return outcome

    # ------------------------------------------------------------------
    def _execute_push(
        self,
        grid: Grid,
        move: PushMove,
        color: Color,
        context: ExecutionContext,
    ) -> Tuple[List[CapturedToken], List[Position]]:
        opponent = color.opponent
        captured: List[CapturedToken] = []
        pushed_opponents: List[Position] = []

        # Far end first so no token is overwritten.
        for position in reversed(move.pushed_line):
            target = move.direction.step(position)
            was_live_opponent = (
                grid.colors[position] == int(opponent) and not grid.captured[position]
            )
            grid.move_token(position, target)
            if was_live_opponent:
                pushed_opponents.append(target)
            captured.extend(check_and_transform(grid, context, self.events))

        grid.move_token(move.from_pos, move.to_pos)
        captured.extend(check_and_transform(grid, context, self.events))

        deactivated: List[Position] = []
        for position in pushed_opponents:
            if grid.colors[position] != int(opponent) or grid.captured[position]:
                continue
            grid.deactivate(position)
            deactivated.append(position)
            self._emit(TOKEN_DEACTIVATED, {"position": position, "color": opponent}, context)
        return captured, deactivated

    def _ensure_legal(self, grid: Grid, move: Move, color: Color) -> None:
        if move not in generate_moves(grid, color):
            raise InvalidMoveError(f"{move} is not a legal move for {color.name}.")

    def _emit(self, name: str, payload: dict, context: ExecutionContext) -> None:
        if self.events is not None:
            self.events.emit(name, payload, context=context)
