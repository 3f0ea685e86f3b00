from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

BOARD_SIZE = 5

ColorArray = NDArray[np.int8]
BoolArray = NDArray[np.bool_]

# Convenient tuple alias used across modules
Position = Tuple[int, int]


class Color(IntEnum):
    WHITE = 1
    BLACK = 2

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def label(self) -> str:
        return self.name.lower()


class Direction(Enum):
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value

    @property
    def label(self) -> str:
        return self.name.lower()

    def step(self, position: Position, distance: int = 1) -> Position:
        dr, dc = self.value
        return (position[0] + dr * distance, position[1] + dc * distance)


# Move generation order: up, down, left, right.
DIRECTIONS: Tuple[Direction, ...] = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


class GameResult(Enum):
    ONGOING = "ongoing"
    WHITE_WIN = "white_win"
    BLACK_WIN = "black_win"

    @staticmethod
    def for_winner(color: Color) -> "GameResult":
        return GameResult.WHITE_WIN if color is Color.WHITE else GameResult.BLACK_WIN


@dataclass(frozen=True)
class Token:
    color: Color
    is_active: bool = True
    is_captured: bool = False

    def __post_init__(self) -> None:
        if self.is_captured and self.is_active:
            raise ValueError("A captured token cannot be active.")


class Grid:
    """Authoritative N x N board.

    Occupancy is stored as a colour plane (0 = empty) plus two boolean masks,
    so cloning is three array copies. Positions outside the board are never
    addressable: reads return ``None`` and writes are ignored.
    """

    __slots__ = ("colors", "active", "captured")

    def __init__(
        self,
        size: int = BOARD_SIZE,
        *,
        colors: Optional[ColorArray] = None,
        active: Optional[BoolArray] = None,
        captured: Optional[BoolArray] = None,
    ) -> None:
        self.colors: ColorArray = colors if colors is not None else np.zeros((size, size), dtype=np.int8)
        self.active: BoolArray = active if active is not None else np.zeros((size, size), dtype=bool)
        self.captured: BoolArray = captured if captured is not None else np.zeros((size, size), dtype=bool)

    @property
    def size(self) -> int:
        return int(self.colors.shape[0])

    def is_within_bounds(self, position: Position) -> bool:
        row, col = position
        size = self.colors.shape[0]
        return 0 <= row < size and 0 <= col < size

    def is_empty(self, position: Position) -> bool:
        return self.is_within_bounds(position) and self.colors[position] == 0

    def is_occupied(self, position: Position) -> bool:
        return self.is_within_bounds(position) and self.colors[position] != 0

    def get_token_at(self, position: Position) -> Optional[Token]:
        if not self.is_within_bounds(position):
            return None
        value = int(self.colors[position])
        if value == 0:
            return None
        return Token(
            color=Color(value),
            is_active=bool(self.active[position]),
            is_captured=bool(self.captured[position]),
        )

    def set_token_at(self, position: Position, token: Optional[Token]) -> None:
        if not self.is_within_bounds(position):
            return
        if token is None:
            self.colors[position] = 0
            self.active[position] = False
            self.captured[position] = False
            return
        self.colors[position] = int(token.color)
        self.active[position] = token.is_active
        self.captured[position] = token.is_captured

    def move_token(self, from_pos: Position, to_pos: Position) -> None:
        if not self.is_occupied(from_pos):
            raise ValueError(f"No token at {from_pos}.")
        if not self.is_within_bounds(to_pos):
            raise ValueError(f"Destination {to_pos} is off the board.")
        self.colors[to_pos] = self.colors[from_pos]
        self.active[to_pos] = self.active[from_pos]
        self.captured[to_pos] = self.captured[from_pos]
        self.colors[from_pos] = 0
        self.active[from_pos] = False
        self.captured[from_pos] = False

    def mark_captured(self, position: Position) -> None:
        self.captured[position] = True
        self.active[position] = False

    def deactivate(self, position: Position) -> None:
        self.active[position] = False

    def reset_active_status(self, color: Color) -> None:
        mask = (self.colors == int(color)) & ~self.captured
        self.active[mask] = True

    def clone(self) -> "Grid":
        return Grid(
            colors=self.colors.copy(),
            active=self.active.copy(),
            captured=self.captured.copy(),
        )

    # ------------------------------------------------------------------
    def neighbours(self, position: Position) -> List[Optional[Position]]:
        """Orthogonal neighbours in direction order; ``None`` marks an edge."""
        result: List[Optional[Position]] = []
        for direction in DIRECTIONS:
            candidate = direction.step(position)
            result.append(candidate if self.is_within_bounds(candidate) else None)
        return result

    def positions(self, color: Optional[Color] = None) -> Iterator[Position]:
        if color is None:
            found = np.argwhere(self.colors != 0)
        else:
            found = np.argwhere(self.colors == int(color))
        for r, c in found:
            yield int(r), int(c)

    def count_tokens(self, color: Color) -> int:
        return int(np.count_nonzero(self.colors == int(color)))

    def count_captured(self) -> Dict[Color, int]:
        return {
            color: int(np.count_nonzero((self.colors == int(color)) & self.captured))
            for color in Color
        }

    def all_captured(self, color: Color) -> bool:
        mask = self.colors == int(color)
        return bool(mask.any() and self.captured[mask].all())

    def to_rows(self) -> List[List[Optional[Dict[str, object]]]]:
        rows: List[List[Optional[Dict[str, object]]]] = []
        for r in range(self.size):
            row: List[Optional[Dict[str, object]]] = []
            for c in range(self.size):
                token = self.get_token_at((r, c))
                if token is None:
                    row.append(None)
                else:
                    row.append(
                        {
                            "color": token.color.label,
                            "isActive": token.is_active,
                            "isCaptured": token.is_captured,
                        }
                    )
            rows.append(row)
        return rows

    def render(self) -> str:
        # W/B active, w/b inactive, x captured
        lines = []
        for r in range(self.size):
            chars = []
            for c in range(self.size):
                value = int(self.colors[r, c])
                if value == 0:
                    chars.append(".")
                elif self.captured[r, c]:
                    chars.append("x")
                else:
                    symbol = "W" if value == int(Color.WHITE) else "B"
                    chars.append(symbol if self.active[r, c] else symbol.lower())
            lines.append("".join(chars))
        return "\n".join(lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            np.array_equal(self.colors, other.colors)
            and np.array_equal(self.active, other.active)
            and np.array_equal(self.captured, other.captured)
        )

    def __repr__(self) -> str:
        return f"Grid(size={self.size})\n{self.render()}"


@dataclass
class GameSnapshot:
    grid: Grid
    current_player: Color = Color.WHITE
    result: GameResult = GameResult.ONGOING
    win_reason: str = ""
    ply_count: int = 0

    def copy(self) -> "GameSnapshot":
        return GameSnapshot(
            grid=self.grid.clone(),
            current_player=self.current_player,
            result=self.result,
            win_reason=self.win_reason,
            ply_count=self.ply_count,
        )

    @property
    def is_terminal(self) -> bool:
        return self.result != GameResult.ONGOING

    @property
    def winner(self) -> Optional[Color]:
        if self.result == GameResult.WHITE_WIN:
            return Color.WHITE
        if self.result == GameResult.BLACK_WIN:
            return Color.BLACK
        return None

    def __repr__(self) -> str:
        return (
            f"GameSnapshot(current={self.current_player.name}, result={self.result}, ply={self.ply_count})\n"
            f"{self.grid.render()}"
        )
