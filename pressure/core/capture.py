from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .events import REAL, TOKEN_CAPTURE_NOTIFIED, TOKEN_CAPTURED, EventBus, ExecutionContext
from .state import DIRECTIONS, Color, Grid, Position


@dataclass(frozen=True)
class CapturedToken:
    position: Position
    color: Color


def count_blocked_sides(grid: Grid, position: Position) -> int:
    """Number of orthogonal sides that are off-board or occupied."""
    blocked = 0
    for direction in DIRECTIONS:
        neighbour = direction.step(position)
        if not grid.is_within_bounds(neighbour) or grid.colors[neighbour] != 0:
            blocked += 1
    return blocked


def is_surrounded(grid: Grid, position: Position) -> bool:
    return count_blocked_sides(grid, position) == len(DIRECTIONS)


def blocked_side_counts(grid: Grid) -> np.ndarray:
    """Per-cell count of blocked sides, shape (N, N).

    The occupancy plane is padded with a ring of ``True`` so board edges
    count as blockers.
    """
    occupied = np.pad(grid.colors != 0, 1, constant_values=True).astype(np.int8)
    return (
        occupied[:-2, 1:-1]
        + occupied[2:, 1:-1]
        + occupied[1:-1, :-2]
        + occupied[1:-1, 2:]
    )


def surrounded_mask(grid: Grid) -> np.ndarray:
    return blocked_side_counts(grid) == len(DIRECTIONS)


def check_and_transform(
    grid: Grid,
    context: ExecutionContext = REAL,
    events: Optional[EventBus] = None,
) -> List[CapturedToken]:
    """Capture every uncaptured token that is now fully surrounded.

    Neighbours block regardless of colour or state; inactive tokens can be
    captured too. Already captured tokens never re-trigger, so a second call
    without an intervening mutation returns an empty list.
    """
    candidates = (grid.colors != 0) & ~grid.captured & surrounded_mask(grid)
    if not candidates.any():
        return []

    captured: List[CapturedToken] = []
    for r, c in np.argwhere(candidates):
        position = (int(r), int(c))
        color = Color(int(grid.colors[position]))
        grid.mark_captured(position)
        captured.append(CapturedToken(position=position, color=color))
        if events is not None:
            payload = {"position": position, "color": color}
            events.emit(TOKEN_CAPTURED, payload, context=context)
            events.emit(TOKEN_CAPTURE_NOTIFIED, payload, context=context)
    return captured
