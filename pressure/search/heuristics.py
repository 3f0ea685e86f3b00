from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from pressure.core import TOKENS_PER_PLAYER, Color, Grid, capture_winner, generate_moves
from pressure.core.capture import blocked_side_counts

WIN_SCORE = 1.0
# Positional scores stay strictly inside the win/loss band.
POSITIONAL_LIMIT = 0.99
THREAT_SIDES = 3


@dataclass(frozen=True)
class HeuristicWeights:
    capture: float = 0.8
    threat: float = 0.2
    mobility: float = 0.05


DEFAULT_WEIGHTS = HeuristicWeights()


def threatened_counts(grid: Grid) -> Dict[Color, int]:
    """Uncaptured tokens per colour with at least three blocked sides."""
    exposed = (blocked_side_counts(grid) >= THREAT_SIDES) & ~grid.captured
    return {color: int(np.count_nonzero(exposed & (grid.colors == int(color)))) for color in Color}


def terminal_score(grid: Grid, perspective: Color, mover: Optional[Color] = None) -> Optional[float]:
    """Win/loss score once a side has lost every token, judged as the game does.

    ``mover`` is the side that made the last move; it defaults to
    ``perspective``.
    """
    winner = capture_winner(grid, mover or perspective)
    if winner is None:
        return None
    return WIN_SCORE if winner is perspective else -WIN_SCORE


def evaluate_position(
    grid: Grid,
    perspective: Color,
    weights: HeuristicWeights = DEFAULT_WEIGHTS,
) -> float:
    """Score in [-1, 1] from ``perspective``'s point of view.

    Deterministic for a given grid: capture differential, tokens close to
    being surrounded, and a small mobility term.
    """
    terminal = terminal_score(grid, perspective)
    if terminal is not None:
        return terminal

    opponent = perspective.opponent
    # A side without moves here is not lost yet: the opponent moves next and
    # may free it, so mobility stays a positional term.
    own_moves = len(generate_moves(grid, perspective))
    opp_moves = len(generate_moves(grid, opponent))

    captured = grid.count_captured()
    capture_diff = captured[opponent] - captured[perspective]
    threats = threatened_counts(grid)
    threat_diff = threats[opponent] - threats[perspective]
    total_moves = own_moves + opp_moves
    mobility = (own_moves - opp_moves) / total_moves if total_moves else 0.0

    weighted = weights.capture * capture_diff + weights.threat * threat_diff
    score = weighted / (2 * TOKENS_PER_PLAYER) + weights.mobility * mobility
    return float(np.clip(score, -POSITIONAL_LIMIT, POSITIONAL_LIMIT))
