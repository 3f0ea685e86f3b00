from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from pressure.core import (
    SIMULATION,
    Color,
    ConfigError,
    EventBus,
    GameSnapshot,
    Grid,
    Move,
    MoveEngine,
    MoveOutcome,
    PushMove,
    generate_moves,
)
from pressure.core.events import AI_PROGRESS

from .heuristics import DEFAULT_WEIGHTS, WIN_SCORE, HeuristicWeights, evaluate_position, terminal_score

LOGGER = logging.getLogger(__name__)

MAX_LEVEL = 9
TIE_BREAK_POLICIES = ("first", "random")
TIE_EPSILON = 1e-9
# Wins found with more depth remaining (i.e. sooner) score higher.
DEPTH_BONUS = 0.01


@dataclass
class SearchConfig:
    level: int = 1
    max_depth: int = MAX_LEVEL
    tie_break: str = "first"
    seed: Optional[int] = None
    ordering_min_level: int = 3
    weights: HeuristicWeights = DEFAULT_WEIGHTS

    def __post_init__(self) -> None:
        if not 0 <= self.level <= MAX_LEVEL:
            raise ConfigError(f"AI level must be within 0..{MAX_LEVEL}, got {self.level}.")
        if self.max_depth < 1:
            raise ConfigError("max_depth must be at least 1.")
        if self.tie_break not in TIE_BREAK_POLICIES:
            raise ConfigError(f"Unknown tie-break policy {self.tie_break!r}.")

    @property
    def filter_suicidal(self) -> bool:
        return self.level >= 1

    @property
    def order_moves(self) -> bool:
        return self.level >= self.ordering_min_level


def search_depth(level: int, candidate_count: int, max_depth: int = MAX_LEVEL) -> int:
    depth = max(1, min(level, max_depth))
    # Wide positions get a shallower search to keep turns responsive.
    if candidate_count > 14 and depth > 4:
        depth = 4
    elif candidate_count > 10 and depth > 6:
        depth = 6
    return depth


@dataclass(frozen=True)
class RootEvaluation:
    move: Move
    score: float


@dataclass
class SearchResult:
    move: Optional[Move]
    score: float = 0.0
    depth: int = 0
    nodes: int = 0
    evaluations: List[RootEvaluation] = field(default_factory=list)
    cancelled: bool = False
    elapsed: float = 0.0


class SearchEngine:
    """Alpha-beta minimax over the shared move engine.

    Every explored move runs through ``MoveEngine.play_turn`` with the
    simulation context on a cloned grid, so look-ahead follows exactly the
    rules of committed play and never touches the live position.
    """

    def __init__(
        self,
        engine: MoveEngine,
        config: Optional[SearchConfig] = None,
        *,
        events: Optional[EventBus] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.engine = engine
        self.config = config or SearchConfig()
        self.events = events if events is not None else engine.events
        self.rng = rng or np.random.default_rng(self.config.seed)
        self.nodes_evaluated = 0

    # ------------------------------------------------------------------
    def start(self, snapshot: GameSnapshot, color: Optional[Color] = None) -> "SearchTask":
        return SearchTask(self, snapshot, color or snapshot.current_player)

    def search(self, snapshot: GameSnapshot, color: Optional[Color] = None) -> SearchResult:
        return self.start(snapshot, color).run()

    def candidate_moves(self, grid: Grid, color: Color) -> List[Move]:
        moves = generate_moves(grid, color)
        if len(moves) > 1 and self.config.filter_suicidal:
            safe = [move for move in moves if not self._is_suicidal(grid, move, color)]
            if safe:
                moves = safe
        if self.config.order_moves:
            moves = self.order(moves)
        return moves

    def order(self, moves: Sequence[Move]) -> List[Move]:
        # Pushes first: they disturb more cells and deactivate opponents.
        return sorted(moves, key=lambda move: 0 if isinstance(move, PushMove) else 1)

    def score_root_move(self, grid: Grid, move: Move, color: Color, depth: int) -> float:
        child, _ = self._simulate(grid, move, color)
        return self._minimax(child, color.opponent, color, depth - 1, -np.inf, np.inf)

    def select(self, evaluations: Sequence[RootEvaluation]) -> RootEvaluation:
        best_score = max(evaluation.score for evaluation in evaluations)
        ties = [e for e in evaluations if best_score - e.score <= TIE_EPSILON]
        if self.config.tie_break == "random" and len(ties) > 1:
            return ties[int(self.rng.integers(len(ties)))]
        return ties[0]

    def emit_progress(self, payload: dict) -> None:
        if self.events is not None:
            self.events.emit(AI_PROGRESS, payload)

    # ------------------------------------------------------------------
    def _simulate(self, grid: Grid, move: Move, color: Color) -> Tuple[Grid, MoveOutcome]:
        child = grid.clone()
        outcome = self.engine.play_turn(child, move, color, SIMULATION)
        return child, outcome

    def _is_suicidal(self, grid: Grid, move: Move, color: Color) -> bool:
        _, outcome = self._simulate(grid, move, color)
        return any(token.color is color for token in outcome.captured)

    def _minimax(
        self,
        grid: Grid,
        to_move: Color,
        perspective: Color,
        depth: int,
        alpha: float,
        beta: float,
    ) -> float:
        self.nodes_evaluated += 1
        bonus = 1.0 + DEPTH_BONUS * depth

        terminal = terminal_score(grid, perspective, to_move.opponent)
        if terminal is not None:
            return terminal * bonus

        moves = generate_moves(grid, to_move)
        if not moves:
            # Side to move is stuck: that side loses.
            return (WIN_SCORE if to_move is not perspective else -WIN_SCORE) * bonus

        if depth <= 0:
            return evaluate_position(grid, perspective, self.config.weights)

        if self.config.order_moves:
            moves = self.order(moves)

        if to_move is perspective:
            value = -np.inf
            for move in moves:
                child, _ = self._simulate(grid, move, to_move)
                value = max(value, self._minimax(child, to_move.opponent, perspective, depth - 1, alpha, beta))
                alpha = max(alpha, value)
                if alpha >= beta:
                    break
            return float(value)

        value = np.inf
        for move in moves:
            child, _ = self._simulate(grid, move, to_move)
            value = min(value, self._minimax(child, to_move.opponent, perspective, depth - 1, alpha, beta))
            beta = min(beta, value)
            if alpha >= beta:
                break
        return float(value)


class SearchTask:
    """One AI decision, evaluated a root move at a time.

    ``step`` does a bounded slice of work so a host loop can yield between
    root moves; ``cancel`` stops the search before the next root move.
    """

    def __init__(self, searcher: SearchEngine, snapshot: GameSnapshot, color: Color) -> None:
        self._searcher = searcher
        self._grid = snapshot.grid.clone()
        self.color = color
        self.depth = 0
        self._candidates: Optional[List[Move]] = None
        self._index = 0
        self._evaluations: List[RootEvaluation] = []
        self._cancelled = False
        self._result: Optional[SearchResult] = None
        self._started = time.perf_counter()
        self._report_every = 1

    @property
    def done(self) -> bool:
        return self._result is not None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def result(self) -> Optional[SearchResult]:
        return self._result

    @property
    def progress(self) -> float:
        if not self._candidates:
            return 1.0 if self.done else 0.0
        return self._index / len(self._candidates)

    def cancel(self) -> None:
        self._cancelled = True

    def step(self) -> bool:
        """Advance the search; returns True while work remains."""
        if self.done:
            return False
        if self._cancelled:
            self._finish(None, cancelled=True)
            return False
        if self._candidates is None:
            self._prepare()
            return not self.done

        move = self._candidates[self._index]
        score = self._searcher.score_root_move(self._grid, move, self.color, self.depth)
        self._evaluations.append(RootEvaluation(move=move, score=score))
        self._index += 1

        total = len(self._candidates)
        if self._index % self._report_every == 0 or self._index == total:
            percent = int(self._index / total * 100)
            self._searcher.emit_progress(
                {
                    "type": "progress",
                    "depth": self.depth,
                    "percent": percent,
                    "message": f"AI analyzing moves: {percent}%",
                }
            )
        if self._index >= total:
            best = self._searcher.select(self._evaluations)
            self._finish(best.move, score=best.score)
            return False
        return True

    def run(self) -> SearchResult:
        while self.step():
            pass
        assert self._result is not None
        return self._result

    # ------------------------------------------------------------------
    def _prepare(self) -> None:
        searcher = self._searcher
        searcher.nodes_evaluated = 0
        searcher.emit_progress({"type": "start", "depth": 0, "message": "AI is thinking..."})

        legal = generate_moves(self._grid, self.color)
        if not legal:
            self._finish(None)
            return
        if len(legal) == 1:
            self._finish(legal[0])
            return

        self._candidates = searcher.candidate_moves(self._grid, self.color)
        self.depth = search_depth(searcher.config.level, len(self._candidates), searcher.config.max_depth)
        self._report_every = max(1, len(self._candidates) // 10)
        searcher.emit_progress(
            {
                "type": "depth",
                "depth": self.depth,
                "message": f"AI analyzing at depth {self.depth}...",
            }
        )

    def _finish(self, move: Optional[Move], *, score: float = 0.0, cancelled: bool = False) -> None:
        elapsed = time.perf_counter() - self._started
        self._result = SearchResult(
            move=move,
            score=score,
            depth=self.depth,
            nodes=self._searcher.nodes_evaluated,
            evaluations=list(self._evaluations),
            cancelled=cancelled,
            elapsed=elapsed,
        )
        LOGGER.debug(
            "search finished: player=%s depth=%d nodes=%d elapsed=%.3fs cancelled=%s",
            self.color.name,
            self.depth,
            self._searcher.nodes_evaluated,
            elapsed,
            cancelled,
        )
        self._searcher.emit_progress(
            {
                "type": "end",
                "depth": self.depth,
                "message": "AI search cancelled" if cancelled else "AI move selected",
            }
        )
