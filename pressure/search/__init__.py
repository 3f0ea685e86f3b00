from .heuristics import (
    DEFAULT_WEIGHTS,
    WIN_SCORE,
    HeuristicWeights,
    evaluate_position,
    terminal_score,
    threatened_counts,
)
from .minimax import (
    MAX_LEVEL,
    RootEvaluation,
    SearchConfig,
    SearchEngine,
    SearchResult,
    SearchTask,
    search_depth,
)

__all__ = [
    "DEFAULT_WEIGHTS",
    "WIN_SCORE",
    "HeuristicWeights",
    "evaluate_position",
    "terminal_score",
    "threatened_counts",
    "MAX_LEVEL",
    "RootEvaluation",
    "SearchConfig",
    "SearchEngine",
    "SearchResult",
    "SearchTask",
    "search_depth",
]
