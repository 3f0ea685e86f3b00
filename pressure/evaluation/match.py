from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from pressure.config import GameConfig
from pressure.core import GameResult, MoveEngine
from pressure.game import Game
from pressure.search import SearchConfig, SearchEngine

LOGGER = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    games_played: int
    white_wins: int
    black_wins: int
    draws: int
    average_length: float

    def winrate_white(self) -> float:
        return self.white_wins / max(1, self.games_played)

    def winrate_black(self) -> float:
        return self.black_wins / max(1, self.games_played)


def randomized_search_factory(rng: np.random.Generator) -> Callable[[MoveEngine, SearchConfig], SearchEngine]:
    """Search factory breaking ties at random so repeated games differ."""

    def factory(engine: MoveEngine, config: SearchConfig) -> SearchEngine:
        return SearchEngine(engine, dataclasses.replace(config, tie_break="random"), rng=rng)

    return factory


def play_match(game: Game, config: GameConfig, *, max_ply: int) -> GameResult:
    game.start(config)
    while game.is_active and game.snapshot.ply_count < max_ply:
        game.play_ai_turn()
    return game.snapshot.result


def evaluate_levels(
    white_level: int,
    black_level: int,
    *,
    episodes: int,
    max_ply: int = 200,
    board_size: int = 5,
    seed: Optional[int] = None,
    progress: Optional[Callable[[int, GameResult], None]] = None,
) -> EvaluationResult:
    """Play ``episodes`` AI-vs-AI games and tally the results.

    Games still running after ``max_ply`` plies count as draws.
    """
    rng = np.random.default_rng(seed)
    config = GameConfig(
        board_size=board_size,
        white_player_type="ai",
        black_player_type="ai",
        white_ai_level=white_level,
        black_ai_level=black_level,
    )
    game = Game(search_factory=randomized_search_factory(rng))

    white_wins = 0
    black_wins = 0
    draws = 0
    total_ply = 0

    for episode in range(episodes):
        result = play_match(game, config, max_ply=max_ply)
        total_ply += game.snapshot.ply_count
        if result == GameResult.WHITE_WIN:
            white_wins += 1
        elif result == GameResult.BLACK_WIN:
            black_wins += 1
        else:
            draws += 1
        LOGGER.debug("episode %d finished: %s after %d plies", episode, result.value, game.snapshot.ply_count)
        if progress is not None:
            progress(episode, result)

    average_length = total_ply / max(1, episodes)
    return EvaluationResult(
        games_played=episodes,
        white_wins=white_wins,
        black_wins=black_wins,
        draws=draws,
        average_length=average_length,
    )
