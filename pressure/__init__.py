"""Pressure: rules engine, event bus and minimax AI for a 5x5 push/capture game."""

from . import config, core, env, evaluation, features, search
from .config import GameConfig, load_game_config, load_yaml_config
from .core import (
    Color,
    EventBus,
    GameResult,
    GameSnapshot,
    Grid,
    HistoryManager,
    MoveEngine,
    PushMove,
    SimpleMove,
)
from .env import PressureEnv
from .evaluation import EvaluationResult, evaluate_levels
from .features import AUX_VECTOR_SIZE, BOARD_CHANNELS, build_aux_vector, build_board_tensor
from .game import Game
from .search import SearchConfig, SearchEngine, SearchResult, SearchTask

__all__ = [
    "config",
    "core",
    "env",
    "evaluation",
    "features",
    "search",
    "GameConfig",
    "load_game_config",
    "load_yaml_config",
    "Color",
    "EventBus",
    "GameResult",
    "GameSnapshot",
    "Grid",
    "HistoryManager",
    "MoveEngine",
    "PushMove",
    "SimpleMove",
    "PressureEnv",
    "EvaluationResult",
    "evaluate_levels",
    "AUX_VECTOR_SIZE",
    "BOARD_CHANNELS",
    "build_aux_vector",
    "build_board_tensor",
    "Game",
    "SearchConfig",
    "SearchEngine",
    "SearchResult",
    "SearchTask",
]
