from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Dict, Union

import yaml

from pressure.core import BOARD_SIZE, Color, ConfigError
from pressure.core.rules import MIN_BOARD_SIZE
from pressure.search import MAX_LEVEL

PLAYER_TYPES = ("human", "ai")


@dataclass
class GameConfig:
    board_size: int = BOARD_SIZE
    black_player_type: str = "human"
    white_player_type: str = "human"
    black_ai_level: int = 1
    white_ai_level: int = 1

    def __post_init__(self) -> None:
        if self.board_size < MIN_BOARD_SIZE:
            raise ConfigError(f"board_size must be at least {MIN_BOARD_SIZE}, got {self.board_size}.")
        for name in ("black_player_type", "white_player_type"):
            if getattr(self, name) not in PLAYER_TYPES:
                raise ConfigError(f"{name} must be one of {PLAYER_TYPES}, got {getattr(self, name)!r}.")
        for name in ("black_ai_level", "white_ai_level"):
            level = getattr(self, name)
            if not isinstance(level, int) or not 0 <= level <= MAX_LEVEL:
                raise ConfigError(f"{name} must be an integer within 0..{MAX_LEVEL}, got {level!r}.")

    def player_type(self, color: Color) -> str:
        return self.white_player_type if color is Color.WHITE else self.black_player_type

    def is_ai(self, color: Color) -> bool:
        return self.player_type(color) == "ai"

    def ai_level(self, color: Color) -> int:
        return self.white_ai_level if color is Color.WHITE else self.black_ai_level

    def as_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "GameConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown game config keys: {', '.join(unknown)}")
        return cls(**data)


def load_yaml_config(path: Union[str, Path]) -> Dict:
    path = Path(path)
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level.")
    return data


def load_game_config(path: Union[str, Path]) -> GameConfig:
    """Build a ``GameConfig`` from a YAML file; a missing file gives defaults."""
    return GameConfig.from_dict(load_yaml_config(path))
