from __future__ import annotations

from typing import Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from pressure.config import GameConfig
from pressure.core import GameResult, action_vector_size, encode_move, find_move
from pressure.features import AUX_VECTOR_SIZE, BOARD_CHANNELS, build_aux_vector, build_board_tensor
from pressure.game import Game


class PressureEnv(gym.Env):
    """Single-agent view of a two-player game; both sides act through ``step``.

    Rewards are from the point of view of the player who made the move.
    """

    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(
        self,
        *,
        board_size: int = 5,
        max_ply: int = 200,
        enforce_legal_actions: bool = True,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._config = GameConfig(board_size=board_size)
        self._max_ply = max_ply
        self._enforce_legal = enforce_legal_actions
        self._forfeited = False
        self.render_mode = render_mode

        board_shape = (BOARD_CHANNELS, board_size, board_size)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0.0, high=1.0, shape=board_shape, dtype=np.float32),
                "aux": spaces.Box(low=0.0, high=1.0, shape=(AUX_VECTOR_SIZE,), dtype=np.float32),
            }
        )
        self.action_space = spaces.Discrete(action_vector_size(board_size))

        self.game = Game()
        self.game.start(self._config)

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        if options and "max_ply" in options:
            self._max_ply = int(options["max_ply"])
        self._forfeited = False
        self.game.start(self._config)
        return self._build_observation(), self._build_info()

    def step(self, action_index: int):
        if not self.action_space.contains(action_index):
            raise ValueError(f"Action index {action_index} out of bounds.")
        if self._forfeited or not self.game.is_active:
            raise RuntimeError("Episode is over; call reset().")

        snapshot = self.game.snapshot
        mover = snapshot.current_player
        move = find_move(snapshot.grid, mover, int(action_index))
        if move is None:
            if self._enforce_legal:
                raise ValueError("Illegal action provided and enforce_legal_actions=True.")
            # Illegal action forfeits the episode with a penalty.
            self._forfeited = True
            return self._build_observation(), -1.0, True, False, self._build_info()

        self.game.play_move(move)

        snapshot = self.game.snapshot
        terminated = snapshot.is_terminal
        truncated = not terminated and snapshot.ply_count >= self._max_ply
        reward = self._compute_reward(snapshot.result, mover)
        return self._build_observation(), reward, terminated, truncated, self._build_info()

    def legal_action_mask(self) -> np.ndarray:
        mask = np.zeros(self.action_space.n, dtype=np.int8)
        for move in self.game.legal_moves():
            mask[encode_move(move, self._config.board_size)] = 1
        return mask

    def render(self):
        if self.render_mode != "ansi":
            raise NotImplementedError("Only 'ansi' render mode is supported.")
        return self.game.snapshot.grid.render()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _build_observation(self) -> Dict[str, np.ndarray]:
        snapshot = self.game.snapshot
        return {"board": build_board_tensor(snapshot.grid), "aux": build_aux_vector(snapshot)}

    def _build_info(self) -> Dict:
        snapshot = self.game.snapshot
        return {
            "legal_action_mask": self.legal_action_mask(),
            "current_player": int(snapshot.current_player),
            "ply": snapshot.ply_count,
        }

    def _compute_reward(self, result: GameResult, mover) -> float:
        if result == GameResult.ONGOING:
            return 0.0
        return 1.0 if result == GameResult.for_winner(mover) else -1.0
