from __future__ import annotations

from typing import Tuple

import numpy as np

from pressure.core import TOKENS_PER_PLAYER, Color, GameSnapshot, Grid

# active / inactive / captured planes per colour
PLANES_PER_COLOR = 3
BOARD_CHANNELS = PLANES_PER_COLOR * len(Color)
AUX_VECTOR_SIZE = 4  # current player one-hot (2) + captured fraction per colour (2)


def build_board_tensor(grid: Grid) -> np.ndarray:
    """Return board tensor with shape (6, N, N) channel-first."""
    tensor = np.zeros((BOARD_CHANNELS, grid.size, grid.size), dtype=np.float32)
    for color in Color:
        owned = grid.colors == int(color)
        offset = (int(color) - 1) * PLANES_PER_COLOR
        tensor[offset] = owned & grid.active
        tensor[offset + 1] = owned & ~grid.active & ~grid.captured
        tensor[offset + 2] = owned & grid.captured
    return tensor


def build_aux_vector(snapshot: GameSnapshot) -> np.ndarray:
    aux = np.zeros((AUX_VECTOR_SIZE,), dtype=np.float32)
    aux[int(snapshot.current_player) - 1] = 1.0
    captured = snapshot.grid.count_captured()
    for color in Color:
        aux[2 + int(color) - 1] = captured[color] / TOKENS_PER_PLAYER
    return aux


def snapshot_to_numpy(snapshot: GameSnapshot) -> Tuple[np.ndarray, np.ndarray]:
    return build_board_tensor(snapshot.grid), build_aux_vector(snapshot)
