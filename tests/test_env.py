import numpy as np
import pytest

from pressure import PressureEnv
from pressure.core import ACTION_VECTOR_SIZE, encode_move, generate_moves


def test_reset_returns_valid_observation():
    env = PressureEnv()
    obs, info = env.reset(seed=0)

    assert obs["board"].shape == (6, 5, 5)
    assert obs["aux"].shape == (4,)
    assert info["legal_action_mask"].shape == (ACTION_VECTOR_SIZE,)
    assert info["current_player"] == 1


def test_legal_mask_matches_enumeration():
    env = PressureEnv()
    env.reset()
    mask = env.legal_action_mask()
    snapshot = env.game.snapshot
    legal = generate_moves(snapshot.grid, snapshot.current_player)

    assert np.count_nonzero(mask) == len(legal)
    for move in legal:
        assert mask[encode_move(move)] == 1


def test_step_advances_state_and_returns_reward():
    env = PressureEnv()
    obs, info = env.reset()
    action = int(np.flatnonzero(info["legal_action_mask"])[0])

    next_obs, reward, terminated, truncated, next_info = env.step(action)

    assert reward == 0.0
    assert not terminated
    assert not truncated
    assert np.any(next_obs["board"] != obs["board"])
    assert next_info["current_player"] == 2
    assert len(env.game.history) == 1


def test_illegal_action_rejected():
    env = PressureEnv()
    _, info = env.reset()
    illegal = int(np.flatnonzero(info["legal_action_mask"] == 0)[0])
    with pytest.raises(ValueError):
        env.step(illegal)


def test_illegal_action_ends_episode_until_reset():
    env = PressureEnv(enforce_legal_actions=False)
    _, info = env.reset()
    illegal = int(np.flatnonzero(info["legal_action_mask"] == 0)[0])
    legal = int(np.flatnonzero(info["legal_action_mask"])[0])

    _, reward, terminated, truncated, _ = env.step(illegal)
    assert reward == -1.0
    assert terminated
    assert not truncated
    with pytest.raises(RuntimeError):
        env.step(legal)

    env.reset()
    _, reward, terminated, _, _ = env.step(legal)
    assert reward == 0.0
    assert not terminated


def test_truncates_at_ply_limit():
    env = PressureEnv(max_ply=1)
    _, info = env.reset()
    action = int(np.flatnonzero(info["legal_action_mask"])[0])
    _, _, terminated, truncated, _ = env.step(action)
    assert truncated and not terminated


def test_ansi_render():
    env = PressureEnv(render_mode="ansi")
    env.reset()
    rows = env.render().splitlines()
    assert rows[0] == ".BB.."
    assert rows[4] == "..WW."
