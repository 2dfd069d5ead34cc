import gymnasium as gym
import numpy as np
import pytest

import blockfall.env  # noqa: F401
from blockfall.env.tetris_env import TetrisEnv
from blockfall.game import Action, Cell, GameConfig, TetrominoType, spawn_tetromino
from blockfall.rl.random_agent import run_random


@pytest.fixture
def env():
    e = TetrisEnv(GameConfig(random_seed=0))
    yield e
    e.close()


def test_reset_observation(env):
    obs, info = env.reset(seed=3)
    assert env.observation_space.contains(obs)
    assert obs["board"].shape == (20, 10)
    assert 1 <= obs["next_piece"] <= len(TetrominoType)
    assert info["score"] == 0
    assert info["level"] == 1
    assert info["action_mask"].shape == (len(Action),)


def test_registered_env_steps():
    e = gym.make("Blockfall-10x20-v0")
    obs, info = e.reset(seed=1)
    obs, reward, terminated, truncated, info = e.step(int(Action.HARD_DROP))
    assert isinstance(reward, float)
    assert info["pieces_placed"] == 1
    assert not terminated
    e.close()


def test_line_clear_reward(env):
    env.reset(seed=0)
    game = env.game
    for x in range(10):
        if x not in (4, 5):
            game.board[19][x] = Cell(True, "red")
    game.current_piece = spawn_tetromino(TetrominoType.O)
    _, reward, terminated, _, info = env.step(int(Action.HARD_DROP))
    assert info["reward_components"]["lines"] == pytest.approx(1.0)
    assert info["reward_components"]["lines_sq"] == pytest.approx(0.5)
    assert info["engine_score_delta"] == 100
    assert reward == pytest.approx(1.5)
    assert not terminated


def test_terminal_penalty(env):
    env.reset(seed=0)
    game = env.game
    for y in (0, 1):
        for x in range(9):
            game.board[y][x] = Cell(True, "red")
    game.current_piece = spawn_tetromino(TetrominoType.O).moved(-4, 10)
    _, reward, terminated, truncated, info = env.step(int(Action.HARD_DROP))
    assert terminated
    assert not truncated
    assert info["reward_components"]["terminal"] == -1.0


def test_truncation():
    e = TetrisEnv(GameConfig(random_seed=0), max_episode_steps=3)
    e.reset()
    results = [e.step(int(Action.NONE)) for _ in range(3)]
    assert [r[3] for r in results] == [False, False, True]


def test_action_mask_matches_game(env):
    env.reset(seed=0)
    env.game.current_piece = spawn_tetromino(TetrominoType.O).moved(-4, 5)
    mask = env.action_masks()
    assert mask.dtype == np.bool_
    assert not mask[Action.LEFT]
    assert mask[Action.RIGHT]


def test_random_agent_runs():
    results = run_random(episodes=2, max_steps=200, seed=11)
    assert len(results) == 2
    for r in results:
        assert r["score"] >= 0
        assert r["level"] >= 1
