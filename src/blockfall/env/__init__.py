"""Gymnasium environments for Blockfall."""

from __future__ import annotations

from gymnasium.envs.registration import register

register(
    id="Blockfall-10x20-v0",
    entry_point="blockfall.env.tetris_env:TetrisEnv",
)

__all__ = ["Blockfall-10x20-v0"]
