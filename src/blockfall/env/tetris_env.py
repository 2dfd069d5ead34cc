from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from blockfall.game import Action, GameConfig, ScoringRules, TetrisGame, TetrominoType
from blockfall.game.grid import count_holes, get_max_height


def _compute_action_mask(game: TetrisGame) -> np.ndarray:
    mask = np.zeros((len(Action),), dtype=np.bool_)
    for action, valid in game.valid_actions().items():
        mask[int(action)] = valid
    return mask


class TetrisEnv(gym.Env):
    """
    Single-piece falling-block environment with one discrete action per input.

    Actions (7 total, see ``Action``):
      0: Move Left
      1: Move Right
      2: Rotate CW
      3: Rotate CCW
      4: Soft Drop (locks when the piece cannot fall)
      5: Hard Drop
      6: No-op

    Observation:
    - ``board``: settled cells as 1, the falling piece as its negative type id.
    - ``next_piece``: type id of the preview piece (0 when none).
    """

    metadata = {"render_modes": []}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        reward_weights: Optional[Dict[str, float]] = None,
        step_penalty: float = 0.0,
        terminal_penalty: float = -1.0,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        self.game = TetrisGame(config, rules)

        # Reward shaping parameters
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)
        self.reward_weights: Dict[str, float] = {
            # Positive components
            "lines": 1.0,
            "lines_sq": 0.5,
            # Negative components (penalize increases)
            "holes": 0.1,
            "height": 0.02,
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        height = self.game.config.height
        width = self.game.config.width
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-len(TetrominoType), high=1, shape=(height, width), dtype=np.int8),
                "next_piece": spaces.Discrete(len(TetrominoType) + 1),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        next_piece = self.game.next_piece
        return {
            "board": self.game.get_state(),
            "next_piece": int(next_piece.kind) if next_piece is not None else 0,
        }

    def _get_info(self) -> Dict[str, Any]:
        info = self.game.get_info()
        info["action_mask"] = _compute_action_mask(self.game)
        info["steps"] = self._steps
        return info

    def action_masks(self) -> np.ndarray:
        return _compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        holes_before = count_holes(self.game.board)
        height_before = get_max_height(self.game.board)
        score_before = self.game.score

        _, lines, terminated, _ = self.game.step(Action(int(action)))

        reward_components: Dict[str, float] = {
            "lines": self.reward_weights["lines"] * float(lines),
            "lines_sq": self.reward_weights["lines_sq"] * float(lines * lines),
            "holes": -self.reward_weights["holes"] * float(max(0, count_holes(self.game.board) - holes_before)),
            "height": -self.reward_weights["height"]
            * float(max(0, get_max_height(self.game.board) - height_before)),
            "step": self.step_penalty,
        }
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        self._steps += 1
        truncated = not terminated and self._steps >= self.max_episode_steps
        reward = float(sum(reward_components.values()))

        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = self.game.score - score_before
        return self._get_obs(), reward, bool(terminated), truncated, info

    def close(self) -> None:
        pass
