from __future__ import annotations

import argparse
import random
from typing import List, Optional

import gymnasium as gym
import numpy as np

import blockfall.env  # noqa: F401


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Blockfall with a uniformly random agent.")
    p.add_argument("--episodes", type=int, default=5)
    p.add_argument("--max-steps", type=int, default=2000, help="Step cap per episode")
    p.add_argument("--seed", type=int, default=None)
    return p


def run_random(episodes: int = 5, max_steps: int = 2000, seed: Optional[int] = None) -> List[dict]:
    env = gym.make("Blockfall-10x20-v0", max_episode_steps=max_steps)
    rng = random.Random(seed)
    results: List[dict] = []
    try:
        for episode in range(episodes):
            obs, info = env.reset(seed=None if seed is None else seed + episode)
            total_reward = 0.0
            done = False
            while not done:
                # Prefer valid actions if available
                valid = np.flatnonzero(info["action_mask"])
                if valid.size > 0:
                    action = int(rng.choice(valid.tolist()))
                else:
                    action = int(env.action_space.sample())
                obs, reward, terminated, truncated, info = env.step(action)
                total_reward += float(reward)
                done = terminated or truncated
            results.append(
                {
                    "score": info["score"],
                    "lines": info["lines_cleared_total"],
                    "level": info["level"],
                    "pieces": info["pieces_placed"],
                    "reward": total_reward,
                }
            )
    finally:
        env.close()
    return results


def main() -> None:
    args = build_parser().parse_args()
    results = run_random(args.episodes, args.max_steps, args.seed)
    for i, r in enumerate(results):
        print(
            f"episode {i}: score {r['score']}  lines {r['lines']}  level {r['level']}  "
            f"pieces {r['pieces']}  reward {r['reward']:.2f}"
        )
    if results:
        mean_score = sum(r["score"] for r in results) / len(results)
        print(f"Random agent mean score over {len(results)} episodes: {mean_score:.1f}")


if __name__ == "__main__":  # pragma: no cover
    main()
