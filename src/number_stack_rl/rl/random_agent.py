from __future__ import annotations

import argparse
import random

import gymnasium as gym
import numpy as np

# Ensure envs are registered
import number_stack_rl.env  # noqa: F401


def run_random(env_id: str = "NumberStack-Classic-v0", steps: int = 500, seed: int | None = None) -> float:
    env = gym.make(env_id)
    rng = random.Random(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        # Prefer occupied cells if any
        valid = np.flatnonzero(info.get("action_mask", []))
        if valid.size:
            action = int(rng.choice(list(valid)))
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            print(f"episode {episodes}: score {info['score']} level {info['level']}")
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}")
    return total_reward


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--env", choices=["classic", "timed"], default="classic")
    p.add_argument("--steps", type=int, default=500)
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args()
    env_id = "NumberStack-Timed-v0" if args.env == "timed" else "NumberStack-Classic-v0"
    run_random(env_id, args.steps, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
