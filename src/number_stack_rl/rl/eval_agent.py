from __future__ import annotations

import argparse
from typing import Optional

import gymnasium as gym
import pygame

import number_stack_rl.env  # ensure registration
from number_stack_rl.env.wrappers import ResampleInvalidActionWrapper
from number_stack_rl.visualization.renderer import Renderer


def build_env(env_id: str, render_mode: Optional[str] = None, use_resample: bool = True) -> gym.Env:
    env = gym.make(env_id, render_mode=render_mode)
    if use_resample:
        env = ResampleInvalidActionWrapper(env)
    return env


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--algo", choices=["ppo", "maskable"], default="maskable")
    p.add_argument("--env", choices=["classic", "timed"], default="classic")
    p.add_argument("--model", type=str, required=True)
    p.add_argument("--steps", type=int, default=500)
    p.add_argument("--fps", type=int, default=10)
    return p


def main() -> None:
    args = build_parser().parse_args()
    if args.algo == "maskable":
        from sb3_contrib import MaskablePPO as Algo
    else:
        from stable_baselines3 import PPO as Algo

    env_id = "NumberStack-Timed-v0" if args.env == "timed" else "NumberStack-Classic-v0"
    env = build_env(env_id, render_mode=None, use_resample=(args.algo == "ppo"))
    model = Algo.load(args.model, device="auto")

    session = env.unwrapped.session
    renderer = Renderer(session.config.rows, session.config.cols)

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.size)
        pygame.display.set_caption("Number Stack - Agent Eval")
        clock = pygame.time.Clock()

        obs, info = env.reset()
        total_reward = 0.0
        steps = 0
        while steps < args.steps:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    return

            if args.algo == "maskable":
                action, _ = model.predict(obs, deterministic=True, action_masks=env.unwrapped.get_action_mask())
            else:
                action, _ = model.predict(obs, deterministic=True)

            obs, reward, terminated, truncated, info = env.step(action)
            total_reward += float(reward)
            steps += 1
            if terminated or truncated:
                print(f"episode finished: score {info['score']} level {info['level']}")
                obs, info = env.reset()

            renderer.draw(screen, session.state)
            pygame.display.set_caption(f"Number Stack - step {steps}/{args.steps} reward {total_reward:.1f}")
            clock.tick(args.fps)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    main()
