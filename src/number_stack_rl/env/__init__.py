"""Gymnasium environments for Number Stack RL."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Classic mode: a new row after every clear
register(
    id="NumberStack-Classic-v0",
    entry_point="number_stack_rl.env.number_stack_env:NumberStackEnv",
    kwargs={"mode": "classic"},
)

# Timed mode: a new row every tick_seconds ticks
register(
    id="NumberStack-Timed-v0",
    entry_point="number_stack_rl.env.number_stack_env:NumberStackEnv",
    kwargs={"mode": "timed"},
)

__all__ = ["NumberStack-Classic-v0", "NumberStack-Timed-v0"]
