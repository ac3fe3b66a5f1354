from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from number_stack_rl.game import GameConfig, GameMode, GameSession, MatchOutcome
from number_stack_rl.game.tiles import TILE_MAX


def _compute_action_mask(session: GameSession) -> np.ndarray:
    state = session.state
    if state.game_over or state.paused:
        return np.zeros(state.grid.rows * state.grid.cols, dtype=np.bool_)
    return (state.grid.values != 0).reshape(-1)


class NumberStackEnv(gym.Env):
    """One action selects one cell (``row * cols + col``).

    In timed mode the environment delivers one clock tick every
    ``steps_per_tick`` steps, standing in for real seconds.
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, mode: str = "classic",
                 render_mode: Optional[str] = None,
                 steps_per_tick: int = 4,
                 invalid_action_penalty: float = -0.1,
                 bust_penalty: float = -0.05,
                 terminal_penalty: float = 0.0,
                 max_episode_steps: int = 2000) -> None:
        super().__init__()
        self.session = GameSession(config, mode=mode)
        self.config = self.session.config
        self.render_mode = render_mode

        # Reward shaping parameters
        self.steps_per_tick = max(1, int(steps_per_tick))
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.bust_penalty = float(bust_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)

        rows, cols = self.config.rows, self.config.cols
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=TILE_MAX, shape=(rows, cols), dtype=np.int8),
                "selected": spaces.Box(low=0, high=1, shape=(rows, cols), dtype=np.int8),
                "target": spaces.Box(low=0, high=self.config.target_max, shape=(1,), dtype=np.int32),
                "current_sum": spaces.Box(low=0, high=TILE_MAX * rows * cols, shape=(1,), dtype=np.int32),
                "time_left": spaces.Box(low=0, high=self.config.tick_seconds, shape=(1,), dtype=np.int32),
            }
        )
        self.action_space = spaces.Discrete(rows * cols)

        self._last_obs: Optional[Dict[str, Any]] = None
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        state = self.session.state
        selected = np.zeros(state.grid.shape, dtype=np.int8)
        for r, c in state.selection:
            selected[r, c] = 1
        return {
            "grid": state.grid.clone_state(),
            "selected": selected,
            "target": np.array([state.target], dtype=np.int32),
            "current_sum": np.array([state.current_sum], dtype=np.int32),
            "time_left": np.array([state.time_left], dtype=np.int32),
        }

    def _get_info(self) -> Dict[str, Any]:
        state = self.session.state
        return {
            "action_mask": _compute_action_mask(self.session),
            "score": state.score,
            "level": state.level,
            "steps": self._steps,
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.session)

    def decode_action(self, action: int) -> Tuple[int, int]:
        return divmod(int(action), self.config.cols)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.session.generator.rng.seed(seed)
        mode = (options or {}).get("mode")
        self.session.reset(mode)
        self._steps = 0
        obs = self._get_obs()
        info = self._get_info()
        self._last_obs = obs
        return obs, info

    def step(self, action):
        row, col = self.decode_action(action)
        score_before = self.session.state.score
        valid = bool(self.get_action_mask()[int(action)]) if 0 <= int(action) < self.action_space.n else False

        self.session.last_resolution = None
        self.session.select((row, col))
        resolution = self.session.last_resolution

        self._steps += 1
        if self.session.state.mode is GameMode.TIMED and self._steps % self.steps_per_tick == 0:
            self.session.tick()

        state = self.session.state
        reward_components: Dict[str, float] = {"points": float(state.score - score_before)}
        if not valid:
            reward_components["invalid"] = self.invalid_action_penalty
        elif resolution is not None and resolution.outcome is MatchOutcome.OVERFLOW:
            reward_components["bust"] = self.bust_penalty

        terminated = bool(state.game_over)
        truncated = self._steps >= self.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))

        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["outcome"] = resolution.outcome.value if resolution is not None else None
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self._last_obs["grid"] if self._last_obs is not None else self.session.state.grid.values
            selected = self._last_obs["selected"] if self._last_obs is not None else np.zeros_like(grid)
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    if selected[y, x]:
                        color = (122, 162, 247)
                    elif grid[y, x]:
                        shade = 80 + int(grid[y, x]) * 15
                        color = (shade, shade, shade)
                    else:
                        color = (30, 30, 36)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        # human rendering delegated to number_stack_rl.visualization; noop
        return None

    def close(self) -> None:
        pass
