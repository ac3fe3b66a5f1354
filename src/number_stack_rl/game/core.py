from __future__ import annotations

import logging
import numbers
import threading
from typing import Any, Optional, Union

from .config import GameConfig
from .grid import NumberGrid, Position
from .resolver import Resolution, resolve
from .rules import ScoringRules
from .selection import toggle
from .state import GameMode, SessionState
from .tiles import TileGenerator
from .timer import TickDriver, advance_timer


logger = logging.getLogger(__name__)


def _is_index(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _as_position(position: Any) -> Optional[Position]:
    if isinstance(position, (str, bytes)):
        return None
    try:
        row, col = position
    except (TypeError, ValueError):
        return None
    if not (_is_index(row) and _is_index(col)):
        return None
    return int(row), int(col)


class GameSession:
    """Owns the current snapshot and exposes the engine operations.

    Each operation computes a new ``SessionState`` from the current one under
    a lock and returns it. The session's ``ticker`` is re-synced after every
    transition so it runs only while timed mode is live.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        mode: Union[GameMode, str] = GameMode.CLASSIC,
        rules: Optional[ScoringRules] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules.from_config(self.config)
        self.ticker = TickDriver(self.tick)
        self.last_resolution: Optional[Resolution] = None
        self._lock = threading.RLock()
        self.generator = TileGenerator(self.config.target_min, self.config.target_max, self.config.random_seed)
        self.state = self.start(mode)

    def start(self, mode: Union[GameMode, str]) -> SessionState:
        mode = GameMode(mode)
        cfg = self.config
        with self._lock:
            self.ticker.cancel()
            grid = NumberGrid.seeded(cfg.rows, cfg.cols, cfg.initial_rows, self.generator.random_row)
            self.state = SessionState(
                grid=grid,
                target=self.generator.random_target(),
                selection=(),
                score=0,
                level=self.rules.level_for_score(0),
                game_over=False,
                mode=mode,
                time_left=cfg.tick_seconds,
                paused=False,
            )
            self.last_resolution = None
            self.ticker.sync(self.state)
            logger.info("session started: %s mode, %dx%d grid, target %d",
                        mode.value, cfg.rows, cfg.cols, self.state.target)
            return self.state

    def reset(self, mode: Optional[Union[GameMode, str]] = None) -> SessionState:
        with self._lock:
            return self.start(self.state.mode if mode is None else mode)

    def select(self, position: Any) -> SessionState:
        with self._lock:
            state = self.state
            if state.game_over or state.paused:
                return state
            pos = _as_position(position)
            if pos is None or not state.grid.is_inside(*pos):
                return state
            if pos not in state.selection and state.grid.is_empty(*pos):
                return state
            selection = toggle(state.selection, pos, state.grid)
            self.last_resolution = resolve(state, selection, self.rules, self.generator, self.config.tick_seconds)
            return self._commit(self.last_resolution.state)

    def tick(self) -> SessionState:
        with self._lock:
            return self._commit(advance_timer(self.state, self.generator, self.config.tick_seconds))

    def toggle_pause(self) -> SessionState:
        with self._lock:
            if self.state.game_over:
                return self.state
            logger.debug("paused" if not self.state.paused else "resumed")
            return self._commit(self.state.evolve(paused=not self.state.paused))

    def advance_clock(self, elapsed_ms: int) -> int:
        """Feed elapsed wall-clock time to the tick driver; returns ticks fired."""
        with self._lock:
            return self.ticker.advance(elapsed_ms)

    def _commit(self, state: SessionState) -> SessionState:
        self.state = state
        self.ticker.sync(state)
        return state
