"""Timed-mode row insertion.

``advance_timer`` is the pure per-second transition. ``TickDriver`` is the
periodic source that delivers those seconds; it is owned by a session and is
only running while timed mode is active, unpaused and not over.
"""

from __future__ import annotations

import logging
from typing import Callable

from .state import GameMode, SessionState
from .tiles import TileGenerator


logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


def ticks_enabled(state: SessionState) -> bool:
    return state.mode is GameMode.TIMED and not state.paused and not state.game_over


def advance_timer(state: SessionState, generator: TileGenerator, tick_seconds: int) -> SessionState:
    if not ticks_enabled(state):
        return state
    if state.time_left > 1:
        return state.evolve(time_left=state.time_left - 1)

    grid, overflow = state.grid.shift_up_and_insert(generator.random_row)
    if overflow:
        logger.info("game over: timer expired with the top row occupied (score %d)", state.score)
        return state.evolve(time_left=tick_seconds, game_over=True, paused=True)
    logger.debug("timer expired: row inserted")
    # positions shifted up a row
    return state.evolve(grid=grid, selection=(), time_left=tick_seconds)


class TickDriver:
    """Fires ``on_tick`` once per ``interval_ms`` of elapsed time while active.

    The host feeds wall-clock time through ``advance``. ``start`` and
    ``cancel`` drop any partially elapsed interval, so a tick can never fire
    against a session that was reset or paused in between.
    """

    def __init__(self, on_tick: Callable[[], object], interval_ms: int = TICK_INTERVAL_MS) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.on_tick = on_tick
        self.interval_ms = int(interval_ms)
        self._active = False
        self._elapsed_ms = 0

    @property
    def active(self) -> bool:
        return self._active

    @property
    def elapsed_ms(self) -> int:
        return self._elapsed_ms

    def start(self) -> None:
        self._active = True
        self._elapsed_ms = 0

    def cancel(self) -> None:
        self._active = False
        self._elapsed_ms = 0

    def sync(self, state: SessionState) -> None:
        """Start or cancel so the driver runs exactly when ``state`` takes ticks."""
        wanted = ticks_enabled(state)
        if wanted and not self._active:
            self.start()
        elif not wanted and self._active:
            self.cancel()

    def advance(self, elapsed_ms: int) -> int:
        if not self._active or elapsed_ms <= 0:
            return 0
        self._elapsed_ms += int(elapsed_ms)
        fired = 0
        while self._active and self._elapsed_ms >= self.interval_ms:
            self._elapsed_ms -= self.interval_ms
            fired += 1
            self.on_tick()
        return fired
