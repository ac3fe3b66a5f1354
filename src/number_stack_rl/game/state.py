from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, List

from .grid import NumberGrid, Position
from .selection import Selection, current_sum


class GameMode(str, Enum):
    CLASSIC = "classic"  # new row after every clear
    TIMED = "timed"      # new row every tick_seconds


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of a running game.

    Every engine transition produces a new snapshot; the presentation layer
    only ever reads one. Derived values such as the running sum are computed
    on access, never stored.
    """

    grid: NumberGrid
    target: int
    selection: Selection
    score: int
    level: int
    game_over: bool
    mode: GameMode
    time_left: int
    paused: bool
    last_cleared: int = 0

    @property
    def current_sum(self) -> int:
        return current_sum(self.selection, self.grid)

    @property
    def in_danger(self) -> bool:
        return self.grid.top_row_occupied()

    def is_selected(self, position: Position) -> bool:
        return tuple(position) in self.selection

    def danger_cells(self) -> List[Position]:
        return [(0, c) for c in range(self.grid.cols) if not self.grid.is_empty(0, c)]

    def evolve(self, **changes: Any) -> "SessionState":
        return replace(self, **changes)
