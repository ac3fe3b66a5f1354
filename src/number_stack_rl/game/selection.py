"""Tile selection accumulator.

A selection is a tuple of unique ``(row, col)`` positions in the order they
were picked. The running sum is always recomputed from the live grid.
"""

from __future__ import annotations

from typing import Tuple

from .grid import NumberGrid, Position


Selection = Tuple[Position, ...]


def toggle(selection: Selection, position: Position, grid: NumberGrid) -> Selection:
    if position in selection:
        return tuple(p for p in selection if p != position)
    row, col = position
    if grid.cell(row, col) is None:
        return selection
    return selection + (position,)


def current_sum(selection: Selection, grid: NumberGrid) -> int:
    total = 0
    for row, col in selection:
        tile = grid.cell(row, col)
        if tile is not None:
            total += tile.value
    return total
