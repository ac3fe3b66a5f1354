from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np


Position = Tuple[int, int]  # (row, col)


@dataclass(frozen=True)
class Tile:
    id: int
    value: int


Cell = Optional[Tile]
RowFactory = Callable[[int], Sequence[Tile]]


def compact_column(column: Sequence[Cell]) -> List[Cell]:
    """Let the tiles of a top-to-bottom column fall to the bottom.

    Relative order is kept and vacated cells at the top become empty.
    """
    tiles = [cell for cell in column if cell is not None]
    return [None] * (len(column) - len(tiles)) + tiles


def _frozen(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


class NumberGrid:
    """Fixed-size grid of numbered tiles.

    Values are held in ``values`` (0 for empty, 1-9 otherwise) and tile
    identities in ``ids`` (0 for empty). Both arrays are read-only; every
    operation returns a new grid. Row 0 is the top (danger) row and new rows
    enter at the bottom.
    """

    def __init__(self, values: np.ndarray, ids: np.ndarray) -> None:
        if values.ndim != 2 or values.shape != ids.shape:
            raise ValueError(f"values {values.shape} and ids {ids.shape} must be matching 2D arrays")
        self._values = _frozen(np.array(values, dtype=np.int8))
        self._ids = _frozen(np.array(ids, dtype=np.int64))

    @classmethod
    def empty(cls, rows: int, cols: int) -> "NumberGrid":
        return cls(np.zeros((rows, cols), dtype=np.int8), np.zeros((rows, cols), dtype=np.int64))

    @classmethod
    def from_cells(cls, cells: Sequence[Sequence[Cell]]) -> "NumberGrid":
        rows = len(cells)
        cols = len(cells[0]) if rows else 0
        values = np.zeros((rows, cols), dtype=np.int8)
        ids = np.zeros((rows, cols), dtype=np.int64)
        for r, row in enumerate(cells):
            for c, cell in enumerate(row):
                if cell is not None:
                    values[r, c] = cell.value
                    ids[r, c] = cell.id
        return cls(values, ids)

    @classmethod
    def from_values(cls, values: Sequence[Sequence[int]]) -> "NumberGrid":
        """Build a grid from a value layout, 0 meaning empty; ids are assigned row-major."""
        arr = np.array(values, dtype=np.int8)
        ids = np.zeros(arr.shape, dtype=np.int64)
        occupied = arr != 0
        ids[occupied] = np.arange(1, int(occupied.sum()) + 1)
        return cls(arr, ids)

    @classmethod
    def seeded(cls, rows: int, cols: int, initial_rows: int, new_row: RowFactory) -> "NumberGrid":
        cells: List[List[Cell]] = [[None] * cols for _ in range(rows - initial_rows)]
        for _ in range(initial_rows):
            cells.append(list(new_row(cols)))
        return cls.from_cells(cells)

    @property
    def rows(self) -> int:
        return int(self._values.shape[0])

    @property
    def cols(self) -> int:
        return int(self._values.shape[1])

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def ids(self) -> np.ndarray:
        return self._ids

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def is_empty(self, row: int, col: int) -> bool:
        return self._values[row, col] == 0

    def cell(self, row: int, col: int) -> Cell:
        if not self.is_inside(row, col) or self.is_empty(row, col):
            return None
        return Tile(id=int(self._ids[row, col]), value=int(self._values[row, col]))

    def column(self, col: int) -> List[Cell]:
        return [self.cell(r, col) for r in range(self.rows)]

    def to_cells(self) -> List[List[Cell]]:
        return [[self.cell(r, c) for c in range(self.cols)] for r in range(self.rows)]

    def top_row_occupied(self) -> bool:
        return bool(np.any(self._values[0] != 0))

    def occupied_count(self) -> int:
        return int(np.count_nonzero(self._values))

    def cleared(self, positions: Iterable[Position]) -> "NumberGrid":
        values = self._values.copy()
        ids = self._ids.copy()
        for r, c in positions:
            values[r, c] = 0
            ids[r, c] = 0
        return NumberGrid(values, ids)

    def compacted(self) -> "NumberGrid":
        values = np.zeros_like(self._values)
        ids = np.zeros_like(self._ids)
        for c in range(self.cols):
            for r, cell in enumerate(compact_column(self.column(c))):
                if cell is not None:
                    values[r, c] = cell.value
                    ids[r, c] = cell.id
        return NumberGrid(values, ids)

    def shift_up_and_insert(self, new_row: RowFactory) -> Tuple["NumberGrid", bool]:
        """Shift every row up by one and fill the bottom row with fresh tiles.

        Returns ``(grid, overflow)``. When row 0 is occupied the insertion is
        refused: the same grid is returned with ``overflow=True`` and
        ``new_row`` is not called.
        """
        if self.top_row_occupied():
            return self, True
        tiles = list(new_row(self.cols))
        if len(tiles) != self.cols:
            raise ValueError(f"new row has {len(tiles)} tiles, expected {self.cols}")
        values = np.roll(self._values, -1, axis=0)
        ids = np.roll(self._ids, -1, axis=0)
        values[-1] = [t.value for t in tiles]
        ids[-1] = [t.id for t in tiles]
        return NumberGrid(values, ids), False

    def clone_state(self) -> np.ndarray:
        return self._values.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NumberGrid):
            return NotImplemented
        return np.array_equal(self._values, other._values) and np.array_equal(self._ids, other._ids)

    def __hash__(self) -> int:
        return hash((self._values.tobytes(), self._ids.tobytes(), self.shape))

    def __repr__(self) -> str:
        return f"NumberGrid(rows={self.rows}, cols={self.cols}, occupied={self.occupied_count()})"
