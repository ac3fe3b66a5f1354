from __future__ import annotations

import itertools
import random
from typing import List, Optional

from .grid import Tile


TILE_MIN = 1
TILE_MAX = 9


class TileGenerator:
    """Source of fresh tiles and targets for one session.

    Tile ids come from a per-generator counter so they never repeat among the
    live tiles of a session.
    """

    def __init__(self, target_min: int, target_max: int, seed: Optional[int] = None) -> None:
        self.target_min = int(target_min)
        self.target_max = int(target_max)
        self.rng = random.Random(seed)
        self._ids = itertools.count(1)

    def random_tile(self) -> Tile:
        return Tile(id=next(self._ids), value=self.rng.randint(TILE_MIN, TILE_MAX))

    def random_row(self, n: int) -> List[Tile]:
        return [self.random_tile() for _ in range(n)]

    def random_target(self) -> int:
        return self.rng.randint(self.target_min, self.target_max)
