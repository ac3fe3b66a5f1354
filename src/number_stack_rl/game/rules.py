from __future__ import annotations

from dataclasses import dataclass

from .config import GameConfig


@dataclass(frozen=True)
class ScoringRules:
    per_block_score: int = 10
    combo_bonus: int = 50
    combo_threshold: int = 3
    level_step: int = 500

    @classmethod
    def from_config(cls, config: GameConfig) -> "ScoringRules":
        return cls(
            per_block_score=config.per_block_score,
            combo_bonus=config.combo_bonus,
            combo_threshold=config.combo_threshold,
            level_step=config.level_step,
        )

    def points_for_clear(self, tiles_cleared: int) -> int:
        if tiles_cleared <= 0:
            return 0
        bonus = self.combo_bonus if tiles_cleared > self.combo_threshold else 0
        return tiles_cleared * self.per_block_score + bonus

    def level_for_score(self, score: int) -> int:
        return max(0, score) // self.level_step + 1
