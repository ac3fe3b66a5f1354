"""Session configuration.

The engine takes a single frozen ``GameConfig`` at session start. Values are
validated on construction so a bad configuration fails before any game runs.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml


class ConfigError(ValueError):
    """Raised when configuration values are outside their allowed bounds."""


@dataclass(frozen=True)
class GameConfig:
    rows: int = 10
    cols: int = 6
    initial_rows: int = 4
    target_min: int = 10
    target_max: int = 20
    tick_seconds: int = 15
    per_block_score: int = 10
    combo_bonus: int = 50
    combo_threshold: int = 3
    level_step: int = 500
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "random_seed" and value is None:
                continue
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigError(f"{f.name} must be an integer, got {value!r}")
        if self.rows < 1 or self.cols < 1:
            raise ConfigError(f"grid must be at least 1x1, got {self.rows}x{self.cols}")
        if not 0 <= self.initial_rows <= self.rows:
            raise ConfigError(f"initial_rows must be in [0, {self.rows}], got {self.initial_rows}")
        if self.target_min < 1:
            raise ConfigError(f"target_min must be positive, got {self.target_min}")
        if self.target_min > self.target_max:
            raise ConfigError(
                f"target_min ({self.target_min}) is greater than target_max ({self.target_max})"
            )
        if self.tick_seconds < 1:
            raise ConfigError(f"tick_seconds must be at least 1, got {self.tick_seconds}")
        for name in ("per_block_score", "combo_bonus", "combo_threshold"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative, got {getattr(self, name)}")
        if self.level_step < 1:
            raise ConfigError(f"level_step must be at least 1, got {self.level_step}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GameConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(unknown)}")
        return cls(**dict(data))

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(path: Optional[Union[str, Path]] = None) -> GameConfig:
    """Load a ``GameConfig`` from a YAML file.

    With no path the built-in defaults are returned. The file holds a flat
    mapping of ``GameConfig`` field names; an optional top-level ``game`` key
    may wrap it.
    """
    if path is None:
        return GameConfig()
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    if "game" in data and isinstance(data["game"], dict):
        data = data["game"]
    return GameConfig.from_mapping(data)
