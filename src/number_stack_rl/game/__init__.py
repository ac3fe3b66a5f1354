"""Game module for Number Stack RL.

Exports the core game engine and supporting classes:
- NumberGrid: Grid of numbered tiles with row insertion and gravity
- TileGenerator: Fresh tiles and targets
- ScoringRules: Scoring and level configuration
- SessionState: Immutable game snapshot
- GameSession: Engine operations over the current snapshot
"""

from .config import ConfigError, GameConfig, load_config
from .grid import NumberGrid, Position, Tile, compact_column
from .tiles import TileGenerator
from .rules import ScoringRules
from .selection import Selection, current_sum, toggle
from .state import GameMode, SessionState
from .resolver import MatchOutcome, Resolution, classify, resolve
from .timer import TickDriver, advance_timer, ticks_enabled
from .core import GameSession

__all__ = [
    "ConfigError",
    "GameConfig",
    "load_config",
    "NumberGrid",
    "Position",
    "Tile",
    "compact_column",
    "TileGenerator",
    "ScoringRules",
    "Selection",
    "current_sum",
    "toggle",
    "GameMode",
    "SessionState",
    "MatchOutcome",
    "Resolution",
    "classify",
    "resolve",
    "TickDriver",
    "advance_timer",
    "ticks_enabled",
    "GameSession",
]
