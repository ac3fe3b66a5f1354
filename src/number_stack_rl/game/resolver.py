from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .rules import ScoringRules
from .selection import Selection, current_sum
from .state import GameMode, SessionState
from .tiles import TileGenerator


logger = logging.getLogger(__name__)


class MatchOutcome(Enum):
    MATCH = "match"
    OVERFLOW = "overflow"
    PARTIAL = "partial"


@dataclass(frozen=True)
class Resolution:
    state: SessionState
    outcome: MatchOutcome
    points: int = 0
    tiles_cleared: int = 0
    row_inserted: bool = False


def classify(total: int, target: int) -> MatchOutcome:
    if total == target:
        return MatchOutcome.MATCH
    if total > target:
        return MatchOutcome.OVERFLOW
    return MatchOutcome.PARTIAL


def resolve(
    state: SessionState,
    selection: Selection,
    rules: ScoringRules,
    generator: TileGenerator,
    tick_seconds: int,
) -> Resolution:
    """Apply the post-toggle ``selection`` to ``state``.

    A selection summing exactly to the target is cleared, the board settles
    and is scored; in classic mode a new row is inserted straight after. A
    selection over the target is dropped without touching the board. Anything
    under the target is simply kept.
    """
    outcome = classify(current_sum(selection, state.grid), state.target)

    if outcome is MatchOutcome.PARTIAL:
        return Resolution(state.evolve(selection=selection), outcome)

    if outcome is MatchOutcome.OVERFLOW:
        logger.debug("bust: %d tiles over target %d", len(selection), state.target)
        return Resolution(state.evolve(selection=()), outcome)

    cleared = len(selection)
    grid = state.grid.cleared(selection).compacted()
    points = rules.points_for_clear(cleared)
    score = state.score + points

    game_over = state.game_over
    row_inserted = False
    if state.mode is GameMode.CLASSIC:
        grid, overflow = grid.shift_up_and_insert(generator.random_row)
        row_inserted = not overflow
        if overflow:
            game_over = True
            logger.info("game over: no room for a new row (score %d)", score)

    logger.debug("match: %d tiles for %d points (score %d)", cleared, points, score)
    new_state = state.evolve(
        grid=grid,
        selection=(),
        target=generator.random_target(),
        score=score,
        level=rules.level_for_score(score),
        time_left=tick_seconds,
        game_over=game_over,
        paused=True if game_over else state.paused,
        last_cleared=cleared,
    )
    return Resolution(new_state, outcome, points=points, tiles_cleared=cleared, row_inserted=row_inserted)
