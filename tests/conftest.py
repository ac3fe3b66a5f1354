from __future__ import annotations

import pytest

from number_stack_rl.game import GameConfig, GameMode, NumberGrid, ScoringRules, SessionState, TileGenerator


@pytest.fixture
def config():
    return GameConfig(random_seed=1234)


@pytest.fixture
def rules():
    return ScoringRules(per_block_score=10, combo_bonus=50, combo_threshold=3, level_step=500)


@pytest.fixture
def generator():
    return TileGenerator(target_min=10, target_max=20, seed=7)


def _make_state(values, target, mode=GameMode.TIMED, **overrides) -> SessionState:
    fields = dict(
        grid=NumberGrid.from_values(values),
        target=target,
        selection=(),
        score=0,
        level=1,
        game_over=False,
        mode=mode,
        time_left=15,
        paused=False,
    )
    fields.update(overrides)
    return SessionState(**fields)


@pytest.fixture
def make_state():
    """Snapshot over an explicit value layout (0 = empty)."""
    return _make_state
