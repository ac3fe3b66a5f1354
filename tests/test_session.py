"""
Tests for the game session operations and the snapshot invariants.
"""

import random
import threading

import numpy as np
import pytest

from number_stack_rl.game import GameConfig, GameMode, GameSession, MatchOutcome


@pytest.fixture
def session(config):
    return GameSession(config, mode=GameMode.CLASSIC)


def _occupied(state):
    return [(r, c) for r in range(state.grid.rows) for c in range(state.grid.cols)
            if not state.grid.is_empty(r, c)]


class TestStart:
    def test_initial_state(self, session, config):
        state = session.state
        rows, initial = config.rows, config.initial_rows
        assert state.score == 0
        assert state.level == 1
        assert state.selection == ()
        assert not state.paused
        assert not state.game_over
        assert state.time_left == config.tick_seconds
        assert config.target_min <= state.target <= config.target_max
        assert np.all(state.grid.values[: rows - initial] == 0)
        assert np.all(state.grid.values[rows - initial:] != 0)

    def test_tile_ids_are_unique(self, session):
        ids = session.state.grid.ids
        live = ids[ids != 0].tolist()
        assert len(live) == len(set(live))

    def test_same_seed_same_board(self):
        a = GameSession(GameConfig(random_seed=99))
        b = GameSession(GameConfig(random_seed=99))
        assert a.state.grid == b.state.grid
        assert a.state.target == b.state.target

    def test_reset_keeps_or_switches_mode(self, session):
        session.select(_occupied(session.state)[0])
        state = session.reset()
        assert state.mode is GameMode.CLASSIC
        assert state.selection == ()
        assert session.reset("timed").mode is GameMode.TIMED

    def test_reset_waits_for_running_transition(self, session):
        done = threading.Event()
        worker = threading.Thread(target=lambda: (session.reset(), done.set()))
        with session._lock:
            worker.start()
            assert not done.wait(0.2)
        worker.join(5)
        assert done.is_set()

    def test_unknown_mode_rejected(self, config):
        with pytest.raises(ValueError):
            GameSession(config, mode="zen")


class TestSelect:
    def test_paused_session_ignores_select(self, session):
        paused = session.toggle_pause()
        assert session.select(_occupied(paused)[0]) is paused

    @pytest.mark.parametrize("position", [
        (-1, 0), (100, 100), (0, 0), None, "ab", (1,), (1, 2, 3),
        (float("inf"), 0), (9.7, 0.4), (9.0, 0), "90", (True, 0), ("9", "0"),
    ])
    def test_invalid_positions_are_noops(self, session, position):
        before = session.state
        assert session.select(position) is before

    def test_toggle_twice_is_identity(self):
        session = GameSession(GameConfig(target_min=50, target_max=60, random_seed=4))
        before = session.state
        pos = _occupied(before)[0]

        session.select(pos)
        assert session.state.selection == (pos,)
        after = session.select(pos)

        assert after.selection == before.selection
        assert after.score == before.score
        assert after.grid == before.grid

    def test_match_empties_selection(self, session):
        # play until a match occurs
        rng = random.Random(0)
        for _ in range(2000):
            state = session.select(rng.choice(_occupied(session.state)))
            if session.last_resolution.outcome is MatchOutcome.MATCH or state.game_over:
                break
        assert session.last_resolution.outcome is MatchOutcome.MATCH
        assert session.state.selection == ()
        assert session.state.score > 0


class TestPause:
    def test_toggle_pause_flips(self, session):
        assert session.toggle_pause().paused
        assert not session.toggle_pause().paused

    def test_pause_unreachable_after_game_over(self):
        config = GameConfig(rows=2, cols=2, initial_rows=1, tick_seconds=1, random_seed=5)
        session = GameSession(config, mode="timed")
        session.tick()
        over = session.tick()
        assert over.game_over and over.paused

        assert session.toggle_pause() is over
        assert session.select((0, 0)) is over
        assert session.tick() is over


class TestInvariants:
    @pytest.mark.parametrize("mode", list(GameMode))
    def test_score_and_level_hold_after_every_transition(self, mode):
        config = GameConfig(rows=6, cols=4, initial_rows=3, target_min=5, target_max=14,
                            tick_seconds=3, random_seed=21)
        session = GameSession(config, mode=mode)
        rng = random.Random(21)
        for step in range(600):
            if session.state.game_over:
                session.reset()
            if step % 4 == 3:
                state = session.tick()
            else:
                state = session.select(rng.choice(_occupied(session.state) or [(0, 0)]))
            assert state.score >= 0
            assert state.level == state.score // 500 + 1
            assert all(not state.grid.is_empty(r, c) for r, c in state.selection)
            assert state.grid.shape == (6, 4)


class TestProjections:
    def test_derived_values_follow_the_snapshot(self, make_state):
        state = make_state([[0, 4, 0], [2, 3, 0]], target=20, selection=((1, 0), (1, 1)))
        assert state.current_sum == 5
        assert state.is_selected((1, 0))
        assert not state.is_selected((0, 1))
        assert state.in_danger
        assert state.danger_cells() == [(0, 1)]

    def test_snapshot_is_immutable(self, session):
        with pytest.raises(AttributeError):
            session.state.score = 10


class TestPositionTypes:
    def test_numpy_integers_select(self, session):
        pos = _occupied(session.state)[0]
        state = session.select((np.int64(pos[0]), np.int64(pos[1])))
        assert state.selection == (pos,)
