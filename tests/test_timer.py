"""
Tests for timed-mode row insertion and the tick driver lifecycle.
"""

import numpy as np
import pytest

from number_stack_rl.game import GameConfig, GameMode, GameSession, TickDriver, advance_timer


class TestAdvanceTimer:
    def test_countdown_then_insert(self):
        session = GameSession(GameConfig(tick_seconds=30, random_seed=3), mode=GameMode.TIMED)
        start_grid = session.state.grid

        for _ in range(29):
            session.tick()
        assert session.state.time_left == 1
        assert session.state.grid == start_grid

        session.tick()
        assert session.state.time_left == 30
        assert session.state.grid != start_grid
        assert np.array_equal(session.state.grid.values[-2], start_grid.values[-1])

    def test_classic_mode_ignores_ticks(self, make_state, generator):
        state = make_state([[0], [1]], target=10, mode=GameMode.CLASSIC, time_left=1)
        assert advance_timer(state, generator, 15) is state

    def test_paused_or_over_ignores_ticks(self, make_state, generator):
        paused = make_state([[0], [1]], target=10, paused=True, time_left=1)
        over = make_state([[0], [1]], target=10, game_over=True, paused=True, time_left=1)
        assert advance_timer(paused, generator, 15) is paused
        assert advance_timer(over, generator, 15) is over

    def test_insertion_clears_selection(self, make_state, generator):
        state = make_state([[0, 0], [2, 3]], target=10, selection=((1, 0),), time_left=1)
        after = advance_timer(state, generator, 15)
        assert after.selection == ()
        assert after.grid.values[0].tolist() == [2, 3]

    def test_overflow_ends_game(self, make_state, generator):
        state = make_state([[1, 0], [2, 3]], target=10, time_left=1)
        after = advance_timer(state, generator, 15)
        assert after.game_over
        assert after.paused
        assert after.grid == state.grid
        assert after.time_left == 15


class TestTickDriver:
    def test_fires_once_per_interval(self):
        fired = []
        driver = TickDriver(lambda: fired.append(1), interval_ms=1000)
        driver.start()
        assert driver.advance(999) == 0
        assert driver.advance(1) == 1
        assert driver.advance(2500) == 2
        assert driver.elapsed_ms == 500
        assert len(fired) == 3

    def test_inactive_driver_never_fires(self):
        driver = TickDriver(lambda: pytest.fail("tick while inactive"))
        assert driver.advance(5000) == 0

    def test_cancel_discards_partial_interval(self):
        fired = []
        driver = TickDriver(lambda: fired.append(1))
        driver.start()
        driver.advance(900)
        driver.cancel()
        driver.start()
        driver.advance(200)
        assert fired == []

    def test_callback_that_cancels_stops_the_burst(self):
        driver = TickDriver(lambda: driver.cancel())
        driver.start()
        assert driver.advance(10_000) == 1
        assert not driver.active

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            TickDriver(lambda: None, interval_ms=0)


class TestSessionClock:
    def test_driver_runs_only_in_live_timed_mode(self):
        classic = GameSession(GameConfig(random_seed=1), mode="classic")
        timed = GameSession(GameConfig(random_seed=1), mode="timed")
        assert not classic.ticker.active
        assert timed.ticker.active

        timed.toggle_pause()
        assert not timed.ticker.active
        assert timed.advance_clock(5000) == 0

        timed.toggle_pause()
        assert timed.ticker.active

    def test_clock_drives_countdown(self):
        session = GameSession(GameConfig(tick_seconds=10, random_seed=1), mode="timed")
        assert session.advance_clock(3000) == 3
        assert session.state.time_left == 7

    def test_reset_drops_pending_time(self):
        session = GameSession(GameConfig(tick_seconds=10, random_seed=1), mode="timed")
        session.advance_clock(900)
        session.reset()
        session.advance_clock(200)
        assert session.state.time_left == 10

    def test_game_over_stops_driver(self):
        config = GameConfig(rows=2, cols=2, initial_rows=1, tick_seconds=1, random_seed=5)
        session = GameSession(config, mode="timed")
        session.advance_clock(10_000)
        assert session.state.game_over
        assert not session.ticker.active
