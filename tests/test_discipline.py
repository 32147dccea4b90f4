"""
Discipline Score Tests
======================

Tests for penalty floors, recovery, bounds, sampling and trend.
"""

import numpy as np
import pytest

from classroom_sim.models.score import DisciplineScoreState, Trend
from classroom_sim.signals.discipline_processor import (
    DisciplineScoreProcessor,
    compute_trend,
    talker_floor,
)


def _run(processor, state, talking, ticks, start=0.0, dt=1 / 60):
    for i in range(ticks):
        state = processor.update(state, talking, start + i * dt)
    return state


class TestFloors:
    """Tests for talker-dependent floors."""

    def test_floor_table(self):
        assert talker_floor(1) == 55.0
        assert talker_floor(2) == 40.0
        assert talker_floor(3) == 40.0
        assert talker_floor(4) == 30.0
        assert talker_floor(10) == 30.0

    def test_penalty_stops_at_floor(self, rng):
        processor = DisciplineScoreProcessor(discipline=0.95, rng=rng)
        state = _run(processor, DisciplineScoreState(score=60.0), talking=1, ticks=1000)
        assert state.score == pytest.approx(55.0)

    def test_many_talkers_reach_lower_floor(self, rng):
        processor = DisciplineScoreProcessor(discipline=0.95, rng=rng)
        state = _run(processor, DisciplineScoreState(score=45.0), talking=4, ticks=300)
        assert state.score == pytest.approx(30.0)

    def test_floor_never_raises_score(self, rng):
        processor = DisciplineScoreProcessor(discipline=0.95, rng=rng)
        state = _run(processor, DisciplineScoreState(score=35.0), talking=1, ticks=50)
        assert state.score == pytest.approx(35.0)

    def test_penalty_size(self, rng):
        """Four talkers cost 0.09-0.10 per tick."""
        processor = DisciplineScoreProcessor(discipline=0.95, rng=rng)
        state = _run(processor, processor.initial_state(), talking=4, ticks=100)
        assert 85.0 <= state.score <= 86.0
        assert state.talking_streak == 100
        assert state.quiet_streak == 0


class TestRecovery:
    """Tests for quiet-tick recovery."""

    def test_recovery_capped_at_baseline(self, rng):
        processor = DisciplineScoreProcessor(discipline=0.5, rng=rng)
        state = _run(processor, DisciplineScoreState(score=30.0), talking=0, ticks=200)
        assert state.score == pytest.approx(50.0)
        assert state.quiet_streak == 200

    def test_recovery_accelerates_with_streak(self, rng):
        processor = DisciplineScoreProcessor(discipline=0.95, rng=np.random.default_rng(0))
        state = DisciplineScoreState(score=40.0)
        first = processor.update(state, 0, 0.0)
        before = _run(processor, state, talking=0, ticks=59)
        step_late = processor.update(before, 0, 1.0).score - before.score
        # Late steps include the full streak bonus of 0.25
        assert first.score - 40.0 < 0.09
        assert step_late > 0.3

    def test_talk_then_quiet_scenario(self, rng):
        """Baseline 50: 100 ticks of three talkers then 50 quiet ticks."""
        processor = DisciplineScoreProcessor(discipline=0.5, rng=rng)
        state = _run(processor, processor.initial_state(), talking=3, ticks=100)
        # 0.075-0.085 per tick
        assert 41.0 <= state.score <= 43.0

        state = _run(processor, state, talking=0, ticks=50, start=100 / 60)
        assert abs(state.score - 50.0) <= 1.0

    def test_single_talker_holds_score_below_its_floor(self, rng):
        processor = DisciplineScoreProcessor(discipline=0.5, rng=rng)
        state = _run(processor, processor.initial_state(), talking=1, ticks=100)
        assert state.score == pytest.approx(50.0)


class TestBounds:
    """Tests for the global score range."""

    def test_score_state_validates_range(self):
        with pytest.raises(ValueError):
            DisciplineScoreState(score=20.0)
        with pytest.raises(ValueError):
            DisciplineScoreState(score=101.0)

    def test_low_discipline_starts_at_minimum(self, rng):
        processor = DisciplineScoreProcessor(discipline=0.1, rng=rng)
        assert processor.initial_state().score == 25.0

    def test_random_walk_stays_in_range(self):
        rng = np.random.default_rng(21)
        processor = DisciplineScoreProcessor(discipline=0.7, rng=rng)
        state = processor.initial_state()
        for i in range(5000):
            state = processor.update(state, int(rng.integers(0, 6)), i / 60)
            assert 25.0 <= state.score <= 100.0

    def test_invalid_construction(self, rng):
        with pytest.raises(ValueError):
            DisciplineScoreProcessor(discipline=1.5, rng=rng)
        with pytest.raises(ValueError):
            DisciplineScoreProcessor(discipline=0.5, rng=rng, history_size=4)
        with pytest.raises(ValueError):
            DisciplineScoreProcessor(discipline=0.5, rng=rng, sample_interval_sec=0)

    def test_negative_talkers_rejected(self, rng):
        processor = DisciplineScoreProcessor(discipline=0.5, rng=rng)
        with pytest.raises(ValueError):
            processor.update(processor.initial_state(), -1, 0.0)


class TestPeakAndHistory:
    """Tests for peak memory and history sampling."""

    def test_peak_decays(self, rng):
        processor = DisciplineScoreProcessor(discipline=0.5, rng=rng)
        state = processor.update(processor.initial_state(), 3, 0.0)
        assert state.peak_talkers == pytest.approx(3.0)

        state = processor.update(state, 0, 0.1)
        assert state.peak_talkers == pytest.approx(3.0 * 0.98)

    def test_sampling_interval(self, rng):
        processor = DisciplineScoreProcessor(discipline=0.5, rng=rng)
        state = processor.initial_state()
        for i in range(21):
            state = processor.update(state, 0, i * 0.5)
        # Samples at 0, 2, 4, 6, 8, 10
        assert len(state.history) == 6
        assert state.last_sample_at == 10.0

    def test_history_bounded(self, rng):
        processor = DisciplineScoreProcessor(discipline=0.5, rng=rng)
        state = processor.initial_state()
        for i in range(31):
            state = processor.update(state, 0, float(i))
        assert len(state.history) == 10


class TestComputeTrend:
    """Tests for trend detection."""

    def test_short_history_is_flat(self):
        assert compute_trend([50, 60, 70, 80, 90]) == Trend.FLAT

    def test_rising(self):
        assert compute_trend([50, 50, 50, 60, 60, 60]) == Trend.RISING

    def test_falling(self):
        assert compute_trend([60, 60, 60, 50, 50, 50]) == Trend.FALLING

    def test_small_change_is_flat(self):
        assert compute_trend([50, 50, 50, 52, 52, 52]) == Trend.FLAT

    def test_uses_latest_windows(self):
        assert compute_trend([90, 90, 90, 50, 50, 50, 50, 50, 50]) == Trend.FLAT

    def test_falling_trend_under_sustained_talking(self, rng):
        processor = DisciplineScoreProcessor(discipline=0.95, rng=rng)
        state = processor.initial_state()
        # Two talkers for 12s at 60Hz: six samples, well above the floor
        for i in range(720):
            state = processor.update(state, 2, i / 60)
        assert state.trend == Trend.FALLING
