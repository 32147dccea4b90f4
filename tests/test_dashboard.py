"""
Dashboard Tests
===============

Tests for the multi-classroom dashboard update loop.
"""

import pytest

from classroom_sim.agent.dashboard import Dashboard
from classroom_sim.agent.transitions import status_for
from classroom_sim.models.classroom import ClassroomStatus
from classroom_sim.models.reason_codes import ConditionCode


class TestDashboard:
    """Tests for cadence, status application and totals."""

    def test_first_update(self, classrooms, rng):
        dashboard = Dashboard(classrooms, rng=rng)
        result = dashboard.advance(0.0)

        assert result.condition == ConditionCode.OK
        assert result.updated
        snapshot = result.snapshot
        assert 1 <= len(snapshot.active) <= 2

        for room in snapshot.classrooms:
            level = snapshot.active.get(room.id, 0)
            assert room.talking_count == level
            assert room.status == status_for(level)
        assert snapshot.total_alerts == len(snapshot.active)
        assert snapshot.total_talking == sum(snapshot.active.values())

    def test_update_cadence(self, classrooms, rng):
        dashboard = Dashboard(classrooms, rng=rng)
        first = dashboard.advance(0.0)

        between = dashboard.advance(1.0)
        assert not between.updated
        assert between.snapshot is first.snapshot

        assert dashboard.advance(2.0).updated

    def test_clock_regression(self, classrooms, rng):
        dashboard = Dashboard(classrooms, rng=rng)
        dashboard.advance(4.0)
        result = dashboard.advance(3.0)
        assert result.condition == ConditionCode.CLOCK_REGRESSION
        assert not result.updated

    def test_no_classrooms(self, rng):
        dashboard = Dashboard([], rng=rng)
        result = dashboard.advance(0.0)
        assert result.condition == ConditionCode.INVALID_REFERENCE
        assert result.snapshot is None

    def test_invalid_construction(self, classrooms, rng):
        with pytest.raises(ValueError):
            Dashboard(classrooms + classrooms[:1], rng=rng)
        with pytest.raises(ValueError):
            Dashboard(classrooms, rng=rng, update_interval_sec=0)

    def test_long_session(self, classrooms, rng):
        """Ten simulated minutes of rotation."""
        dashboard = Dashboard(classrooms, rng=rng)
        for i in range(300):
            dashboard.advance(i * 2.0)

        snapshot = dashboard.snapshot
        assert dashboard.rotator.rotation_count > 30
        # Re-picking a classroom that is still talking is not a new alert
        assert 0 < snapshot.total_alerts <= 2 * dashboard.rotator.rotation_count
        for cid, score in snapshot.scores.items():
            assert 25.0 <= score["score"] <= 100.0
        assert snapshot.alerting_classrooms == sum(
            1 for room in snapshot.classrooms if room.status == ClassroomStatus.ALERT
        )
        assert dashboard.get_metrics()["classrooms"] == 8

    def test_quiet_classrooms_keep_baseline_score(self, classrooms, rng):
        dashboard = Dashboard(classrooms, rng=rng)
        dashboard.advance(0.0)
        quiet = [c for c in dashboard.classrooms if c.id not in dashboard.snapshot.active]
        for room in quiet:
            assert dashboard.score(room.id).score == pytest.approx(max(25.0, room.baseline_score))
