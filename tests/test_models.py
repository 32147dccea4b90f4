"""
Model Tests
===========

Tests for the classroom layout, mode flags and classroom records.
"""

import pytest
from pydantic import ValidationError

from classroom_sim.models.classroom import Classroom, default_classrooms
from classroom_sim.models.geometry import Point
from classroom_sim.models.state import Mode, ModeFlags


class TestLayout:
    """Tests for the default classroom layout."""

    def test_counts(self, layout):
        assert len(layout.seats) == 48
        assert len(layout.sensors) == 6
        assert len(layout.actuators) == 6
        assert len(layout.windows) == 3
        assert layout.podium == Point(x=450, y=450)

    def test_seat_positions(self, layout):
        assert layout.seat(1).position == Point(x=82, y=80)
        assert layout.seat(2).position == Point(x=118, y=80)
        assert layout.seat(48).position == Point(x=768, y=335)
        assert layout.seat(49) is None

    def test_nearest_sensor(self, layout):
        assert layout.nearest_sensor(Point(x=140, y=90)).label == "MIC-1"
        assert layout.nearest_sensor(Point(x=760, y=260)).label == "MIC-6"


class TestModeFlags:
    """Tests for mode switching."""

    def test_defaults(self):
        flags = ModeFlags()
        assert flags.to_dict() == {
            "studentChatter": True,
            "outsideNoise": True,
            "teacherMode": False,
            "testMode": False,
            "groupWork": False,
            "presentationMode": False,
        }

    def test_exclusive_pair(self):
        flags = ModeFlags().with_mode(Mode.GROUP_WORK, True).with_mode(Mode.TEST_MODE, True)
        assert flags.test_mode
        assert not flags.group_work

    def test_disabling_does_not_touch_partner(self):
        flags = ModeFlags(group_work=True).with_mode(Mode.TEST_MODE, False)
        assert flags.group_work


class TestClassroom:
    """Tests for classroom records."""

    def test_default_classrooms(self):
        rooms = default_classrooms()
        assert len(rooms) == 8
        assert [r.discipline for r in rooms] == [0.95, 0.9, 0.7, 0.85, 0.5, 0.92, 0.6, 0.98]

    def test_discipline_range(self):
        with pytest.raises(ValidationError):
            Classroom(id=1, name="x", discipline=1.2)
