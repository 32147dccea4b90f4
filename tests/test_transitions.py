"""
Status Transition Tests
=======================

Tests for talker count -> classroom status and alert counting.
"""

from classroom_sim.agent.transitions import ClassroomStatusPolicy, status_for
from classroom_sim.models.classroom import ClassroomStatus


class TestStatusFor:
    """Tests for the status table."""

    def test_status_table(self):
        assert status_for(0) == ClassroomStatus.QUIET
        assert status_for(1) == ClassroomStatus.WARN
        assert status_for(2) == ClassroomStatus.ALERT
        assert status_for(7) == ClassroomStatus.ALERT


class TestClassroomStatusPolicy:
    """Tests for record updates."""

    def test_alert_counted_on_quiet_to_talking_edge(self, classroom):
        policy = ClassroomStatusPolicy()

        room, result = policy.evaluate(classroom, 1, now=1.0)
        assert result.new_alert
        assert result.changed
        assert room.alerts == 1
        assert room.status == ClassroomStatus.WARN
        assert room.last_alert_at == 1.0

        # Still talking: no new alert, timestamp follows
        room, result = policy.evaluate(room, 2, now=2.0)
        assert not result.new_alert
        assert room.alerts == 1
        assert room.status == ClassroomStatus.ALERT
        assert room.last_alert_at == 2.0

        room, _ = policy.evaluate(room, 0, now=3.0)
        assert room.status == ClassroomStatus.QUIET
        assert room.last_alert_at == 2.0

        room, result = policy.evaluate(room, 1, now=4.0)
        assert result.new_alert
        assert room.alerts == 2

    def test_original_record_untouched(self, classroom):
        policy = ClassroomStatusPolicy()
        policy.evaluate(classroom, 3, now=1.0)
        assert classroom.alerts == 0
        assert classroom.status == ClassroomStatus.QUIET
