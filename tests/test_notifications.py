"""
Notification Log Tests
======================

Tests for the bounded most-recent-first journal.
"""

import pytest

from classroom_sim.models.notification import NotificationCategory, NotificationEvent
from classroom_sim.observability.notifications import NotificationLog


def _event(i, category=NotificationCategory.INFO):
    return NotificationEvent(timestamp=float(i), category=category, message=f"event {i}")


class TestNotificationLog:
    """Tests for ordering, capacity and clearing."""

    def test_newest_first(self):
        log = NotificationLog(capacity=5)
        log.extend([_event(1), _event(2), _event(3)])
        assert [e.message for e in log.entries] == ["event 3", "event 2", "event 1"]

    def test_capacity_evicts_oldest(self):
        log = NotificationLog()
        for i in range(60):
            log.append(_event(i))

        assert log.size == 50
        assert log.entries[0].message == "event 59"
        assert log.entries[-1].message == "event 10"
        assert log.evicted_count == 10

    def test_capacity_one_keeps_newest(self):
        log = NotificationLog(capacity=1)
        log.extend([_event(1), _event(2), _event(3)])
        assert [e.message for e in log.entries] == ["event 3"]
        assert log.evicted_count == 2

    def test_clear_leaves_single_entry(self):
        log = NotificationLog(capacity=5)
        log.extend([_event(1), _event(2)])

        log.clear(timestamp=7.0)

        assert log.size == 1
        entry = log.entries[0]
        assert entry.category == NotificationCategory.SYSTEM
        assert entry.message == "Log cleared"
        assert entry.timestamp == 7.0

    def test_latest_by_category(self):
        log = NotificationLog(capacity=10)
        log.extend([
            _event(1, NotificationCategory.ALERT),
            _event(2, NotificationCategory.INFO),
            _event(3, NotificationCategory.ALERT),
        ])
        assert log.latest().message == "event 3"
        assert log.latest(NotificationCategory.INFO).message == "event 2"
        assert log.latest(NotificationCategory.TEACHER) is None

    def test_entries_are_snapshots(self):
        log = NotificationLog(capacity=5)
        log.append(_event(1))
        entries = log.entries
        log.append(_event(2))
        assert len(entries) == 1

    def test_events_immutable(self):
        event = _event(1)
        with pytest.raises(AttributeError):
            event.message = "changed"

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            NotificationLog(capacity=0)

    def test_metrics(self):
        log = NotificationLog(capacity=2)
        log.extend([_event(1), _event(2), _event(3)])
        metrics = log.metrics()
        assert metrics["size"] == 2
        assert metrics["evicted_count"] == 1
        assert metrics["total_appended"] == 3
