"""
Notification Log
================

Bounded, most-recent-first journal of human-readable simulation events.

Design Rules:
    - Fixed maximum size (evicts oldest on overflow)
    - Newest entry first
    - Entries are immutable and never edited after insertion
    - Nothing is persisted
"""

import logging
from collections import deque
from typing import Deque, Iterable, Optional, Tuple

from classroom_sim.models.notification import NotificationCategory, NotificationEvent


logger = logging.getLogger(__name__)


class NotificationLog:
    """
    Most-recent-first bounded journal.

    Attributes:
        capacity: Maximum number of retained entries
        evicted_count: Entries dropped due to overflow

    Example:
        log = NotificationLog(capacity=50)
        log.append(event)
        latest = log.entries[0]
    """

    def __init__(self, capacity: int = 50) -> None:
        """
        Initialize notification log.

        Args:
            capacity: Maximum entries to keep. Must be >= 1.
        """
        if capacity < 1:
            raise ValueError("capacity must be >= 1")

        self._capacity = capacity
        self._entries: Deque[NotificationEvent] = deque(maxlen=capacity)
        self._evicted_count: int = 0
        self._total_appended: int = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        return len(self._entries)

    @property
    def evicted_count(self) -> int:
        return self._evicted_count

    @property
    def entries(self) -> Tuple[NotificationEvent, ...]:
        """Snapshot of the journal, newest first."""
        return tuple(self._entries)

    def append(self, event: NotificationEvent) -> None:
        """Prepend an event, evicting the oldest beyond capacity."""
        self._total_appended += 1
        if len(self._entries) == self._capacity:
            self._evicted_count += 1
        self._entries.appendleft(event)

    def extend(self, events: Iterable[NotificationEvent]) -> None:
        """Append events in order; the last one ends up newest."""
        for event in events:
            self.append(event)

    def clear(self, timestamp: float = 0.0) -> None:
        """Empty the journal, leaving a single "log cleared" entry."""
        cleared = len(self._entries)
        self._entries.clear()
        self.append(NotificationEvent(
            timestamp=timestamp,
            category=NotificationCategory.SYSTEM,
            message="Log cleared",
        ))
        logger.info(f"Notification log cleared ({cleared} entries)")

    def latest(self, category: Optional[NotificationCategory] = None) -> Optional[NotificationEvent]:
        """Most recent entry, optionally of one category."""
        for event in self._entries:
            if category is None or event.category == category:
                return event
        return None

    def metrics(self) -> dict:
        """Get journal metrics for observability."""
        return {
            "size": self.size,
            "capacity": self._capacity,
            "evicted_count": self._evicted_count,
            "total_appended": self._total_appended,
        }
