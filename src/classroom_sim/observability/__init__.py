"""
Observability Module
====================

Display-side aggregation and the notification journal.

Components:
    - MetricsAggregator: Noise meters, counts and sensor/speaker flags
    - NotificationLog: Bounded most-recent-first journal
"""

from classroom_sim.observability.analytics import AggregateSnapshot, MetricsAggregator
from classroom_sim.observability.notifications import NotificationLog

__all__ = [
    "AggregateSnapshot",
    "MetricsAggregator",
    "NotificationLog",
]
