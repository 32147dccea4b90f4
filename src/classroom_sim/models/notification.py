"""
Notification Models
===================

Entries of the bounded notification journal consumed by the UI.

Entries are immutable once created; the journal only prepends and evicts.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NotificationCategory(str, Enum):
    """
    Category tag of a journal entry.

    Attributes:
        SYSTEM: Lifecycle messages (monitoring enabled, log cleared, modes)
        INFO: Informational (speakers dispatched)
        ALERT: Talking student detected
        WARNING: Suspicious exam behaviour detected
        EXTERIOR: Outside noise detected
        TEACHER: Teacher voice detected
        SUCCESS: Noise cancelled
    """

    SYSTEM = "system"
    INFO = "info"
    ALERT = "alert"
    WARNING = "warning"
    EXTERIOR = "exterior"
    TEACHER = "teacher"
    SUCCESS = "success"


@dataclass(frozen=True, slots=True)
class NotificationEvent:
    """
    Single journal entry.

    Attributes:
        timestamp: Simulated time of the event
        category: Category tag
        message: Short human-readable message
        reference: Optional cross-reference (nearest microphone, window, ...)
        confidence: Optional detection confidence in percent
    """

    timestamp: float
    category: NotificationCategory
    message: str
    reference: Optional[str] = None
    confidence: Optional[int] = None

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "timestamp": round(self.timestamp, 3),
            "category": self.category.value,
            "message": self.message,
            "reference": self.reference,
            "confidence": self.confidence,
        }
