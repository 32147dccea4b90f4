"""
Classroom Status Transitions
============================

Deterministic mapping from the number of talkers to a classroom's
dashboard status, plus the alert bookkeeping that goes with it.

Status Rules:
    0 talkers   -> quiet
    1 talker    -> warn
    2+ talkers  -> alert

Alert Counter:
    Incremented once on each quiet -> talking edge. While a classroom keeps
    talking, ``last_alert_at`` follows the current time.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from classroom_sim.models.classroom import Classroom, ClassroomStatus


logger = logging.getLogger(__name__)


@dataclass
class StatusTransition:
    """Result of a status evaluation."""

    previous: ClassroomStatus
    status: ClassroomStatus
    new_alert: bool

    @property
    def changed(self) -> bool:
        return self.previous != self.status

    def __repr__(self) -> str:
        return (
            f"StatusTransition({self.previous.value} -> {self.status.value}, "
            f"new_alert={self.new_alert})"
        )


def status_for(talking_count: int) -> ClassroomStatus:
    """Dashboard status for a number of talkers."""
    if talking_count <= 0:
        return ClassroomStatus.QUIET
    if talking_count == 1:
        return ClassroomStatus.WARN
    return ClassroomStatus.ALERT


class ClassroomStatusPolicy:
    """
    Applies the status rules to classroom records.

    Records are never mutated; every evaluation returns a copy.
    """

    def evaluate(
        self,
        classroom: Classroom,
        talking_count: int,
        now: float,
    ) -> Tuple[Classroom, StatusTransition]:
        """
        Evaluate the status of a classroom.

        Args:
            classroom: Current record
            talking_count: Current number of talkers
            now: Current simulated timestamp

        Returns:
            Tuple of (updated classroom, transition result)
        """
        status = status_for(talking_count)
        new_alert = classroom.talking_count == 0 and talking_count > 0

        update = {
            "status": status,
            "talking_count": max(0, talking_count),
        }
        if new_alert:
            update["alerts"] = classroom.alerts + 1
        if talking_count > 0:
            update["last_alert_at"] = now

        result = StatusTransition(
            previous=classroom.status,
            status=status,
            new_alert=new_alert,
        )

        if result.changed:
            logger.info(
                f"Classroom {classroom.id} status: {classroom.status.value} -> "
                f"{status.value} (talking={talking_count})"
            )

        return classroom.model_copy(update=update), result
