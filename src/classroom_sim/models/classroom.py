"""
Classroom Models
================

Static classroom records shown on the multi-classroom dashboard.

Classrooms are created once at startup from static configuration and are
never destroyed during a session. Every aggregation tick produces an
updated copy (``model_copy``); records are never mutated in place.

Seating Geometry:
    Every classroom maps onto a fixed grid of 4 rows x 6 desks x 2 sides,
    i.e. 48 seat slots, independent of its nominal student capacity.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


SEAT_ROWS = 4
SEAT_COLS = 6
SEAT_SIDES = 2
SEAT_COUNT = SEAT_ROWS * SEAT_COLS * SEAT_SIDES

STUDENT_CAPACITY = 32


class ClassroomStatus(str, Enum):
    """
    Dashboard status of a classroom.

    Attributes:
        QUIET: Nobody talking
        WARN: One talker (or a level-1 rotation)
        ALERT: Two or more talkers (or a level-2 rotation)
    """

    QUIET = "quiet"
    WARN = "warn"
    ALERT = "alert"


class Classroom(BaseModel):
    """
    A monitored classroom.

    Attributes:
        id: Unique classroom identifier
        name: Display name
        grade: Grade label
        subject: Subject taught
        teacher: Teacher display name
        students: Nominal student capacity
        discipline: Baseline quietness in [0, 1] (higher = quieter)
        status: Current dashboard status
        talking_count: Current number of talkers (dashboard level)
        alerts: Number of quiet -> talking transitions seen this session
        last_alert_at: Timestamp of the most recent alert
    """

    id: int = Field(..., ge=0, description="Unique classroom identifier")
    name: str = Field(..., description="Display name")
    grade: str = Field(default="", description="Grade label")
    subject: str = Field(default="", description="Subject taught")
    teacher: str = Field(default="", description="Teacher display name")
    students: int = Field(default=STUDENT_CAPACITY, ge=0, le=SEAT_COUNT)
    discipline: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Baseline quietness (1.0 = silent)",
    )
    status: ClassroomStatus = Field(default=ClassroomStatus.QUIET)
    talking_count: int = Field(default=0, ge=0)
    alerts: int = Field(default=0, ge=0)
    last_alert_at: Optional[float] = Field(default=None)

    @property
    def baseline_score(self) -> float:
        """Discipline score this classroom recovers towards."""
        return self.discipline * 100.0


def default_classrooms() -> List[Classroom]:
    """Eight classrooms used by the dashboard when none are configured."""
    return [
        Classroom(id=1, name="10-1", grade="10", subject="Mathematics", teacher="Mr. Cohen", discipline=0.95),
        Classroom(id=2, name="10-2", grade="10", subject="Physics", teacher="Ms. Levi", discipline=0.9),
        Classroom(id=3, name="11-1", grade="11", subject="History", teacher="Mr. Shapira", discipline=0.7),
        Classroom(id=4, name="11-2", grade="11", subject="English", teacher="Ms. David", discipline=0.85),
        Classroom(id=5, name="12-1", grade="12", subject="Chemistry", teacher="Dr. Mizrahi", discipline=0.5),
        Classroom(id=6, name="12-2", grade="12", subject="Biology", teacher="Ms. Peretz", discipline=0.92),
        Classroom(id=7, name="12-3", grade="12", subject="Literature", teacher="Mr. Azulay", discipline=0.6),
        Classroom(id=8, name="11-3", grade="11", subject="Geography", teacher="Ms. Katz", discipline=0.98),
    ]
