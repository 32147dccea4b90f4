"""
Data Models
===========

Models for the classroom simulation core.

This module re-exports all data models for convenient access.

Models:
    Classroom:
        - Classroom, ClassroomStatus: Dashboard classroom records

    Seating:
        - Student, SeatSlot, SeatMap: Seating grid values

    Geometry:
        - Point, Sensor, Actuator, Window, ClassroomLayout

    Waves:
        - NoiseSourceType, NoiseWave, CancellationWave

    State:
        - Mode, ModeFlags, SimulationState

    Score:
        - DisciplineScoreState, Trend

    Output:
        - NoiseLevels, SimulationSnapshot, TickResult
"""

from classroom_sim.models.classroom import Classroom, ClassroomStatus, default_classrooms
from classroom_sim.models.seating import Gender, SeatMap, SeatSlot, Student
from classroom_sim.models.geometry import (
    Actuator,
    ClassroomLayout,
    Point,
    Sensor,
    Window,
    build_default_layout,
)
from classroom_sim.models.waves import CancellationWave, NoiseSourceType, NoiseWave
from classroom_sim.models.notification import NotificationCategory, NotificationEvent
from classroom_sim.models.score import DisciplineScoreState, Trend
from classroom_sim.models.state import Mode, ModeFlags, SimulationState
from classroom_sim.models.output import NoiseLevels, SimulationSnapshot, TickResult
from classroom_sim.models.reason_codes import ConditionCode

__all__ = [
    # Classroom
    "Classroom",
    "ClassroomStatus",
    "default_classrooms",
    # Seating
    "Gender",
    "Student",
    "SeatSlot",
    "SeatMap",
    # Geometry
    "Point",
    "Sensor",
    "Actuator",
    "Window",
    "ClassroomLayout",
    "build_default_layout",
    # Waves
    "NoiseSourceType",
    "NoiseWave",
    "CancellationWave",
    # Journal
    "NotificationCategory",
    "NotificationEvent",
    # Score
    "DisciplineScoreState",
    "Trend",
    # State
    "Mode",
    "ModeFlags",
    "SimulationState",
    # Output
    "NoiseLevels",
    "SimulationSnapshot",
    "TickResult",
    "ConditionCode",
]
