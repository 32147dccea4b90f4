"""
Simulation Output Models
========================

This module defines the read-only snapshot contract handed to rendering
consumers after every tick.

Output Contract:
    {
        "timestamp": 12.5,
        "tick": 750,
        "system_active": true,
        "modes": {"studentChatter": true, "outsideNoise": true, ...},
        "status": "warn",
        "talking_count": 1,
        "levels": {
            "student_noise": 9.4,
            "exterior_noise": 6.1,
            "overall": 31.6,
            "reduction": 86.2
        },
        "counts": {
            "active_students": 1,
            "active_actuators": 3,
            "newly_cancelled": 0
        },
        "score": {"score": 49.31, "trend": "flat", ...},
        "noise_waves": [...],
        "cancellation_waves": [...],
        "notifications": [...]
    }

Design Rules:
    - Snapshots are taken between ticks and never share mutable state with
      the pipeline
    - Levels carry visual jitter and are not semantic signal
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from classroom_sim.models.classroom import ClassroomStatus
from classroom_sim.models.reason_codes import ConditionCode


class NoiseLevels(BaseModel):
    """
    Aggregated noise meters, each clamped to [0, 100].

    Attributes:
        student_noise: Student talking level
        exterior_noise: Outside noise level
        overall: Combined classroom level
        reduction: Cancellation effectiveness meter
    """

    student_noise: float = Field(..., ge=0.0, le=100.0)
    exterior_noise: float = Field(..., ge=0.0, le=100.0)
    overall: float = Field(..., ge=0.0, le=100.0)
    reduction: float = Field(..., ge=0.0, le=100.0)


class EntityCounts(BaseModel):
    """Per-tick entity counts."""

    active_students: int = Field(default=0, ge=0)
    active_actuators: int = Field(default=0, ge=0)
    newly_cancelled: int = Field(default=0, ge=0)


class SimulationSnapshot(BaseModel):
    """
    Complete read-only view of one classroom after a tick.

    Attributes:
        timestamp: Simulated time of the tick
        tick: Completed tick count
        system_active: Master switch
        modes: Mode name -> enabled
        status: quiet / warn / alert from the talking count
        talking_count: Seats currently talking
        total_alerts: Quiet -> talking transitions this session
        exterior_active: Exterior noise flag
        teacher_speaking: Teacher voice flag
        levels: Noise meters
        counts: Entity counts
        score: Discipline score state
        active_seats: Talking seat numbers
        active_actuators: Emitting speaker ids
        detecting_sensors: Detecting microphone ids
        noise_waves: Live noise waves
        cancellation_waves: Live counter-waves
        notifications: Journal, most recent first
    """

    timestamp: float
    tick: int = Field(..., ge=0)
    system_active: bool
    modes: Dict[str, bool]
    status: ClassroomStatus
    talking_count: int = Field(..., ge=0)
    total_alerts: int = Field(default=0, ge=0)
    exterior_active: bool = False
    teacher_speaking: bool = False
    levels: NoiseLevels
    counts: EntityCounts
    score: Dict[str, Any]
    active_seats: List[int] = Field(default_factory=list)
    active_actuators: List[int] = Field(default_factory=list)
    detecting_sensors: List[int] = Field(default_factory=list)
    noise_waves: List[Dict[str, Any]] = Field(default_factory=list)
    cancellation_waves: List[Dict[str, Any]] = Field(default_factory=list)
    notifications: List[Dict[str, Any]] = Field(default_factory=list)


class TickResult(BaseModel):
    """
    Outcome of one ``advance(now)`` call.

    Attributes:
        condition: OK, or CLOCK_REGRESSION when the tick was skipped
        snapshot: Snapshot after the tick (the previous one if skipped)
    """

    condition: ConditionCode = ConditionCode.OK
    snapshot: Optional[SimulationSnapshot] = None

    @property
    def skipped(self) -> bool:
        return self.condition != ConditionCode.OK
