"""
Simulation State Models
=======================

This module defines the explicit state value owned by the tick pipeline.

Core Concepts:
    - Mode: Named operator switches (studentChatter, outsideNoise, ...)
    - ModeFlags: Immutable set of switches with the testMode/groupWork
      mutual-exclusion rule
    - SimulationState: Everything the pipeline carries from one tick to the
      next; every stage receives one and returns an updated copy

Timers:
    All delays (cooldowns, active seats, transient flags) are stored as
    timestamps and compared against ``now`` on each tick. Nothing is
    scheduled.

Example:
    from classroom_sim.models.state import Mode, ModeFlags, SimulationState

    state = SimulationState(modes=ModeFlags().with_mode(Mode.TEST_MODE, True))
    assert state.modes.test_mode and not state.modes.group_work
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from classroom_sim.models.notification import NotificationEvent
from classroom_sim.models.waves import CancellationWave, NoiseWave


class Mode(str, Enum):
    """
    Operator-controlled simulation modes.

    Attributes:
        STUDENT_CHATTER: Student talking events (and their cancellation)
        OUTSIDE_NOISE: Exterior window noise events
        TEACHER_MODE: Teacher voice events
        TEST_MODE: Exam mode (quieter chatter, behaviour detection)
        GROUP_WORK: Group work (louder chatter)
        PRESENTATION_MODE: Presentation in progress (announced only)
    """

    STUDENT_CHATTER = "studentChatter"
    OUTSIDE_NOISE = "outsideNoise"
    TEACHER_MODE = "teacherMode"
    TEST_MODE = "testMode"
    GROUP_WORK = "groupWork"
    PRESENTATION_MODE = "presentationMode"


_MODE_FIELDS = {
    Mode.STUDENT_CHATTER: "student_chatter",
    Mode.OUTSIDE_NOISE: "outside_noise",
    Mode.TEACHER_MODE: "teacher_mode",
    Mode.TEST_MODE: "test_mode",
    Mode.GROUP_WORK: "group_work",
    Mode.PRESENTATION_MODE: "presentation_mode",
}

# testMode and groupWork cannot both be on
_EXCLUSIVE = {
    Mode.TEST_MODE: Mode.GROUP_WORK,
    Mode.GROUP_WORK: Mode.TEST_MODE,
}


@dataclass(frozen=True, slots=True)
class ModeFlags:
    """Immutable mode switch set."""

    student_chatter: bool = True
    outside_noise: bool = True
    teacher_mode: bool = False
    test_mode: bool = False
    group_work: bool = False
    presentation_mode: bool = False

    def is_enabled(self, mode: Mode) -> bool:
        return getattr(self, _MODE_FIELDS[mode])

    def with_mode(self, mode: Mode, enabled: bool) -> "ModeFlags":
        """
        Return a copy with one mode switched.

        Enabling testMode clears groupWork and vice versa.
        """
        update = {_MODE_FIELDS[mode]: enabled}
        if enabled and mode in _EXCLUSIVE:
            update[_MODE_FIELDS[_EXCLUSIVE[mode]]] = False
        return replace(self, **update)

    def to_dict(self) -> Dict[str, bool]:
        return {mode.value: self.is_enabled(mode) for mode in Mode}


@dataclass(frozen=True, slots=True)
class SimulationState:
    """
    Full pipeline state of one simulated classroom.

    Attributes:
        modes: Current mode switches
        system_active: Master switch for event generation
        noise_waves: Live noise waves
        cancellation_waves: Live counter-waves
        active_seats: Seat number -> expiry timestamp of talking seats
        exterior_active_until: Expiry of the exterior-noise flag
        teacher_speaking_until: Expiry of the teacher-speaking flag
        last_triggers: Source category -> timestamp of its last trigger
        active_actuators: Speakers currently emitting
        detecting_sensors: Microphones currently inside a noise wave
        newly_cancelled: Waves handled during the current tick
        pending_events: Journal entries produced during the current tick
        next_wave_id: Id for the next wave created
        tick: Number of completed ticks
        last_tick_at: Timestamp of the last completed tick
    """

    modes: ModeFlags = field(default_factory=ModeFlags)
    system_active: bool = True
    noise_waves: Tuple[NoiseWave, ...] = ()
    cancellation_waves: Tuple[CancellationWave, ...] = ()
    active_seats: Dict[int, float] = field(default_factory=dict)
    exterior_active_until: Optional[float] = None
    teacher_speaking_until: Optional[float] = None
    last_triggers: Dict[str, float] = field(default_factory=dict)
    active_actuators: FrozenSet[int] = frozenset()
    detecting_sensors: FrozenSet[int] = frozenset()
    newly_cancelled: int = 0
    pending_events: Tuple[NotificationEvent, ...] = ()
    next_wave_id: int = 1
    tick: int = 0
    last_tick_at: Optional[float] = None

    @property
    def exterior_active(self) -> bool:
        return self.exterior_active_until is not None

    @property
    def teacher_speaking(self) -> bool:
        return self.teacher_speaking_until is not None

    @property
    def talking_count(self) -> int:
        return len(self.active_seats)
