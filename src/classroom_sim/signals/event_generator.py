"""
Event Generator
===============

Per-tick stochastic noise and behaviour event generation.

This generator:
    - Expires transient timers (talking seats, exterior/teacher flags)
    - For each source category, checks the mode gate and the cooldown
    - On eligibility draws ``p ~ uniform(0, 1)`` and triggers if
      ``p < probability``
    - Stamps a NoiseWave at the source and queues a journal entry

Source Categories:
    student   studentChatter or testMode; 1.5s cooldown; seat active 2.5s
    exterior  outsideNoise; 4s cooldown; exterior flag 3s
    teacher   teacherMode; 5s cooldown; teacher flag 3.5s
    behavior  testMode; 15s cooldown; journal entry only, no wave

A draw that does not trigger is silent: no wave, no journal entry, and the
cooldown clock is not reset.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

import numpy as np

from classroom_sim.models.geometry import ClassroomLayout, Point
from classroom_sim.models.notification import NotificationCategory, NotificationEvent
from classroom_sim.models.state import SimulationState
from classroom_sim.models.waves import NoiseSourceType, NoiseWave


logger = logging.getLogger(__name__)


BEHAVIOR_CATEGORY = "behavior"

# Reported detection confidence in percent
CONFIDENCE_RANGE: Tuple[float, float] = (75.0, 99.0)

BEHAVIOR_TYPES: Tuple[str, ...] = (
    "peeking at a neighbour",
    "phone use",
    "passing notes",
    "hand signals",
    "suspicious head movement",
    "hidden notes",
)


@dataclass
class SourcePolicy:
    """
    Trigger policy for one wave-emitting source.

    Attributes:
        cooldown_sec: Minimum time between triggers
        active_duration_sec: Lifetime of the transient flag / active seat
        probability: Per-tick trigger probability once eligible
        max_radius: Radius at which the emitted wave retires
        speed: Radius growth per tick
    """

    cooldown_sec: float
    active_duration_sec: float
    probability: float
    max_radius: float
    speed: float


@dataclass
class ChatterPolicy(SourcePolicy):
    """Student chatter policy with mode-specific probabilities."""

    exam_probability: float = 0.008
    group_work_probability: float = 0.05


@dataclass
class BehaviorPolicy:
    """Exam behaviour detection policy."""

    cooldown_sec: float = 15.0
    probability: float = 0.1
    min_confidence: float = 75.0
    max_confidence: float = 95.0


def default_chatter_policy() -> ChatterPolicy:
    return ChatterPolicy(
        cooldown_sec=1.5, active_duration_sec=2.5, probability=0.02,
        max_radius=80.0, speed=1.5,
    )


def default_exterior_policy() -> SourcePolicy:
    return SourcePolicy(
        cooldown_sec=4.0, active_duration_sec=3.0, probability=0.01,
        max_radius=200.0, speed=2.5,
    )


def default_teacher_policy() -> SourcePolicy:
    return SourcePolicy(
        cooldown_sec=5.0, active_duration_sec=3.5, probability=0.008,
        max_radius=250.0, speed=3.0,
    )


class EventGenerator:
    """
    Probability-gated event source for one classroom.

    Stateless apart from its policies and random generator: all timers
    live in the SimulationState passed to ``step``.

    Example:
        generator = EventGenerator(layout, rng=np.random.default_rng(1))
        state = generator.step(state, now=3.2)
        print(state.talking_count, len(state.noise_waves))
    """

    def __init__(
        self,
        layout: ClassroomLayout,
        chatter: Optional[ChatterPolicy] = None,
        exterior: Optional[SourcePolicy] = None,
        teacher: Optional[SourcePolicy] = None,
        behavior: Optional[BehaviorPolicy] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """
        Initialize event generator.

        Args:
            layout: Classroom geometry (seats, windows, podium, microphones)
            chatter: Student chatter policy
            exterior: Exterior noise policy
            teacher: Teacher voice policy
            behavior: Exam behaviour detection policy
            rng: Random generator (unseeded if None)
        """
        self.layout = layout
        self.chatter = chatter or default_chatter_policy()
        self.exterior = exterior or default_exterior_policy()
        self.teacher = teacher or default_teacher_policy()
        self.behavior = behavior or BehaviorPolicy()
        self.rng = rng if rng is not None else np.random.default_rng()

        self._trigger_counts: Dict[str, int] = {
            NoiseSourceType.STUDENT.value: 0,
            NoiseSourceType.EXTERIOR.value: 0,
            NoiseSourceType.TEACHER.value: 0,
            BEHAVIOR_CATEGORY: 0,
        }

        logger.info(
            f"EventGenerator initialized: seats={len(layout.seats)}, "
            f"windows={len(layout.windows)}, p_chatter={self.chatter.probability}"
        )

    # -------------------------------------------------------------------------
    # Pipeline stage
    # -------------------------------------------------------------------------

    def step(self, state: SimulationState, now: float) -> SimulationState:
        """
        Run one generation pass.

        Args:
            state: State after the previous tick
            now: Current simulated timestamp (seconds)

        Returns:
            State with expired timers cleared, new waves appended and new
            journal entries queued in ``pending_events``
        """
        state = self._expire_timers(state, now)

        if not state.system_active:
            return state

        state = self._maybe_chatter(state, now)
        state = self._maybe_exterior(state, now)
        state = self._maybe_teacher(state, now)
        state = self._maybe_behavior(state, now)
        return state

    # -------------------------------------------------------------------------
    # Timers
    # -------------------------------------------------------------------------

    def _expire_timers(self, state: SimulationState, now: float) -> SimulationState:
        events: List[NotificationEvent] = []
        update = {}

        if any(expires_at <= now for expires_at in state.active_seats.values()):
            update["active_seats"] = {
                seat: expires_at
                for seat, expires_at in state.active_seats.items()
                if expires_at > now
            }

        if state.exterior_active_until is not None and state.exterior_active_until <= now:
            update["exterior_active_until"] = None
            if state.system_active:
                reduction = int(self.rng.uniform(85.0, 99.0))
                events.append(NotificationEvent(
                    timestamp=now,
                    category=NotificationCategory.SUCCESS,
                    message=f"Outside noise cancelled: {reduction}% reduction",
                    confidence=reduction,
                ))

        if state.teacher_speaking_until is not None and state.teacher_speaking_until <= now:
            update["teacher_speaking_until"] = None

        if events:
            update["pending_events"] = state.pending_events + tuple(events)
        if not update:
            return state
        return replace(state, **update)

    # -------------------------------------------------------------------------
    # Sources
    # -------------------------------------------------------------------------

    def _cooldown_elapsed(self, state: SimulationState, category: str, cooldown: float, now: float) -> bool:
        last = state.last_triggers.get(category)
        return last is None or now - last > cooldown

    def _chatter_probability(self, state: SimulationState) -> float:
        if state.modes.test_mode:
            return self.chatter.exam_probability
        if state.modes.group_work:
            return self.chatter.group_work_probability
        return self.chatter.probability

    def _maybe_chatter(self, state: SimulationState, now: float) -> SimulationState:
        category = NoiseSourceType.STUDENT.value
        if not (state.modes.student_chatter or state.modes.test_mode):
            return state
        if not self._cooldown_elapsed(state, category, self.chatter.cooldown_sec, now):
            return state
        if self.rng.random() >= self._chatter_probability(state):
            return state

        seat = self.layout.seats[int(self.rng.integers(len(self.layout.seats)))]
        mic = self.layout.nearest_sensor(seat.position)
        confidence = self._confidence()

        active_seats = dict(state.active_seats)
        active_seats[seat.number] = now + self.chatter.active_duration_sec

        event = NotificationEvent(
            timestamp=now,
            category=NotificationCategory.ALERT,
            message=f"Talking student detected near {mic.label} (seat {seat.number})",
            reference=mic.label,
            confidence=confidence,
        )
        self._trigger_counts[category] += 1
        logger.debug(f"Chatter at seat {seat.number} near {mic.label} ({confidence}%)")

        return self._emit(
            replace(state, active_seats=active_seats),
            NoiseSourceType.STUDENT, seat.position, self.chatter, now, event,
        )

    def _maybe_exterior(self, state: SimulationState, now: float) -> SimulationState:
        category = NoiseSourceType.EXTERIOR.value
        if not state.modes.outside_noise:
            return state
        if not self._cooldown_elapsed(state, category, self.exterior.cooldown_sec, now):
            return state
        if self.rng.random() >= self.exterior.probability:
            return state

        window = self.layout.windows[int(self.rng.integers(len(self.layout.windows)))]
        mic = self.layout.nearest_sensor(window.position)
        confidence = self._confidence()

        event = NotificationEvent(
            timestamp=now,
            category=NotificationCategory.EXTERIOR,
            message=f"Outside noise detected at {window.label}, nearest {mic.label}",
            reference=mic.label,
            confidence=confidence,
        )
        self._trigger_counts[category] += 1

        return self._emit(
            replace(state, exterior_active_until=now + self.exterior.active_duration_sec),
            NoiseSourceType.EXTERIOR, window.position, self.exterior, now, event,
        )

    def _maybe_teacher(self, state: SimulationState, now: float) -> SimulationState:
        category = NoiseSourceType.TEACHER.value
        if not state.modes.teacher_mode:
            return state
        if not self._cooldown_elapsed(state, category, self.teacher.cooldown_sec, now):
            return state
        if self.rng.random() >= self.teacher.probability:
            return state

        event = NotificationEvent(
            timestamp=now,
            category=NotificationCategory.TEACHER,
            message="Teacher voice detected at the podium",
            reference="podium",
            confidence=self._confidence(),
        )
        self._trigger_counts[category] += 1

        return self._emit(
            replace(state, teacher_speaking_until=now + self.teacher.active_duration_sec),
            NoiseSourceType.TEACHER, self.layout.podium, self.teacher, now, event,
        )

    def _maybe_behavior(self, state: SimulationState, now: float) -> SimulationState:
        if not state.modes.test_mode:
            return state
        if not self._cooldown_elapsed(state, BEHAVIOR_CATEGORY, self.behavior.cooldown_sec, now):
            return state
        if self.rng.random() >= self.behavior.probability:
            return state

        seat = self.layout.seats[int(self.rng.integers(len(self.layout.seats)))]
        row = (seat.number - 1) // 12 + 1
        position = (seat.number - 1) % 12 + 1
        behavior = BEHAVIOR_TYPES[int(self.rng.integers(len(BEHAVIOR_TYPES)))]
        confidence = int(self.rng.uniform(self.behavior.min_confidence, self.behavior.max_confidence))

        event = NotificationEvent(
            timestamp=now,
            category=NotificationCategory.WARNING,
            message=f"Suspected {behavior}: row {row}, seat {position}",
            reference=self.layout.nearest_sensor(seat.position).label,
            confidence=confidence,
        )
        self._trigger_counts[BEHAVIOR_CATEGORY] += 1

        last_triggers = dict(state.last_triggers)
        last_triggers[BEHAVIOR_CATEGORY] = now
        return replace(
            state,
            last_triggers=last_triggers,
            pending_events=state.pending_events + (event,),
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _confidence(self) -> int:
        low, high = CONFIDENCE_RANGE
        return int(self.rng.uniform(low, high))

    def _emit(
        self,
        state: SimulationState,
        source_type: NoiseSourceType,
        origin: Point,
        policy: SourcePolicy,
        now: float,
        event: NotificationEvent,
    ) -> SimulationState:
        """Stamp a new wave, reset the category cooldown and queue the event."""
        wave = NoiseWave(
            id=state.next_wave_id,
            source_type=source_type,
            origin=origin,
            max_radius=policy.max_radius,
            speed=policy.speed,
            created_at=now,
        )
        last_triggers = dict(state.last_triggers)
        last_triggers[source_type.value] = now

        return replace(
            state,
            noise_waves=state.noise_waves + (wave,),
            next_wave_id=state.next_wave_id + 1,
            last_triggers=last_triggers,
            pending_events=state.pending_events + (event,),
        )

    def get_metrics(self) -> dict:
        """Get generator metrics for observability."""
        return {"triggers": dict(self._trigger_counts)}
