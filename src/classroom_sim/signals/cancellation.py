"""
Cancellation Dispatcher
=======================

Decides which live noise waves get counter-acted and spawns the
counter-waves from speakers in range.

Dispatch Rules:
    A live wave is evaluated once its radius exceeds the activation
    threshold and it is not yet handled. Whether it is cancelled depends
    on its type and the current modes:

        student   cancelled when studentChatter is on
        exterior  cancelled when outsideNoise is on
        teacher   cancelled when teacherMode is OFF

    The teacher rule is inverted relative to the other two. It is kept
    as-is; changing it would alter observable behaviour.

    A cancelled wave is marked handled (once, never reverted). Every
    speaker closer than ``actuator_range`` to the wave origin becomes
    active and emits a counter-wave aimed at the origin with
    ``max_radius = min(ratio * distance, cap)``.

    A wave that is not cancelled stays unhandled and decays on its own.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from classroom_sim.models.geometry import ClassroomLayout
from classroom_sim.models.notification import NotificationCategory, NotificationEvent
from classroom_sim.models.state import ModeFlags, SimulationState
from classroom_sim.models.waves import CancellationWave, NoiseSourceType, NoiseWave


logger = logging.getLogger(__name__)


@dataclass
class DispatchPolicy:
    """
    Dispatch thresholds.

    Attributes:
        activation_threshold: Radius a wave must exceed before evaluation
        actuator_range: Speakers strictly closer than this respond
        cancellation_speed: Counter-wave growth per tick
        distance_ratio: Counter-wave max radius as fraction of distance
        max_radius_cap: Upper bound on counter-wave max radius
    """

    activation_threshold: float = 15.0
    actuator_range: float = 400.0
    cancellation_speed: float = 3.0
    distance_ratio: float = 0.8
    max_radius_cap: float = 150.0


def should_cancel(wave: NoiseWave, modes: ModeFlags) -> bool:
    """Cancellation decision for a wave under the current modes."""
    if wave.source_type == NoiseSourceType.STUDENT:
        return modes.student_chatter
    if wave.source_type == NoiseSourceType.EXTERIOR:
        return modes.outside_noise
    if wave.source_type == NoiseSourceType.TEACHER:
        # Inverted: teacher speech is cancelled only while teacherMode is off
        return not modes.teacher_mode
    return False


class CancellationDispatcher:
    """
    Tick stage that dispatches speakers against live noise waves.

    Example:
        dispatcher = CancellationDispatcher(layout)
        state = dispatcher.step(state, now=4.0)
        print(state.newly_cancelled, sorted(state.active_actuators))
    """

    def __init__(
        self,
        layout: ClassroomLayout,
        policy: Optional[DispatchPolicy] = None,
    ) -> None:
        """
        Initialize dispatcher.

        Args:
            layout: Classroom geometry (speaker positions)
            policy: Dispatch thresholds
        """
        self.layout = layout
        self.policy = policy or DispatchPolicy()
        self._dispatch_count: int = 0
        self._skipped_count: int = 0

        logger.info(
            f"CancellationDispatcher initialized: speakers={len(layout.actuators)}, "
            f"range={self.policy.actuator_range}, threshold={self.policy.activation_threshold}"
        )

    def step(self, state: SimulationState, now: float) -> SimulationState:
        """
        Evaluate every live, unhandled wave past the activation threshold.

        Args:
            state: State after propagation
            now: Current simulated timestamp

        Returns:
            State with handled flags set, counter-waves appended,
            ``newly_cancelled`` and dispatch journal entries filled in
        """
        policy = self.policy
        noise_waves: List[NoiseWave] = []
        new_counter_waves: List[CancellationWave] = []
        dispatched_actuators = set()
        events: List[NotificationEvent] = []
        next_id = state.next_wave_id
        cancelled = 0

        for wave in state.noise_waves:
            if wave.handled or wave.radius <= policy.activation_threshold:
                noise_waves.append(wave)
                continue

            if not should_cancel(wave, state.modes):
                # Left to decay; evaluated again next tick while the mode may change
                self._skipped_count += 1
                noise_waves.append(wave)
                continue

            noise_waves.append(replace(wave, handled=True))
            cancelled += 1

            speakers = 0
            for actuator in self.layout.actuators:
                distance = actuator.position.distance_to(wave.origin)
                if distance >= policy.actuator_range:
                    continue
                dispatched_actuators.add(actuator.id)
                new_counter_waves.append(CancellationWave(
                    id=next_id,
                    actuator_id=actuator.id,
                    origin=actuator.position,
                    target=wave.origin,
                    max_radius=min(policy.distance_ratio * distance, policy.max_radius_cap),
                    speed=policy.cancellation_speed,
                    source_type=wave.source_type,
                    noise_wave_id=wave.id,
                ))
                next_id += 1
                speakers += 1

            events.append(NotificationEvent(
                timestamp=now,
                category=NotificationCategory.INFO,
                message=f"Cancelling {wave.source_type.value} noise with {speakers} speaker(s)",
            ))
            logger.debug(f"Wave {wave.id} ({wave.source_type.value}) handled by {speakers} speakers")

        self._dispatch_count += cancelled

        return replace(
            state,
            noise_waves=tuple(noise_waves),
            cancellation_waves=state.cancellation_waves + tuple(new_counter_waves),
            active_actuators=state.active_actuators | frozenset(dispatched_actuators),
            newly_cancelled=cancelled,
            next_wave_id=next_id,
            pending_events=state.pending_events + tuple(events),
        )

    def get_metrics(self) -> dict:
        """Get dispatcher metrics for observability."""
        return {
            "dispatched": self._dispatch_count,
            "evaluated_not_cancelled": self._skipped_count,
        }
