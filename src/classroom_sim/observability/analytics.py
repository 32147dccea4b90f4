"""
Analytics Module
================

Per-tick aggregation of noise meters and entity counts.

This module computes analytics for display. Aggregates are derived purely
from the live entity sets in the SimulationState; there is no hidden state
apart from the discipline score, which has its own processor.

Meters (each clamped to [0, 100]):
    student_noise   active_students * 8 + jitter
    exterior_noise  35 + jitter when exterior noise is active, else 5 + jitter
    overall         25 + 0.5 * student + 0.3 * exterior + jitter
    reduction       85 + jitter while the system is active, else 0

Jitter is a small bounded perturbation redrawn every tick for visual
liveliness. It carries no meaning.

Flags:
    A microphone is detecting while it lies inside any live noise wave.
    A speaker is active while it owns any live cancellation wave.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

import numpy as np

from classroom_sim.models.geometry import ClassroomLayout
from classroom_sim.models.output import EntityCounts, NoiseLevels
from classroom_sim.models.state import SimulationState


logger = logging.getLogger(__name__)


def clamp_level(value: float) -> float:
    return max(0.0, min(100.0, value))


@dataclass(frozen=True, slots=True)
class AggregateSnapshot:
    """
    Meters and counts for one tick.

    Attributes:
        levels: Noise meters
        counts: Entity counts
    """

    levels: NoiseLevels
    counts: EntityCounts


class MetricsAggregator:
    """
    Computes meters, counts and sensor/speaker flags from the live state.

    Example:
        aggregator = MetricsAggregator(layout, rng=rng)
        state, snapshot = aggregator.compute(state)
        print(snapshot.levels.overall)
    """

    def __init__(
        self,
        layout: ClassroomLayout,
        rng: Optional[np.random.Generator] = None,
        jitter: float = 3.0,
    ) -> None:
        """
        Initialize aggregator.

        Args:
            layout: Classroom geometry (microphone positions)
            rng: Random generator for jitter
            jitter: Half-width of the uniform jitter applied to each meter
        """
        if jitter < 0:
            raise ValueError("jitter must be non-negative")

        self.layout = layout
        self.rng = rng if rng is not None else np.random.default_rng()
        self.jitter = jitter

    def compute(self, state: SimulationState) -> Tuple[SimulationState, AggregateSnapshot]:
        """
        Aggregate the current tick.

        Args:
            state: State after dispatch

        Returns:
            Tuple of (state with recomputed flags, aggregate snapshot)
        """
        active_actuators = frozenset(cw.actuator_id for cw in state.cancellation_waves)
        detecting_sensors = frozenset(
            sensor.id
            for sensor in self.layout.sensors
            if any(
                sensor.position.distance_to(wave.origin) <= wave.radius
                for wave in state.noise_waves
            )
        )

        active_students = state.talking_count

        student_noise = clamp_level(active_students * 8 + self._jitter())
        exterior_base = 35.0 if state.exterior_active else 5.0
        exterior_noise = clamp_level(exterior_base + self._jitter())
        overall = clamp_level(25 + 0.5 * student_noise + 0.3 * exterior_noise + self._jitter())
        reduction = clamp_level(85 + self._jitter()) if state.system_active else 0.0

        snapshot = AggregateSnapshot(
            levels=NoiseLevels(
                student_noise=round(student_noise, 2),
                exterior_noise=round(exterior_noise, 2),
                overall=round(overall, 2),
                reduction=round(reduction, 2),
            ),
            counts=EntityCounts(
                active_students=active_students,
                active_actuators=len(active_actuators),
                newly_cancelled=state.newly_cancelled,
            ),
        )

        new_state = replace(
            state,
            active_actuators=active_actuators,
            detecting_sensors=detecting_sensors,
        )
        return new_state, snapshot

    def _jitter(self) -> float:
        if self.jitter == 0:
            return 0.0
        return float(self.rng.uniform(-self.jitter, self.jitter))
