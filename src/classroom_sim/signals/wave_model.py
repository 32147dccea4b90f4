"""
Wave Propagation Model
======================

Advances and retires the live wave sets once per tick.

Rules:
    - Every live wave grows by its speed: ``radius += speed``
    - A wave whose radius reaches ``max_radius`` is retired immediately
      and never reappears
    - Noise waves and cancellation waves are disjoint collections and are
      retired independently
"""

import logging
from dataclasses import replace
from typing import Tuple, TypeVar

from classroom_sim.models.state import SimulationState
from classroom_sim.models.waves import CancellationWave, NoiseWave


logger = logging.getLogger(__name__)

W = TypeVar("W", NoiseWave, CancellationWave)


def advance_waves(waves: Tuple[W, ...]) -> Tuple[Tuple[W, ...], int]:
    """
    Grow every wave by one tick and drop the expired ones.

    Args:
        waves: Live waves

    Returns:
        Tuple of (still-live waves, number retired)
    """
    live = []
    retired = 0
    for wave in waves:
        grown = replace(wave, radius=wave.radius + wave.speed)
        if grown.is_expired:
            retired += 1
        else:
            live.append(grown)
    return tuple(live), retired


class WavePropagationModel:
    """Tick stage that advances both wave collections."""

    def __init__(self) -> None:
        self._retired_noise: int = 0
        self._retired_cancellation: int = 0

    def step(self, state: SimulationState) -> SimulationState:
        """
        Advance all live waves by one tick.

        Args:
            state: State after generation

        Returns:
            State with grown waves and expired waves removed
        """
        noise_waves, noise_retired = advance_waves(state.noise_waves)
        cancellation_waves, cancellation_retired = advance_waves(state.cancellation_waves)

        self._retired_noise += noise_retired
        self._retired_cancellation += cancellation_retired

        return replace(
            state,
            noise_waves=noise_waves,
            cancellation_waves=cancellation_waves,
        )

    def get_metrics(self) -> dict:
        """Get propagation metrics for observability."""
        return {
            "retired_noise_waves": self._retired_noise,
            "retired_cancellation_waves": self._retired_cancellation,
        }
