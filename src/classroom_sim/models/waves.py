"""
Wave Models
===========

Data models for noise waves and the counter-waves dispatched against them.

Both kinds are immutable values: each tick the propagation model produces
new instances with a larger radius, and the dispatcher produces a copy
with ``handled=True``. A wave is retired (dropped from the live set) once
its radius reaches its max radius and never comes back.
"""

from dataclasses import dataclass
from enum import Enum

from classroom_sim.models.geometry import Point


class NoiseSourceType(str, Enum):
    """
    Category of a noise source.

    Attributes:
        STUDENT: A talking student at a seat
        EXTERIOR: Outside noise entering through a window
        TEACHER: The teacher speaking at the podium
    """

    STUDENT = "student"
    EXTERIOR = "exterior"
    TEACHER = "teacher"


@dataclass(frozen=True, slots=True)
class NoiseWave:
    """
    Radius-growing noise entity.

    Produced by EventGenerator, advanced by WavePropagationModel,
    marked handled by CancellationDispatcher.

    Attributes:
        id: Session-unique wave id
        source_type: Category of the source that emitted it
        origin: Emission point
        radius: Current radius (starts at 0)
        max_radius: Radius at which the wave retires
        speed: Radius growth per tick
        handled: One-shot dispatch guard
        created_at: Simulated timestamp of emission
    """

    id: int
    source_type: NoiseSourceType
    origin: Point
    max_radius: float
    speed: float
    created_at: float
    radius: float = 0.0
    handled: bool = False

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.max_radius <= 0:
            raise ValueError("max_radius must be positive")
        if self.speed <= 0:
            raise ValueError("speed must be positive")
        if self.radius < 0:
            raise ValueError("radius must be non-negative")

    @property
    def is_expired(self) -> bool:
        return self.radius >= self.max_radius

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "id": self.id,
            "type": self.source_type.value,
            "x": round(self.origin.x, 1),
            "y": round(self.origin.y, 1),
            "radius": round(self.radius, 2),
            "max_radius": self.max_radius,
            "handled": self.handled,
        }


@dataclass(frozen=True, slots=True)
class CancellationWave:
    """
    Counter-wave emitted by a speaker towards a noise origin.

    Attributes:
        id: Session-unique wave id
        actuator_id: Speaker that emitted it
        origin: Speaker position
        target: Noise origin it is aimed at
        max_radius: min(ratio * distance, cap)
        speed: Radius growth per tick
        source_type: Type of the noise it answers (display only)
        noise_wave_id: Noise wave it answers
        radius: Current radius
    """

    id: int
    actuator_id: int
    origin: Point
    target: Point
    max_radius: float
    speed: float
    source_type: NoiseSourceType
    noise_wave_id: int
    radius: float = 0.0

    @property
    def is_expired(self) -> bool:
        return self.radius >= self.max_radius

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "id": self.id,
            "actuator_id": self.actuator_id,
            "type": self.source_type.value,
            "radius": round(self.radius, 2),
            "max_radius": round(self.max_radius, 2),
        }
