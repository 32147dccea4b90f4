"""
Discipline Score Models
=======================

Per-classroom smoothed discipline score and its rolling trend.

Score Policy:
    Talking ticks apply a small penalty that cannot take the score below a
    talker-count-dependent floor; quiet ticks apply a recovery that cannot
    take it above the classroom baseline (``discipline * 100``). The score
    always stays within [25, 100].
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


SCORE_MIN = 25.0
SCORE_MAX = 100.0


class Trend(str, Enum):
    """Direction of the sampled score history."""

    RISING = "rising"
    FALLING = "falling"
    FLAT = "flat"


@dataclass(frozen=True, slots=True)
class DisciplineScoreState:
    """
    Score state for one classroom.

    Attributes:
        score: Current score in [25, 100]
        quiet_streak: Consecutive quiet ticks
        talking_streak: Consecutive talking ticks
        peak_talkers: Decaying memory of concurrent talkers
        history: Last sampled (rounded) scores, oldest first
        trend: Trend derived from the history
        last_sample_at: Timestamp of the last history sample
    """

    score: float
    quiet_streak: int = 0
    talking_streak: int = 0
    peak_talkers: float = 0.0
    history: Tuple[int, ...] = field(default_factory=tuple)
    trend: Trend = Trend.FLAT
    last_sample_at: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not SCORE_MIN <= self.score <= SCORE_MAX:
            raise ValueError(f"score must be in [{SCORE_MIN}, {SCORE_MAX}]")

    def __repr__(self) -> str:
        return (
            f"DisciplineScoreState(score={self.score:.2f}, "
            f"trend={self.trend.value}, quiet={self.quiet_streak}, "
            f"talking={self.talking_streak})"
        )

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "score": round(self.score, 2),
            "trend": self.trend.value,
            "quiet_streak": self.quiet_streak,
            "talking_streak": self.talking_streak,
            "peak_talkers": round(self.peak_talkers, 2),
            "history": list(self.history),
        }
