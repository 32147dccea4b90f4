"""
Discipline Score Processor
==========================

Computes the smoothed per-classroom discipline score from the current
number of talking students.

This processor:
    - Applies a small penalty on talking ticks, bounded below by a floor
      that depends on the number of talkers
    - Applies a small recovery on quiet ticks, bounded above by the
      classroom baseline (``discipline * 100``); the recovery grows with
      the length of the quiet streak up to a cap
    - Keeps a decaying memory of peak concurrent talkers
    - Samples the rounded score into a rolling history at a fixed interval
      and derives a trend from it

Floors:
    1 talker     55
    2-3 talkers  40
    4+ talkers   30

    A penalty never takes the score below the floor. A score that is
    already below the floor is left where it is (the floor never raises
    the score).

Trend:
    rising   mean(last 3 samples) - mean(3 samples before) > 2
    falling  difference < -2
    flat     otherwise, or fewer than 6 samples
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence

import numpy as np

from classroom_sim.models.score import SCORE_MAX, SCORE_MIN, DisciplineScoreState, Trend


logger = logging.getLogger(__name__)


# Penalty per talking tick: BASE + PER_TALKER * k + jitter
PENALTY_BASE = 0.03
PENALTY_PER_TALKER = 0.015
PENALTY_JITTER = 0.01

# Recovery per quiet tick: BASE + jitter + min(CAP, streak * STEP)
RECOVERY_BASE = 0.06
RECOVERY_JITTER = 0.02
RECOVERY_STREAK_STEP = 0.005
RECOVERY_STREAK_CAP = 0.25


def talker_floor(talking_count: int) -> float:
    """Lowest score a penalty may reach for a given number of talkers."""
    if talking_count <= 1:
        return 55.0
    if talking_count <= 3:
        return 40.0
    return 30.0


def clamp_score(score: float) -> float:
    return max(SCORE_MIN, min(SCORE_MAX, score))


def compute_trend(
    history: Sequence[int],
    window: int = 3,
    threshold: float = 2.0,
) -> Trend:
    """
    Derive the trend of a sampled history.

    Args:
        history: Samples, oldest first
        window: Samples per comparison window
        threshold: Minimum mean difference for rising/falling

    Returns:
        Trend of the latest window against the one before it
    """
    if len(history) < 2 * window:
        return Trend.FLAT

    recent = np.mean(history[-window:])
    previous = np.mean(history[-2 * window:-window])
    diff = float(recent - previous)

    if diff > threshold:
        return Trend.RISING
    if diff < -threshold:
        return Trend.FALLING
    return Trend.FLAT


class DisciplineScoreProcessor:
    """
    Score processor for one classroom.

    Attributes:
        baseline: Upper bound for recovery (``discipline * 100``)
        sample_interval_sec: Seconds between history samples
        history_size: Rolling history length

    Example:
        processor = DisciplineScoreProcessor(discipline=0.5, rng=rng)
        state = processor.initial_state()
        state = processor.update(state, talking_count=2, now=0.016)
        print(state.score, state.trend)
    """

    def __init__(
        self,
        discipline: float,
        rng: Optional[np.random.Generator] = None,
        sample_interval_sec: float = 2.0,
        history_size: int = 10,
        trend_window: int = 3,
        trend_threshold: float = 2.0,
        peak_decay: float = 0.98,
    ) -> None:
        """
        Initialize discipline score processor.

        Args:
            discipline: Classroom discipline in [0, 1]
            rng: Random generator for jitter
            sample_interval_sec: History sampling interval
            history_size: Rolling history length (>= 2 * trend_window)
            trend_window: Samples per trend window
            trend_threshold: Mean difference for rising/falling
            peak_decay: Per-tick multiplier for the peak talker memory
        """
        if not 0.0 <= discipline <= 1.0:
            raise ValueError("discipline must be in [0, 1]")
        if sample_interval_sec <= 0:
            raise ValueError("sample_interval_sec must be positive")
        if history_size < 2 * trend_window:
            raise ValueError("history_size must hold two trend windows")
        if not 0 < peak_decay <= 1:
            raise ValueError("peak_decay must be in (0, 1]")

        self.baseline = discipline * 100.0
        self.rng = rng if rng is not None else np.random.default_rng()
        self.sample_interval_sec = sample_interval_sec
        self.history_size = history_size
        self.trend_window = trend_window
        self.trend_threshold = trend_threshold
        self.peak_decay = peak_decay

        self._update_count: int = 0

    def initial_state(self) -> DisciplineScoreState:
        """Fresh state starting at the classroom baseline."""
        return DisciplineScoreState(score=clamp_score(self.baseline))

    def update(
        self,
        state: DisciplineScoreState,
        talking_count: int,
        now: float,
    ) -> DisciplineScoreState:
        """
        Apply one tick of penalty or recovery.

        Args:
            state: Previous score state
            talking_count: Students currently talking
            now: Current simulated timestamp

        Returns:
            Updated score state
        """
        if talking_count < 0:
            raise ValueError("talking_count must be non-negative")

        self._update_count += 1
        score = state.score

        if talking_count > 0:
            penalty = (
                PENALTY_BASE
                + PENALTY_PER_TALKER * talking_count
                + self.rng.uniform(0.0, PENALTY_JITTER)
            )
            floor = min(score, talker_floor(talking_count))
            score = max(floor, score - penalty)
            quiet_streak = 0
            talking_streak = state.talking_streak + 1
        else:
            quiet_streak = state.quiet_streak + 1
            talking_streak = 0
            recovery = (
                RECOVERY_BASE
                + self.rng.uniform(0.0, RECOVERY_JITTER)
                + min(RECOVERY_STREAK_CAP, quiet_streak * RECOVERY_STREAK_STEP)
            )
            if score < self.baseline:
                score = min(self.baseline, score + recovery)

        score = clamp_score(score)
        peak = max(float(talking_count), state.peak_talkers * self.peak_decay)

        history = state.history
        trend = state.trend
        last_sample_at = state.last_sample_at
        if last_sample_at is None or now - last_sample_at >= self.sample_interval_sec:
            history = (history + (int(round(score)),))[-self.history_size:]
            trend = compute_trend(history, self.trend_window, self.trend_threshold)
            last_sample_at = now
            if trend != state.trend:
                logger.debug(f"Score trend {state.trend.value} -> {trend.value} at {score:.1f}")

        return replace(
            state,
            score=score,
            quiet_streak=quiet_streak,
            talking_streak=talking_streak,
            peak_talkers=peak,
            history=history,
            trend=trend,
            last_sample_at=last_sample_at,
        )

    @property
    def update_count(self) -> int:
        """Number of updates applied."""
        return self._update_count
