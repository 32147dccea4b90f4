"""
Classroom Rotation
==================

Chooses which classrooms the multi-classroom dashboard shows as currently
disruptive.

Rotation Rules:
    - Re-evaluated once the current selection has been shown for a random
      10-18 seconds (the deadline is drawn when the selection is made)
    - 75% of rotations pick one classroom, 25% pick two
    - Each picked classroom gets level 1 (warn) with 80% probability,
      level 2 (alert) otherwise
    - Classrooms are drawn with weight ``(1 - discipline) + 0.1`` and the
      second pick excludes the first
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

import numpy as np

from classroom_sim.models.classroom import Classroom
from classroom_sim.models.reason_codes import ConditionCode
from classroom_sim.selection.random_selector import discipline_weight, select_weighted


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RotationResult:
    """
    Current disruptive classrooms.

    Attributes:
        levels: Classroom id -> severity (1 = warn, 2 = alert)
        rotated: True if this call made a new selection
        condition: OK, or INVALID_REFERENCE for an empty classroom list or
            a held selection naming classrooms missing from the list
    """

    levels: Dict[int, int] = field(default_factory=dict)
    rotated: bool = False
    condition: ConditionCode = ConditionCode.OK


class ClassroomRotator:
    """
    Holds the current disruptive selection and its rotation deadline.

    Example:
        rotator = ClassroomRotator(rng=np.random.default_rng(7))
        result = rotator.rotate_active_classrooms(classrooms, now=0.0)
        print(result.levels)   # e.g. {5: 1}
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        min_interval_sec: float = 10.0,
        max_interval_sec: float = 18.0,
        double_probability: float = 0.25,
        warn_probability: float = 0.8,
    ) -> None:
        """
        Initialize rotator.

        Args:
            rng: Random generator
            min_interval_sec: Shortest time a selection is shown
            max_interval_sec: Longest time a selection is shown
            double_probability: Chance a rotation picks two classrooms
            warn_probability: Chance a picked classroom is level 1
        """
        if min_interval_sec <= 0 or max_interval_sec < min_interval_sec:
            raise ValueError("rotation interval must satisfy 0 < min <= max")

        self.rng = rng if rng is not None else np.random.default_rng()
        self.min_interval_sec = min_interval_sec
        self.max_interval_sec = max_interval_sec
        self.double_probability = double_probability
        self.warn_probability = warn_probability

        self._levels: Dict[int, int] = {}
        self._since: float = 0.0
        self._rotate_at: Optional[float] = None
        self._rotation_count: int = 0

    @property
    def levels(self) -> Dict[int, int]:
        return dict(self._levels)

    @property
    def rotation_count(self) -> int:
        return self._rotation_count

    def rotate_active_classrooms(
        self,
        classrooms: Sequence[Classroom],
        now: float,
    ) -> RotationResult:
        """
        Return the disruptive classrooms, rotating if the deadline passed.

        Args:
            classrooms: All dashboard classrooms
            now: Current (simulated) timestamp in seconds

        Returns:
            RotationResult with 1-2 classroom levels
        """
        if not classrooms:
            logger.warning("Rotation requested with no classrooms")
            return RotationResult(
                levels=self.levels,
                condition=ConditionCode.INVALID_REFERENCE,
            )

        known_ids = {c.id for c in classrooms}
        missing = sorted(cid for cid in self._levels if cid not in known_ids)
        if missing:
            logger.warning(f"Held selection references unknown classrooms {missing}; call reset()")
            return RotationResult(
                levels=self.levels,
                condition=ConditionCode.INVALID_REFERENCE,
            )

        should_rotate = (
            not self._levels
            or self._rotate_at is None
            or now >= self._rotate_at
        )
        if not should_rotate:
            return RotationResult(levels=self.levels)

        levels: Dict[int, int] = {}
        first = select_weighted(classrooms, discipline_weight, rng=self.rng)
        levels[first.selected_id] = self._draw_level()

        if self.rng.random() < self.double_probability and len(classrooms) > 1:
            second = select_weighted(
                classrooms, discipline_weight,
                exclude=[first.selected_id], rng=self.rng,
            )
            levels[second.selected_id] = self._draw_level()

        self._levels = levels
        self._since = now
        self._rotate_at = now + self.rng.uniform(self.min_interval_sec, self.max_interval_sec)
        self._rotation_count += 1

        logger.info(
            f"Rotation #{self._rotation_count}: active={levels} "
            f"next_at={self._rotate_at:.1f}s"
        )

        return RotationResult(levels=self.levels, rotated=True)

    def _draw_level(self) -> int:
        return 1 if self.rng.random() < self.warn_probability else 2

    def reset(self) -> None:
        """Forget the current selection."""
        self._levels = {}
        self._since = 0.0
        self._rotate_at = None
        logger.info("ClassroomRotator reset")
