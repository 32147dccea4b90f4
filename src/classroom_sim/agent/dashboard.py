"""
Multi-Classroom Dashboard
=========================

School-wide overview: which classrooms are currently disruptive, their
status, alert counters and discipline scores.

Update Loop:
    Every ``update_interval_sec`` (2s by default):
        1. Rotate the disruptive selection if its deadline passed
        2. Selected classrooms talk at their level (1 or 2 talkers),
           all others are quiet
        3. Status and alert counters follow the talker count
        4. Each classroom's discipline score takes one update

Calls made before the next update is due return the current snapshot
unchanged.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from pydantic import BaseModel, Field

from classroom_sim.agent.transitions import ClassroomStatusPolicy
from classroom_sim.models.classroom import Classroom, ClassroomStatus, default_classrooms
from classroom_sim.models.reason_codes import ConditionCode
from classroom_sim.models.score import DisciplineScoreState
from classroom_sim.selection.rotation import ClassroomRotator
from classroom_sim.signals.discipline_processor import DisciplineScoreProcessor


logger = logging.getLogger(__name__)


class DashboardSnapshot(BaseModel):
    """Read-only view of the dashboard after an update."""

    timestamp: float
    classrooms: List[Classroom]
    scores: Dict[int, Dict[str, Any]]
    active: Dict[int, int] = Field(default_factory=dict, description="Classroom id -> level")
    total_talking: int = Field(default=0, ge=0)
    total_alerts: int = Field(default=0, ge=0)
    alerting_classrooms: int = Field(default=0, ge=0)


class DashboardResult(BaseModel):
    condition: ConditionCode = ConditionCode.OK
    snapshot: Optional[DashboardSnapshot] = None
    updated: bool = False


class Dashboard:
    """
    Drives the classroom records shown on the school dashboard.

    Example:
        dashboard = Dashboard(default_classrooms(), rng=np.random.default_rng(3))
        result = dashboard.advance(now=0.0)
        print(result.snapshot.active)
    """

    def __init__(
        self,
        classrooms: Optional[Sequence[Classroom]] = None,
        rotator: Optional[ClassroomRotator] = None,
        rng: Optional[np.random.Generator] = None,
        update_interval_sec: float = 2.0,
        score_processors: Optional[Dict[int, DisciplineScoreProcessor]] = None,
    ) -> None:
        """
        Initialize dashboard.

        Args:
            classrooms: Classroom records (eight defaults if None)
            rotator: Disruptive selection rotator
            rng: Random generator shared with the rotator and scores
            update_interval_sec: Dashboard update cadence
            score_processors: Per-classroom score processors, built from
                each classroom's discipline where missing
        """
        if update_interval_sec <= 0:
            raise ValueError("update_interval_sec must be positive")

        records = list(classrooms) if classrooms is not None else default_classrooms()
        ids = [c.id for c in records]
        if len(ids) != len(set(ids)):
            raise ValueError("classroom ids must be unique")

        self.rng = rng if rng is not None else np.random.default_rng()
        self.rotator = rotator or ClassroomRotator(rng=self.rng)
        self.status_policy = ClassroomStatusPolicy()
        self.update_interval_sec = update_interval_sec

        processors = dict(score_processors or {})
        for classroom in records:
            if classroom.id not in processors:
                processors[classroom.id] = DisciplineScoreProcessor(
                    discipline=classroom.discipline, rng=self.rng,
                )
        self._processors = processors

        self._classrooms: Dict[int, Classroom] = {c.id: c for c in records}
        self._scores: Dict[int, DisciplineScoreState] = {
            cid: self._processors[cid].initial_state() for cid in self._classrooms
        }
        self._last_update_at: Optional[float] = None
        self._last_seen_at: Optional[float] = None
        self._snapshot: Optional[DashboardSnapshot] = None

        logger.info(f"Dashboard initialized with {len(records)} classrooms")

    @property
    def classrooms(self) -> List[Classroom]:
        return list(self._classrooms.values())

    @property
    def snapshot(self) -> Optional[DashboardSnapshot]:
        return self._snapshot

    def score(self, classroom_id: int) -> Optional[DisciplineScoreState]:
        return self._scores.get(classroom_id)

    def advance(self, now: float) -> DashboardResult:
        """
        Update the dashboard if an update is due.

        Args:
            now: Current simulated timestamp (non-decreasing)

        Returns:
            DashboardResult; ``updated`` is False between updates and on
            CLOCK_REGRESSION
        """
        if self._last_seen_at is not None and now < self._last_seen_at:
            logger.warning(f"Dashboard clock regression: now={now:.3f} < last={self._last_seen_at:.3f}")
            return DashboardResult(condition=ConditionCode.CLOCK_REGRESSION, snapshot=self._snapshot)
        self._last_seen_at = now

        due = (
            self._last_update_at is None
            or now - self._last_update_at >= self.update_interval_sec
        )
        if not due:
            return DashboardResult(snapshot=self._snapshot)

        rotation = self.rotator.rotate_active_classrooms(self.classrooms, now)
        if rotation.condition != ConditionCode.OK:
            return DashboardResult(condition=rotation.condition, snapshot=self._snapshot)

        for cid, classroom in self._classrooms.items():
            talking = rotation.levels.get(cid, 0)
            self._classrooms[cid], _ = self.status_policy.evaluate(classroom, talking, now)
            self._scores[cid] = self._processors[cid].update(self._scores[cid], talking, now)

        self._last_update_at = now
        self._snapshot = self._build_snapshot(now, rotation.levels)
        return DashboardResult(snapshot=self._snapshot, updated=True)

    def _build_snapshot(self, now: float, levels: Dict[int, int]) -> DashboardSnapshot:
        classrooms = self.classrooms
        return DashboardSnapshot(
            timestamp=now,
            classrooms=classrooms,
            scores={cid: s.to_dict() for cid, s in self._scores.items()},
            active=dict(levels),
            total_talking=sum(c.talking_count for c in classrooms),
            total_alerts=sum(c.alerts for c in classrooms),
            alerting_classrooms=sum(1 for c in classrooms if c.status == ClassroomStatus.ALERT),
        )

    def get_metrics(self) -> Dict[str, Any]:
        """Get dashboard metrics for observability."""
        return {
            "classrooms": len(self._classrooms),
            "rotations": self.rotator.rotation_count,
            "total_alerts": sum(c.alerts for c in self._classrooms.values()),
        }
