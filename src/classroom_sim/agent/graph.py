"""
Simulation Graph Definition
===========================

LangGraph tick pipeline for one simulated classroom.

This module defines the per-tick computation graph using LangGraph.
LangGraph is used for CONTROL FLOW only.

Graph Structure:
    START -> generate -> propagate -> dispatch -> aggregate -> log -> END

    generate   EventGenerator: expire timers, maybe emit events and waves
    propagate  WavePropagationModel: grow and retire waves
    dispatch   CancellationDispatcher: handle waves, spawn counter-waves
    aggregate  MetricsAggregator + status policy + discipline score
    log        Move the tick's journal entries into the NotificationLog

Design Philosophy:
    - One deterministic stage order per tick
    - Explicit SimulationState threaded through every stage
    - All timers are timestamps; nothing is scheduled
    - Randomness comes from one injectable generator
    - Consumers read immutable snapshots taken between ticks
"""

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Dict, Optional, TypedDict, Union

import numpy as np
from langgraph.graph import END, StateGraph

from classroom_sim.agent.transitions import ClassroomStatusPolicy
from classroom_sim.models.classroom import Classroom, ClassroomStatus
from classroom_sim.models.geometry import ClassroomLayout, build_default_layout
from classroom_sim.models.notification import NotificationCategory, NotificationEvent
from classroom_sim.models.output import SimulationSnapshot, TickResult
from classroom_sim.models.reason_codes import ConditionCode
from classroom_sim.models.score import DisciplineScoreState
from classroom_sim.models.state import Mode, ModeFlags, SimulationState
from classroom_sim.observability.analytics import AggregateSnapshot, MetricsAggregator
from classroom_sim.observability.notifications import NotificationLog
from classroom_sim.signals.cancellation import CancellationDispatcher, DispatchPolicy
from classroom_sim.signals.discipline_processor import DisciplineScoreProcessor
from classroom_sim.signals.event_generator import (
    BehaviorPolicy,
    ChatterPolicy,
    EventGenerator,
    SourcePolicy,
)
from classroom_sim.signals.wave_model import WavePropagationModel

if TYPE_CHECKING:
    from classroom_sim.config import Settings


logger = logging.getLogger(__name__)


class TickGraphState(TypedDict):
    """
    State passed through the tick graph.

    Attributes:
        sim_state: Pipeline-owned simulation state
        classroom: Classroom record (status, alert counter)
        score: Discipline score state
        meters: Meters and counts of the current tick
        timestamp: Current simulated timestamp
    """
    sim_state: SimulationState
    classroom: Classroom
    score: DisciplineScoreState
    meters: Optional[AggregateSnapshot]
    timestamp: float


class SimulationGraph:
    """
    LangGraph-based tick pipeline for one classroom.

    Owns the SimulationState, the discipline score and the notification
    journal. ``advance(now)`` must be called at a steady cadence with
    non-decreasing timestamps.

    Example:
        graph = SimulationGraph(classroom, rng=np.random.default_rng(7))
        graph.set_mode("testMode", True)
        for i in range(600):
            result = graph.advance(i / 60)
        print(result.snapshot.score)
    """

    def __init__(
        self,
        classroom: Classroom,
        layout: Optional[ClassroomLayout] = None,
        rng: Optional[np.random.Generator] = None,
        modes: Optional[ModeFlags] = None,
        chatter: Optional[ChatterPolicy] = None,
        exterior: Optional[SourcePolicy] = None,
        teacher: Optional[SourcePolicy] = None,
        behavior: Optional[BehaviorPolicy] = None,
        dispatch: Optional[DispatchPolicy] = None,
        score_processor: Optional[DisciplineScoreProcessor] = None,
        log_capacity: int = 50,
        level_jitter: float = 3.0,
        log_every_n_ticks: int = 300,
    ) -> None:
        """
        Initialize the simulation graph.

        Args:
            classroom: Classroom being simulated
            layout: Classroom geometry (default layout if None)
            rng: Random generator shared by all stages (unseeded if None)
            modes: Initial mode switches
            chatter: Student chatter policy
            exterior: Exterior noise policy
            teacher: Teacher voice policy
            behavior: Exam behaviour detection policy
            dispatch: Cancellation dispatch policy
            score_processor: Discipline score processor (built from the
                classroom discipline if None)
            log_capacity: Notification journal capacity
            level_jitter: Meter jitter half-width
            log_every_n_ticks: Log a tick summary every N ticks
        """
        self.layout = layout or build_default_layout()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.log_every_n_ticks = log_every_n_ticks

        self.generator = EventGenerator(
            self.layout,
            chatter=chatter,
            exterior=exterior,
            teacher=teacher,
            behavior=behavior,
            rng=self.rng,
        )
        self.wave_model = WavePropagationModel()
        self.dispatcher = CancellationDispatcher(self.layout, policy=dispatch)
        self.aggregator = MetricsAggregator(self.layout, rng=self.rng, jitter=level_jitter)
        self.status_policy = ClassroomStatusPolicy()
        self.score_processor = score_processor or DisciplineScoreProcessor(
            discipline=classroom.discipline, rng=self.rng,
        )
        self.journal = NotificationLog(capacity=log_capacity)

        self._graph = self._build_graph()
        self._state: TickGraphState = {
            "sim_state": SimulationState(modes=modes or ModeFlags()),
            "classroom": classroom,
            "score": self.score_processor.initial_state(),
            "meters": None,
            "timestamp": 0.0,
        }
        self._snapshot: Optional[SimulationSnapshot] = None
        self._regressions: int = 0

        self.journal.extend([
            NotificationEvent(
                timestamp=0.0,
                category=NotificationCategory.SYSTEM,
                message=f"AI monitoring enabled for {classroom.name}",
            ),
            NotificationEvent(
                timestamp=0.0,
                category=NotificationCategory.INFO,
                message=f"All {len(self.layout.sensors)} microphones calibrated and active",
            ),
        ])

        logger.info(f"SimulationGraph initialized for classroom {classroom.id} ({classroom.name})")

    # -------------------------------------------------------------------------
    # Graph
    # -------------------------------------------------------------------------

    def _build_graph(self):
        """Build the LangGraph workflow."""
        workflow = StateGraph(TickGraphState)

        workflow.add_node("generate", self._generate_node)
        workflow.add_node("propagate", self._propagate_node)
        workflow.add_node("dispatch", self._dispatch_node)
        workflow.add_node("aggregate", self._aggregate_node)
        workflow.add_node("log", self._log_node)

        workflow.set_entry_point("generate")
        workflow.add_edge("generate", "propagate")
        workflow.add_edge("propagate", "dispatch")
        workflow.add_edge("dispatch", "aggregate")
        workflow.add_edge("aggregate", "log")
        workflow.add_edge("log", END)

        return workflow.compile()

    def _generate_node(self, state: TickGraphState) -> Dict[str, Any]:
        return {"sim_state": self.generator.step(state["sim_state"], state["timestamp"])}

    def _propagate_node(self, state: TickGraphState) -> Dict[str, Any]:
        return {"sim_state": self.wave_model.step(state["sim_state"])}

    def _dispatch_node(self, state: TickGraphState) -> Dict[str, Any]:
        return {"sim_state": self.dispatcher.step(state["sim_state"], state["timestamp"])}

    def _aggregate_node(self, state: TickGraphState) -> Dict[str, Any]:
        now = state["timestamp"]
        sim_state, aggregate = self.aggregator.compute(state["sim_state"])
        classroom, _ = self.status_policy.evaluate(
            state["classroom"], sim_state.talking_count, now,
        )
        score = self.score_processor.update(state["score"], sim_state.talking_count, now)
        return {
            "sim_state": sim_state,
            "classroom": classroom,
            "score": score,
            "meters": aggregate,
        }

    def _log_node(self, state: TickGraphState) -> Dict[str, Any]:
        sim_state = state["sim_state"]
        self.journal.extend(sim_state.pending_events)
        return {
            "sim_state": replace(
                sim_state,
                pending_events=(),
                newly_cancelled=0,
                tick=sim_state.tick + 1,
                last_tick_at=state["timestamp"],
            ),
        }

    # -------------------------------------------------------------------------
    # Tick entry point
    # -------------------------------------------------------------------------

    def advance(self, now: float) -> TickResult:
        """
        Run one tick of the pipeline.

        Args:
            now: Current simulated timestamp in seconds; must not be
                earlier than the previous tick

        Returns:
            TickResult with the new snapshot, or CLOCK_REGRESSION and the
            previous snapshot when ``now`` went backwards
        """
        last = self._state["sim_state"].last_tick_at
        if last is not None and now < last:
            self._regressions += 1
            logger.warning(f"Clock regression: now={now:.3f} < last={last:.3f}, tick skipped")
            return TickResult(condition=ConditionCode.CLOCK_REGRESSION, snapshot=self._snapshot)

        self._state["timestamp"] = now
        self._state = self._graph.invoke(self._state)
        self._snapshot = self._build_snapshot()

        sim_state = self._state["sim_state"]
        if sim_state.tick % self.log_every_n_ticks == 0:
            logger.info(
                f"Tick {sim_state.tick}: talking={sim_state.talking_count}, "
                f"waves={len(sim_state.noise_waves)}/{len(sim_state.cancellation_waves)}, "
                f"score={self._state['score'].score:.1f} ({self._state['score'].trend.value})"
            )

        return TickResult(snapshot=self._snapshot)

    # -------------------------------------------------------------------------
    # Mode control surface
    # -------------------------------------------------------------------------

    def set_mode(self, name: Union[str, Mode], enabled: bool) -> ConditionCode:
        """
        Switch a named mode.

        Enabling testMode clears groupWork and vice versa.

        Args:
            name: Mode name (e.g. "studentChatter") or Mode
            enabled: New value

        Returns:
            OK, or INVALID_REFERENCE for an unknown name
        """
        try:
            mode = Mode(name)
        except ValueError:
            logger.warning(f"Unknown mode: {name!r}")
            return ConditionCode.INVALID_REFERENCE

        sim_state = self._state["sim_state"]
        modes = sim_state.modes.with_mode(mode, enabled)
        if modes == sim_state.modes:
            return ConditionCode.OK

        self._state["sim_state"] = replace(sim_state, modes=modes)
        self.journal.append(NotificationEvent(
            timestamp=self._state["timestamp"],
            category=NotificationCategory.SYSTEM,
            message=f"Mode {mode.value} {'enabled' if enabled else 'disabled'}",
        ))
        logger.info(f"Mode {mode.value} -> {enabled}")
        return ConditionCode.OK

    def set_system_active(self, active: bool) -> None:
        """
        Switch event generation on or off.

        Live waves are left to decay naturally.
        """
        sim_state = self._state["sim_state"]
        if sim_state.system_active == active:
            return

        self._state["sim_state"] = replace(sim_state, system_active=active)
        self.journal.append(NotificationEvent(
            timestamp=self._state["timestamp"],
            category=NotificationCategory.SYSTEM,
            message="Noise monitoring activated" if active else "Noise monitoring paused",
        ))
        logger.info(f"System active -> {active}")

    def clear_log(self) -> None:
        """Clear the notification journal."""
        self.journal.clear(timestamp=self._state["timestamp"])

    def reset(self) -> None:
        """Reset waves, timers and score; mode switches are kept."""
        sim_state = self._state["sim_state"]
        self._state = {
            "sim_state": SimulationState(
                modes=sim_state.modes,
                system_active=sim_state.system_active,
            ),
            "classroom": self._state["classroom"].model_copy(update={
                "status": ClassroomStatus.QUIET,
                "talking_count": 0,
            }),
            "score": self.score_processor.initial_state(),
            "meters": None,
            "timestamp": 0.0,
        }
        self._snapshot = None
        logger.info("SimulationGraph reset")

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    def _build_snapshot(self) -> SimulationSnapshot:
        sim_state = self._state["sim_state"]
        aggregate = self._state["meters"]
        classroom = self._state["classroom"]

        return SimulationSnapshot(
            timestamp=self._state["timestamp"],
            tick=sim_state.tick,
            system_active=sim_state.system_active,
            modes=sim_state.modes.to_dict(),
            status=classroom.status,
            talking_count=sim_state.talking_count,
            total_alerts=classroom.alerts,
            exterior_active=sim_state.exterior_active,
            teacher_speaking=sim_state.teacher_speaking,
            levels=aggregate.levels,
            counts=aggregate.counts,
            score=self._state["score"].to_dict(),
            active_seats=sorted(sim_state.active_seats),
            active_actuators=sorted(sim_state.active_actuators),
            detecting_sensors=sorted(sim_state.detecting_sensors),
            noise_waves=[w.to_dict() for w in sim_state.noise_waves],
            cancellation_waves=[w.to_dict() for w in sim_state.cancellation_waves],
            notifications=[e.to_dict() for e in self.journal.entries],
        )

    @property
    def snapshot(self) -> Optional[SimulationSnapshot]:
        """Snapshot after the last completed tick."""
        return self._snapshot

    @property
    def state(self) -> SimulationState:
        """Current simulation state."""
        return self._state["sim_state"]

    @property
    def score(self) -> DisciplineScoreState:
        """Current discipline score state."""
        return self._state["score"]

    @property
    def classroom(self) -> Classroom:
        """Current classroom record."""
        return self._state["classroom"]

    def get_metrics(self) -> Dict[str, Any]:
        """Get pipeline metrics for observability."""
        sim_state = self._state["sim_state"]
        return {
            "ticks": sim_state.tick,
            "clock_regressions": self._regressions,
            "talking": sim_state.talking_count,
            "noise_waves": len(sim_state.noise_waves),
            "cancellation_waves": len(sim_state.cancellation_waves),
            "score": round(self._state["score"].score, 2),
            **self.generator.get_metrics(),
            **self.wave_model.get_metrics(),
            **self.dispatcher.get_metrics(),
            "journal": self.journal.metrics(),
        }


# Factory function mapping configuration onto the pipeline
def create_simulation_graph(
    settings: "Settings",
    classroom: Classroom,
    layout: Optional[ClassroomLayout] = None,
    rng: Optional[np.random.Generator] = None,
    modes: Optional[ModeFlags] = None,
) -> SimulationGraph:
    """
    Create a simulation graph from configuration.

    Args:
        settings: Loaded settings
        classroom: Classroom being simulated
        layout: Classroom geometry (default layout if None)
        rng: Random generator (seeded from settings.simulation.seed if None)
        modes: Initial mode switches

    Returns:
        Configured SimulationGraph
    """
    if rng is None:
        rng = np.random.default_rng(settings.simulation.seed)

    chatter = ChatterPolicy(
        cooldown_sec=settings.chatter.cooldown_sec,
        active_duration_sec=settings.chatter.active_duration_sec,
        probability=settings.chatter.probability,
        max_radius=settings.chatter.max_radius,
        speed=settings.chatter.speed,
        exam_probability=settings.chatter.exam_probability,
        group_work_probability=settings.chatter.group_work_probability,
    )
    exterior = SourcePolicy(
        cooldown_sec=settings.exterior.cooldown_sec,
        active_duration_sec=settings.exterior.active_duration_sec,
        probability=settings.exterior.probability,
        max_radius=settings.exterior.max_radius,
        speed=settings.exterior.speed,
    )
    teacher = SourcePolicy(
        cooldown_sec=settings.teacher.cooldown_sec,
        active_duration_sec=settings.teacher.active_duration_sec,
        probability=settings.teacher.probability,
        max_radius=settings.teacher.max_radius,
        speed=settings.teacher.speed,
    )
    behavior = BehaviorPolicy(
        cooldown_sec=settings.behavior.cooldown_sec,
        probability=settings.behavior.probability,
        min_confidence=settings.behavior.min_confidence,
        max_confidence=settings.behavior.max_confidence,
    )
    dispatch = DispatchPolicy(
        activation_threshold=settings.waves.activation_threshold,
        actuator_range=settings.waves.actuator_range,
        cancellation_speed=settings.waves.cancellation_speed,
        distance_ratio=settings.waves.cancellation_distance_ratio,
        max_radius_cap=settings.waves.cancellation_max_radius,
    )
    score_processor = DisciplineScoreProcessor(
        discipline=classroom.discipline,
        rng=rng,
        sample_interval_sec=settings.scoring.sample_interval_sec,
        history_size=settings.scoring.history_size,
        trend_window=settings.scoring.trend_window,
        trend_threshold=settings.scoring.trend_threshold,
        peak_decay=settings.scoring.peak_decay,
    )

    return SimulationGraph(
        classroom,
        layout=layout,
        rng=rng,
        modes=modes,
        chatter=chatter,
        exterior=exterior,
        teacher=teacher,
        behavior=behavior,
        dispatch=dispatch,
        score_processor=score_processor,
        log_capacity=settings.notifications.capacity,
        log_every_n_ticks=settings.simulation.log_every_n_ticks,
    )
