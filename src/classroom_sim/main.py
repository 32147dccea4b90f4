"""
Classroom Simulation Main Application
=====================================

Headless session runner for the classroom simulation core.

Runs the tick pipeline for one classroom at the configured cadence on a
simulated clock (no sleeping) and logs a session summary. With
``--dashboard`` the multi-classroom dashboard is advanced alongside.

Usage:
    classroom-sim --ticks 3600 --seed 7
    classroom-sim --ticks 1200 --mode testMode --mode teacherMode
    classroom-sim --classroom 5 --disable outsideNoise --dashboard
"""

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np
from pydantic import ValidationError

from classroom_sim.agent import Dashboard, create_simulation_graph
from classroom_sim.config import Settings, load_config, settings as default_settings, setup_logging
from classroom_sim.models import ConditionCode, Mode, default_classrooms
from classroom_sim.selection import ClassroomRotator


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="classroom-sim",
        description="Run a headless classroom noise simulation session.",
    )
    parser.add_argument("--ticks", type=int, default=600, help="Number of ticks to run")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (overrides config)")
    parser.add_argument("--config", type=str, default=None, help="Path to config.yaml")
    parser.add_argument(
        "--classroom", type=int, default=None,
        help="Classroom id to simulate (default: first classroom)",
    )
    parser.add_argument(
        "--mode", action="append", default=[], metavar="NAME",
        help=f"Enable a mode; repeatable. One of: {', '.join(m.value for m in Mode)}",
    )
    parser.add_argument(
        "--disable", action="append", default=[], metavar="NAME",
        help="Disable a mode; repeatable",
    )
    parser.add_argument(
        "--dashboard", action="store_true",
        help="Also run the multi-classroom dashboard",
    )
    return parser


def run_session(
    config: Settings,
    ticks: int,
    classroom_id: Optional[int] = None,
    enable: Optional[List[str]] = None,
    disable: Optional[List[str]] = None,
    with_dashboard: bool = False,
) -> int:
    """
    Run a session and log its summary.

    Returns:
        Process exit code (0 on success, 2 on bad arguments)
    """
    if ticks < 0:
        logger.error("--ticks must be non-negative")
        return 2

    classrooms = default_classrooms()
    if classroom_id is None:
        classroom = classrooms[0]
    else:
        matches = [c for c in classrooms if c.id == classroom_id]
        if not matches:
            logger.error(f"Unknown classroom id: {classroom_id}")
            return 2
        classroom = matches[0]

    rng = np.random.default_rng(config.simulation.seed)
    graph = create_simulation_graph(config, classroom, rng=rng)

    for name in disable or []:
        if graph.set_mode(name, False) != ConditionCode.OK:
            return 2
    for name in enable or []:
        if graph.set_mode(name, True) != ConditionCode.OK:
            return 2

    dashboard = None
    if with_dashboard:
        rotator = ClassroomRotator(
            rng=rng,
            min_interval_sec=config.rotation.min_interval_sec,
            max_interval_sec=config.rotation.max_interval_sec,
            double_probability=config.rotation.double_probability,
            warn_probability=config.rotation.warn_probability,
        )
        dashboard = Dashboard(
            classrooms,
            rotator=rotator,
            rng=rng,
            update_interval_sec=config.rotation.update_interval_sec,
        )

    dt = 1.0 / config.simulation.tick_hz
    logger.info(
        f"Starting session '{config.simulation.name}': classroom={classroom.name}, "
        f"ticks={ticks}, tick_hz={config.simulation.tick_hz}, seed={config.simulation.seed}"
    )

    for i in range(ticks):
        now = i * dt
        graph.advance(now)
        if dashboard is not None:
            dashboard.advance(now)

    snapshot = graph.snapshot
    if snapshot is not None:
        logger.info(
            f"Session finished after {snapshot.tick} ticks ({snapshot.timestamp:.1f}s): "
            f"status={snapshot.status.value}, alerts={snapshot.total_alerts}, "
            f"score={snapshot.score['score']:.1f} ({snapshot.score['trend']}), "
            f"overall={snapshot.levels.overall:.0f}"
        )
    logger.info(f"Pipeline metrics: {graph.get_metrics()}")

    if dashboard is not None and dashboard.snapshot is not None:
        logger.info(
            f"Dashboard: talking={dashboard.snapshot.total_talking}, "
            f"alerts={dashboard.snapshot.total_alerts}, active={dashboard.snapshot.active}"
        )

    for event in graph.journal.entries[:10]:
        logger.info(f"[{event.timestamp:7.2f}] {event.category.value:<8} {event.message}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = default_settings
    if args.config:
        try:
            config = load_config(args.config)
        except ValidationError as e:
            logger.error(f"Invalid config {args.config}: {e}")
            return 2
        setup_logging(config)
    if args.seed is not None:
        config = config.model_copy(update={
            "simulation": config.simulation.model_copy(update={"seed": args.seed}),
        })

    return run_session(
        config,
        ticks=args.ticks,
        classroom_id=args.classroom,
        enable=args.mode,
        disable=args.disable,
        with_dashboard=args.dashboard,
    )


if __name__ == "__main__":
    sys.exit(main())
