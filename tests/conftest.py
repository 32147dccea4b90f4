"""
Test Configuration
==================

Pytest fixtures and test configuration for the classroom simulation.
"""

import numpy as np
import pytest


@pytest.fixture
def rng():
    """Provide a seeded random generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def layout():
    """Provide the default classroom layout."""
    from classroom_sim.models.geometry import build_default_layout

    return build_default_layout()


@pytest.fixture
def classrooms():
    """Provide the eight default classrooms."""
    from classroom_sim.models.classroom import default_classrooms

    return default_classrooms()


@pytest.fixture
def classroom():
    """Provide a single mid-discipline classroom."""
    from classroom_sim.models.classroom import Classroom

    return Classroom(
        id=5,
        name="12-1",
        grade="12",
        subject="Chemistry",
        teacher="Dr. Mizrahi",
        discipline=0.5,
    )


@pytest.fixture
def seat_map(classroom, rng):
    """Provide a seat map with 30 occupants and 18 empty seats."""
    from classroom_sim.seating.engine import generate_roster, generate_seat_map

    roster = generate_roster(classroom, size=30, rng=rng)
    return generate_seat_map(roster, rng=rng, classroom_id=classroom.id)


@pytest.fixture
def quiet_policies():
    """Source policies that never trigger."""
    from classroom_sim.signals.event_generator import BehaviorPolicy, ChatterPolicy, SourcePolicy

    return {
        "chatter": ChatterPolicy(
            cooldown_sec=1.5, active_duration_sec=2.5, probability=0.0,
            max_radius=80.0, speed=1.5, exam_probability=0.0, group_work_probability=0.0,
        ),
        "exterior": SourcePolicy(
            cooldown_sec=4.0, active_duration_sec=3.0, probability=0.0,
            max_radius=200.0, speed=2.5,
        ),
        "teacher": SourcePolicy(
            cooldown_sec=5.0, active_duration_sec=3.5, probability=0.0,
            max_radius=250.0, speed=3.0,
        ),
        "behavior": BehaviorPolicy(probability=0.0),
    }


@pytest.fixture
def eager_policies():
    """Source policies that trigger whenever their cooldown allows."""
    from classroom_sim.signals.event_generator import BehaviorPolicy, ChatterPolicy, SourcePolicy

    return {
        "chatter": ChatterPolicy(
            cooldown_sec=1.5, active_duration_sec=2.5, probability=1.0,
            max_radius=80.0, speed=1.5, exam_probability=1.0, group_work_probability=1.0,
        ),
        "exterior": SourcePolicy(
            cooldown_sec=4.0, active_duration_sec=3.0, probability=1.0,
            max_radius=200.0, speed=2.5,
        ),
        "teacher": SourcePolicy(
            cooldown_sec=5.0, active_duration_sec=3.5, probability=1.0,
            max_radius=250.0, speed=3.0,
        ),
        "behavior": BehaviorPolicy(probability=1.0),
    }


@pytest.fixture
def graph(classroom, layout, rng):
    """Provide a simulation graph with default policies."""
    from classroom_sim.agent.graph import SimulationGraph

    return SimulationGraph(classroom, layout=layout, rng=rng)
