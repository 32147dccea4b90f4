"""
Classroom Noise Simulation
==========================

Simulated classroom noise monitoring and active noise cancellation.

This package provides the simulation core behind a classroom monitoring
dashboard: synthetic chatter, exterior and teacher noise sources, expanding
sound waves, counter-waves from ceiling speakers, a per-classroom
discipline score and a bounded notification journal.

Components:
    - models: Classrooms, layout geometry, waves, seating and snapshots
    - signals: Event generation, propagation, dispatch and scoring
    - selection: Weighted classroom selection and dashboard rotation
    - seating: Rosters, seat maps and swap editing
    - observability: Noise meters and the notification journal
    - agent: LangGraph tick pipeline and multi-classroom dashboard

Example:
    from classroom_sim.config import settings
    from classroom_sim.agent import create_simulation_graph
    from classroom_sim.models import default_classrooms

    graph = create_simulation_graph(settings, default_classrooms()[0])
    result = graph.advance(0.0)
"""

__version__ = "0.1.0"
__author__ = "Classroom Sim Project"

__all__ = [
    "__version__",
]
