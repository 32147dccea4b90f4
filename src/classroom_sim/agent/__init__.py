"""
Agent Module
============

LangGraph tick pipeline and the multi-classroom dashboard.

This module wires the signal stages into a per-tick workflow:
    - graph.py: Tick pipeline definition and mode control surface
    - transitions.py: Talker count -> classroom status rules
    - dashboard.py: School-wide rotation of disruptive classrooms

Key Design Decisions:
    - LangGraph is used for STRUCTURE, not LLM reasoning
    - Stage order is fixed and inspectable
    - Consumers only see snapshots taken between ticks
"""

from classroom_sim.agent.dashboard import Dashboard, DashboardResult, DashboardSnapshot
from classroom_sim.agent.graph import SimulationGraph, create_simulation_graph
from classroom_sim.agent.transitions import ClassroomStatusPolicy, status_for

__all__ = [
    "SimulationGraph",
    "create_simulation_graph",
    "ClassroomStatusPolicy",
    "status_for",
    "Dashboard",
    "DashboardResult",
    "DashboardSnapshot",
]
