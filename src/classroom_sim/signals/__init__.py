"""
Signals Module
==============

Tick stages of the wave pipeline and the discipline score processor.

This module provides the processors that turn mode switches and elapsed
time into synthetic events, waves, counter-waves and scores.
"""

from classroom_sim.signals.cancellation import CancellationDispatcher, DispatchPolicy, should_cancel
from classroom_sim.signals.discipline_processor import DisciplineScoreProcessor, compute_trend
from classroom_sim.signals.event_generator import (
    BehaviorPolicy,
    ChatterPolicy,
    EventGenerator,
    SourcePolicy,
)
from classroom_sim.signals.wave_model import WavePropagationModel, advance_waves

__all__ = [
    "EventGenerator",
    "SourcePolicy",
    "ChatterPolicy",
    "BehaviorPolicy",
    "WavePropagationModel",
    "advance_waves",
    "CancellationDispatcher",
    "DispatchPolicy",
    "should_cancel",
    "DisciplineScoreProcessor",
    "compute_trend",
]
