"""
Selection Module
================

Weighted random selection and the dashboard's classroom rotation.
"""

from classroom_sim.selection.random_selector import (
    SelectionResult,
    discipline_weight,
    select_many,
    select_weighted,
    shuffled,
)
from classroom_sim.selection.rotation import ClassroomRotator, RotationResult

__all__ = [
    "SelectionResult",
    "discipline_weight",
    "select_weighted",
    "select_many",
    "shuffled",
    "ClassroomRotator",
    "RotationResult",
]
