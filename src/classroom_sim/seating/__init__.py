"""
Seating Module
==============

Seat roster generation, placement and editing for the 48-slot grid.
"""

from classroom_sim.seating.engine import (
    SeatEditResult,
    SwapSelection,
    generate_classroom_seat_map,
    generate_roster,
    generate_seat_map,
    reshuffle,
    swap,
)

__all__ = [
    "SeatEditResult",
    "SwapSelection",
    "generate_roster",
    "generate_seat_map",
    "generate_classroom_seat_map",
    "swap",
    "reshuffle",
]
