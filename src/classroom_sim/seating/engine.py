"""
Seat Assignment Engine
======================

Builds and edits the fixed 48-slot seating grid of a classroom.

Operations:
    - generate_roster: 48 (or fewer) named occupants
    - generate_seat_map: random placement of a roster into the grid
    - swap: exchange the occupants of two slots
    - reshuffle: re-randomize occupants over the occupied slots
    - SwapSelection: two-tap swap interaction (Idle -> Pending -> Idle)

All map operations are pure: they return a new SeatMap and never mutate the
one passed in. Bad slot indices return INVALID_REFERENCE with the input map
unchanged.

Invariant:
    The multiset of occupant ids is identical before and after every swap
    and reshuffle; no occupant is created, lost or duplicated.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from classroom_sim.models.classroom import SEAT_COLS, SEAT_COUNT, SEAT_ROWS, SEAT_SIDES, Classroom
from classroom_sim.models.reason_codes import ConditionCode
from classroom_sim.models.seating import Gender, SeatMap, SeatSlot, Student
from classroom_sim.seating.names import NAME_POOLS
from classroom_sim.selection.random_selector import shuffled


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SeatEditResult:
    """
    Outcome of a seat map edit.

    Attributes:
        seat_map: Map after the edit (the input map when nothing changed)
        condition: Outcome code
    """

    seat_map: SeatMap
    condition: ConditionCode = ConditionCode.OK

    @property
    def changed(self) -> bool:
        return self.condition == ConditionCode.OK


# =============================================================================
# Generation
# =============================================================================

def generate_roster(
    classroom: Classroom,
    size: int = SEAT_COUNT,
    rng: Optional[np.random.Generator] = None,
) -> List[Student]:
    """
    Create uniquely named occupants for a classroom.

    Names are drawn without replacement from the pool of the student's
    gender; a pool is only reused (allowing duplicates) once exhausted.

    Args:
        classroom: Classroom the roster belongs to
        size: Number of students (at most 48)
        rng: Random generator

    Returns:
        Students with ids 1..size
    """
    if not 0 <= size <= SEAT_COUNT:
        raise ValueError(f"roster size must be in [0, {SEAT_COUNT}]")
    if rng is None:
        rng = np.random.default_rng()

    remaining: Dict[Gender, List[str]] = {
        gender: shuffled(pool, rng) for gender, pool in NAME_POOLS.items()
    }

    roster = []
    for student_id in range(1, size + 1):
        gender = Gender.MALE if rng.random() < 0.5 else Gender.FEMALE
        if not remaining[gender]:
            remaining[gender] = shuffled(NAME_POOLS[gender], rng)
        roster.append(Student(id=student_id, name=remaining[gender].pop(), gender=gender))

    logger.debug(f"Generated roster of {size} for classroom {classroom.id}")
    return roster


def _empty_slots() -> List[SeatSlot]:
    return [
        SeatSlot(row=row, col=col, side=side)
        for row in range(SEAT_ROWS)
        for col in range(SEAT_COLS)
        for side in range(SEAT_SIDES)
    ]


def generate_seat_map(
    roster: Sequence[Student],
    rng: Optional[np.random.Generator] = None,
    classroom_id: int = 0,
) -> SeatMap:
    """
    Place a roster into the 48-slot grid by a full random shuffle.

    Args:
        roster: Occupants (at most 48, unique ids)
        rng: Random generator
        classroom_id: Owning classroom

    Returns:
        SeatMap with one occupant per slot, remaining slots empty
    """
    if len(roster) > SEAT_COUNT:
        raise ValueError(f"roster larger than {SEAT_COUNT} seats")
    if len({s.id for s in roster}) != len(roster):
        raise ValueError("roster ids must be unique")
    if rng is None:
        rng = np.random.default_rng()

    padded: List[Optional[Student]] = list(roster) + [None] * (SEAT_COUNT - len(roster))
    placement = shuffled(padded, rng)

    slots = [
        slot.model_copy(update={"occupant": occupant})
        for slot, occupant in zip(_empty_slots(), placement)
    ]
    return SeatMap(classroom_id=classroom_id, slots=slots)


def generate_classroom_seat_map(
    classroom: Classroom,
    rng: Optional[np.random.Generator] = None,
) -> SeatMap:
    """Roster generation plus placement for a classroom."""
    if rng is None:
        rng = np.random.default_rng()
    roster = generate_roster(classroom, rng=rng)
    return generate_seat_map(roster, rng=rng, classroom_id=classroom.id)


# =============================================================================
# Editing
# =============================================================================

def swap(seat_map: SeatMap, index_a: int, index_b: int) -> SeatEditResult:
    """
    Exchange the occupants of two slots.

    Args:
        seat_map: Map to edit
        index_a: First slot index (0..47)
        index_b: Second slot index (0..47)

    Returns:
        SeatEditResult; IGNORED when both indices are equal,
        INVALID_REFERENCE when either is out of range
    """
    for index in (index_a, index_b):
        if not 0 <= index < SEAT_COUNT:
            logger.warning(f"Swap rejected: slot index {index} out of range")
            return SeatEditResult(seat_map=seat_map, condition=ConditionCode.INVALID_REFERENCE)

    if index_a == index_b:
        return SeatEditResult(seat_map=seat_map, condition=ConditionCode.IGNORED)

    slots = list(seat_map.slots)
    occupant_a = slots[index_a].occupant
    occupant_b = slots[index_b].occupant
    slots[index_a] = slots[index_a].model_copy(update={"occupant": occupant_b})
    slots[index_b] = slots[index_b].model_copy(update={"occupant": occupant_a})

    return SeatEditResult(seat_map=seat_map.model_copy(update={"slots": slots}))


def reshuffle(
    seat_map: SeatMap,
    rng: Optional[np.random.Generator] = None,
) -> SeatEditResult:
    """
    Re-randomize who sits where without moving empty seats.

    Occupants are collected, shuffled and written back into the slots that
    were occupied, in slot order. Slot geometry and the set of empty slots
    are unchanged.
    """
    if rng is None:
        rng = np.random.default_rng()

    occupied = [i for i, slot in enumerate(seat_map.slots) if slot.occupant is not None]
    occupants = shuffled([seat_map.slots[i].occupant for i in occupied], rng)

    slots = list(seat_map.slots)
    for index, occupant in zip(occupied, occupants):
        slots[index] = slots[index].model_copy(update={"occupant": occupant})

    return SeatEditResult(seat_map=seat_map.model_copy(update={"slots": slots}))


# =============================================================================
# Two-tap swap interaction
# =============================================================================

class SwapSelection:
    """
    Two-phase swap selection state machine.

    States:
        Idle: nothing selected
        Pending(a): slot ``a`` selected, waiting for the second tap

    Transitions:
        Idle --tap occupied slot--> Pending(slot)
        Idle --tap empty slot--> Idle (IGNORED)
        Pending(a) --tap a--> Idle (CANCELLED)
        Pending(a) --tap b--> swap(a, b), Idle (OK)

    Example:
        selection = SwapSelection()
        seat_map = selection.tap(seat_map, 3).seat_map    # PENDING
        seat_map = selection.tap(seat_map, 17).seat_map   # swapped
    """

    def __init__(self) -> None:
        self._pending: Optional[int] = None

    @property
    def pending(self) -> Optional[int]:
        """Selected slot index, or None when idle."""
        return self._pending

    @property
    def is_idle(self) -> bool:
        return self._pending is None

    def tap(self, seat_map: SeatMap, index: int) -> SeatEditResult:
        """
        Feed one slot tap into the state machine.

        Args:
            seat_map: Current map
            index: Tapped slot index

        Returns:
            SeatEditResult with the (possibly swapped) map
        """
        if not 0 <= index < SEAT_COUNT:
            logger.warning(f"Tap rejected: slot index {index} out of range")
            return SeatEditResult(seat_map=seat_map, condition=ConditionCode.INVALID_REFERENCE)

        if self._pending is None:
            if seat_map.slots[index].occupant is None:
                return SeatEditResult(seat_map=seat_map, condition=ConditionCode.IGNORED)
            self._pending = index
            return SeatEditResult(seat_map=seat_map, condition=ConditionCode.PENDING)

        if index == self._pending:
            self._pending = None
            return SeatEditResult(seat_map=seat_map, condition=ConditionCode.CANCELLED)

        first = self._pending
        self._pending = None
        return swap(seat_map, first, index)

    def reset(self) -> None:
        """Drop any pending selection."""
        self._pending = None
