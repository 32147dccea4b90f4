"""
Seating Models
==============

Seat slots, occupants and the seat map value passed between the seating
engine and its consumers (UI edit actions, document export).

Seat Identity:
    Slot (row, col, side) has seat number ``row * 12 + col * 2 + side + 1``,
    giving 1..48 across the 4 x 6 x 2 grid. Roster ids use the same scheme
    so a freshly generated roster lines up with the grid before shuffling.

Invariant:
    A Student appears in at most one slot of a SeatMap.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from classroom_sim.models.classroom import SEAT_COLS, SEAT_COUNT, SEAT_ROWS, SEAT_SIDES


class Gender(str, Enum):
    """Cosmetic gender tag used for name pools and export styling."""

    MALE = "male"
    FEMALE = "female"


def seat_number(row: int, col: int, side: int) -> int:
    """Seat number (1..48) for a grid position."""
    return row * (SEAT_COLS * SEAT_SIDES) + col * SEAT_SIDES + side + 1


class Student(BaseModel):
    """
    Seat occupant.

    Attributes:
        id: Roster id (1..48)
        name: Display name
        gender: Cosmetic gender tag
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, le=SEAT_COUNT)
    name: str
    gender: Gender


class SeatSlot(BaseModel):
    """
    One of the 48 fixed seat positions and its current occupant.

    Attributes:
        row: Desk row (0..3, front to back)
        col: Desk column (0..5)
        side: Side of the desk (0 = left, 1 = right)
        occupant: Student sitting here, or None
    """

    model_config = ConfigDict(frozen=True)

    row: int = Field(..., ge=0, lt=SEAT_ROWS)
    col: int = Field(..., ge=0, lt=SEAT_COLS)
    side: int = Field(..., ge=0, lt=SEAT_SIDES)
    occupant: Optional[Student] = None

    @property
    def number(self) -> int:
        return seat_number(self.row, self.col, self.side)

    @property
    def is_empty(self) -> bool:
        return self.occupant is None


class SeatMap(BaseModel):
    """
    Seating plan for one classroom.

    The slot sequence is fixed for the classroom's lifetime: swap and
    reshuffle only change which occupant each slot references.

    Attributes:
        classroom_id: Owning classroom
        slots: Exactly 48 slots in seat-number order
    """

    model_config = ConfigDict(frozen=True)

    classroom_id: int = Field(..., ge=0)
    slots: List[SeatSlot] = Field(..., min_length=SEAT_COUNT, max_length=SEAT_COUNT)

    @model_validator(mode="after")
    def _check_unique_occupants(self) -> "SeatMap":
        ids = [slot.occupant.id for slot in self.slots if slot.occupant is not None]
        if len(ids) != len(set(ids)):
            raise ValueError("a student may occupy at most one seat")
        return self

    @property
    def occupants(self) -> List[Student]:
        """Occupants in slot order (empty slots skipped)."""
        return [slot.occupant for slot in self.slots if slot.occupant is not None]

    @property
    def occupied_count(self) -> int:
        return len(self.occupants)

    @property
    def empty_count(self) -> int:
        return SEAT_COUNT - self.occupied_count

    def occupant_ids(self) -> List[int]:
        """Sorted occupant ids, for conservation checks."""
        return sorted(student.id for student in self.occupants)

    def to_export_rows(self) -> List[Dict[str, object]]:
        """
        Flatten the map for a document exporter.

        Returns:
            One dict per slot with seat position, occupant name and gender.
        """
        return [
            {
                "seat": slot.number,
                "row": slot.row + 1,
                "desk": slot.col + 1,
                "side": slot.side,
                "name": slot.occupant.name if slot.occupant else None,
                "gender": slot.occupant.gender.value if slot.occupant else None,
            }
            for slot in self.slots
        ]
