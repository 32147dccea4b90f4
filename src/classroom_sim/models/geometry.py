"""
Geometry Models
===============

This module defines the fixed spatial layout of a monitored classroom.

Design Philosophy:
    Seats, windows, the teacher podium, microphones and speakers are
    EXPLICITLY DECLARED positions, not discovered at runtime. They are built
    once per session and remain fixed while waves move across them.

Coordinate Space:
    Canvas units on a 900 x 500 plane, origin top-left. X increases
    rightward, Y increases downward. Desks sit at
    ``x = 100 + col * 130``, ``y = 80 + row * 85`` with the two seats of a
    desk 18 units either side of its centre.

Example:
    from classroom_sim.models.geometry import build_default_layout

    layout = build_default_layout()
    mic = layout.nearest_sensor(layout.seats[0].position)
    print(mic.label)
"""

import math
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from classroom_sim.models.classroom import SEAT_COLS, SEAT_ROWS, SEAT_SIDES
from classroom_sim.models.seating import seat_number


class Point(BaseModel):
    """
    2D point in canvas coordinates.

    Attributes:
        x: Horizontal coordinate
        y: Vertical coordinate
    """

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., description="Horizontal coordinate (units from left)")
    y: float = Field(..., description="Vertical coordinate (units from top)")

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)


class SeatPosition(BaseModel):
    """Seat number plus its canvas position."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1)
    row: int
    col: int
    side: int
    position: Point


class Sensor(BaseModel):
    """
    Microphone.

    Attributes:
        id: Sensor identifier
        label: Display label (e.g. "MIC-3")
        position: Canvas position
    """

    model_config = ConfigDict(frozen=True)

    id: int
    label: str
    position: Point


class Actuator(BaseModel):
    """
    Speaker capable of emitting a cancellation wave.

    Attributes:
        id: Actuator identifier
        label: Display label (e.g. "SPK-2")
        position: Canvas position
    """

    model_config = ConfigDict(frozen=True)

    id: int
    label: str
    position: Point


class Window(BaseModel):
    """Exterior window acting as an outside noise source."""

    model_config = ConfigDict(frozen=True)

    id: int
    label: str
    position: Point


class ClassroomLayout(BaseModel):
    """
    Complete spatial definition of a classroom scene.

    Attributes:
        width: Canvas width
        height: Canvas height
        seats: 48 seat positions in seat-number order
        windows: Exterior windows
        podium: Teacher podium position
        sensors: Microphones
        actuators: Speakers
    """

    model_config = ConfigDict(frozen=True)

    width: float = Field(default=900.0, gt=0)
    height: float = Field(default=500.0, gt=0)
    seats: List[SeatPosition] = Field(..., min_length=1)
    windows: List[Window] = Field(..., min_length=1)
    podium: Point
    sensors: List[Sensor] = Field(..., min_length=1)
    actuators: List[Actuator] = Field(default_factory=list)

    def seat(self, number: int) -> Optional[SeatPosition]:
        """Look up a seat by its number."""
        for seat in self.seats:
            if seat.number == number:
                return seat
        return None

    def nearest_sensor(self, point: Point) -> Sensor:
        """Microphone closest to a point (first wins on ties)."""
        nearest = self.sensors[0]
        min_dist = math.inf
        for sensor in self.sensors:
            dist = sensor.position.distance_to(point)
            if dist < min_dist:
                min_dist = dist
                nearest = sensor
        return nearest


def build_default_layout() -> ClassroomLayout:
    """
    Build the standard classroom scene.

    Returns:
        Layout with 24 desks (48 seats), three windows on the left wall,
        the podium at the front, six microphones and six speakers.
    """
    seats = []
    for row in range(SEAT_ROWS):
        for col in range(SEAT_COLS):
            desk_x = 100 + col * 130
            desk_y = 80 + row * 85
            for side in range(SEAT_SIDES):
                offset = -18 if side == 0 else 18
                seats.append(SeatPosition(
                    number=seat_number(row, col, side),
                    row=row,
                    col=col,
                    side=side,
                    position=Point(x=desk_x + offset, y=desk_y),
                ))

    windows = [
        Window(id=i + 1, label=f"WIN-{i + 1}", position=Point(x=10, y=y))
        for i, y in enumerate((110, 250, 390))
    ]

    sensors = [
        Sensor(id=i + 1, label=f"MIC-{i + 1}", position=Point(x=x, y=y))
        for i, (x, y) in enumerate([
            (150, 100), (450, 100), (750, 100),
            (150, 250), (450, 250), (750, 250),
        ])
    ]

    actuators = [
        Actuator(id=i + 1, label=f"SPK-{i + 1}", position=Point(x=x, y=y))
        for i, (x, y) in enumerate([
            (40, 40), (860, 40),
            (40, 250), (860, 250),
            (40, 460), (860, 460),
        ])
    ]

    return ClassroomLayout(
        seats=seats,
        windows=windows,
        podium=Point(x=450, y=450),
        sensors=sensors,
        actuators=actuators,
    )
