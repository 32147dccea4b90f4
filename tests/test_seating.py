"""
Seating Tests
=============

Tests for roster generation, seat maps, swap, reshuffle and the two-tap
swap selection.
"""

import pytest
from pydantic import ValidationError

from classroom_sim.models.classroom import SEAT_COUNT
from classroom_sim.models.reason_codes import ConditionCode
from classroom_sim.models.seating import Gender, SeatMap, Student, seat_number
from classroom_sim.seating.engine import (
    SwapSelection,
    generate_classroom_seat_map,
    generate_roster,
    generate_seat_map,
    reshuffle,
    swap,
)


def _occupied_index(seat_map):
    return next(i for i, slot in enumerate(seat_map.slots) if not slot.is_empty)


def _empty_index(seat_map):
    return next(i for i, slot in enumerate(seat_map.slots) if slot.is_empty)


class TestSeatNumbering:
    """Tests for seat numbering."""

    def test_seat_numbers(self):
        assert seat_number(0, 0, 0) == 1
        assert seat_number(0, 0, 1) == 2
        assert seat_number(1, 0, 0) == 13
        assert seat_number(3, 5, 1) == 48

    def test_export_rows_in_seat_order(self, seat_map):
        rows = seat_map.to_export_rows()
        assert [r["seat"] for r in rows] == list(range(1, SEAT_COUNT + 1))
        named = [r for r in rows if r["name"] is not None]
        assert len(named) == 30


class TestRoster:
    """Tests for roster generation."""

    def test_roster_ids(self, classroom, rng):
        roster = generate_roster(classroom, rng=rng)
        assert [s.id for s in roster] == list(range(1, 49))

    def test_names_unique_within_pool(self, classroom, rng):
        """30 students never exhaust a 35-name pool."""
        roster = generate_roster(classroom, size=30, rng=rng)
        names = [s.name for s in roster]
        assert len(set(names)) == len(names)

    def test_roster_too_large(self, classroom, rng):
        with pytest.raises(ValueError):
            generate_roster(classroom, size=49, rng=rng)


class TestSeatMap:
    """Tests for seat map generation."""

    def test_full_grid(self, classroom, rng):
        seat_map = generate_classroom_seat_map(classroom, rng=rng)
        assert len(seat_map.slots) == SEAT_COUNT
        assert seat_map.occupied_count == SEAT_COUNT
        assert seat_map.occupant_ids() == list(range(1, 49))
        assert seat_map.classroom_id == classroom.id

    def test_partial_roster(self, seat_map):
        assert seat_map.occupied_count == 30
        assert seat_map.empty_count == 18
        assert seat_map.occupant_ids() == list(range(1, 31))

    def test_duplicate_ids_rejected(self, rng):
        roster = [
            Student(id=1, name="Noa", gender=Gender.FEMALE),
            Student(id=1, name="Ari", gender=Gender.MALE),
        ]
        with pytest.raises(ValueError):
            generate_seat_map(roster, rng=rng)

    def test_student_in_two_slots_rejected(self, seat_map):
        student = seat_map.slots[_occupied_index(seat_map)].occupant
        slots = [slot.model_copy(update={"occupant": student}) for slot in seat_map.slots[:2]]
        slots.extend(seat_map.slots[2:])
        with pytest.raises(ValidationError):
            SeatMap(classroom_id=seat_map.classroom_id, slots=slots)


class TestSwap:
    """Tests for swapping two slots."""

    def test_swap_exchanges_occupants(self, seat_map):
        a = _occupied_index(seat_map)
        b = _empty_index(seat_map)
        moved = seat_map.slots[a].occupant

        result = swap(seat_map, a, b)

        assert result.condition == ConditionCode.OK
        assert result.seat_map.slots[b].occupant == moved
        assert result.seat_map.slots[a].occupant is None
        assert result.seat_map.occupant_ids() == seat_map.occupant_ids()
        # Input map untouched
        assert seat_map.slots[a].occupant == moved

    def test_swap_same_index(self, seat_map):
        result = swap(seat_map, 4, 4)
        assert result.condition == ConditionCode.IGNORED
        assert result.seat_map is seat_map
        assert not result.changed

    @pytest.mark.parametrize("a,b", [(-1, 3), (3, 48), (100, 0)])
    def test_swap_out_of_range(self, seat_map, a, b):
        result = swap(seat_map, a, b)
        assert result.condition == ConditionCode.INVALID_REFERENCE
        assert result.seat_map is seat_map


class TestReshuffle:
    """Tests for reshuffling occupants."""

    def test_counts_and_empty_seats_preserved(self, seat_map, rng):
        result = reshuffle(seat_map, rng)
        new_map = result.seat_map

        assert new_map.occupied_count == 30
        assert new_map.empty_count == 18
        assert new_map.occupant_ids() == seat_map.occupant_ids()
        assert [s.is_empty for s in new_map.slots] == [s.is_empty for s in seat_map.slots]

    def test_repeated_reshuffles_conserve_occupants(self, seat_map, rng):
        current = seat_map
        for _ in range(20):
            current = reshuffle(current, rng).seat_map
        assert current.occupant_ids() == seat_map.occupant_ids()


class TestSwapSelection:
    """Tests for the two-tap swap interaction."""

    def test_tap_empty_while_idle_ignored(self, seat_map):
        selection = SwapSelection()
        result = selection.tap(seat_map, _empty_index(seat_map))
        assert result.condition == ConditionCode.IGNORED
        assert selection.is_idle

    def test_tap_then_cancel(self, seat_map):
        selection = SwapSelection()
        index = _occupied_index(seat_map)

        assert selection.tap(seat_map, index).condition == ConditionCode.PENDING
        assert selection.pending == index

        result = selection.tap(seat_map, index)
        assert result.condition == ConditionCode.CANCELLED
        assert result.seat_map is seat_map
        assert selection.is_idle

    def test_two_taps_swap(self, seat_map):
        selection = SwapSelection()
        a = _occupied_index(seat_map)
        b = _empty_index(seat_map)
        moved = seat_map.slots[a].occupant

        selection.tap(seat_map, a)
        result = selection.tap(seat_map, b)

        assert result.condition == ConditionCode.OK
        assert result.seat_map.slots[b].occupant == moved
        assert selection.is_idle

    def test_out_of_range_tap_keeps_pending(self, seat_map):
        selection = SwapSelection()
        a = _occupied_index(seat_map)
        selection.tap(seat_map, a)

        result = selection.tap(seat_map, 99)
        assert result.condition == ConditionCode.INVALID_REFERENCE
        assert selection.pending == a

    def test_reset(self, seat_map):
        selection = SwapSelection()
        selection.tap(seat_map, _occupied_index(seat_map))
        selection.reset()
        assert selection.is_idle
