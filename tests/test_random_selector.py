"""
Random Selector Tests
=====================

Tests for weighted selection, exclusion fallback and shuffling.
"""

from types import SimpleNamespace

import numpy as np
import pytest

from classroom_sim.models.reason_codes import ConditionCode
from classroom_sim.selection.random_selector import (
    discipline_weight,
    select_many,
    select_weighted,
    shuffled,
)


def _room(cid, discipline):
    return SimpleNamespace(id=cid, discipline=discipline)


class TestSelectWeighted:
    """Tests for a single weighted draw."""

    def test_empty_candidates(self, rng):
        """An empty list yields no selection."""
        result = select_weighted([], discipline_weight, rng=rng)
        assert result.selected_id is None
        assert result.condition == ConditionCode.INVALID_REFERENCE

    def test_all_excluded_falls_back_to_first(self, rng):
        """Excluding everything returns the first original candidate."""
        rooms = [_room(3, 0.5), _room(1, 0.5), _room(2, 0.5)]
        result = select_weighted(rooms, discipline_weight, exclude=[1, 2, 3], rng=rng)
        assert result.selected_id == 3
        assert result.condition == ConditionCode.FALLBACK_SELECTION

    def test_exclusion_respected(self, rng):
        rooms = [_room(1, 0.0), _room(2, 0.0), _room(3, 0.9)]
        for _ in range(200):
            result = select_weighted(rooms, discipline_weight, exclude=[1, 2], rng=rng)
            assert result.selected_id == 3
            assert result.condition == ConditionCode.OK

    def test_zero_weight_never_selected(self, rng):
        items = [SimpleNamespace(id="a", w=0.0), SimpleNamespace(id="b", w=1.0)]
        picks = {
            select_weighted(items, lambda c: c.w, rng=rng).selected_id
            for _ in range(500)
        }
        assert picks == {"b"}

    def test_negative_weight_rejected(self, rng):
        items = [SimpleNamespace(id="a", w=-1.0)]
        with pytest.raises(ValueError):
            select_weighted(items, lambda c: c.w, rng=rng)

    def test_fairness_follows_weights(self):
        """Discipline 0.0 vs 1.0 gives weights 1.1 vs 0.1, an 11:1 ratio."""
        rng = np.random.default_rng(99)
        rooms = [_room(1, 0.0), _room(2, 1.0)]
        counts = {1: 0, 2: 0}
        for _ in range(12000):
            counts[select_weighted(rooms, discipline_weight, rng=rng).selected_id] += 1

        assert counts[2] > 0
        ratio = counts[1] / counts[2]
        assert 9.0 < ratio < 13.5

    def test_discipline_weight_never_zero(self):
        assert discipline_weight(_room(1, 1.0)) == pytest.approx(0.1)
        assert discipline_weight(_room(1, 0.0)) == pytest.approx(1.1)


class TestSelectMany:
    """Tests for draws without replacement."""

    def test_distinct_ids(self, rng):
        rooms = [_room(i, 0.5) for i in range(1, 9)]
        chosen = select_many(rooms, 5, discipline_weight, rng=rng)
        assert len(chosen) == 5
        assert len(set(chosen)) == 5

    def test_k_capped_at_candidate_count(self, rng):
        rooms = [_room(i, 0.5) for i in range(1, 4)]
        chosen = select_many(rooms, 10, discipline_weight, rng=rng)
        assert sorted(chosen) == [1, 2, 3]


class TestShuffled:
    """Tests for uniform shuffling."""

    def test_is_permutation(self, rng):
        items = list(range(48))
        result = shuffled(items, rng)
        assert sorted(result) == items
        assert items == list(range(48))
