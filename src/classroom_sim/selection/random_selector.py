"""
Random Selector
===============

Weighted sampling without replacement over candidate records.

This module provides:
    - select_weighted: one cumulative-sum weighted draw with an exclusion set
    - select_many: k draws without replacement
    - shuffled: uniform permutation used by the seating engine
    - discipline_weight: the dashboard weight ``(1 - discipline) + 0.1``

Sampling:
    Weights are accumulated in candidate order and a single draw
    ``u ~ uniform(0, total_weight)`` selects the first candidate whose
    cumulative weight meets or exceeds ``u``.

Fallback:
    If the exclusion set removes every candidate, the FIRST ORIGINAL
    candidate is returned with ``FALLBACK_SELECTION`` so a tick always
    completes. An empty candidate list yields ``selected_id=None``.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, List, Optional, Sequence, TypeVar

import numpy as np

from classroom_sim.models.reason_codes import ConditionCode


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class SelectionResult:
    """Outcome of a weighted draw."""

    selected_id: Optional[Hashable]
    condition: ConditionCode = ConditionCode.OK


def discipline_weight(candidate) -> float:
    """Selection weight for a classroom; never zero, even at discipline 1.0."""
    return (1.0 - candidate.discipline) + 0.1


def _default_key(candidate) -> Hashable:
    return candidate.id


def select_weighted(
    candidates: Sequence[T],
    weight_fn: Callable[[T], float],
    exclude: Iterable[Hashable] = (),
    rng: Optional[np.random.Generator] = None,
    key: Callable[[T], Hashable] = _default_key,
) -> SelectionResult:
    """
    Pick one candidate id with probability proportional to its weight.

    Args:
        candidates: Candidate records in a stable order
        weight_fn: Non-negative weight of a candidate
        exclude: Ids that may not be picked
        rng: Random generator (a fresh unseeded one if None)
        key: Maps a candidate to its id

    Returns:
        SelectionResult with the chosen id and condition code
    """
    if not candidates:
        logger.warning("Weighted selection called with no candidates")
        return SelectionResult(selected_id=None, condition=ConditionCode.INVALID_REFERENCE)

    if rng is None:
        rng = np.random.default_rng()

    excluded = set(exclude)
    available = [c for c in candidates if key(c) not in excluded]

    if not available:
        logger.debug("All candidates excluded, falling back to first candidate")
        return SelectionResult(
            selected_id=key(candidates[0]),
            condition=ConditionCode.FALLBACK_SELECTION,
        )

    weights = np.array([weight_fn(c) for c in available], dtype=float)
    if np.any(weights < 0):
        raise ValueError("weights must be non-negative")

    total = float(weights.sum())
    if total <= 0:
        return SelectionResult(selected_id=key(available[0]))

    cumulative = np.cumsum(weights)
    draw = rng.uniform(0.0, total)
    index = int(np.searchsorted(cumulative, draw, side="left"))
    # Float rounding can put the draw just past the last bucket
    index = min(index, len(available) - 1)

    return SelectionResult(selected_id=key(available[index]))


def select_many(
    candidates: Sequence[T],
    k: int,
    weight_fn: Callable[[T], float],
    rng: Optional[np.random.Generator] = None,
    key: Callable[[T], Hashable] = _default_key,
) -> List[Hashable]:
    """
    Draw up to k distinct ids without replacement.

    Stops early once every candidate has been drawn.
    """
    if rng is None:
        rng = np.random.default_rng()

    chosen: List[Hashable] = []
    for _ in range(min(k, len(candidates))):
        result = select_weighted(candidates, weight_fn, exclude=chosen, rng=rng, key=key)
        if result.condition != ConditionCode.OK:
            break
        chosen.append(result.selected_id)
    return chosen


def shuffled(items: Sequence[T], rng: Optional[np.random.Generator] = None) -> List[T]:
    """Uniformly random permutation of items (input untouched)."""
    if rng is None:
        rng = np.random.default_rng()
    order = rng.permutation(len(items))
    return [items[i] for i in order]
