"""Random selection helpers shared by the content selector."""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

_T = TypeVar("_T")


def fisher_yates_shuffle(items: Sequence[_T], rng: random.Random | None = None) -> list[_T]:
    """Return a uniformly shuffled copy of *items*.

    The input is never mutated, so callers can shuffle a cached or shared
    sequence without affecting other readers.
    """
    rng = rng or random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def sample_without_replacement(
    items: Sequence[_T], count: int, rng: random.Random | None = None
) -> list[_T]:
    """Shuffle *items* and return the first ``min(count, len(items))``."""
    return fisher_yates_shuffle(items, rng)[: max(count, 0)]
