"""
Fisher-Yates shuffle.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """
    Return a uniformly random permutation of ``items`` as a new list.

    Walks from the last index down to 1, swapping each element with one drawn
    uniformly from ``[0, i]``. The input is not modified.
    """
    rng = rng or random
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result
