"""Exclusive prefix sums and detection of adjacent repeated values."""

from __future__ import annotations

from itertools import accumulate, pairwise
from typing import Sequence


def exclusive_scan(values: Sequence[int]) -> list[int]:
    """Return the sums of all elements before each position."""
    if not values:
        return []
    return list(accumulate(values[:-1], initial=0))


def exclusive_scan_tree(values: Sequence[int]) -> list[int]:
    """Exclusive scan by the up-sweep/down-sweep tree method.

    The length must be a power of two (or zero).
    """
    n = len(values)
    if n & (n - 1):
        raise ValueError(f"length must be a power of two, got {n}")
    if n == 0:
        return []
    out = list(values)

    twod = 1
    while twod < n // 2:
        twod1 = 2 * twod
        for i in range(0, n, twod1):
            out[i + twod1 - 1] += out[i + twod - 1]
        twod *= 2

    out[n - 1] = 0

    twod = n // 2
    while twod >= 1:
        twod1 = 2 * twod
        for i in range(0, n, twod1):
            left = out[i + twod - 1]
            out[i + twod - 1] = out[i + twod1 - 1]
            out[i + twod1 - 1] += left
        twod //= 2
    return out


def find_repeats(values: Sequence[int]) -> list[int]:
    """Indices ``i`` where ``values[i] == values[i + 1]``, ascending."""
    return [i for i, (a, b) in enumerate(pairwise(values)) if a == b]