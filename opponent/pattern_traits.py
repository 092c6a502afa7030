"""
pattern_traits.py – Cheap structural classification of a pattern.

Two classes matter to the opponent:

  sequential – most consecutive cells are index neighbours
  clustered  – cells sit close together by index

Both work on raw index arithmetic, not row/column geometry. Cells 2 and 3
on a 3-wide grid count as neighbours even though 2 ends a row and 3 starts
the next one. The difficulty adjuster's specialisation depends on this
exact behaviour, so keep it.
"""

from __future__ import annotations

import numpy as np

# Mean pairwise index distance below which a pattern counts as clustered
CLUSTER_DISTANCE_THRESHOLD = 4.0


def is_sequential(pattern: list[int], grid_size: int) -> bool:
    """At least half of consecutive pairs differ by 1 or by *grid_size*."""
    if len(pattern) < 2:
        return False
    steps = [abs(b - a) for a, b in zip(pattern, pattern[1:])]
    adjacent = sum(1 for s in steps if s == 1 or s == grid_size)
    return adjacent >= len(steps) / 2


def is_clustered(pattern: list[int],
                 threshold: float = CLUSTER_DISTANCE_THRESHOLD) -> bool:
    """Mean absolute index difference over all cell pairs is below *threshold*."""
    if len(pattern) < 2:
        return False
    cells = np.asarray(pattern, dtype=float)
    diffs = np.abs(np.subtract.outer(cells, cells))
    upper = diffs[np.triu_indices(len(cells), k=1)]
    return float(upper.mean()) < threshold
