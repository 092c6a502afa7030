"""
pattern_generator.py – Procedural tile patterns for the memory grid.

A pattern is an ordered list of distinct cell indices on an N×N grid,
cell ``i`` sitting at row ``i // N``, column ``i % N``.

Strategies:
- random      : full-grid shuffle, truncated
- sequential  : random walk over orthogonal neighbours (no row wrapping)
- shape       : line, diagonal, 2×2 square or plus-shaped cross

Every function takes the caller's ``random.Random``; nothing here keeps
state between calls, so a seeded RNG reproduces the same pattern.
"""

from __future__ import annotations

import logging
import random
from enum import Enum

logger = logging.getLogger(__name__)


class PatternStrategy(str, Enum):
    """How a pattern is laid out on the grid."""

    RANDOM = "random"
    SEQUENTIAL = "sequential"
    SHAPE = "shape"


# ══════════════════════════════════════════════════════════
#  Public API
# ══════════════════════════════════════════════════════════

def generate_pattern(grid_size: int, length: int,
                     strategy: PatternStrategy | str = PatternStrategy.RANDOM,
                     rng: random.Random | None = None) -> list[int]:
    """Return ``min(length, grid_size²)`` distinct cells laid out by *strategy*.

    Non-positive sizes give an empty pattern instead of raising.
    """
    rng = rng or random.Random()
    strategy = PatternStrategy(strategy)

    if grid_size < 1 or length < 1:
        return []
    length = min(length, grid_size * grid_size)

    if strategy is PatternStrategy.SEQUENTIAL:
        pattern = _sequential_pattern(grid_size, length, rng)
    elif strategy is PatternStrategy.SHAPE:
        pattern = _shape_pattern(grid_size, length, rng)
    else:
        pattern = random_pattern(grid_size, length, rng)

    logger.debug("Generated %s pattern on %dx%d grid: %s",
                 strategy.value, grid_size, grid_size, pattern)
    return pattern


def strategy_for_round(round_number: int) -> PatternStrategy:
    """Pattern style used as a match progresses: random → sequential → shape."""
    if round_number < 3:
        return PatternStrategy.RANDOM
    if round_number < 6:
        return PatternStrategy.SEQUENTIAL
    return PatternStrategy.SHAPE


def random_pattern(grid_size: int, length: int,
                   rng: random.Random) -> list[int]:
    """Uniform shuffle of every cell, first *length* kept."""
    cells = list(range(grid_size * grid_size))
    rng.shuffle(cells)
    return cells[:length]


def pad_with_random(pattern: list[int], grid_size: int, length: int,
                    rng: random.Random) -> list[int]:
    """Append unused random cells until *pattern* reaches *length* (in place)."""
    if len(pattern) >= length:
        return pattern
    used = set(pattern)
    spare = [c for c in random_pattern(grid_size, grid_size * grid_size, rng)
             if c not in used]
    pattern.extend(spare[:length - len(pattern)])
    return pattern


def neighbours(cell: int, grid_size: int) -> list[int]:
    """Orthogonal neighbours of *cell* (up, right, down, left) inside the grid."""
    total = grid_size * grid_size
    col = cell % grid_size
    result = []
    if cell - grid_size >= 0:
        result.append(cell - grid_size)
    if col != grid_size - 1:
        result.append(cell + 1)
    if cell + grid_size < total:
        result.append(cell + grid_size)
    if col != 0:
        result.append(cell - 1)
    return result


def walk_from(start: int, pattern: list[int], grid_size: int, length: int,
              rng: random.Random) -> list[int]:
    """Extend *pattern* by a random orthogonal walk beginning after *start*.

    Stops as soon as the walk is boxed in; the caller pads the rest.
    """
    current = start
    used = set(pattern)
    while len(pattern) < length:
        options = [n for n in neighbours(current, grid_size) if n not in used]
        if not options:
            break
        current = rng.choice(options)
        pattern.append(current)
        used.add(current)
    return pattern


# ══════════════════════════════════════════════════════════
#  Strategies
# ══════════════════════════════════════════════════════════

def _sequential_pattern(grid_size: int, length: int,
                        rng: random.Random) -> list[int]:
    start = rng.randrange(grid_size * grid_size)
    pattern = walk_from(start, [start], grid_size, length, rng)
    return pad_with_random(pattern, grid_size, length, rng)


def _shape_pattern(grid_size: int, length: int,
                   rng: random.Random) -> list[int]:
    # Small grids have no room for recognisable shapes
    if grid_size < 3:
        return random_pattern(grid_size, length, rng)

    shape_fn = rng.choice(_SHAPES)
    shape = shape_fn(grid_size, rng)
    if shape is None:
        return random_pattern(grid_size, length, rng)

    pattern = shape[:length]
    return pad_with_random(pattern, grid_size, length, rng)


# ── Shapes ────────────────────────────────────────────────
# Each returns the shape's cells, or None when the grid can't hold it.

def _line(grid_size: int, rng: random.Random) -> list[int] | None:
    index = rng.randrange(grid_size)
    if rng.random() < 0.5:
        return [index * grid_size + i for i in range(grid_size)]
    return [i * grid_size + index for i in range(grid_size)]


def _diagonal(grid_size: int, rng: random.Random) -> list[int] | None:
    if rng.random() < 0.5:
        return [i * grid_size + i for i in range(grid_size)]
    return [i * grid_size + (grid_size - 1 - i) for i in range(grid_size)]


def _square(grid_size: int, rng: random.Random) -> list[int] | None:
    if grid_size < 2:
        return None
    row = rng.randrange(grid_size - 1)
    col = rng.randrange(grid_size - 1)
    top_left = row * grid_size + col
    return [top_left, top_left + 1,
            top_left + grid_size, top_left + grid_size + 1]


def _cross(grid_size: int, rng: random.Random) -> list[int] | None:
    # Needs a true centre cell
    if grid_size < 3 or grid_size % 2 == 0:
        return None
    mid = grid_size // 2
    centre = mid * grid_size + mid
    return [centre, centre - grid_size, centre + 1,
            centre + grid_size, centre - 1]


_SHAPES = (_line, _diagonal, _square, _cross)
