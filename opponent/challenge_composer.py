"""
challenge_composer.py – Patterns built to exploit the player's weak spots.

"targeted" strategy (default):
  1. Seed with the cells the player has got wrong most often.
  2. Fill with whichever structure the player handles worse: a sequential
     walk when sequence memory is the weaker factor, otherwise a tight
     cluster around a random centre.
  3. Pad with unused random cells.

Any plain generator strategy ("random", "sequential", "shape") is passed
straight to the pattern generator.

An optional difficulty above 0.5 scrambles the order with a few random
swaps so neat structures are harder to read.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass

from opponent.opponent_state import OpponentState
from systems.pattern_generator import (
    PatternStrategy, generate_pattern, pad_with_random, walk_from,
)

logger = logging.getLogger(__name__)

TARGETED = "targeted"


@dataclass
class ChallengeConfig:
    """Tunables for challenge composition."""

    swap_threshold: float = 0.5      # difficulty above this starts swapping
    swaps_per_unit: float = 4.0      # floor((difficulty - 0.5) × 4) swaps
    min_length_for_swaps: int = 4


class ChallengeComposer:
    """Builds the next pattern from what the opponent has learned."""

    def __init__(self, config: ChallengeConfig | None = None,
                 rng: random.Random | None = None):
        self.cfg = config or ChallengeConfig()
        self.rng = rng or random.Random()

    def compose_challenge(self, state: OpponentState, length: int, grid_size: int,
                          strategy: str = TARGETED,
                          difficulty: float | None = None) -> list[int]:
        if grid_size < 1 or length < 1:
            return []
        length = min(length, grid_size * grid_size)

        if strategy == TARGETED:
            pattern = self._targeted(state, length, grid_size)
        else:
            pattern = generate_pattern(grid_size, length,
                                       PatternStrategy(strategy), self.rng)

        if difficulty is not None:
            self._scramble(pattern, difficulty)

        logger.debug("Challenge (%s, difficulty=%s): %s", strategy, difficulty, pattern)
        return pattern

    # ── Targeted composition ──────────────────────────────

    def _targeted(self, state: OpponentState, length: int,
                  grid_size: int) -> list[int]:
        pattern = most_mistaken_cells(state, grid_size)[:length]

        if len(pattern) < length:
            factors = state.adaptive_factors
            if factors.sequence_memory <= factors.spatial_memory:
                self._fill_sequential(pattern, grid_size, length)
            else:
                self._fill_cluster(pattern, grid_size, length)

        return pad_with_random(pattern, grid_size, length, self.rng)

    def _fill_sequential(self, pattern: list[int], grid_size: int, length: int):
        if pattern:
            start = pattern[-1]
        else:
            start = self.rng.randrange(grid_size * grid_size)
            pattern.append(start)
        walk_from(start, pattern, grid_size, length, self.rng)

    def _fill_cluster(self, pattern: list[int], grid_size: int, length: int):
        centre = self.rng.randrange(grid_size * grid_size)
        crow, ccol = divmod(centre, grid_size)

        # Group free cells into Chebyshev rings around the centre
        rings: dict[int, list[int]] = {}
        used = set(pattern)
        for cell in range(grid_size * grid_size):
            if cell in used:
                continue
            row, col = divmod(cell, grid_size)
            rings.setdefault(max(abs(row - crow), abs(col - ccol)), []).append(cell)

        for distance in sorted(rings):
            ring = rings[distance]
            self.rng.shuffle(ring)
            for cell in ring:
                if len(pattern) >= length:
                    return
                pattern.append(cell)

    # ── Difficulty scramble ───────────────────────────────

    def _scramble(self, pattern: list[int], difficulty: float):
        cfg = self.cfg
        if difficulty <= cfg.swap_threshold or len(pattern) < cfg.min_length_for_swaps:
            return
        swaps = math.floor((difficulty - cfg.swap_threshold) * cfg.swaps_per_unit)
        for _ in range(swaps):
            i = self.rng.randrange(len(pattern))
            j = self.rng.randrange(len(pattern))
            pattern[i], pattern[j] = pattern[j], pattern[i]


def most_mistaken_cells(state: OpponentState, grid_size: int) -> list[int]:
    """In-grid cells ordered by mistake count, highest first (ties by index)."""
    total = grid_size * grid_size
    ranked = sorted(state.mistake_frequency.items(), key=lambda kv: (-kv[1], kv[0]))
    return [cell for cell, count in ranked if 0 <= cell < total and count > 0]
