"""
recall_simulator.py – The opponent's attempt to reproduce a pattern.

Effective accuracy (the chance of keeping any one cell) starts at the
opponent's base accuracy and is folded through a fixed list of
adjustment steps:

  1. level penalty          – later levels are harder
  2. repetition bonus       – similar patterns seen before
  3. pattern recognition    – personality trait × adaptive factor
  4. consistency shrinkage  – steady personalities hug base accuracy
  5. cross-dimension bonus  – player is strong at this grid size / length
  6. risk jitter            – zero-mean noise scaled by risk trait

The result is clamped to 0.10–0.95. Each cell is then kept or forgotten
independently; forgotten cells are replaced with plausible wrong ones.

Usage:
    sim = RecallSimulator(rng=random.Random(7))
    guess = sim.attempt_recall(pattern, grid_size, level, state)
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from functools import reduce
from typing import Callable

from settings import EFFECTIVE_ACCURACY_MIN, EFFECTIVE_ACCURACY_MAX
from opponent.opponent_state import OpponentState, _clamp

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Configuration
# ══════════════════════════════════════════════════════════

@dataclass
class RecallConfig:
    """Tunables for the recall simulation."""

    level_penalty_per_level: float = 0.02
    level_penalty_max: float = 0.30

    similarity_share: float = 0.5            # shared-cell fraction to count as "seen"
    repetition_bonus_max: float = 0.20

    pattern_recognition_weight: float = 0.05

    transfer_rate_threshold: float = 0.70    # player rate that triggers transfer
    transfer_bonus: float = 0.03             # × spatial / sequence factor

    risk_jitter_span: float = 0.20           # full width of jitter at risk 1.0

    outside_error_preference: float = 0.70   # wrong cells prefer non-pattern cells


@dataclass
class RecallContext:
    """Read-only inputs shared by every accuracy step."""

    pattern: list[int]
    grid_size: int
    level: int
    state: OpponentState
    cfg: RecallConfig
    rng: random.Random


AccuracyStep = Callable[[float, RecallContext], float]


# ══════════════════════════════════════════════════════════
#  Accuracy steps
# ══════════════════════════════════════════════════════════

def level_penalty(value: float, ctx: RecallContext) -> float:
    cfg = ctx.cfg
    return value - min(cfg.level_penalty_max,
                       max(0, ctx.level - 1) * cfg.level_penalty_per_level)


def count_similar_patterns(pattern: list[int], history: list[list[int]],
                           share: float = 0.5) -> int:
    """How many *history* entries contain at least *share* of *pattern*'s cells.

    *history* must not include the round being simulated.
    """
    cells = set(pattern)
    needed = len(pattern) * share
    return sum(1 for past in history
               if sum(1 for c in past if c in cells) >= needed)


def repetition_bonus(value: float, ctx: RecallContext) -> float:
    similar = count_similar_patterns(ctx.pattern, ctx.state.pattern_history,
                                     ctx.cfg.similarity_share)
    return value + min(ctx.cfg.repetition_bonus_max,
                       similar * ctx.state.learning_rate)


def pattern_recognition_bonus(value: float, ctx: RecallContext) -> float:
    trait = ctx.state.traits.pattern_recognition
    factor = ctx.state.adaptive_factors.pattern_recognition
    return value + trait * ctx.cfg.pattern_recognition_weight * factor


def consistency_shrinkage(value: float, ctx: RecallContext) -> float:
    consistency = ctx.state.traits.consistency
    if consistency <= 0:
        return value
    base = ctx.state.base_accuracy
    return value + (base - value) * consistency


def cross_dimension_transfer(value: float, ctx: RecallContext) -> float:
    state, cfg = ctx.state, ctx.cfg
    grid_stats = state.performance_by_grid_size.get(ctx.grid_size)
    if grid_stats and grid_stats.rate > cfg.transfer_rate_threshold:
        value += cfg.transfer_bonus * state.adaptive_factors.spatial_memory
    length_stats = state.performance_by_pattern_length.get(len(ctx.pattern))
    if length_stats and length_stats.rate > cfg.transfer_rate_threshold:
        value += cfg.transfer_bonus * state.adaptive_factors.sequence_memory
    return value


def risk_jitter(value: float, ctx: RecallContext) -> float:
    risk = ctx.state.traits.risk_taking
    if risk <= 0:
        return value
    return value + (ctx.rng.random() - 0.5) * ctx.cfg.risk_jitter_span * risk


ACCURACY_STEPS: tuple[AccuracyStep, ...] = (
    level_penalty,
    repetition_bonus,
    pattern_recognition_bonus,
    consistency_shrinkage,
    cross_dimension_transfer,
    risk_jitter,
)


# ══════════════════════════════════════════════════════════
#  Recall Simulator
# ══════════════════════════════════════════════════════════

class RecallSimulator:
    """Produces the opponent's noisy guess for a displayed pattern."""

    def __init__(self, config: RecallConfig | None = None,
                 rng: random.Random | None = None,
                 steps: tuple[AccuracyStep, ...] = ACCURACY_STEPS):
        self.cfg = config or RecallConfig()
        self.rng = rng or random.Random()
        self.steps = steps

    def effective_accuracy(self, pattern: list[int], grid_size: int,
                           level: int, state: OpponentState) -> float:
        """Fold the accuracy steps over base accuracy, clamped to 0.10–0.95."""
        ctx = RecallContext(pattern=pattern, grid_size=grid_size, level=level,
                            state=state, cfg=self.cfg, rng=self.rng)
        value = reduce(lambda acc, step: step(acc, ctx), self.steps,
                       state.base_accuracy)
        return _clamp(value, EFFECTIVE_ACCURACY_MIN, EFFECTIVE_ACCURACY_MAX)

    def attempt_recall(self, pattern: list[int], grid_size: int, level: int,
                       state: OpponentState,
                       response_time_ms: float | None = None) -> list[int]:
        """Return a guess with as many distinct cells as *pattern*.

        The pattern joins the opponent's history after the guess is made.
        *response_time_ms* is only logged; timing reaches the opponent
        through recorded outcomes.
        """
        if not pattern:
            return []

        accuracy = self.effective_accuracy(pattern, grid_size, level, state)
        state.pattern_history.append(list(pattern))

        guess = self._noisy_copy(pattern, grid_size, accuracy)
        logger.debug(
            "Recall: level=%d acc=%.3f pattern=%s guess=%s player_time=%s",
            level, accuracy, pattern, guess, response_time_ms,
        )
        return guess

    # ── Internal helpers ──────────────────────────────────

    def _noisy_copy(self, pattern: list[int], grid_size: int,
                    accuracy: float) -> list[int]:
        rng = self.rng
        guess = [cell for cell in pattern if rng.random() < accuracy]

        in_pattern = set(pattern)
        taken = set(guess)
        cells = set(range(grid_size * grid_size)) | in_pattern
        while len(guess) < len(pattern):
            free = sorted(cells - taken)
            if not free:
                break
            outside = [c for c in free if c not in in_pattern]
            if outside and rng.random() < self.cfg.outside_error_preference:
                cell = rng.choice(outside)
            else:
                cell = rng.choice(free)
            guess.append(cell)
            taken.add(cell)

        rng.shuffle(guess)
        return guess
