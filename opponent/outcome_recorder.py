"""
outcome_recorder.py – Learns from how the player did on each round.

After the player submits, the recorder:
  - bumps attempt / streak counters
  - records a hit or miss for the round's grid size and pattern length
  - counts which cells the player got right, missed, or added by mistake
  - (self-adjusting tier) moves base accuracy with the streak
  - sharpens or dulls the adaptive factors

Nothing here touches the player's score or the opponent's guess.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from opponent.opponent_state import OpponentState
from opponent.pattern_traits import is_clustered, is_sequential

logger = logging.getLogger(__name__)


@dataclass
class RoundMetadata:
    """What the caller measured for the round."""

    grid_size: int | None = None
    response_time_ms: float | None = None
    level: int = 1


@dataclass
class RecorderConfig:
    """Step sizes for outcome-driven adjustment."""

    success_accuracy_step: float = 0.01     # × streak × (1 + adaptation)
    failure_accuracy_step: float = 0.02     # × (1 + adaptation)

    factor_boost: float = 0.05
    factor_decay: float = 0.02              # applied to every other factor on failure

    progress_per_success: float = 0.10
    progress_per_failure: float = 0.15      # mistakes teach more


class OutcomeRecorder:
    """Folds one round's result into an ``OpponentState``."""

    def __init__(self, config: RecorderConfig | None = None):
        self.cfg = config or RecorderConfig()

    def record_outcome(self, state: OpponentState, success: bool,
                       pattern: list[int], submission: list[int] | None,
                       metadata: RoundMetadata | None = None):
        meta = metadata or RoundMetadata()
        submission = submission or []

        prior_avg_time = state.average_response_time_ms
        state.total_attempts += 1
        if meta.response_time_ms is not None:
            state.response_times_ms.append(float(meta.response_time_ms))

        self._record_dimensions(state, success, pattern, meta.grid_size)

        if success:
            self._on_success(state, pattern, meta, prior_avg_time)
        else:
            self._on_failure(state, pattern, submission)

        state.accuracy_history.append(state.base_accuracy)

        logger.debug(
            "Outcome %s: attempts=%d/%d streak=%d acc=%.3f",
            "hit" if success else "miss", state.correct_attempts,
            state.total_attempts, state.consecutive_correct, state.base_accuracy,
        )

    # ── Success / failure ─────────────────────────────────

    def _on_success(self, state: OpponentState, pattern: list[int],
                    meta: RoundMetadata, prior_avg_time: float | None):
        cfg = self.cfg
        state.correct_attempts += 1
        state.consecutive_correct += 1

        for cell in pattern:
            state.success_frequency[cell] = state.success_frequency.get(cell, 0) + 1

        if state.is_self_adjusting:
            speed = 1.0 + state.traits.adaptation_speed
            state.shift_accuracy(cfg.success_accuracy_step
                                 * state.consecutive_correct * speed)

        factors = state.adaptive_factors
        factors.nudge("pattern_recognition", cfg.factor_boost)
        if meta.grid_size and is_sequential(pattern, meta.grid_size):
            factors.nudge("sequence_memory", cfg.factor_boost)
        if is_clustered(pattern):
            factors.nudge("spatial_memory", cfg.factor_boost)
        if (meta.response_time_ms is not None and prior_avg_time is not None
                and meta.response_time_ms < prior_avg_time):
            factors.nudge("reaction_speed", cfg.factor_boost)

        state.learning_progress += cfg.progress_per_success

    def _on_failure(self, state: OpponentState, pattern: list[int],
                    submission: list[int]):
        cfg = self.cfg
        state.consecutive_correct = 0

        for cell in mistaken_cells(pattern, submission):
            state.mistake_frequency[cell] = state.mistake_frequency.get(cell, 0) + 1

        if state.is_self_adjusting:
            speed = 1.0 + state.traits.adaptation_speed
            state.shift_accuracy(-cfg.failure_accuracy_step * speed)

        # Refocus: recovery sharpens, everything else loosens a little
        factors = state.adaptive_factors
        for name in factors.names():
            if name == "error_recovery":
                factors.nudge(name, cfg.factor_boost)
            else:
                factors.nudge(name, -cfg.factor_decay)

        state.learning_progress += cfg.progress_per_failure

    @staticmethod
    def _record_dimensions(state: OpponentState, success: bool,
                           pattern: list[int], grid_size: int | None):
        if grid_size is not None:
            state.grid_size_stats(grid_size).record(success)
        if pattern:
            state.pattern_length_stats(len(pattern)).record(success)


def mistaken_cells(pattern: list[int], submission: list[int]) -> list[int]:
    """Cells the player missed, followed by cells they picked wrongly."""
    target = set(pattern)
    picked = set(submission)
    missed = [c for c in pattern if c not in picked]
    spurious = [c for c in dict.fromkeys(submission) if c not in target]
    return missed + spurious
