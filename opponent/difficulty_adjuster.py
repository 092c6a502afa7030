"""
difficulty_adjuster.py – Between-round recalibration of the opponent.

Only the self-adjusting tier is touched. Four independent signals each
propose a change to base accuracy and learning rate:

  Player success rate  > 0.8 → opponent sharpens,  < 0.4 → eases up
  Player response time faster than history → sharpens, much slower → eases
  Player level above 5 → progressively sharper
  Player streak above 3 → sharper

The proposals are summed, scaled by the personality's adaptation speed,
and applied through the state's clamped setters.

A trend scan over the per-dimension tables then lets the opponent
specialise: if the player is clearly worse at larger grids (or longer
patterns) the matching memory factor grows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from opponent.opponent_state import DimensionStats, OpponentState

logger = logging.getLogger(__name__)


@dataclass
class PlayerStats:
    """Aggregate player figures the match keeps."""

    average_response_time_ms: float | None = None   # recent pace, not all-time
    level: int = 1
    consecutive_correct: int = 0


# ══════════════════════════════════════════════════════════
#  Configuration
# ══════════════════════════════════════════════════════════

@dataclass
class AdjusterConfig:
    """Thresholds and step sizes for recalibration."""

    # Success rate
    harder_rate: float = 0.8
    easier_rate: float = 0.4
    rate_accuracy_step: float = 0.05
    rate_learning_step: float = 0.01

    # Response-time ratio (player average / historical average)
    fast_ratio: float = 0.8
    slow_ratio: float = 1.5
    speed_accuracy_step: float = 0.02
    speed_learning_step: float = 0.005

    # Level
    level_threshold: int = 5
    level_step: float = 0.01
    level_max: float = 0.05

    # Streak
    streak_threshold: int = 3
    streak_step: float = 0.01
    streak_max: float = 0.05
    streak_learning_step: float = 0.005

    # Trend scan
    trend_spread: float = 0.3
    trend_factor_boost: float = 0.05


class DifficultyAdjuster:
    """Recalibrates a self-adjusting opponent from aggregate player performance."""

    def __init__(self, config: AdjusterConfig | None = None):
        self.cfg = config or AdjusterConfig()

    def recalibrate(self, state: OpponentState, player_success_rate: float,
                    player_stats: PlayerStats | None = None):
        if not state.is_self_adjusting:
            return
        stats = player_stats or PlayerStats()

        signals = (
            self._success_signal(player_success_rate),
            self._speed_signal(state, stats.average_response_time_ms),
            self._level_signal(stats.level),
            self._streak_signal(stats.consecutive_correct),
        )
        d_acc = sum(s[0] for s in signals)
        d_rate = sum(s[1] for s in signals)

        speed = 1.0 + state.traits.adaptation_speed
        state.shift_accuracy(d_acc * speed)
        state.shift_learning_rate(d_rate * speed)

        self._trend_scan(state)

        logger.debug(
            "Recalibrated: player_rate=%.2f d_acc=%+.3f d_rate=%+.4f → acc=%.3f lr=%.3f",
            player_success_rate, d_acc * speed, d_rate * speed,
            state.base_accuracy, state.learning_rate,
        )

    # ── Signals: each returns (accuracy delta, learning-rate delta) ──

    def _success_signal(self, rate: float) -> tuple[float, float]:
        cfg = self.cfg
        if rate > cfg.harder_rate:
            return cfg.rate_accuracy_step, cfg.rate_learning_step
        if rate < cfg.easier_rate:
            return -cfg.rate_accuracy_step, -cfg.rate_learning_step
        return 0.0, 0.0

    def _speed_signal(self, state: OpponentState,
                      player_avg_ms: float | None) -> tuple[float, float]:
        cfg = self.cfg
        history_avg = state.average_response_time_ms
        if not player_avg_ms or not history_avg:
            return 0.0, 0.0
        ratio = player_avg_ms / history_avg
        if ratio < cfg.fast_ratio:
            return cfg.speed_accuracy_step, cfg.speed_learning_step
        if ratio > cfg.slow_ratio:
            return -cfg.speed_accuracy_step, 0.0
        return 0.0, 0.0

    def _level_signal(self, level: int) -> tuple[float, float]:
        cfg = self.cfg
        if level <= cfg.level_threshold:
            return 0.0, 0.0
        return min(cfg.level_max, (level - cfg.level_threshold) * cfg.level_step), 0.0

    def _streak_signal(self, streak: int) -> tuple[float, float]:
        cfg = self.cfg
        if streak <= cfg.streak_threshold:
            return 0.0, 0.0
        bonus = min(cfg.streak_max, (streak - cfg.streak_threshold) * cfg.streak_step)
        return bonus, cfg.streak_learning_step

    # ── Specialisation ────────────────────────────────────

    def _trend_scan(self, state: OpponentState):
        tables = (
            (state.performance_by_grid_size, "spatial_memory"),
            (state.performance_by_pattern_length, "sequence_memory"),
        )
        for table, factor in tables:
            if self._weaker_at_larger(table):
                value = state.adaptive_factors.nudge(factor, self.cfg.trend_factor_boost)
                logger.debug("Trend: player weaker at larger values, %s → %.2f",
                             factor, value)

    def _weaker_at_larger(self, table: dict[int, DimensionStats]) -> bool:
        seen = [(key, s.rate) for key, s in table.items() if s.attempts > 0]
        if len(seen) < 2:
            return False
        best_key, best_rate = max(seen, key=lambda kv: kv[1])
        worst_key, worst_rate = min(seen, key=lambda kv: kv[1])
        return best_rate - worst_rate > self.cfg.trend_spread and worst_key > best_key
