"""
memory_opponent.py – The simulated competitor, wiring state and sub-systems.

Architecture:
    memory_opponent.MemoryOpponent
      ├── opponent_state.OpponentState            (all mutable data)
      ├── recall_simulator.RecallSimulator        (noisy reproduction)
      ├── outcome_recorder.OutcomeRecorder        (learns from the player)
      ├── difficulty_adjuster.DifficultyAdjuster  (between-round tuning)
      └── challenge_composer.ChallengeComposer    (weakness-targeting patterns)

Sub-systems never hold state of their own; the opponent owns the one
``OpponentState`` and hands it to each of them. All randomness comes from
the single RNG passed in, so a seeded opponent replays identically.

Call order per round: ``record_outcome`` for the player first, then
``attempt_recall`` for the same pattern, then ``recalibrate``.
"""

from __future__ import annotations

import logging
import random

from opponent.opponent_state import DifficultyTier, OpponentState, Personality
from opponent.recall_simulator import RecallConfig, RecallSimulator
from opponent.outcome_recorder import OutcomeRecorder, RecorderConfig, RoundMetadata
from opponent.difficulty_adjuster import AdjusterConfig, DifficultyAdjuster, PlayerStats
from opponent.challenge_composer import ChallengeComposer, ChallengeConfig, TARGETED

logger = logging.getLogger(__name__)

# Number of cells listed in the mistake / success breakdowns
TOP_CELLS = 5


class MemoryOpponent:
    """Adaptive memory-game opponent.

    Usage:
        opp = MemoryOpponent("self_adjusting", "fast_adapting", rng=random.Random(3))
        opp.record_outcome(False, pattern, player_cells, RoundMetadata(grid_size=4))
        guess = opp.attempt_recall(pattern, grid_size=4, level=2)
        opp.recalibrate(player_rate, PlayerStats(level=2))
        stats = opp.get_stats(detailed=True)
    """

    def __init__(self, difficulty: DifficultyTier | str = DifficultyTier.MEDIUM,
                 personality: Personality | str = Personality.BALANCED,
                 rng: random.Random | None = None,
                 state: OpponentState | None = None,
                 recall_config: RecallConfig | None = None,
                 recorder_config: RecorderConfig | None = None,
                 adjuster_config: AdjusterConfig | None = None,
                 challenge_config: ChallengeConfig | None = None):
        self.rng = rng or random.Random()
        self.state = state or OpponentState(
            difficulty_tier=DifficultyTier(difficulty),
            personality=Personality(personality),
        )

        self.recall = RecallSimulator(config=recall_config, rng=self.rng)
        self.recorder = OutcomeRecorder(config=recorder_config)
        self.adjuster = DifficultyAdjuster(config=adjuster_config)
        self.composer = ChallengeComposer(config=challenge_config, rng=self.rng)

        logger.debug("Opponent ready: tier=%s personality=%s acc=%.2f",
                     self.state.difficulty_tier.value, self.state.personality.value,
                     self.state.base_accuracy)

    # ── Properties ────────────────────────────────────────

    @property
    def difficulty_tier(self) -> DifficultyTier:
        return self.state.difficulty_tier

    @property
    def personality(self) -> Personality:
        return self.state.personality

    @property
    def base_accuracy(self) -> float:
        return self.state.base_accuracy

    @property
    def consecutive_correct(self) -> int:
        return self.state.consecutive_correct

    @property
    def success_rate(self) -> float:
        return self.state.success_rate

    # ══════════════════════════════════════════════════════
    #  Engine operations
    # ══════════════════════════════════════════════════════

    def attempt_recall(self, pattern: list[int], grid_size: int, level: int = 1,
                       response_time_ms: float | None = None) -> list[int]:
        return self.recall.attempt_recall(pattern, grid_size, level, self.state,
                                          response_time_ms)

    def record_outcome(self, success: bool, pattern: list[int],
                       submission: list[int] | None,
                       metadata: RoundMetadata | None = None):
        self.recorder.record_outcome(self.state, success, pattern, submission, metadata)

    def recalibrate(self, player_success_rate: float,
                    player_stats: PlayerStats | None = None):
        self.adjuster.recalibrate(self.state, player_success_rate, player_stats)

    def compose_challenge(self, length: int, grid_size: int,
                          strategy: str = TARGETED,
                          difficulty: float | None = None) -> list[int]:
        return self.composer.compose_challenge(self.state, length, grid_size,
                                               strategy, difficulty)

    # ══════════════════════════════════════════════════════
    #  Statistics snapshot
    # ══════════════════════════════════════════════════════

    def get_stats(self, detailed: bool = False) -> dict:
        """Fresh read-only summary of the opponent (safe to mutate)."""
        s = self.state
        stats = {
            "difficulty": s.difficulty_tier.value,
            "personality": s.personality.value,
            "base_accuracy": s.base_accuracy,
            "learning_rate": s.learning_rate,
            "total_attempts": s.total_attempts,
            "correct_attempts": s.correct_attempts,
            "success_rate": s.success_rate,
            "consecutive_correct": s.consecutive_correct,
            "learning_progress": s.learning_progress,
            "patterns_seen": len(s.pattern_history),
        }
        if not detailed:
            return stats

        stats["adaptive_factors"] = s.adaptive_factors.as_dict()
        stats["player_performance"] = {
            "by_grid_size": {k: v.as_dict() for k, v in
                             sorted(s.performance_by_grid_size.items())},
            "by_pattern_length": {k: v.as_dict() for k, v in
                                  sorted(s.performance_by_pattern_length.items())},
        }
        stats["common_mistakes"] = _top_cells(s.mistake_frequency)
        stats["common_successes"] = _top_cells(s.success_frequency)
        return stats

    # ══════════════════════════════════════════════════════
    #  Reset
    # ══════════════════════════════════════════════════════

    def reset(self):
        """Forget everything learned (new match, same tier and personality)."""
        self.state = OpponentState(difficulty_tier=self.state.difficulty_tier,
                                   personality=self.state.personality)


def _top_cells(frequency: dict[int, int], n: int = TOP_CELLS) -> list[dict]:
    ranked = sorted(frequency.items(), key=lambda kv: (-kv[1], kv[0]))[:n]
    return [{"cell": cell, "count": count} for cell, count in ranked]
