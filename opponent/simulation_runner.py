"""
simulation_runner.py – Automated opponent-vs-opponent duels.

Runs N headless matches in which a fixed-tier ``MemoryOpponent`` plays
the human's side. Useful for checking how a tier / personality behaves
over many rounds without anyone at the keyboard.

Usage (from CLI):
    python main.py --matches 50 --rounds 12 --tier self_adjusting

Architecture:
    SimulationRunner drives ``systems.match.MemoryMatch`` exactly as an
    interactive front-end would: next_pattern() → stand-in guess →
    submit(). No engine logic is duplicated here.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

import numpy as np

from settings import SIM_RESPONSE_TIME_RANGE_MS
from opponent.memory_opponent import MemoryOpponent
from opponent.opponent_state import OpponentState
from systems.match import MatchConfig, MemoryMatch

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Per-match result
# ══════════════════════════════════════════════════════════

@dataclass
class MatchResult:
    """Lightweight record for one simulated match."""
    match_number: int = 0
    winner: str = ""               # "player" | "opponent" | "draw"
    player_score: int = 0
    opponent_score: int = 0
    player_rounds: int = 0         # rounds answered correctly
    opponent_rounds: int = 0
    final_accuracy: float = 0.0
    final_level: int = 1


# ══════════════════════════════════════════════════════════
#  Simulation Runner
# ══════════════════════════════════════════════════════════

class SimulationRunner:
    """Run *n_matches* duels of *n_rounds* each.

    Parameters
    ----------
    tier, personality : str
        Configuration of the opponent under test.
    player_tier : str
        Fixed tier of the stand-in that plays the human's side.
    state : OpponentState, optional
        Carry this learned state through every match instead of
        starting each match fresh.
    """

    def __init__(self, n_matches: int = 10, n_rounds: int = 12,
                 tier: str = "self_adjusting", personality: str = "balanced",
                 player_tier: str = "medium", seed: int | None = None,
                 state: OpponentState | None = None,
                 match_config: MatchConfig | None = None) -> None:
        self._n_matches = max(1, n_matches)
        self._n_rounds = max(1, n_rounds)
        self._tier = tier
        self._personality = personality
        self._player_tier = player_tier
        self._rng = random.Random(seed)
        self._match_config = match_config or MatchConfig(challenge_every=4)
        self._results: list[MatchResult] = []

        self.state = state
        self.last_opponent: MemoryOpponent | None = None

    # ── Public entry point ────────────────────────────────

    def run(self) -> list[MatchResult]:
        """Play every match, log a summary and return the results."""
        for i in range(1, self._n_matches + 1):
            result = self._run_one_match(i)
            self._results.append(result)
            logger.info(
                "Match %d: winner=%s  score=%d-%d  rounds=%d-%d  acc=%.3f  level=%d",
                i, result.winner, result.player_score, result.opponent_score,
                result.player_rounds, result.opponent_rounds,
                result.final_accuracy, result.final_level,
            )
        self._log_summary()
        return self._results

    # ── Single match ──────────────────────────────────────

    def _run_one_match(self, match_number: int) -> MatchResult:
        opponent = MemoryOpponent(self._tier, self._personality,
                                  rng=self._rng, state=self.state)
        stand_in = MemoryOpponent(self._player_tier, "steady", rng=self._rng)
        match = MemoryMatch(opponent, rng=self._rng, config=self._match_config)

        low, high = SIM_RESPONSE_TIME_RANGE_MS
        for _ in range(self._n_rounds):
            pattern = match.next_pattern()
            selection = stand_in.attempt_recall(pattern, match.grid_size, match.level)
            match.submit(selection, self._rng.uniform(low, high))

        self.last_opponent = opponent
        if self.state is not None:
            self.state = opponent.state

        if match.player_score > match.opponent_score:
            winner = "player"
        elif match.opponent_score > match.player_score:
            winner = "opponent"
        else:
            winner = "draw"

        return MatchResult(
            match_number=match_number,
            winner=winner,
            player_score=match.player_score,
            opponent_score=match.opponent_score,
            player_rounds=sum(1 for r in match.results if r.player_correct),
            opponent_rounds=sum(1 for r in match.results if r.opponent_correct),
            final_accuracy=opponent.base_accuracy,
            final_level=match.level,
        )

    # ── Summary ───────────────────────────────────────────

    def summary(self) -> dict:
        """Aggregate figures over all finished matches."""
        n = len(self._results)
        if n == 0:
            return {"matches": 0}
        acc = np.array([r.final_accuracy for r in self._results])
        p_scores = np.array([r.player_score for r in self._results])
        o_scores = np.array([r.opponent_score for r in self._results])
        return {
            "matches": n,
            "player_wins": sum(1 for r in self._results if r.winner == "player"),
            "opponent_wins": sum(1 for r in self._results if r.winner == "opponent"),
            "draws": sum(1 for r in self._results if r.winner == "draw"),
            "accuracy_mean": float(acc.mean()),
            "accuracy_std": float(acc.std()),
            "player_score_mean": float(p_scores.mean()),
            "opponent_score_mean": float(o_scores.mean()),
        }

    def _log_summary(self) -> None:
        s = self.summary()
        n = s["matches"]
        logger.info("=" * 58)
        logger.info("Simulation Results (%d matches) – %s / %s vs %s stand-in",
                    n, self._tier, self._personality, self._player_tier)
        logger.info("Player wins   : %4d  (%.1f%%)", s["player_wins"],
                    100 * s["player_wins"] / n)
        logger.info("Opponent wins : %4d  (%.1f%%)", s["opponent_wins"],
                    100 * s["opponent_wins"] / n)
        if s["draws"]:
            logger.info("Draws         : %4d", s["draws"])
        logger.info("Final accuracy: %.3f ± %.3f", s["accuracy_mean"], s["accuracy_std"])
        logger.info("Mean scores   : player %.0f  opponent %.0f",
                    s["player_score_mean"], s["opponent_score_mean"])
        logger.info("=" * 58)
