"""
match.py – Headless round sequencing for a player-vs-opponent duel.

Each round:
  1. ``next_pattern()`` picks the grid, length and pattern for the level
     (a composed challenge every ``challenge_every`` rounds)
  2. the caller shows the pattern and collects the player's cells
  3. ``submit()`` records the player's outcome with the opponent, takes
     the opponent's guess for the same pattern, scores both sides,
     recalibrates the opponent and decides the round winner

Pacing, display and input are the caller's business; this module only
enforces the order of engine calls.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from settings import RESPONSE_WINDOW_FACTOR, SPEED_WINDOW_ROUNDS, OPPONENT_TIME_BONUS
from opponent.memory_opponent import MemoryOpponent
from opponent.outcome_recorder import RoundMetadata
from opponent.difficulty_adjuster import PlayerStats
from systems.pattern_generator import generate_pattern, strategy_for_round
from systems.scoring import (
    calculate_score, calculate_time_bonus, calculate_combo_multiplier,
    calculate_penalty, check_level_up, grid_size_for_level, pattern_length_for_level,
    pattern_display_time,
)

logger = logging.getLogger(__name__)


@dataclass
class MatchConfig:
    """Tunables for one duel."""

    start_level: int = 1
    challenge_every: int = 0               # 0 = never compose challenges
    challenge_difficulty: float | None = None
    wrong_answer_penalty: bool = False
    max_response_time_ms: float | None = None   # None = 3 × display time for the level
    speed_window: int = SPEED_WINDOW_ROUNDS     # recent rounds for the speed signal


@dataclass
class PlayerRecord:
    """The human side's running figures."""

    total_patterns: int = 0
    correct_patterns: int = 0
    consecutive_correct: int = 0
    response_times_ms: list[float] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        if self.total_patterns == 0:
            return 0.0
        return self.correct_patterns / self.total_patterns

    @property
    def average_response_time_ms(self) -> float | None:
        if not self.response_times_ms:
            return None
        return sum(self.response_times_ms) / len(self.response_times_ms)

    def recent_response_time_ms(self, window: int) -> float | None:
        """Average over the last *window* rounds."""
        recent = self.response_times_ms[-window:] if window > 0 else []
        if not recent:
            return None
        return sum(recent) / len(recent)


@dataclass
class RoundResult:
    """Everything that happened in one round."""

    round_number: int
    level: int
    grid_size: int
    pattern: list[int]
    player_selection: list[int]
    player_correct: bool
    opponent_guess: list[int]
    opponent_correct: bool
    player_points: int
    opponent_points: int
    winner: str                # "player" | "opponent" | "tie" | "none"


def is_correct(selection: list[int], pattern: list[int]) -> bool:
    """Order-free match: same cells, no extras, no duplicates."""
    return len(selection) == len(pattern) and set(selection) == set(pattern)


class MemoryMatch:
    """Round-by-round duel between the player and a ``MemoryOpponent``.

    Usage:
        match = MemoryMatch(MemoryOpponent("self_adjusting"))
        pattern = match.next_pattern()
        result = match.submit(player_cells, response_time_ms=1800)
    """

    def __init__(self, opponent: MemoryOpponent,
                 rng: random.Random | None = None,
                 config: MatchConfig | None = None):
        self.opponent = opponent
        self.rng = rng or random.Random()
        self.cfg = config or MatchConfig()

        self.player = PlayerRecord()
        self.level: int = self.cfg.start_level
        self.round_number: int = 0
        self.player_score: int = 0
        self.opponent_score: int = 0
        self.opponent_streak: int = 0

        self.grid_size: int = grid_size_for_level(self.level)
        self.current_pattern: list[int] = []
        self.results: list[RoundResult] = []

    # ── Round lifecycle ───────────────────────────────────

    def next_pattern(self) -> list[int]:
        """Start the next round and return its pattern."""
        self.round_number += 1
        self.grid_size = grid_size_for_level(self.level)
        length = pattern_length_for_level(self.level, self.grid_size)

        every = self.cfg.challenge_every
        if every and self.round_number % every == 0 and self.opponent.state.mistake_frequency:
            self.current_pattern = self.opponent.compose_challenge(
                length, self.grid_size, difficulty=self.cfg.challenge_difficulty,
            )
            logger.debug("Round %d: challenge pattern", self.round_number)
        else:
            self.current_pattern = generate_pattern(
                self.grid_size, length, strategy_for_round(self.round_number), self.rng,
            )
        return list(self.current_pattern)

    def submit(self, selection: list[int], response_time_ms: float) -> RoundResult:
        """Finish the round with the player's cells and measured time.

        Raises RuntimeError when no round is in progress.
        """
        if not self.current_pattern:
            raise RuntimeError("submit() called with no round in progress; "
                               "call next_pattern() first")
        pattern = self.current_pattern
        self.current_pattern = []
        grid_size = self.grid_size
        level = self.level

        player_ok = is_correct(selection, pattern)
        player_points = self._score_player(player_ok, len(pattern), response_time_ms)

        # Player outcome first: the opponent's recall may use what it just learned
        self.opponent.record_outcome(
            player_ok, pattern, selection,
            RoundMetadata(grid_size=grid_size, response_time_ms=response_time_ms,
                          level=level),
        )
        guess = self.opponent.attempt_recall(pattern, grid_size, level, response_time_ms)
        opponent_ok = is_correct(guess, pattern)
        opponent_points = self._score_opponent(opponent_ok, len(pattern))

        # Recent pace is judged against the opponent's long-run history
        recent_ms = self.player.recent_response_time_ms(self.cfg.speed_window)
        self.opponent.recalibrate(
            self.player.success_rate,
            PlayerStats(average_response_time_ms=recent_ms, level=level,
                        consecutive_correct=self.player.consecutive_correct),
        )

        if player_ok and opponent_ok:
            winner = "tie"
        elif player_ok:
            winner = "player"
        elif opponent_ok:
            winner = "opponent"
        else:
            winner = "none"

        result = RoundResult(
            round_number=self.round_number, level=level, grid_size=grid_size,
            pattern=list(pattern), player_selection=list(selection),
            player_correct=player_ok, opponent_guess=guess,
            opponent_correct=opponent_ok, player_points=player_points,
            opponent_points=opponent_points, winner=winner,
        )
        self.results.append(result)

        if check_level_up(self.player_score, self.level):
            self.level += 1
            logger.info("Level up → %d (score %d)", self.level, self.player_score)

        logger.debug("Round %d: winner=%s player=%d opponent=%d",
                     self.round_number, winner, self.player_score, self.opponent_score)
        return result

    # ── Scoring helpers ───────────────────────────────────

    def response_window_ms(self) -> float:
        """Answer time at which the player's time bonus reaches zero."""
        if self.cfg.max_response_time_ms is not None:
            return self.cfg.max_response_time_ms
        return RESPONSE_WINDOW_FACTOR * pattern_display_time(self.level)

    def _score_player(self, correct: bool, length: int,
                      response_time_ms: float) -> int:
        p = self.player
        p.total_patterns += 1
        p.response_times_ms.append(float(response_time_ms))

        if not correct:
            p.consecutive_correct = 0
            if self.cfg.wrong_answer_penalty:
                self.player_score = calculate_penalty(self.player_score)
            return 0

        p.correct_patterns += 1
        p.consecutive_correct += 1
        bonus = calculate_time_bonus(response_time_ms, self.response_window_ms())
        points = calculate_score(self.grid_size, length, bonus,
                                 calculate_combo_multiplier(p.consecutive_correct))
        self.player_score += points
        return points

    def _score_opponent(self, correct: bool, length: int) -> int:
        if not correct:
            self.opponent_streak = 0
            return 0
        self.opponent_streak += 1
        points = calculate_score(self.grid_size, length, OPPONENT_TIME_BONUS,
                                 calculate_combo_multiplier(self.opponent_streak))
        self.opponent_score += points
        return points
