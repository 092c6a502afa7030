"""
scoring.py – Round scoring and level progression rules.

Pure functions; the match sequencer calls them after each round.
"""

from __future__ import annotations

import math

from settings import (
    SCORE_BASE_MULT, TIME_BONUS_WEIGHT,
    COMBO_STEP, COMBO_MAX_STREAK,
    PENALTY_FRACTION, PENALTY_MIN,
    LEVEL_THRESHOLD_BASE, LEVEL_THRESHOLD_GROWTH,
    DISPLAY_TIME_START_MS, DISPLAY_TIME_STEP_MS, DISPLAY_TIME_MIN_MS,
    MIN_GRID_SIZE, MAX_GRID_SIZE, MAX_PATTERN_FILL,
)


def calculate_score(grid_size: int, pattern_length: int,
                    time_bonus: float = 0.0, combo_multiplier: float = 1.0) -> int:
    """Points for a correct answer.

    Base is ``cells × length × 10``; *time_bonus* (0–1) adds up to 50 %,
    then the combo multiplier applies to the lot.
    """
    base = grid_size * grid_size * pattern_length * SCORE_BASE_MULT
    with_bonus = base + base * time_bonus * TIME_BONUS_WEIGHT
    return round(with_bonus * combo_multiplier)


def calculate_time_bonus(response_time_ms: float, max_time_ms: float) -> float:
    """1.0 for an instant answer, falling linearly to 0.0 at *max_time_ms*."""
    if max_time_ms <= 0 or response_time_ms >= max_time_ms:
        return 0.0
    return max(0.0, min(1.0, 1.0 - response_time_ms / max_time_ms))


def calculate_combo_multiplier(consecutive_correct: int) -> float:
    return 1.0 + min(consecutive_correct, COMBO_MAX_STREAK) * COMBO_STEP


def calculate_penalty(current_score: int) -> int:
    """Score left after a wrong answer: lose 10 %, at least 50 points."""
    penalty = max(round(current_score * PENALTY_FRACTION), PENALTY_MIN)
    return max(0, current_score - penalty)


def calculate_level_threshold(level: int) -> int:
    return round(LEVEL_THRESHOLD_BASE * LEVEL_THRESHOLD_GROWTH ** (level - 1))


def check_level_up(score: int, level: int) -> bool:
    return score >= calculate_level_threshold(level)


def grid_size_for_level(level: int) -> int:
    """3×3 to start, one size larger every three levels, 6×6 at most."""
    return min(MIN_GRID_SIZE + (level - 1) // 3, MAX_GRID_SIZE)


def pattern_length_for_level(level: int, grid_size: int) -> int:
    """2 + level tiles, never more than 75 % of the grid."""
    cap = math.floor(grid_size * grid_size * MAX_PATTERN_FILL)
    return max(1, min(2 + level, cap))


def pattern_display_time(level: int) -> int:
    """Milliseconds the pattern stays visible."""
    return max(DISPLAY_TIME_START_MS - (level - 1) * DISPLAY_TIME_STEP_MS,
               DISPLAY_TIME_MIN_MS)
