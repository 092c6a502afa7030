"""systems package – Pattern generation, scoring and round sequencing."""

from .pattern_generator import PatternStrategy, generate_pattern, strategy_for_round
from .scoring import (
    calculate_score, calculate_time_bonus, calculate_combo_multiplier,
    calculate_penalty, calculate_level_threshold, check_level_up,
    grid_size_for_level, pattern_length_for_level, pattern_display_time,
)
