"""
settings.py - Game constants for Pattern Memory Duel.

All configurable values live here so they're easy to tweak
and easy to reference from any module.
"""

import os

TITLE = "Pattern Memory Duel – Adaptive Opponent"

# ── Grid ──────────────────────────────────────────────────
MIN_GRID_SIZE = 3
MAX_GRID_SIZE = 6
MAX_PATTERN_FILL = 0.75        # pattern may cover at most 75 % of the cells

# ── Opponent difficulty tiers ─────────────────────────────
# tier name → (starting base accuracy, starting learning rate)
TIER_LOW = {"base_accuracy": 0.50, "learning_rate": 0.01}
TIER_MEDIUM = {"base_accuracy": 0.70, "learning_rate": 0.05}
TIER_HIGH = {"base_accuracy": 0.90, "learning_rate": 0.10}
TIER_SELF_ADJUSTING = {"base_accuracy": 0.60, "learning_rate": 0.08}

# ── Clamp ranges ──────────────────────────────────────────
ACCURACY_FLOOR = 0.30          # lowest base accuracy the opponent can drift to
ACCURACY_CAP = 0.95
LEARNING_RATE_FLOOR = 0.01
LEARNING_RATE_CAP = 0.15
EFFECTIVE_ACCURACY_MIN = 0.10  # per-round recall probability bounds
EFFECTIVE_ACCURACY_MAX = 0.95
FACTOR_MIN = 0.5               # adaptive factor multipliers
FACTOR_MAX = 2.0

# ── Opponent personality traits ───────────────────────────
# Each trait is in [0, 1].
#   pattern_recognition – bonus when reading a pattern
#   adaptation_speed    – scales every self-adjustment step
#   consistency         – pulls effective accuracy back toward base
#   risk_taking         – amplitude of random accuracy jitter
PERSONALITY_BALANCED = {
    "pattern_recognition": 0.30,
    "adaptation_speed": 0.30,
    "consistency": 0.20,
    "risk_taking": 0.10,
}
PERSONALITY_PATTERN_FOCUSED = {
    "pattern_recognition": 0.70,   # reads structure well
    "adaptation_speed": 0.20,
    "consistency": 0.30,
    "risk_taking": 0.00,
}
PERSONALITY_FAST_ADAPTING = {
    "pattern_recognition": 0.30,
    "adaptation_speed": 0.80,      # large self-adjustment steps
    "consistency": 0.00,
    "risk_taking": 0.20,
}
PERSONALITY_STEADY = {
    "pattern_recognition": 0.20,
    "adaptation_speed": 0.10,
    "consistency": 0.70,           # barely strays from base accuracy
    "risk_taking": 0.00,
}
PERSONALITY_RISK_TAKING = {
    "pattern_recognition": 0.30,
    "adaptation_speed": 0.40,
    "consistency": 0.00,
    "risk_taking": 0.80,           # swings hard round to round
}

# ── Scoring ───────────────────────────────────────────────
SCORE_BASE_MULT = 10           # cells × length × this
TIME_BONUS_WEIGHT = 0.5        # fastest answer earns +50 %
COMBO_STEP = 0.1
COMBO_MAX_STREAK = 10          # combo caps at 2.0×
PENALTY_FRACTION = 0.10
PENALTY_MIN = 50
LEVEL_THRESHOLD_BASE = 1000
LEVEL_THRESHOLD_GROWTH = 1.5
DISPLAY_TIME_START_MS = 1000
DISPLAY_TIME_STEP_MS = 50
DISPLAY_TIME_MIN_MS = 300
RESPONSE_WINDOW_FACTOR = 3     # time bonus reaches zero at 3 × display time
SPEED_WINDOW_ROUNDS = 3        # recent rounds compared against the long-run average
OPPONENT_TIME_BONUS = 0.5      # opponent is scored as a mid-speed answer

# ── Simulation defaults ───────────────────────────────────
SIM_MATCHES = 10
SIM_ROUNDS = 12
SIM_PLAYER_TIER = "medium"
SIM_RESPONSE_TIME_RANGE_MS = (800.0, 4000.0)

# ── Files ─────────────────────────────────────────────────
# Generated files live in the project root
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
STATE_FILE = os.path.join(PROJECT_ROOT, "opponent_state.json")
LEARNING_CURVE_FILE = os.path.join(PROJECT_ROOT, "learning_curve.png")
