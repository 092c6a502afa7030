"""
opponent_state.py – Everything the memory opponent knows about itself
and about the player.

One ``OpponentState`` exists per match. Sub-systems (recall simulator,
outcome recorder, difficulty adjuster, challenge composer) receive it
by reference and are the only code that mutates it. Every numeric
update goes through ``_clamp`` so fields never leave their ranges.

Fields:
  - difficulty tier & personality (fixed for the match)
  - base accuracy & learning rate (self-adjusting tier moves them)
  - pattern history, mistake / success cell counts
  - per-grid-size and per-pattern-length hit tables
  - five adaptive factors (0.5–2.0)
  - streak / attempt counters, learning progress
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum

from settings import (
    TIER_LOW, TIER_MEDIUM, TIER_HIGH, TIER_SELF_ADJUSTING,
    PERSONALITY_BALANCED, PERSONALITY_PATTERN_FOCUSED,
    PERSONALITY_FAST_ADAPTING, PERSONALITY_STEADY, PERSONALITY_RISK_TAKING,
    ACCURACY_FLOOR, ACCURACY_CAP, LEARNING_RATE_FLOOR, LEARNING_RATE_CAP,
    FACTOR_MIN, FACTOR_MAX,
)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# ══════════════════════════════════════════════════════════
#  Tier & Personality
# ══════════════════════════════════════════════════════════

class DifficultyTier(str, Enum):
    """How strong the opponent starts and whether it tunes itself."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    SELF_ADJUSTING = "self_adjusting"

    @property
    def base_accuracy(self) -> float:
        return _TIER_TABLE[self]["base_accuracy"]

    @property
    def learning_rate(self) -> float:
        return _TIER_TABLE[self]["learning_rate"]


_TIER_TABLE: dict[DifficultyTier, dict] = {
    DifficultyTier.LOW:            TIER_LOW,
    DifficultyTier.MEDIUM:         TIER_MEDIUM,
    DifficultyTier.HIGH:           TIER_HIGH,
    DifficultyTier.SELF_ADJUSTING: TIER_SELF_ADJUSTING,
}


@dataclass(frozen=True)
class PersonalityTraits:
    """Fixed trait bundle behind a personality (each 0.0–1.0)."""

    pattern_recognition: float = 0.0
    adaptation_speed: float = 0.0
    consistency: float = 0.0
    risk_taking: float = 0.0


class Personality(str, Enum):
    """Closed set of opponent temperaments."""

    BALANCED = "balanced"
    PATTERN_FOCUSED = "pattern_focused"
    FAST_ADAPTING = "fast_adapting"
    STEADY = "steady"
    RISK_TAKING = "risk_taking"

    @property
    def traits(self) -> PersonalityTraits:
        return PERSONALITY_TRAITS[self]


PERSONALITY_TRAITS: dict[Personality, PersonalityTraits] = {
    Personality.BALANCED:        PersonalityTraits(**PERSONALITY_BALANCED),
    Personality.PATTERN_FOCUSED: PersonalityTraits(**PERSONALITY_PATTERN_FOCUSED),
    Personality.FAST_ADAPTING:   PersonalityTraits(**PERSONALITY_FAST_ADAPTING),
    Personality.STEADY:          PersonalityTraits(**PERSONALITY_STEADY),
    Personality.RISK_TAKING:     PersonalityTraits(**PERSONALITY_RISK_TAKING),
}


# ══════════════════════════════════════════════════════════
#  Statistics records
# ══════════════════════════════════════════════════════════

@dataclass
class DimensionStats:
    """Player hit record for one grid size or one pattern length."""

    hits: int = 0
    attempts: int = 0
    rate: float = 0.0

    def record(self, hit: bool):
        self.attempts += 1
        if hit:
            self.hits += 1
        self.rate = self.hits / self.attempts

    def as_dict(self) -> dict:
        return {"hits": self.hits, "attempts": self.attempts, "rate": self.rate}


@dataclass
class AdaptiveFactors:
    """Skill multipliers the opponent sharpens or dulls from outcomes."""

    pattern_recognition: float = 1.0
    spatial_memory: float = 1.0
    sequence_memory: float = 1.0
    reaction_speed: float = 1.0
    error_recovery: float = 1.0

    def nudge(self, name: str, delta: float) -> float:
        """Add *delta* to factor *name*, clamped to 0.5–2.0. Returns the new value."""
        value = _clamp(getattr(self, name) + delta, FACTOR_MIN, FACTOR_MAX)
        setattr(self, name, value)
        return value

    @classmethod
    def names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in self.names()}


# ══════════════════════════════════════════════════════════
#  Opponent State
# ══════════════════════════════════════════════════════════

@dataclass
class OpponentState:
    """Mutable record for one opponent over one match."""

    difficulty_tier: DifficultyTier = DifficultyTier.MEDIUM
    personality: Personality = Personality.BALANCED

    base_accuracy: float = -1.0     # < 0 → take the tier's starting value
    learning_rate: float = -1.0

    pattern_history: list[list[int]] = field(default_factory=list)
    mistake_frequency: dict[int, int] = field(default_factory=dict)
    success_frequency: dict[int, int] = field(default_factory=dict)
    performance_by_grid_size: dict[int, DimensionStats] = field(default_factory=dict)
    performance_by_pattern_length: dict[int, DimensionStats] = field(default_factory=dict)
    adaptive_factors: AdaptiveFactors = field(default_factory=AdaptiveFactors)

    consecutive_correct: int = 0
    total_attempts: int = 0
    correct_attempts: int = 0
    learning_progress: float = 0.0

    response_times_ms: list[float] = field(default_factory=list)
    accuracy_history: list[float] = field(default_factory=list)

    def __post_init__(self):
        self.difficulty_tier = DifficultyTier(self.difficulty_tier)
        self.personality = Personality(self.personality)
        if self.base_accuracy < 0:
            self.base_accuracy = self.difficulty_tier.base_accuracy
        if self.learning_rate < 0:
            self.learning_rate = self.difficulty_tier.learning_rate

    # ── Derived values ────────────────────────────────────

    @property
    def traits(self) -> PersonalityTraits:
        return self.personality.traits

    @property
    def is_self_adjusting(self) -> bool:
        return self.difficulty_tier is DifficultyTier.SELF_ADJUSTING

    @property
    def success_rate(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.correct_attempts / self.total_attempts

    @property
    def average_response_time_ms(self) -> float | None:
        if not self.response_times_ms:
            return None
        return sum(self.response_times_ms) / len(self.response_times_ms)

    # ── Clamped setters ───────────────────────────────────

    def shift_accuracy(self, delta: float) -> float:
        self.base_accuracy = _clamp(self.base_accuracy + delta,
                                    ACCURACY_FLOOR, ACCURACY_CAP)
        return self.base_accuracy

    def shift_learning_rate(self, delta: float) -> float:
        self.learning_rate = _clamp(self.learning_rate + delta,
                                    LEARNING_RATE_FLOOR, LEARNING_RATE_CAP)
        return self.learning_rate

    # ── Lazily created tables ─────────────────────────────

    def grid_size_stats(self, grid_size: int) -> DimensionStats:
        return self.performance_by_grid_size.setdefault(grid_size, DimensionStats())

    def pattern_length_stats(self, length: int) -> DimensionStats:
        return self.performance_by_pattern_length.setdefault(length, DimensionStats())

    # ══════════════════════════════════════════════════════
    #  Serialisation (used by persistence layer)
    # ══════════════════════════════════════════════════════

    def to_dict(self) -> dict:
        """Plain-JSON snapshot of every field. Integer keys become strings."""
        return {
            "difficulty_tier": self.difficulty_tier.value,
            "personality": self.personality.value,
            "base_accuracy": self.base_accuracy,
            "learning_rate": self.learning_rate,
            "pattern_history": [list(p) for p in self.pattern_history],
            "mistake_frequency": {str(k): v for k, v in self.mistake_frequency.items()},
            "success_frequency": {str(k): v for k, v in self.success_frequency.items()},
            "performance_by_grid_size": {
                str(k): v.as_dict() for k, v in self.performance_by_grid_size.items()
            },
            "performance_by_pattern_length": {
                str(k): v.as_dict() for k, v in self.performance_by_pattern_length.items()
            },
            "adaptive_factors": self.adaptive_factors.as_dict(),
            "consecutive_correct": self.consecutive_correct,
            "total_attempts": self.total_attempts,
            "correct_attempts": self.correct_attempts,
            "learning_progress": self.learning_progress,
            "response_times_ms": list(self.response_times_ms),
            "accuracy_history": list(self.accuracy_history),
        }

    @staticmethod
    def from_dict(d: dict) -> "OpponentState":
        return OpponentState(
            difficulty_tier=DifficultyTier(d["difficulty_tier"]),
            personality=Personality(d["personality"]),
            base_accuracy=float(d["base_accuracy"]),
            learning_rate=float(d["learning_rate"]),
            pattern_history=[[int(c) for c in p] for p in d.get("pattern_history", [])],
            mistake_frequency={int(k): int(v) for k, v in d.get("mistake_frequency", {}).items()},
            success_frequency={int(k): int(v) for k, v in d.get("success_frequency", {}).items()},
            performance_by_grid_size={
                int(k): DimensionStats(**v)
                for k, v in d.get("performance_by_grid_size", {}).items()
            },
            performance_by_pattern_length={
                int(k): DimensionStats(**v)
                for k, v in d.get("performance_by_pattern_length", {}).items()
            },
            adaptive_factors=AdaptiveFactors(**d.get("adaptive_factors", {})),
            consecutive_correct=int(d.get("consecutive_correct", 0)),
            total_attempts=int(d.get("total_attempts", 0)),
            correct_attempts=int(d.get("correct_attempts", 0)),
            learning_progress=float(d.get("learning_progress", 0.0)),
            response_times_ms=[float(t) for t in d.get("response_times_ms", [])],
            accuracy_history=[float(a) for a in d.get("accuracy_history", [])],
        )
