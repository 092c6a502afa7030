"""
insights.py – End-of-match report on what the opponent has learned.

``format_insights`` turns the opponent's detailed statistics snapshot
into a printable summary; ``plot_learning_curve`` saves a chart of base
accuracy over the recorded rounds next to the five adaptive factors.
"""

import logging

logger = logging.getLogger(__name__)

import matplotlib
matplotlib.use("Agg")  # non-interactive backend, charts only go to disk
import matplotlib.pyplot as plt

from settings import LEARNING_CURVE_FILE, FACTOR_MIN, FACTOR_MAX
from opponent.opponent_state import OpponentState


def format_insights(stats: dict) -> str:
    """Render ``MemoryOpponent.get_stats(detailed=True)`` as a text block."""
    lines = [
        "=" * 52,
        "  OPPONENT INSIGHTS",
        "=" * 52,
        f"  Difficulty       : {stats['difficulty']}",
        f"  Personality      : {stats['personality']}",
        f"  Memory Accuracy  : {stats['base_accuracy'] * 100:.0f}%",
        f"  Learning Rate    : {stats['learning_rate']:.3f}",
        f"  Player Success   : {stats['correct_attempts']}/{stats['total_attempts']}"
        f" ({stats['success_rate'] * 100:.0f}%)",
        f"  Learning Progress: {min(100, round(stats['learning_progress'] * 20))}%",
        f"  Patterns Seen    : {stats['patterns_seen']}",
    ]

    factors = stats.get("adaptive_factors")
    if factors:
        lines.append("-" * 52)
        lines.append("  Adaptive Factors")
        for name, value in factors.items():
            lines.append(f"    {name.replace('_', ' ').title():<20s} {value:.2f}")

    performance = stats.get("player_performance")
    if performance:
        for title, key in (("Grid Size", "by_grid_size"),
                           ("Pattern Length", "by_pattern_length")):
            table = performance[key]
            if not table:
                continue
            lines.append("-" * 52)
            lines.append(f"  Player by {title}")
            for value, row in table.items():
                lines.append(f"    {value:>3}  {row['hits']:>3d}/{row['attempts']:<3d}"
                             f"  {row['rate'] * 100:5.1f}%")

    for title, key in (("Common Mistakes", "common_mistakes"),
                       ("Common Successes", "common_successes")):
        cells = stats.get(key)
        if cells:
            lines.append("-" * 52)
            lines.append(f"  {title}: " +
                         ", ".join(f"cell {c['cell']} ×{c['count']}" for c in cells))

    lines.append("=" * 52)
    return "\n".join(lines)


def plot_learning_curve(state: OpponentState,
                        filename: str = LEARNING_CURVE_FILE) -> str | None:
    """Save base accuracy per round and the adaptive factors to *filename*.

    Returns the filename, or None when no rounds have been recorded.
    """
    if not state.accuracy_history:
        return None

    fig, (ax_curve, ax_factors) = plt.subplots(1, 2, figsize=(10, 4))

    rounds = list(range(1, len(state.accuracy_history) + 1))
    ax_curve.plot(rounds, state.accuracy_history, marker="o")
    ax_curve.set_xlabel("Round")
    ax_curve.set_ylabel("Base Accuracy")
    ax_curve.set_ylim(0.0, 1.0)
    ax_curve.set_title(f"{state.difficulty_tier.value} / {state.personality.value}")
    ax_curve.grid(True)

    factors = state.adaptive_factors.as_dict()
    ax_factors.bar([n.replace("_", "\n") for n in factors], list(factors.values()))
    ax_factors.set_ylim(FACTOR_MIN, FACTOR_MAX)
    ax_factors.set_title("Adaptive Factors")

    fig.savefig(filename, dpi=100, bbox_inches="tight")
    plt.close(fig)
    logger.info("Learning curve saved to %s", filename)
    return filename
