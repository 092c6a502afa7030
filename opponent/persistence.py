"""
persistence.py – Save / restore an opponent's learned state.

Writes every ``OpponentState`` field to a JSON file so a trained opponent
can be carried into the next session. Nothing is recomputed on load:
adaptive factors and frequency tables are stored as-is.

Kept separate from the engine so the opponent itself never touches disk.
"""

import json
import logging
import os

from settings import STATE_FILE
from opponent.opponent_state import OpponentState

logger = logging.getLogger(__name__)


# ==============================================================
#  Public API
# ==============================================================

def save_opponent_state(state: OpponentState, path: str = STATE_FILE) -> None:
    """Write the full opponent state to *path*."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(state.to_dict(), f, indent=2)

    logger.info(
        "Saved opponent state to %s (tier=%s, attempts=%d, acc=%.3f)",
        path, state.difficulty_tier.value, state.total_attempts, state.base_accuracy,
    )


def load_opponent_state(path: str = STATE_FILE) -> OpponentState | None:
    """Load a saved opponent state.

    Returns None if the file does not exist or cannot be read; the caller
    then starts a fresh opponent.
    """
    if not os.path.isfile(path):
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        state = OpponentState.from_dict(data)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Could not read opponent state %s: %s", path, exc)
        return None
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Opponent state %s is malformed: %s", path, exc)
        return None

    logger.info("Loaded opponent state from %s (%d attempts recorded)",
                path, state.total_attempts)
    return state
