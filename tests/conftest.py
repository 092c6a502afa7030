"""
pytest fixtures shared by the opponent and systems tests.
"""
import os
import random
import sys

import numpy as np
import pytest

# Project root on the path so the flat packages import without installing
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))


@pytest.fixture
def fixed_seed():
    """Fixed seed for reproducible runs."""
    seed = 12345
    random.seed(seed)
    np.random.seed(seed)
    return seed


@pytest.fixture
def rng(fixed_seed):
    """Seeded RNG to hand to engine components."""
    return random.Random(fixed_seed)


@pytest.fixture
def medium_state():
    from opponent.opponent_state import OpponentState
    return OpponentState(difficulty_tier="medium", personality="balanced")


@pytest.fixture
def adaptive_state():
    from opponent.opponent_state import OpponentState
    return OpponentState(difficulty_tier="self_adjusting", personality="balanced")


@pytest.fixture(autouse=True)
def reset_random_state():
    """Unseed the global RNGs after every test."""
    yield
    random.seed(None)
    np.random.seed(None)
