"""
Save / load tests for the opponent's learned state.
"""
import json

import pytest

from opponent.memory_opponent import MemoryOpponent
from opponent.opponent_state import OpponentState
from opponent.outcome_recorder import RoundMetadata
from opponent.persistence import load_opponent_state, save_opponent_state


@pytest.fixture
def trained_state(rng):
    opp = MemoryOpponent("self_adjusting", "pattern_focused", rng=rng)
    for i in range(6):
        pattern = opp.compose_challenge(4, 4, strategy="random")
        submission = pattern if i % 2 else pattern[:2]
        opp.record_outcome(i % 2 == 1, pattern, submission,
                           RoundMetadata(grid_size=4, response_time_ms=1000 + i * 100))
        opp.attempt_recall(pattern, 4, 2)
        opp.recalibrate(opp.success_rate)
    return opp.state


class TestRoundTrip:

    @pytest.mark.smoke
    def test_save_then_load(self, tmp_path, trained_state):
        path = str(tmp_path / "opponent.json")
        save_opponent_state(trained_state, path)

        loaded = load_opponent_state(path)

        assert loaded == trained_state
        assert loaded is not trained_state

    @pytest.mark.unit
    def test_file_is_plain_json(self, tmp_path, trained_state):
        path = tmp_path / "opponent.json"
        save_opponent_state(trained_state, str(path))
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["difficulty_tier"] == "self_adjusting"
        assert all(isinstance(k, str) for k in data["performance_by_grid_size"])


class TestBadFiles:

    @pytest.mark.unit
    def test_missing_file(self, tmp_path):
        assert load_opponent_state(str(tmp_path / "nothing.json")) is None

    @pytest.mark.unit
    def test_corrupt_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_opponent_state(str(path)) is None

    @pytest.mark.unit
    def test_missing_fields(self, tmp_path):
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"personality": "steady"}), encoding="utf-8")
        assert load_opponent_state(str(path)) is None

    @pytest.mark.unit
    def test_unknown_tier(self, tmp_path):
        data = OpponentState().to_dict()
        data["difficulty_tier"] = "godlike"
        path = tmp_path / "odd.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        assert load_opponent_state(str(path)) is None
