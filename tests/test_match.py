"""
Match sequencing tests: call order, scoring, winners, challenges.
"""
import random

import pytest

from opponent.difficulty_adjuster import AdjusterConfig
from opponent.memory_opponent import MemoryOpponent
from opponent.outcome_recorder import RecorderConfig
from systems.match import MatchConfig, MemoryMatch, is_correct
from systems.scoring import (
    calculate_combo_multiplier, calculate_score, calculate_time_bonus,
)


def _match(config=None, tier="medium"):
    opponent = MemoryOpponent(tier, rng=random.Random(1))
    return MemoryMatch(opponent, rng=random.Random(2), config=config)


@pytest.mark.unit
def test_is_correct_ignores_order():
    assert is_correct([6, 0, 3], [0, 3, 6])
    assert not is_correct([0, 0, 3], [0, 3, 6])
    assert not is_correct([0, 3, 6, 7], [0, 3, 6])
    assert not is_correct([], [0])


class TestRound:

    @pytest.mark.smoke
    def test_first_round_shape(self):
        match = _match()
        pattern = match.next_pattern()
        assert match.round_number == 1
        assert match.grid_size == 3
        assert len(pattern) == 3

    @pytest.mark.unit
    def test_correct_answer_scores(self):
        match = _match()
        pattern = match.next_pattern()
        result = match.submit(list(reversed(pattern)), response_time_ms=1000)

        expected = calculate_score(3, 3, calculate_time_bonus(1000, 3000),
                                   calculate_combo_multiplier(1))
        assert result.player_correct
        assert result.player_points == expected
        assert match.player_score == expected
        assert result.winner in ("player", "tie")

    @pytest.mark.unit
    def test_opponent_sees_every_round(self):
        match = _match()
        for _ in range(4):
            pattern = match.next_pattern()
            match.submit(pattern[:1], response_time_ms=2000)

        state = match.opponent.state
        assert state.total_attempts == 4
        assert len(state.pattern_history) == 4
        assert match.player.success_rate == 0.0
        assert match.player.average_response_time_ms == pytest.approx(2000)
        assert [r.round_number for r in match.results] == [1, 2, 3, 4]

    @pytest.mark.unit
    def test_wrong_answer_winner(self):
        match = _match()
        match.next_pattern()
        result = match.submit([], response_time_ms=900)
        assert not result.player_correct
        assert result.player_points == 0
        assert result.winner == ("opponent" if result.opponent_correct else "none")

    @pytest.mark.unit
    def test_wrong_answer_penalty(self):
        match = _match(MatchConfig(wrong_answer_penalty=True))
        match.player_score = 1000
        match.next_pattern()
        match.submit([], response_time_ms=900)
        assert match.player_score == 900

    @pytest.mark.unit
    def test_level_up_after_threshold(self):
        match = _match()
        match.player_score = 999
        pattern = match.next_pattern()
        match.submit(pattern, response_time_ms=500)
        assert match.level == 2

    @pytest.mark.unit
    def test_start_level_sets_grid(self):
        match = _match(MatchConfig(start_level=7))
        pattern = match.next_pattern()
        assert match.grid_size == 5
        assert len(pattern) == 9


class TestRoundGuard:

    @pytest.mark.unit
    def test_submit_before_first_pattern(self):
        match = _match()
        with pytest.raises(RuntimeError):
            match.submit([], response_time_ms=1000)
        assert match.player_score == 0
        assert match.opponent.state.total_attempts == 0
        assert match.results == []

    @pytest.mark.unit
    def test_second_submit_for_same_round(self):
        match = _match()
        pattern = match.next_pattern()
        match.submit(pattern, response_time_ms=1000)
        with pytest.raises(RuntimeError):
            match.submit(pattern, response_time_ms=1000)
        assert len(match.results) == 1


class TestTimeBonusWindow:

    @pytest.mark.unit
    def test_window_follows_display_time(self):
        assert _match().response_window_ms() == 3000
        assert _match(MatchConfig(start_level=10)).response_window_ms() == 1650

    @pytest.mark.unit
    def test_window_override(self):
        match = _match(MatchConfig(start_level=10, max_response_time_ms=8000))
        assert match.response_window_ms() == 8000

    @pytest.mark.unit
    def test_same_answer_time_earns_less_at_higher_levels(self):
        low = _match()
        pattern = low.next_pattern()
        early = low.submit(pattern, response_time_ms=1500)

        high = _match(MatchConfig(start_level=10))
        pattern = high.next_pattern()
        late = high.submit(pattern, response_time_ms=1500)

        assert early.player_points == calculate_score(
            3, 3, calculate_time_bonus(1500, 3000), calculate_combo_multiplier(1))
        assert late.player_points == calculate_score(
            6, 12, calculate_time_bonus(1500, 1650), calculate_combo_multiplier(1))

    @pytest.mark.unit
    def test_answer_after_window_gets_no_bonus(self):
        match = _match()
        pattern = match.next_pattern()
        result = match.submit(pattern, response_time_ms=3500)
        assert result.player_points == calculate_score(3, 3, 0.0,
                                                       calculate_combo_multiplier(1))


class TestSpeedSignal:

    @staticmethod
    def _speed_only_match():
        # Success, level and streak signals switched off, failures leave accuracy alone
        opponent = MemoryOpponent(
            "self_adjusting", "balanced", rng=random.Random(1),
            recorder_config=RecorderConfig(failure_accuracy_step=0.0),
            adjuster_config=AdjusterConfig(harder_rate=2.0, easier_rate=-1.0,
                                           level_threshold=100, streak_threshold=100),
        )
        return MemoryMatch(opponent, rng=random.Random(2))

    @pytest.mark.integration
    def test_sudden_speed_up_sharpens_opponent(self):
        match = self._speed_only_match()
        for _ in range(3):
            match.next_pattern()
            match.submit([], response_time_ms=5000)
        assert match.opponent.base_accuracy == pytest.approx(0.6)

        for _ in range(2):
            match.next_pattern()
            match.submit([], response_time_ms=500)

        # last three rounds average 2000 ms against a 3200 ms history
        assert match.opponent.base_accuracy == pytest.approx(0.6 + 0.02 * 1.3)

    @pytest.mark.integration
    def test_sudden_slow_down_eases_opponent(self):
        match = self._speed_only_match()
        for _ in range(4):
            match.next_pattern()
            match.submit([], response_time_ms=500)
        for _ in range(3):
            match.next_pattern()
            match.submit([], response_time_ms=6000)

        assert match.opponent.base_accuracy < 0.6

    @pytest.mark.unit
    def test_recent_window_average(self):
        match = _match()
        match.player.response_times_ms = [9000.0, 100.0, 200.0, 300.0]
        assert match.player.recent_response_time_ms(3) == pytest.approx(200.0)
        assert match.player.recent_response_time_ms(0) is None


class TestChallenges:

    @pytest.mark.integration
    def test_challenge_targets_missed_cells(self):
        match = _match(MatchConfig(challenge_every=2))
        first = match.next_pattern()
        match.submit([], response_time_ms=1500)

        second = match.next_pattern()
        assert set(second) == set(first)

    @pytest.mark.unit
    def test_no_challenge_without_mistakes(self):
        match = _match(MatchConfig(challenge_every=1))
        assert match.opponent.state.mistake_frequency == {}
        pattern = match.next_pattern()
        assert len(pattern) == 3
