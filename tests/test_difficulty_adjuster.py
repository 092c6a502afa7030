"""
Difficulty adjuster tests: signals, scaling, clamps, trend scan.
"""
import copy

import pytest

from opponent.difficulty_adjuster import DifficultyAdjuster, PlayerStats


@pytest.fixture
def adjuster():
    return DifficultyAdjuster()


class TestFixedTier:

    @pytest.mark.smoke
    def test_fixed_tier_left_alone(self, adjuster, medium_state):
        medium_state.grid_size_stats(3).record(True)
        medium_state.grid_size_stats(5).record(False)
        before = copy.deepcopy(medium_state)

        adjuster.recalibrate(medium_state, 0.9,
                             PlayerStats(average_response_time_ms=500, level=9,
                                         consecutive_correct=8))

        assert medium_state == before


class TestSignals:

    @pytest.mark.unit
    def test_strong_player_sharpens_opponent(self, adjuster, adaptive_state):
        adjuster.recalibrate(adaptive_state, 0.9)
        assert adaptive_state.base_accuracy == pytest.approx(0.6 + 0.05 * 1.3)
        assert adaptive_state.learning_rate == pytest.approx(0.08 + 0.01 * 1.3)

    @pytest.mark.unit
    def test_weak_player_eases_opponent(self, adjuster, adaptive_state):
        adjuster.recalibrate(adaptive_state, 0.2)
        assert adaptive_state.base_accuracy == pytest.approx(0.6 - 0.05 * 1.3)

    @pytest.mark.unit
    def test_middling_player_changes_nothing(self, adjuster, adaptive_state):
        adjuster.recalibrate(adaptive_state, 0.6, PlayerStats(level=3, consecutive_correct=2))
        assert adaptive_state.base_accuracy == pytest.approx(0.6)
        assert adaptive_state.learning_rate == pytest.approx(0.08)

    @pytest.mark.unit
    def test_faster_player(self, adjuster, adaptive_state):
        adaptive_state.response_times_ms = [2000.0, 2000.0]
        adjuster.recalibrate(adaptive_state, 0.6,
                             PlayerStats(average_response_time_ms=1000))
        assert adaptive_state.base_accuracy == pytest.approx(0.6 + 0.02 * 1.3)
        assert adaptive_state.learning_rate == pytest.approx(0.08 + 0.005 * 1.3)

    @pytest.mark.unit
    def test_much_slower_player(self, adjuster, adaptive_state):
        adaptive_state.response_times_ms = [2000.0]
        adjuster.recalibrate(adaptive_state, 0.6,
                             PlayerStats(average_response_time_ms=4000))
        assert adaptive_state.base_accuracy == pytest.approx(0.6 - 0.02 * 1.3)
        assert adaptive_state.learning_rate == pytest.approx(0.08)

    @pytest.mark.unit
    def test_no_time_history_no_speed_signal(self, adjuster, adaptive_state):
        adjuster.recalibrate(adaptive_state, 0.6,
                             PlayerStats(average_response_time_ms=100))
        assert adaptive_state.base_accuracy == pytest.approx(0.6)

    @pytest.mark.unit
    @pytest.mark.parametrize("level, bonus", [(5, 0.0), (8, 0.03), (30, 0.05)])
    def test_level_signal(self, adjuster, adaptive_state, level, bonus):
        adjuster.recalibrate(adaptive_state, 0.6, PlayerStats(level=level))
        assert adaptive_state.base_accuracy == pytest.approx(0.6 + bonus * 1.3)

    @pytest.mark.unit
    def test_streak_signal(self, adjuster, adaptive_state):
        adjuster.recalibrate(adaptive_state, 0.6, PlayerStats(consecutive_correct=5))
        assert adaptive_state.base_accuracy == pytest.approx(0.6 + 0.02 * 1.3)
        assert adaptive_state.learning_rate == pytest.approx(0.08 + 0.005 * 1.3)

    @pytest.mark.unit
    def test_adaptation_speed_scales_change(self, adjuster):
        from opponent.opponent_state import OpponentState
        fast = OpponentState(difficulty_tier="self_adjusting", personality="fast_adapting")
        adjuster.recalibrate(fast, 0.9)
        assert fast.base_accuracy == pytest.approx(0.6 + 0.05 * 1.8)

    @pytest.mark.unit
    def test_repeated_recalibration_stays_clamped(self, adjuster, adaptive_state):
        stats = PlayerStats(level=20, consecutive_correct=20)
        for _ in range(50):
            adjuster.recalibrate(adaptive_state, 1.0, stats)
        assert adaptive_state.base_accuracy == 0.95
        assert adaptive_state.learning_rate == 0.15

        for _ in range(50):
            adjuster.recalibrate(adaptive_state, 0.0)
        assert adaptive_state.base_accuracy == 0.3
        assert adaptive_state.learning_rate == 0.01


class TestTrendScan:

    @pytest.mark.unit
    def test_weaker_at_larger_grids(self, adjuster, adaptive_state):
        adaptive_state.grid_size_stats(3).record(True)
        adaptive_state.grid_size_stats(5).record(False)

        adjuster.recalibrate(adaptive_state, 0.6)

        assert adaptive_state.adaptive_factors.spatial_memory == pytest.approx(1.05)
        assert adaptive_state.adaptive_factors.sequence_memory == 1.0

    @pytest.mark.unit
    def test_weaker_at_longer_patterns(self, adjuster, adaptive_state):
        adaptive_state.pattern_length_stats(3).record(True)
        adaptive_state.pattern_length_stats(6).record(False)

        adjuster.recalibrate(adaptive_state, 0.6)

        assert adaptive_state.adaptive_factors.sequence_memory == pytest.approx(1.05)

    @pytest.mark.unit
    def test_weaker_at_smaller_is_ignored(self, adjuster, adaptive_state):
        adaptive_state.grid_size_stats(3).record(False)
        adaptive_state.grid_size_stats(5).record(True)

        adjuster.recalibrate(adaptive_state, 0.6)

        assert adaptive_state.adaptive_factors.spatial_memory == 1.0

    @pytest.mark.unit
    def test_small_spread_is_ignored(self, adjuster, adaptive_state):
        for hit in (True, True, True, False):
            adaptive_state.grid_size_stats(3).record(hit)
        for hit in (True, True, False, True, False):
            adaptive_state.grid_size_stats(4).record(hit)

        adjuster.recalibrate(adaptive_state, 0.6)

        assert adaptive_state.adaptive_factors.spatial_memory == 1.0
