"""
Simulation runner and command-line entry point tests.
"""
import logging

import pytest

import main
from opponent.opponent_state import OpponentState
from opponent.persistence import load_opponent_state, save_opponent_state
from opponent.simulation_runner import SimulationRunner


class TestRunner:

    @pytest.mark.smoke
    def test_runs_requested_matches(self):
        runner = SimulationRunner(n_matches=3, n_rounds=5, seed=7)
        results = runner.run()

        assert [r.match_number for r in results] == [1, 2, 3]
        summary = runner.summary()
        assert summary["matches"] == 3
        assert summary["player_wins"] + summary["opponent_wins"] + summary["draws"] == 3
        assert 0.3 <= summary["accuracy_mean"] <= 0.95

    @pytest.mark.unit
    def test_empty_summary(self):
        assert SimulationRunner().summary() == {"matches": 0}

    @pytest.mark.unit
    def test_same_seed_same_results(self):
        a = SimulationRunner(n_matches=2, n_rounds=6, seed=99)
        b = SimulationRunner(n_matches=2, n_rounds=6, seed=99)
        assert a.run() == b.run()

    @pytest.mark.unit
    def test_fresh_opponent_each_match(self):
        runner = SimulationRunner(n_matches=2, n_rounds=4, seed=3)
        runner.run()
        assert runner.last_opponent.state.total_attempts == 4
        assert runner.state is None

    @pytest.mark.integration
    def test_state_carried_across_matches(self):
        state = OpponentState(difficulty_tier="self_adjusting")
        runner = SimulationRunner(n_matches=3, n_rounds=4, seed=5, state=state)
        runner.run()
        assert runner.state is state
        assert state.total_attempts == 12
        assert len(state.accuracy_history) == 12


class TestCommandLine:

    @pytest.mark.unit
    def test_parser_defaults(self):
        args = main.build_parser().parse_args([])
        assert args.tier is None
        assert args.personality is None
        assert args.state_file is None
        assert not args.plot

    @pytest.mark.unit
    def test_parser_rejects_unknown_tier(self):
        with pytest.raises(SystemExit):
            main.build_parser().parse_args(["--tier", "nightmare"])

    @pytest.mark.integration
    def test_state_file_accumulates(self, tmp_path, capsys):
        path = str(tmp_path / "state.json")
        argv = ["--matches", "1", "--rounds", "3", "--seed", "4", "--state-file", path]

        assert main.main(argv) == 0
        assert "OPPONENT INSIGHTS" in capsys.readouterr().out
        assert load_opponent_state(path).total_attempts == 3

        assert main.main(argv) == 0
        assert load_opponent_state(path).total_attempts == 6

    @pytest.mark.integration
    def test_saved_profile_wins_over_flags(self, tmp_path, caplog):
        path = str(tmp_path / "state.json")
        save_opponent_state(OpponentState(difficulty_tier="high", personality="steady"), path)
        argv = ["--matches", "1", "--rounds", "2", "--seed", "8", "--state-file", path]

        with caplog.at_level(logging.WARNING, logger="main"):
            assert main.main(argv + ["--tier", "low", "--personality", "steady"]) == 0

        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "--tier low ignored" in warnings[0]
        loaded = load_opponent_state(path)
        assert loaded.difficulty_tier.value == "high"
        assert loaded.total_attempts == 2

    @pytest.mark.unit
    def test_matching_or_missing_flags_stay_quiet(self, tmp_path, caplog):
        path = str(tmp_path / "state.json")
        save_opponent_state(OpponentState(difficulty_tier="low"), path)

        with caplog.at_level(logging.WARNING, logger="main"):
            main.main(["--matches", "1", "--rounds", "1", "--state-file", path])
            main.main(["--matches", "1", "--rounds", "1", "--state-file", path,
                       "--tier", "low"])

        assert not [r for r in caplog.records if r.levelno == logging.WARNING]
