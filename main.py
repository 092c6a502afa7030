"""
main.py - Entry point for Pattern Memory Duel.

Runs headless duels between the adaptive opponent and a fixed-tier
stand-in player, then reports what the opponent learned:
- Pattern generation (systems/pattern_generator.py)
- Round sequencing and scoring (systems/match.py, systems/scoring.py)
- Adaptive opponent (opponent/memory_opponent.py)
- State persistence (opponent/persistence.py)
- Insights report & learning curve (opponent/insights.py)

Run:  python main.py --matches 20 --tier self_adjusting --plot
"""
VERSION = "1.0.0"

import argparse
import logging

logger = logging.getLogger(__name__)

from settings import TITLE, SIM_MATCHES, SIM_ROUNDS, SIM_PLAYER_TIER, STATE_FILE

DEFAULT_TIER = "self_adjusting"
DEFAULT_PERSONALITY = "balanced"
from opponent.opponent_state import DifficultyTier, OpponentState, Personality
from opponent.persistence import load_opponent_state, save_opponent_state
from opponent.insights import format_insights, plot_learning_curve
from opponent.simulation_runner import SimulationRunner


def build_parser() -> argparse.ArgumentParser:
    tiers = [t.value for t in DifficultyTier]
    personalities = [p.value for p in Personality]

    parser = argparse.ArgumentParser(description=TITLE)
    parser.add_argument("--matches", type=int, default=SIM_MATCHES,
                        help="number of matches to simulate")
    parser.add_argument("--rounds", type=int, default=SIM_ROUNDS,
                        help="rounds per match")
    parser.add_argument("--tier", choices=tiers,
                        help="difficulty tier of the opponent under test "
                             f"(default {DEFAULT_TIER}; a loaded state keeps its own)")
    parser.add_argument("--personality", choices=personalities,
                        help=f"default {DEFAULT_PERSONALITY}; a loaded state keeps its own")
    parser.add_argument("--player-tier", choices=tiers, default=SIM_PLAYER_TIER,
                        help="fixed tier of the stand-in player")
    parser.add_argument("--seed", type=int, help="random seed")
    parser.add_argument("--state-file", nargs="?", const=STATE_FILE,
                        help="load / save the opponent's learned state here")
    parser.add_argument("--plot", action="store_true",
                        help="save a learning-curve chart after the run")
    return parser


def _warn_on_profile_mismatch(args: argparse.Namespace, state: OpponentState) -> None:
    saved = {"tier": state.difficulty_tier.value, "personality": state.personality.value}
    for option, saved_value in saved.items():
        requested = getattr(args, option)
        if requested is not None and requested != saved_value:
            logger.warning(
                "--%s %s ignored: saved opponent in %s is %s. "
                "Use a different --state-file to train a new opponent.",
                option, requested, args.state_file, saved_value,
            )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    tier = args.tier or DEFAULT_TIER
    personality = args.personality or DEFAULT_PERSONALITY

    state = None
    if args.state_file:
        state = load_opponent_state(args.state_file)
        if state is None:
            logger.info("No saved opponent at %s – starting fresh.", args.state_file)
            state = OpponentState(difficulty_tier=tier, personality=personality)
        else:
            _warn_on_profile_mismatch(args, state)
            tier = state.difficulty_tier.value
            personality = state.personality.value

    runner = SimulationRunner(
        n_matches=args.matches, n_rounds=args.rounds,
        tier=tier, personality=personality,
        player_tier=args.player_tier, seed=args.seed, state=state,
    )
    runner.run()

    opponent = runner.last_opponent
    print(format_insights(opponent.get_stats(detailed=True)))

    if args.state_file:
        save_opponent_state(opponent.state, args.state_file)
    if args.plot:
        plot_learning_curve(opponent.state)
    return 0


# ── Run ───────────────────────────────────────────────────
if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    raise SystemExit(main())
