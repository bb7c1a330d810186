"""
Command line entry point.

    python -m src.experiment.cli --player1 human --num-searches 2000
    python -m src.experiment.cli --games 10 --player2-rollout-policy greedy_win --record
"""

import argparse
import logging
from collections import Counter

from src.algos.mcts.config import DEFAULT_ARGS, ROLLOUT_POLICIES
from src.experiment.registry import list_algorithms
from src.experiment.runner import HUMAN, run_experiment
from src.utils.seed import warmup_numba

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Play Connect Four Popout between MCTS players or against a human"
    )
    parser.add_argument("--width", type=int, default=7, help="Board width")
    parser.add_argument("--height", type=int, default=6, help="Board height")
    for player in ("player1", "player2"):
        parser.add_argument(
            f"--{player}", type=str, default="MCTS",
            help=f"'{HUMAN}' or a registered algorithm for {player}"
        )
        parser.add_argument(
            f"--{player}-num-searches", type=int, default=None,
            help=f"Iteration budget for {player} only"
        )
        parser.add_argument(
            f"--{player}-rollout-policy", type=str, default=None, choices=ROLLOUT_POLICIES,
            help=f"Rollout policy for {player} only"
        )
    parser.add_argument(
        "--num-searches", type=int, default=DEFAULT_ARGS['num_searches'],
        help="Iterations per move"
    )
    parser.add_argument(
        "--time-limit", type=float, default=None,
        help="Seconds per move (stops the search early)"
    )
    parser.add_argument("--C", type=float, default=DEFAULT_ARGS['C'], help="UCB1 exploration constant")
    parser.add_argument(
        "--playouts", type=int, default=DEFAULT_ARGS['playouts_per_simulation'],
        help="Rollouts per simulation"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--games", type=int, default=1, help="Number of games to play")
    parser.add_argument("--max-moves", type=int, default=None, help="Declare a draw after this many moves")
    parser.add_argument("--record", action="store_true", help="Append results to table_dir")
    parser.add_argument("--table-dir", type=str, default="results", help="Directory of the results CSV")
    parser.add_argument("--quiet", action="store_true", help="Do not print the board")
    parser.add_argument("--progress-bar", action="store_true", help="Show a progress bar per search")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    return parser


def config_from_args(args):
    config = {
        'width': args.width,
        'height': args.height,
        'player1': args.player1,
        'player2': args.player2,
        'num_searches': args.num_searches,
        'time_limit': args.time_limit,
        'C': args.C,
        'playouts_per_simulation': args.playouts,
        'random_seed': args.seed,
        'max_moves': args.max_moves,
        'record_results': args.record,
        'table_dir': args.table_dir,
        'display_state': not args.quiet,
        'progress_bar': args.progress_bar,
        'debug_track_trees': False,
    }
    for player in ("player1", "player2"):
        num_searches = getattr(args, f"{player}_num_searches")
        if num_searches is not None:
            config[f"{player}_num_searches"] = num_searches
        policy = getattr(args, f"{player}_rollout_policy")
        if policy is not None:
            config[f"{player}_rollout_policy"] = policy
    return config


def play_games(args):
    """Play `args.games` games and count the final statuses."""
    outcomes = Counter()
    for game in range(args.games):
        config = config_from_args(args)
        if args.seed is not None:
            config['random_seed'] = args.seed + game
        result = run_experiment(config)
        outcomes[str(result.status)] += 1
        logger.info("Game %d: %s in %d moves", game + 1, result.status, result.num_moves)

    if args.games > 1:
        logger.info("Summary: %s", dict(outcomes))
    return outcomes


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    for player in (args.player1, args.player2):
        if player != HUMAN and player not in list_algorithms():
            parser.error(f"unknown player {player!r}; choose '{HUMAN}' or one of {list_algorithms()}")

    warmup_numba(args.width, args.height)
    play_games(args)


if __name__ == "__main__":
    main()
