"""
Experiment runner for algorithm evaluation.

Plays one full game of a registered environment between two players. Each
player is either a registered search algorithm or a human typing moves.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from src.envs.base_game import TerminalStatus
from src.envs.connect_four_popout import Move, Player
from src.experiment.registry import get_algorithm_class, get_environment_class
from src.utils.seed import make_rng

logger = logging.getLogger(__name__)

HUMAN = 'human'

DEFAULT_CONFIG = {
    'environment': 'ConnectFourPopout',
    'width': 7,
    'height': 6,
    'player1': 'MCTS',
    'player2': 'MCTS',
    'max_moves': None,
    'record_results': False,
    'display_state': False,
}


@dataclass
class MatchResult:
    winner: Optional[Player]
    status: TerminalStatus
    moves: List[Move] = field(default_factory=list)
    time_used: float = 0.0

    @property
    def num_moves(self) -> int:
        return len(self.moves)

    def to_row(self) -> Dict[str, Any]:
        return {
            'winner': None if self.winner is None else int(self.winner),
            'status': str(self.status),
            'num_moves': self.num_moves,
            'moves': ' '.join(str(m) for m in self.moves),
            'time_used': self.time_used,
        }


class HumanPlayer:
    """Reads moves such as `i 3` or `p 0` from an input callable until a legal one is given."""

    def __init__(self, game, input_fn: Callable[[str], str] = input, output_fn: Callable[[str], Any] = print):
        self.game = game
        self.input_fn = input_fn
        self.output_fn = output_fn

    def choose(self, state) -> Move:
        legal = self.game.legal_actions(state)
        while True:
            text = self.input_fn(f"{state.current_player} move (i <col> / p <col>): ")
            try:
                move = Move.parse(text)
            except ValueError as e:
                self.output_fn(str(e))
                continue
            if move in legal:
                return move
            self.output_fn(f"{move} is not legal here. Legal: {', '.join(str(m) for m in legal)}")


class ExperimentRunner:
    """
    Experiment runner that orchestrates algorithm-environment interactions.

    Player-specific search arguments use the `player1_` / `player2_` prefix,
    e.g. `player1_num_searches`; unprefixed keys apply to both players.

    Example:
        config = {
            'player1': 'MCTS',
            'player2': 'MCTS',
            'num_searches': 500,
            'player2_num_searches': 2000,
            'random_seed': 0,
        }
        result = ExperimentRunner(config).run()
    """

    def __init__(self, config: Dict[str, Any], input_fn: Callable[[str], str] = input,
                 output_fn: Callable[[str], Any] = print):
        self.config = dict(DEFAULT_CONFIG)
        self.config.update(config)
        self.input_fn = input_fn
        self.output_fn = output_fn
        self.env = None
        self.players = {}
        self.final_state = None

    def player_args(self, player: Player) -> Dict[str, Any]:
        prefix = f"player{int(player)}_"
        args = {k: v for k, v in self.config.items() if not k.startswith(('player1', 'player2'))}
        for key, value in self.config.items():
            if key.startswith(prefix):
                args[key[len(prefix):]] = value
        return args

    def setup(self):
        """Set up the environment and both players based on configuration."""
        env_class = get_environment_class(self.config['environment'])
        self.env = env_class(self.config['width'], self.config['height'], args=self.config)

        seed = self.config.get('random_seed')
        for player in (Player.PLAYER1, Player.PLAYER2):
            kind = self.config[f"player{int(player)}"]
            if kind == HUMAN:
                self.players[player] = HumanPlayer(self.env, self.input_fn, self.output_fn)
                continue
            algo_class = get_algorithm_class(kind)
            args = self.player_args(player)
            rng = make_rng(seed, worker_id=int(player)) if seed is not None else None
            self.players[player] = algo_class(self.env, args=args, rng=rng)

    def _choose(self, player, state) -> Move:
        agent = self.players[player]
        if isinstance(agent, HumanPlayer):
            return agent.choose(state)
        return agent.search(state).best_move

    def run(self) -> MatchResult:
        """
        Play the game to the end (or to `max_moves`, which counts as a draw).

        Returns:
            MatchResult of the game
        """
        if self.env is None:
            self.setup()

        start = time.time()
        state = self.env.get_initial_state()
        moves = []
        max_moves = self.config.get('max_moves')

        status = self.env.terminal_status(state)
        while not status.is_terminal:
            if max_moves is not None and len(moves) >= max_moves:
                status = TerminalStatus.DRAW
                break
            if self.config.get('display_state', False):
                self.output_fn(str(state))

            player = state.current_player
            move = self._choose(player, state)
            logger.info("%s plays %s", player, move)
            moves.append(move)
            state = self.env.apply(state, move)
            status = self.env.terminal_status(state)

        end = time.time()
        result = MatchResult(winner=status.winner, status=status, moves=moves, time_used=end - start)
        logger.info("Game over after %d moves: %s (%.3f sec)", result.num_moves, status, result.time_used)

        if self.config.get('display_state', False):
            self.output_fn(self.env.render(state))
            self.output_fn(f"Result: {status}")

        if self.config.get('record_results', False):
            from src.experiment.results import record_to_table
            row = result.to_row()
            row.update({'start_time': start, 'end_time': end})
            record_to_table(self.config, row)

        self.final_state = state
        return result


def run_experiment(config: Dict[str, Any], **kwargs) -> MatchResult:
    """
    Run a single game with the given configuration.

    This is a convenience function that creates and runs an ExperimentRunner.
    """
    runner = ExperimentRunner(config, **kwargs)
    return runner.run()


__all__ = ['ExperimentRunner', 'HumanPlayer', 'MatchResult', 'run_experiment', 'HUMAN']
