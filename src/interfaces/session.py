"""
One game between a human and the CPU, driven request by request.

A session owns the current position, the search arguments and a seeded
random generator that is reused across calls, so a replay of the same
requests gives the same CPU moves.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from src.algos.mcts import MCTS, DebugTrace, resolve_args
from src.envs.base_game import TerminalStatus
from src.envs.connect_four_popout import ConnectFourPopout, GameState, Move, MoveType, Player
from src.errors import GameOver, IllegalMove, NotCpuTurn, SearchOnTerminalState
from src.utils.seed import make_rng

logger = logging.getLogger(__name__)

DEFAULT_SESSION_SEED = 42


@dataclass(frozen=True)
class BestMoveResponse:
    actual_move: Move
    maybe_insert_row: Optional[int]
    debug_trace: DebugTrace

    def to_dict(self, include_trace=False):
        out = {
            'actual_move': str(self.actual_move),
            'maybe_insert_row': self.maybe_insert_row,
        }
        if include_trace:
            out['debug_trace'] = list(self.debug_trace)
        return out


@dataclass(frozen=True)
class ApplyMoveResponse:
    new_terminal_status: TerminalStatus

    def to_dict(self):
        return {'new_terminal_status': str(self.new_terminal_status)}


@dataclass(frozen=True)
class LegalMove:
    move_type: MoveType
    row: Optional[int]
    column: int

    def to_move(self) -> Move:
        return Move(self.column, self.move_type)

    def to_dict(self):
        return {'move_type': self.move_type.name.capitalize(), 'row': self.row, 'column': self.column}


def _coerce_move(move: Union[Move, Mapping]) -> Move:
    if isinstance(move, Move):
        return move
    try:
        move_type = move['move_type']
        if isinstance(move_type, str):
            move_type = MoveType[move_type.upper()]
        return Move(int(move['column']), MoveType(move_type))
    except (KeyError, TypeError, ValueError) as exc:
        raise IllegalMove(move, f"cannot read a move from it ({exc!r})") from None


class GameSession:
    """
    Human vs CPU game on a width x height popout board.

    The CPU plays Player 1 when `cpu_is_first` is set, Player 2 otherwise;
    Player 1 always moves first.
    """

    def __init__(self, width: int = 7, height: int = 6, cpu_is_first: bool = True,
                 args: Optional[dict] = None):
        self.args = resolve_args(args)
        seed = self.args['random_seed']
        self.rng = make_rng(DEFAULT_SESSION_SEED if seed is None else seed)
        self.game = ConnectFourPopout(width, height, args=self.args)
        self.cpu_player = Player.PLAYER1 if cpu_is_first else Player.PLAYER2
        self._state = self.game.get_initial_state(Player.PLAYER1)
        self.mcts = MCTS(self.game, args=self.args, rng=self.rng)

    @property
    def width(self) -> int:
        return self.game.width

    @property
    def height(self) -> int:
        return self.game.height

    @property
    def state(self) -> GameState:
        return self._state

    def turn(self) -> Player:
        return self._state.current_player

    def is_cpu_turn(self) -> bool:
        return self.turn() == self.cpu_player

    def terminal_status(self) -> TerminalStatus:
        return self.game.terminal_status(self._state)

    def get_best_move(self) -> BestMoveResponse:
        status = self.terminal_status()
        if status.is_terminal:
            raise SearchOnTerminalState(status)
        if not self.is_cpu_turn():
            raise NotCpuTurn(f"it is {self.turn()}'s turn, the CPU plays {self.cpu_player}")

        result = self.mcts.search(self._state)
        move = result.best_move
        row = self.game.insert_row(self._state, move.column) if move.is_insert else None
        logger.info("CPU (%s) chose %s after %d iterations", self.cpu_player, move, result.iterations)
        return BestMoveResponse(actual_move=move, maybe_insert_row=row, debug_trace=result.debug_trace)

    def apply_move(self, move: Union[Move, Mapping]) -> ApplyMoveResponse:
        status = self.terminal_status()
        if status.is_terminal:
            raise GameOver(f"game is already over ({status})")
        move = _coerce_move(move)
        self._state = self.game.apply(self._state, move)
        new_status = self.game.terminal_status(self._state)
        logger.debug("applied %s, status %s", move, new_status)
        return ApplyMoveResponse(new_terminal_status=new_status)

    def get_legal_moves(self):
        moves = []
        for move in self.game.legal_actions(self._state):
            row = self.game.insert_row(self._state, move.column) if move.is_insert else None
            moves.append(LegalMove(move_type=move.move_type, row=row, column=move.column))
        return moves

    def render(self) -> str:
        return str(self._state)
