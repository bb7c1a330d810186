"""
Connect-Four "popout" environment.

Besides the classic insert move, a player may pop their own disc from the
bottom of a column; every disc above it falls one row. Because a pop can
complete lines anywhere in the shifted column, wins are always re-checked
over the whole board.
"""

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence

import numpy as np

from src.envs.base_game import BaseGame, TerminalStatus
from src.envs.connect_four_popout.kernels import (
    CONNECT,
    EMPTY,
    column_heights_nb,
    drop_disc_nb,
    legal_masks_nb,
    line_owners_nb,
    pop_disc_nb,
)
from src.envs.connect_four_popout.visualization import display_state, render_board
from src.errors import IllegalMove, InvalidColumn, InvalidState


class Player(IntEnum):
    PLAYER1 = 1
    PLAYER2 = 2

    def other(self) -> 'Player':
        return Player.PLAYER2 if self is Player.PLAYER1 else Player.PLAYER1

    def __str__(self):
        return f"Player {self.value}"


class MoveType(IntEnum):
    INSERT = 0
    POP = 1


_MOVE_PATTERN = re.compile(r'^\s*(insert|pop|i|p)\s*[\(\s]\s*(-?\d+)\s*\)?\s*$', re.IGNORECASE)


@dataclass(frozen=True, order=True)
class Move:
    """Insert or pop at a column. Orders by column, then insert before pop."""
    column: int
    move_type: MoveType = MoveType.INSERT

    def __post_init__(self):
        object.__setattr__(self, 'column', int(self.column))
        object.__setattr__(self, 'move_type', MoveType(self.move_type))

    @classmethod
    def insert(cls, column: int) -> 'Move':
        return cls(column, MoveType.INSERT)

    @classmethod
    def pop(cls, column: int) -> 'Move':
        return cls(column, MoveType.POP)

    @classmethod
    def parse(cls, text: str) -> 'Move':
        """Parse `Insert(3)`, `Pop(3)`, `i 3` or `p 3`."""
        match = _MOVE_PATTERN.match(text)
        if match is None:
            raise ValueError(f"cannot parse move: {text!r}")
        kind, column = match.group(1).lower(), int(match.group(2))
        if kind in ('i', 'insert'):
            return cls.insert(column)
        return cls.pop(column)

    @property
    def is_insert(self) -> bool:
        return self.move_type is MoveType.INSERT

    def __str__(self):
        name = 'Insert' if self.move_type is MoveType.INSERT else 'Pop'
        return f"{name}({self.column})"


@dataclass(frozen=True, eq=False)
class GameState:
    """
    Immutable position: board, column fill heights and the side to move.

    The state keeps its own read-only copies of the arrays it is given, so
    it can be shared by any number of tree nodes. `heights` must match the
    disc counts of `board`.
    """
    board: np.ndarray
    heights: np.ndarray
    current_player: Player

    def __post_init__(self):
        board = np.array(self.board, dtype=np.int8)
        heights = np.array(self.heights, dtype=np.int64)
        if board.ndim != 2 or heights.shape != (board.shape[1],):
            raise InvalidState(f"heights of shape {heights.shape} do not fit a board of shape {board.shape}")
        if not np.array_equal(column_heights_nb(board), heights):
            raise InvalidState(f"heights {heights.tolist()} do not match the board")
        board.flags.writeable = False
        heights.flags.writeable = False
        object.__setattr__(self, 'board', board)
        object.__setattr__(self, 'heights', heights)
        object.__setattr__(self, 'current_player', Player(self.current_player))

    @classmethod
    def empty(cls, width: int, height: int, current_player: Player = Player.PLAYER1) -> 'GameState':
        return cls(np.zeros((height, width), np.int8), np.zeros(width, np.int64), Player(current_player))

    @classmethod
    def from_rows(cls, rows: Sequence, current_player: Player = Player.PLAYER1) -> 'GameState':
        """
        Build a state from rows listed top to bottom.

        Rows are strings such as "..12..." ('.' or '0' empty) or sequences
        of 0/1/2. Raises InvalidState for ragged rows, unknown cells or discs
        that float above an empty cell.
        """
        if len(rows) == 0:
            raise InvalidState("board needs at least one row")
        parsed = []
        for row in rows:
            if isinstance(row, str):
                row = row.replace(' ', '')
                try:
                    cells = [0 if ch in '.0' else int(ch) for ch in row]
                except ValueError:
                    raise InvalidState(f"unknown cell in row {row!r}") from None
            else:
                cells = [int(v) for v in row]
            parsed.append(cells)
        width = len(parsed[0])
        if width == 0 or any(len(r) != width for r in parsed):
            raise InvalidState("rows must be non-empty and of equal length")

        board = np.array(parsed[::-1], dtype=np.int8)
        if not np.isin(board, (0, 1, 2)).all():
            raise InvalidState("cells must be 0, 1 or 2")
        heights = column_heights_nb(board)
        if (heights < 0).any():
            bad = [int(c) for c in np.flatnonzero(heights < 0)]
            raise InvalidState(f"floating discs in columns {bad}")
        return cls(board, heights, Player(current_player))

    @property
    def width(self) -> int:
        return self.board.shape[1]

    @property
    def height(self) -> int:
        return self.board.shape[0]

    def key(self):
        return (self.board.shape, self.board.tobytes(), int(self.current_player))

    def __eq__(self, other):
        if not isinstance(other, GameState):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def __str__(self):
        return f"{render_board(self.board)}\n{self.current_player}'s turn"


class ConnectFourPopout(BaseGame):
    """
    Popout rules on a width x height board.
    Compatible with the MCTS engine through the BaseGame interface.
    """

    def __init__(self, width: int = 7, height: int = 6, args: Optional[dict] = None):
        if width < 1 or height < 1:
            raise ValueError(f"board must be at least 1x1, got {width}x{height}")
        self.width = width
        self.height = height
        self.args = args if args is not None else {}
        self.connect = CONNECT

    def get_initial_state(self, first_player: Player = Player.PLAYER1) -> GameState:
        return GameState.empty(self.width, self.height, first_player)

    def current_player(self, state: GameState) -> Player:
        return state.current_player

    def opponent(self, player: Player) -> Player:
        return Player(player).other()

    def _check_column(self, column: int):
        if not 0 <= column < self.width:
            raise InvalidColumn(column, self.width)

    def insert_row(self, state: GameState, column: int) -> Optional[int]:
        """Row an Insert into `column` would land on, or None if the column is full."""
        self._check_column(column)
        row = int(state.heights[column])
        return row if row < self.height else None

    def legal_actions(self, state: GameState) -> List[Move]:
        if self.terminal_status(state).is_terminal:
            return []
        return self._enumerate_moves(state)

    def _enumerate_moves(self, state: GameState) -> List[Move]:
        insert_mask, pop_mask = legal_masks_nb(state.board, state.heights, int(state.current_player))
        moves = []
        for column in range(self.width):
            if insert_mask[column]:
                moves.append(Move.insert(column))
            if pop_mask[column]:
                moves.append(Move.pop(column))
        return moves

    def apply(self, state: GameState, move: Move) -> GameState:
        column = move.column
        self._check_column(column)
        piece = int(state.current_player)
        board = state.board.copy()
        heights = state.heights.copy()

        if move.move_type is MoveType.INSERT:
            if heights[column] >= self.height:
                raise IllegalMove(move, f"column {column} is full")
            drop_disc_nb(board, heights, column, piece)
        else:
            if heights[column] == 0:
                raise IllegalMove(move, f"column {column} is empty")
            if board[0, column] != piece:
                raise IllegalMove(move, f"bottom disc of column {column} is not {state.current_player}'s")
            pop_disc_nb(board, heights, column)

        return GameState(board, heights, state.current_player.other())

    def terminal_status(self, state: GameState) -> TerminalStatus:
        owners = line_owners_nb(state.board, self.connect)
        p1 = owners[Player.PLAYER1] == 1
        p2 = owners[Player.PLAYER2] == 1
        if p1 and p2:
            # Both colours completed a line after a pop: the player who just moved wins.
            return TerminalStatus.win(state.current_player.other())
        if p1:
            return TerminalStatus.win(Player.PLAYER1)
        if p2:
            return TerminalStatus.win(Player.PLAYER2)

        piece = int(state.current_player)
        can_insert = bool((state.heights < self.height).any())
        can_pop = bool(((state.heights > 0) & (state.board[0] == piece)).any())
        if not can_insert and not can_pop:
            return TerminalStatus.DRAW
        return TerminalStatus.NOT_TERMINAL

    def render(self, state: GameState) -> str:
        return render_board(state.board)

    def display_state(self, state: GameState, ax=None, save_path=None, highlight=None):
        """Draw the board with matplotlib."""
        return display_state(self, state, ax=ax, save_path=save_path, highlight=highlight)


__all__ = ['Player', 'MoveType', 'Move', 'GameState', 'ConnectFourPopout', 'EMPTY']
