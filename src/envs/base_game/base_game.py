"""
Two-player game interface used by the search engine.

The engine only ever talks to a game through the methods below, so any
two-player, perfect-information, zero-sum game that implements them can be
searched without touching the engine.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, List, Optional


class Outcome(Enum):
    NOT_TERMINAL = 'not_terminal'
    WIN = 'win'
    DRAW = 'draw'


@dataclass(frozen=True)
class TerminalStatus:
    """Whether a position is finished and, if it is won, by whom."""
    kind: Outcome
    winner: Optional[Any] = None

    @classmethod
    def win(cls, player) -> 'TerminalStatus':
        return cls(Outcome.WIN, player)

    @property
    def is_terminal(self) -> bool:
        return self.kind is not Outcome.NOT_TERMINAL

    def reward_for(self, player) -> float:
        """1.0 for a win by `player`, 0.0 for a loss, 0.5 for a draw or an unfinished game."""
        if self.kind is Outcome.WIN:
            return 1.0 if self.winner == player else 0.0
        return 0.5

    def __str__(self):
        if self.kind is Outcome.WIN:
            return f"Win({self.winner})"
        if self.kind is Outcome.DRAW:
            return "Draw"
        return "NotTerminal"


TerminalStatus.NOT_TERMINAL = TerminalStatus(Outcome.NOT_TERMINAL)
TerminalStatus.DRAW = TerminalStatus(Outcome.DRAW)


# This is not gym-compatible, but serves as a base class for MCTS-like algorithms
class BaseGame:
    """
    Capability interface of a two-player game.

    States must be immutable values: `apply` returns a new state and never
    modifies its input. Actions must be hashable and mutually orderable; the
    natural order is used to break ties deterministically.
    """

    def get_initial_state(self):
        raise NotImplementedError("Subclasses must implement get_initial_state.")

    def legal_actions(self, state) -> List[Hashable]:
        """Must be overridden by subclass. Returns [] for terminal states."""
        raise NotImplementedError("Subclasses must implement legal_actions.")

    def apply(self, state, action):
        """Must be overridden by subclass. Returns the successor state."""
        raise NotImplementedError("Subclasses must implement apply.")

    def terminal_status(self, state) -> TerminalStatus:
        raise NotImplementedError("Subclasses must implement terminal_status.")

    def current_player(self, state):
        raise NotImplementedError("Subclasses must implement current_player.")

    def opponent(self, player):
        raise NotImplementedError("Subclasses must implement opponent.")

    def winning_actions(self, state) -> List[Hashable]:
        """Legal actions after which the side to move has won. Used by greedy rollouts."""
        player = self.current_player(state)
        winning = []
        for action in self.legal_actions(state):
            status = self.terminal_status(self.apply(state, action))
            if status.kind is Outcome.WIN and status.winner == player:
                winning.append(action)
        return winning
