"""
Exception types shared by the game rules, the search engine and the session layer.
"""


class GameError(Exception):
    """Base class for every rules, search and session failure."""


class IllegalMove(GameError):
    """A move that the rules do not allow in the current position."""

    def __init__(self, move, reason):
        self.move = move
        self.reason = reason
        super().__init__(f"illegal move {move}: {reason}")


class InvalidColumn(GameError, IndexError):
    """Column index outside [0, width)."""

    def __init__(self, column, width):
        self.column = column
        self.width = width
        super().__init__(f"column {column} is outside [0, {width})")


class InvalidState(GameError, ValueError):
    """A board description that cannot occur under the rules."""


class SearchOnTerminalState(GameError):
    """Search was requested on a position that is already won or drawn."""

    def __init__(self, status):
        self.status = status
        super().__init__(f"cannot search a terminal position ({status})")


class NotCpuTurn(GameError):
    pass


class GameOver(GameError):
    pass


__all__ = [
    'GameError',
    'IllegalMove',
    'InvalidColumn',
    'InvalidState',
    'SearchOnTerminalState',
    'NotCpuTurn',
    'GameOver',
]
