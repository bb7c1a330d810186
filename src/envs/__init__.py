"""
Environments Package

This package contains the game implementations searched by the MCTS engine.
Currently includes Connect Four with the popout rule.
"""

from src.envs.base_game import BaseGame, Outcome, TerminalStatus
from src.envs.connect_four_popout import ConnectFourPopout, GameState, Move, MoveType, Player

__all__ = [
    'BaseGame',
    'Outcome',
    'TerminalStatus',
    'ConnectFourPopout',
    'GameState',
    'Move',
    'MoveType',
    'Player',
]
