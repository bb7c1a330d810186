"""
Connect-Four Popout Environment Package

This package implements Connect Four with the popout rule: a player may
remove their own disc from the bottom of a column instead of inserting one.

Main Components:
- popout_env.py: Player, Move, GameState and the ConnectFourPopout rules
- kernels.py: numba board kernels (line scan, legal masks, drop and pop)
- visualization.py: text and matplotlib rendering of a position
"""

from src.envs.connect_four_popout.popout_env import (
    ConnectFourPopout,
    GameState,
    Move,
    MoveType,
    Player,
)
from src.envs.connect_four_popout.kernels import line_owners_nb, legal_masks_nb
from src.envs.connect_four_popout.visualization import render_board

__all__ = [
    'ConnectFourPopout',
    'GameState',
    'Move',
    'MoveType',
    'Player',
    'line_owners_nb',
    'legal_masks_nb',
    'render_board',
]
