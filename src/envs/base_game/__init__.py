"""
Base Game Package

This package provides the abstract interface every game must implement to be
searched by the MCTS engine.

Main Components:
- base_game.py: BaseGame capability interface and the TerminalStatus value
"""

from src.envs.base_game.base_game import BaseGame, Outcome, TerminalStatus

__all__ = [
    'BaseGame',
    'Outcome',
    'TerminalStatus',
]
