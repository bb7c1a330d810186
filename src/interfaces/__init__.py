"""
Interfaces Package

Request/response boundary between a front end (UI, CLI, worker bridge) and
the rules plus search engine.

Main Components:
- session.py: GameSession and its response records
"""

from src.interfaces.session import (
    ApplyMoveResponse,
    BestMoveResponse,
    GameSession,
    LegalMove,
)

__all__ = ['GameSession', 'BestMoveResponse', 'ApplyMoveResponse', 'LegalMove']
