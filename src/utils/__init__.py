"""Shared utilities."""
from .seed import make_rng, warmup_numba

__all__ = ['make_rng', 'warmup_numba']
