"""Random generator construction and numba warmup for reproducibility."""
import numpy as np


def make_rng(seed=None, worker_id: int = 0) -> np.random.Generator:
    """
    Build a numpy Generator for a seed.

    Args:
        seed: Base random seed, or None for OS entropy
        worker_id: Offset for deterministic per-player seeding (default 0)

    Returns:
        np.random.Generator seeded with seed + worker_id * 10000
    """
    if seed is None:
        return np.random.default_rng()
    return np.random.default_rng(seed + worker_id * 10000)


def warmup_numba(width: int = 7, height: int = 6):
    """
    Trigger compilation of the board kernels on a tiny dummy position.
    Call once at process startup so the first search is not charged for JIT.
    """
    # Import here to avoid circular dependencies
    from src.envs.connect_four_popout.kernels import (
        CONNECT, column_heights_nb, drop_disc_nb, legal_masks_nb, line_owners_nb, pop_disc_nb,
    )
    from src.algos.mcts.utils import ucb1_nb

    board = np.zeros((height, width), dtype=np.int8)
    heights = np.zeros(width, dtype=np.int64)
    drop_disc_nb(board, heights, 0, 1)
    legal_masks_nb(board, heights, 1)
    line_owners_nb(board, CONNECT)
    pop_disc_nb(board, heights, 0)
    column_heights_nb(board)
    ucb1_nb(0.5, np.int64(1), np.int64(2), 1.0)
