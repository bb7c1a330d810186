import numpy as np
from numba import njit


@njit(cache=True, nogil=True)
def ucb1_nb(total_reward, visit_count, parent_visits, C):
    """
    UCB1 score of a child.

    Unvisited children score +inf so every child is tried before any
    sibling is revisited.
    """
    if visit_count == 0:
        return np.inf
    exploit = total_reward / visit_count
    explore = C * np.sqrt(np.log(parent_visits) / visit_count)
    return exploit + explore


def mean_reward(total_reward, visit_count):
    return total_reward / visit_count if visit_count > 0 else 0.0
