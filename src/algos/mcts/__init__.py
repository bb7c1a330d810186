"""
MCTS Package

This package provides a Monte Carlo Tree Search engine for two-player,
perfect-information, zero-sum games implementing the BaseGame interface.

Main Components:
- tree_search.py: the MCTS search loop and SearchResult
- tree.py / node.py: arena-backed search tree addressed by integer handles
- simulation.py: random and greedy-win rollouts
- trace.py: per-iteration debug trace of the tree statistics
- visualization.py: text, pyvis and HTML rendering of trace snapshots
- config.py: default arguments and validation
"""

from src.algos.mcts.config import DEFAULT_ARGS, resolve_args
from src.algos.mcts.trace import DebugTrace, DebugTraceRecorder, tree_snapshot
from src.algos.mcts.tree import SearchTree
from src.algos.mcts.tree_search import MCTS, SearchResult
from src.algos.mcts.visualization import format_tree, save_trace_html, tree_visualization

__all__ = [
    'MCTS',
    'SearchResult',
    'SearchTree',
    'DebugTrace',
    'DebugTraceRecorder',
    'tree_snapshot',
    'DEFAULT_ARGS',
    'resolve_args',
    'format_tree',
    'tree_visualization',
    'save_trace_html',
]
