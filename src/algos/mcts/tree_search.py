import logging
import time
from dataclasses import dataclass
from typing import Any

import numpy as np
from tqdm import trange

from src.algos.mcts.config import resolve_args
from src.algos.mcts.simulation import rollout_many
from src.algos.mcts.trace import DebugTrace, DebugTraceRecorder, tree_snapshot
from src.algos.mcts.tree import ROOT, SearchTree
from src.algos.mcts.utils import ucb1_nb
from src.errors import SearchOnTerminalState

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    best_move: Any
    debug_trace: DebugTrace
    root_visits: int
    iterations: int
    elapsed: float


class MCTS:
    """
    Monte Carlo Tree Search over any game implementing BaseGame.

    Each call to `search` builds a fresh tree rooted at the given state, runs
    `num_searches` iterations (or fewer if `time_limit` runs out) and picks
    the most visited root child.
    """

    def __init__(self, game, args=None, rng=None):
        self.game = game
        self.args = resolve_args(args)
        self.rng = rng if rng is not None else np.random.default_rng(self.args['random_seed'])
        self.last_tree = None
        self.last_result = None

    @staticmethod
    def ucb1_score(total_reward, visit_count, parent_visits, C):
        return float(ucb1_nb(float(total_reward), int(visit_count), int(parent_visits), float(C)))

    def _new_node(self, tree, state, parent=None, action=None):
        terminal = self.game.terminal_status(state)
        untried = [] if terminal.is_terminal else self.game.legal_actions(state)
        if parent is None:
            mover = self.game.opponent(self.game.current_player(state))
            return tree.add_root(state, untried, terminal, mover)
        mover = self.game.current_player(tree.node(parent).state)
        return tree.add_child(parent, action, state, untried, terminal, mover)

    def _iterate(self, tree):
        """Run one selection / expansion / simulation / backpropagation pass."""
        C = self.args['C']

        # selection
        handle = ROOT
        node = tree.node(handle)
        while not node.is_terminal and node.is_fully_expanded() and node.children:
            handle = tree.select_child(handle, C)
            node = tree.node(handle)

        # expansion
        if not node.is_terminal and not node.is_fully_expanded():
            action = node.pop_untried(self.rng)
            child_state = self.game.apply(node.state, action)
            handle = self._new_node(tree, child_state, parent=handle, action=action)
            node = tree.node(handle)

        # simulation
        if node.is_terminal:
            outcomes = [node.terminal]
        else:
            outcomes = rollout_many(
                self.game, node.state, self.rng,
                self.args['playouts_per_simulation'],
                self.args['max_rollout_depth'],
                self.args['rollout_policy'],
            )

        # backpropagation
        rewards = {}
        for h in tree.path_to_root(handle):
            mover = tree.node(h).mover
            if mover not in rewards:
                rewards[mover] = sum(o.reward_for(mover) for o in outcomes) / len(outcomes)
            tree.update(h, rewards[mover])

    def search(self, state):
        status = self.game.terminal_status(state)
        if status.is_terminal:
            raise SearchOnTerminalState(status)

        num_searches = self.args['num_searches']
        time_limit = self.args['time_limit']
        recorder = None
        if self.args['debug_track_trees']:
            recorder = DebugTraceRecorder(self.args['trace_sample_rate'])

        tree = SearchTree()
        self._new_node(tree, state)
        self.last_tree = tree

        if self.args.get('progress_bar', False):
            search_iterator = trange(num_searches, desc="MCTS", leave=False)
        else:
            search_iterator = range(num_searches)

        start = time.perf_counter()
        iterations = 0
        for _ in search_iterator:
            self._iterate(tree)
            iterations += 1
            if recorder is not None:
                recorder.record(tree, iterations)
            if time_limit is not None and time.perf_counter() - start >= time_limit:
                break
        elapsed = time.perf_counter() - start

        if recorder is not None:
            trace = recorder.finalize(tree, iterations)
        else:
            trace = DebugTrace.empty()

        best = tree.best_child(ROOT)
        best_move = tree.node(best).action
        logger.debug(
            "search: %d iterations, %d nodes, best %s (%d visits), %.3fs",
            iterations, len(tree), best_move, tree.visit_count(best), elapsed,
        )

        if self.args['tree_dump_dir']:
            if recorder is None:
                # Dump the final tree alone when no trace was recorded
                final = DebugTraceRecorder()
                final.record(tree, iterations, force=True)
                final.finalize(tree, iterations).dump(self.args['tree_dump_dir'])
            else:
                trace.dump(self.args['tree_dump_dir'])

        self.last_result = SearchResult(
            best_move=best_move,
            debug_trace=trace,
            root_visits=tree.visit_count(ROOT),
            iterations=iterations,
            elapsed=elapsed,
        )
        return self.last_result

    def best_action(self, state):
        return self.search(state).best_move

    def action_visits(self):
        """Visit counts of the root children of the last search, keyed by action."""
        if self.last_tree is None:
            return {}
        return {s['action']: s['visit_count'] for s in self.last_tree.child_stats(ROOT)}

    def format_tree(self, max_depth=None):
        """Pretty print of the last search tree."""
        from src.algos.mcts.visualization import format_tree
        if self.last_tree is None:
            return ""
        return format_tree(tree_snapshot(self.last_tree), max_depth=max_depth)
