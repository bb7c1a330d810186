"""
Arena-backed search tree.

Nodes are appended to a flat list and addressed by integer handle; parent
and child links are handles, never object references. Visit counts and
accumulated rewards are kept in growable numpy arrays indexed by handle,
which makes copying the statistics of the whole tree a pair of slices.
"""

import numpy as np

from src.algos.mcts.node import Node
from src.algos.mcts.utils import ucb1_nb, mean_reward

ROOT = 0


class SearchTree:
    def __init__(self, capacity=1024):
        self.nodes = []
        self._visits = np.zeros(capacity, np.int64)
        self._rewards = np.zeros(capacity, np.float64)

    def __len__(self):
        return len(self.nodes)

    def _ensure_capacity(self):
        n = len(self.nodes)
        if n < self._visits.shape[0]:
            return
        new_capacity = max(1, self._visits.shape[0]) * 2
        visits = np.zeros(new_capacity, np.int64)
        rewards = np.zeros(new_capacity, np.float64)
        visits[:n] = self._visits[:n]
        rewards[:n] = self._rewards[:n]
        self._visits = visits
        self._rewards = rewards

    def _append(self, node):
        self._ensure_capacity()
        self.nodes.append(node)
        self._visits[node.handle] = 0
        self._rewards[node.handle] = 0.0
        return node.handle

    def add_root(self, state, untried_actions, terminal, mover):
        if self.nodes:
            raise RuntimeError("tree already has a root")
        return self._append(Node(ROOT, state, untried_actions, terminal, mover))

    def add_child(self, parent, action, state, untried_actions, terminal, mover):
        handle = len(self.nodes)
        parent_node = self.nodes[parent]
        child = Node(handle, state, untried_actions, terminal, mover,
                     parent=parent, action=action, depth=parent_node.depth + 1)
        self._append(child)
        parent_node.children.append(handle)
        return handle

    @property
    def root(self):
        return self.nodes[ROOT]

    def node(self, handle):
        return self.nodes[handle]

    def children(self, handle):
        return self.nodes[handle].children

    # ---------- statistics ----------
    @property
    def visits(self):
        """Read-only view of visit counts for all nodes."""
        view = self._visits[:len(self.nodes)]
        view.flags.writeable = False
        return view

    @property
    def rewards(self):
        """Read-only view of accumulated rewards for all nodes."""
        view = self._rewards[:len(self.nodes)]
        view.flags.writeable = False
        return view

    def visit_count(self, handle):
        return int(self._visits[handle])

    def total_reward(self, handle):
        return float(self._rewards[handle])

    def mean_reward(self, handle):
        return mean_reward(self._rewards[handle], self._visits[handle])

    def update(self, handle, reward):
        self._visits[handle] += 1
        self._rewards[handle] += reward

    def path_to_root(self, handle):
        """Handles from `handle` up to and including the root."""
        path = []
        while handle >= 0:
            path.append(handle)
            handle = self.nodes[handle].parent
        return path

    # ---------- child selection ----------
    def select_child(self, handle, C):
        """Child maximising UCB1; ties go to the lowest action."""
        best = -1
        best_score = -np.inf
        parent_visits = self._visits[handle]
        for child in self.nodes[handle].children:
            score = ucb1_nb(self._rewards[child], self._visits[child], parent_visits, C)
            if best < 0 or score > best_score or (
                    score == best_score and self.nodes[child].action < self.nodes[best].action):
                best = child
                best_score = score
        return best

    def best_child(self, handle=ROOT):
        """
        Robust child: most visits, then highest average reward, then lowest action.
        Returns -1 when the node has no children.
        """
        best = -1
        for child in self.nodes[handle].children:
            if best < 0:
                best = child
                continue
            visits, best_visits = self._visits[child], self._visits[best]
            if visits != best_visits:
                if visits > best_visits:
                    best = child
                continue
            avg, best_avg = self.mean_reward(child), self.mean_reward(best)
            if avg != best_avg:
                if avg > best_avg:
                    best = child
                continue
            if self.nodes[child].action < self.nodes[best].action:
                best = child
        return best

    def child_stats(self, handle=ROOT):
        """Per-child statistics of a node, most visited first."""
        stats = []
        for child in self.nodes[handle].children:
            stats.append({
                'action': self.nodes[child].action,
                'visit_count': self.visit_count(child),
                'total_reward': self.total_reward(child),
                'mean_reward': self.mean_reward(child),
            })
        stats.sort(key=lambda s: (-s['visit_count'], s['action']))
        return stats
