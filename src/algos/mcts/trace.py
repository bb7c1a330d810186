"""
Debug trace of a search: the tree's statistics after every iteration.

The recorder only copies the visit and reward arrays of the arena at each
captured iteration. Tree topology is append-only during a search, so a
snapshot taken when the tree had `n` nodes is exactly the first `n` nodes of
the final tree with those statistics. Nested dictionaries are built on
demand when a snapshot is accessed.
"""

import json
import logging
import os
from collections import namedtuple
from collections.abc import Sequence

logger = logging.getLogger(__name__)

Frame = namedtuple('Frame', ['iteration', 'num_nodes', 'visits', 'rewards'])


class DebugTraceRecorder:
    def __init__(self, sample_rate=1):
        if sample_rate < 1:
            raise ValueError(f"sample_rate must be at least 1, got {sample_rate}")
        self.sample_rate = sample_rate
        self._frames = []

    def __len__(self):
        return len(self._frames)

    def record(self, tree, iteration, force=False):
        """
        Capture the tree after `iteration` completed iterations.

        Only every `sample_rate`-th iteration is kept unless `force` is set.
        Returns True when a frame was stored.
        """
        if not force and iteration % self.sample_rate != 0:
            return False
        if self._frames and self._frames[-1].iteration == iteration:
            return False
        n = len(tree)
        self._frames.append(Frame(iteration, n, tree.visits.copy(), tree.rewards.copy()))
        return True

    def finalize(self, tree, iteration):
        """Make sure the last iteration is captured and freeze the trace."""
        if iteration > 0:
            self.record(tree, iteration, force=True)
        return DebugTrace.from_tree(tree, self._frames)


class DebugTrace(Sequence):
    """
    Finite, ordered sequence of tree snapshots.

    Each item is a dict `{action, visit_count, total_reward, children}`
    describing the tree from the root, with children ordered by visit count
    (descending) and then by action.
    """

    def __init__(self, actions, parents, frames):
        self._actions = actions
        self._parents = parents
        self._frames = list(frames)

    @classmethod
    def from_tree(cls, tree, frames):
        actions = [node.action for node in tree.nodes]
        parents = [node.parent for node in tree.nodes]
        return cls(actions, parents, frames)

    @classmethod
    def empty(cls):
        return cls([], [], [])

    def __len__(self):
        return len(self._frames)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self._build(frame) for frame in self._frames[index]]
        return self._build(self._frames[index])

    def iteration_numbers(self):
        return [frame.iteration for frame in self._frames]

    def _build(self, frame):
        n = frame.num_nodes
        nodes = []
        for handle in range(n):
            action = self._actions[handle]
            nodes.append({
                'action': None if action is None else str(action),
                'visit_count': int(frame.visits[handle]),
                'total_reward': float(frame.rewards[handle]),
                'children': [],
            })

        # Children per parent in handle order, then sorted for presentation
        kids = [[] for _ in range(n)]
        for handle in range(1, n):
            kids[self._parents[handle]].append(handle)
        for handle in range(n):
            ordered = sorted(kids[handle],
                             key=lambda h: (-int(frame.visits[h]), self._actions[h]))
            nodes[handle]['children'] = [nodes[h] for h in ordered]
        return nodes[0] if nodes else {}

    def to_list(self):
        return [{'iteration': frame.iteration, 'tree': self._build(frame)} for frame in self._frames]

    def to_json(self, indent=None):
        return json.dumps(self.to_list(), indent=indent)

    def dump(self, directory):
        """Write one JSON file per snapshot into `directory`; returns the paths."""
        os.makedirs(directory, exist_ok=True)
        paths = []
        for frame in self._frames:
            path = os.path.join(directory, f"tree_{frame.iteration:06d}.json")
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(self._build(frame), f, indent=2)
            paths.append(path)
        logger.info("Dumped %d tree snapshots to %s", len(paths), directory)
        return paths


def tree_snapshot(tree, iteration=None):
    """Nested dictionary of the current state of `tree`."""
    if len(tree) == 0:
        return {}
    iteration = tree.visit_count(0) if iteration is None else iteration
    frame = Frame(iteration, len(tree), tree.visits.copy(), tree.rewards.copy())
    return DebugTrace.from_tree(tree, [frame])[0]
