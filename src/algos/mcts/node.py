class Node:
    """
    Structural record of one search-tree node.

    Nodes refer to each other by integer handle into the owning SearchTree;
    visit counts and rewards live in the tree's statistic arrays.
    `mover` is the player whose move produced this node, i.e. the player
    to move at the parent. Rewards stored for the node are from that
    player's point of view.
    """
    __slots__ = (
        'handle', 'parent', 'action', 'state', 'mover',
        'untried_actions', 'children', 'terminal', 'depth',
    )

    def __init__(self, handle, state, untried_actions, terminal, mover, parent=-1, action=None, depth=0):
        self.handle = handle
        self.parent = parent
        self.action = action
        self.state = state
        self.mover = mover
        self.untried_actions = list(untried_actions)
        self.children = []
        self.terminal = terminal
        self.depth = depth

    @property
    def is_root(self):
        return self.parent < 0

    @property
    def is_terminal(self):
        return self.terminal.is_terminal

    def is_fully_expanded(self):
        return len(self.untried_actions) == 0

    def pop_untried(self, rng):
        """Remove and return an untried action chosen uniformly by `rng`."""
        index = int(rng.integers(len(self.untried_actions)))
        return self.untried_actions.pop(index)

    def __repr__(self):
        return (f"Node(handle={self.handle}, action={self.action}, parent={self.parent}, "
                f"children={len(self.children)}, untried={len(self.untried_actions)})")
