from src.envs.base_game import TerminalStatus


def simulate(game, state, rng, max_depth, policy='random'):
    """
    Play from `state` until the game ends or `max_depth` moves were made.

    Moves are drawn uniformly from the legal actions with `rng`. With the
    'greedy_win' policy an immediately winning move is played whenever one
    exists. A rollout that hits the depth cap is scored as a draw.

    Returns:
        TerminalStatus: outcome of the playout (never NOT_TERMINAL)
    """
    status = game.terminal_status(state)
    depth = 0
    while not status.is_terminal:
        if depth >= max_depth:
            return TerminalStatus.DRAW

        actions = game.legal_actions(state)
        if not actions:
            raise RuntimeError(
                f"{type(game).__name__} reports no legal actions for a non-terminal state"
            )

        action = None
        if policy == 'greedy_win':
            winning = game.winning_actions(state)
            if winning:
                action = winning[0]
        if action is None:
            action = actions[int(rng.integers(len(actions)))]

        state = game.apply(state, action)
        status = game.terminal_status(state)
        depth += 1

    return status


def rollout_many(game, state, rng, num_playouts, max_depth, policy='random'):
    """Run `num_playouts` independent playouts from the same state; return the outcomes."""
    return [simulate(game, state, rng, max_depth, policy) for _ in range(num_playouts)]
