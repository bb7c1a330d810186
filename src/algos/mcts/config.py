"""
Default search parameters and argument validation.

All components take a plain `args` dict; missing keys fall back to
DEFAULT_ARGS.
"""

import math
import numbers

DEFAULT_ARGS = {
    'num_searches': 1000,           # iteration budget
    'time_limit': None,             # seconds, checked between iterations
    'C': math.sqrt(2),              # UCB1 exploration constant
    'random_seed': None,
    'max_rollout_depth': 200,       # capped rollouts count as draws
    'playouts_per_simulation': 1,
    'rollout_policy': 'random',     # 'random' or 'greedy_win'
    'trace_sample_rate': 1,
    'debug_track_trees': True,
    'tree_dump_dir': None,
    'progress_bar': False,
}

ROLLOUT_POLICIES = ('random', 'greedy_win')


def resolve_args(args=None):
    """Merge `args` over DEFAULT_ARGS and validate the result."""
    resolved = dict(DEFAULT_ARGS)
    if args:
        resolved.update(args)
    validate_args(resolved)
    return resolved


def validate_args(args):
    num_searches = args['num_searches']
    if isinstance(num_searches, bool) or not isinstance(num_searches, numbers.Integral) or num_searches <= 0:
        raise ValueError(f"num_searches must be a positive integer, got {num_searches!r}")
    if args['C'] < 0:
        raise ValueError(f"C must be non-negative, got {args['C']!r}")
    if args['time_limit'] is not None and args['time_limit'] <= 0:
        raise ValueError(f"time_limit must be positive when set, got {args['time_limit']!r}")
    if args['max_rollout_depth'] < 1:
        raise ValueError(f"max_rollout_depth must be at least 1, got {args['max_rollout_depth']!r}")
    if args['playouts_per_simulation'] < 1:
        raise ValueError(f"playouts_per_simulation must be at least 1, got {args['playouts_per_simulation']!r}")
    if args['trace_sample_rate'] < 1:
        raise ValueError(f"trace_sample_rate must be at least 1, got {args['trace_sample_rate']!r}")
    if args['rollout_policy'] not in ROLLOUT_POLICIES:
        available = ', '.join(ROLLOUT_POLICIES)
        raise ValueError(
            f"Unknown rollout policy: {args['rollout_policy']}. "
            f"Available policies: {available}"
        )
