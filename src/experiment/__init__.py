"""
Experiment module for playing matches between players.

Usage:
    from src.experiment import ExperimentRunner, run_experiment

    config = {
        'player1': 'MCTS',
        'player2': 'MCTS',
        'num_searches': 1000,
        'player2_rollout_policy': 'greedy_win',
        ...
    }

    # Option 1: Use the runner class
    runner = ExperimentRunner(config)
    result = runner.run()

    # Option 2: Use the convenience function
    result = run_experiment(config)
"""

from src.experiment.runner import ExperimentRunner, MatchResult, run_experiment
from src.experiment.results import record_to_table
from src.experiment.registry import (
    register_algorithm,
    register_environment,
    get_algorithm_class,
    get_environment_class,
    list_algorithms,
    list_environments,
    ALGORITHM_REGISTRY,
    ENVIRONMENT_REGISTRY
)

__all__ = [
    'ExperimentRunner',
    'MatchResult',
    'run_experiment',
    'record_to_table',

    # Registry functions
    'register_algorithm',
    'register_environment',
    'get_algorithm_class',
    'get_environment_class',
    'list_algorithms',
    'list_environments',
    'ALGORITHM_REGISTRY',
    'ENVIRONMENT_REGISTRY',
]
