"""
Registry for algorithms and environments.

This module provides a centralized registry for dynamically loading
algorithms and environments based on configuration strings.
"""

from typing import Dict, List, Type


# Algorithm registry - maps algorithm names to their classes
ALGORITHM_REGISTRY: Dict[str, Type] = {}

# Environment registry - maps environment names to their classes
ENVIRONMENT_REGISTRY: Dict[str, Type] = {}


def register_algorithm(name: str):
    """
    Decorator to register an algorithm class.

    Usage:
        @register_algorithm('MyMCTS')
        class MyMCTS(MCTS):
            ...
    """
    def decorator(cls):
        _populate_registries()
        ALGORITHM_REGISTRY[name] = cls
        return cls
    return decorator


def register_environment(name: str):
    """
    Decorator to register an environment class.

    Usage:
        @register_environment('Popout8x7')
        class Popout8x7(ConnectFourPopout):
            ...
    """
    def decorator(cls):
        _populate_registries()
        ENVIRONMENT_REGISTRY[name] = cls
        return cls
    return decorator


def get_algorithm_class(name: str) -> Type:
    """
    Get algorithm class by name.

    Raises:
        ValueError: If algorithm name is not registered
    """
    _populate_registries()
    if name not in ALGORITHM_REGISTRY:
        available = ', '.join(ALGORITHM_REGISTRY.keys())
        raise ValueError(
            f"Unknown algorithm: {name}. "
            f"Available algorithms: {available}"
        )
    return ALGORITHM_REGISTRY[name]


def get_environment_class(name: str) -> Type:
    """
    Get environment class by name.

    Raises:
        ValueError: If environment name is not registered
    """
    _populate_registries()
    if name not in ENVIRONMENT_REGISTRY:
        available = ', '.join(ENVIRONMENT_REGISTRY.keys())
        raise ValueError(
            f"Unknown environment: {name}. "
            f"Available environments: {available}"
        )
    return ENVIRONMENT_REGISTRY[name]


_populated = False


def _populate_registries():
    """
    Populate registries with the built-in algorithm and environment.
    Called lazily on first use to avoid circular imports.
    """
    global _populated
    if _populated:
        return
    _populated = True

    from src.algos.mcts.tree_search import MCTS
    from src.envs.connect_four_popout import ConnectFourPopout
    ALGORITHM_REGISTRY.setdefault('MCTS', MCTS)
    ENVIRONMENT_REGISTRY.setdefault('ConnectFourPopout', ConnectFourPopout)


def list_algorithms() -> List[str]:
    """List all registered algorithms."""
    _populate_registries()
    return list(ALGORITHM_REGISTRY.keys())


def list_environments() -> List[str]:
    """List all registered environments."""
    _populate_registries()
    return list(ENVIRONMENT_REGISTRY.keys())
