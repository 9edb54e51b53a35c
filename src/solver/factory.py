"""
Strategy Factory Module - Registry of variable ordering strategies.

Strategies register themselves on import (see strategies/__init__.py);
Problem and the CLI look them up by name.
"""

from typing import Dict, List, Type, Union

from .base import OrderingStrategy


DEFAULT_STRATEGY = "static"

# Name -> strategy class
_STRATEGIES: Dict[str, Type[OrderingStrategy]] = {}


def register_strategy(cls: Type[OrderingStrategy]) -> Type[OrderingStrategy]:
    """
    Class decorator adding an ordering strategy to the registry.

    Args:
        cls: Strategy class with a unique name attribute

    Returns:
        The same class
    """
    _STRATEGIES[cls.name] = cls
    return cls


def create_strategy(name: str) -> OrderingStrategy:
    """
    Instantiate a registered strategy.

    Raises:
        ValueError: If strategy name not found
    """
    if name not in _STRATEGIES:
        available = ", ".join(_STRATEGIES.keys())
        raise ValueError(f"Unknown strategy: {name}. Available: {available}")
    return _STRATEGIES[name]()


def resolve_strategy(strategy: Union[str, OrderingStrategy, None]) -> OrderingStrategy:
    """
    Accept a strategy instance, a registered name, or None for the default.
    """
    if isinstance(strategy, OrderingStrategy):
        return strategy
    return create_strategy(strategy or DEFAULT_STRATEGY)


def get_strategy_names() -> List[str]:
    return list(_STRATEGIES.keys())


def get_strategy_info() -> List[Dict[str, str]]:
    """
    Name and description of every registered strategy, for CLI listings.
    """
    return [
        {"name": cls.name, "description": cls.description}
        for cls in _STRATEGIES.values()
    ]
