"""
Strategies Package - Built-in variable ordering strategies.

Import this module to register all built-in strategies.
"""

from .static_order import StaticOrderStrategy
from .mrv import MinimumRemainingValuesStrategy

__all__ = [
    "StaticOrderStrategy",
    "MinimumRemainingValuesStrategy",
]
