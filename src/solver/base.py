"""
Base Strategy Module - Abstract base class for variable ordering strategies.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from .domains import DomainStore


class OrderingStrategy(ABC):
    """
    Abstract base class for variable ordering strategies.

    The search engine asks the strategy which unassigned variable to
    branch on next. Values are always tried in ascending order.

    Subclasses must implement select_variable() and define
    name and description class attributes.

    Attributes:
        name: Short identifier for the strategy
        description: Human-readable description for CLI listings
    """
    name: str = "base"
    description: str = "Base strategy"

    @abstractmethod
    def select_variable(self, unassigned: Sequence[int],
                        store: DomainStore) -> Optional[int]:
        """
        Pick the next variable to branch on.

        Args:
            unassigned: Unassigned variables in creation order
            store: Current domains

        Returns:
            Chosen variable, or None if unassigned is empty
        """
        pass
