"""
Static Order Strategy - Branch on variables in creation order.
"""

from typing import Optional, Sequence

from ..base import OrderingStrategy
from ..domains import DomainStore
from ..factory import register_strategy


@register_strategy
class StaticOrderStrategy(OrderingStrategy):
    """
    Always picks the earliest-created unassigned variable.

    Combined with ascending value order this gives the canonical
    depth-first, leftmost-value-first traversal, so solve_all lists
    solutions in a stable, predictable order.
    """
    name = "static"
    description = "Static (default) - Variables in creation order"

    def select_variable(self, unassigned: Sequence[int],
                        store: DomainStore) -> Optional[int]:
        return unassigned[0] if unassigned else None
