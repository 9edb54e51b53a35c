"""
Minimum Remaining Values Strategy - Branch on the most constrained variable.
"""

from typing import Optional, Sequence

from ..base import OrderingStrategy
from ..domains import DomainStore
from ..factory import register_strategy


@register_strategy
class MinimumRemainingValuesStrategy(OrderingStrategy):
    """
    Picks the unassigned variable with the fewest candidates left.

    Ties go to the earliest-created variable. Opt-in only: it finds the
    same solution set as the static order, usually with far fewer nodes
    on grid puzzles, but in a different order. solve_all lists solutions
    differently and solve_first may return a different solution.
    """
    name = "mrv"
    description = "MRV (fast) - Smallest domain first; changes solution order"

    def select_variable(self, unassigned: Sequence[int],
                        store: DomainStore) -> Optional[int]:
        best = None
        best_size = 0
        for var in unassigned:
            size = store.size(var)
            if best is None or size < best_size:
                best = var
                best_size = size
                if size == 1:
                    break
        return best
