"""
Solution Module - Search results and performance metrics.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class SearchMetrics:
    """
    Performance metrics for one search.

    Attributes:
        computation_time_ms: Time taken in milliseconds
        nodes_explored: Values tried (one per tentative assignment)
        pruned_branches: Tries rejected by propagation or consistency
        backtracks: Decision frames exhausted and popped
        ordering_name: Variable ordering used
    """
    computation_time_ms: float = 0.0
    nodes_explored: int = 0
    pruned_branches: int = 0
    backtracks: int = 0
    ordering_name: str = ""


@dataclass
class SolveResult:
    """
    Outcome of an exhaustive search.

    An empty solutions list means the model is unsatisfiable; that is a
    normal result, not an error.

    Attributes:
        solutions: Full assignments in depth-first discovery order
        metrics: Performance statistics
    """
    solutions: List[Dict[int, int]] = field(default_factory=list)
    metrics: SearchMetrics = field(default_factory=SearchMetrics)

    @property
    def count(self) -> int:
        """Number of solutions found."""
        return len(self.solutions)

    @property
    def has_solution(self) -> bool:
        return len(self.solutions) > 0

    @property
    def first(self) -> Optional[Dict[int, int]]:
        """First solution found, or None."""
        return self.solutions[0] if self.solutions else None

    def __iter__(self):
        return iter(self.solutions)

    def __len__(self) -> int:
        return len(self.solutions)
