"""
Solver Errors Module - Exception taxonomy for the constraint engine.

Only SetupError and SearchLimitExceeded ever leave the engine.
DomainWipeout is raised by pruning and caught by the search loop.
"""

from typing import Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .solution import SearchMetrics


class SolverError(Exception):
    """Base class for all engine errors."""


class SetupError(SolverError, ValueError):
    """Malformed puzzle model, reported before search begins."""


class DomainWipeout(SolverError):
    """
    A variable ran out of candidate values.

    Attributes:
        variable: Variable whose domain emptied (None for bounds failures)
    """

    def __init__(self, variable: Optional[int] = None, message: str = ""):
        self.variable = variable
        super().__init__(message or f"Domain of variable {variable} is empty")


class SearchLimitExceeded(SolverError):
    """
    Search gave up because a step, time, or cancel limit was hit.

    This is distinct from "no solution": the instance was not proven
    unsatisfiable.

    Attributes:
        reason: Which limit fired ("steps", "timeout" or "cancelled")
        solutions: Solutions discovered before the limit fired
        metrics: Search statistics up to the abort
    """

    def __init__(
        self,
        reason: str,
        solutions: Optional[List[Dict[int, int]]] = None,
        metrics: Optional["SearchMetrics"] = None
    ):
        self.reason = reason
        self.solutions = solutions or []
        self.metrics = metrics
        super().__init__(f"Search limit exceeded ({reason})")
