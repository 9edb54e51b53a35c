"""
Solver Package - Finite-domain constraint engine for digit puzzles.

This package provides a small constraint satisfaction engine: a trail-based
domain store, all-distinct and weighted-sum constraints with forward
checking, and a backtracking search with pluggable variable ordering.

Public API:
    - Problem: Model builder and solve entry points
    - SearchContext: Step/time budgets and cancellation
    - SolveResult / SearchMetrics: Search outcome and statistics
    - DomainStore, ConstraintSet, BacktrackingSearch: Engine internals
    - SetupError / SearchLimitExceeded: Errors surfaced to callers
    - create_strategy(), get_strategy_names(): Ordering registry

Usage:
    from src.solver import Problem

    problem = Problem()
    s, e, n, d = (problem.new_variable(ch) for ch in "SEND")
    ...
    problem.add_all_distinct(letters)
    problem.add_weighted_sum_equal([s, e, n, d], [m, o, r, e], [m, o, n, e, y])
    problem.forbid_leading_zero(s)

    solution = problem.solve_first()
    result = problem.solve_all()
    print(f"Found {result.count} solutions")
"""

# Core data structures
from .errors import SolverError, SetupError, DomainWipeout, SearchLimitExceeded
from .domains import DomainStore
from .constraints import (
    Constraint,
    AllDistinct,
    WeightedSumEqual,
    ConstraintSet,
    group_value,
)
from .solution import SearchMetrics, SolveResult
from .context import SearchContext

# Search
from .base import OrderingStrategy
from .factory import (
    DEFAULT_STRATEGY,
    create_strategy,
    get_strategy_names,
    get_strategy_info,
    register_strategy,
    resolve_strategy,
)
from .search import BacktrackingSearch, DecisionFrame
from .problem import Problem

# Import strategies to register them
from . import strategies

__all__ = [
    # Errors
    "SolverError",
    "SetupError",
    "DomainWipeout",
    "SearchLimitExceeded",
    # Data structures
    "DomainStore",
    "Constraint",
    "AllDistinct",
    "WeightedSumEqual",
    "ConstraintSet",
    "group_value",
    "SearchMetrics",
    "SolveResult",
    "SearchContext",
    # Search
    "OrderingStrategy",
    "DEFAULT_STRATEGY",
    "create_strategy",
    "get_strategy_names",
    "get_strategy_info",
    "register_strategy",
    "resolve_strategy",
    "BacktrackingSearch",
    "DecisionFrame",
    "Problem",
]
