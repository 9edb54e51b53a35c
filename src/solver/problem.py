"""
Problem Module - The engine API used by puzzle adapters.

A Problem collects variables, initial domains and constraints. Each
solve call builds a fresh DomainStore from them and runs a
BacktrackingSearch, so the model itself is never mutated by solving.
"""

import itertools
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Union

from .base import OrderingStrategy
from .constraints import AllDistinct, Constraint, ConstraintSet, WeightedSumEqual
from .context import SearchContext
from .domains import DomainStore
from .errors import DomainWipeout, SetupError
from .factory import resolve_strategy
from .search import BacktrackingSearch
from .solution import SearchMetrics, SolveResult

logger = logging.getLogger(__name__)


class Problem:
    """
    A finite-domain model: variables, domains and constraints.

    Usage:
        problem = Problem()
        x, y = problem.new_variable("x"), problem.new_variable("y")
        problem.set_domain(x, {1, 2})
        problem.add_all_distinct([x, y])
        solution = problem.solve_first()

    Attributes:
        base: Number base; variables default to the domain 0..base-1
        ordering: Variable ordering strategy used by solve calls
        last_metrics: Metrics of the most recent solve call
    """

    def __init__(self, base: int = 10,
                 ordering: Union[str, OrderingStrategy, None] = None):
        if base < 2:
            raise SetupError(f"Base must be at least 2, got {base}")
        self.base = base
        self.ordering = resolve_strategy(ordering)
        self.last_metrics: Optional[SearchMetrics] = None

        self._ids = itertools.count()
        self._variables: List[int] = []
        self._names: Dict[int, str] = {}
        self._domains: Dict[int, Set[int]] = {}
        self._no_leading_zero: Set[int] = set()
        self._constraints: List[Constraint] = []

    # ----- model building -------------------------------------------------

    def new_variable(self, name: Optional[str] = None) -> int:
        """
        Allocate a fresh variable handle.

        Args:
            name: Optional display name (defaults to "v<id>")

        Returns:
            Integer variable handle
        """
        var = next(self._ids)
        self._variables.append(var)
        self._names[var] = name if name is not None else f"v{var}"
        return var

    def set_domain(self, variable: int, values: Iterable[int]) -> None:
        """
        Set a variable's initial candidate set.

        Raises:
            SetupError: If the variable is unknown or values is empty
        """
        self._check_known([variable])
        value_set = set(values)
        if not value_set:
            raise SetupError(f"Empty domain for {self.variable_name(variable)}")
        self._domains[variable] = value_set

    def forbid_leading_zero(self, variable: int) -> None:
        """
        Exclude 0 from the variable's domain before search starts.

        A variable whose only value is 0 leaves the model without
        solutions; it is not a setup error.
        """
        self._check_known([variable])
        self._no_leading_zero.add(variable)

    def add_all_distinct(self, variables: Iterable[int]) -> AllDistinct:
        variables = list(variables)
        self._check_known(variables)
        constraint = AllDistinct(variables)
        self._constraints.append(constraint)
        return constraint

    def add_weighted_sum_equal(self, group_a: Sequence[int], group_b: Sequence[int],
                               group_c: Sequence[int],
                               base: Optional[int] = None) -> WeightedSumEqual:
        """
        Register value(group_a) + value(group_b) == value(group_c).

        Groups are most-significant digit first and may differ in length.

        Args:
            group_a: First addend digits
            group_b: Second addend digits
            group_c: Sum digits
            base: Number base (defaults to the problem's base)

        Returns:
            The registered constraint
        """
        self._check_known(list(group_a) + list(group_b) + list(group_c))
        constraint = WeightedSumEqual(group_a, group_b, group_c,
                                      base if base is not None else self.base)
        self._constraints.append(constraint)
        return constraint

    # ----- solving --------------------------------------------------------

    def solve_first(self, context: Optional[SearchContext] = None) -> Optional[Dict[int, int]]:
        """
        Find the first solution in depth-first, ascending-value order.

        Returns:
            Assignment mapping, or None if the model has no solution

        Raises:
            SetupError: If the model is malformed
            SearchLimitExceeded: If the context's budget runs out
        """
        result = self._run(context, find_all=False)
        if not result.has_solution:
            return None
        logger.debug(f"First solution: {self.name_assignment(result.first)}")
        return result.first

    def solve_all(self, context: Optional[SearchContext] = None) -> SolveResult:
        """
        Find every solution.

        Returns:
            SolveResult with solutions in discovery order and their count

        Raises:
            SetupError: If the model is malformed
            SearchLimitExceeded: If the context's budget runs out
        """
        return self._run(context, find_all=True)

    def _run(self, context: Optional[SearchContext], find_all: bool) -> SolveResult:
        store = self._build_store()
        if store is None:
            logger.info("Initial pruning left no possible assignment; no solution")
            self.last_metrics = SearchMetrics(ordering_name=self.ordering.name)
            return SolveResult(metrics=self.last_metrics)

        if context is not None:
            context.restart()
        search = BacktrackingSearch(
            self._variables, store, ConstraintSet(self._constraints),
            self.ordering, context
        )
        try:
            result = search.run(find_all=find_all)
        finally:
            self.last_metrics = search.metrics
        return result

    def _build_store(self) -> Optional[DomainStore]:
        """
        Build the per-search DomainStore.

        Returns:
            The store, or None if initial pruning already proves the model
            unsatisfiable (a normal outcome, not an error)

        Raises:
            SetupError: If the model is malformed
        """
        if not self._variables:
            raise SetupError("Problem has no variables")

        store = DomainStore()
        store.initialize(self._variables, range(self.base))
        for var, values in self._domains.items():
            store.set(var, values)

        constraints = ConstraintSet(self._constraints)
        try:
            for var in self._no_leading_zero:
                store.exclude(var, 0)

            # More members than values left: no all-distinct assignment exists
            for constraint in self._constraints:
                if isinstance(constraint, AllDistinct):
                    values = set()
                    for var in constraint.variables:
                        values.update(store.values(var))
                    if len(values) < len(constraint.variables):
                        logger.debug(f"{constraint!r} has only {len(values)} values to share")
                        return None

            # Givens act like pre-search assignments for forward checking
            fixed = {var: store.values(var)[0] for var in self._variables if store.is_fixed(var)}
            for var, value in fixed.items():
                for constraint in constraints.involving(var):
                    if isinstance(constraint, AllDistinct):
                        constraint.propagate(var, value, store, {var: value})
        except DomainWipeout:
            return None
        return store

    # ----- naming helpers -------------------------------------------------

    @property
    def variables(self) -> List[int]:
        """Variables in creation order."""
        return list(self._variables)

    @property
    def constraints(self) -> List[Constraint]:
        return list(self._constraints)

    def variable_name(self, variable: int) -> str:
        return self._names.get(variable, f"v{variable}")

    def name_assignment(self, assignment: Mapping[int, int]) -> Dict[str, int]:
        """Re-key an assignment by variable name."""
        return {self.variable_name(var): value for var, value in assignment.items()}

    def _check_known(self, variables: Iterable[int]) -> None:
        known = self._names
        for var in variables:
            if var not in known:
                raise SetupError(f"Unknown variable: {var}")
