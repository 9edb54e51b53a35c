"""
Backtracking Search Module - Depth-first assignment over a DomainStore.

The search keeps an explicit stack of decision frames instead of
recursing, so an 81-variable grid never approaches the interpreter's
recursion limit and the undo discipline is visible in one place.

Algorithm:
    1. Pick the next unassigned variable (ordering strategy) and open a
       frame holding its candidates in ascending order and a domain
       snapshot mark.
    2. Try the frame's next value: restrict, forward-check, consistency
       check. Any failure rolls the store back to the frame's mark and
       moves on to the next value.
    3. A complete assignment that passes the final check is a solution.
       First mode stops there; all mode treats it as a dead end.
    4. A frame with no values left is popped and its parent resumes.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .base import OrderingStrategy
from .constraints import ConstraintSet
from .context import SearchContext
from .domains import DomainStore
from .errors import DomainWipeout, SearchLimitExceeded
from .solution import SearchMetrics, SolveResult

logger = logging.getLogger(__name__)


@dataclass
class DecisionFrame:
    """
    One level of the search stack.

    Attributes:
        variable: Variable branched on at this level
        candidates: Values not yet tried, ascending
        mark: Domain snapshot taken before any value was tried
        value: Value currently assigned, or None between tries
    """
    variable: int
    candidates: List[int]
    mark: int
    value: Optional[int] = None
    _next: int = field(default=0, repr=False)

    def next_value(self) -> Optional[int]:
        if self._next >= len(self.candidates):
            return None
        value = self.candidates[self._next]
        self._next += 1
        return value


class BacktrackingSearch:
    """
    Backtracking search with forward checking.

    One instance runs one search over a prepared DomainStore; the store
    is left exactly as it was handed in once run() returns or raises.

    Attributes:
        variables: All variables in creation order
        store: Domains, already initialised and pre-pruned
        constraints: Constraint set to enforce
        strategy: Variable ordering strategy
        context: Budgets and cancellation
        metrics: Statistics, filled in while running
    """

    def __init__(
        self,
        variables: Sequence[int],
        store: DomainStore,
        constraints: ConstraintSet,
        strategy: OrderingStrategy,
        context: Optional[SearchContext] = None
    ):
        self.variables = list(variables)
        self.store = store
        self.constraints = constraints
        self.strategy = strategy
        self.context = context or SearchContext()
        self.metrics = SearchMetrics(ordering_name=strategy.name)

    def run(self, find_all: bool = False) -> SolveResult:
        """
        Search for the first or for every solution.

        Args:
            find_all: Exhaust the tree instead of stopping at the first hit

        Returns:
            SolveResult with solutions in discovery order (possibly empty)

        Raises:
            SearchLimitExceeded: If the context's budget runs out
        """
        start_time = time.perf_counter()
        root_mark = self.store.snapshot()
        solutions: List[Dict[int, int]] = []

        logger.debug(
            f"Search start: {len(self.variables)} variables, "
            f"{len(self.constraints)} constraints, ordering={self.strategy.name}, "
            f"mode={'all' if find_all else 'first'}"
        )

        try:
            self._search(solutions, find_all)
        except SearchLimitExceeded as e:
            self._finish(start_time)
            logger.warning(
                f"Search aborted ({e.reason}) after {self.metrics.nodes_explored} nodes, "
                f"{len(solutions)} solutions so far"
            )
            raise SearchLimitExceeded(e.reason, solutions, self.metrics) from None
        finally:
            self.store.restore(root_mark)

        self._finish(start_time)
        logger.info(
            f"Search end in {self.metrics.computation_time_ms:.1f}ms: "
            f"{len(solutions)} solutions, {self.metrics.nodes_explored} nodes, "
            f"{self.metrics.backtracks} backtracks"
        )
        return SolveResult(solutions=solutions, metrics=self.metrics)

    def _search(self, solutions: List[Dict[int, int]], find_all: bool) -> None:
        store = self.store
        constraints = self.constraints
        metrics = self.metrics
        total = len(self.variables)
        assignment: Dict[int, int] = {}
        stack: List[DecisionFrame] = [self._open_frame(assignment)]

        while stack:
            frame = stack[-1]

            # Undo the previous try at this level
            if frame.value is not None:
                del assignment[frame.variable]
                store.restore(frame.mark)
                frame.value = None

            value = frame.next_value()
            if value is None:
                stack.pop()
                metrics.backtracks += 1
                continue

            self._tick()
            var = frame.variable
            frame.value = value
            assignment[var] = value

            try:
                store.restrict(var, value)
                constraints.propagate(var, value, store, assignment)
            except DomainWipeout:
                metrics.pruned_branches += 1
                continue

            if not constraints.is_consistent(assignment, var):
                metrics.pruned_branches += 1
                continue

            if len(assignment) == total:
                if constraints.is_satisfied(assignment):
                    solutions.append(dict(assignment))
                    logger.debug(f"Solution #{len(solutions)} at node {metrics.nodes_explored}")
                    if not find_all:
                        return
                continue

            stack.append(self._open_frame(assignment))

    def _open_frame(self, assignment: Dict[int, int]) -> DecisionFrame:
        unassigned = [v for v in self.variables if v not in assignment]
        var = self.strategy.select_variable(unassigned, self.store)
        return DecisionFrame(
            variable=var,
            candidates=self.store.values(var),
            mark=self.store.snapshot()
        )

    def _tick(self) -> None:
        """Count one tried value and enforce the context's limits."""
        self.metrics.nodes_explored += 1
        steps = self.metrics.nodes_explored
        reason = self.context.limit_reason(steps)
        if reason is not None:
            raise SearchLimitExceeded(reason)
        if steps % self.context.progress_interval == 0:
            self.context.report_progress(steps, f"{steps} nodes explored")

    def _finish(self, start_time: float) -> None:
        self.metrics.computation_time_ms = (time.perf_counter() - start_time) * 1000
