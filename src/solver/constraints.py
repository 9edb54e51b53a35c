"""
Constraints Module - All-distinct and weighted-sum constraints.

The engine supports exactly two constraint kinds:
    - AllDistinct: pairwise different values over a group of variables
    - WeightedSumEqual: value(A) + value(B) == value(C) for digit groups

ConstraintSet indexes constraints by variable so that each assignment
only touches the constraints that mention it.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .domains import DomainStore
from .errors import DomainWipeout, SetupError

Assignment = Mapping[int, int]


class Constraint(ABC):
    """
    Abstract base class for engine constraints.

    Attributes:
        name: Short identifier used in logs
    """
    name: str = "constraint"

    @property
    @abstractmethod
    def variables(self) -> Tuple[int, ...]:
        """Distinct variables mentioned by the constraint."""
        pass

    @abstractmethod
    def is_consistent(self, assignment: Assignment) -> bool:
        """
        Check a possibly partial assignment.

        Returns:
            False only if the constraint is provably violated
        """
        pass

    @abstractmethod
    def is_satisfied(self, assignment: Assignment) -> bool:
        """Check a total assignment."""
        pass

    def propagate(self, variable: int, value: int,
                  store: DomainStore, assignment: Assignment) -> None:
        """
        Prune domains after variable was assigned value.

        Default implementation does nothing.

        Raises:
            DomainWipeout: If pruning proves the branch dead
        """
        pass


class AllDistinct(Constraint):
    """Every variable in the group takes a different value."""
    name = "all_distinct"

    def __init__(self, variables: Iterable[int]):
        self._variables = tuple(dict.fromkeys(variables))

    @property
    def variables(self) -> Tuple[int, ...]:
        return self._variables

    def is_consistent(self, assignment: Assignment) -> bool:
        seen = set()
        for var in self._variables:
            if var in assignment:
                value = assignment[var]
                if value in seen:
                    return False
                seen.add(value)
        return True

    def is_satisfied(self, assignment: Assignment) -> bool:
        values = [assignment[var] for var in self._variables]
        return len(values) == len(set(values))

    def propagate(self, variable: int, value: int,
                  store: DomainStore, assignment: Assignment) -> None:
        # Forward checking: one hop, unassigned peers only
        for other in self._variables:
            if other != variable and other not in assignment:
                store.exclude(other, value)

    def __repr__(self) -> str:
        return f"AllDistinct({list(self._variables)})"


def group_value(group: Sequence[int], assignment: Assignment, base: int) -> int:
    """
    Integer value of a digit group, most-significant digit first.

    Args:
        group: Variables in storage order
        assignment: Values for every variable in the group
        base: Number base

    Returns:
        Sum of digit * base**position, position counted from the right
    """
    total = 0
    for var in group:
        total = total * base + assignment[var]
    return total


class WeightedSumEqual(Constraint):
    """
    value(group_a) + value(group_b) == value(group_c) in the given base.

    The identity is folded into one linear form
        sum(coefficient[v] * v) == 0
    with A and B weighted positively and C negatively. Groups of
    different length line up at the least-significant end.
    """
    name = "weighted_sum_equal"

    def __init__(self, group_a: Sequence[int], group_b: Sequence[int],
                 group_c: Sequence[int], base: int = 10):
        if base < 2:
            raise SetupError(f"Base must be at least 2, got {base}")
        for label, group in (("A", group_a), ("B", group_b), ("C", group_c)):
            if not group:
                raise SetupError(f"Sum group {label} must not be empty")

        self.group_a = tuple(group_a)
        self.group_b = tuple(group_b)
        self.group_c = tuple(group_c)
        self.base = base

        coefficients: Dict[int, int] = defaultdict(int)
        for sign, group in ((1, self.group_a), (1, self.group_b), (-1, self.group_c)):
            length = len(group)
            for index, var in enumerate(group):
                coefficients[var] += sign * base ** (length - 1 - index)
        self.coefficients: Dict[int, int] = dict(coefficients)

    @property
    def variables(self) -> Tuple[int, ...]:
        return tuple(self.coefficients)

    def is_consistent(self, assignment: Assignment) -> bool:
        # A partial sum can't be refuted from values alone
        if any(var not in assignment for var in self.coefficients):
            return True
        return self.is_satisfied(assignment)

    def is_satisfied(self, assignment: Assignment) -> bool:
        left = (group_value(self.group_a, assignment, self.base)
                + group_value(self.group_b, assignment, self.base))
        return left == group_value(self.group_c, assignment, self.base)

    def propagate(self, variable: int, value: int,
                  store: DomainStore, assignment: Assignment) -> None:
        """
        Interval test of the linear form over current domains.

        Never narrows a domain, only fails branches where zero is out of
        reach, so the set and order of solutions are unchanged.
        """
        low = high = 0
        for var, coef in self.coefficients.items():
            if var in assignment:
                term = coef * assignment[var]
                low += term
                high += term
                continue
            dmin, dmax = store.bounds(var)
            if coef > 0:
                low += coef * dmin
                high += coef * dmax
            else:
                low += coef * dmax
                high += coef * dmin
        if low > 0 or high < 0:
            raise DomainWipeout(message=f"Sum bounds [{low}, {high}] exclude 0")

    def __repr__(self) -> str:
        return (f"WeightedSumEqual({list(self.group_a)} + {list(self.group_b)}"
                f" = {list(self.group_c)}, base={self.base})")


class ConstraintSet:
    """
    The active constraints of one puzzle, indexed by variable.

    Attributes:
        constraints: Constraints in registration order
    """

    def __init__(self, constraints: Optional[Iterable[Constraint]] = None):
        self.constraints: List[Constraint] = []
        self._by_variable: Dict[int, List[Constraint]] = defaultdict(list)
        for constraint in constraints or ():
            self.add(constraint)

    def add(self, constraint: Constraint) -> None:
        self.constraints.append(constraint)
        for var in constraint.variables:
            self._by_variable[var].append(constraint)

    def involving(self, variable: int) -> List[Constraint]:
        """Constraints that mention the variable."""
        return self._by_variable.get(variable, [])

    def is_consistent(self, assignment: Assignment,
                      variable: Optional[int] = None) -> bool:
        """
        Check a partial assignment for a provable violation.

        Args:
            assignment: Current partial assignment
            variable: If given, only constraints touching it are checked

        Returns:
            False as soon as any checked constraint is violated
        """
        constraints = self.constraints if variable is None else self.involving(variable)
        return all(c.is_consistent(assignment) for c in constraints)

    def propagate(self, variable: int, value: int,
                  store: DomainStore, assignment: Assignment) -> None:
        """
        Forward-check the constraints touching a newly assigned variable.

        Raises:
            DomainWipeout: If any constraint fails to propagate
        """
        for constraint in self.involving(variable):
            constraint.propagate(variable, value, store, assignment)

    def is_satisfied(self, assignment: Assignment) -> bool:
        """Final acceptance test on a total assignment."""
        return all(c.is_satisfied(assignment) for c in self.constraints)

    def __len__(self) -> int:
        return len(self.constraints)
