"""
Domain Store Module - Candidate value sets for every variable.

Mutations are recorded on a trail so the search can take a cheap
snapshot (the trail length) and later roll back to it exactly.
"""

import logging
from typing import Dict, Iterable, List, Set, Tuple

from .errors import DomainWipeout, SetupError

logger = logging.getLogger(__name__)


class DomainStore:
    """
    Mutable mapping of variable -> set of admissible values.

    Every narrowing call first pushes the variable's previous domain on
    the trail, so restore() can undo mutations in LIFO order.

    Attributes:
        _domains: Current domain per variable
        _trail: (variable, previous domain) entries in mutation order
    """

    def __init__(self):
        self._domains: Dict[int, Set[int]] = {}
        self._trail: List[Tuple[int, Set[int]]] = []

    def initialize(self, variables: Iterable[int], values: Iterable[int]) -> None:
        """
        Give every variable the full value range.

        Args:
            variables: Variable handles
            values: The shared initial range (e.g. 0..9)

        Raises:
            SetupError: If the range is empty
        """
        value_set = set(values)
        if not value_set:
            raise SetupError("Domain range must not be empty")
        for var in variables:
            self._domains[var] = set(value_set)
        self._trail.clear()

    def set(self, variable: int, values: Iterable[int]) -> None:
        """
        Replace one variable's domain before search starts.

        Raises:
            SetupError: If values is empty
        """
        value_set = set(values)
        if not value_set:
            raise SetupError(f"Domain of variable {variable} must not be empty")
        self._domains[variable] = value_set

    def restrict(self, variable: int, value: int) -> None:
        """
        Narrow a domain to the single value.

        Raises:
            DomainWipeout: If value is not currently admissible
        """
        if not self.contains(variable, value):
            raise DomainWipeout(variable)
        domain = self._domains[variable]
        if len(domain) == 1:
            return
        self._trail.append((variable, domain))
        self._domains[variable] = {value}

    def exclude(self, variable: int, value: int) -> None:
        """
        Remove a value from a domain. No-op if already absent.

        Raises:
            DomainWipeout: If the domain becomes empty
        """
        domain = self._domains[variable]
        if value not in domain:
            return
        self._trail.append((variable, domain))
        narrowed = domain - {value}
        self._domains[variable] = narrowed
        if not narrowed:
            raise DomainWipeout(variable)

    def snapshot(self) -> int:
        """Return a mark that restore() can roll back to."""
        return len(self._trail)

    def restore(self, mark: int) -> None:
        """Undo every mutation made after the snapshot mark."""
        trail = self._trail
        while len(trail) > mark:
            variable, previous = trail.pop()
            self._domains[variable] = previous

    def values(self, variable: int) -> List[int]:
        """Current candidates for a variable in ascending order."""
        return sorted(self._domains[variable])

    def size(self, variable: int) -> int:
        return len(self._domains[variable])

    def contains(self, variable: int, value: int) -> bool:
        return value in self._domains[variable]

    def bounds(self, variable: int) -> Tuple[int, int]:
        domain = self._domains[variable]
        return min(domain), max(domain)

    def is_fixed(self, variable: int) -> bool:
        return len(self._domains[variable]) == 1

    def __contains__(self, variable: int) -> bool:
        return variable in self._domains

    def __len__(self) -> int:
        return len(self._domains)
