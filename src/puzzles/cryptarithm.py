"""
Cryptarithm Adapter - Turns "SEND + MORE = MONEY" into an engine model.

Each distinct letter becomes one digit variable. Letters are created in
order of first appearance over the two addends and then the sum, which
fixes the order solutions are reported in. Literal digits inside a word
become fixed variables that take no part in the all-distinct rule.
Puzzles with more than ten letters, or a literal 0 leading a word, are
valid input with no solution.

Usage:
    puzzle = Cryptarithm.from_equation("SEND + MORE = MONEY")
    mapping = puzzle.solve_first()
    print(puzzle.format_solution(mapping))   # 9567 + 1085 = 10652
"""

import logging
import re
from typing import Dict, List, Mapping, Optional, Tuple, Union

from src.solver import OrderingStrategy, Problem, SearchContext, SetupError

logger = logging.getLogger(__name__)

BASE = 10

EQUATION_RE = re.compile(r"^\s*([A-Za-z0-9]+)\s*\+\s*([A-Za-z0-9]+)\s*=\s*([A-Za-z0-9]+)\s*$")


def parse_equation(text: str) -> Tuple[str, str, str]:
    """
    Split an "A + B = C" equation into its three words.

    Args:
        text: Equation such as "SEND + MORE = MONEY"

    Returns:
        (addend_a, addend_b, total), upper-cased

    Raises:
        SetupError: If text is not of the form word + word = word
    """
    match = EQUATION_RE.match(text)
    if not match:
        raise SetupError(f"Not a cryptarithm of the form A + B = C: {text!r}")
    a, b, c = (word.upper() for word in match.groups())
    return a, b, c


class Cryptarithm:
    """
    A two-addend cryptarithm A + B = C in base 10.

    Attributes:
        words: The three words (addend, addend, sum)
        letters: Distinct letters in order of first appearance
        problem: The underlying engine model
    """

    def __init__(self, addend_a: str, addend_b: str, total: str,
                 ordering: Union[str, OrderingStrategy, None] = None):
        self.words: Tuple[str, str, str] = (addend_a.upper(), addend_b.upper(), total.upper())
        for word in self.words:
            if not word or not word.isalnum():
                raise SetupError(f"Invalid word in cryptarithm: {word!r}")

        self.letters: List[str] = []
        for word in self.words:
            for ch in word:
                if ch.isalpha() and ch not in self.letters:
                    self.letters.append(ch)
        if len(self.letters) > BASE:
            logger.info(f"{len(self.letters)} distinct letters cannot take distinct digits "
                        f"in base {BASE}; the puzzle has no solution")

        self.problem = Problem(base=BASE, ordering=ordering)
        self._symbols: Dict[str, int] = {}
        for letter in self.letters:
            self._symbols[letter] = self.problem.new_variable(letter)
        for word in self.words:
            for ch in word:
                if ch.isdigit() and ch not in self._symbols:
                    var = self.problem.new_variable(ch)
                    self.problem.set_domain(var, {int(ch)})
                    self._symbols[ch] = var

        self.problem.add_all_distinct(self._symbols[letter] for letter in self.letters)
        groups = [[self._symbols[ch] for ch in word] for word in self.words]
        self.problem.add_weighted_sum_equal(*groups, base=BASE)
        for group in groups:
            self.problem.forbid_leading_zero(group[0])

        logger.debug(f"Built cryptarithm {self}: letters={''.join(self.letters)}")

    @classmethod
    def from_equation(cls, text: str,
                      ordering: Union[str, OrderingStrategy, None] = None) -> "Cryptarithm":
        """Create a Cryptarithm from "A + B = C" text."""
        return cls(*parse_equation(text), ordering=ordering)

    def solve_first(self, context: Optional[SearchContext] = None) -> Optional[Dict[str, int]]:
        """
        Find the first letter -> digit mapping.

        Returns:
            Mapping keyed by letter, or None if the puzzle has no solution
        """
        assignment = self.problem.solve_first(context)
        if assignment is None:
            return None
        return self._letters_of(assignment)

    def solve_all(self, context: Optional[SearchContext] = None) -> List[Dict[str, int]]:
        """
        Find every letter -> digit mapping, in discovery order.
        """
        result = self.problem.solve_all(context)
        return [self._letters_of(assignment) for assignment in result.solutions]

    def _letters_of(self, assignment: Mapping[int, int]) -> Dict[str, int]:
        return {letter: assignment[self._symbols[letter]] for letter in self.letters}

    def digits(self, word: str, mapping: Mapping[str, int]) -> List[int]:
        """Digits of a word under a letter mapping."""
        return [int(ch) if ch.isdigit() else mapping[ch] for ch in word]

    def word_value(self, word: str, mapping: Mapping[str, int]) -> int:
        value = 0
        for digit in self.digits(word, mapping):
            value = value * BASE + digit
        return value

    def format_solution(self, mapping: Mapping[str, int]) -> str:
        """Render a solution as "9567 + 1085 = 10652"."""
        a, b, c = (self.word_value(word, mapping) for word in self.words)
        return f"{a} + {b} = {c}"

    def format_lists(self, mapping: Mapping[str, int]) -> str:
        """Render a solution as digit lists, "[9,5,6,7]+[1,0,8,5]=[1,0,6,5,2]"."""
        a, b, c = (
            "[" + ",".join(str(d) for d in self.digits(word, mapping)) + "]"
            for word in self.words
        )
        return f"{a}+{b}={c}"

    def __str__(self) -> str:
        a, b, c = self.words
        return f"{a} + {b} = {c}"


def format_all_solutions(puzzle: Cryptarithm, solutions: List[Dict[str, int]]) -> str:
    """
    Summary of an exhaustive solve: a count line followed by one line
    per solution.
    """
    lines = [f"Found {len(solutions)} solutions!"]
    lines.extend(puzzle.format_lists(mapping) for mapping in solutions)
    return "\n".join(lines)
