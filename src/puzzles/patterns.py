"""
Sudoku Clue Patterns

Fixed clue-visibility patterns used to turn a solved grid into a puzzle.
Each pattern lists the 1-based row-major indices (1..81) of cells that
stay visible; every other cell is blanked.

The patterns are plain data. They do not guarantee a unique solution.
"""

from typing import FrozenSet, Tuple

CLUE_PATTERNS: Tuple[FrozenSet[int], ...] = (
    frozenset([1, 3, 5, 6, 7, 11, 16, 19, 20, 22, 26, 27, 28, 30, 37, 39, 40, 41,
               42, 43, 45, 52, 54, 55, 56, 60, 62, 63, 66, 71, 75, 76, 77, 79, 81]),
    frozenset([5, 7, 10, 12, 13, 14, 15, 18, 21, 24, 25, 26, 27, 29, 34, 35, 36, 40,
               42, 46, 47, 48, 55, 56, 57, 58, 61, 64, 67, 68, 69, 70, 72, 75, 77]),
    frozenset([2, 4, 6, 7, 10, 15, 16, 17, 19, 21, 25, 27, 29, 30, 31, 34, 40, 42,
               48, 51, 52, 53, 55, 57, 61, 63, 65, 66, 67, 72, 75, 76, 78, 80]),
)

PATTERN_COUNT = len(CLUE_PATTERNS)


def pick_pattern(number: int) -> FrozenSet[int]:
    """
    Get a clue pattern by its 1-based number.

    Args:
        number: Pattern number, 1..PATTERN_COUNT

    Returns:
        Set of 1-based cell indices that remain visible

    Raises:
        ValueError: If number is out of range
    """
    if not 1 <= number <= PATTERN_COUNT:
        raise ValueError(f"Unknown clue pattern: {number}. Available: 1-{PATTERN_COUNT}")
    return CLUE_PATTERNS[number - 1]
