"""
Sudoku Adapter - 9x9 Sudoku generation and solving on the engine.

Grids are 9x9 numpy integer arrays; 0 marks a blank cell. The model is
81 variables over 1..9 (clues fixed to one value) with 27 all-distinct
groups: 9 rows, 9 columns and 9 3x3 blocks.
"""

import logging
import re
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from src.solver import OrderingStrategy, Problem, SearchContext, SetupError
from .patterns import PATTERN_COUNT, pick_pattern

logger = logging.getLogger(__name__)

SIZE = 9
BLOCK = 3
DIGITS = range(1, SIZE + 1)
DEFAULT_ORDERING = "static"

BLANK_TOKENS = {"_", ".", "0"}

GridLike = Union[np.ndarray, Sequence[Sequence[Optional[int]]]]


def to_grid(grid: GridLike) -> np.ndarray:
    """
    Convert a 9x9 nested sequence (or array) to an int array.

    None becomes 0 (blank).

    Raises:
        SetupError: If the shape is not 9x9 or a value is outside 0..9
    """
    rows = [[0 if cell is None else cell for cell in row] for row in grid]
    try:
        array = np.array(rows, dtype=int)
    except (TypeError, ValueError) as e:
        raise SetupError(f"Grid must be 9 rows of 9 integers: {e}") from None
    if array.shape != (SIZE, SIZE):
        raise SetupError(f"Grid must be 9x9, got shape {array.shape}")
    if array.min() < 0 or array.max() > SIZE:
        raise SetupError("Grid values must be between 0 and 9")
    return array


def decode_puzzle(rows: Iterable[Iterable[object]]) -> np.ndarray:
    """
    Decode rows where any non-number cell (e.g. "_") is blank.

    Args:
        rows: 9 rows of 9 cells; ints are clues, anything else is blank

    Returns:
        9x9 grid with 0 for blanks
    """
    decoded = [
        [cell if isinstance(cell, (int, np.integer)) and not isinstance(cell, bool) else 0
         for cell in row]
        for row in rows
    ]
    return to_grid(decoded)


def parse_grid(text: str) -> np.ndarray:
    """
    Parse a text grid: 9 non-empty lines of 9 cells.

    Cells are digits 1-9 or a blank token ("_", ".", "0"), separated by
    whitespace, commas or nothing; brackets are ignored.

    Raises:
        SetupError: If the text does not describe a 9x9 grid
    """
    rows: List[List[int]] = []
    for line in text.splitlines():
        tokens = re.findall(r"[0-9_.]", line)
        if not tokens:
            continue
        rows.append([0 if tok in BLANK_TOKENS else int(tok) for tok in tokens])
    return to_grid(rows)


def format_grid(grid: GridLike, blank: str = "_") -> str:
    """Render a grid as nine "[5,3,_,...]" lines."""
    array = to_grid(grid)
    lines = []
    for row in array:
        cells = [str(v) if v else blank for v in row]
        lines.append("[" + ",".join(cells) + "]")
    return "\n".join(lines)


def cell_groups() -> List[List[Tuple[int, int]]]:
    """
    The 27 unit groups as lists of (row, col): rows, then columns,
    then blocks in row-major order.
    """
    groups = [[(r, c) for c in range(SIZE)] for r in range(SIZE)]
    groups += [[(r, c) for r in range(SIZE)] for c in range(SIZE)]
    for br in range(0, SIZE, BLOCK):
        for bc in range(0, SIZE, BLOCK):
            groups.append([(br + r, bc + c) for r in range(BLOCK) for c in range(BLOCK)])
    return groups


def build_problem(givens: GridLike,
                  ordering: Union[str, OrderingStrategy, None] = DEFAULT_ORDERING
                  ) -> Tuple[Problem, np.ndarray]:
    """
    Build the engine model for a puzzle.

    Args:
        givens: 9x9 grid, 0/None for blanks
        ordering: Variable ordering strategy

    Returns:
        (problem, cell_ids) where cell_ids[r, c] is the variable of a cell
    """
    grid = to_grid(givens)
    problem = Problem(base=SIZE + 1, ordering=ordering)
    cell_ids = np.zeros((SIZE, SIZE), dtype=int)
    for r in range(SIZE):
        for c in range(SIZE):
            var = problem.new_variable(f"r{r + 1}c{c + 1}")
            cell_ids[r, c] = var
            value = int(grid[r, c])
            problem.set_domain(var, {value} if value else DIGITS)
    for group in cell_groups():
        problem.add_all_distinct(int(cell_ids[r, c]) for r, c in group)
    return problem, cell_ids


def _assignment_to_grid(assignment, cell_ids: np.ndarray) -> np.ndarray:
    grid = np.zeros((SIZE, SIZE), dtype=int)
    for r in range(SIZE):
        for c in range(SIZE):
            grid[r, c] = assignment[int(cell_ids[r, c])]
    return grid


def solve(puzzle: GridLike,
          ordering: Union[str, OrderingStrategy, None] = DEFAULT_ORDERING,
          context: Optional[SearchContext] = None) -> Optional[np.ndarray]:
    """
    Solve a puzzle.

    Returns:
        The first solution grid found, or None if the puzzle is unsolvable
    """
    problem, cell_ids = build_problem(puzzle, ordering)
    assignment = problem.solve_first(context)
    if assignment is None:
        logger.info("Sudoku has no solution")
        return None
    return _assignment_to_grid(assignment, cell_ids)


def solve_all(puzzle: GridLike,
              ordering: Union[str, OrderingStrategy, None] = DEFAULT_ORDERING,
              context: Optional[SearchContext] = None) -> List[np.ndarray]:
    """Every solution grid of a puzzle, in discovery order."""
    problem, cell_ids = build_problem(puzzle, ordering)
    result = problem.solve_all(context)
    return [_assignment_to_grid(a, cell_ids) for a in result.solutions]


def count_solutions(puzzle: GridLike,
                    ordering: Union[str, OrderingStrategy, None] = DEFAULT_ORDERING,
                    context: Optional[SearchContext] = None) -> int:
    problem, _ = build_problem(puzzle, ordering)
    return problem.solve_all(context).count


def verify_solution(grid: GridLike) -> bool:
    """
    Independently check a filled grid against all 27 groups.

    Returns:
        True if every row, column and block holds 1..9 exactly once
    """
    try:
        array = to_grid(grid)
    except SetupError:
        return False
    expected = np.arange(1, SIZE + 1)
    blocks = array.reshape(BLOCK, BLOCK, BLOCK, BLOCK).swapaxes(1, 2).reshape(SIZE, SIZE)
    for units in (array, array.T, blocks):
        if not (np.sort(units, axis=1) == expected).all():
            return False
    return True


def generate_solution(seed: Optional[int] = None,
                      ordering: Union[str, OrderingStrategy, None] = DEFAULT_ORDERING,
                      context: Optional[SearchContext] = None) -> np.ndarray:
    """
    Generate a random solved grid.

    A random permutation of 1..9 seeds the first row; the engine fills
    in the rest.

    Args:
        seed: Optional seed for reproducible grids
        ordering: Variable ordering strategy
        context: Optional search budget

    Returns:
        A complete valid grid
    """
    rng = np.random.default_rng(seed)
    givens = np.zeros((SIZE, SIZE), dtype=int)
    givens[0] = rng.permutation(np.arange(1, SIZE + 1))
    logger.debug(f"Seed row: {givens[0].tolist()}")
    solution = solve(givens, ordering, context)
    if solution is None:
        # Any permutation of 1..9 extends to a full grid
        raise RuntimeError("Seed row could not be completed")
    return solution


def make_problem(solution: GridLike, pattern: Optional[int] = None,
                 seed: Optional[int] = None) -> Tuple[np.ndarray, int]:
    """
    Blank out a solved grid according to a clue pattern.

    Args:
        solution: Solved 9x9 grid
        pattern: Pattern number 1..3, or None to pick one at random
        seed: Seed for the random pattern choice

    Returns:
        (puzzle, pattern_number) with 0 in every hidden cell
    """
    grid = to_grid(solution)
    if pattern is None:
        pattern = int(np.random.default_rng(seed).integers(1, PATTERN_COUNT + 1))
    shown = pick_pattern(pattern)
    flat = grid.flatten()
    mask = np.array([index + 1 in shown for index in range(SIZE * SIZE)])
    puzzle = np.where(mask, flat, 0).reshape(SIZE, SIZE)
    logger.debug(f"Puzzle from pattern {pattern}: {int(mask.sum())} clues")
    return puzzle, pattern
