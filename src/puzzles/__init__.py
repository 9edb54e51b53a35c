"""
Puzzles Package - Adapters from puzzle text to engine models.

Public API:
    - Cryptarithm / parse_equation: "A + B = C" digit puzzles
    - sudoku: 9x9 grid generation, solving and verification
    - CLUE_PATTERNS / pick_pattern: fixed clue-visibility patterns
    - render_grid / save_grid_image: PNG renders of grids
"""

from .cryptarithm import Cryptarithm, parse_equation, format_all_solutions
from .patterns import CLUE_PATTERNS, PATTERN_COUNT, pick_pattern
from . import sudoku
from .render import DEBUG_DIR, render_grid, save_grid_image

__all__ = [
    "Cryptarithm",
    "parse_equation",
    "format_all_solutions",
    "CLUE_PATTERNS",
    "PATTERN_COUNT",
    "pick_pattern",
    "sudoku",
    "DEBUG_DIR",
    "render_grid",
    "save_grid_image",
]
