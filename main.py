"""
Digit Puzzle Solver - Entry Point

Command line front end for the cryptarithm and Sudoku adapters.

Example:
    python main.py crypt "SEND + MORE = MONEY"
    python main.py crypt "TWO + TWO = FOUR" --all
    python main.py sudoku generate --seed 7 --pattern 2 --solve
    python main.py sudoku solve puzzle.txt --max-steps 100000
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, Optional

from src.settings import load_settings, save_settings
from src.solver import (
    SearchContext,
    SearchLimitExceeded,
    SetupError,
    get_strategy_info,
)
from src.puzzles import Cryptarithm, format_all_solutions, save_grid_image, sudoku


# Configure logging - output to both console and file
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
    handlers=[
        logging.StreamHandler(),  # Console output
        logging.FileHandler("solver.log", mode='w', encoding='utf-8')  # File output
    ]
)
logger = logging.getLogger(__name__)

EXIT_SOLVED = 0
EXIT_NO_SOLUTION = 1
EXIT_ERROR = 2


class Application:
    """
    Command dispatcher.

    Merges saved settings with command line overrides and runs the
    requested puzzle command.
    """

    def __init__(self, args: argparse.Namespace):
        """
        Initialize the application.

        Args:
            args: Parsed command line arguments
        """
        self.args = args

        # Load persistent settings, CLI flags override for this run
        self.settings: Dict[str, Any] = load_settings()
        for key in ("ordering", "max_steps", "timeout_sec"):
            value = getattr(args, key, None)
            if value is not None:
                self.settings[key] = value
        if args.debug:
            self.settings["debug_enabled"] = True

        if self.settings["debug_enabled"]:
            logging.getLogger().setLevel(logging.DEBUG)
            logger.debug(f"Effective settings: {self.settings}")

    def make_context(self) -> SearchContext:
        """Search budget from the effective settings."""
        return SearchContext(
            max_steps=self.settings.get("max_steps"),
            timeout_sec=self.settings.get("timeout_sec"),
        )

    def run(self) -> int:
        """
        Run the selected command.

        Returns:
            Exit code
        """
        if self.args.save_settings:
            save_settings(self.settings)

        try:
            if self.args.command == "crypt":
                return self._run_crypt()
            if self.args.command == "sudoku":
                return self._run_sudoku()
            if self.args.command == "orderings":
                for info in get_strategy_info():
                    print(f"{info['name']:<8} {info['description']}")
                return EXIT_SOLVED
        except SetupError as e:
            logger.error(f"Invalid puzzle: {e}")
            return EXIT_ERROR
        except ValueError as e:
            logger.error(str(e))
            return EXIT_ERROR
        except SearchLimitExceeded as e:
            logger.error(f"Gave up: {e} ({len(e.solutions)} solutions found before the limit)")
            return EXIT_ERROR
        except OSError as e:
            logger.error(f"Cannot read puzzle: {e}")
            return EXIT_ERROR
        return EXIT_ERROR

    def _run_crypt(self) -> int:
        puzzle = Cryptarithm.from_equation(self.args.equation, ordering=self.settings["ordering"])
        context = self.make_context()

        if self.args.all:
            solutions = puzzle.solve_all(context)
            print(format_all_solutions(puzzle, solutions))
            return EXIT_SOLVED if solutions else EXIT_NO_SOLUTION

        mapping = puzzle.solve_first(context)
        if mapping is None:
            print(f"No solution for {puzzle}")
            return EXIT_NO_SOLUTION
        print(puzzle.format_lists(mapping))
        print(puzzle.format_solution(mapping))
        return EXIT_SOLVED

    def _run_sudoku(self) -> int:
        ordering = self.args.ordering or self.settings["sudoku_ordering"]
        context = self.make_context()

        if self.args.action == "generate":
            solution = sudoku.generate_solution(self.args.seed, ordering, context)
            print("Solved Puzzle Generated:")
            print(sudoku.format_grid(solution))
            puzzle, pattern = sudoku.make_problem(solution, self.args.pattern, self.args.seed)
            print(f"\nProblem Generated (pattern {pattern}):")
            print(sudoku.format_grid(puzzle))
            self._save_debug_image(puzzle, None, "problem")
            if not self.args.solve:
                return EXIT_SOLVED
        else:
            puzzle = sudoku.parse_grid(Path(self.args.file).read_text(encoding="utf-8"))

        solved = sudoku.solve(puzzle, ordering, context)
        if solved is None:
            print("No solution")
            return EXIT_NO_SOLUTION
        print("\nSolved Problem:")
        print(sudoku.format_grid(solved))
        self._save_debug_image(solved, puzzle, "solved")
        return EXIT_SOLVED

    def _save_debug_image(self, grid, givens, title: str) -> Optional[Path]:
        if not self.settings["debug_enabled"]:
            return None
        path = save_grid_image(grid, givens, title=title, debug_dir=self.settings["debug_dir"])
        logger.info(f"Debug image saved: {path}")
        return path


def parse_args(argv=None):
    """Parse command line arguments."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--ordering", "-o", help="Variable ordering strategy (see 'orderings')")
    common.add_argument("--max-steps", dest="max_steps", type=int,
                        help="Give up after this many tried values")
    common.add_argument("--timeout", dest="timeout_sec", type=float,
                        help="Give up after this many seconds")
    common.add_argument("--debug", "-d", action="store_true",
                        help="Verbose logging and PNG grid renders")
    common.add_argument("--save-settings", action="store_true",
                        help="Persist the effective settings to config.json")

    parser = argparse.ArgumentParser(
        description="Digit Puzzle Solver - Cryptarithms and Sudoku on a finite-domain engine"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    crypt = commands.add_parser("crypt", parents=[common], help="Solve A + B = C")
    crypt.add_argument("equation", help='Equation such as "SEND + MORE = MONEY"')
    crypt.add_argument("--all", "-a", action="store_true", help="List every solution")

    grid = commands.add_parser("sudoku", help="Generate or solve Sudoku")
    actions = grid.add_subparsers(dest="action", required=True)
    generate = actions.add_parser("generate", parents=[common], help="Generate a new puzzle")
    generate.add_argument("--seed", type=int, help="Random seed")
    generate.add_argument("--pattern", type=int, choices=[1, 2, 3], help="Clue pattern")
    generate.add_argument("--solve", action="store_true", help="Solve the generated puzzle")
    solve = actions.add_parser("solve", parents=[common], help="Solve a puzzle file")
    solve.add_argument("file", help="Text file with 9 rows; blanks as _ . or 0")

    commands.add_parser("orderings", parents=[common], help="List variable orderings")
    return parser.parse_args(argv)


def main():
    """Parse arguments and run the solver."""
    args = parse_args()
    application = Application(args)
    sys.exit(application.run())


if __name__ == "__main__":
    main()
