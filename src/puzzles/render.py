"""
Grid Rendering Utilities

Functions for saving Sudoku grids as annotated PNG debug images.
"""

import time
from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageDraw, ImageFont

from .sudoku import BLOCK, SIZE, GridLike, to_grid


# Debug settings
DEBUG_DIR = Path("./debug")
MAX_DEBUG_IMAGES = 10

CELL_PX = 40
MARGIN_PX = 10

CLUE_COLOR = "black"
SOLVED_COLOR = "blue"
LINE_COLOR = "black"


def render_grid(grid: GridLike, givens: Optional[GridLike] = None,
                title: str = "") -> Image.Image:
    """
    Draw a grid onto a new image.

    Clue cells (non-zero in givens) are drawn in black, cells filled by
    the solver in blue. Without givens every digit counts as a clue.

    Args:
        grid: Grid to draw, 0 for blanks
        givens: Original puzzle, to tell clues from solved cells
        title: Optional caption under the grid

    Returns:
        RGB PIL Image
    """
    values = to_grid(grid)
    clues = to_grid(givens) if givens is not None else values
    side = SIZE * CELL_PX + 2 * MARGIN_PX
    caption_px = 20 if title else 0

    image = Image.new("RGB", (side, side + caption_px), "white")
    draw = ImageDraw.Draw(image)

    try:
        font = ImageFont.truetype("arial.ttf", 20)
    except OSError:
        font = ImageFont.load_default()

    for i in range(SIZE + 1):
        width = 3 if i % BLOCK == 0 else 1
        offset = MARGIN_PX + i * CELL_PX
        end = MARGIN_PX + SIZE * CELL_PX
        draw.line([(MARGIN_PX, offset), (end, offset)], fill=LINE_COLOR, width=width)
        draw.line([(offset, MARGIN_PX), (offset, end)], fill=LINE_COLOR, width=width)

    for r in range(SIZE):
        for c in range(SIZE):
            value = int(values[r, c])
            if not value:
                continue
            color = CLUE_COLOR if clues[r, c] else SOLVED_COLOR
            x = MARGIN_PX + c * CELL_PX + CELL_PX // 3
            y = MARGIN_PX + r * CELL_PX + CELL_PX // 4
            draw.text((x, y), str(value), fill=color, font=font)

    if title:
        draw.text((MARGIN_PX, side), title, fill=LINE_COLOR)

    return image


def save_grid_image(grid: GridLike, givens: Optional[GridLike] = None,
                    path: Union[str, Path, None] = None, title: str = "",
                    debug_dir: Union[str, Path, None] = None) -> Path:
    """
    Render a grid and save it as PNG.

    Args:
        grid: Grid to draw
        givens: Original puzzle, to tell clues from solved cells
        path: Output file path (default: timestamped file in the debug dir)
        title: Optional caption
        debug_dir: Directory for default-named images

    Returns:
        Path of the written image
    """
    directory = Path(debug_dir) if debug_dir is not None else DEBUG_DIR
    if path is None:
        directory.mkdir(parents=True, exist_ok=True)
        stamp = time.strftime("%Y%m%d_%H%M%S")
        path = directory / f"debug_{stamp}_{int(time.time() * 1000) % 1000:03d}.png"
    path = Path(path)

    image = render_grid(grid, givens, title)
    image.save(path, "PNG")

    _cleanup_debug_images(path.parent)
    return path


def _cleanup_debug_images(directory: Path) -> None:
    """Remove old debug images, keeping only the most recent MAX_DEBUG_IMAGES."""
    if not directory.exists():
        return

    # Get all debug images sorted by modification time
    debug_files = sorted(
        directory.glob("debug_*.png"),
        key=lambda p: p.stat().st_mtime,
        reverse=True
    )

    # Remove old files
    for old_file in debug_files[MAX_DEBUG_IMAGES:]:
        try:
            old_file.unlink()
        except OSError:
            pass
