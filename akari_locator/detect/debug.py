"""
Detection Debug Utilities

Functions for saving annotated debug images and managing debug output.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

from ..grid import Cell
from .symbols import Symbol

logger = logging.getLogger(__name__)


# Debug settings
DEBUG_DIR = Path("./debug")
MAX_DEBUG_IMAGES = 10

# Outline colors
CELL_COLOR = "lime"
BLOCK_COLOR = "orange"


def save_debug_image(
    image: Image.Image,
    cells: Sequence[Cell],
    path: str,
    symbols: Optional[Sequence[Symbol]] = None,
    total_rows: Optional[int] = None,
    total_cols: Optional[int] = None,
) -> None:
    """
    Save an annotated debug image showing located cells.

    Annotations include:
    - Cell rectangle outlines (orange for blocks)
    - (row,col) label at each cell center
    - Recognized symbol next to the label
    - Summary line with cell count

    Args:
        image: Original PIL Image
        cells: Located cells
        path: Output file path
        symbols: Optional symbol per cell (aligned with cells)
        total_rows: Grid rows, shown in the summary
        total_cols: Grid columns, shown in the summary
    """
    Path(path).parent.mkdir(parents=True, exist_ok=True)

    # Create a copy to draw on
    debug_img = image.convert("RGB")
    draw = ImageDraw.Draw(debug_img)

    # Try to load a font, fall back to default
    try:
        font = ImageFont.truetype("arial.ttf", 12)
    except OSError:
        font = ImageFont.load_default()

    for i, cell in enumerate(cells):
        symbol = symbols[i] if symbols is not None else None
        color = CELL_COLOR if symbol in (None, Symbol.WHITE) else BLOCK_COLOR

        rect = cell.rect
        draw.rectangle([rect.min_x, rect.min_y, rect.max_x - 1, rect.max_y - 1], outline=color, width=2)

        cx, cy = rect.center
        label = f"{cell.row},{cell.col}"
        if symbol is not None and symbol != Symbol.WHITE:
            label += f" {symbol.value}"
        draw.text((cx - 12, cy - 6), label, fill="red", font=font)

    summary = f"Cells: {len(cells)}"
    if total_rows and total_cols:
        summary += f" / {total_rows * total_cols} ({total_rows}x{total_cols})"
    draw.text((10, 10), summary, fill="blue", font=font)

    debug_img.save(path, "PNG")
    logger.debug(f"Debug image saved: {path}")

    _cleanup_debug_images()


def _cleanup_debug_images() -> None:
    """Remove old debug images, keeping only the most recent MAX_DEBUG_IMAGES."""
    if not DEBUG_DIR.exists():
        return

    # Get all debug images sorted by modification time
    debug_files = sorted(
        DEBUG_DIR.glob("debug_*.png"),
        key=lambda p: p.stat().st_mtime,
        reverse=True
    )

    # Remove old files
    for old_file in debug_files[MAX_DEBUG_IMAGES:]:
        try:
            old_file.unlink()
        except OSError as e:
            logger.warning(f"Failed to remove old debug image {old_file}: {e}")
