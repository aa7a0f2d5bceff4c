"""
Detection Module for Akari Locator

OpenCV pipeline that reduces a board image to cell rectangles, maps them
onto the grid and reads block symbols.

Usage:
    from akari_locator.detect import detect_cells, BoardReader

    # Located cells with (row, col)
    cells = detect_cells(image, rows, cols)

    # Full board text (needs glyph templates for block digits)
    templates = SymbolTemplates()
    templates.load_templates(Path("assets/templates"))
    reading = BoardReader(templates).read(image, rows, cols)
    print(reading.text)
"""

from .cells import (
    CellDetection,
    CellDetectionError,
    DetectionParams,
    DEFAULT_PARAMS,
    crop_cell,
    detect_cells,
    find_cell_rects,
)
from .symbols import (
    Symbol,
    SymbolTemplates,
    TEMPLATE_FILES,
    classify_cell,
    is_block,
)
from .reader import BoardReader, BoardReading, UNKNOWN_CELL
from .debug import DEBUG_DIR, save_debug_image

__all__ = [
    # Cells
    "CellDetection",
    "CellDetectionError",
    "DetectionParams",
    "DEFAULT_PARAMS",
    "crop_cell",
    "detect_cells",
    "find_cell_rects",
    # Symbols
    "Symbol",
    "SymbolTemplates",
    "TEMPLATE_FILES",
    "classify_cell",
    "is_block",
    # Reader
    "BoardReader",
    "BoardReading",
    "UNKNOWN_CELL",
    # Debug
    "DEBUG_DIR",
    "save_debug_image",
]
