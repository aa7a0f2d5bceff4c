"""
Grid Package - Maps noisy cell detections to grid positions.

Each axis is solved independently: observed centers are clustered,
given relative indices, fitted with a line and shifted so the fit is
centered on the board. The two axes are then merged into Cell records.

Public API:
    - Rect, BoardSize, Cell: Geometry and result types
    - GridCellMapper, identify_grid_cells(): Rectangles -> cells
    - AxisStrategy: Abstract base for axis solvers
    - create_axis_strategy(): Factory function
    - GridIdentificationError, InputError, SlotOverflowError: Failures

Usage:
    from akari_locator.grid import BoardSize, Rect, identify_grid_cells

    cells = identify_grid_cells(BoardSize(500, 500), 5, 5, rects)
    for cell in cells:
        print(f"({cell.row},{cell.col}) -> {cell.rect}")
"""

# Result types
from .result import Rect, BoardSize, Cell

# Errors
from .errors import GridIdentificationError, InputError, SlotOverflowError

# Strategy framework
from .base import AxisStrategy
from .factory import (
    DEFAULT_STRATEGY,
    create_axis_strategy,
    get_strategy_names,
    get_strategy_info,
    register_axis_strategy,
)

# Import strategies to register them
from . import strategies

from .mapper import GridCellMapper, identify_grid_cells

__all__ = [
    # Result types
    "Rect",
    "BoardSize",
    "Cell",
    # Errors
    "GridIdentificationError",
    "InputError",
    "SlotOverflowError",
    # Strategy framework
    "AxisStrategy",
    "DEFAULT_STRATEGY",
    "create_axis_strategy",
    "get_strategy_names",
    "get_strategy_info",
    "register_axis_strategy",
    # Mapper
    "GridCellMapper",
    "identify_grid_cells",
]
