"""
Grid Cell Mapper

Assigns (row, col) positions to observed cell rectangles by solving the
horizontal and vertical axes independently and merging the results.
"""

import logging
from typing import List, Optional, Sequence

from .base import AxisStrategy
from .errors import GridIdentificationError, InputError
from .factory import DEFAULT_STRATEGY, create_axis_strategy
from .result import BoardSize, Cell, Rect

logger = logging.getLogger(__name__)


class GridCellMapper:
    """
    Maps observed rectangles to grid cells.

    Holds one axis strategy and uses it for both axes. No state is kept
    between identify() calls.
    """

    def __init__(self, strategy: Optional[AxisStrategy] = None):
        """
        Initialize the mapper.

        Args:
            strategy: Axis strategy to use. If None, the default
                      ("adaptive") strategy is created.
        """
        self._strategy = strategy or create_axis_strategy(DEFAULT_STRATEGY)

    @classmethod
    def from_settings(cls, settings: dict) -> 'GridCellMapper':
        """Create a mapper configured from a settings dictionary."""
        config = {
            key: settings[key]
            for key in ("cluster_ratio", "max_pitch_retries")
            if settings.get(key) is not None
        }
        strategy = create_axis_strategy(settings.get("axis_strategy", DEFAULT_STRATEGY), **config)
        return cls(strategy)

    @property
    def strategy(self) -> AxisStrategy:
        return self._strategy

    def identify(self, board_size: BoardSize, total_rows: int, total_cols: int,
                 rects: Sequence[Rect]) -> List[Cell]:
        """
        Find the row and column of every observed rectangle.

        Args:
            board_size: Pixel size of the board region
            total_rows: Number of rows on the board
            total_cols: Number of columns on the board
            rects: Observed rectangles, any order

        Returns:
            One Cell per rectangle, in input order

        Raises:
            InputError: rects is empty, or an axis has invalid dimensions
            SlotOverflowError: An axis has more distinct positions than slots.
                The error's axis attribute names the failing axis.
        """
        if len(rects) == 0:
            raise InputError("observed rectangles are empty")

        centers = [r.center for r in rects]
        centers_x = [c[0] for c in centers]
        centers_y = [c[1] for c in centers]

        cols = self._solve_axis("x", board_size.width, total_cols, centers_x)
        rows = self._solve_axis("y", board_size.height, total_rows, centers_y)

        cells = [
            Cell(rect=rect, row=row, col=col)
            for rect, row, col in zip(rects, rows, cols)
        ]
        logger.debug(f"Identified {len(cells)} cells on a {total_rows}x{total_cols} grid")
        return cells

    def _solve_axis(self, axis: str, board_len: float, max_slots: int,
                    coords: List[float]) -> List[int]:
        try:
            return self._strategy.solve(board_len, max_slots, coords)
        except GridIdentificationError as e:
            e.axis = axis
            logger.debug(f"Axis solve failed: {e}")
            raise


def identify_grid_cells(board_size: BoardSize, total_rows: int, total_cols: int,
                        rects: Sequence[Rect], strategy: str = DEFAULT_STRATEGY) -> List[Cell]:
    """
    Standalone helper around GridCellMapper.identify().

    Args:
        board_size: Pixel size of the board region
        total_rows: Number of rows on the board
        total_cols: Number of columns on the board
        rects: Observed rectangles, any order
        strategy: Axis strategy name

    Returns:
        One Cell per rectangle, in input order
    """
    mapper = GridCellMapper(create_axis_strategy(strategy))
    return mapper.identify(board_size, total_rows, total_cols, rects)
