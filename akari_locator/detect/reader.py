"""
Board Reader

Combines cell detection, grid mapping and symbol classification into a
textual board.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..grid import Cell, GridCellMapper
from .cells import DetectionParams, crop_cell, find_cell_rects
from .symbols import Symbol, SymbolTemplates, classify_cell

logger = logging.getLogger(__name__)


# Character for grid slots no detection was mapped to
UNKNOWN_CELL = "?"

# Border inset when cropping a cell for classification
CELL_INSET = 0.1


@dataclass
class BoardReading:
    """
    Result of reading one board image.

    Attributes:
        cells: Located cells in detection order
        symbols: Symbol per located cell (aligned with cells)
        grid: rows x cols characters; UNKNOWN_CELL where nothing was located
    """
    cells: List[Cell]
    symbols: List[Symbol]
    grid: List[List[str]]

    @property
    def text(self) -> str:
        """Board as newline-separated rows."""
        return "\n".join("".join(row) for row in self.grid)

    @property
    def missing(self) -> List[Tuple[int, int]]:
        """(row, col) of slots without a located cell."""
        return [
            (r, c)
            for r, row in enumerate(self.grid)
            for c, ch in enumerate(row)
            if ch == UNKNOWN_CELL
        ]


class BoardReader:
    """Reads a board image into cells and symbols."""

    def __init__(self, templates: Optional[SymbolTemplates] = None,
                 mapper: Optional[GridCellMapper] = None,
                 params: Optional[DetectionParams] = None):
        """
        Initialize the reader.

        Args:
            templates: Glyph templates for block digits (None reads every
                       block as EMPTY)
            mapper: Grid mapper (default adaptive mapper if None)
            params: Detection thresholds
        """
        self._templates = templates
        self._mapper = mapper or GridCellMapper()
        self._params = params

    def read(self, image: np.ndarray, total_rows: int, total_cols: int) -> BoardReading:
        """
        Read a board image.

        Args:
            image: BGR board image
            total_rows: Number of rows on the board
            total_cols: Number of columns on the board

        Returns:
            BoardReading with cells, symbols and the text grid

        Raises:
            CellDetectionError: If detection fails
            GridIdentificationError: If rectangles cannot be mapped to the grid
        """
        detection = find_cell_rects(image, self._params)
        cells = self._mapper.identify(detection.board_size, total_rows, total_cols, detection.rects)

        grid = [[UNKNOWN_CELL] * total_cols for _ in range(total_rows)]
        symbols = []
        for cell in cells:
            symbol = classify_cell(crop_cell(image, cell.rect, CELL_INSET), self._templates)
            symbols.append(symbol)

            if grid[cell.row][cell.col] != UNKNOWN_CELL:
                logger.warning(f"Several detections mapped to ({cell.row},{cell.col}), keeping the last")
            grid[cell.row][cell.col] = symbol.value

        reading = BoardReading(cells=cells, symbols=symbols, grid=grid)
        if reading.missing:
            logger.info(f"{len(reading.missing)} slots without a detected cell")
        return reading
