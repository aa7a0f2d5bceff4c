"""
Cell Rectangle Detection

Finds candidate cell rectangles on a board image using edge detection,
dilation and contour extraction, then filters them down to the rectangles
that match the dominant cell size.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import cv2
import numpy as np

from ..grid import BoardSize, Cell, GridCellMapper, Rect

logger = logging.getLogger(__name__)


class CellDetectionError(Exception):
    """Raised when no consistent set of cell rectangles can be found."""


@dataclass(frozen=True)
class DetectionParams:
    """Thresholds for cell rectangle detection (board pixel scale)."""
    grid_canny_low: int = 50
    grid_canny_high: int = 50
    block_canny_low: int = 200
    block_canny_high: int = 300
    dilate_kernel: int = 5
    dilate_iterations: int = 2
    min_area: int = 500
    max_area: int = 10000
    min_aspect: float = 0.5
    max_aspect: float = 2.0
    # Open cells cover less than this share of the block mask
    max_block_ratio: float = 0.075
    # Allowed difference between median cell width and height
    max_size_skew: int = 1
    # Allowed relative area difference from the median cell
    area_tolerance: float = 0.3


DEFAULT_PARAMS = DetectionParams()


@dataclass(frozen=True)
class CellDetection:
    """Reduced detector output consumed by the grid mapper."""
    board_size: BoardSize
    rects: Tuple[Rect, ...]
    cell_size: int


def _dilate(edges: np.ndarray, params: DetectionParams) -> np.ndarray:
    kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (params.dilate_kernel, params.dilate_kernel))
    return cv2.dilate(edges, kernel, iterations=params.dilate_iterations)


def to_gray(image: np.ndarray) -> np.ndarray:
    """Grayscale view of a BGR or already single-channel image."""
    if image.ndim == 2:
        return image
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def _candidate_rects(gray: np.ndarray, params: DetectionParams) -> List[Rect]:
    """Bounding rectangles of grid contours that look like a single cell."""
    edges = cv2.Canny(gray, params.grid_canny_low, params.grid_canny_high)
    dilated = _dilate(edges, params)
    contours, _ = cv2.findContours(dilated, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)

    rects = []
    for cnt in contours:
        x, y, w, h = cv2.boundingRect(cnt)
        area = w * h
        if not (params.min_area <= area <= params.max_area):
            continue

        ratio = w / h
        if not (params.min_aspect <= ratio <= params.max_aspect):
            continue

        rects.append(Rect.from_xywh(x, y, w, h))

    return rects


def _block_mask(image: np.ndarray, params: DetectionParams) -> np.ndarray:
    """
    Filled mask of regions enclosed by strong (black cell) edges.

    Edges come from the image as given; on colour input Canny takes the
    strongest channel gradient per pixel.
    """
    edges = cv2.Canny(image, params.block_canny_low, params.block_canny_high)
    dilated = _dilate(edges, params)
    contours, _ = cv2.findContours(dilated, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)

    mask = np.zeros(image.shape[:2], dtype=np.uint8)
    cv2.drawContours(mask, contours, -1, 255, thickness=cv2.FILLED)
    return mask


def _block_ratio(mask: np.ndarray, rect: Rect) -> float:
    roi = mask[rect.min_y:rect.max_y, rect.min_x:rect.max_x]
    return cv2.countNonZero(roi) / float(rect.area)


def find_cell_rects(image: np.ndarray, params: Optional[DetectionParams] = None) -> CellDetection:
    """
    Detect cell rectangles on a cropped board image.

    The median size of open (non-black) cells defines the expected cell
    size; every candidate close enough to it is kept, black cells included.

    Args:
        image: BGR (or grayscale) board image; its size is the board size
        params: Detection thresholds (defaults to DEFAULT_PARAMS)

    Returns:
        CellDetection with board size, rectangles and median cell size

    Raises:
        CellDetectionError: No usable cells, or width/height medians disagree
    """
    params = params or DEFAULT_PARAMS
    gray = to_gray(image)
    height, width = gray.shape[:2]

    candidates = _candidate_rects(gray, params)
    mask = _block_mask(image, params)

    open_cells = [r for r in candidates if _block_ratio(mask, r) < params.max_block_ratio]
    if not open_cells:
        raise CellDetectionError(f"no open cells among {len(candidates)} candidate rectangles")

    width_median = int(np.median([r.width for r in open_cells]))
    height_median = int(np.median([r.height for r in open_cells]))
    logger.debug(
        f"{len(candidates)} candidates, {len(open_cells)} open cells, "
        f"median size {width_median}x{height_median}"
    )

    if abs(width_median - height_median) > params.max_size_skew:
        raise CellDetectionError(
            f"cell width ({width_median}) and height ({height_median}) differ too much; "
            f"grid detection probably failed"
        )

    cell_size = (width_median + height_median) // 2
    cell_area = cell_size * cell_size

    rects = []
    for rect in candidates:
        if abs(rect.area - cell_area) / float(cell_area) > params.area_tolerance:
            continue
        if rect.width < cell_size * 3 / 4 or rect.width > cell_size * 5 / 4:
            continue
        rects.append(rect)

    if not rects:
        raise CellDetectionError(f"no rectangles match the cell size {cell_size}px")

    logger.info(f"Detected {len(rects)} cells of ~{cell_size}px on a {width}x{height} board")
    return CellDetection(
        board_size=BoardSize(width=width, height=height),
        rects=tuple(rects),
        cell_size=cell_size,
    )


def detect_cells(image: np.ndarray, total_rows: int, total_cols: int,
                 mapper: Optional[GridCellMapper] = None,
                 params: Optional[DetectionParams] = None) -> List[Cell]:
    """
    Detect cells on a board image and assign their grid positions.

    Args:
        image: BGR board image
        total_rows: Number of rows on the board
        total_cols: Number of columns on the board
        mapper: Grid mapper to use (default adaptive mapper if None)
        params: Detection thresholds

    Returns:
        Located cells in detection order

    Raises:
        CellDetectionError: If detection fails
        GridIdentificationError: If rectangles cannot be mapped to the grid
    """
    detection = find_cell_rects(image, params)
    mapper = mapper or GridCellMapper()
    return mapper.identify(detection.board_size, total_rows, total_cols, detection.rects)


def crop_cell(image: np.ndarray, rect: Rect, inset: float = 0.1) -> np.ndarray:
    """Crop a cell with a border inset (fraction of its size) on every side."""
    dx = int(rect.width * inset)
    dy = int(rect.height * inset)
    return image[rect.min_y + dy:rect.max_y - dy, rect.min_x + dx:rect.max_x - dx]
