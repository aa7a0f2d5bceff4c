"""
Cell Symbol Classification

Tells open cells from black blocks and reads the digit on a block using
OpenCV template matching on edge maps.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

import cv2
import numpy as np

from .cells import to_gray

logger = logging.getLogger(__name__)


# Block detection: open cells have at least this share of non-black pixels
BLOCK_FILL_RATIO = 0.7

# Canny thresholds for glyph edge maps
EDGE_LOW = 50
EDGE_HIGH = 150

# Minimum TM_CCOEFF_NORMED score to accept a template
MATCH_THRESHOLD = 0.4


class Symbol(Enum):
    """Cell content, valued by its character in the board text."""
    WHITE = "."
    EMPTY = "#"
    ZERO = "0"
    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"


# Template file per symbol, listed in matching order
TEMPLATE_FILES: Dict[Symbol, str] = {
    Symbol.ZERO: "zero.png",
    Symbol.FOUR: "four.png",
    Symbol.THREE: "three.png",
    Symbol.TWO: "two.png",
    Symbol.ONE: "one.png",
}


def is_block(cell_image: np.ndarray) -> bool:
    """
    Check whether a cell is a black block.

    Args:
        cell_image: BGR or grayscale cell crop

    Returns:
        True when less than BLOCK_FILL_RATIO of the pixels are non-black
    """
    gray = to_gray(cell_image)
    if gray.size == 0:
        return False
    non_zero = cv2.countNonZero(gray)
    return non_zero / float(gray.size) < BLOCK_FILL_RATIO


class SymbolTemplates:
    """Manages glyph templates for block digits."""

    def __init__(self):
        self.templates: Dict[Symbol, np.ndarray] = {}

    def load_templates(self, template_dir: Path) -> bool:
        """
        Load glyph templates from directory.

        Expected files: zero.png, one.png, two.png, three.png, four.png.
        Missing or unreadable files are skipped.

        Args:
            template_dir: Path to directory containing template images

        Returns:
            True if every template was loaded
        """
        self.templates.clear()

        if not template_dir.exists():
            logger.warning(f"Template directory not found: {template_dir}")
            return False

        for symbol, filename in TEMPLATE_FILES.items():
            template_path = template_dir / filename
            if not template_path.exists():
                logger.warning(f"Missing template: {template_path}")
                continue
            img = cv2.imread(str(template_path), cv2.IMREAD_GRAYSCALE)
            if img is None:
                logger.warning(f"Unreadable template: {template_path}")
                continue
            self.add_template(symbol, img)

        logger.debug(f"Loaded {len(self.templates)}/{len(TEMPLATE_FILES)} templates from {template_dir}")
        return self.is_loaded()

    def add_template(self, symbol: Symbol, image: np.ndarray) -> None:
        """Register a glyph image (stored as its edge map)."""
        if symbol not in TEMPLATE_FILES:
            raise ValueError(f"{symbol} has no template")
        self.templates[symbol] = cv2.Canny(to_gray(image), EDGE_LOW, EDGE_HIGH)

    def is_loaded(self) -> bool:
        """Check if every template is loaded."""
        return len(self.templates) == len(TEMPLATE_FILES)

    def match(self, cell_image: np.ndarray) -> Symbol:
        """
        Match a block cell against the glyph templates.

        Templates are tried in TEMPLATE_FILES order and the first one
        scoring above MATCH_THRESHOLD wins.

        Args:
            cell_image: BGR or grayscale block crop

        Returns:
            Matching digit symbol, or Symbol.EMPTY
        """
        edges = cv2.Canny(to_gray(cell_image), EDGE_LOW, EDGE_HIGH)

        for symbol in TEMPLATE_FILES:
            template = self.templates.get(symbol)
            if template is None:
                continue
            if template.shape[0] > edges.shape[0] or template.shape[1] > edges.shape[1]:
                continue

            result = cv2.matchTemplate(edges, template, cv2.TM_CCOEFF_NORMED)
            _, max_val, _, _ = cv2.minMaxLoc(result)
            if max_val > MATCH_THRESHOLD:
                return symbol

        return Symbol.EMPTY


def classify_cell(cell_image: np.ndarray, templates: Optional[SymbolTemplates]) -> Symbol:
    """
    Classify a cell crop.

    Args:
        cell_image: BGR cell crop
        templates: Loaded glyph templates (None reads every block as EMPTY)

    Returns:
        Symbol.WHITE for open cells, otherwise the block's symbol
    """
    if not is_block(cell_image):
        return Symbol.WHITE
    if templates is None:
        return Symbol.EMPTY
    return templates.match(cell_image)
