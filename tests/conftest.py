"""
Shared fixtures: synthetic Akari board images.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


# Synthetic board geometry: 5x5 cells of 60px, framed 10px inside a 320px image
BOARD_CELLS = 5
BOARD_PITCH = 60
BOARD_MARGIN = 10
BOARD_IMAGE_SIZE = 320
LINE_GRAY = 230


def render_board(blocks=()):
    """
    Render a white board with light gray grid lines.

    Args:
        blocks: (row, col) cells to fill black

    Returns:
        BGR image of shape (320, 320, 3)
    """
    img = np.full((BOARD_IMAGE_SIZE, BOARD_IMAGE_SIZE, 3), 255, dtype=np.uint8)
    end = BOARD_MARGIN + BOARD_CELLS * BOARD_PITCH + 2

    for k in range(BOARD_CELLS + 1):
        p = BOARD_MARGIN + k * BOARD_PITCH
        img[p:p + 2, BOARD_MARGIN:end] = LINE_GRAY
        img[BOARD_MARGIN:end, p:p + 2] = LINE_GRAY

    for row, col in blocks:
        y0 = BOARD_MARGIN + row * BOARD_PITCH + 2
        x0 = BOARD_MARGIN + col * BOARD_PITCH + 2
        img[y0:y0 + BOARD_PITCH - 2, x0:x0 + BOARD_PITCH - 2] = 0

    return img


@pytest.fixture
def board_image():
    """5x5 board with a single black block in the middle (2, 2)."""
    return render_board(blocks=[(2, 2)])


@pytest.fixture
def blank_image():
    """Plain white image with no grid at all."""
    return np.full((BOARD_IMAGE_SIZE, BOARD_IMAGE_SIZE, 3), 255, dtype=np.uint8)
