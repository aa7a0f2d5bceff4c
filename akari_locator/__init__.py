"""
Akari Locator - Locates the grid cells of a Daily Akari board capture.

Subpackages:
    - grid: Maps noisy cell rectangles to (row, col) positions
    - detect: OpenCV cell detection and symbol reading
"""

__version__ = "1.0.0"
