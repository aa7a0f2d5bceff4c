"""
Grid Result Dataclasses

Shared data structures for board geometry and located cells.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned pixel rectangle.

    Max coordinates are exclusive, so width = max_x - min_x.
    """
    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @classmethod
    def from_xywh(cls, x: int, y: int, w: int, h: int) -> 'Rect':
        """Create a Rect from an OpenCV boundingRect tuple."""
        return cls(min_x=x, min_y=y, max_x=x + w, max_y=y + h)

    @property
    def width(self) -> int:
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        return self.max_y - self.min_y

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> Tuple[float, float]:
        """Midpoint of the two corners as (x, y)."""
        return (self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0

    def to_dict(self) -> Dict[str, int]:
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
        }


@dataclass(frozen=True)
class BoardSize:
    """Pixel size of the cropped board region."""
    width: int
    height: int


@dataclass(frozen=True)
class Cell:
    """
    A detected rectangle with its grid position.

    Attributes:
        rect: Rectangle as observed by the detector
        row: Row index, 0 <= row < total_rows
        col: Column index, 0 <= col < total_cols
    """
    rect: Rect
    row: int
    col: int

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict form for JSON serialization."""
        return {"rect": self.rect.to_dict(), "row": self.row, "col": self.col}
