"""
Grid Identification Errors

Exception types raised while mapping observed rectangles to grid slots.
"""

from typing import Optional


class GridIdentificationError(Exception):
    """
    Base class for grid identification failures.

    Attributes:
        axis: "x" or "y" when the failure happened while solving one axis,
              None when it happened before any axis was solved
    """

    def __init__(self, message: str, axis: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.axis = axis

    def __str__(self) -> str:
        if self.axis:
            return f"{self.axis}-axis identification failed: {self.message}"
        return self.message


class InputError(GridIdentificationError, ValueError):
    """No observations supplied, or grid dimensions are not usable."""


class SlotOverflowError(GridIdentificationError):
    """
    More distinct positions observed on an axis than it has slots.

    Attributes:
        cluster_count: Number of distinct positions found
        max_slots: Number of slots available on the axis
    """

    def __init__(self, cluster_count: int, max_slots: int, axis: Optional[str] = None):
        super().__init__(
            f"too many unique positions ({cluster_count}) observed for board size {max_slots}",
            axis=axis,
        )
        self.cluster_count = cluster_count
        self.max_slots = max_slots
