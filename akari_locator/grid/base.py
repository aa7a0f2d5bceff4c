"""
Base Axis Strategy Module - Abstract base class for axis solvers.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Sequence

from .clustering import (
    ClusterArena,
    clamp_slot,
    cluster_observations,
    find_best_shift,
    linear_regression,
    sort_observations,
)
from .errors import InputError, SlotOverflowError

logger = logging.getLogger(__name__)


# Gap (in ideal pitches) that separates two clusters, and its allowed range
DEFAULT_CLUSTER_RATIO = 0.45
MIN_CLUSTER_RATIO = 0.45
MAX_CLUSTER_RATIO = 0.5


def check_cluster_ratio(value: float) -> float:
    """
    Validate a cluster ratio.

    Below the range, detections of one cell split into several clusters;
    above it, neighbouring cells merge.

    Raises:
        ValueError: If value lies outside [MIN_CLUSTER_RATIO, MAX_CLUSTER_RATIO]
    """
    value = float(value)
    if not (MIN_CLUSTER_RATIO <= value <= MAX_CLUSTER_RATIO):
        raise ValueError(
            f"cluster_ratio must be within [{MIN_CLUSTER_RATIO}, {MAX_CLUSTER_RATIO}], got {value}"
        )
    return value


class AxisStrategy(ABC):
    """
    Abstract base class for all axis strategies.

    solve() runs the shared pipeline: sort, cluster, pigeonhole check,
    relative indexing (strategy specific), regression, shift search and
    write-back. Subclasses implement assign_relative_indices() and define
    name and description class attributes.

    Attributes:
        name: Short identifier for the strategy
        description: Human-readable description
        cluster_ratio: Cluster-separating gap as a fraction of the ideal pitch
    """
    name: str = "base"
    description: str = "Base axis strategy"

    def __init__(self, cluster_ratio: float = DEFAULT_CLUSTER_RATIO):
        self.cluster_ratio = check_cluster_ratio(cluster_ratio)

    @abstractmethod
    def assign_relative_indices(self, means: Sequence[float], ideal_pitch: float,
                                max_slots: int) -> List[int]:
        """
        Map cluster means to strictly increasing relative indices.

        Args:
            means: Cluster means in ascending order (len <= max_slots)
            ideal_pitch: board_len / max_slots
            max_slots: Number of slots on the axis

        Returns:
            One relative index per cluster
        """
        pass

    def configure(self, **kwargs) -> None:
        """
        Configure strategy parameters.

        Args:
            cluster_ratio: Cluster-separating gap as a fraction of the ideal pitch

        Raises:
            ValueError: If cluster_ratio is outside the allowed range
        """
        if 'cluster_ratio' in kwargs:
            self.cluster_ratio = check_cluster_ratio(kwargs["cluster_ratio"])

    def solve(self, board_len: float, max_slots: int, coords: Sequence[float]) -> List[int]:
        """
        Assign a slot index to every coordinate on one axis.

        Args:
            board_len: Pixel length of the board along this axis
            max_slots: Number of slots on this axis
            coords: Observed coordinates, any order

        Returns:
            Slot index per coordinate, aligned with the input order

        Raises:
            InputError: coords is empty, or max_slots / board_len not positive
            SlotOverflowError: More distinct positions than slots
        """
        if len(coords) == 0:
            raise InputError("observed coordinates are empty")
        if max_slots <= 0:
            raise InputError(f"slot count must be positive, got {max_slots}")
        if board_len <= 0:
            raise InputError(f"board length must be positive, got {board_len}")

        ideal_pitch = board_len / max_slots
        arena = self.cluster(coords, ideal_pitch)

        if arena.cluster_count > max_slots:
            raise SlotOverflowError(arena.cluster_count, max_slots)

        rel = self.assign_relative_indices(arena.means, ideal_pitch, max_slots)

        slope, intercept = linear_regression(rel, arena.means)
        shift = find_best_shift(slope, intercept, board_len, max_slots, rel[0], rel[-1])
        logger.debug(
            f"[{self.name}] clusters={arena.cluster_count} rel={rel} "
            f"slope={slope:.2f} intercept={intercept:.2f} shift={shift}"
        )

        result = [0] * len(coords)
        for obs, cluster_id in zip(arena.observations, arena.cluster_ids):
            result[obs.original_index] = clamp_slot(rel[cluster_id] + shift, max_slots)

        return result

    def cluster(self, coords: Sequence[float], ideal_pitch: float) -> ClusterArena:
        """Sort coordinates and group the ones closer than the noise threshold."""
        observations = sort_observations(coords)
        return cluster_observations(observations, ideal_pitch * self.cluster_ratio)
