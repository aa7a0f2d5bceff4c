"""
Axis Clustering Module - Building blocks shared by the axis strategies.

Observations on one axis are kept in a flat arena sorted by value; clusters
are described by a parallel array of cluster ids rather than by shared
member lists.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np


# Denominator below which the regression is treated as degenerate
REGRESSION_EPSILON = 1e-9


@dataclass(frozen=True)
class Observation:
    """One axis coordinate and the position it came from in the input."""
    value: float
    original_index: int


@dataclass(frozen=True)
class ClusterArena:
    """
    Sorted observations grouped into clusters.

    Attributes:
        observations: Observations sorted by value (stable)
        cluster_ids: Cluster id for each sorted observation (non-decreasing)
        means: Mean value of each cluster, in ascending order
    """
    observations: Tuple[Observation, ...]
    cluster_ids: Tuple[int, ...]
    means: Tuple[float, ...]

    @property
    def cluster_count(self) -> int:
        return len(self.means)


def sort_observations(coords: Sequence[float]) -> List[Observation]:
    """Pair each coordinate with its input position and sort by value."""
    observations = [Observation(float(v), i) for i, v in enumerate(coords)]
    observations.sort(key=lambda o: o.value)
    return observations


def cluster_observations(observations: Sequence[Observation], threshold: float) -> ClusterArena:
    """
    Group sorted observations into clusters.

    A new cluster starts whenever the gap to the previous observation is at
    least `threshold`.

    Args:
        observations: Non-empty observations sorted by value
        threshold: Gap that separates two clusters

    Returns:
        ClusterArena with per-observation cluster ids and cluster means
    """
    values = np.array([o.value for o in observations], dtype=np.float64)
    breaks = np.diff(values) >= threshold
    ids = np.concatenate(([0], np.cumsum(breaks))).astype(np.int64)

    sums = np.bincount(ids, weights=values)
    counts = np.bincount(ids)
    means = sums / counts

    return ClusterArena(
        observations=tuple(observations),
        cluster_ids=tuple(int(i) for i in ids),
        means=tuple(float(m) for m in means),
    )


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def relative_indices(means: Sequence[float], pitch: float) -> List[int]:
    """
    Assign strictly increasing relative indices to cluster means.

    The first cluster is 0; every other cluster is its rounded distance from
    the first in pitches, bumped to previous + 1 when rounding would collide.
    """
    indices: List[int] = []
    base = means[0]

    for i, value in enumerate(means):
        rel = _round_half_up((value - base) / pitch)
        if i > 0 and rel <= indices[i - 1]:
            rel = indices[i - 1] + 1
        indices.append(rel)

    return indices


def index_span(indices: Sequence[int]) -> int:
    """Number of slots covered from the first to the last index."""
    return indices[-1] - indices[0] + 1


def compress_indices(indices: Sequence[int], max_slots: int) -> List[int]:
    """
    Close gaps between relative indices until they fit in max_slots.

    Each step finds the widest gap greater than one (first one on ties) and
    shifts every index from there on down by one.

    Raises:
        RuntimeError: If the indices still overflow but are already adjacent.
            Cannot happen when the cluster count was checked beforehand.
    """
    result = list(indices)
    if not result:
        return result

    excess = index_span(result) - max_slots
    for _ in range(max(0, excess)):
        max_gap = 1
        max_gap_idx = -1
        for i in range(1, len(result)):
            gap = result[i] - result[i - 1]
            if gap > max_gap:
                max_gap = gap
                max_gap_idx = i

        if max_gap_idx == -1:
            raise RuntimeError(
                f"cannot compress {len(result)} adjacent indices into {max_slots} slots"
            )

        for j in range(max_gap_idx, len(result)):
            result[j] -= 1

    return result


def linear_regression(x: Sequence[float], y: Sequence[float]) -> Tuple[float, float]:
    """
    Least-squares fit of y = slope * x + intercept.

    Returns (0, mean(y)) when x has no spread.
    """
    xs = np.asarray(x, dtype=np.float64)
    ys = np.asarray(y, dtype=np.float64)
    n = len(xs)
    if n == 0:
        return 0.0, 0.0

    sum_x = xs.sum()
    sum_y = ys.sum()
    denom = n * np.dot(xs, xs) - sum_x * sum_x
    if abs(denom) < REGRESSION_EPSILON:
        return 0.0, float(sum_y / n)

    slope = (n * np.dot(xs, ys) - sum_x * sum_y) / denom
    intercept = (sum_y - slope * sum_x) / n
    return float(slope), float(intercept)


def find_best_shift(slope: float, intercept: float, board_len: float,
                    max_slots: int, min_rel: int, max_rel: int) -> int:
    """
    Pick the integer shift that centers the fitted line on the board.

    Candidates range over every shift that keeps [min_rel, max_rel] inside
    [0, max_slots - 1]; the first one with the smallest distance between the
    predicted and actual board centers wins. An empty range falls back to
    aligning the first cluster with slot 0.
    """
    start_shift = -min_rel
    end_shift = max_slots - 1 - max_rel
    grid_center_idx = (max_slots - 1) / 2.0
    actual_center = board_len / 2.0

    best_shift = start_shift
    min_error = math.inf

    for shift in range(start_shift, end_shift + 1):
        predicted_center = slope * (grid_center_idx - shift) + intercept
        error = abs(predicted_center - actual_center)
        if error < min_error:
            min_error = error
            best_shift = shift

    return best_shift


def clamp_slot(index: int, max_slots: int) -> int:
    """Clamp an index into [0, max_slots - 1]."""
    return max(0, min(max_slots - 1, index))
