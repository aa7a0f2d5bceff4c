"""
Adaptive Strategy - Widens the pitch until the clusters fit the axis.
"""

import logging
from typing import List, Sequence

from ..base import AxisStrategy, DEFAULT_CLUSTER_RATIO
from ..clustering import compress_indices, index_span, relative_indices
from ..factory import register_axis_strategy

logger = logging.getLogger(__name__)


# Pitch-widening attempts before falling back to compression
DEFAULT_MAX_PITCH_RETRIES = 10

# Smallest growth factor applied per widening attempt
MIN_WIDENING_RATIO = 1.01


@register_axis_strategy
class AdaptiveAxisStrategy(AxisStrategy):
    """
    Relative indexing with adaptive pitch widening and gap compression.

    Starts from the ideal pitch. When the resulting indices span more slots
    than the axis has (the real pitch is larger than board_len / max_slots),
    the pitch grows by span / max_slots (at least 1%) and the indices are
    recomputed. If that still does not fit after max_pitch_retries attempts,
    the widest gaps between indices are closed one slot at a time.
    """
    name = "adaptive"
    description = "Adaptive pitch - widens pitch, then compresses gaps"

    def __init__(self, cluster_ratio: float = DEFAULT_CLUSTER_RATIO,
                 max_pitch_retries: int = DEFAULT_MAX_PITCH_RETRIES):
        super().__init__(cluster_ratio=cluster_ratio)
        self.max_pitch_retries = max_pitch_retries

    def configure(self, **kwargs) -> None:
        """
        Configure strategy parameters.

        Args:
            cluster_ratio: Cluster-separating gap as a fraction of the ideal pitch
            max_pitch_retries: Pitch-widening attempts before compression
        """
        super().configure(**kwargs)
        if 'max_pitch_retries' in kwargs:
            self.max_pitch_retries = int(kwargs['max_pitch_retries'])

    def assign_relative_indices(self, means: Sequence[float], ideal_pitch: float,
                                max_slots: int) -> List[int]:
        pitch = ideal_pitch
        indices = relative_indices(means, pitch)

        for attempt in range(self.max_pitch_retries):
            indices = relative_indices(means, pitch)
            span = index_span(indices)
            if span <= max_slots:
                break

            ratio = max(span / max_slots, MIN_WIDENING_RATIO)
            pitch *= ratio
            logger.debug(
                f"Span {span} exceeds {max_slots} slots (attempt {attempt + 1}), "
                f"widening pitch to {pitch:.2f}"
            )

        if index_span(indices) > max_slots:
            logger.debug(f"Pitch widening did not converge, compressing {indices}")
            indices = compress_indices(indices, max_slots)

        return indices
