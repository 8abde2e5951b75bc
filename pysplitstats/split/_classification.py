"""
Classification split statistic.

Tallies class counts per daughter and scores

    delta = sum_c L_c^2 / n_L + sum_c R_c^2 / n_R

an unnormalized Gini-style purity score: higher means purer daughters.
Labels must be integers in [1, max_level]; labels outside that range are
not counted.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pysplitstats.core.buffers import count_vector
from pysplitstats.split._common import left_mask


def _class_counts(labels: NDArray, max_level: int) -> NDArray:
    counts = count_vector(max_level)
    in_range = (labels >= 1) & (labels <= max_level)
    np.add.at(counts, labels[in_range] - 1, 1)
    return counts


def classification_split_statistic(
    n: int,
    membership: NDArray,
    time: NDArray | None = None,
    event: NDArray | None = None,
    event_type_size: int = 0,
    event_time_size: int = 0,
    event_time: NDArray | None = None,
    response: NDArray | None = None,
    mean: float = 0.0,
    variance: float = 0.0,
    max_level: int = 0,
    feature: NDArray | None = None,
    feature_count: int = 0,
) -> float:
    """Sum-of-squared-class-counts statistic for one factor response."""
    is_left = left_mask(membership[:n])
    labels = np.asarray(response[:n]).astype(np.int64)

    left_counts = _class_counts(labels[is_left], max_level)
    right_counts = _class_counts(labels[~is_left], max_level)

    left_size = np.float64(np.count_nonzero(is_left))
    right_size = np.float64(n) - left_size

    with np.errstate(divide='ignore', invalid='ignore'):
        delta = (
            np.float64(np.sum(left_counts ** 2)) / left_size
            + np.float64(np.sum(right_counts ** 2)) / right_size
        )
    return float(delta)
