"""
Regression split statistic.

For one response, sums the deviations from the node mean within each
daughter and scores the split as

    delta = S_L^2 / (n_L * var) + S_R^2 / (n_R * var)

where S_L = sum over LEFT of (y_i - mean). Both daughters must be
non-empty; an empty daughter yields NaN rather than an exception.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pysplitstats.split._common import left_mask


def regression_split_statistic(
    n: int,
    membership: NDArray,
    time: NDArray | None = None,
    event: NDArray | None = None,
    event_type_size: int = 0,
    event_time_size: int = 0,
    event_time: NDArray | None = None,
    response: NDArray | None = None,
    mean: float = 0.0,
    variance: float = 1.0,
    max_level: int = 0,
    feature: NDArray | None = None,
    feature_count: int = 0,
) -> float:
    """Squared-deviation regression statistic for one response."""
    is_left = left_mask(membership[:n])
    deviation = np.asarray(response[:n], dtype=np.float64) - mean

    sum_left = np.float64(deviation[is_left].sum())
    sum_right = np.float64(deviation[~is_left].sum())
    left_size = np.float64(np.count_nonzero(is_left))
    right_size = np.float64(n) - left_size

    with np.errstate(divide='ignore', invalid='ignore'):
        delta = (
            sum_left ** 2 / (left_size * variance)
            + sum_right ** 2 / (right_size * variance)
        )
    return float(delta)
