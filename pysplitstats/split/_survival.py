"""
Log-rank split statistic for right-censored survival data.

At each distinct event time t_k, with N_k parent subjects at risk, D_k
parent events, and n_k / d_k the LEFT daughter's counts:

    U = sum_k (d_k - n_k * D_k / N_k)
    V = sum_{k: N_k >= 2} (n_k / N_k) (1 - n_k / N_k) (N_k - D_k) / (N_k - 1) D_k

The statistic is |U| / sqrt(V). When both |U| and sqrt(V) are at or below
LOGRANK_ZERO_GUARD the split carries no information and scores 0.

References:
    Segal, M. R. (1988). Regression trees for censored data.
        Biometrics, 44(1), 35-47.
    Ishwaran, H., Kogalur, U. B., Blackstone, E. H. & Lauer, M. S. (2008).
        Random survival forests. Annals of Applied Statistics, 2(3), 841-860.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pysplitstats.core.compute.tolerances import LOGRANK_ZERO_GUARD
from pysplitstats.split._riskset import accumulate_risk_sets


def standardize_logrank(numerator: float, denominator_sq: float) -> float:
    """|U| / sqrt(V) with the zero guard applied.

    Shared with the competing-risk statistic.
    """
    num = abs(float(numerator))
    den = float(np.sqrt(denominator_sq))
    if den <= LOGRANK_ZERO_GUARD and num <= LOGRANK_ZERO_GUARD:
        return 0.0
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(num) / np.float64(den))


def logrank_terms(
    parent_at_risk: NDArray,
    left_at_risk: NDArray,
    parent_event: NDArray,
    left_event: NDArray,
) -> tuple[float, float]:
    """Log-rank numerator U and variance V from risk-set tables."""
    N = parent_at_risk.astype(np.float64)
    n_left = left_at_risk.astype(np.float64)
    D = parent_event.astype(np.float64)
    d_left = left_event.astype(np.float64)

    with np.errstate(divide='ignore', invalid='ignore'):
        numerator = np.sum(d_left - n_left * D / N)

        # Variance needs at least two subjects at risk.
        valid = parent_at_risk >= 2
        p = n_left[valid] / N[valid]
        denominator = np.sum(
            p * (1.0 - p) * (N[valid] - D[valid]) / (N[valid] - 1.0) * D[valid]
        )

    return float(numerator), float(denominator)


def survival_split_statistic(
    n: int,
    membership: NDArray,
    time: NDArray | None = None,
    event: NDArray | None = None,
    event_type_size: int = 1,
    event_time_size: int = 0,
    event_time: NDArray | None = None,
    response: NDArray | None = None,
    mean: float = 0.0,
    variance: float = 0.0,
    max_level: int = 0,
    feature: NDArray | None = None,
    feature_count: int = 0,
) -> float:
    """Standardized log-rank statistic comparing LEFT against the parent."""
    tables = accumulate_risk_sets(
        n, membership, time, event, event_time[:event_time_size],
    )
    numerator, denominator = logrank_terms(
        tables.parent_at_risk,
        tables.left_at_risk,
        tables.parent_event,
        tables.left_event,
    )
    return standardize_logrank(numerator, denominator)
