"""
Competing-risk log-rank split statistic.

Each cause j is tested against an inclusive risk set that keeps subjects
who already failed from another cause, as in Gray's subdistribution
approach. Per cause, with N_jk / n_jk the parent / LEFT inclusive risk sets
and D_jk / d_jk the parent / LEFT cause-j events:

    U_j = sum_k (d_jk - D_jk * n_jk / N_jk)
    V_j = sum_{k: N_k >= 2} D_jk p (1 - p) (N_jk - D_jk) / (N_jk - 1),
          p = n_jk / N_jk

U and V are summed over causes and standardized exactly as the ordinary
log-rank statistic; the variance floor uses the ordinary risk set N_k.
With a single cause the two statistics coincide.

References:
    Ishwaran, H., Gerds, T. A., Kogalur, U. B., Moore, R. D., Gange, S. J.
        & Lau, B. M. (2014). Random survival forests for competing risks.
        Biostatistics, 15(4), 757-773.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pysplitstats.split._riskset import accumulate_competing_risk_sets
from pysplitstats.split._survival import standardize_logrank


def competing_risk_split_statistic(
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
    """Sum over causes of the cause-specific log-rank terms, standardized."""
    tables = accumulate_competing_risk_sets(
        n, membership, time, event, event_type_size,
        event_time[:event_time_size],
    )

    N = tables.parent_inclusive_at_risk.astype(np.float64)
    n_left = tables.left_inclusive_at_risk.astype(np.float64)
    D = tables.parent_event_cr.astype(np.float64)
    d_left = tables.left_event_cr.astype(np.float64)

    # The floor is on the ordinary risk set, shared by all causes.
    valid = tables.risk.parent_at_risk >= 2

    with np.errstate(divide='ignore', invalid='ignore'):
        p = n_left / N
        numerator = np.sum(d_left - D * p)

        terms = D * p * (1.0 - p) * (N - D) / (N - 1.0)
        denominator = np.sum(terms[:, valid])

    return standardize_logrank(float(numerator), float(denominator))
