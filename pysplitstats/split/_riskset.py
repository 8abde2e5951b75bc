"""
Risk-set accumulation for the log-rank family of split statistics.

Observations arrive sorted by time, ascending. One sweep from the last
observation and the last event time backwards credits each observation to
the latest event time it survives to, then a suffix sum over event times
turns those credits into "at risk at or after t_k" counts:

    parent_at_risk[k] >= parent_at_risk[k + 1]
    parent_at_risk[k] >= left_at_risk[k] >= 0

Cause-specific tables additionally record which cause each event belongs
to and, per cause j, an inclusive risk set that keeps subjects who failed
earlier from a different cause r != j:

    inclusive[j, k] = at_risk[k] + sum_{s < k} sum_{r != j} event_cr[r, s]
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pysplitstats.core.buffers import count_matrix, count_vector
from pysplitstats.split._common import (
    LEFT,
    CompetingRiskTables,
    RiskSetTables,
)


def _suffix_sum(counts: NDArray) -> NDArray:
    return np.cumsum(counts[..., ::-1], axis=-1)[..., ::-1]


def _sweep(
    n: int,
    membership: NDArray,
    time: NDArray,
    event: NDArray,
    event_time: NDArray,
    event_type_size: int | None,
) -> tuple[NDArray, ...]:
    m = len(event_time)

    parent_at_risk = count_vector(m)
    left_at_risk = count_vector(m)
    parent_event = count_vector(m)
    left_event = count_vector(m)
    if event_type_size is not None:
        parent_event_cr = count_matrix(event_type_size, m)
        left_event_cr = count_matrix(event_type_size, m)

    i = n - 1
    k = m - 1

    while i >= 0 and k >= 0:
        if event_time[k] <= time[i]:
            is_left = membership[i] == LEFT

            parent_at_risk[k] += 1
            if is_left:
                left_at_risk[k] += 1

            if event_time[k] == time[i] and event[i] > 0:
                parent_event[k] += 1
                if is_left:
                    left_event[k] += 1
                if event_type_size is not None:
                    cause = int(event[i]) - 1
                    parent_event_cr[cause, k] += 1
                    if is_left:
                        left_event_cr[cause, k] += 1

            i -= 1
        else:
            k -= 1

    tables = (
        _suffix_sum(parent_at_risk),
        _suffix_sum(left_at_risk),
        parent_event,
        left_event,
    )
    if event_type_size is None:
        return tables
    return tables + (parent_event_cr, left_event_cr)


def accumulate_risk_sets(
    n: int,
    membership: NDArray,
    time: NDArray,
    event: NDArray,
    event_time: NDArray,
) -> RiskSetTables:
    """Count parent and LEFT subjects at risk and failing at each event time.

    Parameters
    ----------
    n : int
        Number of observations.
    membership : NDArray
        (n,) LEFT / RIGHT labels.
    time : NDArray
        (n,) observed times, sorted ascending.
    event : NDArray
        (n,) event codes, 0 = censored, > 0 = event.
    event_time : NDArray
        (m,) distinct event times, strictly increasing.

    Returns
    -------
    RiskSetTables
    """
    event_time = np.asarray(event_time, dtype=np.float64)
    parent_at_risk, left_at_risk, parent_event, left_event = _sweep(
        n, membership, time, event, event_time, None,
    )
    return RiskSetTables(
        event_time=event_time,
        parent_at_risk=parent_at_risk,
        left_at_risk=left_at_risk,
        parent_event=parent_event,
        left_event=left_event,
    )


def _inclusive_at_risk(at_risk: NDArray, event_cr: NDArray) -> NDArray:
    # Events of each cause strictly before each time.
    earlier = np.cumsum(event_cr, axis=1) - event_cr
    earlier_any = earlier.sum(axis=0)
    return at_risk[np.newaxis, :] + (earlier_any[np.newaxis, :] - earlier)


def accumulate_competing_risk_sets(
    n: int,
    membership: NDArray,
    time: NDArray,
    event: NDArray,
    event_type_size: int,
    event_time: NDArray,
) -> CompetingRiskTables:
    """Cause-specific risk-set tables for the competing-risk log-rank test.

    Parameters
    ----------
    n, membership, time, event, event_time
        As for accumulate_risk_sets; ``event`` holds cause labels
        1..event_type_size.
    event_type_size : int
        Number of distinct causes.

    Returns
    -------
    CompetingRiskTables
    """
    event_time = np.asarray(event_time, dtype=np.float64)
    (
        parent_at_risk, left_at_risk, parent_event, left_event,
        parent_event_cr, left_event_cr,
    ) = _sweep(n, membership, time, event, event_time, int(event_type_size))

    risk = RiskSetTables(
        event_time=event_time,
        parent_at_risk=parent_at_risk,
        left_at_risk=left_at_risk,
        parent_event=parent_event,
        left_event=left_event,
    )
    return CompetingRiskTables(
        risk=risk,
        parent_event_cr=parent_event_cr,
        left_event_cr=left_event_cr,
        parent_inclusive_at_risk=_inclusive_at_risk(parent_at_risk, parent_event_cr),
        left_inclusive_at_risk=_inclusive_at_risk(left_at_risk, left_event_cr),
    )
