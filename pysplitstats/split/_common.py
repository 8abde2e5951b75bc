"""
Shared types for split statistics.

Membership labels, statistic family tags, the fixed calling contract every
statistic implements, and the frozen payloads that carry intermediate
tables and results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import numpy as np
from numpy.typing import NDArray


LEFT = 1
RIGHT = 0

FAMILY_CLASSIFICATION = "classification"
FAMILY_REGRESSION = "regression"
FAMILY_SURVIVAL = "survival"
FAMILY_COMPETING_RISK = "competing_risk"

VALID_FAMILIES = (
    FAMILY_CLASSIFICATION,
    FAMILY_REGRESSION,
    FAMILY_SURVIVAL,
    FAMILY_COMPETING_RISK,
)


class SplitStatistic(Protocol):
    """
    Fixed calling contract shared by every split statistic.

    A statistic reads only the arguments its family needs and ignores the
    rest; callers pass None or 0 for what their data do not have.

    Parameters
    ----------
    n : int
        Observations in the node.
    membership : NDArray
        (n,) LEFT / RIGHT labels.
    time, event : NDArray or None
        (n,) survival times (ascending) and cause labels (0 = censored).
    event_type_size : int
        Number of distinct causes (1 for ordinary survival).
    event_time_size : int
        Number of distinct event times.
    event_time : NDArray or None
        (event_time_size,) strictly increasing event times.
    response : NDArray or None
        (n,) response values or class labels.
    mean, variance : float
        Node mean and variance of ``response``.
    max_level : int
        Number of class levels for a factor response.
    feature : NDArray or None
        (feature_count, n) feature matrix.
    feature_count : int
        Rows of ``feature``.
    """

    def __call__(
        self,
        n: int,
        membership: NDArray,
        time: NDArray | None,
        event: NDArray | None,
        event_type_size: int,
        event_time_size: int,
        event_time: NDArray | None,
        response: NDArray | None,
        mean: float,
        variance: float,
        max_level: int,
        feature: NDArray | None,
        feature_count: int,
    ) -> float:
        ...


@dataclass(frozen=True)
class RiskSetTables:
    """Per-event-time counts for the parent node and its LEFT daughter.

    RIGHT counts are parent minus LEFT.
    """

    event_time: NDArray          # (m,) distinct event times
    parent_at_risk: NDArray      # (m,) at risk at or after each time
    left_at_risk: NDArray        # (m,)
    parent_event: NDArray        # (m,) events of any cause at each time
    left_event: NDArray          # (m,)

    @property
    def right_at_risk(self) -> NDArray:
        return self.parent_at_risk - self.left_at_risk

    @property
    def right_event(self) -> NDArray:
        return self.parent_event - self.left_event


@dataclass(frozen=True)
class CompetingRiskTables:
    """Risk-set tables broken down by cause.

    Cause-indexed arrays have shape (event_type_size, m); row j holds
    cause j + 1.
    """

    risk: RiskSetTables
    parent_event_cr: NDArray             # (J, m) cause-specific events
    left_event_cr: NDArray               # (J, m)
    parent_inclusive_at_risk: NDArray    # (J, m) at risk for cause j
    left_inclusive_at_risk: NDArray      # (J, m)

    @property
    def event_type_size(self) -> int:
        return self.parent_event_cr.shape[0]


@dataclass(frozen=True)
class CanonicalCorrelation:
    """Leading canonical correlation of one daughter's X and Y blocks."""

    value: float
    info: int                    # dgesvd status code
    converged: bool
    rank_x: int                  # columns of Qx
    rank_y: int                  # columns of Qy


@dataclass(frozen=True)
class SplitParams:
    """Payload for one evaluated candidate split."""

    statistic: float
    family: str
    slot: int
    rule_name: str
    n_left: int
    n_right: int
    n_observations: int
    n_responses: int
    extras: dict[str, Any] | None = None


def left_mask(membership: NDArray) -> NDArray[np.bool_]:
    """Boolean mask of LEFT members; every other label is RIGHT."""
    return np.asarray(membership) == LEFT
