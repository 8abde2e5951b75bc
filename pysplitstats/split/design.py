"""
SplitDesign: immutable container for one node and one candidate split.

Validates inputs at construction time and derives the convenience values a
tree grower would hand to a split statistic (mean, variance, class count,
event-time grid, cause count). Survival observations are reordered by time
so the risk-set sweep can rely on ascending order. Downstream statistics
trust clean data and never re-validate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pysplitstats.core.exceptions import DimensionError, ValidationError
from pysplitstats.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_min_samples,
    check_non_negative_integers,
    check_positive_integers,
)
from pysplitstats.split._common import LEFT, RIGHT


def _factor_levels(values: NDArray) -> int:
    """Largest label when every value is a whole number >= 1, else 0."""
    if values.size and np.all(values == np.floor(values)) and values.min() >= 1:
        return int(values.max())
    return 0


def _coerce_membership(membership) -> NDArray[np.int8]:
    raw = np.asarray(membership)
    if raw.dtype == np.bool_:
        return np.where(raw, LEFT, RIGHT).astype(np.int8)

    labels = check_array(raw, "membership")
    check_1d(labels, "membership")
    bad = ~np.isin(labels, (LEFT, RIGHT))
    if np.any(bad):
        raise ValidationError(
            f"membership: labels must be LEFT ({LEFT}) or RIGHT ({RIGHT}), "
            f"got {np.unique(labels[bad])[:5].tolist()}"
        )
    return labels.astype(np.int8)


@dataclass(frozen=True)
class SplitDesign:
    """Immutable node data for evaluating a split statistic.

    Parameters
    ----------
    membership : NDArray
        (n,) LEFT / RIGHT labels.
    time, event : NDArray or None
        (n,) survival time and cause (0 = censored), sorted by time.
    response : NDArray or None
        (n,) response values, or (n, q) for multivariate responses.
    feature : NDArray or None
        (feature_count, n) feature matrix.
    mean, variance : float
        Mean and population variance of a univariate response (0.0 when
        absent).
    max_level : int
        Largest class label of a factor response (0 when absent).
    event_time : NDArray
        Sorted distinct times at which an event (any cause) occurred.
    event_type_size : int
        Number of causes (at least 1 for survival data, 0 otherwise).
    order : NDArray
        Permutation applied to the caller's observations.
    """

    membership: NDArray
    time: NDArray | None
    event: NDArray | None
    response: NDArray | None
    feature: NDArray | None
    mean: float
    variance: float
    max_level: int
    event_time: NDArray
    event_type_size: int
    order: NDArray

    @classmethod
    def for_split(
        cls,
        membership,
        *,
        time=None,
        event=None,
        response=None,
        feature=None,
        max_level: int | None = None,
        event_type_size: int | None = None,
    ) -> SplitDesign:
        """Create and validate a split design.

        Parameters
        ----------
        membership : array-like
            LEFT / RIGHT labels, or booleans with True meaning LEFT.
        time, event : array-like or None
            Survival data; both or neither.
        response : array-like or None
            Response vector or (n, q) matrix.
        feature : array-like or None
            (feature_count, n) feature matrix.
        max_level : int or None
            Number of class levels; defaults to the largest label seen.
        event_type_size : int or None
            Number of causes; defaults to the largest cause seen.

        Returns
        -------
        SplitDesign

        Raises
        ------
        ValidationError
            If inputs are invalid.
        """
        labels = _coerce_membership(membership)
        check_min_samples(labels, 1, "membership")
        n = len(labels)
        order = np.arange(n)

        time_arr = event_arr = None
        event_time = np.array([], dtype=np.float64)
        n_causes = 0

        if (time is None) != (event is None):
            raise ValidationError("time and event must be supplied together")

        if time is not None:
            time_arr = check_array(time, "time").ravel()
            event_arr = check_array(event, "event").ravel()
            check_consistent_length(
                labels, time_arr, event_arr,
                names=("membership", "time", "event"),
            )
            check_finite(time_arr, "time")
            check_finite(event_arr, "event")
            if np.any(time_arr < 0):
                raise ValidationError("time must be non-negative")
            check_non_negative_integers(event_arr, "event")

            order = np.argsort(time_arr, kind="stable")
            time_arr = time_arr[order]
            event_arr = event_arr[order]
            labels = labels[order]

            event_time = np.unique(time_arr[event_arr > 0])
            observed = int(event_arr.max()) if n else 0
            if event_type_size is None:
                n_causes = max(1, observed)
            else:
                n_causes = int(event_type_size)
                if n_causes < 1:
                    raise ValidationError(
                        f"event_type_size must be at least 1, got {event_type_size}"
                    )
                if observed > n_causes:
                    raise ValidationError(
                        f"event: cause {observed} exceeds "
                        f"event_type_size={n_causes}"
                    )

        response_arr = None
        mean = variance = 0.0
        levels = 0
        if response is not None:
            response_arr = check_array(response, "response")
            if response_arr.ndim not in (1, 2):
                raise DimensionError(
                    f"response: expected 1D or 2D array, got {response_arr.ndim}D"
                )
            check_consistent_length(
                labels, response_arr, names=("membership", "response"),
            )
            check_finite(response_arr, "response")
            response_arr = response_arr[order]
            if response_arr.ndim == 1:
                mean = float(np.mean(response_arr))
                variance = float(np.var(response_arr))

        if max_level is not None:
            levels = int(max_level)
            if levels < 1:
                raise ValidationError(f"max_level must be at least 1, got {max_level}")
        elif response_arr is not None and response_arr.ndim == 1:
            levels = _factor_levels(response_arr)

        feature_arr = None
        if feature is not None:
            feature_arr = check_array(feature, "feature")
            check_2d(feature_arr, "feature")
            if feature_arr.shape[1] != n:
                raise DimensionError(
                    f"feature must have {n} columns (one per observation), "
                    f"got {feature_arr.shape[1]}"
                )
            check_finite(feature_arr, "feature")
            feature_arr = feature_arr[:, order]

        return cls(
            membership=labels,
            time=time_arr,
            event=event_arr,
            response=response_arr,
            feature=feature_arr,
            mean=mean,
            variance=variance,
            max_level=levels,
            event_time=event_time,
            event_type_size=n_causes,
            order=order,
        )

    @property
    def n(self) -> int:
        """Number of observations."""
        return len(self.membership)

    @property
    def n_left(self) -> int:
        return int(np.count_nonzero(self.membership == LEFT))

    @property
    def n_right(self) -> int:
        return self.n - self.n_left

    @property
    def feature_count(self) -> int:
        return 0 if self.feature is None else self.feature.shape[0]

    @property
    def n_responses(self) -> int:
        if self.response is None:
            return 0
        return 1 if self.response.ndim == 1 else self.response.shape[1]

    def _levels_for(self, values: NDArray) -> int:
        if self.max_level > 0:
            return self.max_level
        return _factor_levels(values)

    def check_factor_response(self, column: int | None = None) -> None:
        """Verify a response (or one column of it) holds labels in [1, max_level].

        Raises
        ------
        ValidationError
            If labels are missing, non-integer, or exceed max_level.
        """
        if self.response is None:
            raise ValidationError("response is required for classification")
        values = self.response if column is None else self.response[:, column]
        name = "response" if column is None else f"response[:, {column}]"
        check_positive_integers(values, name)
        levels = self._levels_for(values)
        if levels < 1:
            raise ValidationError(f"{name}: max_level could not be determined")
        top = int(values.max())
        if top > levels:
            raise ValidationError(
                f"{name}: label {top} exceeds max_level={levels}"
            )

    def contract_arguments(self, column: int | None = None) -> dict[str, Any]:
        """Keyword arguments for the fixed split statistic contract.

        For a multivariate response, ``column`` selects one response and
        mean / variance are computed for that column.
        """
        response = self.response
        mean, variance = self.mean, self.variance
        levels = self.max_level
        if response is not None and response.ndim == 2:
            if column is None:
                raise ValidationError(
                    "column is required for a multivariate response"
                )
            response = response[:, column]
            mean = float(np.mean(response))
            variance = float(np.var(response))
            levels = self._levels_for(response)

        return dict(
            n=self.n,
            membership=self.membership,
            time=self.time,
            event=self.event,
            event_type_size=self.event_type_size,
            event_time_size=len(self.event_time),
            event_time=self.event_time,
            response=response,
            mean=mean,
            variance=variance,
            max_level=levels,
            feature=self.feature,
            feature_count=self.feature_count,
        )
