"""
Public API for split statistics.

    split_statistic(membership, family=..., ...) → SplitSolution
    multivariate_split_statistic(membership, responses, ...) → SplitSolution

Each function validates inputs, creates a SplitDesign, looks up the
registered rule, evaluates it, and wraps the Result in a SplitSolution.
"""

from __future__ import annotations

import warnings
from typing import Any, Literal, Sequence

import numpy as np

from pysplitstats.core.compute.timing import Timer
from pysplitstats.core.exceptions import ValidationError
from pysplitstats.core.result import Result
from pysplitstats.split._common import (
    FAMILY_CLASSIFICATION,
    FAMILY_REGRESSION,
    VALID_FAMILIES,
    SplitParams,
)
from pysplitstats.split.design import SplitDesign
from pysplitstats.split.registry import SplitRule, get_split_rule
from pysplitstats.split.solution import SplitSolution


def _check_requirements(
    rule: SplitRule,
    design: SplitDesign,
    column: int | None = None,
) -> None:
    for need in rule.requires:
        if need == "response" and design.response is None:
            raise ValidationError(f"{rule.name}: response is required")
        if need == "factor":
            design.check_factor_response(column)
        if need == "survival" and design.time is None:
            raise ValidationError(f"{rule.name}: time and event are required")
        if need == "feature" and design.feature is None:
            raise ValidationError(f"{rule.name}: feature is required")


def _evaluate(
    rule: SplitRule,
    design: SplitDesign,
    options: dict[str, Any],
    column: int | None = None,
) -> float:
    kwargs = design.contract_arguments(column)
    kwargs.update({k: v for k, v in options.items() if k in rule.options})
    return float(rule.function(**kwargs))


def _empty_daughter_warnings(design: SplitDesign, family: str) -> list[str]:
    if family not in (FAMILY_CLASSIFICATION, FAMILY_REGRESSION):
        return []
    if design.n_left == 0 or design.n_right == 0:
        return [
            f"empty daughter (left={design.n_left}, right={design.n_right}); "
            f"statistic is undefined"
        ]
    return []


def _reissue(caught: list[warnings.WarningMessage]) -> list[str]:
    messages = []
    for w in caught:
        messages.append(str(w.message))
        warnings.warn(str(w.message), w.category, stacklevel=3)
    return messages


def split_statistic(
    membership,
    *,
    family: str,
    slot: int = 1,
    time=None,
    event=None,
    response=None,
    feature=None,
    max_level: int | None = None,
    event_type_size: int | None = None,
    on_nonconvergence: Literal["fallback", "raise"] = "fallback",
) -> SplitSolution:
    """Evaluate one candidate split with a registered statistic.

    Parameters
    ----------
    membership : array-like
        LEFT (1) / RIGHT (0) labels, or booleans with True meaning LEFT.
    family : str
        "classification", "regression", "survival" or "competing_risk".
    slot : int
        Registry slot; 1 is the family's default rule. Slot 2 of the
        regression family is the canonical-correlation statistic.
    time, event : array-like or None
        Survival time and cause (0 = censored). Need not be sorted.
    response : array-like or None
        Response vector (class labels for classification).
    feature : array-like or None
        (feature_count, n) feature matrix, see pack_cca_features().
    max_level : int or None
        Number of class levels; defaults to the largest label.
    event_type_size : int or None
        Number of causes; defaults to the largest cause.
    on_nonconvergence : str
        For rules that run an SVD: "fallback" (default) or "raise".

    Returns
    -------
    SplitSolution
    """
    if family not in VALID_FAMILIES:
        raise ValidationError(
            f"family must be one of {VALID_FAMILIES}, got '{family}'"
        )

    rule = get_split_rule(family, slot)

    timer = Timer()
    timer.start()

    with timer.section('design'):
        design = SplitDesign.for_split(
            membership,
            time=time,
            event=event,
            response=response,
            feature=feature,
            max_level=max_level,
            event_type_size=event_type_size,
        )
        if design.n_responses > 1:
            raise ValidationError(
                "response has several columns; use multivariate_split_statistic()"
            )
        _check_requirements(rule, design)

    with timer.section('statistic'):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            value = _evaluate(
                rule, design, {"on_nonconvergence": on_nonconvergence},
            )

    timer.stop()

    warnings_list = _empty_daughter_warnings(design, family)
    warnings_list.extend(_reissue(caught))

    params = SplitParams(
        statistic=value,
        family=family,
        slot=slot,
        rule_name=rule.name,
        n_left=design.n_left,
        n_right=design.n_right,
        n_observations=design.n,
        n_responses=design.n_responses,
    )

    result = Result(
        params=params,
        info={
            "family": family,
            "slot": slot,
            "event_time_size": len(design.event_time),
            "event_type_size": design.event_type_size,
            "max_level": design.max_level,
        },
        timing=timer.result(),
        backend_name=rule.name,
        warnings=tuple(warnings_list),
    )

    return SplitSolution(_result=result)


def multivariate_split_statistic(
    membership,
    responses,
    *,
    factor_columns: Sequence[int] = (),
    slot: int = 1,
    feature=None,
    max_level: int | None = None,
    on_nonconvergence: Literal["fallback", "raise"] = "fallback",
) -> SplitSolution:
    """Sum of per-response statistics for a multivariate response.

    Factor columns are scored with the classification rule, all other
    columns with the regression rule, both taken from the same slot.

    Parameters
    ----------
    membership : array-like
        LEFT / RIGHT labels.
    responses : array-like
        (n, q) response matrix, or (n,) for a single response.
    factor_columns : sequence of int
        Indices of columns holding class labels.
    slot : int
        Registry slot shared by the classification and regression rules.
    feature : array-like or None
        Feature matrix forwarded to every rule.
    max_level : int or None
        Class level count for every factor column; defaults per column to
        the largest label.
    on_nonconvergence : str
        For rules that run an SVD: "fallback" (default) or "raise".

    Returns
    -------
    SplitSolution
        ``extras["per_response"]`` lists (rule name, statistic) per column.
    """
    responses = np.asarray(responses)
    if responses.ndim == 1:
        responses = responses.reshape(-1, 1)

    timer = Timer()
    timer.start()

    with timer.section('design'):
        design = SplitDesign.for_split(
            membership,
            response=responses,
            feature=feature,
            max_level=max_level,
        )

        q = design.n_responses
        factors = set(int(j) for j in factor_columns)
        bad = sorted(j for j in factors if j < 0 or j >= q)
        if bad:
            raise ValidationError(
                f"factor_columns out of range for {q} responses: {bad}"
            )

        rules = []
        for j in range(q):
            family = FAMILY_CLASSIFICATION if j in factors else FAMILY_REGRESSION
            rule = get_split_rule(family, slot)
            _check_requirements(rule, design, column=j)
            rules.append(rule)

    per_response = []
    with timer.section('statistic'):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            for j, rule in enumerate(rules):
                value = _evaluate(
                    rule, design, {"on_nonconvergence": on_nonconvergence},
                    column=j,
                )
                per_response.append((rule.name, value))

    timer.stop()

    warnings_list = _empty_daughter_warnings(design, FAMILY_REGRESSION)
    warnings_list.extend(_reissue(caught))

    family = (
        FAMILY_CLASSIFICATION if len(factors) == q else FAMILY_REGRESSION
    )
    rule_names = sorted(set(name for name, _ in per_response))

    params = SplitParams(
        statistic=float(sum(value for _, value in per_response)),
        family=family,
        slot=slot,
        rule_name="+".join(rule_names),
        n_left=design.n_left,
        n_right=design.n_right,
        n_observations=design.n,
        n_responses=q,
        extras={"per_response": per_response},
    )

    result = Result(
        params=params,
        info={
            "family": family,
            "slot": slot,
            "factor_columns": tuple(sorted(factors)),
        },
        timing=timer.result(),
        backend_name="+".join(rule_names),
        warnings=tuple(warnings_list),
    )

    return SplitSolution(_result=result)
