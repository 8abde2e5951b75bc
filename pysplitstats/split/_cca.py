"""
Canonical-correlation divergence split statistic.

The feature matrix carries two variable blocks for every observation: X in
rows 0..dim_x-1 and Y in the following dim_y rows, with dim_x stored in
the first entry of the last row. For each daughter the leading canonical
correlation between X and Y is the largest singular value of Qxᵗ Qy, where
Qx and Qy are orthonormal bases of the two blocks' column spaces. The
split is scored as

    sqrt(n_L * n_R) * |rho_L - rho_R|

A daughter is scored only when it has more than dim_x + dim_y members;
otherwise, or when either block is empty, the statistic is 0.

When dgesvd does not converge (positive status code) the returned singular
values are estimates only. The default policy keeps the largest estimate as
a degraded canonical correlation and emits a RuntimeWarning; this is not a
correctness guarantee. Pass ``on_nonconvergence="raise"`` to fail instead.

References:
    Hotelling, H. (1936). Relations between two sets of variates.
        Biometrika, 28(3/4), 321-377.
    Björck, Å. & Golub, G. H. (1973). Numerical methods for computing
        angles between linear subspaces. Mathematics of Computation,
        27(123), 579-594.
    Alakuş, C., Larocque, D., Jacquemont, S., et al. (2021). Conditional
        canonical correlation estimation based on covariates with random
        forests. Bioinformatics, 37(17), 2714-2721.
"""

from __future__ import annotations

import warnings
from typing import Literal

import numpy as np
from numpy.typing import NDArray

from pysplitstats.core.compute.linalg import (
    form_orthogonal_factor,
    multiply,
    qr_factorize,
    singular_values,
)
from pysplitstats.core.exceptions import ConvergenceError, ValidationError
from pysplitstats.split._common import CanonicalCorrelation, left_mask


VALID_NONCONVERGENCE_POLICIES = ("fallback", "raise")


def pack_cca_features(x, y) -> NDArray:
    """Build a feature matrix from (n, px) and (n, py) blocks.

    Returns a (px + py + 1, n) matrix whose last row is filled with px.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if x.ndim == 1:
        x = x.reshape(-1, 1)
    if y.ndim == 1:
        y = y.reshape(-1, 1)
    if x.shape[0] != y.shape[0]:
        raise ValidationError(
            f"x and y must have the same number of rows: "
            f"got {x.shape[0]} and {y.shape[0]}"
        )
    dim_row = np.full((1, x.shape[0]), float(x.shape[1]))
    return np.vstack([x.T, y.T, dim_row])


def feature_block_dims(feature: NDArray, feature_count: int) -> tuple[int, int]:
    """(dim_x, dim_y) encoded in a feature matrix."""
    dim_x = int(feature[feature_count - 1, 0])
    dim_y = feature_count - dim_x - 1
    return dim_x, dim_y


def canonical_correlation(
    x: NDArray,
    y: NDArray,
    on_nonconvergence: Literal["fallback", "raise"] = "fallback",
) -> CanonicalCorrelation:
    """Leading canonical correlation between the columns of x and y.

    Parameters
    ----------
    x : NDArray
        (rows, dim_x) block, one observation per row.
    y : NDArray
        (rows, dim_y) block.
    on_nonconvergence : str
        "fallback" keeps the largest singular value estimate and warns;
        "raise" raises ConvergenceError.

    Returns
    -------
    CanonicalCorrelation
    """
    if on_nonconvergence not in VALID_NONCONVERGENCE_POLICIES:
        raise ValidationError(
            f"on_nonconvergence must be one of {VALID_NONCONVERGENCE_POLICIES}, "
            f"got '{on_nonconvergence}'"
        )

    qx = form_orthogonal_factor(qr_factorize(x)).q
    qy = form_orthogonal_factor(qr_factorize(y)).q

    cross = multiply(qx, qy, trans_a=True)
    svd = singular_values(cross)

    if svd.converged:
        value = svd.leading
    else:
        if on_nonconvergence == "raise":
            raise ConvergenceError(
                f"dgesvd: {svd.info} superdiagonals did not converge",
                routine="dgesvd",
                info=svd.info,
            )
        value = float(np.max(svd.s)) if svd.s.size else 0.0
        warnings.warn(
            f"dgesvd did not converge ({svd.info} superdiagonals); "
            f"using the largest singular value estimate {value:.6g} "
            f"as the canonical correlation",
            RuntimeWarning,
            stacklevel=2,
        )

    return CanonicalCorrelation(
        value=value,
        info=svd.info,
        converged=svd.converged,
        rank_x=qx.shape[1],
        rank_y=qy.shape[1],
    )


def cca_split_statistic(
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
    on_nonconvergence: Literal["fallback", "raise"] = "fallback",
) -> float:
    """Size-weighted absolute difference of daughter canonical correlations."""
    if feature is None or feature_count < 1:
        return 0.0

    dim_x, dim_y = feature_block_dims(feature, feature_count)
    if dim_x <= 0 or dim_y <= 0:
        return 0.0

    is_left = left_mask(membership[:n])
    left_size = int(np.count_nonzero(is_left))
    right_size = n - left_size

    floor = dim_x + dim_y
    if left_size <= floor or right_size <= floor:
        return 0.0

    columns = np.asarray(feature)[:, :n]
    x_block = columns[:dim_x].T
    y_block = columns[dim_x:dim_x + dim_y].T

    rho_left = canonical_correlation(
        x_block[is_left], y_block[is_left], on_nonconvergence,
    )
    rho_right = canonical_correlation(
        x_block[~is_left], y_block[~is_left], on_nonconvergence,
    )

    return float(
        np.sqrt(left_size * right_size) * abs(rho_left.value - rho_right.value)
    )
