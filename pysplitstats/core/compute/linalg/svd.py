"""
Singular values through LAPACK dgesvd.

Only singular values are requested (no U or Vᵗ). A positive status code
means the bidiagonal QR iteration left ``info`` superdiagonals unconverged;
the values in ``s`` are then only estimates and the caller decides how to
proceed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.linalg import lapack

from pysplitstats.core.compute.linalg.lapack import (
    as_column_major,
    check_info,
    query_lwork,
)


@dataclass(frozen=True)
class SVDResult:
    """
    Singular values of an (m x n) matrix.

    Attributes:
        s: (min(m, n),) singular values in descending order
        info: dgesvd status code (0 = converged)
    """
    s: NDArray[np.floating[Any]]
    info: int

    @property
    def converged(self) -> bool:
        return self.info == 0

    @property
    def leading(self) -> float:
        """Largest singular value (0.0 for an empty matrix)."""
        if self.s.size == 0:
            return 0.0
        return float(self.s[0])


def singular_values(a: ArrayLike) -> SVDResult:
    """
    Compute the singular values of a matrix (dgesvd, jobu=jobvt='N').

    Args:
        a: (m x n) matrix

    Returns:
        SVDResult
    """
    staged = as_column_major(a)
    m, n = staged.shape
    lwork = query_lwork(
        "dgesvd", lapack.dgesvd_lwork, m, n,
        compute_uv=0, full_matrices=0,
    )
    _, s, _, info = lapack.dgesvd(
        staged,
        compute_uv=0,
        full_matrices=0,
        lwork=lwork,
        overwrite_a=1,
    )
    return SVDResult(s=s, info=check_info("dgesvd", info))
