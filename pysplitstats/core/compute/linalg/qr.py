"""
QR factorization through LAPACK dgeqrf/dorgqr.

The canonical-correlation statistic needs an orthonormal basis for the
column space of each variable block. dgeqrf leaves R in the upper triangle
and the Householder reflectors below it; dorgqr turns the reflectors into
the explicit orthogonal factor Q.
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
class QRFactorization:
    """
    Compact QR factorization of an (m x n) block.

    Attributes:
        qr: (m x n) Fortran-ordered array; R on and above the diagonal,
            Householder vectors below it
        tau: (k,) reflector scalars, k = min(m, n)
        info: dgeqrf status code
    """
    qr: NDArray[np.floating[Any]]
    tau: NDArray[np.floating[Any]]
    info: int

    @property
    def rank_bound(self) -> int:
        """Number of reflectors, min(m, n)."""
        return len(self.tau)

    @property
    def R(self) -> NDArray[np.floating[Any]]:
        """Upper triangular factor (k x n)."""
        k = self.rank_bound
        return np.triu(self.qr[:k, :])


@dataclass(frozen=True)
class OrthogonalFactor:
    """
    Explicit orthogonal factor from a compact QR factorization.

    Attributes:
        q: (m x k) Fortran-ordered array with orthonormal columns
        info: dorgqr status code
    """
    q: NDArray[np.floating[Any]]
    info: int


def qr_factorize(a: ArrayLike) -> QRFactorization:
    """
    Factorize a block as A = QR (dgeqrf).

    Args:
        a: (m x n) block in application layout

    Returns:
        QRFactorization
    """
    staged = as_column_major(a)
    lwork = query_lwork("dgeqrf", lapack.dgeqrf, staged, lwork=-1)
    qr, tau, _, info = lapack.dgeqrf(staged, lwork=lwork, overwrite_a=1)
    return QRFactorization(qr=qr, tau=tau, info=check_info("dgeqrf", info))


def form_orthogonal_factor(factorization: QRFactorization) -> OrthogonalFactor:
    """
    Reconstruct the leading k columns of Q (dorgqr).

    Args:
        factorization: Output of qr_factorize on an (m x n) block

    Returns:
        OrthogonalFactor with q of shape (m, min(m, n))
    """
    k = factorization.rank_bound
    # dorgqr overwrites its input; a column slice of qr can alias it.
    reflectors = np.array(factorization.qr[:, :k], order="F", copy=True)
    tau = factorization.tau[:k]
    lwork = query_lwork("dorgqr", lapack.dorgqr, reflectors, tau, lwork=-1)
    q, _, info = lapack.dorgqr(reflectors, tau, lwork=lwork, overwrite_a=1)
    return OrthogonalFactor(q=q, info=check_info("dorgqr", info))
