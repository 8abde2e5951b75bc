"""
General matrix product through BLAS dgemm.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.linalg import blas

from pysplitstats.core.compute.linalg.lapack import as_column_major
from pysplitstats.core.exceptions import DimensionError


def multiply(
    a: ArrayLike,
    b: ArrayLike,
    trans_a: bool = False,
    trans_b: bool = False,
) -> NDArray[np.floating[Any]]:
    """
    Compute op(A) @ op(B) with op = transpose when requested.

    Args:
        a: Left operand
        b: Right operand
        trans_a: Use Aᵗ in place of A
        trans_b: Use Bᵗ in place of B

    Returns:
        Fortran-ordered product

    Raises:
        DimensionError: If the inner dimensions disagree
    """
    a_cm = as_column_major(a)
    b_cm = as_column_major(b)
    inner_a = a_cm.shape[0] if trans_a else a_cm.shape[1]
    inner_b = b_cm.shape[1] if trans_b else b_cm.shape[0]
    if inner_a != inner_b:
        raise DimensionError(
            f"multiply: inner dimensions differ ({inner_a} vs {inner_b}) "
            f"for shapes {a_cm.shape} and {b_cm.shape}"
        )
    return blas.dgemm(
        1.0, a_cm, b_cm,
        trans_a=int(trans_a),
        trans_b=int(trans_b),
    )
