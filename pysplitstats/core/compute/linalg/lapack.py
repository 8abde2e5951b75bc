"""
Calling conventions shared by the LAPACK/BLAS wrappers.

Three rules hold for every routine reached through this package:

    1. Workspace is sized by a probe call made immediately before the real
       call (``lwork=-1``, or the routine's ``*_lwork`` companion). Sizes
       are never cached between invocations.
    2. Negative status codes mean an illegal argument and are raised as
       LapackError. Positive codes are routine-specific and are returned
       to the caller.
    3. Application code stores observations row-major (n x p). Routines
       receive Fortran-ordered float64 copies made by as_column_major().
"""

from __future__ import annotations

from typing import Any, Callable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pysplitstats.core.exceptions import DimensionError, LapackError


def as_column_major(block: ArrayLike) -> NDArray[np.float64]:
    """
    Stage a 2-D block for a LAPACK routine.

    Args:
        block: (rows, cols) matrix in application layout

    Returns:
        Fortran-contiguous float64 copy of ``block``

    Raises:
        DimensionError: If ``block`` is not 2-D
    """
    staged = np.array(block, dtype=np.float64, order='F', copy=True)
    if staged.ndim != 2:
        raise DimensionError(
            f"LAPACK blocks must be 2D, got {staged.ndim}D with shape {staged.shape}"
        )
    return staged


def check_info(routine: str, info: int) -> int:
    """
    Raise on an illegal-argument status code.

    Args:
        routine: Routine name for the error message
        info: Status code reported by the routine

    Returns:
        ``info`` unchanged when it is non-negative

    Raises:
        LapackError: If ``info < 0``
    """
    info = int(info)
    if info < 0:
        raise LapackError(
            f"{routine}: argument {-info} had an illegal value",
            routine=routine,
            info=info,
        )
    return info


def query_lwork(
    routine: str,
    probe: Callable[..., Any],
    *args: Any,
    **kwargs: Any,
) -> int:
    """
    Ask a routine for its optimal workspace length.

    ``probe`` is either the routine itself called with ``lwork=-1`` or its
    ``*_lwork`` companion. Both return the workspace as the second-to-last
    output and the status code last.

    Args:
        routine: Routine name for error messages
        probe: Callable performing the workspace query
        *args, **kwargs: Forwarded to ``probe``

    Returns:
        Optimal ``lwork`` (at least 1)

    Raises:
        LapackError: If the query itself reports an illegal argument
    """
    out = probe(*args, **kwargs)
    work, info = out[-2], out[-1]
    check_info(routine, info)
    optimal = np.asarray(work).ravel()[0].real
    return max(1, int(optimal))
