"""
Scratch buffers for split statistic accumulation.

Every statistic sizes its count tables from the node (event times, causes,
class levels, daughter sizes). These helpers allocate them zero-filled and
exactly sized; memory is released when the last reference goes away, so
early returns and error paths never leak.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pysplitstats.core.exceptions import BufferAllocationError, ValidationError


def _allocate(shape: tuple[int, ...], dtype: type[np.generic]) -> NDArray:
    for size in shape:
        if size < 0:
            raise ValidationError(
                f"buffer dimensions must be non-negative, got {shape}"
            )
    try:
        return np.zeros(shape, dtype=dtype)
    except MemoryError as e:
        raise BufferAllocationError(
            f"could not allocate {np.dtype(dtype).name} buffer of shape {shape}",
            shape=shape,
            dtype=np.dtype(dtype).name,
        ) from e


def count_vector(size: int) -> NDArray[np.int64]:
    """Zero-filled integer vector of length ``size``."""
    return _allocate((int(size),), np.int64)


def count_matrix(rows: int, cols: int) -> NDArray[np.int64]:
    """Zero-filled integer matrix of shape ``(rows, cols)``."""
    return _allocate((int(rows), int(cols)), np.int64)


def real_vector(size: int) -> NDArray[np.float64]:
    """Zero-filled float64 vector of length ``size``."""
    return _allocate((int(size),), np.float64)
