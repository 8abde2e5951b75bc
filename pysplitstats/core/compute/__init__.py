"""
Shared compute infrastructure for pysplitstats.

This module contains shared NUMERIC infrastructure, not split statistics.
Those live in pysplitstats.split.

Submodules:
    timing: Execution timing utilities
    tolerances: Numeric thresholds and comparison tiers
    linalg: LAPACK/BLAS wrappers (QR, product, SVD)
"""

from pysplitstats.core.compute.timing import Timer
from pysplitstats.core.compute.tolerances import LOGRANK_ZERO_GUARD

__all__ = [
    # Timing
    "Timer",
    # Thresholds
    "LOGRANK_ZERO_GUARD",
]
