"""
Core infrastructure for pysplitstats.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    buffers: Zero-filled scratch buffers
    compute: Timing, thresholds, linear algebra wrappers
"""

from pysplitstats.core.result import Result
from pysplitstats.core.exceptions import (
    PySplitStatsError,
    ValidationError,
    DimensionError,
    UnknownSplitRuleError,
    BufferAllocationError,
    NumericalError,
    LapackError,
    ConvergenceError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PySplitStatsError",
    "ValidationError",
    "DimensionError",
    "UnknownSplitRuleError",
    "BufferAllocationError",
    "NumericalError",
    "LapackError",
    "ConvergenceError",
]
