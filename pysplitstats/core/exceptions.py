"""
Exception hierarchy for pysplitstats.

All exceptions inherit from PySplitStatsError to allow catching any
library-specific error.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PySplitStatsError(Exception):
    """Base exception for all pysplitstats errors."""
    pass


class ValidationError(PySplitStatsError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class UnknownSplitRuleError(PySplitStatsError, KeyError):
    """
    No split statistic is registered for a (family, slot) pair.

    Attributes:
        family: Requested statistic family
        slot: Requested slot index
    """

    def __init__(self, message: str, family: str, slot: int):
        super().__init__(message)
        self.family = family
        self.slot = slot

    def __str__(self) -> str:
        return str(self.args[0])


class BufferAllocationError(PySplitStatsError, MemoryError):
    """
    A scratch buffer could not be allocated.

    Attributes:
        shape: Requested buffer shape
        dtype: Requested element type name
    """

    def __init__(self, message: str, shape: tuple[int, ...], dtype: str):
        super().__init__(message)
        self.shape = shape
        self.dtype = dtype


class NumericalError(PySplitStatsError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class LapackError(NumericalError):
    """
    A LAPACK routine rejected its arguments.

    Raised when a routine reports a negative status code, meaning the
    argument at position ``-info`` had an illegal value.

    Attributes:
        routine: LAPACK routine name (e.g. 'dgeqrf')
        info: Status code returned by the routine
    """

    def __init__(self, message: str, routine: str, info: int):
        super().__init__(message)
        self.routine = routine
        self.info = info


class ConvergenceError(PySplitStatsError):
    """
    Iterative decomposition failed to converge.

    Raised when a decomposition reports a positive status code and the
    caller asked for failures to be raised instead of degraded.

    Attributes:
        routine: LAPACK routine name (e.g. 'dgesvd')
        info: Status code returned by the routine (number of
            superdiagonals that did not converge for dgesvd)
    """

    def __init__(self, message: str, routine: str, info: int):
        super().__init__(message)
        self.routine = routine
        self.info = info
