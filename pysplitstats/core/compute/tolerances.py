"""
Numeric thresholds shared by the split statistics and the test suite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Log-rank numerators and denominators at or below this are treated as zero.
LOGRANK_ZERO_GUARD = 1.0e-9

# Exact count arithmetic (regression, classification, log-rank).
EXACT_FP64 = ToleranceTier(
    rtol=1e-12,
    atol=1e-12,
    name='exact_fp64',
    description='Closed-form statistics on integer counts',
)

# Results passed through QR/SVD (canonical correlations).
DECOMPOSITION_FP64 = ToleranceTier(
    rtol=1e-8,
    atol=1e-10,
    name='decomposition_fp64',
    description='Statistics routed through LAPACK factorizations',
)
