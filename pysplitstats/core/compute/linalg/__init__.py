"""
Linear algebra kernels for pysplitstats.

Thin wrappers over LAPACK/BLAS (via scipy.linalg.lapack and
scipy.linalg.blas) used by the canonical-correlation split statistic.

All functions follow these conventions:
    - Inputs are staged column-major at the wrapper boundary
    - Workspace is queried before every factorization call
    - Each operation returns a structured result carrying the status code
    - Illegal-argument status codes are raised immediately

Submodules:
    lapack: workspace queries, status checks, layout staging
    qr: QR factorization and orthogonal factor reconstruction
    product: matrix product
    svd: singular values
"""

from pysplitstats.core.compute.linalg.lapack import (
    as_column_major,
    check_info,
    query_lwork,
)
from pysplitstats.core.compute.linalg.qr import (
    OrthogonalFactor,
    QRFactorization,
    form_orthogonal_factor,
    qr_factorize,
)
from pysplitstats.core.compute.linalg.product import multiply
from pysplitstats.core.compute.linalg.svd import SVDResult, singular_values

__all__ = [
    # Calling conventions
    "as_column_major",
    "check_info",
    "query_lwork",
    # QR decomposition
    "QRFactorization",
    "OrthogonalFactor",
    "qr_factorize",
    "form_orthogonal_factor",
    # Product
    "multiply",
    # SVD
    "SVDResult",
    "singular_values",
]
