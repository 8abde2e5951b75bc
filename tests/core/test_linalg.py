"""
Tests for the LAPACK/BLAS wrappers.

Results are checked against numpy.linalg, which reaches the same LAPACK
routines through a different interface.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal
from scipy.linalg import lapack

from pysplitstats.core.compute.linalg import (
    as_column_major,
    check_info,
    form_orthogonal_factor,
    multiply,
    qr_factorize,
    query_lwork,
    singular_values,
)
from pysplitstats.core.compute.tolerances import DECOMPOSITION_FP64
from pysplitstats.core.exceptions import DimensionError, LapackError


TOL = DECOMPOSITION_FP64


# ═══════════════════════════════════════════════════════════════════════
# Calling conventions
# ═══════════════════════════════════════════════════════════════════════


class TestConventions:

    def test_as_column_major_is_fortran_copy(self):
        block = np.arange(6, dtype=np.int64).reshape(3, 2)
        staged = as_column_major(block)
        assert staged.flags.f_contiguous
        assert staged.dtype == np.float64
        staged[0, 0] = 99.0
        assert block[0, 0] == 0

    def test_as_column_major_rejects_vectors(self):
        with pytest.raises(DimensionError):
            as_column_major(np.zeros(4))

    def test_check_info_passes_non_negative(self):
        assert check_info("dgesvd", 0) == 0
        assert check_info("dgesvd", 2) == 2

    def test_check_info_raises_on_negative(self):
        with pytest.raises(LapackError) as excinfo:
            check_info("dorgqr", -5)
        assert excinfo.value.routine == "dorgqr"
        assert excinfo.value.info == -5
        assert "argument 5" in str(excinfo.value)

    def test_query_lwork_geqrf(self, rng):
        a = as_column_major(rng.standard_normal((20, 4)))
        lwork = query_lwork("dgeqrf", lapack.dgeqrf, a, lwork=-1)
        assert lwork >= 4

    def test_query_lwork_gesvd_companion(self):
        lwork = query_lwork(
            "dgesvd", lapack.dgesvd_lwork, 5, 3,
            compute_uv=0, full_matrices=0,
        )
        assert lwork >= 1

    def test_query_lwork_rejects_illegal_probe(self):
        def probe(*args, **kwargs):
            return np.zeros(1), -2

        with pytest.raises(LapackError):
            query_lwork("fake", probe)


# ═══════════════════════════════════════════════════════════════════════
# QR
# ═══════════════════════════════════════════════════════════════════════


class TestQR:

    def test_orthogonal_factor_spans_block(self, rng):
        a = rng.standard_normal((15, 3))
        factorization = qr_factorize(a)
        packed = factorization.qr.copy()
        q = form_orthogonal_factor(factorization).q

        assert factorization.info == 0
        assert factorization.rank_bound == 3
        assert_array_equal(factorization.qr, packed)
        assert q.shape == (15, 3)
        assert_allclose(q.T @ q, np.eye(3), rtol=TOL.rtol, atol=TOL.atol)
        # A = Q R
        assert_allclose(q @ factorization.R, a, rtol=TOL.rtol, atol=TOL.atol)

    def test_orthogonal_factor_leaves_factorization_intact(self, rng):
        for shape in [(15, 3), (6, 6), (4, 7)]:
            factorization = qr_factorize(rng.standard_normal(shape))
            packed = factorization.qr.copy()
            form_orthogonal_factor(factorization)
            assert_array_equal(factorization.qr, packed)

    def test_matches_numpy_up_to_signs(self, rng):
        a = rng.standard_normal((10, 4))
        q = form_orthogonal_factor(qr_factorize(a)).q
        q_ref, _ = np.linalg.qr(a)
        assert_allclose(np.abs(q), np.abs(q_ref), rtol=TOL.rtol, atol=TOL.atol)

    def test_input_not_modified(self, rng):
        a = rng.standard_normal((8, 2))
        before = a.copy()
        form_orthogonal_factor(qr_factorize(a))
        np.testing.assert_array_equal(a, before)

    def test_wide_block(self, rng):
        """More columns than rows: k = rows."""
        a = rng.standard_normal((3, 5))
        factorization = qr_factorize(a)
        q = form_orthogonal_factor(factorization).q
        assert factorization.rank_bound == 3
        assert q.shape == (3, 3)
        assert_allclose(q.T @ q, np.eye(3), rtol=TOL.rtol, atol=TOL.atol)


# ═══════════════════════════════════════════════════════════════════════
# Product and SVD
# ═══════════════════════════════════════════════════════════════════════


class TestProduct:

    def test_plain(self, rng):
        a = rng.standard_normal((4, 3))
        b = rng.standard_normal((3, 2))
        assert_allclose(multiply(a, b), a @ b, rtol=TOL.rtol, atol=TOL.atol)

    def test_transpose_left(self, rng):
        a = rng.standard_normal((6, 3))
        b = rng.standard_normal((6, 2))
        product = multiply(a, b, trans_a=True)
        assert product.shape == (3, 2)
        assert_allclose(product, a.T @ b, rtol=TOL.rtol, atol=TOL.atol)

    def test_transpose_right(self, rng):
        a = rng.standard_normal((2, 5))
        b = rng.standard_normal((3, 5))
        assert_allclose(
            multiply(a, b, trans_b=True), a @ b.T,
            rtol=TOL.rtol, atol=TOL.atol,
        )

    def test_inner_dimension_mismatch(self):
        with pytest.raises(DimensionError, match="inner dimensions"):
            multiply(np.zeros((2, 3)), np.zeros((2, 3)))


class TestSVD:

    def test_matches_numpy(self, rng):
        a = rng.standard_normal((5, 3))
        result = singular_values(a)
        assert result.converged
        assert result.info == 0
        assert_allclose(
            result.s, np.linalg.svd(a, compute_uv=False),
            rtol=TOL.rtol, atol=TOL.atol,
        )

    def test_leading_is_largest(self, rng):
        a = rng.standard_normal((3, 4))
        result = singular_values(a)
        assert result.leading == pytest.approx(np.max(result.s))

    def test_transpose_invariant(self, rng):
        a = rng.standard_normal((4, 2))
        assert_allclose(
            singular_values(a).s, singular_values(a.T).s,
            rtol=TOL.rtol, atol=TOL.atol,
        )

    def test_diagonal(self):
        result = singular_values(np.diag([0.2, 0.9, 0.5]))
        assert_allclose(result.s, [0.9, 0.5, 0.2], rtol=TOL.rtol, atol=TOL.atol)
