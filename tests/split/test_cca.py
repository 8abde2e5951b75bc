"""
Tests for the canonical-correlation divergence statistic.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from pysplitstats.core.compute.linalg import SVDResult
from pysplitstats.core.compute.tolerances import DECOMPOSITION_FP64
from pysplitstats.core.exceptions import ConvergenceError, ValidationError
from pysplitstats.split import (
    LEFT,
    RIGHT,
    canonical_correlation,
    cca_split_statistic,
    pack_cca_features,
)
from pysplitstats.split._cca import feature_block_dims


def _reference_rho(x, y):
    qx, _ = np.linalg.qr(x)
    qy, _ = np.linalg.qr(y)
    return np.linalg.svd(qx.T @ qy, compute_uv=False)[0]


def _call(feature, membership):
    n = feature.shape[1]
    return cca_split_statistic(
        n, membership, feature=feature, feature_count=feature.shape[0],
    )


@pytest.fixture
def blocks(rng):
    n = 40
    x = rng.normal(size=(n, 2))
    y = np.column_stack([
        x @ np.array([1.0, -0.5]) + 0.3 * rng.normal(size=n),
        rng.normal(size=n),
    ])
    membership = np.where(np.arange(n) < 22, LEFT, RIGHT)
    return x, y, membership


class TestPacking:

    def test_layout(self):
        x = np.arange(6.0).reshape(3, 2)
        y = np.arange(3.0)
        feature = pack_cca_features(x, y)
        assert feature.shape == (4, 3)
        assert_allclose(feature[:2], x.T)
        assert_allclose(feature[2], y)
        assert_allclose(feature[3], [2.0, 2.0, 2.0])
        assert feature_block_dims(feature, 4) == (2, 1)

    def test_row_mismatch(self):
        with pytest.raises(ValidationError, match="same number of rows"):
            pack_cca_features(np.ones((3, 1)), np.ones((4, 1)))


class TestCanonicalCorrelation:

    def test_matches_numpy(self, blocks):
        x, y, _ = blocks
        tol = DECOMPOSITION_FP64
        rho = canonical_correlation(x, y)
        assert rho.converged
        assert (rho.rank_x, rho.rank_y) == (2, 2)
        assert_allclose(rho.value, _reference_rho(x, y), rtol=tol.rtol, atol=tol.atol)

    def test_bounded(self, blocks):
        x, y, _ = blocks
        assert 0.0 <= canonical_correlation(x, y).value <= 1.0 + 1e-12

    def test_perfectly_related(self, rng):
        x = rng.normal(size=(20, 2))
        y = (x @ np.array([1.0, 2.0])).reshape(-1, 1)
        assert_allclose(canonical_correlation(x, y).value, 1.0, atol=1e-10)

    def test_symmetric(self, blocks):
        x, y, _ = blocks
        assert_allclose(
            canonical_correlation(x, y).value,
            canonical_correlation(y, x).value,
            rtol=1e-10,
        )

    def test_invalid_policy(self, blocks):
        x, y, _ = blocks
        with pytest.raises(ValidationError, match="on_nonconvergence"):
            canonical_correlation(x, y, on_nonconvergence="ignore")


class TestNonConvergence:

    @pytest.fixture
    def failing_svd(self, monkeypatch):
        def fake(a):
            return SVDResult(s=np.array([0.9, 0.95, 0.1]), info=2)
        monkeypatch.setattr("pysplitstats.split._cca.singular_values", fake)

    def test_fallback_uses_largest_estimate(self, blocks, failing_svd):
        x, y, _ = blocks
        with pytest.warns(RuntimeWarning, match="did not converge"):
            rho = canonical_correlation(x, y)
        assert rho.value == 0.95
        assert not rho.converged
        assert rho.info == 2

    def test_raise_policy(self, blocks, failing_svd):
        x, y, _ = blocks
        with pytest.raises(ConvergenceError) as excinfo:
            canonical_correlation(x, y, on_nonconvergence="raise")
        assert excinfo.value.routine == "dgesvd"
        assert excinfo.value.info == 2

    def test_statistic_raise_policy(self, blocks, failing_svd):
        x, y, membership = blocks
        feature = pack_cca_features(x, y)
        with pytest.raises(ConvergenceError):
            cca_split_statistic(
                len(membership), membership,
                feature=feature, feature_count=feature.shape[0],
                on_nonconvergence="raise",
            )


class TestStatistic:

    def test_matches_definition(self, blocks):
        x, y, membership = blocks
        is_left = membership == LEFT
        expected = np.sqrt(22 * 18) * abs(
            _reference_rho(x[is_left], y[is_left])
            - _reference_rho(x[~is_left], y[~is_left])
        )
        delta = _call(pack_cca_features(x, y), membership)
        assert_allclose(delta, expected, rtol=1e-8, atol=1e-10)

    def test_swapping_blocks(self, blocks):
        x, y, membership = blocks
        assert_allclose(
            _call(pack_cca_features(x, y), membership),
            _call(pack_cca_features(y, x), membership),
            rtol=1e-8, atol=1e-10,
        )

    def test_related_left_unrelated_right(self, rng):
        n = 30
        x = rng.normal(size=(n, 1))
        y = rng.normal(size=(n, 1))
        membership = np.where(np.arange(n) < 15, LEFT, RIGHT)
        y[:15] = 3.0 * x[:15]
        delta = _call(pack_cca_features(x, y), membership)
        rho_right = _reference_rho(x[15:], y[15:])
        assert_allclose(delta, 15.0 * (1.0 - rho_right), rtol=1e-8)

    def test_small_daughter_scores_zero(self, rng):
        """A daughter needs more than dim_x + dim_y = 3 members."""
        n = 12
        x = rng.normal(size=(n, 2))
        y = rng.normal(size=(n, 1))
        membership = np.where(np.arange(n) < 3, LEFT, RIGHT)
        assert _call(pack_cca_features(x, y), membership) == 0.0

    def test_empty_y_block_scores_zero(self, rng):
        n = 10
        x = rng.normal(size=(n, 2))
        feature = np.vstack([x.T, np.full((1, n), 2.0)])
        membership = np.where(np.arange(n) < 5, LEFT, RIGHT)
        assert _call(feature, membership) == 0.0

    def test_empty_x_block_scores_zero(self, rng):
        n = 10
        y = rng.normal(size=(n, 2))
        feature = np.vstack([y.T, np.zeros((1, n))])
        membership = np.where(np.arange(n) < 5, LEFT, RIGHT)
        assert _call(feature, membership) == 0.0

    def test_no_feature_scores_zero(self):
        membership = np.array([LEFT, RIGHT])
        assert cca_split_statistic(2, membership) == 0.0

    def test_fallback_warns_from_statistic(self, blocks, monkeypatch):
        monkeypatch.setattr(
            "pysplitstats.split._cca.singular_values",
            lambda a: SVDResult(s=np.array([0.5, 0.2]), info=1),
        )
        x, y, membership = blocks
        with pytest.warns(RuntimeWarning):
            delta = _call(pack_cca_features(x, y), membership)
        # Same fallback value on both sides.
        assert delta == 0.0
