"""
Tests for wcov() — weighted center and maximum-likelihood covariance.
"""

import numpy as np
import pytest

from gravitree.core.exceptions import (
    DimensionError,
    InvalidWeightsError,
    ValidationError,
)
from gravitree.multivariate import wcov, MultivariateDesign


class TestWeightedMomentsBasic:
    """Center and covariance fundamentals."""

    def test_square_corners(self, square_corners):
        """Equal weights on the corners of a square give center (1,1) and I."""
        x, w = square_corners
        result = wcov(x, w, backend='cpu')
        np.testing.assert_allclose(result.center, [1.0, 1.0], rtol=1e-12)
        np.testing.assert_allclose(result.cov, np.eye(2), atol=1e-15)

    def test_hand_computed_weighted(self):
        """cov.wt(x, wt = c(1,1,2), method = "ML") worked by hand."""
        x = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 9.0]])
        w = np.array([1.0, 1.0, 2.0])
        result = wcov(x, w, backend='cpu')
        np.testing.assert_allclose(result.center, [3.5, 6.0], rtol=1e-12)
        np.testing.assert_allclose(
            result.cov, [[2.75, 5.0], [5.0, 9.5]], rtol=1e-12
        )

    def test_center_is_weighted_mean(self, correlated_data):
        x, w = correlated_data
        result = wcov(x, w, backend='cpu')
        np.testing.assert_allclose(
            result.center, np.average(x, axis=0, weights=w), rtol=1e-12
        )

    def test_biased_denominator(self, correlated_data):
        """Denominator is sum(w), not sum(w) - 1."""
        x, w = correlated_data
        result = wcov(x, w, backend='cpu')
        expected = np.cov(x, rowvar=False, aweights=w, bias=True)
        np.testing.assert_allclose(result.cov, expected, rtol=1e-10)

    def test_unweighted_matches_population_cov(self, rng):
        x = rng.standard_normal((50, 4))
        result = wcov(x, backend='cpu')
        np.testing.assert_allclose(
            result.cov, np.cov(x, rowvar=False, ddof=0), rtol=1e-10
        )

    def test_exactly_symmetric(self, correlated_data):
        x, w = correlated_data
        C = wcov(x, w, backend='cpu').cov
        assert np.array_equal(C, C.T)

    def test_positive_semidefinite(self, correlated_data):
        x, w = correlated_data
        C = wcov(x, w, backend='cpu').cov
        assert np.all(np.linalg.eigvalsh(C) >= -1e-12)

    def test_weight_scale_invariance(self, correlated_data):
        x, w = correlated_data
        a = wcov(x, w, backend='cpu')
        b = wcov(x, 7.5 * w, backend='cpu')
        np.testing.assert_allclose(a.center, b.center, rtol=1e-12)
        np.testing.assert_allclose(a.cov, b.cov, rtol=1e-10)

    def test_zero_weight_drops_observation(self):
        x = np.array([[1.0, 2.0], [100.0, -50.0], [3.0, 1.0], [2.0, 6.0]])
        w = np.array([1.0, 0.0, 2.0, 1.0])
        full = wcov(x, w, backend='cpu')
        dropped = wcov(x[[0, 2, 3]], w[[0, 2, 3]], backend='cpu')
        np.testing.assert_allclose(full.center, dropped.center, rtol=1e-12)
        np.testing.assert_allclose(full.cov, dropped.cov, rtol=1e-12)

    def test_single_observation(self):
        result = wcov(np.array([[3.0, -1.0]]), np.array([2.0]), backend='cpu')
        np.testing.assert_array_equal(result.center, [3.0, -1.0])
        np.testing.assert_array_equal(result.cov, np.zeros((2, 2)))

    def test_1d_is_single_variable(self):
        x = np.array([1.0, 2.0, 3.0, 4.0])
        result = wcov(x, backend='cpu')
        assert result.cov.shape == (1, 1)
        np.testing.assert_allclose(result.cov[0, 0], np.var(x), rtol=1e-12)

    def test_inputs_not_modified(self, correlated_data):
        x, w = correlated_data
        x_copy, w_copy = x.copy(), w.copy()
        wcov(x, w, cor=True, backend='cpu')
        np.testing.assert_array_equal(x, x_copy)
        np.testing.assert_array_equal(w, w_copy)


class TestWeightedMomentsOutputs:
    """Supplementary outputs from cov.wt: weights, n.obs, cor."""

    def test_normalized_weights(self):
        x = np.arange(6.0).reshape(3, 2)
        result = wcov(x, [1.0, 1.0, 2.0], backend='cpu')
        np.testing.assert_allclose(result.weights, [0.25, 0.25, 0.5])
        assert result.weight_sum == 4.0
        assert result.n_obs == 3

    def test_cor_not_computed_by_default(self, correlated_data):
        x, w = correlated_data
        assert wcov(x, w, backend='cpu').cor is None

    def test_cor_matches_cov(self, correlated_data):
        x, w = correlated_data
        result = wcov(x, w, cor=True, backend='cpu')
        sd = np.sqrt(np.diag(result.cov))
        np.testing.assert_allclose(result.cor, result.cov / np.outer(sd, sd), rtol=1e-12)
        np.testing.assert_allclose(np.diag(result.cor), 1.0, rtol=1e-12)
        assert np.array_equal(result.cor, result.cor.T)

    def test_cor_zero_variance_warns(self):
        x = np.array([[1.0, 5.0], [2.0, 5.0], [3.0, 5.0]])
        with pytest.warns(RuntimeWarning, match="zero weighted variance"):
            result = wcov(x, cor=True, backend='cpu')
        assert np.isnan(result.cor[1, 1])
        assert np.isnan(result.cor[0, 1])
        assert result.cor[0, 0] == pytest.approx(1.0)
        assert any("columns [1]" in msg for msg in result.warnings)

    def test_metadata(self, square_corners):
        x, w = square_corners
        result = wcov(x, w, backend='cpu')
        assert result.backend_name == 'cpu_multivariate'
        assert result.info['method'] == 'ML'
        assert result.info['n'] == 4
        assert 'total_seconds' in result.timing
        assert 'covariance' in result.timing
        assert result.warnings == ()

    def test_summary_and_repr(self, square_corners):
        x, w = square_corners
        result = wcov(x, w, cor=True, backend='cpu')
        text = result.summary()
        assert "$center" in text
        assert "$cov" in text
        assert "$cor" in text
        assert "V1" in text
        assert repr(result) == "MomentsSolution(n=4, p=2, weight_sum=4)"


class TestWeightedMomentsErrors:
    """Invalid weights and shapes fail fast."""

    def test_all_zero_weights(self):
        x = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        with pytest.raises(InvalidWeightsError):
            wcov(x, [0.0, 0.0, 0.0], backend='cpu')

    def test_negative_weight(self):
        x = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        with pytest.raises(InvalidWeightsError, match="non-negative"):
            wcov(x, [1.0, -1.0, 3.0], backend='cpu')

    def test_weight_length_mismatch(self):
        x = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        with pytest.raises(DimensionError, match="length 2"):
            wcov(x, [1.0, 1.0], backend='cpu')

    def test_weights_must_be_1d(self):
        x = np.array([[1.0, 2.0], [3.0, 4.0]])
        with pytest.raises(DimensionError):
            wcov(x, [[1.0], [1.0]], backend='cpu')

    def test_nan_in_x(self):
        with pytest.raises(ValidationError, match="non-finite"):
            wcov(np.array([[1.0, np.nan], [2.0, 3.0]]), backend='cpu')

    def test_inf_in_weights(self):
        with pytest.raises(ValidationError, match="non-finite"):
            wcov(np.eye(2), [1.0, np.inf], backend='cpu')

    def test_3d_rejected(self):
        with pytest.raises(DimensionError):
            wcov(np.zeros((2, 2, 2)), backend='cpu')

    def test_no_observations(self):
        with pytest.raises(ValidationError):
            wcov(np.zeros((0, 3)), backend='cpu')

    def test_weight_sum_overflow(self):
        """Finite weights whose total is not representable are rejected, not NaN."""
        with pytest.raises(InvalidWeightsError, match="overflows"):
            wcov([[1.0, 2.0], [3.0, 4.0]], [1e308, 1e308], backend='cpu')

    def test_huge_weights_below_overflow(self):
        """Only the ratios w / sum(w) matter while the sum is representable."""
        x = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 9.0]])
        scaled = wcov(x, [1e307, 1e307, 2e307], backend='cpu')
        plain = wcov(x, [1.0, 1.0, 2.0], backend='cpu')
        assert np.all(np.isfinite(scaled.center))
        assert np.all(np.isfinite(scaled.cov))
        np.testing.assert_allclose(scaled.center, plain.center, rtol=1e-12)
        np.testing.assert_allclose(scaled.cov, plain.cov, rtol=1e-12)

    def test_unknown_backend(self, square_corners):
        x, w = square_corners
        with pytest.raises(ValidationError, match="Unknown backend"):
            wcov(x, w, backend='tpu')


class TestMultivariateDesign:

    def test_design_roundtrip(self, correlated_data):
        x, w = correlated_data
        design = MultivariateDesign.from_array(x, w)
        assert design.n == 200
        assert design.p == 3
        assert design.is_weighted
        np.testing.assert_allclose(
            wcov(design, backend='cpu').cov, wcov(x, w, backend='cpu').cov
        )

    def test_design_with_extra_weights_rejected(self, square_corners):
        x, w = square_corners
        design = MultivariateDesign.from_array(x, w)
        with pytest.raises(ValidationError, match="already part"):
            wcov(design, w, backend='cpu')

    def test_default_weights_are_equal(self):
        design = MultivariateDesign.from_array(np.eye(3))
        np.testing.assert_array_equal(design.weights, np.ones(3))
        assert not design.is_weighted
        assert repr(design) == "MultivariateDesign(n=3, p=3)"

    def test_frame_like_columns(self):
        class Frame:
            columns = ["height", "mass"]
            values = np.array([[1.0, 2.0], [3.0, 5.0]])

        result = wcov(Frame(), backend='cpu')
        assert result.columns == ("height", "mass")
        assert "height" in result.summary()
