"""
GPU backend tests for multivariate statistics.

Validates GPU results against the CPU reference backend.
Skipped if no CUDA device is available.
"""

from __future__ import annotations

import numpy as np
import pytest

try:
    import torch
    HAS_GPU = torch.cuda.is_available()
except ImportError:
    HAS_GPU = False

pytestmark = pytest.mark.skipif(not HAS_GPU, reason="No CUDA device available")

from gravitree.core.compute.tolerances import GPU_FP64
from gravitree.core.exceptions import SingularCovarianceError
from gravitree.multivariate import wcov, eigen, mahalanobis


class TestGPUvsCPU:
    """Compare GPU results against CPU reference."""

    def test_wcov(self, correlated_data):
        x, w = correlated_data
        cpu = wcov(x, w, backend='cpu')
        gpu = wcov(x, w, backend='gpu')
        np.testing.assert_allclose(gpu.center, cpu.center, rtol=GPU_FP64.rtol)
        np.testing.assert_allclose(gpu.cov, cpu.cov, rtol=GPU_FP64.rtol, atol=GPU_FP64.atol)
        assert np.array_equal(gpu.cov, gpu.cov.T)
        assert gpu.backend_name == 'gpu_multivariate_fp64'

    def test_eigen_values(self, correlated_data):
        x, w = correlated_data
        cov = wcov(x, w, backend='cpu').cov
        cpu = eigen(cov, backend='cpu')
        gpu = eigen(cov, backend='gpu')
        np.testing.assert_allclose(gpu.values, cpu.values, rtol=GPU_FP64.rtol)

    def test_eigen_vectors_up_to_sign(self, correlated_data):
        x, w = correlated_data
        cov = wcov(x, w, backend='cpu').cov
        cpu = eigen(cov, sign='positive', backend='cpu')
        gpu = eigen(cov, sign='positive', backend='gpu')
        np.testing.assert_allclose(gpu.vectors, cpu.vectors, atol=1e-8)

    def test_mahalanobis(self, correlated_data):
        x, w = correlated_data
        moments = wcov(x, w, backend='cpu')
        cpu = mahalanobis(x, moments.center, moments.cov, backend='cpu')
        gpu = mahalanobis(x, moments.center, moments.cov, backend='gpu')
        np.testing.assert_allclose(gpu.distances, cpu.distances, rtol=1e-8)

    def test_singular_on_gpu(self):
        with pytest.raises(SingularCovarianceError):
            mahalanobis([[1.0, 2.0]], [0.0, 0.0], np.zeros((2, 2)), backend='gpu')

    def test_singular_diagnostics_match_cpu(self):
        cov = np.array([[2.0, 0.0], [0.0, 0.0]])
        errors = []
        for backend in ('cpu', 'gpu'):
            with pytest.raises(SingularCovarianceError) as exc_info:
                mahalanobis([[1.0, 2.0]], [0.0, 0.0], cov, backend=backend)
            errors.append(exc_info.value)
        cpu_err, gpu_err = errors
        assert str(gpu_err) == str(cpu_err)
        assert gpu_err.rank == cpu_err.rank == 1
