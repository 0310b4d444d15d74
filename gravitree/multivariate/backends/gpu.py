"""
GPU backend for multivariate statistics using PyTorch.

Performance path for large n, validated against the CPU reference.
Computes in float64 on CUDA only; single precision is not offered, which
also rules out Apple MPS.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import NDArray

from gravitree.core.result import Result
from gravitree.core.compute.timing import Timer
from gravitree.core.compute.device import DeviceInfo
from gravitree.multivariate.design import MultivariateDesign
from gravitree.multivariate.solution import (
    MomentsParams, SpectrumParams, MahalanobisParams,
)
from gravitree.multivariate._common import (
    SignConvention,
    mirror_lower,
    weighted_correlation,
    reorder_descending,
    apply_sign_convention,
    spectrum_diagnostics,
    check_invertible,
    singular_covariance,
)


class GPUMultivariateBackend:
    """
    GPU backend for weighted moments, spectra and distances.

    Heavy products and decompositions run on the device; the cheap
    post-processing shared with the CPU backend runs on the returned
    numpy arrays so both backends agree on symmetry and sign conventions.
    """

    def __init__(self, device: DeviceInfo | None = None):
        """
        Initialize GPU backend.

        Parameters
        ----------
        device : DeviceInfo, optional
            Device info from select_device(). If None, uses the current
            CUDA device.
        """
        import torch

        if device is not None:
            if device.device_type != 'cuda':
                raise ValueError(
                    f"GPUMultivariateBackend requires a CUDA device, got {device.device_type}"
                )
            self.device = torch.device(f'cuda:{device.device_index or 0}')
            self.device_name = device.name
        elif torch.cuda.is_available():
            self.device = torch.device('cuda')
            self.device_name = torch.cuda.get_device_properties(0).name
        else:
            raise RuntimeError("No CUDA device available. Use backend='cpu' instead.")

        self.dtype = torch.float64

    @property
    def name(self) -> str:
        return 'gpu_multivariate_fp64'

    def _to_device(self, array: NDArray):
        import torch
        return torch.from_numpy(np.ascontiguousarray(array)).to(
            device=self.device, dtype=self.dtype
        )

    def solve_moments(
        self,
        design: MultivariateDesign,
        *,
        cor: bool = False,
    ) -> Result[MomentsParams]:
        """Weighted center and ML covariance on GPU."""
        import torch

        timer = Timer(sync_cuda=True)
        timer.start()
        warnings_list: list[str] = []
        ws = design.weight_sum

        with timer.section('data_transfer_to_gpu'):
            x = self._to_device(design.data)
            wn = self._to_device(design.weights / ws)

        with timer.section('center'):
            center = (x * wn[:, None]).sum(dim=0)

        with timer.section('covariance'):
            Xs = (x - center) * torch.sqrt(wn)[:, None]
            cross = Xs.T @ Xs

        with timer.section('data_transfer_to_cpu'):
            center_np = center.cpu().numpy()
            cov_np = mirror_lower(cross.cpu().numpy())

        cor_matrix = None
        if cor:
            cor_matrix, cor_warnings = weighted_correlation(cov_np)
            warnings_list.extend(cor_warnings)

        timer.stop()

        params = MomentsParams(
            center=center_np,
            cov=cov_np,
            n_obs=design.n,
            weights=design.weights / ws,
            weight_sum=ws,
            cor=cor_matrix,
        )
        return Result(
            params=params,
            info={'method': 'ML', 'n': design.n, 'p': design.p, 'device': self.device_name},
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )

    def solve_spectrum(
        self,
        matrix: NDArray[np.floating[Any]],
        *,
        sign: SignConvention = 'negate',
    ) -> Result[SpectrumParams]:
        """Symmetric eigendecomposition on GPU, largest eigenvalue first."""
        import torch

        timer = Timer(sync_cuda=True)
        timer.start()

        with timer.section('eigh'):
            values, vectors = torch.linalg.eigh(self._to_device(matrix), UPLO='L')

        with timer.section('postprocess'):
            values, vectors = reorder_descending(values.cpu().numpy(), vectors.cpu().numpy())
            vectors = apply_sign_convention(vectors, sign)

        warnings_list = spectrum_diagnostics(matrix, values)
        timer.stop()

        return Result(
            params=SpectrumParams(values=values, vectors=vectors, sign=sign),
            info={'method': 'eigh', 'p': matrix.shape[0], 'order': 'decreasing',
                  'device': self.device_name},
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )

    def solve_mahalanobis(
        self,
        x: NDArray[np.floating[Any]],
        center: NDArray[np.floating[Any]],
        cov: NDArray[np.floating[Any]],
        *,
        inverted: bool = False,
    ) -> Result[MahalanobisParams]:
        """Squared Mahalanobis distances on GPU with a single inversion."""
        import torch

        timer = Timer(sync_cuda=True)
        timer.start()
        p = cov.shape[0]

        with timer.section('data_transfer_to_gpu'):
            x_gpu = self._to_device(x)
            center_gpu = self._to_device(center)
            cov_gpu = self._to_device(cov)

        if inverted:
            precision = cov_gpu
        else:
            with timer.section('inverse'):
                cond = check_invertible(cov)
                try:
                    precision = torch.linalg.inv(cov_gpu)
                except torch.linalg.LinAlgError as e:
                    raise singular_covariance(f"inversion failed: {e}", p, cond) from e
                if not bool(torch.isfinite(precision).all()):
                    raise singular_covariance("inverse contains non-finite values", p, cond)

        with timer.section('quadratic_form'):
            cx = x_gpu - center_gpu
            distances = ((cx @ precision) * cx).sum(dim=1)

        with timer.section('data_transfer_to_cpu'):
            distances_np = distances.cpu().numpy()
            precision_np = precision.cpu().numpy()

        timer.stop()

        return Result(
            params=MahalanobisParams(
                distances=distances_np, precision=precision_np, df=x.shape[1],
            ),
            info={'n': x.shape[0], 'p': x.shape[1], 'inverted': inverted,
                  'device': self.device_name},
            timing=timer.result(),
            backend_name=self.name,
        )
