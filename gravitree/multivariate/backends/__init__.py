"""
Multivariate backends.

Available backends:
    CPUMultivariateBackend: CPU reference implementation (NumPy / LAPACK)
    GPUMultivariateBackend: CUDA float64 implementation using PyTorch,
        imported lazily from gravitree.multivariate.backends.gpu
"""

from gravitree.multivariate.backends.cpu import CPUMultivariateBackend

__all__ = [
    "CPUMultivariateBackend",
]
