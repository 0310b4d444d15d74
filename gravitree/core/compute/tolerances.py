"""
Tolerance tiers for numerical validation.

Defines the precision expected of the GPU path against the CPU
reference, and the thresholds the solvers use for their diagnostics.

Single precision is intentionally absent; every backend computes in
float64.
"""

from dataclasses import dataclass

from gravitree.core.compute.precision import EPSILON_64


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# GPU with FP64
GPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='gpu_fp64',
    description='GPU double precision — matches CPU reference',
)

# Reciprocal condition number below which a covariance is treated as
# singular. Same threshold as R's solve(tol = .Machine$double.eps).
SINGULAR_RCOND = EPSILON_64

# Relative asymmetry |A - A'| / max|A| tolerated before eigen() reports
# that only the lower triangle was used.
SYMMETRY_RTOL = 1e-10

# Eigenvalues below -PSD_RTOL * max|lambda| are reported as evidence the
# input is not positive semi-definite.
PSD_RTOL = 1e-10

