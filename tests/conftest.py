"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def square_corners():
    """Four corners of a 2x2 square: center (1, 1), ML covariance I."""
    x = np.array([[0.0, 0.0], [2.0, 0.0], [0.0, 2.0], [2.0, 2.0]])
    w = np.ones(4)
    return x, w


@pytest.fixture
def correlated_data(rng):
    """Correlated 3-variable sample with random positive weights."""
    n = 200
    A = np.array([[2.0, 0.0, 0.0], [0.8, 1.0, 0.0], [-0.5, 0.3, 0.5]])
    x = rng.standard_normal((n, 3)) @ A.T + np.array([1.0, -2.0, 5.0])
    w = rng.uniform(0.1, 2.0, n)
    return x, w
