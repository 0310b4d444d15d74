"""
Tests for the Result[P] envelope.

Validates:
    - Generic type parameter works with arbitrary payload types
    - Frozen immutability
    - Default factories (warnings, provenance)
    - has_warning() method
"""

from dataclasses import FrozenInstanceError, dataclass

import pytest

from gravitree.core.result import Result, _default_provenance


@dataclass(frozen=True)
class FakeParams:
    """Minimal payload for testing."""
    value: float


class TestResultConstruction:
    """Result can be created with any payload type."""

    def test_basic_creation(self):
        result = Result(
            params=FakeParams(value=42.0),
            info={"method": "test"},
            timing={"total_seconds": 0.1},
            backend_name="cpu_test",
        )
        assert result.params.value == 42.0
        assert result.info["method"] == "test"
        assert result.timing["total_seconds"] == 0.1
        assert result.backend_name == "cpu_test"

    def test_timing_none(self):
        result = Result(params=FakeParams(value=1.0), info={}, timing=None, backend_name="cpu")
        assert result.timing is None


class TestDefaults:
    """Default values for warnings and provenance."""

    def test_warnings_default_empty(self):
        result = Result(params=FakeParams(value=1.0), info={}, timing=None, backend_name="cpu")
        assert result.warnings == ()
        assert isinstance(result.warnings, tuple)

    def test_provenance_auto_generated(self):
        result = Result(params=FakeParams(value=1.0), info={}, timing=None, backend_name="cpu")
        assert "gravitree_version" in result.provenance
        assert "numpy_version" in result.provenance
        assert "python_version" in result.provenance

    def test_provenance_explicit_override(self):
        result = Result(
            params=FakeParams(value=1.0),
            info={},
            timing=None,
            backend_name="cpu",
            provenance={"custom": "metadata"},
        )
        assert result.provenance == {"custom": "metadata"}

    def test_default_provenance_matches_package_version(self):
        import gravitree
        assert _default_provenance()["gravitree_version"] == gravitree.__version__


class TestHasWarning:

    def test_substring_match(self):
        result = Result(
            params=FakeParams(value=1.0),
            info={},
            timing=None,
            backend_name="cpu",
            warnings=("input is not symmetric", "smallest eigenvalue -1 is negative"),
        )
        assert result.has_warning("symmetric")
        assert result.has_warning("eigenvalue")
        assert not result.has_warning("singular")


class TestImmutability:
    """Result is frozen: no attribute mutation allowed."""

    def test_cannot_set_params(self):
        result = Result(params=FakeParams(value=1.0), info={}, timing=None, backend_name="cpu")
        with pytest.raises(FrozenInstanceError):
            result.params = FakeParams(value=2.0)

    def test_cannot_set_warnings(self):
        result = Result(params=FakeParams(value=1.0), info={}, timing=None, backend_name="cpu")
        with pytest.raises(FrozenInstanceError):
            result.warnings = ("new warning",)
