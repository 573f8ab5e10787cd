"""
Tests for Probability Smoother
==============================
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from aslai.core.errors import ConfigurationError
from aslai.recognition.smoother import ProbabilitySmoother


class TestProbabilitySmoother:
    """Test suite for the cascaded low-pass filter."""

    @pytest.fixture
    def smoother(self):
        """Create a two-label smoother with default factor and stages."""
        return ProbabilitySmoother(num_labels=2)

    def test_initial_state_is_zero(self, smoother):
        """Test that a fresh filter state is all zeros."""
        state = smoother.state

        assert state.shape == (3, 2)
        assert state.dtype == np.float32
        assert not state.any()

    def test_first_frame_cascade(self, smoother):
        """Test that each stage follows the freshly updated previous stage."""
        out = smoother.apply(np.array([1.0, 0.0], dtype=np.float32))

        state = smoother.state
        assert state[0, 0] == pytest.approx(0.4, rel=1e-6)
        assert state[1, 0] == pytest.approx(0.16, rel=1e-6)
        assert state[2, 0] == pytest.approx(0.064, rel=1e-6)
        assert out[0] == pytest.approx(0.064, rel=1e-6)
        assert out[1] == 0.0

    def test_second_frame_cascade(self, smoother):
        """Test the cascade values after two identical frames."""
        raw = np.array([1.0, 0.0], dtype=np.float32)
        smoother.apply(raw.copy())
        out = smoother.apply(raw.copy())

        state = smoother.state
        assert state[0, 0] == pytest.approx(0.64, rel=1e-6)
        assert state[1, 0] == pytest.approx(0.352, rel=1e-6)
        assert out[0] == pytest.approx(0.1792, rel=1e-5)

    def test_fifty_frames_exceed_threshold(self, smoother):
        """Test that 50 frames of [1, 0] push label 0 above 0.99."""
        for _ in range(50):
            out = smoother.apply(np.array([1.0, 0.0], dtype=np.float32))

        assert out[0] > 0.99
        assert out[1] == 0.0

    def test_monotonic_convergence(self):
        """Test that repeated input converges monotonically to the raw value."""
        smoother = ProbabilitySmoother(num_labels=3)
        raw = np.array([0.7, 0.2, 0.05], dtype=np.float32)

        previous_error = np.abs(raw - smoother.output)
        for _ in range(100):
            out = smoother.apply(raw.copy())
            error = np.abs(raw - out)
            assert np.all(error <= previous_error + 1e-7)
            previous_error = error

        assert np.all(previous_error < 1e-4)

    def test_convergence_from_above(self):
        """Test convergence downwards after the raw value drops."""
        smoother = ProbabilitySmoother(num_labels=1)
        for _ in range(60):
            smoother.apply(np.array([1.0], dtype=np.float32))
        for _ in range(60):
            out = smoother.apply(np.array([0.25], dtype=np.float32))

        assert out[0] == pytest.approx(0.25, abs=1e-4)

    def test_writes_back_in_place(self, smoother):
        """Test that a float32 score buffer is overwritten with the output."""
        scores = np.array([1.0, 0.5], dtype=np.float32)
        out = smoother.apply(scores)

        np.testing.assert_array_equal(scores, out)
        assert scores[0] == pytest.approx(0.064, rel=1e-6)

    def test_output_is_float32(self, smoother):
        """Test that arithmetic stays in single precision."""
        out = smoother.apply([1.0, 0.0])
        assert out.dtype == np.float32

    def test_no_normalization(self):
        """Test that outputs are smoothed raw scores, not probabilities."""
        smoother = ProbabilitySmoother(num_labels=2)
        for _ in range(100):
            out = smoother.apply(np.array([3.0, 4.0], dtype=np.float32))

        assert out.sum() == pytest.approx(7.0, rel=1e-4)

    def test_width_mismatch_raises(self, smoother):
        """Test that a wrong score width fails instead of truncating."""
        with pytest.raises(ConfigurationError):
            smoother.apply(np.zeros(3, dtype=np.float32))

        with pytest.raises(ConfigurationError):
            smoother.apply(np.zeros(1, dtype=np.float32))

        assert not smoother.state.any()

    def test_reset(self, smoother):
        """Test that reset zeroes every stage."""
        smoother.apply(np.array([1.0, 1.0], dtype=np.float32))
        smoother.reset()

        assert not smoother.state.any()

    def test_state_is_read_only_copy(self, smoother):
        """Test that the exposed state cannot alias the internal one."""
        state = smoother.state

        with pytest.raises(ValueError):
            state[0, 0] = 1.0

        smoother.apply(np.array([1.0, 0.0], dtype=np.float32))
        assert state[0, 0] == 0.0

    def test_zero_labels(self):
        """Test that an empty label set smooths an empty vector."""
        smoother = ProbabilitySmoother(num_labels=0)
        out = smoother.apply(np.zeros(0, dtype=np.float32))

        assert out.shape == (0,)

    def test_custom_stages(self):
        """Test that a single stage behaves like a plain EMA."""
        smoother = ProbabilitySmoother(num_labels=1, factor=0.5, stages=1)
        out = smoother.apply(np.array([1.0], dtype=np.float32))

        assert out[0] == pytest.approx(0.5)

    @pytest.mark.parametrize("kwargs", [
        {"num_labels": -1},
        {"num_labels": 2, "stages": 0},
        {"num_labels": 2, "factor": 0.0},
        {"num_labels": 2, "factor": 1.5},
    ])
    def test_invalid_construction(self, kwargs):
        """Test that invalid parameters are configuration errors."""
        with pytest.raises(ConfigurationError):
            ProbabilitySmoother(**kwargs)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
