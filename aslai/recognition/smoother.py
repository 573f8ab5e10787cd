"""
Multi-stage low-pass filtering of per-label scores.
Cascades first-order exponential filters so each stage follows the
freshly updated output of the stage before it within the same frame.
"""

import logging

import numpy as np

from aslai.core.errors import ConfigurationError
from aslai.core.types import FILTER_FACTOR, FILTER_STAGES

logger = logging.getLogger(__name__)


class ProbabilitySmoother:
    """Stabilizes raw classifier scores across frames.

    Holds an (stages, num_labels) float32 state. Stage 0 low-pass filters
    the raw scores, every later stage low-pass filters the stage before it,
    and the last stage is the stabilized output.
    """

    def __init__(self, num_labels: int, factor: float = FILTER_FACTOR,
                 stages: int = FILTER_STAGES):
        if num_labels < 0:
            raise ConfigurationError(f"num_labels must be >= 0, got {num_labels}")
        if stages < 1:
            raise ConfigurationError(f"stages must be >= 1, got {stages}")
        if not 0.0 < factor <= 1.0:
            raise ConfigurationError(f"factor must be in (0, 1], got {factor}")

        self._num_labels = num_labels
        self._stages = stages
        self._factor = np.float32(factor)
        self._state = np.zeros((stages, num_labels), dtype=np.float32)

        logger.debug("Smoother created: %d labels, %d stages, factor=%.2f",
                     num_labels, stages, factor)

    def apply(self, scores: np.ndarray) -> np.ndarray:
        """Run one frame of raw scores through the filter cascade.

        Args:
            scores: float32 array of shape (num_labels,). Overwritten in
                place with the stabilized scores when it is a float32 array.

        Returns:
            The stabilized scores (last filter stage values).

        Raises:
            ConfigurationError: If the score width differs from the state width.
        """
        raw = np.asarray(scores, dtype=np.float32).reshape(-1)
        if raw.shape[0] != self._num_labels:
            raise ConfigurationError(
                f"Score vector has {raw.shape[0]} values, "
                f"filter state expects {self._num_labels}"
            )

        state = self._state
        factor = self._factor

        # Low pass filter the raw scores into the first stage
        state[0] += factor * (raw - state[0])

        # Low pass filter each stage into the next, in order
        for i in range(1, self._stages):
            state[i] += factor * (state[i - 1] - state[i])

        output = state[-1]
        if isinstance(scores, np.ndarray) and scores.dtype == np.float32 \
                and scores.size == self._num_labels:
            scores.reshape(-1)[:] = output
        return output.copy()

    def reset(self):
        """Zero all filter stages."""
        self._state.fill(0.0)

    @property
    def state(self) -> np.ndarray:
        """Read-only copy of the (stages, num_labels) filter state."""
        snapshot = self._state.copy()
        snapshot.setflags(write=False)
        return snapshot

    @property
    def output(self) -> np.ndarray:
        """Current stabilized scores without advancing the filter."""
        return self._state[-1].copy()

    @property
    def num_labels(self) -> int:
        return self._num_labels

    @property
    def stages(self) -> int:
        return self._stages

    @property
    def factor(self) -> float:
        return float(self._factor)
