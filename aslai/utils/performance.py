"""
Inference timing.
"""

import time


class Timer:
    """
    Wall-clock span of a ``with`` block, read back in milliseconds.

    Example:
        >>> with Timer("inference") as t:
        ...     engine.run(features, scores)
        >>> report.inference_ms = t.elapsed_ms
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._started = 0.0
        self._elapsed_ms = 0.0

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds spent inside the block, 0.0 before it has run."""
        return self._elapsed_ms

    def __enter__(self):
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._elapsed_ms = (time.perf_counter() - self._started) * 1000
        return False

    def __repr__(self):
        return "Timer(%s, %.2fms)" % (self.name or "-", self._elapsed_ms)
