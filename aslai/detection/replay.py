"""
Landmark source that replays recorded hand landmarks.

Recordings are ``.npy`` arrays of shape (frames, 21, 3). A frame whose
coordinates are all NaN stands for "no hand detected".
"""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np

from aslai.core.errors import InitializationError
from aslai.core.types import COORDS_PER_LANDMARK, NUM_LANDMARKS
from aslai.detection.landmarks import (
    DetectionSnapshot, HandLandmarks, LandmarkSource, LatestResultSlot,
)

logger = logging.getLogger(__name__)


class ReplayLandmarkSource(LandmarkSource):
    """Publishes one recorded frame per ``submit`` call, synchronously."""

    def __init__(self, recording: np.ndarray):
        recording = np.asarray(recording, dtype=np.float32)
        if recording.ndim != 3 or recording.shape[1:] != (NUM_LANDMARKS, COORDS_PER_LANDMARK):
            raise InitializationError(
                f"Recording must have shape (frames, {NUM_LANDMARKS}, "
                f"{COORDS_PER_LANDMARK}), got {recording.shape}"
            )
        self._recording = recording
        self._position = 0
        self._slot = LatestResultSlot()

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ReplayLandmarkSource":
        try:
            recording = np.load(path)
        except (OSError, ValueError) as e:
            raise InitializationError(f"Cannot load landmark recording {path}: {e}") from e
        logger.info("Loaded %d recorded frames from %s", len(recording), path)
        return cls(recording)

    def submit(self, frame, timestamp_ms: Optional[int] = None) -> None:
        """Advance to the next recorded frame; the frame argument is ignored."""
        if self.exhausted:
            self._slot.publish((), timestamp_ms)
            return

        points = self._recording[self._position]
        self._position += 1

        if np.isnan(points).all():
            self._slot.publish((), timestamp_ms)
        else:
            self._slot.publish((HandLandmarks.from_array(points),), timestamp_ms)

    def snapshot(self) -> DetectionSnapshot:
        return self._slot.snapshot()

    @property
    def exhausted(self) -> bool:
        return self._position >= len(self._recording)

    def __len__(self):
        return len(self._recording)
