"""
Hand Landmark Types and Latest-Result Slot
==========================================

Landmark containers shared by every landmark source, plus the single-slot
cell a callback-driven detector publishes into and the session polls.
"""

import threading
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from aslai.core.errors import ConfigurationError
from aslai.core.types import COORDS_PER_LANDMARK, FEATURE_SIZE, NUM_LANDMARKS

logger = logging.getLogger(__name__)


class LandmarkIndex(IntEnum):
    """Hand landmark indices following MediaPipe convention."""
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


class Landmark(NamedTuple):
    """A single landmark point with normalized coordinates."""
    x: float  # 0.0 to 1.0, normalized by image width
    y: float  # 0.0 to 1.0, normalized by image height
    z: float  # Depth relative to wrist


@dataclass
class HandLandmarks:
    """Landmarks of one detected hand."""
    landmarks: List[Landmark]
    handedness: str = "Right"
    confidence: float = 0.0

    def get(self, index: LandmarkIndex) -> Landmark:
        """Get landmark by index."""
        return self.landmarks[index]

    def to_numpy(self) -> np.ndarray:
        """Convert landmarks to numpy array of shape (N, 3)."""
        return np.array([[lm.x, lm.y, lm.z] for lm in self.landmarks], dtype=np.float32)

    def to_feature_vector(self) -> np.ndarray:
        """Flatten the first 21 points to (x0, y0, z0, x1, ...), float32 (63,).

        Raises:
            ConfigurationError: If fewer than 21 landmarks are present
        """
        if len(self.landmarks) < NUM_LANDMARKS:
            raise ConfigurationError(
                f"Expected at least {NUM_LANDMARKS} landmarks, got {len(self.landmarks)}"
            )
        features = np.empty(FEATURE_SIZE, dtype=np.float32)
        for i in range(NUM_LANDMARKS):
            lm = self.landmarks[i]
            features[i * COORDS_PER_LANDMARK] = lm.x
            features[i * COORDS_PER_LANDMARK + 1] = lm.y
            features[i * COORDS_PER_LANDMARK + 2] = lm.z
        return features

    @classmethod
    def from_array(cls, points, handedness: str = "Right",
                   confidence: float = 1.0) -> "HandLandmarks":
        """Build from any (N, 3) array-like of coordinates."""
        points = np.asarray(points, dtype=np.float32).reshape(-1, COORDS_PER_LANDMARK)
        landmarks = [Landmark(float(x), float(y), float(z)) for x, y, z in points]
        return cls(landmarks=landmarks, handedness=handedness, confidence=confidence)


class DetectionSnapshot(NamedTuple):
    """Point-in-time read of a landmark source.

    ``valid`` is False until the detector has produced its first result.
    """
    valid: bool = False
    hands: Tuple[HandLandmarks, ...] = ()
    timestamp_ms: Optional[int] = None

    @property
    def hand_detected(self) -> bool:
        return self.valid and len(self.hands) > 0

    @property
    def primary_hand(self) -> Optional[HandLandmarks]:
        return self.hands[0] if self.hand_detected else None


class LatestResultSlot:
    """Single-slot, lock-guarded cell holding the most recent detection.

    Producers (detector callbacks) overwrite the slot; the consumer takes
    non-blocking snapshots. Older results are discarded.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot = DetectionSnapshot()

    def publish(self, hands: Sequence[HandLandmarks], timestamp_ms: Optional[int] = None):
        """Store a detection result (an empty sequence means no hands)."""
        with self._lock:
            self._snapshot = DetectionSnapshot(True, tuple(hands), timestamp_ms)

    def clear(self):
        """Invalidate the slot, e.g. after a detector error."""
        with self._lock:
            self._snapshot = DetectionSnapshot()

    def snapshot(self) -> DetectionSnapshot:
        with self._lock:
            return self._snapshot


class LandmarkSource:
    """Interface of a per-frame hand landmark producer.

    ``submit`` hands a frame to the detector, which may finish later on
    another thread. ``snapshot`` returns whatever result is latest at the
    time of the call; a result not produced yet reads as "no hands".
    """

    def submit(self, frame, timestamp_ms: int) -> None:
        raise NotImplementedError

    def snapshot(self) -> DetectionSnapshot:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
