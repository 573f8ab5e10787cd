"""
Hand Landmark Source - MediaPipe Tasks API
==========================================

Runs the MediaPipe HandLandmarker in LIVE_STREAM mode. Results arrive on
MediaPipe's own thread through a callback and are published into a
LatestResultSlot that the classification session polls.
"""

import logging
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import cv2
import numpy as np
import mediapipe as mp
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from aslai.core.errors import InitializationError
from aslai.detection.landmarks import (
    DetectionSnapshot, HandLandmarks, LandmarkSource, LatestResultSlot, Landmark,
)

logger = logging.getLogger(__name__)

# Model download URL
HAND_LANDMARKER_MODEL_URL = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"
DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent / "assets" / "hand_landmarker.task"


@dataclass
class HandLandmarkerConfig:
    """Configuration for the MediaPipe landmark source."""
    model_path: str = ""
    max_num_hands: int = 2
    min_detection_confidence: float = 0.5
    min_presence_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    download: bool = True

    @classmethod
    def from_dict(cls, d: dict) -> "HandLandmarkerConfig":
        """Create config from dictionary."""
        return cls(
            model_path=d.get("model_path", ""),
            max_num_hands=d.get("max_num_hands", 2),
            min_detection_confidence=d.get("min_detection_confidence", 0.5),
            min_presence_confidence=d.get("min_presence_confidence", 0.5),
            min_tracking_confidence=d.get("min_tracking_confidence", 0.5),
            download=d.get("download", True),
        )


def download_model(url: str, save_path: Path) -> bool:
    """Download the hand landmarker model if not present."""
    if save_path.exists():
        logger.info("Model already exists at %s", save_path)
        return True

    try:
        save_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Downloading hand landmarker model to %s...", save_path)
        urllib.request.urlretrieve(url, save_path)
        logger.info("Model download complete!")
        return True
    except OSError as e:
        logger.error("Failed to download model: %s", e)
        return False


class MediaPipeLandmarkSource(LandmarkSource):
    """
    Asynchronous hand landmark source backed by MediaPipe HandLandmarker.

    Example:
        >>> source = MediaPipeLandmarkSource(HandLandmarkerConfig())
        >>> source.submit(bgr_frame, timestamp_ms)
        >>> snapshot = source.snapshot()   # may still hold the previous result
        >>> source.close()
    """

    def __init__(self, config: Optional[HandLandmarkerConfig] = None):
        self.config = config or HandLandmarkerConfig()
        self._slot = LatestResultSlot()
        self._last_timestamp_ms = -1
        self._landmarker = self._create_landmarker()

    def _create_landmarker(self) -> vision.HandLandmarker:
        model_path = Path(self.config.model_path or DEFAULT_MODEL_PATH)

        if not model_path.exists():
            if not (self.config.download and
                    download_model(HAND_LANDMARKER_MODEL_URL, model_path)):
                raise InitializationError(f"Hand landmarker model not found: {model_path}")

        options = vision.HandLandmarkerOptions(
            base_options=python.BaseOptions(model_asset_path=str(model_path)),
            running_mode=vision.RunningMode.LIVE_STREAM,
            num_hands=self.config.max_num_hands,
            min_hand_detection_confidence=self.config.min_detection_confidence,
            min_hand_presence_confidence=self.config.min_presence_confidence,
            min_tracking_confidence=self.config.min_tracking_confidence,
            result_callback=self._on_result,
        )

        try:
            landmarker = vision.HandLandmarker.create_from_options(options)
        except (RuntimeError, ValueError) as e:
            raise InitializationError(f"Failed to initialize HandLandmarker: {e}") from e

        logger.info("HandLandmarker initialized with model: %s (max hands: %d)",
                    model_path, self.config.max_num_hands)
        return landmarker

    def _on_result(self, result, output_image, timestamp_ms: int):
        """MediaPipe result callback, runs on MediaPipe's thread."""
        hands = []
        for i, hand_landmarks in enumerate(result.hand_landmarks):
            handedness = "Right"
            confidence = 0.0
            if result.handedness and len(result.handedness) > i:
                handedness = result.handedness[i][0].category_name
                confidence = result.handedness[i][0].score

            hands.append(HandLandmarks(
                landmarks=[Landmark(x=lm.x, y=lm.y, z=lm.z) for lm in hand_landmarks],
                handedness=handedness,
                confidence=confidence,
            ))

        self._slot.publish(hands, timestamp_ms)

    def submit(self, frame: np.ndarray, timestamp_ms: int) -> None:
        """Send a BGR frame for asynchronous detection."""
        if self._landmarker is None:
            logger.warning("HandLandmarker closed; frame dropped")
            return

        # LIVE_STREAM mode rejects non-increasing timestamps
        timestamp_ms = max(int(timestamp_ms), self._last_timestamp_ms + 1)
        self._last_timestamp_ms = timestamp_ms

        try:
            rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)
            self._landmarker.detect_async(mp_image, timestamp_ms)
        except (cv2.error, RuntimeError, ValueError, TypeError) as e:
            logger.error("MediaPipe HandLandmarker error: %s", e)
            self._slot.clear()

    def snapshot(self) -> DetectionSnapshot:
        return self._slot.snapshot()

    def close(self) -> None:
        """Release resources."""
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
            logger.info("HandLandmarker stopped")
