"""Hand landmark sources.

The MediaPipe source lives in ``aslai.detection.hand_landmarker`` and is
imported on demand since it loads MediaPipe and OpenCV.
"""
from .landmarks import (
    DetectionSnapshot, HandLandmarks, Landmark, LandmarkIndex,
    LandmarkSource, LatestResultSlot,
)
from .replay import ReplayLandmarkSource

__all__ = [
    "DetectionSnapshot",
    "HandLandmarks",
    "Landmark",
    "LandmarkIndex",
    "LandmarkSource",
    "LatestResultSlot",
    "ReplayLandmarkSource",
]
