"""
ASL AI Classification Core
==========================

Landmark-based hand sign classification with temporal smoothing.

Modules:
    - core: Classification session, shared types and errors
    - detection: Hand landmark sources (MediaPipe, recorded replay)
    - recognition: Label loading, score smoothing, top-K ranking
    - models: Inference engine wrappers (TensorFlow Lite)
    - utils: Configuration, logging, timing
"""

__version__ = "1.0.0"
__author__ = "ASL AI Team"
