"""
Inference engine wrappers.

Provides:
    - TFLiteEngine: TensorFlow Lite interpreter for the landmark classifier

Import from ``aslai.models.tflite_engine`` directly; TensorFlow is only
loaded when that module is imported.
"""

__all__ = [
    "TFLiteEngine",
]
