"""
TensorFlow Lite inference engine for the landmark classifier.

Loads a bundled ``.tflite`` model and runs single-sample inference on a
flattened landmark feature vector, writing per-label scores into a
caller-provided buffer. The interpreter may use several worker threads
internally; calls into one engine must still be serialized.

Requirements:
    - tensorflow >= 2.12 (``pip install aslai[inference]``)
"""

import os
import logging

import numpy as np

from aslai.core.errors import ConfigurationError
from aslai.utils.logger import log_timing

logger = logging.getLogger(__name__)

# TensorFlow is optional on machines that only replay or test the core
try:
    import tensorflow as tf
    TFLITE_AVAILABLE = True
except ImportError:
    TFLITE_AVAILABLE = False
    logger.info("TensorFlow not available; TFLiteEngine disabled")


class TFLiteEngine:
    """Wraps a TFLite interpreter for fixed-size vector-in, vector-out inference."""

    def __init__(self, model_path, num_threads=1):
        """Load a TFLite model.

        Args:
            model_path: Path to .tflite file
            num_threads: Interpreter worker thread count

        Raises:
            RuntimeError: If TensorFlow is not available
            FileNotFoundError: If the model file does not exist
        """
        if not TFLITE_AVAILABLE:
            raise RuntimeError(
                "TensorFlow is required for TFLite inference. "
                "Install it with: pip install aslai[inference]"
            )

        if not os.path.isfile(model_path):
            raise FileNotFoundError("TFLite model not found: %s" % model_path)

        self._model_path = model_path
        self._num_threads = num_threads
        self._interpreter = None
        self._input = None
        self._output = None

        self._load_model()
        logger.info("TFLite model loaded: %s (threads=%d, in=%d, out=%d)",
                    model_path, num_threads, self.input_size, self.output_size)

    @log_timing
    def _load_model(self):
        """Create the interpreter and look up I/O tensors."""
        self._interpreter = tf.lite.Interpreter(
            model_path=self._model_path,
            num_threads=self._num_threads,
        )
        self._interpreter.allocate_tensors()
        self._input = self._interpreter.get_input_details()[0]
        self._output = self._interpreter.get_output_details()[0]

    def run(self, features, output):
        """Run inference on a single feature vector.

        Args:
            features: np.ndarray of shape (input_size,), float32
            output: pre-allocated np.ndarray of shape (output_size,), float32;
                    overwritten with the raw per-label scores

        Returns:
            ``output``
        """
        if self._interpreter is None:
            raise ConfigurationError("TFLite engine is closed")

        features = np.asarray(features, dtype=np.float32).ravel()
        if features.size != self.input_size:
            raise ConfigurationError(
                "Feature vector has %d values, model expects %d"
                % (features.size, self.input_size)
            )
        if output.size != self.output_size:
            raise ConfigurationError(
                "Output buffer has %d values, model produces %d"
                % (output.size, self.output_size)
            )

        self._interpreter.set_tensor(
            self._input["index"],
            features.reshape(self._input["shape"]).astype(self._input["dtype"]),
        )
        self._interpreter.invoke()
        scores = self._interpreter.get_tensor(self._output["index"])
        np.copyto(output.reshape(-1), scores.reshape(-1).astype(np.float32))
        return output

    @property
    def input_size(self):
        return int(np.prod(self._input["shape"]))

    @property
    def output_size(self):
        """Number of output classes."""
        return int(np.prod(self._output["shape"]))

    @property
    def num_threads(self):
        return self._num_threads

    @property
    def is_open(self):
        return self._interpreter is not None

    def close(self):
        """Release the interpreter. Safe to call more than once."""
        if self._interpreter is None:
            return
        self._interpreter = None
        logger.info("TFLite engine closed: %s", self._model_path)
