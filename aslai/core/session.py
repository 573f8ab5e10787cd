"""
Classification session: one frame in, one ranked report out.

Orchestrates the detect -> infer -> smooth -> rank cycle for a single
camera stream. The session exclusively owns the filter state and the
inference engine; both live until ``close()``.

Per frame:
    1. Rank the scores stabilized by the *previous* frame (the display is
       one frame behind unless ``ReportOrder.AFTER_UPDATE`` is configured)
    2. Stop with a notice if the engine is not loaded
    3. Submit the frame to the landmark source and snapshot its latest result
    4. No hand -> done, filter state untouched
    5. Hand -> feature vector -> timed inference -> smoothing
"""

import time
import logging
import threading

import numpy as np

from aslai.core.errors import ConfigurationError, InitializationError
from aslai.core.types import (
    FEATURE_SIZE, FILTER_FACTOR, FILTER_STAGES, RESULTS_TO_SHOW,
    UNINITIALIZED_NOTICE, FrameReport, RankedReport, ReportOrder, SessionState,
)
from aslai.recognition.labels import load_labels
from aslai.recognition.ranker import LabelRanker
from aslai.recognition.smoother import ProbabilitySmoother
from aslai.utils.performance import Timer

logger = logging.getLogger(__name__)


def _default_engine_factory(model_path, num_threads):
    from aslai.models.tflite_engine import TFLiteEngine
    return TFLiteEngine(model_path, num_threads=num_threads)


class ClassificationSession:
    """Classifies hand signs frame by frame with temporal smoothing.

    Only one call runs at a time: ``classify_frame``, ``set_num_threads``,
    ``reset`` and ``close`` all hold the session lock, so a reconfiguration
    never interleaves with an in-flight frame.

    Example:
        >>> with ClassificationSession("labels.txt", "model.tflite", source) as session:
        ...     report = session.classify_frame(frame)
        ...     print(report.text)
    """

    def __init__(
        self,
        labels_path,
        model_path,
        landmark_source,
        num_threads=1,
        engine_factory=None,
        factor=FILTER_FACTOR,
        stages=FILTER_STAGES,
        top_k=RESULTS_TO_SHOW,
        report_order=ReportOrder.BEFORE_UPDATE,
    ):
        """
        Args:
            labels_path: Label file, one line of comma-separated names
            model_path: Model file handed to ``engine_factory``
            landmark_source: LandmarkSource supplying hand landmarks per frame
            num_threads: Worker threads for the inference engine
            engine_factory: ``callable(model_path, num_threads)`` returning an
                engine with ``run(features, output)``, ``input_size``,
                ``output_size`` and ``close()``. Defaults to TFLiteEngine.
            factor: Low-pass filter factor
            stages: Number of cascaded filter stages
            top_k: Number of labels in each report
            report_order: Rank before (default) or after the smoothing update

        Raises:
            InitializationError: Label or model file missing/unreadable
            ConfigurationError: Engine shape does not match labels/features
        """
        self._state = SessionState.UNINITIALIZED
        self._lock = threading.Lock()

        self._labels = load_labels(labels_path)
        self._smoother = ProbabilitySmoother(len(self._labels), factor=factor, stages=stages)
        self._ranker = LabelRanker(top_k)
        self._report_order = report_order
        self._source = landmark_source

        # Engine last: nothing after it can fail and leave it open
        self._model_path = model_path
        self._num_threads = num_threads
        self._engine_factory = engine_factory or _default_engine_factory
        self._engine = None
        self._engine = self._create_engine()

        # Current scores: raw inference output, overwritten by the smoother
        self._scores = np.zeros(len(self._labels), dtype=np.float32)

        self._frame_count = 0
        self._skipped_count = 0
        self._state = SessionState.READY

        logger.info("Classification session ready (%d labels, %d threads, report %s)",
                    len(self._labels), num_threads, report_order.value)

    @classmethod
    def from_config(cls, config, landmark_source, engine_factory=None):
        """Build a session from a loaded :class:`Config`."""
        return cls(
            labels_path=config.resolve_path("model.labels_path"),
            model_path=config.resolve_path("model.model_path"),
            landmark_source=landmark_source,
            num_threads=config.get("model.num_threads", 1),
            engine_factory=engine_factory,
            factor=config.get("smoothing.factor", FILTER_FACTOR),
            stages=config.get("smoothing.stages", FILTER_STAGES),
            top_k=config.get("recognition.top_k", RESULTS_TO_SHOW),
            report_order=ReportOrder.from_string(
                config.get("recognition.report_order", "before_update")),
        )

    # ------------------------------------------------------------------
    # Engine lifecycle
    # ------------------------------------------------------------------

    def _create_engine(self):
        """Load the engine and check it against the labels and feature size."""
        try:
            engine = self._engine_factory(self._model_path, self._num_threads)
        except (OSError, RuntimeError, ValueError) as e:
            raise InitializationError(f"Cannot load model {self._model_path}: {e}") from e

        if engine.output_size != len(self._labels) or engine.input_size != FEATURE_SIZE:
            engine.close()
            raise ConfigurationError(
                f"Model maps {engine.input_size} -> {engine.output_size} values, "
                f"expected {FEATURE_SIZE} -> {len(self._labels)} labels"
            )
        return engine

    def _release_engine(self):
        if self._engine is not None:
            self._engine.close()
            self._engine = None

    @property
    def engine_ready(self) -> bool:
        return self._engine is not None and getattr(self._engine, "is_open", True)

    def set_num_threads(self, num_threads: int):
        """Rebuild the inference engine with a new thread count.

        The filter state is kept. If the new engine fails to load, the
        error propagates and later frames report the uninitialized notice.
        """
        if num_threads < 1:
            raise ConfigurationError(f"num_threads must be >= 1, got {num_threads}")

        with self._lock:
            self._require_open()
            logger.info("Reconfiguring engine: %d -> %d threads",
                        self._num_threads, num_threads)
            self._num_threads = num_threads
            self._release_engine()
            self._engine = self._create_engine()

    def reset(self):
        """Zero the filter state and the current scores."""
        with self._lock:
            self._require_open()
            self._smoother.reset()
            self._scores.fill(0.0)
            logger.debug("Filter state reset")

    def close(self):
        """Release the inference engine. Safe to call more than once."""
        with self._lock:
            if self._state is SessionState.CLOSED:
                return
            self._release_engine()
            self._state = SessionState.CLOSED
            logger.info("Classification session closed after %d frames (%d skipped)",
                        self._frame_count, self._skipped_count)

    def _require_open(self):
        if self._state is SessionState.CLOSED:
            raise ConfigurationError("Classification session is closed")

    # ------------------------------------------------------------------
    # Per-frame classification
    # ------------------------------------------------------------------

    def rank(self) -> RankedReport:
        """Rank the current stabilized scores without touching any state."""
        return self._ranker.rank(self._labels, self._scores)

    def classify_frame(self, frame, timestamp_ms=None) -> FrameReport:
        """Classify one frame.

        Args:
            frame: Image handed to the landmark source (BGR numpy array)
            timestamp_ms: Frame timestamp; wall clock when omitted

        Returns:
            FrameReport whose ``text`` holds the ranked labels, then the
            inference time, then any notices

        Raises:
            ConfigurationError: If the session is closed
        """
        with self._lock:
            self._require_open()
            self._frame_count += 1
            try:
                return self._classify_locked(frame, timestamp_ms)
            finally:
                self._state = SessionState.READY

    def _classify_locked(self, frame, timestamp_ms) -> FrameReport:
        ranked = None
        if self._report_order is ReportOrder.BEFORE_UPDATE:
            ranked = self.rank()

        report = FrameReport(ranked, frame_id=self._frame_count)

        if not self.engine_ready:
            logger.error("Image classifier has not been initialized; Skipped.")
            report.notices.append(UNINITIALIZED_NOTICE)
            return self._finish(report)

        # --- Detection ---
        self._state = SessionState.DETECTING
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        self._source.submit(frame, timestamp_ms)

        # A detector that has not answered yet reads as "no hands"
        snapshot = self._source.snapshot()
        if not snapshot.hand_detected:
            self._skipped_count += 1
            return self._finish(report)

        report.hand_detected = True
        features = snapshot.primary_hand.to_feature_vector()

        # --- Inference ---
        self._state = SessionState.INFERRING
        with Timer("inference") as timer:
            self._engine.run(features, self._scores)
        logger.debug("Timecost to run model inference: %.2fms", timer.elapsed_ms)

        # --- Smoothing ---
        self._state = SessionState.SMOOTHING
        self._smoother.apply(self._scores)

        report.inference_ms = timer.elapsed_ms
        return self._finish(report)

    def _finish(self, report: FrameReport) -> FrameReport:
        self._state = SessionState.REPORTING
        if report.ranked is None:
            report.ranked = self.rank()
        return report

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def labels(self):
        return self._labels

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def num_threads(self) -> int:
        return self._num_threads

    @property
    def report_order(self) -> ReportOrder:
        return self._report_order

    @property
    def scores(self) -> np.ndarray:
        """Copy of the current stabilized scores."""
        return self._scores.copy()

    @property
    def filter_state(self) -> np.ndarray:
        """Read-only copy of the (stages, labels) filter state."""
        return self._smoother.state

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def skipped_count(self) -> int:
        return self._skipped_count

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
