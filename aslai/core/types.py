"""
Shared domain types for the sign classification core.

Centralizes enums and data containers used across modules
to eliminate circular imports and ensure type consistency.
"""

from enum import Enum
from typing import NamedTuple, Optional, Tuple

from aslai.core.errors import ConfigurationError


# =============================================================================
# Constants
# =============================================================================

NUM_LANDMARKS = 21
COORDS_PER_LANDMARK = 3
FEATURE_SIZE = NUM_LANDMARKS * COORDS_PER_LANDMARK

FILTER_STAGES = 3
FILTER_FACTOR = 0.4
RESULTS_TO_SHOW = 3

UNINITIALIZED_NOTICE = "Uninitialized Classifier."


# =============================================================================
# Session States
# =============================================================================

class SessionState(Enum):
    """Lifecycle and per-frame states of a classification session."""
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    DETECTING = "detecting"
    INFERRING = "inferring"
    SMOOTHING = "smoothing"
    REPORTING = "reporting"
    CLOSED = "closed"


class ReportOrder(Enum):
    """When the ranked report is taken relative to the smoothing update."""
    BEFORE_UPDATE = "before_update"
    AFTER_UPDATE = "after_update"

    @classmethod
    def from_string(cls, name: str) -> 'ReportOrder':
        """Convert a config string to ReportOrder.

        Raises:
            ConfigurationError: Unknown name
        """
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            choices = ", ".join(order.value for order in cls)
            raise ConfigurationError(
                f"Unknown report order {name!r}, expected one of: {choices}") from None


# =============================================================================
# Data Containers
# =============================================================================

class RankedEntry(NamedTuple):
    """A label with its stabilized score."""
    label: str
    score: float

    def render(self) -> str:
        return f"{self.label}:  {self.score:4.2f}\n"


class RankedReport:
    """Up to K ranked entries, highest score first."""

    __slots__ = ("entries",)

    def __init__(self, entries=()):
        self.entries: Tuple[RankedEntry, ...] = tuple(entries)

    def __repr__(self):
        return f"RankedReport({list(self.entries)!r})"

    def __eq__(self, other):
        if isinstance(other, RankedReport):
            return self.entries == other.entries
        return NotImplemented

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __getitem__(self, index):
        return self.entries[index]

    @property
    def top(self) -> Optional[RankedEntry]:
        return self.entries[0] if self.entries else None

    def render(self) -> str:
        """Concatenate one newline-terminated line per entry, in rank order."""
        return "".join(entry.render() for entry in self.entries)


class FrameReport:
    """Result of classifying one frame.

    ``text`` is what the UI shows: ranked lines, then the elapsed
    inference time, then any status notices.
    """

    __slots__ = ("ranked", "hand_detected", "inference_ms", "notices", "frame_id")

    def __init__(self, ranked: RankedReport, frame_id: int = 0):
        self.ranked = ranked
        self.hand_detected = False
        self.inference_ms: Optional[float] = None
        self.notices = []
        self.frame_id = frame_id

    @property
    def text(self) -> str:
        parts = [self.ranked.render()]
        if self.inference_ms is not None:
            parts.append("%d ms" % self.inference_ms)
        parts.extend(self.notices)
        return "".join(parts)

    def __repr__(self):
        top = self.ranked.top
        return "FrameReport(frame=%d, top=%s, hand=%s)" % (
            self.frame_id, top.label if top else None, self.hand_detected)
