"""Shared types and errors.

The session lives in ``aslai.core.session``; it is not imported here to
keep ``aslai.core`` importable from the recognition and detection modules.
"""
from .errors import ClassifierError, ConfigurationError, InitializationError
from .types import FrameReport, RankedEntry, RankedReport, ReportOrder, SessionState

__all__ = [
    "ClassifierError",
    "ConfigurationError",
    "InitializationError",
    "FrameReport",
    "RankedEntry",
    "RankedReport",
    "ReportOrder",
    "SessionState",
]
