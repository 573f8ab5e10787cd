"""
Exception types raised by the classification core.
"""


class ClassifierError(Exception):
    """Base class for all classification core errors."""


class ConfigurationError(ClassifierError):
    """Raised on programming/config mismatches.

    Examples: score vector width differs from the filter state, labels do not
    match the model output, or a closed session is asked to classify.
    """


class InitializationError(ClassifierError):
    """Raised when a session cannot be constructed (missing label/model file)."""
