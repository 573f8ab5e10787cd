"""Label loading, score smoothing and top-K ranking."""
from .labels import load_labels, parse_labels
from .ranker import LabelRanker
from .smoother import ProbabilitySmoother

__all__ = [
    "load_labels",
    "parse_labels",
    "LabelRanker",
    "ProbabilitySmoother",
]
