"""
Top-K label ranking over stabilized scores.
"""

import heapq
import logging
from typing import Sequence

from aslai.core.errors import ConfigurationError
from aslai.core.types import RESULTS_TO_SHOW, RankedEntry, RankedReport

logger = logging.getLogger(__name__)


class LabelRanker:
    """Selects the K best-scoring labels without sorting the whole set.

    A bounded min-heap of capacity K is rebuilt on every call. Equal scores
    rank the lower label index first, so the higher index is evicted first.
    """

    def __init__(self, top_k: int = RESULTS_TO_SHOW):
        if top_k < 1:
            raise ConfigurationError(f"top_k must be >= 1, got {top_k}")
        self._top_k = top_k

    def rank(self, labels: Sequence[str], scores) -> RankedReport:
        """Rank labels by score.

        Args:
            labels: LabelSet, index-aligned with ``scores``
            scores: Sequence or array of stabilized scores

        Returns:
            RankedReport with at most K entries, descending by score
        """
        if len(labels) != len(scores):
            raise ConfigurationError(
                f"{len(labels)} labels but {len(scores)} scores"
            )

        heap = []
        for index, (label, score) in enumerate(zip(labels, scores)):
            # Negated index: among equal scores the later label is the minimum
            heapq.heappush(heap, (float(score), -index, label))
            if len(heap) > self._top_k:
                heapq.heappop(heap)

        ascending = [heapq.heappop(heap) for _ in range(len(heap))]
        entries = [RankedEntry(label, score) for score, _, label in reversed(ascending)]
        return RankedReport(entries)

    def render(self, labels: Sequence[str], scores) -> str:
        """Rank and format as newline-terminated ``label:  score`` lines."""
        return self.rank(labels, scores).render()

    @property
    def top_k(self) -> int:
        return self._top_k
