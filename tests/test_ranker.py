"""
Tests for Label Ranker
======================
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from aslai.core.errors import ConfigurationError
from aslai.core.types import RankedEntry, RankedReport
from aslai.recognition.ranker import LabelRanker


class TestLabelRanker:
    """Test suite for top-K ranking."""

    @pytest.fixture
    def ranker(self):
        """Create ranker with the default K=3."""
        return LabelRanker()

    def test_top_three_of_four(self, ranker):
        """Test the documented example: A is excluded."""
        report = ranker.rank(["A", "B", "C", "D"], [0.10, 0.90, 0.50, 0.20])

        assert [e.label for e in report] == ["B", "C", "D"]
        assert [e.score for e in report] == pytest.approx([0.90, 0.50, 0.20])

    def test_render_format(self, ranker):
        """Test label lines with two spaces and two decimals."""
        text = ranker.render(["A", "B", "C", "D"], [0.10, 0.90, 0.50, 0.20])

        assert text == "B:  0.90\nC:  0.50\nD:  0.20\n"

    def test_render_float32_scores(self, ranker):
        """Test that float32 rounding does not leak into the text."""
        scores = np.array([0.9, 0.123, 0.456], dtype=np.float32)
        text = ranker.render(["x", "y", "z"], scores)

        assert text == "x:  0.90\nz:  0.46\ny:  0.12\n"

    def test_fewer_labels_than_k(self, ranker):
        """Test that N < K returns N entries."""
        report = ranker.rank(["A", "B"], [0.3, 0.7])

        assert len(report) == 2
        assert report.top == RankedEntry("B", pytest.approx(0.7))

    def test_empty_label_set(self, ranker):
        """Test that no labels gives an empty report, not an error."""
        report = ranker.rank([], np.zeros(0, dtype=np.float32))

        assert len(report) == 0
        assert report.top is None
        assert report.render() == ""

    def test_never_more_than_k_and_non_increasing(self, ranker):
        """Test bounded size and ordering over random inputs."""
        rng = np.random.default_rng(7)
        for n in range(0, 12):
            labels = [f"L{i}" for i in range(n)]
            scores = rng.random(n).astype(np.float32)

            report = ranker.rank(labels, scores)
            ranked_scores = [e.score for e in report]

            assert len(report) == min(n, 3)
            assert ranked_scores == sorted(ranked_scores, reverse=True)
            if n:
                assert ranked_scores[0] == pytest.approx(float(scores.max()))

    def test_ties_prefer_lower_index(self, ranker):
        """Test deterministic tie-breaking by input order."""
        report = ranker.rank(["A", "B", "C", "D", "E"], [0.0, 0.0, 0.0, 0.0, 0.0])

        assert [e.label for e in report] == ["A", "B", "C"]

    def test_tie_at_cutoff(self, ranker):
        """Test that the later of two equal scores is evicted at the cutoff."""
        report = ranker.rank(["A", "B", "C", "D"], [0.9, 0.5, 0.2, 0.5])

        assert [e.label for e in report] == ["A", "B", "D"]

    def test_custom_k(self):
        """Test ranking with K=1."""
        report = LabelRanker(top_k=1).rank(["A", "B", "C"], [0.2, 0.3, 0.1])

        assert [e.label for e in report] == ["B"]

    def test_no_state_between_calls(self, ranker):
        """Test that entries from one call never leak into the next."""
        ranker.rank(["A", "B", "C"], [0.9, 0.8, 0.7])
        report = ranker.rank(["X"], [0.1])

        assert [e.label for e in report] == ["X"]

    def test_length_mismatch_raises(self, ranker):
        """Test that misaligned labels and scores are rejected."""
        with pytest.raises(ConfigurationError):
            ranker.rank(["A", "B"], [0.1])

    def test_invalid_k(self):
        """Test that K must be positive."""
        with pytest.raises(ConfigurationError):
            LabelRanker(top_k=0)


class TestRankedReport:
    """Test suite for report containers."""

    def test_entry_render(self):
        """Test single entry formatting."""
        assert RankedEntry("hello", 0.5).render() == "hello:  0.50\n"

    def test_negative_score_render(self):
        """Test that raw, unnormalized scores render as-is."""
        assert RankedEntry("A", -1.234).render() == "A:  -1.23\n"

    def test_report_equality(self):
        """Test report comparison by entries."""
        first = RankedReport([RankedEntry("A", 0.5)])
        second = RankedReport((RankedEntry("A", 0.5),))

        assert first == second
        assert first[0].label == "A"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
