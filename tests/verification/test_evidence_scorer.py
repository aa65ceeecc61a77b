"""Tests for LexicalEvidenceScorer."""

import pytest

from research_verifier.verification.evidence_scorer import (
    EvidenceScorer,
    LexicalEvidenceScorer,
)


@pytest.fixture
def scorer():
    return LexicalEvidenceScorer()


class TestOverlap:
    """Tests for token overlap."""

    def test_tokenize_drops_short_tokens_and_punctuation(self, scorer):
        """Tokens are lower-cased, punctuation-free and 3+ characters."""
        assert scorer.tokenize("In 2024, the AVERAGE cost was 21M!") == {
            "2024",
            "the",
            "average",
            "cost",
            "was",
            "21m",
        }

    def test_jaccard(self, scorer):
        """Overlap is |intersection| / |union|."""
        assert scorer.overlap("Test claim 1", "Test Source") == pytest.approx(1 / 3)

    def test_empty_text(self, scorer):
        """Empty token sets overlap 0.0."""
        assert scorer.overlap("", "Test Source") == 0.0
        assert scorer.overlap("a b", "Test Source") == 0.0

    def test_support_threshold_is_exclusive(self, scorer):
        """Overlap must exceed 0.15 to support a claim."""
        assert scorer.supports(0.16)
        assert not scorer.supports(0.15)

    def test_custom_threshold(self):
        """Thresholds are configurable."""
        strict = LexicalEvidenceScorer(support_threshold=0.5)
        assert not strict.supports(strict.overlap("Test claim 1", "Test Source"))

    def test_satisfies_protocol(self, scorer):
        """LexicalEvidenceScorer fits the EvidenceScorer seam."""
        evidence_scorer: EvidenceScorer = scorer
        assert evidence_scorer.numeric_values("none") == []


class TestNumericDispersion:
    """Tests for number extraction and the coefficient of variation."""

    def test_numeric_values(self, scorer):
        """Thousands separators are dropped, decimals kept."""
        assert scorer.numeric_values("From 1,200 to 3.5 and 40") == [1200.0, 3.5, 40.0]

    def test_coefficient_of_variation(self):
        """Population stddev over mean."""
        assert LexicalEvidenceScorer.coefficient_of_variation([10, 30]) == pytest.approx(0.5)
        assert LexicalEvidenceScorer.coefficient_of_variation([]) == 0.0
        assert LexicalEvidenceScorer.coefficient_of_variation([0, 0]) == 0.0

    def test_divergence_threshold_is_exclusive(self, scorer):
        """CV must exceed 0.5 to be divergent."""
        assert not scorer.is_divergent([10, 30])
        assert scorer.is_divergent([10, 100])
        assert not scorer.is_divergent([100])
