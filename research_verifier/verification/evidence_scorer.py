"""Lexical evidence scoring: the stand-in for semantic verification.

The verification rounds never look at text directly. They ask an
EvidenceScorer three questions:
- How much does a claim overlap a source? (support)
- Which numbers does a claim state? (statistical dispersion)
- Are those numbers divergent enough to flag?

LexicalEvidenceScorer answers with token overlap and the coefficient of
variation. Thresholds:
- Jaccard overlap > 0.15 marks a source as supporting
- CV > 0.5 marks a claim's numbers as divergent

A similarity or entailment model can replace it by implementing the same
protocol; the round state machine does not change.
"""

import math
import re
from typing import Protocol, Sequence

from research_verifier.config.verification_constants import (
    CV_DIVERGENCE_THRESHOLD,
    MIN_TOKEN_LENGTH,
    SUPPORT_OVERLAP_THRESHOLD,
)

_PUNCTUATION = re.compile(r"[^\w\s]")
_NUMBER = re.compile(r"\d+(?:,\d{3})*(?:\.\d+)?")


class EvidenceScorer(Protocol):
    """Scoring seam used by the verification rounds."""

    def overlap(self, claim_text: str, evidence_text: str) -> float:
        ...

    def supports(self, overlap: float) -> bool:
        ...

    def numeric_values(self, text: str) -> list[float]:
        ...

    def is_divergent(self, values: Sequence[float]) -> bool:
        ...


class LexicalEvidenceScorer:
    """Token-overlap and dispersion heuristics.

    Attributes:
        support_threshold: Overlap above which a source supports a claim.
        divergence_threshold: CV above which numeric values are divergent.
        min_token_length: Tokens must be at least this long to count.
    """

    def __init__(
        self,
        support_threshold: float = SUPPORT_OVERLAP_THRESHOLD,
        divergence_threshold: float = CV_DIVERGENCE_THRESHOLD,
        min_token_length: int = MIN_TOKEN_LENGTH,
    ):
        self.support_threshold = support_threshold
        self.divergence_threshold = divergence_threshold
        self.min_token_length = min_token_length

    def tokenize(self, text: str) -> set[str]:
        """Lower-case, strip punctuation, keep tokens of min_token_length+."""
        cleaned = _PUNCTUATION.sub(" ", text.lower())
        return {token for token in cleaned.split() if len(token) >= self.min_token_length}

    def overlap(self, claim_text: str, evidence_text: str) -> float:
        """Jaccard similarity of the two token sets (0.0 if either is empty)."""
        claim_tokens = self.tokenize(claim_text)
        evidence_tokens = self.tokenize(evidence_text)
        if not claim_tokens or not evidence_tokens:
            return 0.0
        union = claim_tokens | evidence_tokens
        return len(claim_tokens & evidence_tokens) / len(union)

    def supports(self, overlap: float) -> bool:
        return overlap > self.support_threshold

    def numeric_values(self, text: str) -> list[float]:
        """Numbers stated in the text; thousands separators are dropped."""
        return [float(match.replace(",", "")) for match in _NUMBER.findall(text)]

    @staticmethod
    def coefficient_of_variation(values: Sequence[float]) -> float:
        """Population stddev / mean; 0.0 for no values or a zero mean."""
        if not values:
            return 0.0
        mean = sum(values) / len(values)
        if mean == 0:
            return 0.0
        variance = sum((value - mean) ** 2 for value in values) / len(values)
        return math.sqrt(variance) / mean

    def is_divergent(self, values: Sequence[float]) -> bool:
        return self.coefficient_of_variation(values) > self.divergence_threshold


__all__ = ["EvidenceScorer", "LexicalEvidenceScorer"]
