"""Claim-assessment oracle port and its algorithmic default.

Rounds 9 (expert) and 10 (consensus) ask an AssessmentOracle for:
- assess(): a confidence per claim
- consensus(): one overall confidence

AlgorithmicOracle is the null-object default. It never calls out and
implements the documented fallbacks:
- assess: min(1, supporting_ratio * 1.2 + 0.3) per claim
- consensus: mean over claims of the weighted confidence history
  (weight = 1 + 0.5 * round_index, so later rounds count more)

External oracles (see research_verifier.llm.gemini_oracle) answer in free
text; parse_claim_assessments() and parse_consensus() pull the expected JSON
out of it defensively.
"""

import json
import math
import re
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field

from research_verifier.config.verification_constants import (
    FALLBACK_BASE_CONFIDENCE,
    FALLBACK_SUPPORT_MULTIPLIER,
    HISTORY_WEIGHT_STEP,
    NEUTRAL_SCORE,
)
from research_verifier.schemas import Source

_CODE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


class ClaimSummary(BaseModel):
    """What an oracle gets to know about one claim.

    Attributes:
        index: Position of the claim in the run (the claimIndex oracles answer with).
        claim_id: Claim identifier.
        text: Claim text.
        supporting_sources: Number of distinct sources that matched the claim.
        total_sources: Number of sources in the run.
        confidence_history: Per-round confidences recorded so far.
    """

    index: int = Field(..., ge=0)
    claim_id: str
    text: str
    supporting_sources: int = Field(0, ge=0)
    total_sources: int = Field(0, ge=0)
    confidence_history: list[float] = Field(default_factory=list)

    @property
    def supporting_ratio(self) -> float:
        if not self.total_sources:
            return 0.0
        return self.supporting_sources / self.total_sources

    @property
    def average_confidence(self) -> float:
        if not self.confidence_history:
            return NEUTRAL_SCORE
        return sum(self.confidence_history) / len(self.confidence_history)


def weighted_confidence(history: Sequence[float]) -> float:
    """Weighted mean of a confidence history, later entries weighted more (0.5 if empty)."""
    if not history:
        return NEUTRAL_SCORE
    weights = [1.0 + HISTORY_WEIGHT_STEP * index for index in range(len(history))]
    return sum(value * weight for value, weight in zip(history, weights)) / sum(weights)


class AssessmentOracle(ABC):
    """Optional external claim assessor used by the expert and consensus rounds.

    external is False for implementations that never leave the process; the
    engine uses it to pick the round's confidence bump and to decide whether a
    failure needs a fallback.
    """

    external: bool = False

    @abstractmethod
    async def assess(
        self,
        topic: str,
        claims: Sequence[ClaimSummary],
        sources: Sequence[Source],
    ) -> dict[int, float]:
        """Confidence per claim index. Missing indices mean "no assessment"."""

    @abstractmethod
    async def consensus(self, topic: str, claims: Sequence[ClaimSummary]) -> Optional[float]:
        """Overall confidence in [0, 1], or None when no answer could be produced."""


class AlgorithmicOracle(AssessmentOracle):
    """Null-object oracle computing the documented algorithmic fallbacks."""

    external = False

    async def assess(
        self,
        topic: str,
        claims: Sequence[ClaimSummary],
        sources: Sequence[Source],
    ) -> dict[int, float]:
        return {
            claim.index: min(
                1.0,
                claim.supporting_ratio * FALLBACK_SUPPORT_MULTIPLIER + FALLBACK_BASE_CONFIDENCE,
            )
            for claim in claims
        }

    async def consensus(self, topic: str, claims: Sequence[ClaimSummary]) -> Optional[float]:
        if not claims:
            return NEUTRAL_SCORE
        scores = [weighted_confidence(claim.confidence_history) for claim in claims]
        return sum(scores) / len(scores)


# ── Response parsing ──────────────────────────────────────────────────────


def extract_json_payload(response_text: str) -> Optional[Any]:
    """
    Extract the first JSON array or object from free-form oracle text.

    Handles:
    - Raw JSON
    - JSON in a markdown code block (```json ... ```)
    - JSON surrounded by prose

    Args:
        response_text: Raw oracle response

    Returns:
        Parsed JSON value, or None if nothing parses
    """
    if not response_text:
        return None

    text = response_text.strip()
    block = _CODE_BLOCK.search(text)
    if block:
        text = block.group(1).strip()

    decoder = json.JSONDecoder()
    for position, char in enumerate(text):
        if char not in "[{":
            continue
        try:
            payload, _ = decoder.raw_decode(text, position)
        except json.JSONDecodeError:
            continue
        return payload
    return None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    # NaN slips through min/max clamping as 0.0
    return number if math.isfinite(number) else None


def parse_claim_assessments(response_text: str, claim_count: int) -> dict[int, float]:
    """
    Parse [{claimIndex, confidence, assessment}, ...] out of oracle text.

    Entries with a missing or out-of-range claimIndex, or a non-numeric
    confidence, are skipped. Confidences are clamped to [0, 1].
    """
    payload = extract_json_payload(response_text)
    if isinstance(payload, dict):
        payload = payload.get("assessments", [payload])
    if not isinstance(payload, list):
        return {}

    assessments: dict[int, float] = {}
    for item in payload:
        if not isinstance(item, dict):
            continue
        index = item.get("claimIndex", item.get("claim_index"))
        confidence = _as_float(item.get("confidence"))
        if not isinstance(index, int) or isinstance(index, bool) or confidence is None:
            continue
        if not 0 <= index < claim_count:
            continue
        assessments[index] = min(1.0, max(0.0, confidence))
    return assessments


def parse_consensus(response_text: str) -> Optional[float]:
    """
    Parse one overall confidence out of oracle text.

    Accepts {"confidence": x}, {"overallConfidence": x} or a bare number.
    Returns None unless the value is within [0, 1].
    """
    payload = extract_json_payload(response_text)
    if isinstance(payload, dict):
        value = _as_float(
            payload.get("confidence", payload.get("overallConfidence", payload.get("overall_confidence")))
        )
    else:
        value = _as_float(response_text)

    if value is None or not 0.0 <= value <= 1.0:
        return None
    return value


__all__ = [
    "AssessmentOracle",
    "AlgorithmicOracle",
    "ClaimSummary",
    "weighted_confidence",
    "extract_json_payload",
    "parse_claim_assessments",
    "parse_consensus",
]
