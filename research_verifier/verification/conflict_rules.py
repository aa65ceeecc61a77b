"""Conflict classification and resolution rules.

Single home for the conflict heuristics. Both call shapes use it:
- VerificationEngine rounds 5-7 detect conflicts pairwise and round 8
  resolves them with resolve_conflict()
- ConflictResolver classifies a claim group with classify_conflict() and
  resolves with resolve_conflict()

Classification priority (first match wins):
1. SCOPE_DIFFERENCE: any claim mentions a scope keyword
2. TEMPORAL_DIFFERENCE: claims' first years contain 2+ distinct values
3. STATISTICAL_METHOD: any claim mentions a statistical measure
4. MEASUREMENT_UNIT: any claim mentions a ranking/metric word
5. TRUE_CONTRADICTION: everything else (and any group of fewer than 2 claims)

Resolution never raises. Unknown types resolve to a manual-review result
with resolved=False.
"""

import re
from typing import Callable, Iterable, Optional, Sequence, Union

from research_verifier.config.logging import get_logger
from research_verifier.config.verification_constants import (
    CREDIBILITY_SPREAD_THRESHOLD,
    DETECTION_CONFIDENCE,
    MEASUREMENT_KEYWORDS,
    RESOLUTION_CONFIDENCE,
    SCOPE_KEYWORDS,
    STATISTICAL_KEYWORDS,
)
from research_verifier.schemas import (
    Claim,
    Conflict,
    ConflictType,
    ResolutionResult,
    Source,
)

_YEAR = re.compile(r"(?<!\d)20\d{2}(?!\d)")
_FIRST_NUMBER = re.compile(r"\d[\d,]*(?:\.\d+)?")

_logger = get_logger("verification.conflict_rules")

DETECTION_STRATEGIES: dict[ConflictType, str] = {
    ConflictType.TEMPORAL_DIFFERENCE: "Use most recent data with temporal context",
    ConflictType.STATISTICAL_METHOD: "Report all values with methodology context",
    ConflictType.SCOPE_DIFFERENCE: "Clarify scope and present both with context",
}


# ── Text signals ──────────────────────────────────────────────────────────


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match against any keyword."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def has_scope_keyword(text: str) -> bool:
    return contains_any(text, SCOPE_KEYWORDS)


def first_year(text: str) -> Optional[int]:
    """First 20xx year mentioned in the text, or None."""
    match = _YEAR.search(text)
    return int(match.group(0)) if match else None


# ── Detection ─────────────────────────────────────────────────────────────


def classify_conflict(claims: Sequence[Claim]) -> ConflictType:
    """Classify a group of disagreeing claims by keyword priority."""
    if len(claims) < 2:
        return ConflictType.TRUE_CONTRADICTION

    texts = [claim.text for claim in claims]

    if any(has_scope_keyword(text) for text in texts):
        return ConflictType.SCOPE_DIFFERENCE

    years = {year for year in (first_year(text) for text in texts) if year is not None}
    if len(years) >= 2:
        return ConflictType.TEMPORAL_DIFFERENCE

    if any(contains_any(text, STATISTICAL_KEYWORDS) for text in texts):
        return ConflictType.STATISTICAL_METHOD

    if any(contains_any(text, MEASUREMENT_KEYWORDS) for text in texts):
        return ConflictType.MEASUREMENT_UNIT

    return ConflictType.TRUE_CONTRADICTION


def is_temporal_conflict(claim_a: Claim, claim_b: Claim) -> bool:
    """Both claims name a year and their first years differ."""
    year_a = first_year(claim_a.text)
    year_b = first_year(claim_b.text)
    return year_a is not None and year_b is not None and year_a != year_b


def is_scope_conflict(claim_a: Claim, claim_b: Claim) -> bool:
    """Both claims independently qualify their scope."""
    return has_scope_keyword(claim_a.text) and has_scope_keyword(claim_b.text)


def sources_for_claims(claims: Sequence[Claim], sources: Sequence[Source]) -> list[Source]:
    """Sources any of the claims was extracted from, in source order."""
    source_ids = {source_id for claim in claims for source_id in claim.extracted_from}
    return [source for source in sources if source.id in source_ids]


def build_conflict(
    conflict_type: ConflictType,
    claims: Sequence[Claim],
    sources: Sequence[Source],
) -> Conflict:
    """New unresolved conflict with the detection strategy and confidence for its type."""
    return Conflict(
        type=conflict_type,
        claims=list(claims),
        sources=sources_for_claims(claims, sources),
        resolution_strategy=DETECTION_STRATEGIES.get(conflict_type, ""),
        resolved=False,
        confidence=DETECTION_CONFIDENCE.get(conflict_type.value, 0.5),
    )


# ── Resolution ────────────────────────────────────────────────────────────


def resolve_conflict(conflict: Conflict) -> ResolutionResult:
    """Resolve a conflict according to its type."""
    handler = _RESOLVERS.get(conflict.type) if isinstance(conflict.type, ConflictType) else None
    if handler is None:
        return _resolve_unknown(conflict)
    return handler(conflict)


def _result(
    conflict: Conflict,
    strategy: str,
    resolution: str,
    confidence: float,
    notification: str,
    resolved: bool = True,
) -> ResolutionResult:
    return ResolutionResult(
        conflict=conflict.model_copy(update={"resolved": resolved, "resolution": resolution}),
        strategy=strategy,
        resolved=resolved,
        resolution=resolution,
        confidence=confidence,
        user_notification=notification,
    )


def scope_label(text: str) -> str:
    lowered = text.lower()
    if "only" in lowered or "just" in lowered:
        return "Limited scope"
    if "including" in lowered or "total" in lowered:
        return "Comprehensive scope"
    return "General"


def statistical_method_label(text: str) -> str:
    lowered = text.lower()
    if "average" in lowered or "mean" in lowered:
        return "Average/Mean"
    if "median" in lowered:
        return "Median"
    if "mode" in lowered:
        return "Mode"
    if "percentile" in lowered:
        return "Percentile"
    return "Unknown method"


def metric_label(text: str) -> str:
    lowered = text.lower()
    if "quality" in lowered:
        return "Quality-based"
    if "speed" in lowered:
        return "Speed-based"
    if "performance" in lowered:
        return "Performance-based"
    if "accuracy" in lowered:
        return "Accuracy-based"
    return "Custom metric"


def _first_number(text: str) -> str:
    match = _FIRST_NUMBER.search(text)
    return match.group(0) if match else "N/A"


def _resolve_scope(conflict: Conflict) -> ResolutionResult:
    lines = [f"  - {scope_label(claim.text)}: {claim.text}" for claim in conflict.claims]
    resolution = "Both values are accurate for different scopes:\n" + "\n".join(lines)
    return _result(
        conflict,
        strategy="Clarify scope and present all values with context",
        resolution=resolution,
        confidence=RESOLUTION_CONFIDENCE["SCOPE_DIFFERENCE"],
        notification=(
            "Scope difference detected: multiple valid measurements found with "
            "different scopes. All values are preserved with their contexts."
        ),
    )


def _resolve_temporal(conflict: Conflict) -> ResolutionResult:
    dated = [(first_year(claim.text), claim) for claim in conflict.claims]
    # Most recent first, claims without a year last
    dated.sort(key=lambda item: (item[0] is None, -(item[0] or 0)))

    primary_year, primary = dated[0]
    history = [f"  - {year}: {claim.text}" for year, claim in dated[1:]]
    resolution = (
        f"Using most recent data ({primary_year}): {primary.text}\n"
        "Historical context:\n" + "\n".join(history)
    )
    return _result(
        conflict,
        strategy="Use most recent data with time-series context",
        resolution=resolution,
        confidence=RESOLUTION_CONFIDENCE["TEMPORAL_DIFFERENCE"],
        notification=(
            "Temporal difference: data from different time periods found. "
            f"Using most recent ({primary_year}) with historical context provided."
        ),
    )


def _resolve_statistical(conflict: Conflict) -> ResolutionResult:
    lines = [
        f"  - {statistical_method_label(claim.text)}: {_first_number(claim.text)}"
        for claim in conflict.claims
    ]
    resolution = (
        "Multiple statistical measures available:\n"
        + "\n".join(lines)
        + "\n\nNote: Different statistical measures provide complementary insights."
    )
    return _result(
        conflict,
        strategy="Present all statistical measures with methodology notes",
        resolution=resolution,
        confidence=RESOLUTION_CONFIDENCE["STATISTICAL_METHOD"],
        notification=(
            "Statistical method difference: multiple statistical measures found "
            "(e.g. mean, median, mode). All measures are valid and preserved."
        ),
    )


def _resolve_measurement(conflict: Conflict) -> ResolutionResult:
    lines = [f"  - {metric_label(claim.text)}: {claim.text}" for claim in conflict.claims]
    resolution = (
        "Rankings vary by measurement criteria:\n"
        + "\n".join(lines)
        + "\n\nNote: Each ranking is valid for its specific measurement criterion."
    )
    return _result(
        conflict,
        strategy="Clarify measurement basis and present all with context",
        resolution=resolution,
        confidence=RESOLUTION_CONFIDENCE["MEASUREMENT_UNIT"],
        notification=(
            "Measurement unit difference: different measurement criteria detected. "
            "Each value is accurate for its specific measurement basis."
        ),
    )


def _resolve_true_contradiction(conflict: Conflict) -> ResolutionResult:
    scores = [source.credibility_score for source in conflict.sources]
    highest = max(scores, default=0.0)
    lowest = min(scores, default=0.0)

    # Rounded so that a spread of exactly 0.20 (e.g. 0.9 vs 0.7) stays on the equal-weight branch
    spread = round(highest - lowest, 9)

    if spread > CREDIBILITY_SPREAD_THRESHOLD:
        top_source = next(s for s in conflict.sources if s.credibility_score == highest)
        primary = next(
            (claim for claim in conflict.claims if top_source.id in claim.extracted_from),
            None,
        )
        alternatives = [
            f"  - {claim.text}"
            for claim in conflict.claims
            if primary is None or claim.id != primary.id
        ]
        resolution = (
            "Based on source credibility analysis:\n"
            f"Primary: {primary.text if primary else 'N/A'}\n"
            f"Source: {top_source.title} (credibility: {highest * 100:.1f}%)\n\n"
            "Alternative perspectives:\n" + "\n".join(alternatives)
        )
        return _result(
            conflict,
            strategy="Trust higher credibility source with alternatives noted",
            resolution=resolution,
            confidence=RESOLUTION_CONFIDENCE["TRUST_HIGHER_SOURCE"],
            notification=(
                "True contradiction detected: sources provide conflicting information. "
                f"Recommendation based on source credibility ({highest * 100:.1f}% vs "
                f"{lowest * 100:.1f}%)."
            ),
        )

    entries = []
    for index, claim in enumerate(conflict.claims, start=1):
        source = next((s for s in conflict.sources if s.id in claim.extracted_from), None)
        title = source.title if source else "Unknown"
        credibility = source.credibility_score if source else 0.0
        entries.append(
            f"  {index}. {claim.text}\n     Source: {title} (credibility: {credibility * 100:.1f}%)"
        )
    resolution = (
        "Multiple valid perspectives found:\n"
        + "\n\n".join(entries)
        + "\n\nNote: Sources have similar credibility. Consider context and recency "
        "when interpreting."
    )
    return _result(
        conflict,
        strategy="Present multiple perspectives with equal weight",
        resolution=resolution,
        confidence=RESOLUTION_CONFIDENCE["MULTIPLE_PERSPECTIVES"],
        notification=(
            "Multiple perspectives: sources of similar credibility provide different "
            "views. Both perspectives are presented for your consideration."
        ),
    )


def _resolve_unknown(conflict: Conflict) -> ResolutionResult:
    _logger.warning(f"Unknown conflict type: {conflict.type}")
    lines = [f"  {index}. {claim.text}" for index, claim in enumerate(conflict.claims, start=1)]
    resolution = (
        "Conflict detected but type unknown. Manual review recommended.\n"
        "Claims:\n" + "\n".join(lines)
    )
    return _result(
        conflict,
        strategy="Manual review required",
        resolution=resolution,
        confidence=RESOLUTION_CONFIDENCE["MANUAL_REVIEW"],
        notification="Unknown conflict type: manual review may be needed.",
        resolved=False,
    )


_RESOLVERS: dict[Union[ConflictType, str], Callable[[Conflict], ResolutionResult]] = {
    ConflictType.SCOPE_DIFFERENCE: _resolve_scope,
    ConflictType.TEMPORAL_DIFFERENCE: _resolve_temporal,
    ConflictType.STATISTICAL_METHOD: _resolve_statistical,
    ConflictType.MEASUREMENT_UNIT: _resolve_measurement,
    ConflictType.TRUE_CONTRADICTION: _resolve_true_contradiction,
}


__all__ = [
    "classify_conflict",
    "resolve_conflict",
    "build_conflict",
    "is_temporal_conflict",
    "is_scope_conflict",
    "sources_for_claims",
    "first_year",
    "has_scope_keyword",
    "contains_any",
    "scope_label",
    "statistical_method_label",
    "metric_label",
]
