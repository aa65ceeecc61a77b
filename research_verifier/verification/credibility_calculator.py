"""Credibility calculator implementing the weighted scoring model.

Core formula: Overall = Sum(Factor x Weight)

Factors:
- Source credibility (40%): type-aware per-source scores, averaged
- Cross-verification agreement (30%): share of claims with 2+ supporting sources
- Recency (15%): half-life decay, 0.5^(age_days / 180)
- Citation count (10%): log10(citations + 1) / log10(1001) over academic sources
- Expert verification (5%): 1.0 when confirmed externally, else 0.5

Every factor falls back to a neutral 0.5 when it has nothing to measure.
The citation factor is deliberately not clamped: sources cited more than
1000 times push it above 1.0.
"""

import math
from datetime import datetime, timezone
from typing import Optional, Sequence
from urllib.parse import urlparse

from loguru import logger

from research_verifier.config.verification_constants import (
    ACADEMIC_BASE_SCORE,
    ACADEMIC_CITATION_BOOST,
    ACADEMIC_HIGH_CITATION_THRESHOLD,
    ACADEMIC_OLD_FLOOR,
    ACADEMIC_OLD_PENALTY,
    ACADEMIC_OLD_YEARS,
    ACADEMIC_RECENT_BOOST,
    ACADEMIC_RECENT_YEARS,
    ACADEMIC_TOP_CITATION_THRESHOLD,
    CITATION_SCALE,
    CLAIM_AGREEMENT_SUPPORTED,
    COMPARISON_EQUALITY_BAND,
    COMPARISON_FACTOR_GAP,
    CREDIBILITY_LEVEL_THRESHOLDS,
    CREDIBILITY_WEIGHTS,
    MIN_SUPPORTING_SOURCES,
    NEUTRAL_SCORE,
    OTHER_SOURCE_DEFAULT_SCORE,
    RECENCY_HALF_LIFE_DAYS,
    RECOMMENDATION_MESSAGES,
    RECOMMENDATION_THRESHOLDS,
    REPUTABLE_NEWS_DOMAINS,
    USER_PROVIDED_DEFAULT_SCORE,
    WEB_DEFAULT_SCORE,
    WEB_EDUCATIONAL_SCORE,
    WEB_GOVERNMENT_SCORE,
    WEB_REPUTABLE_NEWS_SCORE,
)
from research_verifier.schemas import (
    ConfidenceScore,
    CredibilityFactors,
    ScoreComparison,
    Source,
    SourceType,
    VerifiedClaim,
)

_DAYS_PER_YEAR = 365.0

_FACTOR_LABELS = {
    "source_credibility": "Source Credibility",
    "cross_verification_agreement": "Cross-Verification",
    "recency": "Recency",
    "citation_count": "Citation Count",
    "expert_verification": "Expert Verification",
}


def citation_score(citations: int) -> float:
    """
    Log-scaled citation score.

    - 0 citations: 0.0
    - 100 citations: ~0.668
    - 1000 citations: 1.0
    - beyond 1000: above 1.0 (unclamped)
    """
    return math.log10(citations + 1) / math.log10(CITATION_SCALE + 1)


def recency_score(age_days: float) -> float:
    """Half-life decay: 1.0 today, 0.5 after 180 days, 0.25 after 360."""
    return 0.5 ** (age_days / RECENCY_HALF_LIFE_DAYS)


def _age_days(published: datetime, now: datetime) -> float:
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return (now - published).total_seconds() / 86400.0


class CredibilityCalculator:
    """
    Computes weighted credibility scores for a research session.

    Usage:
        calculator = CredibilityCalculator()
        score = calculator.calculate(sources, verified_claims)
        level = calculator.get_credibility_level(score.overall)

    Attributes:
        weights: Factor name -> weight, summing to 1.0
    """

    def __init__(self, weights: Optional[dict[str, float]] = None):
        """
        Initialize calculator.

        Args:
            weights: Custom factor weights (uses defaults if None)
        """
        self.weights = dict(weights or CREDIBILITY_WEIGHTS)
        self.logger = logger.bind(component="CredibilityCalculator")

    def calculate(
        self,
        sources: Sequence[Source],
        verified_claims: Sequence[VerifiedClaim],
        agreement_rate: Optional[float] = None,
        expert_verified: bool = False,
        now: Optional[datetime] = None,
    ) -> ConfidenceScore:
        """
        Calculate the overall credibility score.

        Args:
            sources: Sources backing the research
            verified_claims: Output of the verification engine
            agreement_rate: Overrides the computed agreement factor when given
            expert_verified: Whether an expert confirmed the findings
            now: Reference time for age calculations (defaults to current UTC)

        Returns:
            ConfidenceScore with overall, factors and a readable breakdown
        """
        now = now or datetime.now(timezone.utc)

        factors = CredibilityFactors(
            source_credibility=self._calculate_source_credibility(sources, now),
            cross_verification_agreement=(
                agreement_rate
                if agreement_rate is not None
                else self._calculate_agreement(verified_claims)
            ),
            recency=self._calculate_recency(sources, now),
            citation_count=self._calculate_citation_score(sources),
            expert_verification=1.0 if expert_verified else NEUTRAL_SCORE,
        )

        overall = sum(
            getattr(factors, name) * weight for name, weight in self.weights.items()
        )

        self.logger.info(
            f"Credibility calculated: {overall:.3f}",
            sources=len(sources),
            claims=len(verified_claims),
        )

        return ConfidenceScore(
            overall=overall,
            factors=factors,
            breakdown=self._generate_breakdown(factors),
        )

    # ── Factors ───────────────────────────────────────────────────────────

    def _calculate_source_credibility(self, sources: Sequence[Source], now: datetime) -> float:
        """Average per-source credibility (0.5 with no sources)."""
        if not sources:
            return NEUTRAL_SCORE

        scores = [self.score_source(source, now) for source in sources]
        return sum(scores) / len(scores)

    def score_source(self, source: Source, now: Optional[datetime] = None) -> float:
        """
        Credibility of a single source by type.

        Priority order per type:
        - Academic: citation/age-adjusted base score
        - Web: supplied score, else domain heuristics
        - User-provided: supplied score, else 0.7
        - Anything else: 0.6
        """
        now = now or datetime.now(timezone.utc)
        if source.type == SourceType.ACADEMIC:
            return self._get_academic_credibility(source, now)
        if source.type == SourceType.WEB:
            return self._get_web_credibility(source)
        if source.type == SourceType.USER_PROVIDED:
            return source.credibility_score or USER_PROVIDED_DEFAULT_SCORE
        return OTHER_SOURCE_DEFAULT_SCORE

    def _get_academic_credibility(self, source: Source, now: datetime) -> float:
        score = ACADEMIC_BASE_SCORE

        citations = source.citation_count or 0
        if citations > ACADEMIC_TOP_CITATION_THRESHOLD:
            score = 1.0
        elif citations > ACADEMIC_HIGH_CITATION_THRESHOLD:
            score = min(1.0, score + ACADEMIC_CITATION_BOOST)

        if source.published_date:
            years = _age_days(source.published_date, now) / _DAYS_PER_YEAR
            if years < ACADEMIC_RECENT_YEARS:
                score = min(1.0, score + ACADEMIC_RECENT_BOOST)
            elif years > ACADEMIC_OLD_YEARS:
                score = max(ACADEMIC_OLD_FLOOR, score - ACADEMIC_OLD_PENALTY)

        return min(1.0, score)

    def _get_web_credibility(self, source: Source) -> float:
        """
        Web credibility: supplied score first, then domain heuristics.

        - Government (.gov): 0.90
        - Educational (.edu, universities): 0.85
        - Reputable news (NYT, Reuters, BBC): 0.80
        - Anything else: 0.60
        """
        if source.credibility_score:
            return source.credibility_score

        url = source.url.lower()
        domain = self._extract_domain(url) or ""

        if domain.endswith(".gov") or ".gov." in domain or domain.startswith("gov."):
            return WEB_GOVERNMENT_SCORE

        if domain.endswith(".edu") or ".edu." in domain or "university" in url:
            return WEB_EDUCATIONAL_SCORE

        if any(name in domain for name in REPUTABLE_NEWS_DOMAINS):
            return WEB_REPUTABLE_NEWS_SCORE

        return WEB_DEFAULT_SCORE

    @staticmethod
    def _extract_domain(url: str) -> Optional[str]:
        """Host of a URL without a leading www., or None."""
        parsed = urlparse(url)
        if not parsed.netloc:
            # Scheme-less URLs such as "census.gov/report"
            parsed = urlparse("//" + url)
        if not parsed.netloc:
            return None
        domain = parsed.netloc.split(":")[0]
        if domain.startswith("www."):
            domain = domain[4:]
        return domain

    def _calculate_agreement(self, verified_claims: Sequence[VerifiedClaim]) -> float:
        """Share of claims backed by 2+ supporting sources (0.5 with no claims)."""
        if not verified_claims:
            return NEUTRAL_SCORE

        well_supported = sum(
            1
            for claim in verified_claims
            if len(claim.supporting_sources) >= MIN_SUPPORTING_SOURCES
        )
        return well_supported / len(verified_claims)

    def _calculate_recency(self, sources: Sequence[Source], now: datetime) -> float:
        """Mean half-life score over dated sources (0.5 when none are dated)."""
        dated = [source for source in sources if source.published_date]
        if not dated:
            return NEUTRAL_SCORE

        # Future-dated sources count as published today
        scores = [
            recency_score(max(0.0, _age_days(source.published_date, now)))
            for source in dated
        ]
        return sum(scores) / len(scores)

    def _calculate_citation_score(self, sources: Sequence[Source]) -> float:
        """Mean log-scaled citations over academic sources with a count."""
        cited = [
            source
            for source in sources
            if source.type == SourceType.ACADEMIC and source.citation_count is not None
        ]
        if not cited:
            return NEUTRAL_SCORE

        scores = [citation_score(source.citation_count) for source in cited]
        return sum(scores) / len(scores)

    def _generate_breakdown(self, factors: CredibilityFactors) -> str:
        lines = [
            f"{_FACTOR_LABELS[name]}: {getattr(factors, name) * 100:.1f}% "
            f"(weight: {weight * 100:.0f}%)"
            for name, weight in self.weights.items()
        ]
        return "\n".join(lines)

    # ── Secondary operations ──────────────────────────────────────────────

    def calculate_claim_credibility(
        self,
        claim: VerifiedClaim,
        all_sources: Sequence[Source],
        now: Optional[datetime] = None,
    ) -> ConfidenceScore:
        """
        Credibility scoped to one claim's supporting sources.

        Agreement is fixed at 0.8 for claims with 2+ supporting sources,
        otherwise 0.5. Expert verification is never assumed.
        """
        supporting_ids = {source.id for source in claim.supporting_sources}
        claim_sources = [source for source in all_sources if source.id in supporting_ids]

        supported = len(claim.supporting_sources) >= MIN_SUPPORTING_SOURCES
        return self.calculate(
            claim_sources,
            [claim],
            agreement_rate=CLAIM_AGREEMENT_SUPPORTED if supported else NEUTRAL_SCORE,
            expert_verified=False,
            now=now,
        )

    @staticmethod
    def get_credibility_level(score: float) -> str:
        """very-high (>=0.9), high (>=0.8), medium (>=0.6), low (>=0.4), else very-low."""
        for threshold, label in CREDIBILITY_LEVEL_THRESHOLDS:
            if score >= threshold:
                return label
        return "very-low"

    @staticmethod
    def get_recommendations(score: ConfidenceScore) -> list[str]:
        """Advisories for every factor below its threshold."""
        return [
            RECOMMENDATION_MESSAGES[name]
            for name, threshold in RECOMMENDATION_THRESHOLDS.items()
            if getattr(score.factors, name) < threshold
        ]

    @staticmethod
    def compare(first: ConfidenceScore, second: ConfidenceScore) -> ScoreComparison:
        """
        Compare two scores.

        Scores within 0.05 of each other are "equal". Improvement notes list
        factors where the weaker score trails the stronger by more than 0.1.
        """
        difference = first.overall - second.overall

        if abs(difference) < COMPARISON_EQUALITY_BAND:
            better = "equal"
        else:
            better = "first" if difference > 0 else "second"

        weaker, stronger = (first, second) if difference < 0 else (second, first)

        improvements = []
        for name, value in weaker.factors.model_dump().items():
            target = getattr(stronger.factors, name)
            if target - value > COMPARISON_FACTOR_GAP:
                improvements.append(
                    f"Improve {name} (current: {value * 100:.1f}%, target: {target * 100:.1f}%)"
                )

        return ScoreComparison(difference=difference, better=better, improvements=improvements)


def create_credibility_calculator() -> CredibilityCalculator:
    return CredibilityCalculator()


__all__ = [
    "CredibilityCalculator",
    "create_credibility_calculator",
    "citation_score",
    "recency_score",
]
