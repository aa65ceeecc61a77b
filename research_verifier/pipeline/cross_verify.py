"""Cross-verification pipeline: claim texts in, verification report out.

Wraps one VerificationEngine run plus a credibility calculation for callers
that hold plain claim strings and, optionally, source URLs.

Usage:
    from research_verifier.pipeline import CrossVerifyPipeline

    pipeline = CrossVerifyPipeline()
    report = await pipeline.run(
        ["In 2024 the average cost was 21M KRW"],
        topic="wedding costs",
        source_urls=["https://example.org/survey"],
    )
"""

import uuid
from typing import Optional, Sequence

from research_verifier.config.verification_constants import NEUTRAL_SCORE
from research_verifier.llm import build_oracle
from research_verifier.schemas import (
    Claim,
    ClaimReport,
    ConflictReport,
    CredibilityLevel,
    CrossVerifyReport,
    Source,
    SourceType,
    VerificationContext,
    conflict_type_key,
)
from research_verifier.utils.logging import get_structured_logger
from research_verifier.verification import CredibilityCalculator, VerificationEngine


class CrossVerifyPipeline:
    """Runs the verification engine and credibility calculator for one request.

    Never raises: any failure becomes a report with success=False.
    """

    def __init__(
        self,
        engine: Optional[VerificationEngine] = None,
        calculator: Optional[CredibilityCalculator] = None,
    ) -> None:
        """Initialize CrossVerifyPipeline.

        Args:
            engine: Pre-configured engine. Lazy-initialized with the
                    configured oracle if None.
            calculator: Credibility calculator (default weights if None).
        """
        self._engine = engine
        self._calculator = calculator or CredibilityCalculator()
        self._logger = get_structured_logger(__name__).bind(component="CrossVerifyPipeline")

    def _get_engine(self) -> VerificationEngine:
        """Lazy-init VerificationEngine with the oracle selected by settings."""
        if self._engine is None:
            self._engine = VerificationEngine(oracle=build_oracle())
        return self._engine

    @staticmethod
    def build_claims(texts: Sequence[str], topic: str) -> list[Claim]:
        """Pending claims with neutral extraction confidence."""
        return [Claim(text=text, topic=topic, confidence=NEUTRAL_SCORE) for text in texts]

    @staticmethod
    def build_sources(urls: Sequence[str]) -> list[Source]:
        """User-provided sources titled by their URL, neutral credibility."""
        return [
            Source(
                url=url,
                type=SourceType.USER_PROVIDED,
                title=url,
                credibility_score=NEUTRAL_SCORE,
                credibility_level=CredibilityLevel.MEDIUM,
            )
            for url in urls
        ]

    async def run(
        self,
        claims: Sequence[str],
        topic: str,
        source_urls: Optional[Sequence[str]] = None,
        sources: Optional[Sequence[Source]] = None,
    ) -> CrossVerifyReport:
        """Cross-verify claim texts.

        Args:
            claims: Claim texts (at least one, none empty).
            topic: Topic context for verification.
            source_urls: Optional URLs turned into user-provided sources.
            sources: Ready-made sources, used in addition to source_urls.

        Returns:
            CrossVerifyReport; success=False with the error message on failure.
        """
        session_id = uuid.uuid4().hex
        log = self._logger.bind(session_id=session_id)

        try:
            if not claims or any(not text or not text.strip() for text in claims):
                raise ValueError("At least one non-empty claim is required")
            if not topic or not topic.strip():
                raise ValueError("Topic is required")

            claim_models = self.build_claims(claims, topic)
            source_models = self.build_sources(source_urls or []) + list(sources or [])

            log.info(
                "cross_verify_started",
                topic=topic,
                claims=len(claim_models),
                sources=len(source_models),
            )

            outcome = await self._get_engine().verify(
                VerificationContext(
                    session_id=session_id,
                    topic=topic,
                    sources=source_models,
                    claims=claim_models,
                )
            )
            credibility = self._calculator.calculate(
                source_models,
                outcome.verified_claims,
                expert_verified=False,
            )
        except Exception as e:
            log.error("cross_verify_failed", error=str(e))
            return CrossVerifyReport(
                success=False,
                error=str(e),
                message="Cross-verification failed",
            )

        log.info(
            "cross_verify_complete",
            final_confidence=round(outcome.final_confidence, 3),
            credibility=round(credibility.overall, 3),
        )

        return CrossVerifyReport(
            success=True,
            session_id=session_id,
            topic=topic,
            total_claims=len(claim_models),
            verified_claims=[
                ClaimReport(
                    text=claim.text,
                    status=claim.verification_status,
                    final_confidence=claim.final_confidence,
                    supporting_sources=len(claim.supporting_sources),
                    contradicting_sources=len(claim.contradicting_sources),
                )
                for claim in outcome.verified_claims
            ],
            conflicts=[
                ConflictReport(
                    type=conflict_type_key(conflict.type),
                    resolved=conflict.resolved,
                    resolution=conflict.resolution,
                )
                for conflict in outcome.conflicts
            ],
            total_rounds=outcome.total_rounds,
            final_confidence=outcome.final_confidence,
            credibility_score=credibility.overall,
            credibility_breakdown=credibility.breakdown,
        )


__all__ = ["CrossVerifyPipeline"]
