"""Core verification engine running the ten-round cross-verification process.

Rounds run strictly in order, each appending one VerificationResult:
1-4. Collection: round r matches every claim against the first r*3 sources
5.   Temporal: claim pairs naming different years -> TEMPORAL_DIFFERENCE
6.   Statistical: claims whose own numbers diverge (CV > 0.5) -> STATISTICAL_METHOD
7.   Scope: claim pairs that both qualify their scope -> SCOPE_DIFFERENCE
8.   Resolution: every conflict found so far is resolved
9.   Expert: oracle assessment per claim, algorithmic fallback otherwise
10.  Consensus: oracle overall confidence, weighted-history fallback otherwise

Rounds 5-9 report the running average of earlier rounds plus a small bump;
that is why the rounds cannot be reordered or run in parallel.

The engine itself holds no per-run state. Each verify() call builds its own
VerificationRun, so one engine can serve concurrent runs.

Usage:
    from research_verifier.verification import VerificationEngine

    engine = VerificationEngine()
    outcome = await engine.verify(context)
    stats = engine.get_statistics(outcome.results)
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from research_verifier.config.verification_constants import (
    COLLECTION_ROUNDS,
    DISPUTED_THRESHOLD,
    NEUTRAL_SCORE,
    NO_SOURCE_CONFIDENCE,
    ORACLE_MAX_CLAIMS,
    ORACLE_MAX_SOURCES,
    ROUND_CONFIDENCE_BUMPS,
    SOURCES_PER_ROUND,
    VERIFIED_THRESHOLD,
)
from research_verifier.schemas import (
    Claim,
    Conflict,
    ConflictType,
    Source,
    VerificationConfig,
    VerificationContext,
    VerificationOutcome,
    VerificationResult,
    VerificationStatistics,
    VerificationStatus,
    VerifiedClaim,
)
from research_verifier.utils.logging import get_structured_logger
from research_verifier.verification.conflict_rules import (
    build_conflict,
    is_scope_conflict,
    is_temporal_conflict,
    resolve_conflict,
)
from research_verifier.verification.evidence_scorer import (
    EvidenceScorer,
    LexicalEvidenceScorer,
)
from research_verifier.verification.oracle import (
    AlgorithmicOracle,
    AssessmentOracle,
    ClaimSummary,
    weighted_confidence,
)


@dataclass
class ClaimTrack:
    """Evidence gathered for one claim during a run.

    Attributes:
        claim: The input claim (never modified)
        supporting: Supporting sources by ID, in discovery order
        contradicting: Sources that contradict the claim
        history: Per-round confidences for this claim
    """

    claim: Claim
    supporting: dict[str, Source] = field(default_factory=dict)
    contradicting: list[Source] = field(default_factory=list)
    history: list[float] = field(default_factory=list)


@dataclass
class VerificationRun:
    """Execution context of a single verify() call."""

    context: VerificationContext
    logger: Any
    tracks: list[ClaimTrack] = field(default_factory=list)
    results: list[VerificationResult] = field(default_factory=list)
    conflicts: list[Conflict] = field(default_factory=list)

    @property
    def claims(self) -> list[Claim]:
        return self.context.claims

    @property
    def sources(self) -> list[Source]:
        return self.context.sources

    def running_average(self) -> float:
        """Mean confidence over the rounds recorded so far (0.5 before any)."""
        if not self.results:
            return NEUTRAL_SCORE
        return sum(r.average_confidence for r in self.results) / len(self.results)

    def summaries(self) -> list[ClaimSummary]:
        return [
            ClaimSummary(
                index=index,
                claim_id=track.claim.id,
                text=track.claim.text,
                supporting_sources=len(track.supporting),
                total_sources=len(self.sources),
                confidence_history=list(track.history),
            )
            for index, track in enumerate(self.tracks)
        ]


class VerificationEngine:
    """Orchestrates the ten verification rounds.

    Per-run state lives in VerificationRun; the engine only holds
    configuration and its collaborators.
    """

    def __init__(
        self,
        config: Optional[VerificationConfig] = None,
        oracle: Optional[AssessmentOracle] = None,
        evidence_scorer: Optional[EvidenceScorer] = None,
    ) -> None:
        """Initialize VerificationEngine.

        Args:
            config: Round and early-exit thresholds (defaults if None).
            oracle: Claim-assessment oracle for rounds 9-10. Defaults to the
                    algorithmic oracle, which never calls out.
            evidence_scorer: Lexical (or other) claim/source scorer.
        """
        self.config = config or VerificationConfig()
        self.oracle = oracle or AlgorithmicOracle()
        self.evidence_scorer = evidence_scorer or LexicalEvidenceScorer()
        self._fallback_oracle = AlgorithmicOracle()
        self._logger = get_structured_logger(__name__).bind(component="VerificationEngine")
        self._logger.info(
            "engine_initialized",
            external_oracle=self.oracle.external,
            **self.config.model_dump(),
        )

    async def verify(self, context: VerificationContext) -> VerificationOutcome:
        """Run all verification rounds for one research session.

        Args:
            context: Session topic, sources and claims. context.round is
                     ignored; runs always start at round 1.

        Returns:
            VerificationOutcome with verified claims, conflicts, per-round
            results and the final confidence.
        """
        run = VerificationRun(
            context=context,
            logger=self._logger.bind(session_id=context.session_id),
            tracks=[ClaimTrack(claim=claim) for claim in context.claims],
        )
        run.logger.info(
            "verification_started",
            topic=context.topic,
            sources=len(context.sources),
            claims=len(context.claims),
        )

        for round_number in range(1, COLLECTION_ROUNDS + 1):
            if self._within_budget(round_number):
                self._record(run, self._collect(run, round_number))

        if self._within_budget(5):
            self._record(run, self._temporal_round(run))
        if self._within_budget(6):
            self._record(run, self._statistical_round(run))
        if self._within_budget(7):
            self._record(run, self._scope_round(run))
        if self._within_budget(8):
            self._record(run, self._resolution_round(run))
        if self._within_budget(9):
            self._record(run, await self._expert_round(run))
        if self._within_budget(10):
            self._record(run, await self._consensus_round(run))

        early_exit_reason = self._check_early_exit(run)
        if early_exit_reason:
            run.logger.info("early_exit_conditions_met", reason=early_exit_reason)
            run.results[-1] = run.results[-1].model_copy(
                update={"early_exit": True, "early_exit_reason": early_exit_reason}
            )

        verified_claims = self._build_verified_claims(run)
        final_confidence = self._calculate_final_confidence(verified_claims)

        run.logger.info(
            "verification_complete",
            total_rounds=len(run.results),
            verified_claims=len(verified_claims),
            conflicts=len(run.conflicts),
            final_confidence=round(final_confidence, 3),
        )

        return VerificationOutcome(
            verified_claims=verified_claims,
            conflicts=list(run.conflicts),
            results=list(run.results),
            final_confidence=final_confidence,
            total_rounds=len(run.results),
            should_continue=early_exit_reason is None,
            early_exit_reason=early_exit_reason,
        )

    def _within_budget(self, round_number: int) -> bool:
        return round_number <= self.config.max_rounds

    def _record(self, run: VerificationRun, result: VerificationResult) -> None:
        run.results.append(result)
        run.logger.info(
            "round_complete",
            round=result.round,
            claims_verified=result.claims_verified,
            conflicts_found=result.conflicts_found,
            confidence=round(result.average_confidence, 3),
        )

    def _bumped_confidence(self, run: VerificationRun, bump_key: str) -> float:
        return min(1.0, run.running_average() + ROUND_CONFIDENCE_BUMPS[bump_key])

    # ── Rounds 1-4: collection ────────────────────────────────────────────

    def _collect(self, run: VerificationRun, round_number: int) -> VerificationResult:
        """Match each claim against the sources this round can see."""
        considered = run.sources[: round_number * SOURCES_PER_ROUND]

        confidences = []
        for track in run.tracks:
            confidence = self._score_claim(track, considered)
            track.history.append(confidence)
            confidences.append(confidence)

        average = sum(confidences) / len(confidences) if confidences else NEUTRAL_SCORE
        return VerificationResult(
            round=round_number,
            claims_verified=len(run.claims),
            conflicts_found=0,
            average_confidence=average,
            sources=list(considered),
        )

    def _score_claim(self, track: ClaimTrack, sources: Sequence[Source]) -> float:
        """
        Round confidence for one claim.

        0.5 x share of matching sources + 0.5 x mean (overlap x credibility)
        of the matches, capped at 1.0; 0.3 when there are no sources yet.
        """
        if not sources:
            return NO_SOURCE_CONFIDENCE

        matches = 0
        weighted = 0.0
        for source in sources:
            overlap = self.evidence_scorer.overlap(track.claim.text, source.title)
            if self.evidence_scorer.supports(overlap):
                matches += 1
                weighted += overlap * source.credibility_score
                track.supporting.setdefault(source.id, source)

        match_ratio = matches / len(sources)
        average_weighted = weighted / matches if matches else 0.0
        return min(1.0, 0.5 * match_ratio + 0.5 * average_weighted)

    # ── Rounds 5-7: conflict detection ────────────────────────────────────

    def _detection_result(
        self,
        run: VerificationRun,
        round_number: int,
        conflicts: list[Conflict],
        bump_key: str,
    ) -> VerificationResult:
        confidence = self._bumped_confidence(run, bump_key)
        run.conflicts.extend(conflicts)
        return VerificationResult(
            round=round_number,
            claims_verified=len(run.claims),
            conflicts_found=len(conflicts),
            average_confidence=confidence,
            sources=list(run.sources),
            conflicts=conflicts,
        )

    def _pairwise_conflicts(self, run: VerificationRun, conflict_type: ConflictType, test) -> list[Conflict]:
        claims = run.claims
        return [
            build_conflict(conflict_type, [claims[i], claims[j]], run.sources)
            for i in range(len(claims))
            for j in range(i + 1, len(claims))
            if test(claims[i], claims[j])
        ]

    def _temporal_round(self, run: VerificationRun) -> VerificationResult:
        """Round 5: claims that date themselves to different years."""
        conflicts = self._pairwise_conflicts(
            run, ConflictType.TEMPORAL_DIFFERENCE, is_temporal_conflict
        )
        return self._detection_result(run, 5, conflicts, "temporal")

    def _statistical_round(self, run: VerificationRun) -> VerificationResult:
        """Round 6: claims whose own figures diverge."""
        conflicts = []
        for claim in run.claims:
            values = self.evidence_scorer.numeric_values(claim.text)
            if len(values) >= 2 and self.evidence_scorer.is_divergent(values):
                conflicts.append(
                    build_conflict(ConflictType.STATISTICAL_METHOD, [claim], run.sources)
                )
        return self._detection_result(run, 6, conflicts, "statistical")

    def _scope_round(self, run: VerificationRun) -> VerificationResult:
        """Round 7: claim pairs that both qualify their scope."""
        conflicts = self._pairwise_conflicts(
            run, ConflictType.SCOPE_DIFFERENCE, is_scope_conflict
        )
        return self._detection_result(run, 7, conflicts, "scope")

    # ── Round 8: resolution ───────────────────────────────────────────────

    def _resolution_round(self, run: VerificationRun) -> VerificationResult:
        """Resolve every conflict found so far; a no-op when there are none."""
        confidence = self._bumped_confidence(run, "resolution")

        resolved = [resolve_conflict(conflict).conflict for conflict in run.conflicts]
        run.conflicts = resolved
        if resolved:
            run.logger.info(
                "conflicts_resolved",
                resolved=sum(1 for conflict in resolved if conflict.resolved),
                total=len(resolved),
            )

        return VerificationResult(
            round=8,
            claims_verified=len(run.claims),
            conflicts_found=len(resolved),
            average_confidence=confidence,
            sources=list(run.sources),
            conflicts=list(resolved),
        )

    # ── Rounds 9-10: expert assessment and consensus ──────────────────────

    async def _expert_round(self, run: VerificationRun) -> VerificationResult:
        """Per-claim assessment from the oracle, or the algorithmic fallback."""
        summaries = run.summaries()
        topic = run.context.topic

        assessments: dict[int, float] = {}
        if self.oracle.external:
            try:
                assessments = await self.oracle.assess(
                    topic,
                    summaries[:ORACLE_MAX_CLAIMS],
                    run.sources[:ORACLE_MAX_SOURCES],
                )
            except Exception as e:
                run.logger.warning("oracle_assessment_failed", error=str(e))
                assessments = {}

        used_oracle = bool(assessments)
        if not used_oracle:
            assessments = await self._fallback_oracle.assess(topic, summaries, run.sources)

        for index, confidence in sorted(assessments.items()):
            if 0 <= index < len(run.tracks):
                run.tracks[index].history.append(min(1.0, max(0.0, confidence)))

        confidence = self._bumped_confidence(
            run, "expert_oracle" if used_oracle else "expert_fallback"
        )
        run.logger.info("expert_assessment", source="oracle" if used_oracle else "fallback")

        return VerificationResult(
            round=9,
            claims_verified=len(run.claims),
            conflicts_found=0,
            average_confidence=confidence,
            sources=list(run.sources),
        )

    async def _consensus_round(self, run: VerificationRun) -> VerificationResult:
        """Overall confidence from the oracle, or the weighted-history fallback."""
        summaries = run.summaries()
        topic = run.context.topic

        overall: Optional[float] = None
        if self.oracle.external:
            try:
                overall = await self.oracle.consensus(topic, summaries)
            except Exception as e:
                run.logger.warning("oracle_consensus_failed", error=str(e))
                overall = None
            if overall is not None and not 0.0 <= overall <= 1.0:
                run.logger.warning("oracle_consensus_out_of_range", value=overall)
                overall = None

        if overall is None:
            overall = await self._fallback_oracle.consensus(topic, summaries)

        return VerificationResult(
            round=10,
            claims_verified=len(run.claims),
            conflicts_found=0,
            average_confidence=overall,
            sources=list(run.sources),
        )

    # ── Early exit and final assembly ─────────────────────────────────────

    def _check_early_exit(self, run: VerificationRun) -> Optional[str]:
        """
        Early-exit check on the last round.

        Runs after all rounds, so it annotates the outcome rather than
        shortening the run.
        """
        if not self.config.enable_early_exit or not run.results:
            return None
        if len(run.results) < self.config.min_rounds:
            return None

        latest = run.results[-1]
        source_count = len(latest.sources)
        if (
            latest.average_confidence >= self.config.min_confidence
            and source_count >= self.config.min_sources
        ):
            return (
                f"Confidence {latest.average_confidence:.2f} >= "
                f"{self.config.min_confidence} with {source_count} sources"
            )
        return None

    def _build_verified_claims(self, run: VerificationRun) -> list[VerifiedClaim]:
        verified = []
        for track in run.tracks:
            final_confidence = weighted_confidence(track.history)
            verified.append(
                VerifiedClaim(
                    **track.claim.model_dump(exclude={"verification_status"}),
                    verification_status=self._status_for(final_confidence),
                    verification_rounds=len(run.results),
                    supporting_sources=list(track.supporting.values()),
                    contradicting_sources=list(track.contradicting),
                    final_confidence=final_confidence,
                )
            )
        return verified

    @staticmethod
    def _status_for(confidence: float) -> VerificationStatus:
        if confidence >= VERIFIED_THRESHOLD:
            return VerificationStatus.VERIFIED
        if confidence >= DISPUTED_THRESHOLD:
            return VerificationStatus.DISPUTED
        return VerificationStatus.FALSE

    @staticmethod
    def _calculate_final_confidence(verified_claims: Sequence[VerifiedClaim]) -> float:
        if not verified_claims:
            return 0.0
        return sum(claim.final_confidence for claim in verified_claims) / len(verified_claims)

    @staticmethod
    def get_statistics(results: Sequence[VerificationResult]) -> VerificationStatistics:
        """Aggregate a run's round results.

        Args:
            results: VerificationOutcome.results of a run.

        Returns:
            Round count, mean round confidence, conflicts found and resolved.
        """
        if not results:
            return VerificationStatistics()

        # Round 8 re-records detected conflicts as resolved copies under the same id.
        latest: dict[str, Conflict] = {}
        for result in results:
            for conflict in result.conflicts:
                latest[conflict.id] = conflict

        return VerificationStatistics(
            total_rounds=len(results),
            average_confidence=sum(r.average_confidence for r in results) / len(results),
            total_conflicts=len(latest),
            resolved_conflicts=sum(1 for conflict in latest.values() if conflict.resolved),
        )


def create_verification_engine(
    config: Optional[VerificationConfig] = None,
    oracle: Optional[AssessmentOracle] = None,
) -> VerificationEngine:
    return VerificationEngine(config=config, oracle=oracle)


__all__ = ["VerificationEngine", "VerificationRun", "ClaimTrack", "create_verification_engine"]
