"""Tests for VerificationEngine.

Tests cover:
- Full ten-round run and outcome assembly
- Collection rounds and source accumulation
- Temporal, statistical and scope detection rounds
- Resolution round
- Expert and consensus rounds with and without an oracle
- Early-exit annotation and the max_rounds cap
- Concurrent runs on one engine
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from research_verifier.schemas import (
    Claim,
    ConflictType,
    Source,
    SourceType,
    VerificationConfig,
    VerificationContext,
    VerificationStatistics,
    VerificationStatus,
)
from research_verifier.verification.credibility_calculator import CredibilityCalculator
from research_verifier.verification.oracle import AssessmentOracle
from research_verifier.verification.verification_engine import (
    VerificationEngine,
    create_verification_engine,
)


# ── Fixtures ──────────────────────────────────────────────────────────────


def make_sources(
    count: int, credibility: float = 0.9, title: str = "Test Source", start: int = 0
) -> list[Source]:
    return [
        Source(
            id=f"source-{i}",
            url=f"https://example.com/{i}",
            title=f"{title} {i}",
            credibility_score=credibility,
        )
        for i in range(start, start + count)
    ]


def make_context(claims, sources=None, session_id: str = "test-session") -> VerificationContext:
    return VerificationContext(
        session_id=session_id,
        topic="Test Topic",
        sources=make_sources(10) if sources is None else sources,
        claims=[
            claim if isinstance(claim, Claim) else Claim(id=f"claim-{i}", text=claim)
            for i, claim in enumerate(claims)
        ],
    )


def make_oracle(assess=None, consensus=None) -> MagicMock:
    oracle = MagicMock(spec=AssessmentOracle)
    oracle.external = True
    oracle.assess = AsyncMock(return_value=assess if assess is not None else {})
    oracle.consensus = AsyncMock(return_value=consensus)
    return oracle


@pytest.fixture
def engine():
    return VerificationEngine()


@pytest.fixture
def context():
    return make_context(["Test claim 1", "Test claim 2"])


class TestVerifyPipeline:
    """Tests for the full verify() run."""

    @pytest.mark.asyncio
    async def test_completes_ten_rounds(self, engine, context):
        """Ten results, one VerifiedClaim per claim, confidence above 0.5."""
        outcome = await engine.verify(context)

        assert outcome.total_rounds == 10
        assert [r.round for r in outcome.results] == list(range(1, 11))
        assert len(outcome.verified_claims) == 2
        assert outcome.final_confidence > 0.5

    @pytest.mark.asyncio
    async def test_final_confidence_from_history(self, engine, context):
        """Four collection rounds at 0.65 plus a 1.0 expert fallback weigh to 0.755."""
        outcome = await engine.verify(context)

        for claim in outcome.verified_claims:
            assert claim.final_confidence == pytest.approx(0.755)
            assert claim.verification_status == VerificationStatus.DISPUTED
            assert claim.verification_rounds == 10
            assert len(claim.supporting_sources) == 10
            assert claim.contradicting_sources == []
        assert outcome.final_confidence == pytest.approx(0.755)
        assert outcome.results[-1].average_confidence == pytest.approx(0.755)

    @pytest.mark.asyncio
    async def test_inputs_are_not_modified(self, engine, context):
        """Claims keep their pending status; verified copies keep their identity."""
        outcome = await engine.verify(context)

        assert all(c.verification_status == VerificationStatus.PENDING for c in context.claims)
        assert [c.id for c in outcome.verified_claims] == ["claim-0", "claim-1"]
        assert [c.text for c in outcome.verified_claims] == ["Test claim 1", "Test claim 2"]

    @pytest.mark.asyncio
    async def test_empty_sources(self, engine):
        """Without sources every claim ends at 0.3 and is marked false."""
        outcome = await engine.verify(make_context(["Test claim 1", "Test claim 2"], sources=[]))

        assert outcome.total_rounds == 10
        assert len(outcome.verified_claims) == 2
        for claim in outcome.verified_claims:
            assert claim.final_confidence == pytest.approx(0.3)
            assert claim.verification_status == VerificationStatus.FALSE
        assert outcome.results[0].average_confidence == pytest.approx(0.3)

    @pytest.mark.asyncio
    async def test_empty_claims(self, engine):
        """Without claims rounds stay neutral and the final confidence is 0."""
        outcome = await engine.verify(make_context([]))

        assert outcome.total_rounds == 10
        assert outcome.verified_claims == []
        assert outcome.final_confidence == 0.0
        assert outcome.results[0].average_confidence == 0.5
        assert outcome.results[-1].average_confidence == 0.5

    @pytest.mark.asyncio
    async def test_round_structure(self, engine, context):
        """Every round reports claims, conflicts, confidence and a timestamp."""
        outcome = await engine.verify(context)

        for result in outcome.results:
            assert result.claims_verified == 2
            assert 0.0 <= result.average_confidence <= 1.0
            assert result.timestamp is not None

    def test_factory(self):
        """create_verification_engine() applies the given config."""
        config = VerificationConfig(min_confidence=0.9)
        assert create_verification_engine(config=config).config.min_confidence == 0.9


class TestCollectionRounds:
    """Tests for rounds 1-4."""

    @pytest.mark.asyncio
    async def test_sources_considered_grow_by_three(self, engine, context):
        """Round r sees the first r*3 sources."""
        outcome = await engine.verify(context)

        assert [len(r.sources) for r in outcome.results[:4]] == [3, 6, 9, 10]
        assert [s.id for s in outcome.results[0].sources] == ["source-0", "source-1", "source-2"]

    @pytest.mark.asyncio
    async def test_round_confidence(self, engine, context):
        """All matching: 0.5 + 0.5 * (1/3 overlap * 0.9 credibility) = 0.65."""
        outcome = await engine.verify(context)

        for result in outcome.results[:4]:
            assert result.average_confidence == pytest.approx(0.65)

    @pytest.mark.asyncio
    async def test_unrelated_sources_do_not_support(self, engine):
        """Sources without token overlap are never counted as supporting."""
        context = make_context(
            ["Test claim 1"],
            sources=make_sources(2) + make_sources(2, title="Unrelated Paper", start=2),
        )
        outcome = await engine.verify(context)

        claim = outcome.verified_claims[0]
        assert [s.title for s in claim.supporting_sources] == ["Test Source 0", "Test Source 1"]
        # 2 of 4 match: 0.5 * 0.5 + 0.5 * 0.3
        assert outcome.results[1].average_confidence == pytest.approx(0.4)


class TestDetectionRounds:
    """Tests for rounds 5-7."""

    @pytest.mark.asyncio
    async def test_temporal_conflict(self, engine):
        """Claims naming different years produce a TEMPORAL_DIFFERENCE conflict."""
        outcome = await engine.verify(
            make_context(["In 2024 the average was 100", "In 2023 the average was 90"])
        )

        temporal = [c for c in outcome.conflicts if c.type == ConflictType.TEMPORAL_DIFFERENCE]
        assert len(temporal) == 1
        assert len(temporal[0].claims) == 2
        assert outcome.results[4].conflicts_found == 1

    @pytest.mark.asyncio
    async def test_single_number_is_not_statistical(self, engine):
        """A claim with one number has nothing to disperse."""
        outcome = await engine.verify(make_context(["The value is 100"]))

        assert not any(c.type == ConflictType.STATISTICAL_METHOD for c in outcome.conflicts)
        assert outcome.results[5].conflicts_found == 0

    @pytest.mark.asyncio
    async def test_divergent_numbers_are_statistical(self, engine):
        """A claim whose own numbers diverge is flagged on its own."""
        outcome = await engine.verify(make_context(["Estimates range from 10 to 100 guests"]))

        statistical = [c for c in outcome.conflicts if c.type == ConflictType.STATISTICAL_METHOD]
        assert len(statistical) == 1
        assert len(statistical[0].claims) == 1

    @pytest.mark.asyncio
    async def test_scope_conflict(self, engine):
        """Two scope-qualified claims produce a SCOPE_DIFFERENCE conflict."""
        outcome = await engine.verify(
            make_context(["Ceremony only costs a lot", "Total costs including honeymoon"])
        )

        scope = [c for c in outcome.conflicts if c.type == ConflictType.SCOPE_DIFFERENCE]
        assert len(scope) == 1
        assert outcome.results[6].conflicts_found == 1

    @pytest.mark.asyncio
    async def test_detection_round_confidence_bumps(self, engine, context):
        """Rounds 5-8 add 0.02 / 0.02 / 0.01 / 0.02 to the running average."""
        outcome = await engine.verify(context)
        confidences = [r.average_confidence for r in outcome.results]

        for index, bump in zip(range(4, 8), [0.02, 0.02, 0.01, 0.02]):
            running = sum(confidences[:index]) / index
            assert confidences[index] == pytest.approx(running + bump)


class TestResolutionRound:
    """Tests for round 8."""

    @pytest.mark.asyncio
    async def test_resolves_detected_conflicts(self, engine):
        """Every conflict in the outcome is the resolved version."""
        outcome = await engine.verify(
            make_context(["In 2024 the average was 100", "In 2023 the average was 90"])
        )

        assert outcome.conflicts
        assert all(c.resolved for c in outcome.conflicts)
        assert all(c.resolution for c in outcome.conflicts)
        assert outcome.results[7].conflicts_found == len(outcome.conflicts)

    @pytest.mark.asyncio
    async def test_no_conflicts_still_records_round(self, engine, context):
        """Round 8 is recorded even when nothing needs resolving."""
        outcome = await engine.verify(context)

        assert outcome.conflicts == []
        assert outcome.results[7].round == 8
        assert outcome.results[7].conflicts_found == 0

    @pytest.mark.asyncio
    async def test_statistics(self, engine):
        """Each conflict counts once, in its latest state."""
        outcome = await engine.verify(
            make_context(["In 2024 the rate was high", "In 2023 the rate was low"])
        )
        stats = engine.get_statistics(outcome.results)

        assert len(outcome.conflicts) == 1
        assert stats.total_rounds == 10
        assert stats.total_conflicts == 1
        assert stats.resolved_conflicts == stats.total_conflicts
        assert stats.average_confidence == pytest.approx(
            sum(r.average_confidence for r in outcome.results) / 10
        )

    @pytest.mark.asyncio
    async def test_statistics_without_resolution_round(self):
        """Conflicts detected but never resolved stay unresolved."""
        engine = VerificationEngine(config=VerificationConfig(min_rounds=3, max_rounds=7))
        outcome = await engine.verify(
            make_context(["In 2024 the rate was high", "In 2023 the rate was low"])
        )
        stats = engine.get_statistics(outcome.results)

        assert stats.total_conflicts == 1
        assert stats.resolved_conflicts == 0

    def test_statistics_empty(self, engine):
        """No results give zeroed statistics."""
        assert engine.get_statistics([]) == VerificationStatistics()


class TestOracleRounds:
    """Tests for rounds 9 and 10."""

    @pytest.mark.asyncio
    async def test_oracle_assessments_feed_history(self, context):
        """Oracle confidences are appended to claim histories with a 0.03 bump."""
        oracle = make_oracle(assess={0: 0.95, 1: 0.2}, consensus=0.88)
        engine = VerificationEngine(oracle=oracle)

        outcome = await engine.verify(context)
        confidences = [r.average_confidence for r in outcome.results]

        assert confidences[8] == pytest.approx(sum(confidences[:8]) / 8 + 0.03)
        assert confidences[9] == pytest.approx(0.88)
        # (0.65 * 7 + 0.95 * 3) / 10 and (0.65 * 7 + 0.2 * 3) / 10
        assert outcome.verified_claims[0].final_confidence == pytest.approx(0.74)
        assert outcome.verified_claims[1].final_confidence == pytest.approx(0.515)

    @pytest.mark.asyncio
    async def test_oracle_request_limits(self):
        """At most 15 claims and 10 sources go to the oracle."""
        oracle = make_oracle(assess={0: 0.9}, consensus=0.7)
        engine = VerificationEngine(oracle=oracle)
        context = make_context(
            [f"Test claim {i}" for i in range(20)], sources=make_sources(12)
        )

        await engine.verify(context)

        topic, claims, sources = oracle.assess.call_args.args
        assert topic == "Test Topic"
        assert len(claims) == 15
        assert len(sources) == 10
        assert claims[0].index == 0
        assert claims[0].supporting_sources == 12

    @pytest.mark.asyncio
    async def test_oracle_failure_falls_back(self, context):
        """A failing oracle never aborts the run."""
        oracle = make_oracle()
        oracle.assess.side_effect = RuntimeError("network down")
        oracle.consensus.side_effect = RuntimeError("network down")
        engine = VerificationEngine(oracle=oracle)

        outcome = await engine.verify(context)
        confidences = [r.average_confidence for r in outcome.results]

        assert outcome.total_rounds == 10
        assert confidences[8] == pytest.approx(sum(confidences[:8]) / 8 + 0.01)
        assert confidences[9] == pytest.approx(0.755)

    @pytest.mark.asyncio
    async def test_empty_assessment_falls_back(self, context):
        """An oracle that assesses nothing is treated as unavailable."""
        engine = VerificationEngine(oracle=make_oracle(assess={}, consensus=None))

        outcome = await engine.verify(context)

        assert outcome.verified_claims[0].final_confidence == pytest.approx(0.755)
        assert outcome.results[9].average_confidence == pytest.approx(0.755)

    @pytest.mark.asyncio
    async def test_out_of_range_consensus_ignored(self, context):
        """A consensus outside [0, 1] is replaced by the algorithmic value."""
        engine = VerificationEngine(oracle=make_oracle(assess={0: 0.9}, consensus=1.5))

        outcome = await engine.verify(context)

        assert 0.0 <= outcome.results[9].average_confidence <= 1.0

    @pytest.mark.asyncio
    async def test_algorithmic_oracle_by_default(self, engine, context):
        """The default engine never uses an external oracle."""
        assert engine.oracle.external is False
        outcome = await engine.verify(context)
        confidences = [r.average_confidence for r in outcome.results]
        assert confidences[8] == pytest.approx(sum(confidences[:8]) / 8 + 0.01)


class TestEarlyExitAndLimits:
    """Tests for the early-exit annotation and round limits."""

    @pytest.mark.asyncio
    async def test_early_exit_annotated(self):
        """High confidence with enough sources marks the outcome as done."""
        sources = make_sources(5, title="Average wedding cost in Seoul report")
        context = make_context(["Average wedding cost in Seoul"], sources=sources)

        outcome = await VerificationEngine().verify(context)

        assert outcome.total_rounds == 10
        assert outcome.should_continue is False
        assert outcome.early_exit_reason
        assert outcome.results[-1].early_exit is True
        assert outcome.verified_claims[0].verification_status == VerificationStatus.VERIFIED

    @pytest.mark.asyncio
    async def test_early_exit_disabled(self):
        """With early exit disabled the outcome is never annotated."""
        sources = make_sources(5, title="Average wedding cost in Seoul report")
        context = make_context(["Average wedding cost in Seoul"], sources=sources)
        engine = VerificationEngine(VerificationConfig(enable_early_exit=False))

        outcome = await engine.verify(context)

        assert outcome.total_rounds == 10
        assert outcome.should_continue is True
        assert outcome.early_exit_reason is None

    @pytest.mark.asyncio
    async def test_low_confidence_keeps_going(self, engine, context):
        """Below min_confidence the outcome asks for more verification."""
        outcome = await engine.verify(context)

        assert outcome.should_continue is True
        assert all(not r.early_exit for r in outcome.results)

    @pytest.mark.asyncio
    async def test_max_rounds_cap(self, context):
        """Rounds numbered above max_rounds are skipped."""
        engine = VerificationEngine(VerificationConfig(min_rounds=3, max_rounds=5))

        outcome = await engine.verify(context)

        assert outcome.total_rounds == 5
        assert [r.round for r in outcome.results] == [1, 2, 3, 4, 5]
        assert all(c.verification_rounds == 5 for c in outcome.verified_claims)


class TestConcurrency:
    """Tests for concurrent runs on one engine."""

    @pytest.mark.asyncio
    async def test_runs_do_not_share_state(self, engine):
        """Concurrent verify() calls keep separate histories."""
        first = make_context(["Test claim 1"], session_id="first")
        second = make_context(["Test claim 1", "Test claim 2", "Test claim 3"], sources=[], session_id="second")

        outcome_a, outcome_b = await asyncio.gather(engine.verify(first), engine.verify(second))

        assert len(outcome_a.results) == 10
        assert len(outcome_b.results) == 10
        assert len(outcome_a.verified_claims) == 1
        assert len(outcome_b.verified_claims) == 3
        assert outcome_a.verified_claims[0].final_confidence == pytest.approx(0.755)
        assert outcome_b.verified_claims[0].final_confidence == pytest.approx(0.3)


class TestEngineWithCalculator:
    """A full run scored by the credibility calculator."""

    @pytest.mark.asyncio
    async def test_wedding_cost_research(self):
        """Two claims, nine web sources and one recent well-cited paper."""
        sources = [
            Source(
                id=f"web-{i}",
                url=f"https://news.example.com/seoul-weddings/{i}",
                title=f"Seoul wedding costs keep rising report {i}",
                credibility_score=0.92,
            )
            for i in range(9)
        ]
        sources.append(
            Source(
                id="paper",
                url="https://journal.example.org/seoul-wedding-costs",
                type=SourceType.ACADEMIC,
                title="Seoul wedding costs keep rising: a household survey",
                credibility_score=0.95,
                citation_count=500,
                published_date=datetime.now(timezone.utc),
            )
        )
        context = VerificationContext(
            session_id="wedding-research",
            topic="Wedding costs in Seoul",
            sources=sources,
            claims=[
                Claim(id="claim-0", text="Seoul wedding costs keep rising"),
                Claim(id="claim-1", text="Seoul wedding venues remain expensive"),
            ],
        )

        outcome = await VerificationEngine().verify(context)
        score = CredibilityCalculator().calculate(sources, outcome.verified_claims)

        assert outcome.total_rounds == 10
        assert len(outcome.verified_claims) == 2
        assert outcome.final_confidence > 0.5
        assert 0.0 < score.overall <= 1.0
        assert score.factors.source_credibility >= 0.9
