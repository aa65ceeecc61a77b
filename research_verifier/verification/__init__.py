"""Verification components: credibility scoring, conflict resolution and the round engine.

Usage:
    from research_verifier.verification import VerificationEngine, CredibilityCalculator

    outcome = await VerificationEngine().verify(context)
    score = CredibilityCalculator().calculate(context.sources, outcome.verified_claims)
"""

from research_verifier.verification.credibility_calculator import (
    CredibilityCalculator,
    create_credibility_calculator,
)
from research_verifier.verification.conflict_resolver import (
    ConflictResolver,
    create_conflict_resolver,
)
from research_verifier.verification.evidence_scorer import (
    EvidenceScorer,
    LexicalEvidenceScorer,
)
from research_verifier.verification.oracle import (
    AlgorithmicOracle,
    AssessmentOracle,
    ClaimSummary,
)
from research_verifier.verification.verification_engine import (
    VerificationEngine,
    VerificationRun,
    create_verification_engine,
)

__all__ = [
    "CredibilityCalculator",
    "create_credibility_calculator",
    "ConflictResolver",
    "create_conflict_resolver",
    "EvidenceScorer",
    "LexicalEvidenceScorer",
    "AssessmentOracle",
    "AlgorithmicOracle",
    "ClaimSummary",
    "VerificationEngine",
    "VerificationRun",
    "create_verification_engine",
]
