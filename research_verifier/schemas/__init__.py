"""Schema package for sources, claims, conflicts, credibility and verification runs.

All models are Pydantic v2. Inputs (Source, Claim) are frozen: verification
produces new VerifiedClaim/Conflict records rather than mutating them.

Usage:
    from research_verifier.schemas import Claim, Source, SourceType
    source = Source(url="https://example.gov/report", type=SourceType.WEB, title="Report")
    claim = Claim(text="In 2024 the rate was 12%", extracted_from=[source.id])
"""

from research_verifier.schemas.source_schema import (
    CredibilityLevel,
    Source,
    SourceType,
)
from research_verifier.schemas.claim_schema import (
    Claim,
    VerificationStatus,
    VerifiedClaim,
)
from research_verifier.schemas.conflict_schema import (
    Conflict,
    ConflictType,
    ResolutionResult,
    ResolutionStatistics,
    TypeStatistics,
    conflict_type_key,
)
from research_verifier.schemas.credibility_schema import (
    ConfidenceScore,
    CredibilityFactors,
    ScoreComparison,
)
from research_verifier.schemas.verification_schema import (
    VerificationConfig,
    VerificationContext,
    VerificationOutcome,
    VerificationResult,
    VerificationStatistics,
)
from research_verifier.schemas.report_schema import (
    ClaimReport,
    ConflictReport,
    CrossVerifyReport,
)

__all__ = [
    # Source
    "Source",
    "SourceType",
    "CredibilityLevel",
    # Claim
    "Claim",
    "VerifiedClaim",
    "VerificationStatus",
    # Conflict
    "Conflict",
    "ConflictType",
    "ResolutionResult",
    "ResolutionStatistics",
    "TypeStatistics",
    "conflict_type_key",
    # Credibility
    "ConfidenceScore",
    "CredibilityFactors",
    "ScoreComparison",
    # Verification
    "VerificationConfig",
    "VerificationContext",
    "VerificationOutcome",
    "VerificationResult",
    "VerificationStatistics",
    # Reports
    "ClaimReport",
    "ConflictReport",
    "CrossVerifyReport",
]
