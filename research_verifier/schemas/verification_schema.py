"""Verification run schemas: configuration, input context, per-round results.

A verification run is a fixed sequence of ten rounds:
- Rounds 1-4: multi-source collection (lexical claim/source matching)
- Round 5: temporal consistency
- Round 6: statistical dispersion
- Round 7: scope analysis
- Round 8: conflict resolution
- Round 9: expert assessment (oracle or algorithmic fallback)
- Round 10: consensus

Each round appends one VerificationResult. The early-exit check runs after
round 10 and only annotates the outcome (should_continue / early_exit_reason).
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from research_verifier.schemas.claim_schema import Claim, VerifiedClaim
from research_verifier.schemas.conflict_schema import Conflict
from research_verifier.schemas.source_schema import Source


class VerificationConfig(BaseModel):
    """Engine thresholds.

    Attributes:
        min_rounds: Rounds that must run before the early-exit check applies.
        max_rounds: Rounds numbered above this are not executed.
        min_sources: Source count required by the early-exit check.
        min_confidence: Confidence required by the early-exit check.
        min_agreement: Agreement rate threshold (reported, not enforced).
        enable_early_exit: Whether the early-exit check runs at all.
    """

    min_rounds: int = Field(10, ge=1)
    max_rounds: int = Field(15, ge=1)
    min_sources: int = Field(5, ge=0)
    min_confidence: float = Field(0.85, ge=0.0, le=1.0)
    min_agreement: float = Field(0.80, ge=0.0, le=1.0)
    enable_early_exit: bool = True

    @model_validator(mode="after")
    def check_round_bounds(self) -> "VerificationConfig":
        """min_rounds may not exceed max_rounds."""
        if self.min_rounds > self.max_rounds:
            raise ValueError(
                f"min_rounds ({self.min_rounds}) exceeds max_rounds ({self.max_rounds})"
            )
        return self


class VerificationContext(BaseModel):
    """Input to one verification run.

    session_id is only used for logging. round is accepted for compatibility
    with session bookkeeping but is not a resume point: runs always start at
    round 1.
    """

    session_id: str
    topic: str
    sources: list[Source] = Field(default_factory=list)
    claims: list[Claim] = Field(default_factory=list)
    round: int = 1


class VerificationResult(BaseModel):
    """Snapshot recorded at the end of one round."""

    round: int = Field(..., ge=1)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    claims_verified: int = Field(0, ge=0)
    conflicts_found: int = Field(0, ge=0)
    average_confidence: float = Field(..., ge=0.0, le=1.0)
    sources: list[Source] = Field(default_factory=list)
    conflicts: list[Conflict] = Field(default_factory=list)
    early_exit: bool = False
    early_exit_reason: Optional[str] = None


class VerificationOutcome(BaseModel):
    """Everything a verification run produces."""

    verified_claims: list[VerifiedClaim] = Field(default_factory=list)
    conflicts: list[Conflict] = Field(default_factory=list)
    results: list[VerificationResult] = Field(default_factory=list)
    final_confidence: float = Field(0.0, ge=0.0, le=1.0)
    total_rounds: int = Field(0, ge=0)
    should_continue: bool = True
    early_exit_reason: Optional[str] = None


class VerificationStatistics(BaseModel):
    """Aggregate statistics over a run's round results."""

    total_rounds: int = 0
    average_confidence: float = 0.0
    total_conflicts: int = 0
    resolved_conflicts: int = 0
