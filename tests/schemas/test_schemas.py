"""Tests for the pydantic schemas."""

import pytest
from pydantic import ValidationError

from research_verifier.schemas import (
    Claim,
    Conflict,
    ConflictType,
    CredibilityFactors,
    Source,
    SourceType,
    VerificationConfig,
    VerificationResult,
    VerifiedClaim,
    conflict_type_key,
)


class TestSource:
    """Tests for Source."""

    def test_defaults(self):
        """Sources get an id, web type and an access timestamp."""
        source = Source(url="https://example.com")
        assert source.id
        assert source.type == SourceType.WEB
        assert source.credibility_score == 0.0
        assert source.accessed_date.tzinfo is not None

    def test_user_provided_value(self):
        """The user-provided type serialises with a hyphen."""
        source = Source(url="https://example.com", type="user-provided")
        assert source.type == SourceType.USER_PROVIDED
        assert source.model_dump(mode="json")["type"] == "user-provided"

    def test_credibility_bounds(self):
        """Credibility scores outside [0, 1] are rejected."""
        with pytest.raises(ValidationError):
            Source(url="https://example.com", credibility_score=1.2)

    def test_frozen(self):
        """Sources are immutable."""
        source = Source(url="https://example.com")
        with pytest.raises(ValidationError):
            source.title = "changed"


class TestClaims:
    """Tests for Claim and VerifiedClaim."""

    def test_claim_frozen(self):
        """Claims are immutable inputs."""
        claim = Claim(text="A claim")
        with pytest.raises(ValidationError):
            claim.confidence = 0.9

    def test_verified_claim_requires_final_confidence(self):
        """final_confidence has no default."""
        with pytest.raises(ValidationError):
            VerifiedClaim(text="A claim")


class TestConflict:
    """Tests for Conflict."""

    def test_requires_claims(self):
        """A conflict involves at least one claim."""
        with pytest.raises(ValidationError):
            Conflict(type=ConflictType.SCOPE_DIFFERENCE, claims=[])

    def test_type_key(self):
        """conflict_type_key() works for enum members and raw strings."""
        assert conflict_type_key(ConflictType.MEASUREMENT_UNIT) == "MEASUREMENT_UNIT"
        assert conflict_type_key("CUSTOM") == "CUSTOM"


class TestVerificationConfig:
    """Tests for VerificationConfig."""

    def test_defaults(self):
        """Defaults: 10 / 15 rounds, 5 sources, 0.85 confidence, 0.80 agreement."""
        config = VerificationConfig()
        assert (config.min_rounds, config.max_rounds) == (10, 15)
        assert config.min_sources == 5
        assert config.min_confidence == 0.85
        assert config.min_agreement == 0.80
        assert config.enable_early_exit is True

    def test_min_rounds_cannot_exceed_max(self):
        """min_rounds > max_rounds is rejected."""
        with pytest.raises(ValidationError, match="exceeds max_rounds"):
            VerificationConfig(min_rounds=12, max_rounds=10)


class TestBounds:
    """Tests for numeric bounds on results and factors."""

    def test_result_confidence_bounds(self):
        """Round confidence must stay within [0, 1]."""
        with pytest.raises(ValidationError):
            VerificationResult(round=1, average_confidence=1.01)

    def test_citation_factor_unbounded(self):
        """The citation factor may exceed 1.0."""
        factors = CredibilityFactors(
            source_credibility=0.9,
            cross_verification_agreement=0.9,
            recency=0.9,
            citation_count=1.4,
            expert_verification=0.5,
        )
        assert factors.citation_count == 1.4
