"""Claim schemas: statements under verification and their verified form.

Claims are inputs and stay immutable; verification produces a new
VerifiedClaim per claim instead of updating the original.
"""

import uuid
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from research_verifier.schemas.source_schema import Source


class VerificationStatus(str, Enum):
    """Verification status of a claim.

    PENDING: Not yet verified.
    VERIFIED: Final confidence >= 0.8.
    DISPUTED: Final confidence >= 0.5.
    FALSE: Final confidence below 0.5.
    """

    PENDING = "pending"
    VERIFIED = "verified"
    DISPUTED = "disputed"
    FALSE = "false"


class Claim(BaseModel):
    """A factual statement extracted from sources.

    Attributes:
        id: Claim identifier.
        text: Natural-language statement.
        topic: Research topic the claim belongs to.
        extracted_from: IDs of the sources the claim came from.
        confidence: Extraction confidence 0.0-1.0.
        verification_status: Current status.
        metadata: Free-form extraction metadata.
    """

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique claim identifier",
    )
    text: str = Field(..., description="Claim text")
    topic: str = Field("", description="Research topic")
    extracted_from: list[str] = Field(
        default_factory=list, description="Source IDs the claim was extracted from"
    )
    confidence: float = Field(0.5, ge=0.0, le=1.0)
    verification_status: VerificationStatus = VerificationStatus.PENDING
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "claim-1",
                    "text": "In 2024 the average wedding cost was 21M KRW",
                    "topic": "wedding costs",
                    "extracted_from": ["src-1"],
                    "confidence": 0.5,
                    "verification_status": "pending",
                }
            ]
        },
    }


class VerifiedClaim(Claim):
    """Claim after the verification rounds.

    verification_rounds always equals the number of rounds the run executed,
    whether or not this particular claim had matching evidence.
    """

    verification_rounds: int = Field(0, ge=0)
    supporting_sources: list[Source] = Field(default_factory=list)
    contradicting_sources: list[Source] = Field(default_factory=list)
    final_confidence: float = Field(..., ge=0.0, le=1.0)
    notes: Optional[str] = None
