"""Cross-verification report returned by CrossVerifyPipeline.run()."""

from typing import Optional

from pydantic import BaseModel, Field

from research_verifier.schemas.claim_schema import VerificationStatus


class ClaimReport(BaseModel):
    """Per-claim line of a cross-verification report."""

    text: str
    status: VerificationStatus
    final_confidence: float = Field(..., ge=0.0, le=1.0)
    supporting_sources: int = Field(0, ge=0)
    contradicting_sources: int = Field(0, ge=0)


class ConflictReport(BaseModel):
    """Conflict as shown to the caller."""

    type: str
    resolved: bool
    resolution: Optional[str] = None


class CrossVerifyReport(BaseModel):
    """Outcome of one cross-verification request.

    On failure only success, error and message are meaningful.
    """

    success: bool
    session_id: Optional[str] = None
    topic: Optional[str] = None
    total_claims: int = 0
    verified_claims: list[ClaimReport] = Field(default_factory=list)
    conflicts: list[ConflictReport] = Field(default_factory=list)
    total_rounds: int = 0
    final_confidence: float = 0.0
    credibility_score: float = 0.0
    credibility_breakdown: str = ""
    error: Optional[str] = None
    message: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "success": True,
                    "session_id": "4f7c2a",
                    "topic": "wedding costs",
                    "total_claims": 1,
                    "verified_claims": [
                        {
                            "text": "In 2024 the average wedding cost was 21M KRW",
                            "status": "disputed",
                            "final_confidence": 0.62,
                            "supporting_sources": 2,
                            "contradicting_sources": 0,
                        }
                    ],
                    "conflicts": [],
                    "total_rounds": 10,
                    "final_confidence": 0.62,
                    "credibility_score": 0.58,
                }
            ]
        }
    }
