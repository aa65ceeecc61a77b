"""Credibility score schemas.

Storing the individual factors next to the overall score lets callers see
WHY a research session scored the way it did, and lets compare() and
get_recommendations() work from the factors alone.
"""

from typing import Literal

from pydantic import BaseModel, Field


class CredibilityFactors(BaseModel):
    """The five weighted credibility factors.

    citation_count has no upper bound: the log scale passes 1.0 beyond
    1000 citations and is intentionally left unclamped.
    """

    source_credibility: float = Field(..., ge=0.0, le=1.0)
    cross_verification_agreement: float = Field(..., ge=0.0, le=1.0)
    recency: float = Field(..., ge=0.0, le=1.0)
    citation_count: float = Field(..., ge=0.0)
    expert_verification: float = Field(..., ge=0.0, le=1.0)


class ConfidenceScore(BaseModel):
    """Weighted credibility score with its factors and a readable breakdown."""

    overall: float = Field(..., ge=0.0)
    factors: CredibilityFactors
    breakdown: str = ""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "overall": 0.82,
                    "factors": {
                        "source_credibility": 0.92,
                        "cross_verification_agreement": 1.0,
                        "recency": 0.61,
                        "citation_count": 0.9,
                        "expert_verification": 0.5,
                    },
                    "breakdown": "Source Credibility: 92.0% (weight: 40%)\n...",
                }
            ]
        }
    }


class ScoreComparison(BaseModel):
    """Result of comparing two credibility scores."""

    difference: float
    better: Literal["first", "second", "equal"]
    improvements: list[str] = Field(default_factory=list)
