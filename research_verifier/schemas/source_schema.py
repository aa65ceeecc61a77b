"""Source schema: reference documents used as evidence.

Sources are supplied by the search/aggregation layer, already collected.
They are read-only to verification: credibility scoring and the verification
rounds read them but never modify them.

Credibility metadata:
- credibility_score: 0.0-1.0 score assigned upstream (0.0 means "not scored")
- credibility_level: coarse high/medium/low label
- citation_count: academic citations, when known
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class SourceType(str, Enum):
    """Kind of source a reference was collected from."""

    WEB = "web"
    ACADEMIC = "academic"
    GITHUB = "github"
    VIDEO = "video"
    FORUM = "forum"
    USER_PROVIDED = "user-provided"


class CredibilityLevel(str, Enum):
    """Coarse credibility label attached to a source upstream."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Source(BaseModel):
    """A reference document with credibility metadata.

    Attributes:
        id: Source identifier, referenced by Claim.extracted_from.
        url: Location of the source.
        type: Source category (drives credibility heuristics).
        title: Title used for lexical claim matching.
        author: Author, if known.
        published_date: Publication date, if known (drives recency).
        accessed_date: When the source was collected.
        credibility_score: Upstream credibility 0.0-1.0.
        credibility_level: Upstream credibility label.
        citation_count: Academic citation count, if known.
        metadata: Free-form provider metadata.
    """

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique source identifier",
    )
    url: str = Field(..., description="Source URL")
    type: SourceType = Field(SourceType.WEB, description="Source category")
    title: str = Field("", description="Source title")
    author: Optional[str] = Field(None, description="Author, if known")
    published_date: Optional[datetime] = Field(
        None, description="Publication date, if known"
    )
    accessed_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the source was accessed",
    )
    credibility_score: float = Field(
        0.0, ge=0.0, le=1.0, description="Upstream credibility score"
    )
    credibility_level: CredibilityLevel = Field(
        CredibilityLevel.MEDIUM, description="Upstream credibility label"
    )
    citation_count: Optional[int] = Field(
        None, ge=0, description="Academic citation count"
    )
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "src-1",
                    "url": "https://www.nature.com/articles/example",
                    "type": "academic",
                    "title": "Global marriage statistics 2024",
                    "author": "Kim et al.",
                    "published_date": "2024-06-01T00:00:00Z",
                    "accessed_date": "2025-01-10T12:00:00Z",
                    "credibility_score": 0.95,
                    "credibility_level": "high",
                    "citation_count": 500,
                    "metadata": {},
                }
            ]
        },
    }
