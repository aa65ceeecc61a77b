"""Conflict schemas: disagreements between claims and their resolutions.

Five conflict types, in classification priority order:
1. SCOPE_DIFFERENCE: different measurement scopes ("ceremony only" vs "ceremony + honeymoon")
2. TEMPORAL_DIFFERENCE: different time periods ("2024 data" vs "2023 data")
3. STATISTICAL_METHOD: different statistical measures ("average" vs "median")
4. MEASUREMENT_UNIT: different measurement bases ("quality" vs "speed")
5. TRUE_CONTRADICTION: actually contradictory information

Conflict.type also accepts unrecognised strings. Those are not an error:
resolution degrades to a manual-review result instead.
"""

import uuid
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

from research_verifier.schemas.claim_schema import Claim
from research_verifier.schemas.source_schema import Source


class ConflictType(str, Enum):
    """Conflict taxonomy."""

    SCOPE_DIFFERENCE = "SCOPE_DIFFERENCE"
    TEMPORAL_DIFFERENCE = "TEMPORAL_DIFFERENCE"
    STATISTICAL_METHOD = "STATISTICAL_METHOD"
    MEASUREMENT_UNIT = "MEASUREMENT_UNIT"
    TRUE_CONTRADICTION = "TRUE_CONTRADICTION"


def conflict_type_key(value: Union[ConflictType, str]) -> str:
    """Plain string key for a conflict type (enum value or the raw string)."""
    if isinstance(value, ConflictType):
        return value.value
    return str(value)


class Conflict(BaseModel):
    """A detected disagreement among claims.

    Attributes:
        id: Conflict identifier.
        type: Conflict type (or an unrecognised type string).
        claims: Claims involved; never empty.
        sources: Sources backing the involved claims.
        resolution_strategy: Strategy chosen at detection time.
        resolved: Whether a resolution was produced.
        resolution: Human-readable resolution text.
        confidence: Confidence in the detection/resolution 0.0-1.0.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: Union[ConflictType, str] = Field(..., description="Conflict type")
    claims: list[Claim] = Field(..., min_length=1)
    sources: list[Source] = Field(default_factory=list)
    resolution_strategy: str = ""
    resolved: bool = False
    resolution: Optional[str] = None
    confidence: float = Field(0.5, ge=0.0, le=1.0)

    model_config = {"frozen": True}

    @field_validator("type", mode="before")
    @classmethod
    def coerce_known_type(cls, value: Any) -> Any:
        """Map known type strings onto ConflictType, keep anything else as-is."""
        if isinstance(value, str) and not isinstance(value, ConflictType):
            try:
                return ConflictType(value)
            except ValueError:
                return value
        return value


class ResolutionResult(BaseModel):
    """Outcome of resolving one conflict.

    The embedded conflict is a resolved copy; the input conflict is untouched.
    """

    conflict: Conflict
    strategy: str
    resolved: bool
    resolution: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    user_notification: Optional[str] = None


class TypeStatistics(BaseModel):
    """Per-type counters for resolution statistics."""

    count: int = 0
    resolved: int = 0


class ResolutionStatistics(BaseModel):
    """Aggregate statistics over a batch of resolution results."""

    total: int = 0
    resolved: int = 0
    by_type: dict[str, TypeStatistics] = Field(default_factory=dict)
    average_confidence: float = 0.0
