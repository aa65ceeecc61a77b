"""Conflict resolver implementing the five-type resolution strategies.

Strategies:
- SCOPE_DIFFERENCE: label each claim's scope, present all (0.90)
- TEMPORAL_DIFFERENCE: most recent year is primary, the rest is history (0.85)
- STATISTICAL_METHOD: label each statistical measure, present all (0.88)
- MEASUREMENT_UNIT: label each measurement basis, present all (0.87)
- TRUE_CONTRADICTION: trust the higher-credibility source when the credibility
  spread exceeds 0.20 (0.70), otherwise present equal perspectives (0.65)
- Unknown types: manual review, resolved=False (0.50)

The rules themselves live in conflict_rules so that the verification engine
resolves conflicts exactly the same way.
"""

from typing import Sequence

from loguru import logger

from research_verifier.schemas import (
    Claim,
    Conflict,
    ConflictType,
    ResolutionResult,
    ResolutionStatistics,
    TypeStatistics,
    conflict_type_key,
)
from research_verifier.verification.conflict_rules import (
    classify_conflict,
    resolve_conflict,
)


class ConflictResolver:
    """
    Classifies and resolves conflicts between claims.

    Stateless: safe to share between concurrent verification runs.

    Usage:
        resolver = ConflictResolver()
        conflict_type = resolver.detect_conflict_type(claims)
        result = resolver.resolve(conflict)
        stats = resolver.get_statistics(resolver.resolve_multiple(conflicts))
    """

    def __init__(self):
        self.logger = logger.bind(component="ConflictResolver")

    def detect_conflict_type(self, claims: Sequence[Claim]) -> ConflictType:
        """
        Detect the conflict type of a group of claims.

        Args:
            claims: Claims that disagree with each other

        Returns:
            First matching ConflictType in priority order
        """
        return classify_conflict(claims)

    def resolve(self, conflict: Conflict) -> ResolutionResult:
        """
        Resolve a single conflict.

        Args:
            conflict: Conflict to resolve (left unmodified)

        Returns:
            ResolutionResult carrying a resolved copy of the conflict
        """
        self.logger.info(
            f"Resolving conflict type: {conflict_type_key(conflict.type)}",
            claims_count=len(conflict.claims),
            sources_count=len(conflict.sources),
        )
        return resolve_conflict(conflict)

    def resolve_multiple(self, conflicts: Sequence[Conflict]) -> list[ResolutionResult]:
        """Resolve each conflict in order."""
        self.logger.info(f"Resolving {len(conflicts)} conflicts")
        return [self.resolve(conflict) for conflict in conflicts]

    def get_statistics(self, results: Sequence[ResolutionResult]) -> ResolutionStatistics:
        """
        Aggregate resolution results.

        Args:
            results: Output of resolve()/resolve_multiple()

        Returns:
            Totals, per-type counts and average confidence (all zero when empty)
        """
        by_type: dict[str, TypeStatistics] = {}
        for result in results:
            key = conflict_type_key(result.conflict.type)
            stats = by_type.setdefault(key, TypeStatistics())
            stats.count += 1
            if result.resolved:
                stats.resolved += 1

        average_confidence = (
            sum(result.confidence for result in results) / len(results) if results else 0.0
        )

        return ResolutionStatistics(
            total=len(results),
            resolved=sum(1 for result in results if result.resolved),
            by_type=by_type,
            average_confidence=average_confidence,
        )


def create_conflict_resolver() -> ConflictResolver:
    return ConflictResolver()


__all__ = ["ConflictResolver", "create_conflict_resolver"]
