"""Data models and schemas."""

from pkgcompare.models.schemas import (
    AlternativeGroup,
    CategoryDefinition,
    GeneratedComparison,
    HealthSignals,
    PackageHealth,
    PackageMetrics,
    ScoredPackage,
)

__all__ = [
    "AlternativeGroup",
    "CategoryDefinition",
    "GeneratedComparison",
    "HealthSignals",
    "PackageHealth",
    "PackageMetrics",
    "ScoredPackage",
]
