"""Comparison generator.

Fetches metrics for a group of alternative packages, ranks them, and picks
the headline packages. Stateless: callers own any caching.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from pkgcompare.decisions.categories import get_category_name
from pkgcompare.decisions.scorer import explain_score, rank_packages
from pkgcompare.models.schemas import (
    AlternativeGroup,
    DiscoveredVia,
    GeneratedComparison,
    PackageMetrics,
    utcnow,
)

logger = logging.getLogger(__name__)

MetricsFetcherFn = Callable[[str], Awaitable[PackageMetrics | None] | PackageMetrics | None]

MIN_COMPARED_PACKAGES = 2
CUSTOM_CATEGORY = "custom"


async def _fetch_one(name: str, fetch_metrics: MetricsFetcherFn) -> PackageMetrics | None:
    """Fetch metrics for one package; failures become None."""
    try:
        result = fetch_metrics(name)
        if inspect.isawaitable(result):
            result = await result
    except Exception as e:
        logger.warning(f"Failed to fetch metrics for {name}: {e}")
        return None

    if result is None:
        logger.debug(f"No metrics available for {name}")
    return result


async def generate_comparison(
    group: AlternativeGroup,
    fetch_metrics: MetricsFetcherFn,
) -> GeneratedComparison | None:
    """Generate a ranked comparison for an alternative group.

    Args:
        group: Packages to compare.
        fetch_metrics: Callable returning metrics (or None) for a package
            name. May be sync or async; it is called for all packages
            concurrently and a failure for one package does not affect
            the others.

    Returns:
        GeneratedComparison, or None if fewer than two packages had metrics.
    """
    results = await asyncio.gather(*(_fetch_one(name, fetch_metrics) for name in group.packages))
    valid = [m for m in results if m is not None]

    if len(valid) < MIN_COMPARED_PACKAGES:
        logger.debug(
            f"Not enough metrics to compare {group.category}: {len(valid)}/{len(group.packages)}"
        )
        return None

    ranked = rank_packages(valid)
    top = ranked[0]

    # Independent selections over the ranked list; ties keep rank order
    smallest = min(ranked, key=lambda p: p.metrics.bundle_size)
    most_popular = max(ranked, key=lambda p: p.metrics.weekly_downloads)

    return GeneratedComparison(
        category=group.category,
        category_name=group.category_name or get_category_name(group.category),
        packages=ranked,
        recommendation=top.name,
        smallest_bundle=smallest.name,
        most_popular=most_popular.name,
        updated_at=utcnow(),
    )


async def compare_specific_packages(
    package_names: Sequence[str],
    fetch_metrics: MetricsFetcherFn,
) -> GeneratedComparison | None:
    """Compare an ad-hoc list of packages.

    Returns None without fetching anything if fewer than two names are given.
    """
    if len(package_names) < MIN_COMPARED_PACKAGES:
        return None

    group = AlternativeGroup(
        category=CUSTOM_CATEGORY,
        category_name="Custom Comparison",
        packages=list(package_names),
        confidence=1.0,
        discovered_via=DiscoveredVia.MANUAL,
    )
    return await generate_comparison(group, fetch_metrics)


def format_comparison_summary(comparison: GeneratedComparison) -> str:
    """Format a comparison as a short plain-text summary."""
    if not comparison.packages:
        return "No packages to compare."

    top = comparison.packages[0]
    lines = [
        f"Recommended: {comparison.recommendation} (score: {top.score}/100)",
        f"Smallest bundle: {comparison.smallest_bundle}",
        f"Most popular: {comparison.most_popular}",
        "",
        "Rankings:",
    ]

    for pkg in comparison.packages:
        reasons = explain_score(pkg.metrics)
        lines.append(f"  {pkg.score}/100 - {pkg.name}: {', '.join(reasons[:2])}")

    return "\n".join(lines)


def _metrics_to_api(m: PackageMetrics) -> dict[str, Any]:
    return {
        "name": m.name,
        "weeklyDownloads": m.weekly_downloads,
        "downloadTrend": m.download_trend.value,
        "downloadVelocity": m.download_velocity,
        "bundleSize": m.bundle_size,
        "bundleSizeKb": f"{m.bundle_size / 1000:.1f}kb",
        "bundleSizeRaw": m.bundle_size_raw,
        "treeShakeable": m.tree_shakeable,
        "lastCommitDays": m.last_commit_days,
        "recentCommits": m.recent_commits,
        "recentReleases": m.recent_releases,
        "stars": m.stars,
        "openIssues": m.open_issues,
        "contributors": m.contributors,
        "hasTypes": m.has_types,
        "isESM": m.is_esm,
        "securityIssues": m.security_issues,
        "deprecated": m.deprecated,
        "keywords": list(m.keywords),
        "updatedAt": m.updated_at.isoformat(),
    }


def to_api_response(comparison: GeneratedComparison) -> dict[str, Any]:
    """Convert a comparison to a JSON-serializable API payload."""
    return {
        "category": comparison.category,
        "categoryName": comparison.category_name,
        "recommendation": comparison.recommendation,
        "smallestBundle": comparison.smallest_bundle,
        "mostPopular": comparison.most_popular,
        "packages": [
            {
                "name": p.name,
                "score": p.score,
                "badges": list(p.badges),
                "metrics": _metrics_to_api(p.metrics),
            }
            for p in comparison.packages
        ],
        "updatedAt": comparison.updated_at.isoformat(),
    }
