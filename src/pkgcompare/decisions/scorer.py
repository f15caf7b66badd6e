"""Comparison score calculator for ranking alternative packages."""

import math
from collections.abc import Iterable

from pkgcompare.models.schemas import DownloadTrend, PackageMetrics, ScoredPackage


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding up."""
    return math.floor(value + 0.5)


def normalize(value: float, lo: float, hi: float) -> float:
    """Linearly map a value onto 0-1, clamped at both ends."""
    if hi == lo:
        return 0.5
    return max(0.0, min(1.0, (value - lo) / (hi - lo)))


class Scorer:
    """Scores packages for ranking within a category.

    Base weights (total 75%):
    - Popularity (weekly downloads): 15%
    - Bundle size (smaller is better): 20%
    - Freshness (days since last commit): 20%
    - Community (stars): 10%
    - Activity (commits + releases): 10%

    The remaining 25% is only reachable through the trend and quality
    bonuses. Deprecated packages always score 0.
    """

    WEIGHTS = {
        "popularity": 0.15,
        "size": 0.20,
        "freshness": 0.20,
        "community": 0.10,
        "activity": 0.10,
    }

    # Normalization domains (lo, hi)
    DOWNLOADS_RANGE = (0, 50_000_000)
    BUNDLE_SIZE_RANGE = (0, 200_000)  # gzip bytes
    COMMIT_DAYS_RANGE = (0, 365)
    STARS_RANGE = (0, 50_000)
    ACTIVITY_RANGE = (0, 100)
    RELEASE_ACTIVITY_FACTOR = 5  # One release counts as five commits

    TREND_ADJUSTMENTS = {
        DownloadTrend.GROWING: 0.08,
        DownloadTrend.STABLE: 0.0,
        DownloadTrend.DECLINING: -0.12,
    }
    SECURITY_PENALTY = -0.15  # Flat, regardless of issue count
    TYPES_BONUS = 0.08
    ESM_BONUS = 0.04
    TREE_SHAKE_BONUS = 0.05

    # Badge thresholds
    TINY_BUNDLE = 5_000
    SMALL_BUNDLE = 15_000
    LARGE_BUNDLE = 100_000
    INACTIVE_DAYS = 180
    ACTIVE_DAYS = 14
    VERY_POPULAR_DOWNLOADS = 10_000_000

    def score_package(self, m: PackageMetrics) -> int:
        """Calculate a package's comparison score.

        Args:
            m: Package metrics.

        Returns:
            Score from 0 to 100.
        """
        if m.deprecated:
            return 0

        popularity = normalize(m.weekly_downloads, *self.DOWNLOADS_RANGE)
        size = 1 - normalize(m.bundle_size, *self.BUNDLE_SIZE_RANGE)
        freshness = 1 - normalize(m.last_commit_days, *self.COMMIT_DAYS_RANGE)
        community = normalize(m.stars, *self.STARS_RANGE)
        activity = normalize(
            m.recent_commits + m.recent_releases * self.RELEASE_ACTIVITY_FACTOR,
            *self.ACTIVITY_RANGE,
        )

        score = (
            popularity * self.WEIGHTS["popularity"]
            + size * self.WEIGHTS["size"]
            + freshness * self.WEIGHTS["freshness"]
            + community * self.WEIGHTS["community"]
            + activity * self.WEIGHTS["activity"]
        )

        score += self.TREND_ADJUSTMENTS.get(m.download_trend, 0.0)

        if m.security_issues > 0:
            score += self.SECURITY_PENALTY

        if m.has_types:
            score += self.TYPES_BONUS
        if m.is_esm:
            score += self.ESM_BONUS
        if m.tree_shakeable:
            score += self.TREE_SHAKE_BONUS

        return round_half_up(max(0.0, min(1.0, score)) * 100)

    def generate_badges(self, m: PackageMetrics) -> list[str]:
        """Generate display badges for a package."""
        if m.deprecated:
            return ["Deprecated"]

        badges = []

        if m.has_types:
            badges.append("TypeScript")
        if m.is_esm:
            badges.append("ESM")
        if m.tree_shakeable:
            badges.append("Tree-shakeable")

        if m.download_trend == DownloadTrend.GROWING:
            badges.append("Trending Up")
        elif m.download_trend == DownloadTrend.DECLINING:
            badges.append("Declining")

        # At most one size badge; nothing for the 15-100kb middle band
        if m.bundle_size < self.TINY_BUNDLE:
            badges.append("Tiny (<5kb)")
        elif m.bundle_size < self.SMALL_BUNDLE:
            badges.append("Small (<15kb)")
        elif m.bundle_size > self.LARGE_BUNDLE:
            badges.append("Large (>100kb)")

        if m.security_issues > 0:
            badges.append("Security Issues")

        if m.last_commit_days > self.INACTIVE_DAYS:
            badges.append("Inactive")
        elif m.last_commit_days < self.ACTIVE_DAYS:
            badges.append("Active")

        if m.weekly_downloads > self.VERY_POPULAR_DOWNLOADS:
            badges.append("Very Popular")

        return badges

    def rank_packages(self, packages: Iterable[PackageMetrics]) -> list[ScoredPackage]:
        """Score packages and sort them best first.

        Packages with equal scores keep their input order.
        """
        scored = [
            ScoredPackage(
                name=metrics.name,
                score=self.score_package(metrics),
                metrics=metrics,
                badges=self.generate_badges(metrics),
            )
            for metrics in packages
        ]
        return sorted(scored, key=lambda p: p.score, reverse=True)

    def explain_score(self, m: PackageMetrics) -> list[str]:
        """Explain a package's score, positive reasons first."""
        if m.deprecated:
            return ["Package is deprecated"]

        reasons = []

        # Positive
        if m.download_trend == DownloadTrend.GROWING:
            reasons.append("Downloads growing")
        if m.has_types:
            reasons.append("TypeScript types included")
        if m.bundle_size < self.SMALL_BUNDLE:
            reasons.append(f"Small bundle ({m.bundle_size / 1000:.1f}kb)")
        if m.last_commit_days < 30:
            reasons.append("Actively maintained")
        if m.stars > 10_000:
            reasons.append(f"Popular ({m.stars / 1000:.0f}k stars)")

        # Negative
        if m.download_trend == DownloadTrend.DECLINING:
            reasons.append("Downloads declining")
        if m.security_issues > 0:
            reasons.append(f"{m.security_issues} security issue(s)")
        if m.last_commit_days > self.INACTIVE_DAYS:
            reasons.append("No recent commits")
        if m.bundle_size > self.LARGE_BUNDLE:
            reasons.append(f"Large bundle ({m.bundle_size / 1000:.0f}kb)")

        return reasons


_default_scorer = Scorer()


def score_package(m: PackageMetrics) -> int:
    """Calculate a package's comparison score (0-100)."""
    return _default_scorer.score_package(m)


def generate_badges(m: PackageMetrics) -> list[str]:
    """Generate display badges for a package."""
    return _default_scorer.generate_badges(m)


def rank_packages(packages: Iterable[PackageMetrics]) -> list[ScoredPackage]:
    """Score packages and sort them best first."""
    return _default_scorer.rank_packages(packages)


def explain_score(m: PackageMetrics) -> list[str]:
    """Explain a package's score as human-readable reasons."""
    return _default_scorer.explain_score(m)
