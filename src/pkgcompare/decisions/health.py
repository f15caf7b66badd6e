"""Health score calculation.

Merges GitHub activity, npm download trends, vulnerability counts and
deprecation status into a single 0-100 score and status label. Any signal
may be missing; the score is normalized by the weight of the signals that
were actually present.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from pkgcompare.decisions.scorer import round_half_up
from pkgcompare.models.schemas import (
    DownloadTrend,
    GitHubRepoData,
    HealthSignals,
    HealthStatus,
    MaintainerActivity,
    NpmDownloadData,
    PackageHealth,
    WeeklyDownloads,
    utcnow,
)

# Signal group weights (total 100%)
WEIGHTS = {
    "maintainer_activity": 0.30,
    "responsiveness": 0.20,  # Recent releases as a proxy for issue responsiveness
    "download_trend": 0.20,
    "security": 0.15,
    "community": 0.15,
}

ACTIVITY_SCORES = {
    MaintainerActivity.HIGH: 100,
    MaintainerActivity.MEDIUM: 70,
    MaintainerActivity.LOW: 40,
    MaintainerActivity.NONE: 10,
}

TREND_SCORES = {
    DownloadTrend.GROWING: 100,
    DownloadTrend.STABLE: 70,
    DownloadTrend.DECLINING: 30,
}

NO_DATA_SCORE = 50
DEPRECATED_SCORE_CAP = 25
TREND_THRESHOLD = 0.1  # +/-10% change between windows


@dataclass
class WeightedScore:
    """Accumulates weighted group scores and the weight actually used."""

    weighted_sum: float = 0.0
    weight_used: float = 0.0

    def add(self, score: float, weight: float) -> None:
        self.weighted_sum += score * weight
        self.weight_used += weight

    def normalized(self) -> float | None:
        """Score scaled to the weight used, or None if nothing was added."""
        if self.weight_used <= 0:
            return None
        return self.weighted_sum / self.weight_used


def calculate_health_score(signals: HealthSignals) -> int:
    """Calculate the health score from available signals.

    Weights:
    - Maintainer activity: 30%
    - Recent releases: 20%
    - Download trend: 20%
    - Security: 15%
    - Community: 15%

    A group only counts when its data is present. Deprecated packages are
    capped at 25.

    Args:
        signals: Health signals, any of which may be missing.

    Returns:
        Score from 0 to 100.
    """
    total = WeightedScore()

    if signals.maintainer_activity is not None:
        total.add(ACTIVITY_SCORES[signals.maintainer_activity], WEIGHTS["maintainer_activity"])

    if signals.recent_releases is not None:
        total.add(min(signals.recent_releases * 15, 100), WEIGHTS["responsiveness"])

    if signals.download_trend is not None:
        total.add(TREND_SCORES[signals.download_trend], WEIGHTS["download_trend"])

    if signals.vulnerabilities is not None:
        if signals.vulnerabilities == 0:
            security = 100
        else:
            security = max(0, 100 - signals.vulnerabilities * 25)
        total.add(security, WEIGHTS["security"])

    if signals.stars is not None or signals.contributors is not None:
        # Best of the two community signals, not an average
        community = NO_DATA_SCORE
        if signals.stars is not None:
            community = min(signals.stars / 100, 100)
        if signals.contributors is not None:
            community = max(community, min(signals.contributors * 5, 100))
        total.add(community, WEIGHTS["community"])

    normalized = total.normalized()
    score = NO_DATA_SCORE if normalized is None else normalized

    if signals.deprecated:
        return round_half_up(min(score, DEPRECATED_SCORE_CAP))

    return max(0, min(100, round_half_up(score)))


def get_health_status(score: float, deprecated: bool | None = None) -> HealthStatus:
    """Map a health score to a status label."""
    if deprecated:
        return HealthStatus.DEPRECATED
    if score >= 80:
        return HealthStatus.HEALTHY
    if score >= 60:
        return HealthStatus.STABLE
    if score >= 40:
        return HealthStatus.MAINTENANCE_ONLY
    return HealthStatus.AT_RISK


def get_maintainer_activity(recent_commits: int, recent_releases: int) -> MaintainerActivity:
    """Classify maintainer activity; a release counts as five commits."""
    total = recent_commits + recent_releases * 5
    if total >= 50:
        return MaintainerActivity.HIGH
    if total >= 20:
        return MaintainerActivity.MEDIUM
    if total >= 5:
        return MaintainerActivity.LOW
    return MaintainerActivity.NONE


def _window_change(history: Sequence[WeeklyDownloads]) -> float | None:
    """Relative change of the last 4 weeks vs the 8 weeks before them."""
    recent = sum(w.downloads for w in history[-4:]) / 4
    older = sum(w.downloads for w in history[-12:-4]) / 8
    if older == 0:
        return None
    return (recent - older) / older


def get_download_trend(history: Sequence[WeeklyDownloads]) -> DownloadTrend:
    """Classify weekly download history (oldest first) as a trend.

    Needs at least 4 weeks of data; shorter histories are "stable".
    """
    if len(history) < 4:
        return DownloadTrend.STABLE

    change = _window_change(history)
    if change is None:
        return DownloadTrend.STABLE
    if change > TREND_THRESHOLD:
        return DownloadTrend.GROWING
    if change < -TREND_THRESHOLD:
        return DownloadTrend.DECLINING
    return DownloadTrend.STABLE


def get_download_change(history: Sequence[WeeklyDownloads]) -> int | None:
    """Percentage change in downloads, only with 12+ weeks of history."""
    if len(history) < 12:
        return None
    change = _window_change(history)
    if change is None:
        return None
    return round_half_up(change * 100)


def format_time_ago(when: datetime, now: datetime | None = None) -> str:
    """Format a datetime relative to now (e.g. "3 days ago")."""
    now = now or datetime.now(timezone.utc)
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    days = (now - when).days

    if days <= 0:
        return "today"
    if days == 1:
        return "yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return f"{days // 7} weeks ago"
    if days < 365:
        return f"{days // 30} months ago"
    return f"{days // 365} years ago"


def build_health_signals(
    github: GitHubRepoData | None = None,
    npm: NpmDownloadData | None = None,
    deprecated: bool | None = None,
    deprecated_message: str | None = None,
    vulnerabilities: int | None = None,
) -> HealthSignals:
    """Build health signals from whatever raw data is available.

    Fields without source data are left unset.

    Args:
        github: GitHub repository data.
        npm: npm download data.
        deprecated: Registry deprecation flag.
        deprecated_message: Registry deprecation message.
        vulnerabilities: Known vulnerability count from OSV.

    Returns:
        HealthSignals with only the available fields set.
    """
    fields: dict = {}

    if github:
        fields.update(
            last_commit=github.last_commit,
            last_commit_ago=format_time_ago(github.last_commit),
            open_issues=github.open_issues,
            open_prs=github.open_prs,
            stars=github.stars,
            contributors=github.contributors,
            recent_releases=github.recent_releases,
            maintainer_activity=get_maintainer_activity(github.recent_commits, github.recent_releases),
        )

    if npm:
        fields["weekly_downloads"] = npm.weekly_downloads
        fields["download_trend"] = get_download_trend(npm.download_history)
        change = get_download_change(npm.download_history)
        if change is not None:
            fields["download_change"] = change

    if vulnerabilities is not None:
        fields["vulnerabilities"] = vulnerabilities

    if deprecated is not None:
        fields["deprecated"] = deprecated
        fields["deprecated_message"] = deprecated_message

    return HealthSignals(**fields)


def _recommend(status: HealthStatus, alternatives: Sequence[str] | None) -> str | None:
    if status == HealthStatus.DEPRECATED and alternatives:
        return f"Deprecated. Consider {' or '.join(alternatives[:2])} instead"
    if status == HealthStatus.AT_RISK and alternatives:
        return f"Low maintenance. Consider {' or '.join(alternatives[:2])} as alternatives"
    if status == HealthStatus.MAINTENANCE_ONLY:
        return "In maintenance mode - may not receive new features"
    return None


def build_package_health(
    name: str,
    signals: HealthSignals,
    alternatives: Sequence[str] | None = None,
) -> PackageHealth:
    """Build the complete health assessment for a package.

    Args:
        name: Package name.
        signals: Health signals.
        alternatives: Candidate replacement packages, best first.

    Returns:
        PackageHealth. Alternatives are only attached when the package is
        neither healthy nor stable.
    """
    score = calculate_health_score(signals)
    status = get_health_status(score, signals.deprecated)
    healthy = status in (HealthStatus.HEALTHY, HealthStatus.STABLE)

    return PackageHealth(
        name=name,
        score=score,
        status=status,
        signals=signals,
        recommendation=_recommend(status, alternatives),
        alternatives=None if healthy or alternatives is None else list(alternatives),
        updated_at=utcnow(),
    )
