"""Pydantic models for package comparison and health data."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class DownloadTrend(str, Enum):
    """Direction of a package's download numbers."""

    GROWING = "growing"
    STABLE = "stable"
    DECLINING = "declining"


class MaintainerActivity(str, Enum):
    """Maintainer activity level derived from commits and releases."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


class HealthStatus(str, Enum):
    """Health status derived from the health score."""

    HEALTHY = "healthy"
    STABLE = "stable"
    MAINTENANCE_ONLY = "maintenance-only"
    AT_RISK = "at-risk"
    DEPRECATED = "deprecated"


class CategorySource(str, Enum):
    """Where a category definition came from."""

    SEED = "seed"  # Curated, shipped with the package
    DISCOVERED = "discovered"  # Found by keyword analysis, read from a store


class DiscoveredVia(str, Enum):
    """How an alternative group was put together."""

    KEYWORDS = "keywords"
    MANUAL = "manual"


# --- Categories ---


class CategoryDefinition(BaseModel):
    """A category of interchangeable packages."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    keywords: tuple[str, ...]
    min_matches: int = 1  # Keyword hits required before the category is a candidate


class ExtendedCategory(CategoryDefinition):
    """Category definition tagged with its source and discovery metadata."""

    source: CategorySource = CategorySource.SEED
    confidence: float | None = None
    package_count: int | None = None
    discovered_at: datetime | None = None


class DiscoveredCategory(BaseModel):
    """Category record written by the discovery job.

    Stored as JSON with camelCase keys; ``discoveredAt`` is usually epoch
    milliseconds.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    keywords: list[str] = Field(default_factory=list)
    packages: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0, le=1)
    discovered_at: datetime | None = Field(default=None, alias="discoveredAt")
    package_count: int = Field(default=0, alias="packageCount")

    def to_extended(self) -> ExtendedCategory:
        """Convert to a category usable for inference."""
        return ExtendedCategory(
            id=self.id,
            name=self.name,
            keywords=tuple(k.lower() for k in self.keywords),
            min_matches=1,
            source=CategorySource.DISCOVERED,
            confidence=self.confidence,
            package_count=self.package_count,
            discovered_at=self.discovered_at,
        )


# --- Comparison Models ---


class PackageMetrics(BaseModel):
    """Measurement snapshot of a single package used for comparison scoring."""

    model_config = ConfigDict(frozen=True)

    name: str

    # Downloads
    weekly_downloads: int = 0
    download_trend: DownloadTrend = DownloadTrend.STABLE
    download_velocity: float = 0.0  # % change over 3 months

    # Bundle
    bundle_size: int = 0  # gzip bytes
    bundle_size_raw: int = 0  # uncompressed bytes
    tree_shakeable: bool = False

    # Maintenance
    last_commit_days: int = 365
    recent_commits: int = 0  # last 6 months
    recent_releases: int = 0  # last 6 months

    # Community
    stars: int = 0
    open_issues: int = 0
    contributors: int = 0

    # Quality
    has_types: bool = False
    is_esm: bool = False
    security_issues: int = 0
    deprecated: bool = False

    # Meta
    keywords: tuple[str, ...] = ()
    updated_at: datetime = Field(default_factory=utcnow)


class ScoredPackage(BaseModel):
    """A package with its comparison score and badges."""

    name: str
    score: int = Field(ge=0, le=100)
    metrics: PackageMetrics
    badges: list[str] = Field(default_factory=list)


class PackageInfo(BaseModel):
    """Minimal package record used for alternative discovery."""

    name: str
    keywords: list[str] = Field(default_factory=list)
    weekly_downloads: int = 0


class ManualGroup(BaseModel):
    """Hand-curated list of packages for a category."""

    category: str
    packages: list[str] = Field(default_factory=list)


class ComparisonCategory(ManualGroup):
    """Curated comparison category with a fixed package list."""

    name: str
    description: str = ""


class PackageAlternatives(BaseModel):
    """Curated replacements for an outdated or deprecated package."""

    model_config = ConfigDict(frozen=True)

    alternatives: tuple[str, ...]  # Best first
    recommended: str
    reason: str


class AlternativeGroup(BaseModel):
    """A set of packages that compete with each other."""

    category: str  # e.g. "http-client"
    category_name: str
    packages: list[str] = Field(default_factory=list)
    confidence: float = Field(default=1.0, ge=0, le=1)
    discovered_via: DiscoveredVia = DiscoveredVia.KEYWORDS


class GeneratedComparison(BaseModel):
    """Ranked comparison of an alternative group."""

    category: str
    category_name: str
    packages: list[ScoredPackage]  # Ranked by score, best first
    recommendation: str  # Top-scored package
    smallest_bundle: str
    most_popular: str  # Most weekly downloads
    updated_at: datetime = Field(default_factory=utcnow)


# --- Health Models ---


class GitHubRepoData(BaseModel):
    """GitHub repository signals used for health scoring."""

    owner: str
    repo: str
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    open_prs: int = 0
    last_commit: datetime
    contributors: int = 0
    recent_commits: int = 0  # last 6 months
    recent_releases: int = 0  # last 6 months
    is_archived: bool = False
    topics: list[str] = Field(default_factory=list)
    language: str | None = None


class WeeklyDownloads(BaseModel):
    """Download count for one week."""

    week: str
    downloads: int = 0


class NpmDownloadData(BaseModel):
    """npm download numbers for health calculation."""

    weekly_downloads: int = 0
    monthly_downloads: int = 0
    download_history: list[WeeklyDownloads] = Field(default_factory=list)  # Oldest first


class BundleData(BaseModel):
    """Bundle size data from bundlephobia."""

    gzip: int = 0  # bytes
    size: int = 0  # bytes
    dependency_count: int = 0
    has_js_module: bool = False
    has_js_next: bool = False
    has_side_effects: bool = True


class VulnerabilitySummary(BaseModel):
    """Known vulnerability counts by severity."""

    total: int = 0
    critical: int = 0
    high: int = 0
    moderate: int = 0
    low: int = 0


class HealthSignals(BaseModel):
    """Inputs to the health score. Every field is optional.

    A field left as None means the data was not available; it is never
    the same as zero.
    """

    last_commit: datetime | None = None
    last_commit_ago: str | None = None  # e.g. "3 days ago"

    open_issues: int | None = Field(default=None, ge=0)
    open_prs: int | None = Field(default=None, ge=0)

    download_trend: DownloadTrend | None = None
    weekly_downloads: int | None = Field(default=None, ge=0)
    download_change: int | None = None  # % vs the preceding 8 weeks

    maintainer_activity: MaintainerActivity | None = None
    recent_releases: int | None = Field(default=None, ge=0)  # last 6 months

    vulnerabilities: int | None = Field(default=None, ge=0)

    stars: int | None = Field(default=None, ge=0)
    contributors: int | None = Field(default=None, ge=0)

    deprecated: bool | None = None
    deprecated_message: str | None = None


class PackageHealth(BaseModel):
    """Health assessment of a package."""

    name: str
    score: int = Field(ge=0, le=100)
    status: HealthStatus
    signals: HealthSignals
    recommendation: str | None = None
    alternatives: list[str] | None = None
    updated_at: datetime = Field(default_factory=utcnow)
