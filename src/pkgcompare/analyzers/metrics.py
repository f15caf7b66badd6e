"""Package metrics collection.

Combines the npm registry, download stats, bundlephobia, GitHub and OSV
into the PackageMetrics and HealthSignals consumed by the scoring core.
"""

import asyncio
import logging
import math
from collections.abc import Sequence
from datetime import datetime, timezone

import httpx

from pkgcompare.adapters.base import PackageNotFoundError, extract_github_url, parse_github_url
from pkgcompare.adapters.npm import NpmAdapter
from pkgcompare.analyzers.github import GitHubFetcher
from pkgcompare.analyzers.osv import OSVFetcher
from pkgcompare.decisions.comparisons import get_alternatives
from pkgcompare.decisions.health import build_health_signals, build_package_health
from pkgcompare.decisions.scorer import round_half_up
from pkgcompare.models.schemas import (
    BundleData,
    DownloadTrend,
    GitHubRepoData,
    PackageHealth,
    PackageMetrics,
)

logger = logging.getLogger(__name__)

NO_COMMIT_DATA_DAYS = 365


def latest_version_data(document: dict) -> dict:
    """Get the registry entry of the ``latest`` dist-tag."""
    latest = (document.get("dist-tags") or {}).get("latest")
    if not latest:
        return {}
    return (document.get("versions") or {}).get(latest) or {}


def deprecation_message(document: dict) -> str | None:
    """Get the deprecation message of the latest version, if deprecated."""
    deprecated = latest_version_data(document).get("deprecated") or document.get("deprecated")
    if not deprecated:
        return None
    return deprecated if isinstance(deprecated, str) else "This package is deprecated"


def _sum_downloads(samples: Sequence[dict]) -> int:
    return sum(d.get("downloads", 0) or 0 for d in samples)


def build_metrics(
    name: str,
    document: dict,
    daily_downloads: Sequence[dict] | None = None,
    bundle: BundleData | None = None,
    github: GitHubRepoData | None = None,
    vulnerabilities: int = 0,
    now: datetime | None = None,
) -> PackageMetrics:
    """Build PackageMetrics from raw fetched data.

    Args:
        name: Package name.
        document: npm registry document.
        daily_downloads: Daily download samples, oldest first (about 90 days).
        bundle: Bundle size data.
        github: GitHub repository data.
        vulnerabilities: Known vulnerability count.
        now: Reference time for commit recency.

    Returns:
        PackageMetrics snapshot.
    """
    now = now or datetime.now(timezone.utc)
    version_data = latest_version_data(document)
    daily = list(daily_downloads or [])

    weekly_downloads = 0
    download_trend = DownloadTrend.STABLE
    download_velocity = 0

    if daily:
        weekly_downloads = _sum_downloads(daily[-7:])

        # Last 30 days vs first 30 days of the window
        recent = _sum_downloads(daily[-30:])
        older = _sum_downloads(daily[:30])
        if older > 0:
            download_velocity = round_half_up((recent - older) / older * 100)
            if download_velocity > 10:
                download_trend = DownloadTrend.GROWING
            elif download_velocity < -10:
                download_trend = DownloadTrend.DECLINING

    last_commit_days = NO_COMMIT_DATA_DAYS
    if github:
        last_commit = github.last_commit
        if last_commit.tzinfo is None:
            last_commit = last_commit.replace(tzinfo=timezone.utc)
        last_commit_days = max(0, math.floor((now - last_commit).total_seconds() / 86400))

    has_types = bool(version_data.get("types") or version_data.get("typings") or name.startswith("@types/"))
    is_esm = bool(
        version_data.get("type") == "module" or version_data.get("module") or version_data.get("exports")
    )

    return PackageMetrics(
        name=name,
        weekly_downloads=weekly_downloads,
        download_trend=download_trend,
        download_velocity=download_velocity,
        bundle_size=bundle.gzip if bundle else 0,
        bundle_size_raw=bundle.size if bundle else 0,
        tree_shakeable=bool(bundle and (bundle.has_js_module or bundle.has_js_next)),
        last_commit_days=last_commit_days,
        recent_commits=github.recent_commits if github else 0,
        recent_releases=github.recent_releases if github else 0,
        stars=github.stars if github else 0,
        open_issues=github.open_issues if github else 0,
        contributors=github.contributors if github else 0,
        has_types=has_types,
        is_esm=is_esm,
        security_issues=vulnerabilities,
        deprecated=deprecation_message(document) is not None,
        keywords=tuple(document.get("keywords") or version_data.get("keywords") or ()),
        updated_at=now,
    )


class MetricsFetcher:
    """Fetches everything needed to score and health-check npm packages.

    Usage:
        async with MetricsFetcher(github_token=token) as fetcher:
            comparison = await compare_specific_packages(names, fetcher.fetch_metrics)
    """

    def __init__(
        self,
        github_token: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            github_token: GitHub personal access token.
            timeout: HTTP request timeout in seconds.
            client: Optional shared httpx client.
        """
        self.github_token = github_token
        self.timeout = timeout
        self._http_client = client
        self._owns_client = False
        self._build_clients()

    def _build_clients(self) -> None:
        self.npm = NpmAdapter(client=self._http_client, timeout=self.timeout)
        self.github = GitHubFetcher(token=self.github_token, client=self._http_client, timeout=self.timeout)
        self.osv = OSVFetcher(client=self._http_client, timeout=self.timeout)

    async def __aenter__(self) -> "MetricsFetcher":
        """Set up shared HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
            self._build_clients()
        return self

    async def __aexit__(self, *args) -> None:
        """Clean up HTTP client."""
        if self._owns_client and self._http_client:
            await self._http_client.aclose()
            self._http_client = None
            self._owns_client = False
            self._build_clients()

    async def _fetch_github(self, document: dict) -> GitHubRepoData | None:
        repository = document.get("repository") or latest_version_data(document).get("repository")
        url = extract_github_url(repository)
        parsed = parse_github_url(url) if url else None
        if not parsed:
            return None

        try:
            return await self.github.fetch_repo_data(*parsed)
        except httpx.HTTPError as e:
            logger.warning(f"GitHub data unavailable for {parsed[0]}/{parsed[1]}: {e}")
            return None

    async def fetch_metrics(self, name: str) -> PackageMetrics | None:
        """Fetch complete comparison metrics for a package.

        Never raises; returns None if the package can't be fetched.
        """
        try:
            document, daily, bundle = await asyncio.gather(
                self.npm.get_package_document(name),
                self.npm.get_download_range(name),
                self.npm.get_bundle_data(name),
            )
            version = (document.get("dist-tags") or {}).get("latest")
            github, vulnerabilities = await asyncio.gather(
                self._fetch_github(document),
                self.osv.count_vulnerabilities(name, version),
            )
        except PackageNotFoundError as e:
            logger.info(str(e))
            return None
        except Exception as e:
            logger.error(f"Error fetching metrics for {name}: {e}")
            return None

        return build_metrics(name, document, daily, bundle, github, vulnerabilities)

    async def fetch_health(
        self,
        name: str,
        alternatives: Sequence[str] | None = None,
    ) -> PackageHealth | None:
        """Fetch signals and build the health assessment for a package.

        Without explicit alternatives, curated replacements for the package
        are suggested. Never raises; returns None if the package can't be
        fetched.
        """
        try:
            document = await self.npm.get_package_document(name)
            version = (document.get("dist-tags") or {}).get("latest")
            github, downloads, vulnerabilities = await asyncio.gather(
                self._fetch_github(document),
                self.npm.get_download_data(name),
                self.osv.count_vulnerabilities(name, version),
            )
        except PackageNotFoundError as e:
            logger.info(str(e))
            return None
        except Exception as e:
            logger.error(f"Error fetching health signals for {name}: {e}")
            return None

        message = deprecation_message(document)
        signals = build_health_signals(
            github=github,
            npm=downloads,
            deprecated=message is not None,
            deprecated_message=message,
            vulnerabilities=vulnerabilities,
        )
        if alternatives is None:
            curated = get_alternatives(name)
            alternatives = list(curated.alternatives) if curated else None

        return build_package_health(name, signals, alternatives)
