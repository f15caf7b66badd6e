"""GitHub data fetcher for maintenance and community signals."""

import asyncio
import logging
import os
from datetime import datetime, timedelta, timezone

import httpx

from pkgcompare.models.schemas import GitHubRepoData

logger = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(days=180)


def _parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class GitHubFetcher:
    """Fetches repository data from the GitHub API.

    Unauthenticated requests are limited to 60/hour. Set GITHUB_TOKEN or
    pass a token to the constructor for higher limits.
    """

    BASE_URL = "https://api.github.com"
    LOW_RATE_LIMIT = 10  # Warn when fewer requests than this remain

    def __init__(
        self,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the fetcher.

        Args:
            token: GitHub personal access token. If not provided, uses GITHUB_TOKEN env var.
            client: Optional httpx client. If not provided, a new client is created.
            timeout: Request timeout when the fetcher creates its own client.
        """
        self._token = token or os.environ.get("GITHUB_TOKEN")
        self._client = client
        self._timeout = timeout

        # Rate limit tracking
        self.rate_limit_remaining: int = 5000
        self.rate_limit_total: int = 5000
        self.rate_limit_reset: datetime | None = None

    def _headers(self) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=self._timeout, headers=self._headers())

    def _update_rate_limits(self, response: httpx.Response) -> None:
        """Extract and store rate limit info from response headers."""
        remaining = response.headers.get("X-RateLimit-Remaining")
        limit = response.headers.get("X-RateLimit-Limit")
        reset = response.headers.get("X-RateLimit-Reset")

        if remaining is not None:
            self.rate_limit_remaining = int(remaining)
        if limit is not None:
            self.rate_limit_total = int(limit)
        if reset is not None:
            self.rate_limit_reset = datetime.fromtimestamp(int(reset), tz=timezone.utc)

        if remaining is not None and self.rate_limit_remaining < self.LOW_RATE_LIMIT:
            logger.warning(
                f"GitHub rate limit nearly exhausted: {self.rate_limit_remaining}/{self.rate_limit_total} "
                f"requests left, resets at {self.rate_limit_reset}"
            )

    async def _fetch(self, path: str, params: dict | None = None) -> dict | list | None:
        """Fetch from GitHub API.

        Returns None if 404, raises on other errors.
        """
        client = await self._get_client()
        url = f"{self.BASE_URL}{path}"

        try:
            response = await client.get(url, params=params, headers=self._headers())
            self._update_rate_limits(response)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()
        finally:
            if self._client is None:
                await client.aclose()

    async def _fetch_all_pages(
        self,
        path: str,
        params: dict | None = None,
        max_pages: int = 3,
    ) -> list:
        """Fetch all pages from a paginated endpoint."""
        client = await self._get_client()
        url = f"{self.BASE_URL}{path}"
        params = dict(params or {})
        params.setdefault("per_page", 100)

        results = []
        page = 1

        try:
            while page <= max_pages:
                params["page"] = page
                response = await client.get(url, params=params, headers=self._headers())
                self._update_rate_limits(response)
                if response.status_code == 404:
                    break
                response.raise_for_status()

                data = response.json()
                if not data:
                    break

                results.extend(data)

                if len(data) < params["per_page"]:
                    break
                page += 1

            return results
        finally:
            if self._client is None:
                await client.aclose()

    async def fetch_repo_data(
        self,
        owner: str,
        repo: str,
        now: datetime | None = None,
    ) -> GitHubRepoData | None:
        """Fetch maintenance and community signals for a repository.

        Args:
            owner: Repository owner.
            repo: Repository name.
            now: Reference time for the 6-month activity window.

        Returns:
            GitHubRepoData, or None if the repository is not accessible.
        """
        info = await self._fetch(f"/repos/{owner}/{repo}")
        if not isinstance(info, dict):
            return None

        now = now or datetime.now(timezone.utc)
        since = now - RECENT_WINDOW

        commits, releases, contributors, open_prs = await asyncio.gather(
            self._fetch_all_pages(f"/repos/{owner}/{repo}/commits", params={"since": since.isoformat()}),
            self._fetch_all_pages(f"/repos/{owner}/{repo}/releases", max_pages=1),
            self._fetch_all_pages(f"/repos/{owner}/{repo}/contributors", max_pages=5),
            self._fetch_all_pages(f"/repos/{owner}/{repo}/pulls", params={"state": "open"}),
        )

        last_commit = None
        if commits:
            last_commit = _parse_date(commits[0].get("commit", {}).get("author", {}).get("date"))
        last_commit = last_commit or _parse_date(info.get("pushed_at")) or now

        recent_releases = 0
        for release in releases:
            published = _parse_date(release.get("published_at"))
            if published and published >= since:
                recent_releases += 1

        # open_issues_count includes pull requests
        open_issues = max(0, info.get("open_issues_count", 0) - len(open_prs))

        return GitHubRepoData(
            owner=owner,
            repo=repo,
            stars=info.get("stargazers_count", 0),
            forks=info.get("forks_count", 0),
            open_issues=open_issues,
            open_prs=len(open_prs),
            last_commit=last_commit,
            contributors=len(contributors),
            recent_commits=len(commits),
            recent_releases=recent_releases,
            is_archived=info.get("archived", False),
            topics=info.get("topics") or [],
            language=info.get("language"),
        )
