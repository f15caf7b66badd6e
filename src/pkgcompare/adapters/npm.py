"""npm registry, download stats and bundle size adapter."""

import logging
from datetime import date, timedelta

import httpx

from pkgcompare.adapters.base import PackageNotFoundError, encode_package_name
from pkgcompare.models.schemas import BundleData, NpmDownloadData, WeeklyDownloads

logger = logging.getLogger(__name__)


def weekly_history(daily: list[dict]) -> list[WeeklyDownloads]:
    """Fold daily download samples into 7-day buckets.

    Buckets are aligned to the most recent day, so a trailing partial week
    is never produced; leftover days at the oldest end are dropped.

    Args:
        daily: Samples like {"day": "2024-01-01", "downloads": 12}, oldest first.

    Returns:
        Weekly totals, oldest first.
    """
    weeks = []
    end = len(daily)
    while end - 7 >= 0:
        chunk = daily[end - 7 : end]
        weeks.append(
            WeeklyDownloads(
                week=chunk[0].get("day", ""),
                downloads=sum(d.get("downloads", 0) or 0 for d in chunk),
            )
        )
        end -= 7
    weeks.reverse()
    return weeks


class NpmAdapter:
    """Adapter for the npm registry and related services.

    Data sources:
    - Package metadata: https://registry.npmjs.org/{package}
    - Download stats: https://api.npmjs.org/downloads/range/{start}:{end}/{package}
    - Bundle size: https://bundlephobia.com/api/size?package={package}
    """

    REGISTRY_URL = "https://registry.npmjs.org"
    DOWNLOADS_URL = "https://api.npmjs.org/downloads"
    BUNDLEPHOBIA_URL = "https://bundlephobia.com/api/size"

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = 30.0) -> None:
        """Initialize the adapter.

        Args:
            client: Optional httpx client for making requests.
            timeout: Request timeout when the adapter creates its own client.
        """
        self._client = client
        self._timeout = timeout

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _fetch_json(self, url: str, params: dict | None = None) -> dict | list:
        """Fetch JSON from a URL."""
        client = await self._get_client()
        try:
            response = await client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        finally:
            if self._client is None:
                await client.aclose()

    async def get_package_document(self, name: str) -> dict:
        """Fetch the full registry document for a package.

        Raises:
            PackageNotFoundError: If the package doesn't exist.
        """
        url = f"{self.REGISTRY_URL}/{encode_package_name(name)}"
        try:
            return await self._fetch_json(url)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise PackageNotFoundError(name) from e
            raise

    async def get_download_range(self, name: str, days: int = 90, today: date | None = None) -> list[dict]:
        """Fetch daily download counts for the last ``days`` days.

        Returns:
            Daily samples, oldest first. Empty if stats are unavailable.
        """
        end = today or date.today()
        start = end - timedelta(days=days)
        url = f"{self.DOWNLOADS_URL}/range/{start.isoformat()}:{end.isoformat()}/{encode_package_name(name)}"

        try:
            data = await self._fetch_json(url)
        except httpx.HTTPError as e:
            logger.debug(f"Download stats unavailable for {name}: {e}")
            return []

        if not isinstance(data, dict):
            return []
        return data.get("downloads") or []

    async def get_download_data(self, name: str) -> NpmDownloadData | None:
        """Fetch weekly/monthly downloads plus weekly history for health scoring."""
        daily = await self.get_download_range(name, days=91)
        if not daily:
            return None

        return NpmDownloadData(
            weekly_downloads=sum(d.get("downloads", 0) or 0 for d in daily[-7:]),
            monthly_downloads=sum(d.get("downloads", 0) or 0 for d in daily[-30:]),
            download_history=weekly_history(daily),
        )

    async def get_bundle_data(self, name: str) -> BundleData | None:
        """Fetch bundle size data from bundlephobia, or None if unavailable."""
        try:
            data = await self._fetch_json(self.BUNDLEPHOBIA_URL, params={"package": name})
        except httpx.HTTPError as e:
            logger.debug(f"Bundle data unavailable for {name}: {e}")
            return None

        if not isinstance(data, dict):
            return None

        return BundleData(
            gzip=data.get("gzip") or 0,
            size=data.get("size") or 0,
            dependency_count=data.get("dependencyCount") or 0,
            has_js_module=bool(data.get("hasJSModule")),
            has_js_next=bool(data.get("hasJSNext")),
            has_side_effects=data.get("hasSideEffects") is not False,
        )
