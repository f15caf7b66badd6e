"""OSV (Open Source Vulnerabilities) fetcher for npm packages."""

import logging

import httpx

from pkgcompare.models.schemas import VulnerabilitySummary

logger = logging.getLogger(__name__)


def parse_severity(vuln: dict) -> str:
    """Classify an OSV record as critical, high, moderate, low or unknown.

    A numeric CVSS score wins over the advisory's own severity label.
    """
    for sev in vuln.get("severity") or []:
        if sev.get("type") not in ("CVSS_V3", "CVSS_V2"):
            continue
        try:
            score = float(sev.get("score", ""))
        except (TypeError, ValueError):
            # Vector strings like "CVSS:3.1/AV:N/..." carry no base score
            break
        if score >= 9.0:
            return "critical"
        if score >= 7.0:
            return "high"
        if score >= 4.0:
            return "moderate"
        return "low"

    label = ((vuln.get("database_specific") or {}).get("severity") or "").lower()
    if label in ("critical", "high", "low"):
        return label
    if label in ("moderate", "medium"):
        return "moderate"
    return "unknown"


class OSVFetcher:
    """Fetches vulnerability data from the OSV database.

    https://osv.dev/ - no authentication required.
    """

    BASE_URL = "https://api.osv.dev/v1"

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = 30.0) -> None:
        """Initialize the fetcher.

        Args:
            client: Optional httpx client. If not provided, creates one per request.
            timeout: Request timeout when the fetcher creates its own client.
        """
        self._client = client
        self._timeout = timeout

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _query(self, body: dict) -> list[dict]:
        """Query the OSV API; HTTP errors yield an empty list."""
        client = await self._get_client()
        try:
            response = await client.post(f"{self.BASE_URL}/query", json=body)
            response.raise_for_status()
            return response.json().get("vulns") or []
        except httpx.HTTPError as e:
            logger.warning(f"OSV query failed for {body.get('package')}: {e}")
            return []
        finally:
            if self._client is None:
                await client.aclose()

    async def fetch_vulnerabilities(
        self, package_name: str, version: str | None = None
    ) -> VulnerabilitySummary:
        """Fetch vulnerability counts for an npm package.

        Args:
            package_name: Package name.
            version: Version to check. Without one, every advisory ever
                published for the package is counted.

        Returns:
            VulnerabilitySummary with counts by severity.
        """
        body: dict = {"package": {"name": package_name, "ecosystem": "npm"}}
        if version:
            body["version"] = version

        vulns = await self._query(body)
        summary = VulnerabilitySummary(total=len(vulns))
        for vuln in vulns:
            severity = parse_severity(vuln)
            if severity != "unknown":
                setattr(summary, severity, getattr(summary, severity) + 1)
        return summary

    async def count_vulnerabilities(self, package_name: str, version: str | None = None) -> int:
        """Count known vulnerabilities for an npm package."""
        return (await self.fetch_vulnerabilities(package_name, version)).total
