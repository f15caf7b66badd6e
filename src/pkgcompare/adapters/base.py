"""Shared helpers for registry adapters."""

import re


class PackageNotFoundError(Exception):
    """Raised when a package cannot be found."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Package '{name}' not found in npm")


def encode_package_name(name: str) -> str:
    """URL-encode a package name (scoped packages contain a slash)."""
    return name.replace("/", "%2F")


def extract_github_url(repository: dict | str | None) -> str | None:
    """Extract a GitHub URL from an npm ``repository`` field.

    Handles:
    - {"type": "git", "url": "git+https://github.com/owner/repo.git"}
    - "github:owner/repo"
    - "https://github.com/owner/repo"

    Returns:
        Cleaned URL, or None if the repository is not on GitHub.
    """
    if not repository:
        return None

    if isinstance(repository, str):
        url = repository
    elif isinstance(repository, dict):
        url = repository.get("url") or ""
    else:
        return None

    url = re.sub(r"^git\+", "", url.strip())
    url = re.sub(r"\.git$", "", url)

    if url.startswith("github:"):
        url = f"https://github.com/{url[7:]}"

    return url if "github.com" in url else None


def parse_github_url(url: str) -> tuple[str, str] | None:
    """Parse a GitHub URL into (owner, repo).

    Supports https, git:// and git@ forms.
    """
    if not url:
        return None

    patterns = [
        r"github\.com/([^/]+)/([^/#?\s]+)",
        r"github\.com:([^/]+)/([^/#?\s]+)",
    ]
    for pattern in patterns:
        match = re.search(pattern, url)
        if match:
            owner, repo = match.group(1), match.group(2)
            repo = re.sub(r"\.git$", "", repo).rstrip("/")
            if owner and repo:
                return owner, repo

    return None
