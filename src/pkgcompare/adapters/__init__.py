"""Registry and storage adapters."""

from pkgcompare.adapters.base import PackageNotFoundError, extract_github_url, parse_github_url
from pkgcompare.adapters.npm import NpmAdapter
from pkgcompare.adapters.store import JsonHashStore

__all__ = ["JsonHashStore", "NpmAdapter", "PackageNotFoundError", "extract_github_url", "parse_github_url"]
