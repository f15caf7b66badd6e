"""Shared fixtures for pkgcompare tests."""

import json

import pytest

from pkgcompare.models.schemas import PackageInfo, PackageMetrics


class MemoryStore:
    """In-memory hash store with the hgetall/hget subset of Redis."""

    def __init__(self, hashes: dict[str, dict[str, str]] | None = None):
        self.hashes = hashes or {}

    async def hgetall(self, key):
        return dict(self.hashes.get(key, {}))

    async def hget(self, key, field):
        return self.hashes.get(key, {}).get(field)


class BrokenStore:
    """Store whose every call fails, like an unreachable Redis."""

    async def hgetall(self, key):
        raise ConnectionError("store unavailable")

    async def hget(self, key, field):
        raise ConnectionError("store unavailable")


@pytest.fixture
def make_metrics():
    """Factory for PackageMetrics with defaults for everything but the name."""

    def _make(name: str = "pkg", **overrides) -> PackageMetrics:
        return PackageMetrics(name=name, **overrides)

    return _make


@pytest.fixture
def discovered_store():
    """Store holding two discovered categories, one colliding with a seed ID."""
    records = {
        "yaml-tools": {
            "id": "yaml-tools",
            "name": "YAML Tools",
            "keywords": ["YAML", "yml", "js-yaml"],
            "packages": ["yaml", "js-yaml"],
            "confidence": 0.9,
            "discoveredAt": 1700000000000,
            "packageCount": 2,
        },
        "yaml": {
            "id": "yaml",
            "name": "Shadowed YAML",
            "keywords": ["yaml"],
            "confidence": 0.5,
        },
        "sparkline": {
            "id": "sparkline",
            "name": "Sparklines",
            "keywords": ["sparkline", "sparklines"],
            "confidence": 0.6,
            "discoveredAt": 1700000000000,
            "packageCount": 4,
        },
    }
    return MemoryStore(
        {"categories:discovered": {key: json.dumps(value) for key, value in records.items()}}
    )


@pytest.fixture
def broken_store():
    return BrokenStore()


@pytest.fixture
def corpus():
    """Small package corpus with two inferable groups and noise."""
    return [
        PackageInfo(name="yaml", keywords=["yaml"], weekly_downloads=50_000),
        PackageInfo(name="redis", keywords=["redis"], weekly_downloads=80_000),
        PackageInfo(name="yml-lite", keywords=["yml"], weekly_downloads=2_000),
        PackageInfo(name="ioredis", keywords=["ioredis", "redis"], weekly_downloads=90_000),
        PackageInfo(name="tiny-yaml", keywords=["yaml"], weekly_downloads=10),
        PackageInfo(name="mongoose", keywords=["mongodb"], weekly_downloads=100_000),
        PackageInfo(name="no-keywords", keywords=[], weekly_downloads=100_000),
    ]
