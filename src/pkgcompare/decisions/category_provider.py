"""Category provider.

Merges the seed catalog with categories discovered by keyword analysis,
which a discovery job writes to a key-value store (a Redis hash in
production). Reading discovered categories never fails the caller: any
store error degrades to the seed catalog.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Protocol

from pydantic import ValidationError

from pkgcompare.decisions.categories import SEED_CATEGORIES, best_category_match
from pkgcompare.models.schemas import CategorySource, DiscoveredCategory, ExtendedCategory

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal subset of a Redis-style hash API."""

    async def hgetall(self, key: str) -> dict[str, str]: ...

    async def hget(self, key: str, field: str) -> str | None: ...


def _seed_extended() -> list[ExtendedCategory]:
    return [
        ExtendedCategory(**category.model_dump(), source=CategorySource.SEED)
        for category in SEED_CATEGORIES
    ]


def _decode(value: str | bytes) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def parse_discovered(raw: str | bytes) -> DiscoveredCategory | None:
    """Parse one JSON record from the store, or None if it is invalid."""
    try:
        return DiscoveredCategory.model_validate(json.loads(_decode(raw)))
    except (ValueError, TypeError, ValidationError) as e:
        logger.debug(f"Skipping invalid discovered category record: {e}")
        return None


class CategoryProvider:
    """Unified access to seed and discovered categories.

    Usage:
        provider = CategoryProvider(store)
        categories = await provider.get_all_categories()
        match = await provider.infer_category_extended(["http", "fetch"])
    """

    DISCOVERED_KEY = "categories:discovered"

    def __init__(self, store: KeyValueStore | None = None) -> None:
        """Initialize the provider.

        Args:
            store: Optional key-value store holding discovered categories.
                Without one, only seed categories are available.
        """
        self.store = store
        self._seed_ids = {category.id for category in SEED_CATEGORIES}

    async def _load_discovered(self) -> dict[str, str | bytes]:
        if self.store is None:
            return {}
        try:
            return await self.store.hgetall(self.DISCOVERED_KEY) or {}
        except Exception as e:
            logger.warning(f"Failed to load discovered categories: {e}")
            return {}

    async def get_all_categories(self) -> list[ExtendedCategory]:
        """Get seed categories followed by discovered ones.

        Discovered categories whose ID collides with a seed category are
        skipped; seed definitions always win.
        """
        categories = _seed_extended()
        seen = set(self._seed_ids)

        discovered = await self._load_discovered()
        for raw in discovered.values():
            record = parse_discovered(raw)
            if record is None or record.id in seen:
                continue
            categories.append(record.to_extended())
            seen.add(record.id)

        return categories

    async def get_category_by_id(self, id: str) -> ExtendedCategory | None:
        """Get a category by ID, checking seed categories first."""
        for category in SEED_CATEGORIES:
            if category.id == id:
                return ExtendedCategory(**category.model_dump(), source=CategorySource.SEED)

        if self.store is None:
            return None

        try:
            raw = await self.store.hget(self.DISCOVERED_KEY, id)
        except Exception as e:
            logger.warning(f"Failed to load discovered category {id}: {e}")
            return None

        if raw is None:
            return None
        record = parse_discovered(raw)
        return record.to_extended() if record else None

    async def get_category_stats(self) -> dict[str, int]:
        """Count seed and discovered categories."""
        discovered = await self._load_discovered()
        discovered_count = sum(1 for id in discovered if _decode(id) not in self._seed_ids)
        seed_count = len(SEED_CATEGORIES)
        return {
            "seed": seed_count,
            "discovered": discovered_count,
            "total": seed_count + discovered_count,
        }

    async def infer_category_extended(
        self, keywords: Iterable[str] | None
    ) -> tuple[str, CategorySource] | None:
        """Infer a category using both seed and discovered categories.

        Returns:
            Tuple of (category_id, source), or None if nothing qualifies.
        """
        if not keywords:
            return None

        categories = await self.get_all_categories()
        match = best_category_match(keywords, categories)
        if match is None:
            return None
        category = match[0]
        return category.id, category.source


async def get_all_categories(store: KeyValueStore | None = None) -> list[ExtendedCategory]:
    """Get all categories (seed + discovered) from an optional store."""
    return await CategoryProvider(store).get_all_categories()
