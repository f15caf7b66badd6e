"""Alternative discovery.

Finds packages that compete with each other by inferring a category from
each package's keywords and grouping packages that land in the same one.
"""

from collections.abc import Iterable, Sequence

from pkgcompare.decisions.categories import SEED_CATEGORIES, get_category_name, infer_category
from pkgcompare.models.schemas import (
    AlternativeGroup,
    CategoryDefinition,
    DiscoveredVia,
    ManualGroup,
    PackageInfo,
)

MIN_ALTERNATIVE_DOWNLOADS = 1000
MAX_MERGED_GROUP_SIZE = 20


def _category_namer(categories: Sequence[CategoryDefinition] | None):
    if categories is None:
        return get_category_name
    names = {category.id: category.name for category in categories}
    return lambda id: names.get(id) or get_category_name(id)


def discover_alternatives(
    packages: Iterable[PackageInfo],
    min_downloads: int = MIN_ALTERNATIVE_DOWNLOADS,
    min_group_size: int = 2,
    max_group_size: int = 20,
    categories: Sequence[CategoryDefinition] | None = None,
) -> list[AlternativeGroup]:
    """Group packages into sets of alternatives by inferred category.

    Args:
        packages: Corpus of packages with keywords and weekly downloads.
        min_downloads: Packages below this many weekly downloads are ignored.
        min_group_size: Smallest group worth returning.
        max_group_size: Groups are truncated to this many packages, in
            the order they were encountered.
        categories: Categories to infer from. Defaults to the seed catalog.

    Returns:
        Alternative groups, largest first.
    """
    groups: dict[str, list[str]] = {}

    for pkg in packages:
        if pkg.weekly_downloads < min_downloads:
            continue

        category = infer_category(pkg.keywords, categories)
        if category:
            groups.setdefault(category, []).append(pkg.name)

    name_for = _category_namer(categories)
    result = []

    for category, names in groups.items():
        if len(names) < min_group_size:
            continue

        result.append(
            AlternativeGroup(
                category=category,
                category_name=name_for(category),
                packages=names[:max_group_size],
                confidence=1.0 if len(names) > 5 else 0.8,
                discovered_via=DiscoveredVia.KEYWORDS,
            )
        )

    # Bigger groups make more useful comparisons
    return sorted(result, key=lambda g: len(g.packages), reverse=True)


def find_alternatives_for_package(
    package_name: str,
    package_keywords: Iterable[str],
    all_packages: Iterable[PackageInfo],
    limit: int = 10,
    categories: Sequence[CategoryDefinition] | None = None,
) -> AlternativeGroup | None:
    """Find alternatives for one package within a corpus.

    Args:
        package_name: Target package name.
        package_keywords: Target package keywords.
        all_packages: Corpus to search.
        limit: Maximum group size, including the target package.
        categories: Categories to infer from. Defaults to the seed catalog.

    Returns:
        Group with the target package first, or None if the target has no
        category or no alternatives were found.
    """
    category = infer_category(package_keywords, categories)
    if not category:
        return None

    alternatives = []
    for pkg in all_packages:
        if pkg.name == package_name:
            continue
        if pkg.weekly_downloads < MIN_ALTERNATIVE_DOWNLOADS:
            continue
        if infer_category(pkg.keywords, categories) == category:
            alternatives.append(pkg.name)

    if not alternatives:
        return None

    return AlternativeGroup(
        category=category,
        category_name=_category_namer(categories)(category),
        packages=[package_name, *alternatives[: max(limit - 1, 0)]],
        confidence=1.0 if len(alternatives) > 3 else 0.7,
        discovered_via=DiscoveredVia.KEYWORDS,
    )


def get_predefined_categories() -> list[AlternativeGroup]:
    """Get an empty manual group for every seed category."""
    return [
        AlternativeGroup(
            category=category.id,
            category_name=category.name,
            packages=[],
            confidence=1.0,
            discovered_via=DiscoveredVia.MANUAL,
        )
        for category in SEED_CATEGORIES
    ]


def merge_with_manual_groups(
    discovered: Iterable[AlternativeGroup],
    manual: Iterable[ManualGroup],
) -> list[AlternativeGroup]:
    """Merge discovered groups with hand-curated overrides.

    Manual packages come first in a merged group. Merged and manual-only
    groups are marked as manual with full confidence.
    """
    result: dict[str, AlternativeGroup] = {group.category: group for group in discovered}

    for override in manual:
        existing = result.get(override.category)
        if existing:
            packages = list(dict.fromkeys([*override.packages, *existing.packages]))
            result[override.category] = existing.model_copy(
                update={
                    "packages": packages[:MAX_MERGED_GROUP_SIZE],
                    "discovered_via": DiscoveredVia.MANUAL,
                    "confidence": 1.0,
                }
            )
        else:
            result[override.category] = AlternativeGroup(
                category=override.category,
                category_name=get_category_name(override.category),
                packages=list(override.packages),
                confidence=1.0,
                discovered_via=DiscoveredVia.MANUAL,
            )

    return list(result.values())
