"""Category inference, comparison scoring, alternative discovery and health scoring."""

from pkgcompare.decisions.categories import (
    SEED_CATEGORIES,
    get_all_category_ids,
    get_category,
    get_category_name,
    infer_category,
)
from pkgcompare.decisions.category_provider import CategoryProvider, KeyValueStore, get_all_categories
from pkgcompare.decisions.comparisons import (
    COMPARISON_CATEGORIES,
    PACKAGE_ALTERNATIVES,
    get_alternatives,
    get_comparison_categories,
)
from pkgcompare.decisions.discovery import (
    discover_alternatives,
    find_alternatives_for_package,
    get_predefined_categories,
    merge_with_manual_groups,
)
from pkgcompare.decisions.generator import (
    compare_specific_packages,
    format_comparison_summary,
    generate_comparison,
    to_api_response,
)
from pkgcompare.decisions.health import (
    build_health_signals,
    build_package_health,
    calculate_health_score,
    get_download_trend,
    get_health_status,
    get_maintainer_activity,
)
from pkgcompare.decisions.scorer import (
    Scorer,
    explain_score,
    generate_badges,
    rank_packages,
    score_package,
)

__all__ = [
    "COMPARISON_CATEGORIES",
    "PACKAGE_ALTERNATIVES",
    "SEED_CATEGORIES",
    "CategoryProvider",
    "KeyValueStore",
    "Scorer",
    "build_health_signals",
    "build_package_health",
    "calculate_health_score",
    "compare_specific_packages",
    "discover_alternatives",
    "explain_score",
    "find_alternatives_for_package",
    "format_comparison_summary",
    "generate_badges",
    "generate_comparison",
    "get_alternatives",
    "get_all_categories",
    "get_all_category_ids",
    "get_category",
    "get_category_name",
    "get_comparison_categories",
    "get_download_trend",
    "get_health_status",
    "get_maintainer_activity",
    "get_predefined_categories",
    "infer_category",
    "merge_with_manual_groups",
    "rank_packages",
    "score_package",
    "to_api_response",
]
