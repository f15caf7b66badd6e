"""Tests for curated comparison groups and package replacements."""

from pkgcompare.decisions import (
    COMPARISON_CATEGORIES,
    PACKAGE_ALTERNATIVES,
    discover_alternatives,
    get_alternatives,
    get_category,
    get_comparison_categories,
    merge_with_manual_groups,
)
from pkgcompare.decisions.health import build_package_health
from pkgcompare.models.schemas import DiscoveredVia, HealthSignals, HealthStatus, PackageInfo


class TestPackageAlternatives:
    def test_request_replacements(self):
        curated = get_alternatives("request")
        assert curated.alternatives[:2] == ("got", "axios")
        assert curated.recommended == "got"
        assert curated.reason == "request is deprecated"

    def test_unknown_package(self):
        assert get_alternatives("zod") is None

    def test_recommended_is_listed(self):
        for name, curated in PACKAGE_ALTERNATIVES.items():
            assert curated.recommended in curated.alternatives, name

    def test_deprecated_request_health(self):
        alternatives = list(get_alternatives("request").alternatives)
        health = build_package_health("request", HealthSignals(deprecated=True), alternatives)

        assert health.score == 25
        assert health.status == HealthStatus.DEPRECATED
        assert health.recommendation == "Deprecated. Consider got or axios instead"


class TestComparisonCategories:
    def test_ids_are_seed_categories(self):
        assert len(COMPARISON_CATEGORIES) == 8
        for category in COMPARISON_CATEGORIES:
            assert get_category(category.category) is not None, category.category

    def test_returns_copy(self):
        categories = get_comparison_categories()
        categories.clear()
        assert len(get_comparison_categories()) == 8

    def test_merge_alone(self):
        groups = merge_with_manual_groups([], get_comparison_categories())
        by_id = {group.category: group for group in groups}

        assert by_id["http-client"].category_name == "HTTP Clients"
        assert by_id["http-client"].packages == ["axios", "got", "ky", "node-fetch", "undici"]
        assert all(group.discovered_via == DiscoveredVia.MANUAL for group in groups)
        assert all(group.confidence == 1.0 for group in groups)

    def test_merge_puts_curated_first(self):
        corpus = [
            PackageInfo(name="superagent", keywords=["http"], weekly_downloads=1_000),
            PackageInfo(name="needle", keywords=["http"], weekly_downloads=5_000),
        ]
        discovered = discover_alternatives(corpus)
        groups = merge_with_manual_groups(discovered, get_comparison_categories())
        http = next(group for group in groups if group.category == "http-client")

        assert http.packages[:5] == ["axios", "got", "ky", "node-fetch", "undici"]
        assert "superagent" in http.packages
        assert "needle" in http.packages
