"""Tests for registry helpers, the npm adapter and the JSON hash store."""

import asyncio
import json
from datetime import date

import httpx
import pytest

from pkgcompare.adapters.base import (
    PackageNotFoundError,
    encode_package_name,
    extract_github_url,
    parse_github_url,
)
from pkgcompare.adapters.npm import NpmAdapter, weekly_history
from pkgcompare.adapters.store import JsonHashStore
from pkgcompare.decisions.category_provider import CategoryProvider


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _daily(*downloads, start=1):
    return [{"day": f"2024-01-{start + i:02d}", "downloads": d} for i, d in enumerate(downloads)]


class TestRepositoryUrls:
    """Tests for GitHub URL extraction from npm repository fields."""

    @pytest.mark.parametrize(
        "repository, expected",
        [
            ({"type": "git", "url": "git+https://github.com/axios/axios.git"}, "https://github.com/axios/axios"),
            ("github:sindresorhus/got", "https://github.com/sindresorhus/got"),
            ("https://github.com/lodash/lodash", "https://github.com/lodash/lodash"),
            ({"type": "git", "url": "https://gitlab.com/foo/bar.git"}, None),
            (None, None),
            ({}, None),
        ],
    )
    def test_extract(self, repository, expected):
        assert extract_github_url(repository) == expected

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://github.com/axios/axios", ("axios", "axios")),
            ("git://github.com/owner/repo.git", ("owner", "repo")),
            ("git@github.com:owner/repo.git", ("owner", "repo")),
            ("https://github.com/owner/repo#readme", ("owner", "repo")),
            ("https://example.com/owner/repo", None),
            ("", None),
        ],
    )
    def test_parse(self, url, expected):
        assert parse_github_url(url) == expected

    def test_encode_scoped_name(self):
        assert encode_package_name("@types/node") == "@types%2Fnode"
        assert encode_package_name("lodash") == "lodash"


class TestWeeklyHistory:
    def test_buckets_aligned_to_newest_day(self):
        weeks = weekly_history(_daily(*range(1, 16)))

        # 15 days: the oldest day does not fill a week and is dropped
        assert [w.week for w in weeks] == ["2024-01-02", "2024-01-09"]
        assert [w.downloads for w in weeks] == [sum(range(2, 9)), sum(range(9, 16))]

    def test_less_than_a_week(self):
        assert weekly_history(_daily(1, 2, 3)) == []


class TestNpmAdapter:
    """Tests for the npm adapter against a mocked transport."""

    def test_package_document(self):
        def handler(request):
            assert request.url.host == "registry.npmjs.org"
            return httpx.Response(200, json={"name": "lodash", "dist-tags": {"latest": "4.17.21"}})

        adapter = NpmAdapter(client=_client(handler))
        document = asyncio.run(adapter.get_package_document("lodash"))
        assert document["dist-tags"]["latest"] == "4.17.21"

    def test_missing_package(self):
        adapter = NpmAdapter(client=_client(lambda request: httpx.Response(404, json={"error": "Not found"})))
        with pytest.raises(PackageNotFoundError, match="not found in npm"):
            asyncio.run(adapter.get_package_document("nope-nope"))

    def test_server_error_propagates(self):
        adapter = NpmAdapter(client=_client(lambda request: httpx.Response(500)))
        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(adapter.get_package_document("lodash"))

    def test_download_range(self):
        seen = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(200, json={"downloads": _daily(5, 6, 7)})

        adapter = NpmAdapter(client=_client(handler))
        daily = asyncio.run(adapter.get_download_range("lodash", days=90, today=date(2024, 4, 1)))

        assert [d["downloads"] for d in daily] == [5, 6, 7]
        assert seen == ["/downloads/range/2024-01-02:2024-04-01/lodash"]

    def test_download_range_unavailable(self):
        adapter = NpmAdapter(client=_client(lambda request: httpx.Response(503)))
        assert asyncio.run(adapter.get_download_range("lodash")) == []

    def test_download_data(self):
        daily = _daily(*[10] * 28)
        adapter = NpmAdapter(client=_client(lambda request: httpx.Response(200, json={"downloads": daily})))
        data = asyncio.run(adapter.get_download_data("lodash"))

        assert data.weekly_downloads == 70
        assert data.monthly_downloads == 280
        assert len(data.download_history) == 4

    def test_download_data_unavailable(self):
        adapter = NpmAdapter(client=_client(lambda request: httpx.Response(404)))
        assert asyncio.run(adapter.get_download_data("lodash")) is None

    def test_bundle_data(self):
        def handler(request):
            assert request.url.params["package"] == "nanoid"
            return httpx.Response(
                200,
                json={"gzip": 130, "size": 250, "dependencyCount": 0, "hasJSModule": "index.js", "hasSideEffects": False},
            )

        adapter = NpmAdapter(client=_client(handler))
        bundle = asyncio.run(adapter.get_bundle_data("nanoid"))

        assert bundle.gzip == 130
        assert bundle.size == 250
        assert bundle.has_js_module is True
        assert bundle.has_js_next is False
        assert bundle.has_side_effects is False

    def test_bundle_data_unavailable(self):
        adapter = NpmAdapter(client=_client(lambda request: httpx.Response(500)))
        assert asyncio.run(adapter.get_bundle_data("huge")) is None


class TestJsonHashStore:
    """Tests for the file-backed store and its use by the category provider."""

    def test_hash_access(self, tmp_path):
        path = tmp_path / "categories.json"
        path.write_text(
            json.dumps(
                {
                    "categories:discovered": {
                        "sparkline": {"id": "sparkline", "name": "Sparklines", "keywords": ["sparkline"]},
                        "raw": '{"id": "raw", "name": "Raw", "keywords": ["raw"]}',
                    }
                }
            )
        )
        store = JsonHashStore(path)

        fields = asyncio.run(store.hgetall("categories:discovered"))
        assert set(fields) == {"sparkline", "raw"}
        assert json.loads(fields["sparkline"])["name"] == "Sparklines"
        assert asyncio.run(store.hget("categories:discovered", "raw")).startswith("{")
        assert asyncio.run(store.hget("categories:discovered", "missing")) is None
        assert asyncio.run(store.hgetall("other")) == {}

        provider = CategoryProvider(store)
        assert asyncio.run(provider.get_category_stats())["discovered"] == 2

    def test_missing_file_degrades_in_provider(self, tmp_path):
        provider = CategoryProvider(JsonHashStore(tmp_path / "missing.json"))
        stats = asyncio.run(provider.get_category_stats())
        assert stats["discovered"] == 0

    def test_non_object_file(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(ValueError):
            asyncio.run(JsonHashStore(path).hgetall("categories:discovered"))
