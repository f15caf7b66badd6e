"""Tests for the command line interface."""

import json

import pytest
from typer.testing import CliRunner

from pkgcompare import cli
from pkgcompare.decisions.health import build_package_health
from pkgcompare.models.schemas import HealthSignals, MaintainerActivity, PackageMetrics

runner = CliRunner()


class FakeFetcher:
    """Stands in for MetricsFetcher without touching the network."""

    METRICS = {
        "fast": PackageMetrics(name="fast", bundle_size=1_000, last_commit_days=2, has_types=True),
        "slow": PackageMetrics(name="slow", bundle_size=150_000, weekly_downloads=2_000_000),
    }

    def __init__(self, github_token=None, timeout=30.0):
        self.timeout = timeout

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        return None

    async def fetch_metrics(self, name):
        return self.METRICS.get(name)

    async def fetch_health(self, name, alternatives=None):
        if name == "request":
            return build_package_health(name, HealthSignals(deprecated=True), ["got", "axios"])
        if name not in self.METRICS:
            return None
        signals = HealthSignals(maintainer_activity=MaintainerActivity.HIGH, vulnerabilities=0)
        return build_package_health(name, signals, alternatives)


@pytest.fixture
def fake_fetcher(monkeypatch):
    monkeypatch.setattr(cli, "MetricsFetcher", FakeFetcher)
    monkeypatch.delenv("PKGCOMPARE_HTTP_TIMEOUT", raising=False)
    monkeypatch.delenv("PKGCOMPARE_CATEGORIES_FILE", raising=False)


def _json(output: str) -> dict:
    return json.loads(output[output.index("{") :])


class TestCompare:
    def test_json_output(self, fake_fetcher):
        result = runner.invoke(cli.app, ["compare", "slow", "fast", "--json"])

        assert result.exit_code == 0, result.output
        payload = _json(result.stdout)
        assert payload["category"] == "custom"
        assert payload["recommendation"] == "fast"
        assert payload["mostPopular"] == "slow"
        assert [p["name"] for p in payload["packages"]] == ["fast", "slow"]

    def test_table_output(self, fake_fetcher):
        result = runner.invoke(cli.app, ["compare", "slow", "fast"])
        assert result.exit_code == 0, result.output
        assert "Recommended:" in result.stdout
        assert "Custom Comparison" in result.stdout

    def test_needs_two_packages(self, fake_fetcher):
        result = runner.invoke(cli.app, ["compare", "fast"])
        assert result.exit_code == 1
        assert "at least two" in result.stdout

    def test_not_enough_data(self, fake_fetcher):
        result = runner.invoke(cli.app, ["compare", "fast", "unknown"])
        assert result.exit_code == 1

    def test_bad_config(self, fake_fetcher, monkeypatch):
        monkeypatch.setenv("PKGCOMPARE_HTTP_TIMEOUT", "soon")
        result = runner.invoke(cli.app, ["compare", "fast", "slow"])
        assert result.exit_code == 1
        assert "Configuration error" in result.stdout


class TestHealth:
    def test_json_output(self, fake_fetcher):
        result = runner.invoke(cli.app, ["health", "fast", "--json"])

        assert result.exit_code == 0, result.output
        payload = _json(result.stdout)
        assert payload["score"] == 100
        assert payload["status"] == "healthy"

    def test_unknown_package(self, fake_fetcher):
        result = runner.invoke(cli.app, ["health", "unknown"])
        assert result.exit_code == 1

    def test_deprecated_shows_curated_replacement(self, fake_fetcher):
        result = runner.invoke(cli.app, ["health", "request"])

        assert result.exit_code == 0, result.output
        assert "Deprecated. Consider got or axios instead" in result.stdout
        assert "request is deprecated. Recommended: got" in result.stdout

    def test_healthy_has_no_curated_note(self, fake_fetcher):
        result = runner.invoke(cli.app, ["health", "fast"])
        assert result.exit_code == 0, result.output
        assert "Recommended:" not in result.stdout


class TestExplain:
    def test_reasons(self, fake_fetcher):
        result = runner.invoke(cli.app, ["explain", "fast"])
        assert result.exit_code == 0, result.output
        assert "TypeScript types included" in result.stdout


class TestCategories:
    def test_infer(self, fake_fetcher):
        result = runner.invoke(cli.app, ["infer", "yaml"])
        assert result.exit_code == 0, result.output
        assert "yaml" in result.stdout
        assert "seed" in result.stdout

    def test_infer_no_match(self, fake_fetcher):
        result = runner.invoke(cli.app, ["infer", "qqqqqq"])
        assert result.exit_code == 1

    def test_list(self, fake_fetcher):
        result = runner.invoke(cli.app, ["categories"])
        assert result.exit_code == 0, result.output
        assert "61 Categories" in result.stdout


class TestAlternatives:
    @pytest.fixture
    def corpus_file(self, tmp_path):
        path = tmp_path / "corpus.json"
        path.write_text(
            json.dumps(
                [
                    {"name": "yaml", "keywords": ["yaml"], "weekly_downloads": 50_000},
                    {"name": "yml-lite", "keywords": ["yml"], "weekly_downloads": 2_000},
                ]
            )
        )
        return path

    def test_discover(self, fake_fetcher, corpus_file):
        result = runner.invoke(cli.app, ["alternatives", str(corpus_file)])
        assert result.exit_code == 0, result.output
        assert "YAML Parsers" in result.stdout
        assert "axios" in result.stdout

    def test_discover_without_curated_groups(self, fake_fetcher, corpus_file):
        result = runner.invoke(cli.app, ["alternatives", str(corpus_file), "--no-curated"])
        assert result.exit_code == 0, result.output
        assert "YAML Parsers" in result.stdout
        assert "axios" not in result.stdout

    def test_unknown_package(self, fake_fetcher, corpus_file):
        result = runner.invoke(cli.app, ["alternatives", str(corpus_file), "--package", "nope"])
        assert result.exit_code == 1

    def test_bad_corpus(self, fake_fetcher, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json")
        result = runner.invoke(cli.app, ["alternatives", str(path)])
        assert result.exit_code == 1


def test_version():
    result = runner.invoke(cli.app, ["version"])
    assert result.exit_code == 0
    assert "pkgcompare v" in result.stdout
