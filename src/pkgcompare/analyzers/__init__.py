"""Analyzers for fetching and processing package data."""

from pkgcompare.analyzers.github import GitHubFetcher
from pkgcompare.analyzers.metrics import MetricsFetcher, build_metrics
from pkgcompare.analyzers.osv import OSVFetcher

__all__ = ["GitHubFetcher", "MetricsFetcher", "OSVFetcher", "build_metrics"]
