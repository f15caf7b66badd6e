"""CLI entry point for pkgcompare."""

import asyncio
import json
import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pkgcompare.adapters.store import JsonHashStore
from pkgcompare.analyzers.metrics import MetricsFetcher
from pkgcompare.config import ConfigError, Settings, load_settings
from pkgcompare.decisions import (
    CategoryProvider,
    compare_specific_packages,
    discover_alternatives,
    explain_score,
    find_alternatives_for_package,
    generate_badges,
    get_alternatives,
    get_comparison_categories,
    merge_with_manual_groups,
    score_package,
    to_api_response,
)
from pkgcompare.models.schemas import HealthStatus, PackageInfo

app = typer.Typer(help="npm package comparison and health scoring tool.")

console = Console()
err_console = Console(stderr=True)

STATUS_COLORS = {
    HealthStatus.HEALTHY: "green",
    HealthStatus.STABLE: "green",
    HealthStatus.MAINTENANCE_ONLY: "yellow",
    HealthStatus.AT_RISK: "red",
    HealthStatus.DEPRECATED: "red",
}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging before any command runs."""
    try:
        settings = load_settings()
    except ConfigError:
        # Reported by the command that needs settings
        level = "WARNING"
    else:
        level = settings.log_level

    logging.basicConfig(
        level="DEBUG" if verbose else level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )


def _settings() -> Settings:
    try:
        return load_settings()
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)


def _provider(settings: Settings) -> CategoryProvider:
    store = JsonHashStore(settings.categories_file) if settings.categories_file else None
    return CategoryProvider(store)


def _fetcher(settings: Settings) -> MetricsFetcher:
    return MetricsFetcher(github_token=settings.github_token, timeout=settings.http_timeout)


def _score_color(score: float) -> str:
    return "green" if score >= 80 else "yellow" if score >= 60 else "red"


def _score_bar(score: float, width: int = 20) -> str:
    """Create a visual score bar."""
    filled = int(score / 100 * width)
    empty = width - filled
    color = _score_color(score)
    return f"[{color}]{'█' * filled}[/{color}][dim]{'░' * empty}[/dim]"


@app.command()
def compare(
    packages: list[str] = typer.Argument(..., help="Packages to compare"),
    as_json: bool = typer.Option(False, "--json", help="Print the comparison as JSON"),
) -> None:
    """Rank a list of alternative packages."""
    asyncio.run(_compare(packages, as_json))


async def _compare(packages: list[str], as_json: bool) -> None:
    """Async implementation of compare."""
    if len(packages) < 2:
        console.print("[red]Need at least two packages to compare[/red]")
        raise typer.Exit(1)

    settings = _settings()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
        transient=True,
    ) as progress:
        progress.add_task(f"Fetching {len(packages)} packages...", total=None)
        async with _fetcher(settings) as fetcher:
            comparison = await compare_specific_packages(packages, fetcher.fetch_metrics)

    if comparison is None:
        console.print("[red]Not enough package data to compare (need metrics for at least two)[/red]")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(to_api_response(comparison), indent=2))
        return

    table = Table(title=comparison.category_name)
    table.add_column("Rank", style="dim", width=6)
    table.add_column("Package", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Weekly Downloads", justify="right", style="green")
    table.add_column("Bundle (gzip)", justify="right")
    table.add_column("Badges", style="white", max_width=40)

    for i, pkg in enumerate(comparison.packages, 1):
        color = _score_color(pkg.score)
        table.add_row(
            str(i),
            pkg.name,
            f"[{color}]{pkg.score}[/{color}]",
            f"{pkg.metrics.weekly_downloads:,}",
            f"{pkg.metrics.bundle_size / 1000:.1f}kb",
            ", ".join(pkg.badges),
        )

    console.print(table)
    console.print()
    console.print(f"[bold]Recommended:[/bold] {comparison.recommendation}")
    console.print(f"[bold]Smallest bundle:[/bold] {comparison.smallest_bundle}")
    console.print(f"[bold]Most popular:[/bold] {comparison.most_popular}")


@app.command()
def explain(
    package: str = typer.Argument(..., help="Package to explain"),
) -> None:
    """Show a package's comparison score and the reasons behind it."""
    asyncio.run(_explain(package))


async def _explain(package: str) -> None:
    """Async implementation of explain."""
    settings = _settings()
    async with _fetcher(settings) as fetcher:
        metrics = await fetcher.fetch_metrics(package)

    if metrics is None:
        console.print(f"[red]Could not fetch metrics for {package}[/red]")
        raise typer.Exit(1)

    score = score_package(metrics)
    console.print(f"[bold]{package}[/bold]  {_score_bar(score)} [{_score_color(score)}]{score}[/] / 100")

    badges = generate_badges(metrics)
    if badges:
        console.print(f"[dim]{', '.join(badges)}[/dim]")

    for reason in explain_score(metrics):
        console.print(f"  - {reason}")


@app.command()
def health(
    package: str = typer.Argument(..., help="Package to check"),
    alternatives: list[str] | None = typer.Option(
        None, "--alternative", "-a", help="Replacement candidate (repeatable)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the assessment as JSON"),
) -> None:
    """Show a package's health score, status and signals."""
    asyncio.run(_health(package, alternatives or None, as_json))


async def _health(package: str, alternatives: list[str] | None, as_json: bool) -> None:
    """Async implementation of health."""
    settings = _settings()
    async with _fetcher(settings) as fetcher:
        result = await fetcher.fetch_health(package, alternatives)

    if result is None:
        console.print(f"[red]Could not fetch health data for {package}[/red]")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return

    color = STATUS_COLORS[result.status]
    console.print(
        f"[bold]{result.name}[/bold]  {_score_bar(result.score)} "
        f"[bold]{result.score}[/bold] / 100  [{color}]{result.status.value}[/{color}]"
    )

    signals_table = Table(title="Signals", show_header=False, box=None)
    signals_table.add_column("Signal", style="bold")
    signals_table.add_column("Value")
    for field, value in result.signals.model_dump(mode="json", exclude={"last_commit"}).items():
        signals_table.add_row(field.replace("_", " ").capitalize(), "-" if value is None else str(value))
    console.print(signals_table)

    if result.recommendation:
        console.print(f"\n[yellow]{result.recommendation}[/yellow]")

    curated = get_alternatives(package)
    if curated and result.status not in (HealthStatus.HEALTHY, HealthStatus.STABLE):
        console.print(f"[dim]{curated.reason}. Recommended: {curated.recommended}[/dim]")


@app.command()
def categories() -> None:
    """List known categories."""
    asyncio.run(_categories())


async def _categories() -> None:
    """Async implementation of categories."""
    provider = _provider(_settings())
    all_categories = await provider.get_all_categories()

    table = Table(title=f"{len(all_categories)} Categories")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Source", style="dim")
    table.add_column("Keywords", max_width=60)

    for category in all_categories:
        table.add_row(category.id, category.name, category.source.value, ", ".join(category.keywords))

    console.print(table)


@app.command()
def infer(
    keywords: list[str] = typer.Argument(..., help="Package keywords"),
) -> None:
    """Infer a category from keywords."""
    asyncio.run(_infer(keywords))


async def _infer(keywords: list[str]) -> None:
    """Async implementation of infer."""
    provider = _provider(_settings())
    match = await provider.infer_category_extended(keywords)
    if match is None:
        console.print("[yellow]No matching category[/yellow]")
        raise typer.Exit(1)

    category_id, source = match
    console.print(f"{category_id} [dim]({source.value})[/dim]")


def _load_corpus(path: Path) -> list[PackageInfo]:
    try:
        records = json.loads(path.read_text())
        return [PackageInfo.model_validate(record) for record in records]
    except (OSError, ValueError, TypeError, ValidationError) as e:
        console.print(f"[red]Could not read corpus {path}: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def alternatives(
    corpus: Path = typer.Argument(..., help="JSON list of {name, keywords, weekly_downloads}"),
    package: str | None = typer.Option(None, "--package", "-p", help="Find alternatives for one package"),
    limit: int = typer.Option(10, "--limit", "-n", help="Maximum group size"),
    curated: bool = typer.Option(True, "--curated/--no-curated", help="Merge in curated comparison groups"),
) -> None:
    """Discover groups of alternative packages in a corpus."""
    asyncio.run(_alternatives(corpus, package, limit, curated))


async def _alternatives(corpus: Path, package: str | None, limit: int, curated: bool) -> None:
    """Async implementation of alternatives."""
    packages = _load_corpus(corpus)
    all_categories = await _provider(_settings()).get_all_categories()

    if package:
        target = next((p for p in packages if p.name == package), None)
        if target is None:
            console.print(f"[red]{package} is not in the corpus[/red]")
            raise typer.Exit(1)
        group = find_alternatives_for_package(
            target.name, target.keywords, packages, limit=limit, categories=all_categories
        )
        groups = [group] if group else []
    else:
        groups = discover_alternatives(packages, max_group_size=limit, categories=all_categories)
        if curated:
            groups = merge_with_manual_groups(groups, get_comparison_categories())

    if not groups:
        console.print("[yellow]No alternatives found[/yellow]")
        return

    table = Table(title="Alternatives")
    table.add_column("Category", style="cyan")
    table.add_column("Confidence", justify="right")
    table.add_column("Packages")

    for group in groups:
        table.add_row(group.category_name, f"{group.confidence:.1f}", ", ".join(group.packages))

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from pkgcompare import __version__

    console.print(f"pkgcompare v{__version__}")


if __name__ == "__main__":
    app()
