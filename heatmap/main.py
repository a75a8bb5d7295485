#!/usr/bin/env python3
"""
Concentration Heatmap - Pipeline Entry Point

Runs a load cycle over the configured document and reports the home and
institution concentrations.

Usage:
    python -m heatmap.main load
    python -m heatmap.main load --location https://example.org/personnes.json
    python -m heatmap.main clusters --kind institution --limit 10
    python -m heatmap.main export --output-dir public/data
"""

from pathlib import Path

import click
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from heatmap.config import settings
from heatmap.exporter import export_load_result
from heatmap.loader import DataSource, LoadResult, run_load_cycle
from heatmap.models import LocationKind

console = Console()

SOURCE_CHOICES = [DataSource.JSON.value, DataSource.SAMPLE.value]
KIND_CHOICES = [kind.value for kind in LocationKind]


def _run(source: str, location: str | None) -> LoadResult:
    result = run_load_cycle(DataSource(source), location=location)
    if result.notice:
        console.print(f"[yellow]{escape(result.notice)}[/yellow]")
    return result


def _print_report(result: LoadResult) -> None:
    if result.report is None:
        return

    report = result.report
    table = Table(title="Normalization")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Entries seen", str(report.seen))
    table.add_row("Accepted", f"[green]{report.accepted}[/green]")
    table.add_row("Not an object", str(report.rejected_not_object))
    table.add_row("No address", str(report.rejected_no_identity))
    table.add_row("No coordinates", str(report.rejected_no_location))
    table.add_row("Failed", f"[red]{report.failed}[/red]" if report.failed else "0")
    console.print(table)


def _print_clusters(result: LoadResult, kind: LocationKind, limit: int) -> None:
    summary = result.summary(kind)
    clusters = result.ranked(kind)

    table = Table(title=f"{kind.value.capitalize()} concentrations")
    table.add_column("Zone")
    table.add_column("Coordinates")
    table.add_column("Count", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Members")

    member_limit = settings.pipeline.display_member_limit
    for cluster in clusters[:limit]:
        names = ", ".join(r.id for r in cluster.members[:member_limit])
        if cluster.count > member_limit:
            names += f" (+{cluster.count - member_limit})"
        table.add_row(
            escape(cluster.label),
            f"{cluster.lat:.4f}, {cluster.lng:.4f}",
            str(cluster.count),
            f"{summary.shares[cluster.key]:.1f}%",
            escape(names),
        )

    console.print(table)
    console.print(
        f"Zones: {summary.zone_count}  "
        f"Average per zone: {summary.average_per_zone:.1f}  "
        f"Max concentration: {summary.max_concentration}\n"
    )


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(debug):
    """Concentration Heatmap Pipeline"""
    if debug:
        from heatmap.utils.logging import setup_logging
        setup_logging(level="DEBUG")


@cli.command()
@click.option("--source", type=click.Choice(SOURCE_CHOICES), default=DataSource.JSON.value, help="Record source")
@click.option("--location", default=None, help="Document path or URL (defaults to configuration)")
@click.option("--limit", type=int, default=10, help="Clusters shown per kind")
def load(source: str, location: str | None, limit: int):
    """Run a load cycle and print both groupings."""
    console.print("\n[bold blue]Concentration Heatmap - Load[/bold blue]")
    console.print(f"Source: {source}\n")

    result = _run(source, location)
    _print_report(result)

    console.print(f"\n[bold]Records loaded: {len(result.records)}[/bold]\n")
    for kind in LocationKind:
        _print_clusters(result, kind, limit)


@cli.command()
@click.option("--kind", type=click.Choice(KIND_CHOICES), default=LocationKind.HOME.value, help="Grouping to show")
@click.option("--source", type=click.Choice(SOURCE_CHOICES), default=DataSource.JSON.value, help="Record source")
@click.option("--location", default=None, help="Document path or URL (defaults to configuration)")
@click.option("--limit", type=int, default=20, help="Clusters shown")
def clusters(kind: str, source: str, location: str | None, limit: int):
    """Show the ranked clusters for one location kind."""
    result = _run(source, location)
    _print_clusters(result, LocationKind(kind), limit)


@cli.command()
@click.option("--source", type=click.Choice(SOURCE_CHOICES), default=DataSource.JSON.value, help="Record source")
@click.option("--location", default=None, help="Document path or URL (defaults to configuration)")
@click.option("--output-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Export directory")
@click.option("--gzip/--no-gzip", "compress", default=True, help="Also write .gz copies")
def export(source: str, location: str | None, output_dir: Path | None, compress: bool):
    """Export records, clusters and summary as static JSON."""
    result = _run(source, location)

    try:
        paths = export_load_result(result, output_dir, compress=compress)
    except OSError as e:
        console.print(f"[red]Export failed: {e}[/red]")
        logger.exception("Export failed")
        raise SystemExit(1)

    for path in paths:
        console.print(f"[green]✓[/green] {path}")


if __name__ == "__main__":
    cli()
