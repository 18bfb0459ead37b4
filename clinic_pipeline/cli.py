"""CLI for the clinic pipeline."""

import asyncio
import json
import random
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from clinic_pipeline.config import SearchConfig
from clinic_pipeline.extractors import extract_clinics_from_html
from clinic_pipeline.extractors.fetch import fetch_html
from clinic_pipeline.models import RawClinicData
from clinic_pipeline.pipeline import print_clinic_summary, print_source_report, run_search
from clinic_pipeline.search.queries import expand_user_query, select_search_queries
from clinic_pipeline.search.sources import (
    KNOWN_SOURCES,
    filter_by_region,
    prioritize_sources_by_location,
)

# Load environment variables (override=True to beat shell env vars)
load_dotenv(override=True)

app = typer.Typer(
    name="clinic-pipeline",
    help="Youth hockey clinic discovery pipeline",
    add_completion=False,
)
console = Console()


def _print_candidates(candidates: list[RawClinicData], as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps([c.model_dump(exclude_none=True) for c in candidates], indent=2))
        return

    if not candidates:
        console.print("[yellow]No clinics found on this page[/yellow]")
        return

    table = Table(title=f"Extracted candidates ({len(candidates)})")
    table.add_column("Name", style="cyan", max_width=40)
    table.add_column("Method", style="magenta")
    table.add_column("Conf.", justify="right")
    table.add_column("Dates", style="red")
    table.add_column("Location", style="green", max_width=25)
    table.add_column("Price", style="yellow")

    for c in candidates:
        dates = c.start_date or c.date_text or "?"
        table.add_row(
            (c.name or "?")[:40],
            c.extraction_method,
            f"{c.confidence:.2f}",
            dates[:25],
            (c.venue or c.location or c.city or "?")[:25],
            c.price or (f"{c.price_amount:g} {c.currency or ''}" if c.price_amount else "-"),
        )

    console.print(table)


@app.command()
def search(
    query: Optional[str] = typer.Argument(None, help="Free-text query (omit for a location-tiered search)"),
    refresh: bool = typer.Option(False, "--refresh", "-r", help="Ignore cached results"),
    lat: Optional[float] = typer.Option(None, "--lat", help="User latitude"),
    lng: Optional[float] = typer.Option(None, "--lng", help="User longitude"),
    city: Optional[str] = typer.Option(None, "--city", help="User city"),
    state: Optional[str] = typer.Option(None, "--state", help="User state or province"),
    country: Optional[str] = typer.Option(None, "--country", help="User country"),
    limit: int = typer.Option(20, "--limit", "-l", help="Rows to show in the summary"),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
):
    """Search for youth hockey clinics and camps."""
    config = SearchConfig.from_env(
        user_lat=lat,
        user_lng=lng,
        user_city=city,
        user_state=state,
        user_country=country,
    )
    result = asyncio.run(run_search(query, config=config, force_refresh=refresh))

    if as_json:
        typer.echo(json.dumps(result.to_record(), indent=2, ensure_ascii=False))
        return

    print_clinic_summary(result.clinics, limit=limit)
    print_source_report(result.sources)
    console.print(
        f"\n[bold]{len(result.clinics)} clinics[/bold] from {result.total_raw} raw candidates "
        f"in {result.search_duration_ms / 1000:.1f}s"
    )


@app.command()
def scrape(
    url: str = typer.Argument(..., help="Page URL to extract clinics from"),
    source_name: str = typer.Option("On-demand scrape", "--source-name", "-s", help="Source label"),
    timeout: float = typer.Option(10.0, "--timeout", "-t", help="Fetch timeout in seconds"),
    as_json: bool = typer.Option(False, "--json", help="Print candidates as JSON"),
):
    """Fetch one page and extract clinic candidates from it."""
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        console.print(f"[red]Invalid URL: {url}[/red]")
        raise typer.Exit(1)

    result = asyncio.run(fetch_html(url, timeout=timeout))
    if not result.ok:
        console.print(f"[red]Fetch failed: {result.error}[/red]")
        raise typer.Exit(1)

    candidates = extract_clinics_from_html(result.html, result.final_url, source_name)
    _print_candidates(candidates, as_json)


@app.command("extract-file")
def extract_file(
    path: Path = typer.Argument(..., help="Saved HTML page"),
    url: str = typer.Option("", "--url", "-u", help="Original page URL, used to resolve links"),
    source_name: str = typer.Option("Local file", "--source-name", "-s", help="Source label"),
    as_json: bool = typer.Option(False, "--json", help="Print candidates as JSON"),
):
    """Extract clinic candidates from a saved HTML file."""
    try:
        html = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        console.print(f"[red]Cannot read {path}: {e}[/red]")
        raise typer.Exit(1)

    candidates = extract_clinics_from_html(html, url or path.resolve().as_uri(), source_name)
    _print_candidates(candidates, as_json)


@app.command()
def sources(
    region: Optional[str] = typer.Option(None, "--region", "-r", help="Region code (US, CA, SE, INT, ...)"),
    country: Optional[str] = typer.Option(None, "--country", help="Order as a search from this country would"),
):
    """List the known sources scraped on every search."""
    selected = filter_by_region(KNOWN_SOURCES, region)
    if country:
        selected = prioritize_sources_by_location(selected, user_country=country)

    table = Table(title=f"Known sources ({len(selected)})")
    table.add_column("Name", style="cyan")
    table.add_column("Region", style="yellow")
    table.add_column("URL", style="dim")
    for source in selected:
        table.add_row(source.name, source.region, source.url)
    console.print(table)


@app.command()
def queries(
    query: Optional[str] = typer.Argument(None, help="Free-text query to expand"),
    city: Optional[str] = typer.Option(None, "--city", help="User city"),
    state: Optional[str] = typer.Option(None, "--state", help="User state or province"),
    country: Optional[str] = typer.Option(None, "--country", help="User country"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for the global sample"),
):
    """Show the web search queries a search would send."""
    if query:
        selected = expand_user_query(query, city, state)
    else:
        selected = select_search_queries(city, state, country, rng=random.Random(seed))

    for i, q in enumerate(selected, 1):
        console.print(f"  [dim]{i:2d}.[/dim] {q}")


if __name__ == "__main__":
    app()
