"""Main pipeline orchestration."""

from typing import Optional

from rich.console import Console
from rich.table import Table

from clinic_pipeline.config import SearchConfig
from clinic_pipeline.enrichers.geocode import get_geocoder
from clinic_pipeline.models import Clinic, SearchResult, SourceReport
from clinic_pipeline.search.engine import ClinicSearchEngine

console = Console()

STATUS_STYLES = {"success": "green", "error": "red", "timeout": "yellow"}


async def resolve_user_location(config: SearchConfig) -> SearchConfig:
    """Fill city/state/country from coordinates when only lat/lng are known."""
    if config.user_lat is None or config.user_lng is None:
        return config
    if config.user_city or config.user_state:
        return config

    place = await get_geocoder().reverse(config.user_lat, config.user_lng)
    if not place:
        return config
    console.print(
        f"[dim]Resolved location: {place['city'] or '?'}, {place['state'] or '?'}, {place['country'] or '?'}[/dim]"
    )
    return config.model_copy(update={
        "user_city": place["city"] or None,
        "user_state": place["state"] or None,
        "user_country": config.user_country or place["country"] or None,
    })


async def run_search(
    query: Optional[str] = None,
    config: Optional[SearchConfig] = None,
    force_refresh: bool = False,
    engine: Optional[ClinicSearchEngine] = None,
) -> SearchResult:
    """Run one search.

    1. Resolve the user's place names from coordinates if needed
    2. Fan out to search APIs and known sources
    3. Canonicalize, merge with seeds, deduplicate, geocode and rank

    Returns:
        The ranked clinics with the per-source report.
    """
    console.print("\n[bold cyan]Starting clinic search[/bold cyan]\n")

    config = config or SearchConfig.from_env()
    if engine is None:
        config = await resolve_user_location(config)
        engine = ClinicSearchEngine(config)

    if not engine.config.has_search_providers:
        console.print("[dim]No search API keys configured, scraping known sources only[/dim]")

    return await engine.search(query, force_refresh=force_refresh)


def _location_label(clinic: Clinic) -> str:
    loc = clinic.location
    parts = [loc.city, loc.state] if loc.state else [loc.city, loc.country]
    return ", ".join(p for p in parts if p)


def print_clinic_summary(clinics: list[Clinic], limit: int = 10) -> None:
    """Print a summary table of ranked clinics."""
    table = Table(title=f"Clinic Summary (showing {min(len(clinics), limit)} of {len(clinics)})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="cyan", max_width=36)
    table.add_column("Type", style="magenta")
    table.add_column("Location", style="green", max_width=24)
    table.add_column("Dates", style="red")
    table.add_column("Price", style="yellow", justify="right")
    table.add_column("Ages", style="blue", max_width=20)
    table.add_column("Source", style="dim", max_width=20)

    for i, clinic in enumerate(clinics[:limit], 1):
        price = f"{clinic.price.amount:,.0f} {clinic.price.currency}" if clinic.price.amount else "-"
        dates = clinic.dates.start
        if clinic.dates.end != clinic.dates.start:
            dates = f"{clinic.dates.start} → {clinic.dates.end}"
        table.add_row(
            str(i),
            clinic.name[:36],
            clinic.type,
            _location_label(clinic)[:24],
            dates,
            price,
            ", ".join(clinic.age_groups[:3]),
            (clinic.source or "-")[:20],
        )

    console.print(table)


def print_source_report(sources: list[SourceReport], show_all: bool = False) -> None:
    """Print the per-source diagnostic table.

    Sources that returned nothing successfully are hidden unless show_all.
    """
    table = Table(title="Sources")
    table.add_column("Source", style="cyan", max_width=50)
    table.add_column("Count", justify="right")
    table.add_column("Status")
    table.add_column("Error", style="dim", max_width=30)

    shown = [s for s in sources if show_all or s.count or s.status != "success"]
    for source in shown:
        style = STATUS_STYLES.get(source.status, "white")
        table.add_row(
            source.name[:50],
            str(source.count),
            f"[{style}]{source.status}[/{style}]",
            source.error or "",
        )

    console.print(table)

    by_status: dict[str, int] = {}
    for source in sources:
        by_status[source.status] = by_status.get(source.status, 0) + 1
    console.print(f"  By status: {by_status}")
