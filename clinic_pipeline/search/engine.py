"""Clinic search engine: fan out to sources, then canonicalize, merge and rank.

One search runs these phases:
1. Cache check (skipped on force_refresh)
2. Task construction: search-API queries for configured providers, then
   known-source scrapes ordered by the user's region
3. Batched execution under a per-task timeout and a global time budget
4. Link discovery: a short second wave over new domains, if time remains
5. Canonicalization above the confidence floor
6. Seed merge and deduplication
7. Geocoding of the leading results, if time remains
8. Ranking, cache write

No phase raises out of search(); failures show up in the source report.
"""

import random
import time
from datetime import date
from typing import Awaitable, Callable, Optional, Protocol
from urllib.parse import urlparse

import httpx
from rich.console import Console

from clinic_pipeline.config import SearchConfig
from clinic_pipeline.dedup import deduplicate_clinics
from clinic_pipeline.enrichers.geocode import get_geocoder, location_query
from clinic_pipeline.extractors import FetchResult, extract_clinics_from_html, fetch_html
from clinic_pipeline.models import Clinic, RawClinicData, SearchResult, SourceReport
from clinic_pipeline.normalizers.canonical import canonicalize
from clinic_pipeline.normalizers.location import get_country_coords
from clinic_pipeline.search.apis import (
    EVENTBRITE_DEFAULT_QUERIES,
    hits_to_raw,
    search_brave,
    search_eventbrite,
    search_google,
    search_tavily,
)
from clinic_pipeline.search.cache import TTLCache, cache_key
from clinic_pipeline.search.queries import expand_user_query, select_search_queries
from clinic_pipeline.search.ranking import rank_clinics
from clinic_pipeline.search.sources import (
    KNOWN_SOURCES,
    SKIP_DOMAINS,
    KnownSource,
    prioritize_sources_by_location,
)
from clinic_pipeline.search.tasks import SearchTask, TaskResult, run_batched
from clinic_pipeline.seeds import SEED_SOURCE_NAME, filter_seeds, load_seed_clinics

console = Console()

# Words in a URL, name or description that make a link worth following
HOCKEY_SIGNALS = ["hockey", "skating", "rink", "arena", "ice", "camp", "clinic"]

Fetcher = Callable[[str, float], Awaitable[FetchResult]]


class GeocoderLike(Protocol):
    async def geocode(self, query: str) -> Optional[tuple[float, float]]: ...


class ClinicSearchEngine:
    """Owns one result cache and one set of already-discovered domains."""

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        fetcher: Optional[Fetcher] = None,
        geocoder: Optional[GeocoderLike] = None,
        seeds: Optional[list[Clinic]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
        known_sources: Optional[list[KnownSource]] = None,
    ):
        self.config = config or SearchConfig()
        self._fetcher = fetcher
        self._geocoder = geocoder
        self.seeds = seeds if seeds is not None else load_seed_clinics()
        self._http_client = http_client
        self._clock = clock
        self._rng = rng or random.Random()
        self.known_sources = known_sources if known_sources is not None else KNOWN_SOURCES
        self._cache: TTLCache[list[Clinic]] = TTLCache(ttl=self.config.cache_ttl, clock=clock)
        self.discovered_domains: set[str] = set()

    # ── Configuration / state ──────────────────────────────────

    def update_config(self, **changes) -> SearchConfig:
        """Install a modified copy of the config for subsequent searches."""
        self.config = self.config.model_copy(update=changes)
        self._cache.ttl = self.config.cache_ttl
        return self.config

    def clear_cache(self) -> None:
        self._cache.clear()
        self.discovered_domains.clear()

    @property
    def geocoder(self) -> GeocoderLike:
        return self._geocoder or get_geocoder()

    def _elapsed(self, started: float) -> float:
        return self._clock() - started

    def _remaining(self, started: float) -> float:
        return self.config.global_budget - self._elapsed(started)

    # ── Search ─────────────────────────────────────────────────

    async def search(self, query: Optional[str] = None, force_refresh: bool = False) -> SearchResult:
        started = self._clock()
        key = cache_key(query)

        if not force_refresh:
            cached = self._cache.get(key)
            if cached is not None:
                console.print(f"[dim]Cache hit for {key!r} ({len(cached)} clinics)[/dim]")
                return SearchResult(
                    clinics=cached,
                    sources=[SourceReport(name="cache", count=len(cached))],
                    total_raw=len(cached),
                    search_duration_ms=int(self._elapsed(started) * 1000),
                )

        client = self._http_client or httpx.AsyncClient()
        try:
            clinics, reports, total_raw = await self._run(query, client, started)
        finally:
            if self._http_client is None:
                await client.aclose()

        self._cache.set(key, clinics)
        duration_ms = int(self._elapsed(started) * 1000)
        console.print(
            f"[green]Search done: {len(clinics)} clinics from {total_raw} raw candidates "
            f"in {duration_ms} ms[/green]"
        )
        return SearchResult(
            clinics=clinics,
            sources=reports,
            total_raw=total_raw,
            search_duration_ms=duration_ms,
        )

    async def _run(
        self,
        query: Optional[str],
        client: httpx.AsyncClient,
        started: float,
    ) -> tuple[list[Clinic], list[SourceReport], int]:
        cfg = self.config
        today = date.today()

        # API searches first (fastest), then scrapes
        search_tasks = self.build_search_tasks(query, client)
        scrape_tasks = self.build_scrape_tasks(client)
        console.print(
            f"[cyan]Running {len(search_tasks)} search queries and {len(scrape_tasks)} source scrapes[/cyan]"
        )
        results = await run_batched(
            search_tasks + scrape_tasks,
            cfg.max_concurrent,
            cfg.timeout,
            cfg.global_budget - cfg.post_processing_reserve,
            self._clock,
        )

        remaining = self._remaining(started)
        if remaining > cfg.discovery_min_remaining:
            results.extend(await self._discover(results, client))
        else:
            console.print(f"[yellow]Skipping link discovery ({remaining:.1f}s left)[/yellow]")

        reports = [r.to_report() for r in results]
        raw = [candidate for r in results for candidate in r.results]

        clinics = canonicalize(raw, cfg.confidence_floor, today)
        console.print(f"[dim]{len(clinics)}/{len(raw)} candidates above confidence floor[/dim]")

        seeds = filter_seeds(self.seeds, query)
        reports.append(SourceReport(name=SEED_SOURCE_NAME, count=len(seeds)))

        combined = [*seeds, *clinics]
        deduped = deduplicate_clinics(combined)
        console.print(f"[dim]Deduplicated {len(combined)} → {len(deduped)} clinics[/dim]")

        remaining = self._remaining(started)
        if remaining > cfg.geocode_min_remaining:
            deduped = await self.geo_enrich(deduped, started)
        else:
            console.print(f"[yellow]Skipping geocoding ({remaining:.1f}s left)[/yellow]")

        ranked = rank_clinics(deduped, cfg.user_lat, cfg.user_lng, today)
        return ranked, reports, len(raw)

    # ── Task construction ──────────────────────────────────────

    def search_queries(self, query: Optional[str] = None) -> list[str]:
        """Queries a search would send to the web search providers."""
        cfg = self.config
        if query:
            return expand_user_query(query, cfg.user_city, cfg.user_state)
        return select_search_queries(cfg.user_city, cfg.user_state, cfg.user_country, rng=self._rng)

    def build_search_tasks(self, query: Optional[str], client: httpx.AsyncClient) -> list[SearchTask]:
        cfg = self.config
        queries = self.search_queries(query)
        tasks: list[SearchTask] = []

        def api_task(label: str, source: str, q: str, call) -> SearchTask:
            async def run() -> list[RawClinicData]:
                return hits_to_raw(await call(q), source)

            return SearchTask(f'{label}: "{q}"', run)

        if cfg.has_google:
            for q in queries[:cfg.google_query_limit]:
                tasks.append(api_task("Google", "Google", q, lambda q: search_google(
                    client, q, cfg.google_api_key, cfg.google_cse_id, cfg.timeout)))

        if cfg.brave_api_key:
            for q in queries[:cfg.brave_query_limit]:
                tasks.append(api_task("Brave", "Brave Search", q, lambda q: search_brave(
                    client, q, cfg.brave_api_key, cfg.timeout)))

        if cfg.tavily_api_key:
            for q in queries[:cfg.tavily_query_limit]:
                tasks.append(api_task("Tavily", "Tavily", q, lambda q: search_tavily(
                    client, q, cfg.tavily_api_key, cfg.timeout)))

        if cfg.eventbrite_api_key:
            for q in [query] if query else EVENTBRITE_DEFAULT_QUERIES:
                tasks.append(SearchTask(
                    f'Eventbrite: "{q}"',
                    lambda q=q: search_eventbrite(client, q, cfg.eventbrite_api_key, cfg.timeout),
                ))

        return tasks

    def build_scrape_tasks(self, client: httpx.AsyncClient) -> list[SearchTask]:
        cfg = self.config
        sources = prioritize_sources_by_location(self.known_sources, cfg.user_country, cfg.user_state)
        return [
            SearchTask(source.name, self._scrape_runner(source.url, source.name, client))
            for source in sources[:cfg.max_known_sources]
        ]

    def _scrape_runner(self, url: str, source_name: str, client: httpx.AsyncClient):
        async def run() -> list[RawClinicData]:
            return await self.scrape_source(url, source_name, client)

        return run

    # ── Scraping / discovery ───────────────────────────────────

    async def scrape_source(
        self,
        url: str,
        source_name: str,
        client: Optional[httpx.AsyncClient] = None,
    ) -> list[RawClinicData]:
        """Fetch one page and extract candidates. Raises FetchError on fetch failure."""
        if self._fetcher is not None:
            page = await self._fetcher(url, self.config.timeout)
        else:
            page = await fetch_html(
                url,
                timeout=self.config.timeout,
                client=client or self._http_client,
                max_bytes=self.config.max_page_bytes,
            )
        html = page.raise_for_error()
        results = extract_clinics_from_html(html, page.final_url, source_name)
        return results[:self.config.max_results_per_source]

    def extract_discoverable_urls(
        self,
        raw_data: list[RawClinicData],
        exclude_domains: Optional[set[str]] = None,
    ) -> list[str]:
        """New hockey-looking URLs on domains not seen before.

        Every accepted domain is remembered, so later searches on this
        engine never rediscover it (until clear_cache()).
        """
        exclude_domains = exclude_domains or set()
        urls = []
        for raw in raw_data:
            for url in (raw.website_url, raw.registration_url, raw.source_url):
                if not url:
                    continue
                try:
                    domain = urlparse(url).hostname
                except ValueError:
                    continue
                if not domain or domain in self.discovered_domains or domain in exclude_domains:
                    continue
                if any(skip in domain for skip in SKIP_DOMAINS):
                    continue

                text = f"{url} {raw.name or ''} {raw.description or ''}".lower()
                if any(signal in text for signal in HOCKEY_SIGNALS):
                    self.discovered_domains.add(domain)
                    urls.append(url)
        return urls

    async def _discover(self, results: list[TaskResult], client: httpx.AsyncClient) -> list[TaskResult]:
        cfg = self.config
        raw = [candidate for r in results for candidate in r.results]
        # Pages already scraped this search are not followed again
        scraped = {urlparse(s.url).hostname for s in self.known_sources}
        urls = self.extract_discoverable_urls(raw, scraped)[:cfg.discovery_max_urls]
        if not urls:
            return []

        console.print(f"[cyan]Following {len(urls)} discovered links[/cyan]")
        tasks = []
        for url in urls:
            host = urlparse(url).hostname
            tasks.append(SearchTask(
                f"Discovery: {host}",
                self._scrape_runner(url, f"Discovered: {host}", client),
            ))
        return await run_batched(
            tasks, cfg.discovery_max_urls, cfg.timeout, cfg.discovery_budget, self._clock
        )

    # ── Geocoding ──────────────────────────────────────────────

    async def geo_enrich(self, clinics: list[Clinic], started: float) -> list[Clinic]:
        """Geocode the first `geocode_limit` clinics lacking coordinates.

        A miss falls back to the country centroid. Lookups stop when the
        global budget runs out; everything after the limit passes through.
        """
        cfg = self.config
        enriched = []
        geocoded = 0
        for i, clinic in enumerate(clinics):
            if i >= cfg.geocode_limit or clinic.location.has_coordinates:
                enriched.append(clinic)
                continue
            if self._remaining(started) <= 0:
                enriched.extend(clinics[i:])
                console.print("[yellow]Time budget exhausted during geocoding[/yellow]")
                break

            coords = None
            query = location_query(clinic)
            if query:
                try:
                    coords = await self.geocoder.geocode(query)
                except Exception as e:
                    console.print(f"[dim]Geocoding failed for {query!r}: {e}[/dim]")
            if coords:
                geocoded += 1
            else:
                coords = get_country_coords(clinic.location.country)

            enriched.append(
                clinic.model_copy(update={
                    "location": clinic.location.model_copy(update={"lat": coords[0], "lng": coords[1]}),
                })
            )

        console.print(f"[dim]Geocoded {geocoded} clinics[/dim]")
        return enriched
