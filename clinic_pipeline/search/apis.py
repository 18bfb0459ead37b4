"""Web search API clients: Google CSE, Brave, Tavily and Eventbrite.

Each client makes one request per query and raises on HTTP errors; the
search task wrapper turns failures into source reports.
"""

from typing import Optional

import httpx
from pydantic import BaseModel

from clinic_pipeline.extractors.signals import calculate_confidence
from clinic_pipeline.models import RawClinicData

GOOGLE_CSE_URL = "https://www.googleapis.com/customsearch/v1"
BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"
TAVILY_SEARCH_URL = "https://api.tavily.com/search"
EVENTBRITE_SEARCH_URL = "https://www.eventbriteapi.com/v3/destination/search/"

SNIPPET_MAX_CHARS = 500
EVENTBRITE_CONFIDENCE = 0.8

# Eventbrite queries when the user gave none
EVENTBRITE_DEFAULT_QUERIES = ["youth hockey camp", "ice hockey clinic", "hockey skills camp"]


class SearchHit(BaseModel):
    """One organic search result."""

    url: str
    title: str = ""
    snippet: str = ""
    image_url: Optional[str] = None

    class Config:
        extra = "ignore"


def hits_to_raw(hits: list[SearchHit], source: str) -> list[RawClinicData]:
    """Turn search hits into raw candidates scored on title + snippet."""
    return [
        RawClinicData(
            source=source,
            source_url=hit.url,
            name=hit.title or None,
            description=hit.snippet or None,
            image_url=hit.image_url,
            website_url=hit.url,
            registration_url=hit.url,
            confidence=calculate_confidence(hit.title, hit.snippet),
            extraction_method="search-api",
        )
        for hit in hits
        if hit.url
    ]


async def search_google(
    client: httpx.AsyncClient,
    query: str,
    api_key: str,
    cse_id: str,
    timeout: float = 5.0,
) -> list[SearchHit]:
    response = await client.get(
        GOOGLE_CSE_URL,
        params={"key": api_key, "cx": cse_id, "q": query, "num": "10"},
        timeout=timeout,
    )
    response.raise_for_status()
    data = response.json()

    hits = []
    for item in data.get("items") or []:
        images = (item.get("pagemap") or {}).get("cse_image") or [{}]
        hits.append(
            SearchHit(
                url=item.get("link") or "",
                title=item.get("title") or "",
                snippet=item.get("snippet") or "",
                image_url=images[0].get("src"),
            )
        )
    return hits


async def search_brave(
    client: httpx.AsyncClient,
    query: str,
    api_key: str,
    timeout: float = 5.0,
) -> list[SearchHit]:
    response = await client.get(
        BRAVE_SEARCH_URL,
        params={
            "q": query,
            "count": "20",
            "safesearch": "off",
            "text_decorations": "false",
        },
        headers={
            "Accept": "application/json",
            "X-Subscription-Token": api_key,
        },
        timeout=timeout,
    )
    response.raise_for_status()
    data = response.json()

    hits = []
    for result in (data.get("web") or {}).get("results") or []:
        hits.append(
            SearchHit(
                url=result.get("url") or "",
                title=result.get("title") or "",
                snippet=result.get("description") or "",
                image_url=(result.get("thumbnail") or {}).get("src"),
            )
        )
    return hits


async def search_tavily(
    client: httpx.AsyncClient,
    query: str,
    api_key: str,
    timeout: float = 5.0,
) -> list[SearchHit]:
    response = await client.post(
        TAVILY_SEARCH_URL,
        json={
            "api_key": api_key,
            "query": query,
            "search_depth": "basic",
            "max_results": 15,
            "include_answer": False,
        },
        timeout=timeout,
    )
    response.raise_for_status()
    data = response.json()

    return [
        SearchHit(
            url=result.get("url") or "",
            title=result.get("title") or "",
            snippet=(result.get("content") or "")[:SNIPPET_MAX_CHARS],
        )
        for result in data.get("results") or []
    ]


def _eventbrite_event_to_raw(event: dict) -> RawClinicData:
    venue = event.get("primary_venue") or event.get("venue") or {}
    address = venue.get("address") or {}
    description = event.get("summary") or (event.get("description") or {}).get("text") or ""
    image = event.get("image") or event.get("logo") or {}
    start = event.get("start_date") or (event.get("start") or {}).get("utc")
    end = event.get("end_date") or (event.get("end") or {}).get("utc")
    url = event.get("url") or ""
    name = event.get("name") or event.get("title")
    if isinstance(name, dict):
        # Older API shape: {"text": ..., "html": ...}
        name = name.get("text")

    return RawClinicData(
        source="Eventbrite",
        source_url=url or event.get("primary_venue_url") or "",
        name=name or None,
        description=description[:SNIPPET_MAX_CHARS] or None,
        image_url=image.get("url") or None,
        venue=venue.get("name") or None,
        city=address.get("city") or None,
        state=address.get("region") or None,
        country=address.get("country") or None,
        start_date=start or None,
        end_date=end or None,
        website_url=url or None,
        registration_url=url or event.get("tickets_url") or None,
        confidence=EVENTBRITE_CONFIDENCE,
        extraction_method="eventbrite-api",
    )


async def search_eventbrite(
    client: httpx.AsyncClient,
    query: str,
    api_key: str,
    timeout: float = 5.0,
) -> list[RawClinicData]:
    """Eventbrite events are structured, so they map straight to candidates."""
    response = await client.get(
        EVENTBRITE_SEARCH_URL,
        params={"q": query, "page_size": "20"},
        headers={"Authorization": f"Bearer {api_key}"},
        timeout=timeout,
    )
    response.raise_for_status()
    data = response.json()

    events = data.get("events") or []
    if isinstance(events, dict):
        events = events.get("results") or []

    results = []
    for event in events:
        if not isinstance(event, dict):
            continue
        results.append(_eventbrite_event_to_raw(event))
    return results
