"""Geocoding via OpenStreetMap Nominatim (free, no API key).

Nominatim allows at most one request per second, so every lookup made
through one Geocoder goes through a shared RateLimiter. Results, including
misses, are cached per Geocoder for the life of the process.
"""

import asyncio
import time
from typing import Callable, Optional

import httpx
from rich.console import Console

from clinic_pipeline.models import Clinic
from clinic_pipeline.models.clinic import CITY_UNKNOWN

console = Console()

NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"
USER_AGENT = "HockeyClinicsBot/1.0 (youth hockey clinic aggregator)"
MIN_REQUEST_INTERVAL = 1.1  # seconds


class RateLimiter:
    """Serializes callers and spaces them at least `min_interval` apart."""

    def __init__(self, min_interval: float = MIN_REQUEST_INTERVAL, clock: Callable[[], float] = time.monotonic):
        self.min_interval = min_interval
        self._clock = clock
        self._lock = asyncio.Lock()
        self._last: Optional[float] = None

    async def __aenter__(self) -> "RateLimiter":
        await self._lock.acquire()
        if self._last is not None:
            wait = self.min_interval - (self._clock() - self._last)
            if wait > 0:
                await asyncio.sleep(wait)
        return self

    async def __aexit__(self, *exc) -> None:
        self._last = self._clock()
        self._lock.release()


class Geocoder:
    """Place name → (lat, lng) lookups against Nominatim."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
        timeout: float = 10.0,
    ):
        self._client = client
        self.rate_limiter = rate_limiter or RateLimiter()
        self.timeout = timeout
        self._cache: dict[str, Optional[tuple[float, float]]] = {}

    async def _get(self, url: str, params: dict) -> httpx.Response:
        headers = {"User-Agent": USER_AGENT}
        async with self.rate_limiter:
            if self._client is not None:
                return await self._client.get(url, params=params, headers=headers, timeout=self.timeout)
            async with httpx.AsyncClient() as client:
                return await client.get(url, params=params, headers=headers, timeout=self.timeout)

    async def geocode(self, query: str) -> Optional[tuple[float, float]]:
        """Coordinates of the best match, or None when nothing matches."""
        key = query.lower().strip()
        if not key:
            return None
        if key in self._cache:
            return self._cache[key]

        result = None
        try:
            resp = await self._get(NOMINATIM_SEARCH_URL, {"q": query, "format": "json", "limit": 1})
            if resp.status_code == 200:
                data = resp.json()
                if data:
                    result = (float(data[0]["lat"]), float(data[0]["lon"]))
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            console.print(f"[dim]Nominatim error for {query!r}: {e}[/dim]")

        self._cache[key] = result
        return result

    async def reverse(self, lat: float, lng: float) -> Optional[dict[str, str]]:
        """City, state and country names at a coordinate."""
        try:
            resp = await self._get(
                NOMINATIM_REVERSE_URL,
                {"lat": str(lat), "lon": str(lng), "format": "json"},
            )
            if resp.status_code != 200:
                return None
            address = resp.json().get("address") or {}
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            console.print(f"[dim]Nominatim reverse error: {e}[/dim]")
            return None

        return {
            "city": address.get("city") or address.get("town") or address.get("village") or "",
            "state": address.get("state") or "",
            "country": address.get("country") or "",
        }


def location_query(clinic: Clinic) -> str:
    """Place string "city, state, country", or just the country when the city is unknown."""
    loc = clinic.location
    country = loc.country if loc.country != CITY_UNKNOWN else ""
    if loc.city and loc.city != CITY_UNKNOWN:
        return ", ".join(p for p in (loc.city, loc.state, country) if p)
    return country


_default_geocoder: Optional[Geocoder] = None


def get_geocoder() -> Geocoder:
    """Process-wide geocoder sharing one rate limiter and cache."""
    global _default_geocoder
    if _default_geocoder is None:
        _default_geocoder = Geocoder()
    return _default_geocoder


async def geocode_location(query: str) -> Optional[tuple[float, float]]:
    """Geocode with the process-wide geocoder."""
    return await get_geocoder().geocode(query)
