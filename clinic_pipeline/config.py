"""Search configuration, read from environment variables."""

import os
from typing import Optional

from pydantic import BaseModel


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    value = _env_float(name, None)
    return int(value) if value is not None else default


class SearchConfig(BaseModel):
    """Every tunable of one search engine instance.

    Supplied at construction and never changed during a search.
    """

    # Provider credentials
    google_api_key: Optional[str] = None
    google_cse_id: Optional[str] = None
    brave_api_key: Optional[str] = None
    tavily_api_key: Optional[str] = None
    eventbrite_api_key: Optional[str] = None

    # Execution
    timeout: float = 5.0
    max_concurrent: int = 8
    max_results_per_source: int = 50
    max_known_sources: int = 30
    global_budget: float = 45.0
    post_processing_reserve: float = 10.0

    # Link discovery wave
    discovery_min_remaining: float = 15.0
    discovery_budget: float = 8.0
    discovery_max_urls: int = 5

    # Geocoding
    geocode_min_remaining: float = 5.0
    geocode_limit: int = 20

    confidence_floor: float = 0.25
    cache_ttl: float = 30 * 60
    max_page_bytes: int = 2 * 1024 * 1024

    # User location hints
    user_lat: Optional[float] = None
    user_lng: Optional[float] = None
    user_city: Optional[str] = None
    user_state: Optional[str] = None
    user_country: Optional[str] = None

    # Queries per provider
    google_query_limit: int = 10
    brave_query_limit: int = 8
    tavily_query_limit: int = 6

    class Config:
        extra = "ignore"

    @classmethod
    def from_env(cls, **overrides) -> "SearchConfig":
        """Build from environment variables; keyword overrides win."""
        values = {
            "google_api_key": os.environ.get("GOOGLE_API_KEY"),
            "google_cse_id": os.environ.get("GOOGLE_CSE_ID"),
            "brave_api_key": os.environ.get("BRAVE_API_KEY"),
            "tavily_api_key": os.environ.get("TAVILY_API_KEY"),
            "eventbrite_api_key": os.environ.get("EVENTBRITE_API_KEY"),
            "timeout": _env_float("CLINIC_TASK_TIMEOUT", 5.0),
            "max_concurrent": _env_int("CLINIC_MAX_CONCURRENT", 8),
            "global_budget": _env_float("CLINIC_GLOBAL_BUDGET", 45.0),
            "cache_ttl": _env_float("CLINIC_CACHE_TTL", 30 * 60),
            "user_lat": _env_float("CLINIC_USER_LAT", None),
            "user_lng": _env_float("CLINIC_USER_LNG", None),
            "user_city": os.environ.get("CLINIC_USER_CITY") or None,
            "user_state": os.environ.get("CLINIC_USER_STATE") or None,
            "user_country": os.environ.get("CLINIC_USER_COUNTRY") or None,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def has_google(self) -> bool:
        return bool(self.google_api_key and self.google_cse_id)

    @property
    def has_search_providers(self) -> bool:
        return any(self.provider_flags().values())

    def provider_flags(self) -> dict[str, bool]:
        """Which providers are configured, without exposing the keys."""
        return {
            "google": self.has_google,
            "brave": bool(self.brave_api_key),
            "tavily": bool(self.tavily_api_key),
            "eventbrite": bool(self.eventbrite_api_key),
        }
