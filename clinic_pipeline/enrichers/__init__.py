"""Post-processing enrichment: geocoding."""

from clinic_pipeline.enrichers.geocode import (
    Geocoder,
    RateLimiter,
    geocode_location,
    get_geocoder,
)

__all__ = ["Geocoder", "RateLimiter", "geocode_location", "get_geocoder"]
