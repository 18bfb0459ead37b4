"""HTML → raw clinic candidate extraction.

This package provides:
1. Text signals (hockey relevance, dates, prices, contacts, venues)
2. Seven extraction strategies over a read-only document interface:
   - JSON-LD / microdata events
   - OpenGraph / meta tags
   - Event cards and tables
   - CMS calendar plugins
   - Generic page heuristics
3. A page fetcher returning result objects instead of raising
"""

from clinic_pipeline.extractors.fetch import FetchError, FetchResult, fetch_html
from clinic_pipeline.extractors.pipeline import extract_clinics_from_html
from clinic_pipeline.extractors.signals import calculate_confidence, is_hockey_related

__all__ = [
    "FetchError",
    "FetchResult",
    "fetch_html",
    "extract_clinics_from_html",
    "calculate_confidence",
    "is_hockey_related",
]
