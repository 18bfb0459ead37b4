"""Page extraction pipeline.

Runs every strategy in trust order:
1. JSON-LD events
2. Microdata events
3. OpenGraph / meta tags (only when 1-2 found nothing)
4. Event cards
5. Tables
6. CMS / calendar plugins
7. Generic fallback (only when 1-6 found nothing)

Then fills gaps from page-level context and collapses same-page duplicates.
"""

import re
from typing import Callable, Optional

from clinic_pipeline.extractors.dom import PageNode
from clinic_pipeline.extractors.heuristics import (
    PageContext,
    collect_page_context,
    extract_generic_content,
)
from clinic_pipeline.extractors.listings import extract_from_cards, extract_from_tables
from clinic_pipeline.extractors.platforms import extract_cms_patterns
from clinic_pipeline.extractors.structured import (
    extract_from_json_ld,
    extract_from_meta_tags,
    extract_from_microdata,
)
from clinic_pipeline.models import RawClinicData

Strategy = Callable[[PageNode, str, str], list[RawClinicData]]

# Markup quirks surface as these; any other exception is a bug
STRATEGY_ERRORS = (AttributeError, KeyError, TypeError, ValueError, IndexError)


def _run(strategy: Strategy, doc: PageNode, source_url: str, source_name: str) -> list[RawClinicData]:
    try:
        return strategy(doc, source_url, source_name)
    except STRATEGY_ERRORS:
        return []


def _meta_strategy(doc: PageNode, source_url: str, source_name: str) -> list[RawClinicData]:
    candidate = extract_from_meta_tags(doc, source_url, source_name)
    return [candidate] if candidate else []


def enrich_candidates(candidates: list[RawClinicData], context: PageContext) -> list[RawClinicData]:
    """Fill only missing fields from page-level data."""
    for candidate in candidates:
        candidate.fill_missing(context.as_fallback(candidate.source, candidate.source_url))
    return candidates


def page_key(name: Optional[str]) -> str:
    return re.sub(r"[^a-z0-9]", "", (name or "").lower())[:50]


def deduplicate_page_results(results: list[RawClinicData]) -> list[RawClinicData]:
    """Collapse same-page duplicates by name key.

    The higher-confidence record wins, and picks up any field only the
    loser had. Candidates without a name are dropped.
    """
    seen: dict[str, RawClinicData] = {}

    for result in results:
        key = page_key(result.name)
        if not key:
            continue

        existing = seen.get(key)
        if existing is None:
            seen[key] = result
        elif result.confidence > existing.confidence:
            seen[key] = result.model_copy(deep=True).fill_missing(existing)
        else:
            existing.fill_missing(result)

    return list(seen.values())


def extract_clinics_from_html(html: Optional[str], source_url: str, source_name: str) -> list[RawClinicData]:
    """Turn one page's markup into raw clinic candidates. Never raises."""
    try:
        doc = PageNode.parse(html)
    except STRATEGY_ERRORS:
        return []

    results: list[RawClinicData] = []

    results.extend(_run(extract_from_json_ld, doc, source_url, source_name))
    results.extend(_run(extract_from_microdata, doc, source_url, source_name))

    # Structured data already describes the page; skip the page-level guess
    if not results:
        results.extend(_run(_meta_strategy, doc, source_url, source_name))

    results.extend(_run(extract_from_cards, doc, source_url, source_name))
    results.extend(_run(extract_from_tables, doc, source_url, source_name))
    results.extend(_run(extract_cms_patterns, doc, source_url, source_name))

    try:
        context = collect_page_context(doc, source_url)
    except STRATEGY_ERRORS:
        context = PageContext()

    if not results:
        try:
            generic = extract_generic_content(doc, source_url, source_name, context)
        except STRATEGY_ERRORS:
            generic = None
        if generic:
            results.append(generic)

    return deduplicate_page_results(enrich_candidates(results, context))
