"""CMS and calendar-plugin specific extractors.

Each pattern describes where a known plugin renders its event list. The
generic blog-post pattern is the least specific and additionally needs a
registration or date cue in its text so ordinary news posts are skipped.
"""

import re
from typing import Optional

from pydantic import BaseModel

from clinic_pipeline.extractors.dom import PageNode
from clinic_pipeline.extractors.signals import (
    clean_text,
    extract_age_range_from_text,
    extract_dates_from_text,
    extract_prices_from_text,
    is_hockey_related,
    resolve_url,
)
from clinic_pipeline.models import RawClinicData

REGISTRATION_OR_DATE = re.compile(
    r"regist|sign[ -]?up|enrol|book now|spots? (?:left|available)|"
    r"\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+\d{1,2}\b|"
    r"\b\d{1,2}/\d{1,2}/\d{2,4}\b",
    re.I,
)


class CmsPattern(BaseModel):
    """Where one calendar plugin puts its fields."""

    name: str
    container: str
    title: str
    date: Optional[str] = None
    location: Optional[str] = None
    price: Optional[str] = None
    description: Optional[str] = None
    confidence: float
    requires_cue: bool = False


CMS_PATTERNS = [
    CmsPattern(
        name="the-events-calendar",
        container=".tribe-events-calendar-list__event, .type-tribe_events, .tribe-events-list-event",
        title=".tribe-events-calendar-list__event-title, .tribe-events-list-event-title, h2, h3",
        date=".tribe-event-date-start, .tribe-events-schedule, time",
        location=".tribe-events-calendar-list__event-venue, .tribe-events-venue-details, .tribe-venue",
        price=".tribe-events-c-small-cta__price, .tribe-events-cost",
        description=".tribe-events-calendar-list__event-description, .tribe-events-list-event-description",
        confidence=0.78,
    ),
    CmsPattern(
        name="modern-events-calendar",
        container=".mec-event-article",
        title=".mec-event-title",
        date=".mec-event-date, .mec-start-date-label",
        location=".mec-event-loc-place, .mec-venue-details",
        price=".mec-event-cost",
        description=".mec-event-description",
        confidence=0.76,
    ),
    CmsPattern(
        name="eventon",
        container=".eventon_list_event",
        title=".evcal_event_title",
        date=".evo_start, .evcal_cblock",
        location=".evcal_location, .event_location_name",
        description=".evcal_desc_info, .eventon_desc_in",
        confidence=0.75,
    ),
    CmsPattern(
        name="events-manager",
        container=".em-event, .em-item",
        title=".em-event-name, .em-item-title, h3",
        date=".em-event-date, .em-event-when",
        location=".em-event-location, .em-event-where",
        description=".em-event-desc, .em-item-desc",
        confidence=0.74,
    ),
    CmsPattern(
        name="squarespace-events",
        container=".eventlist-event",
        title=".eventlist-title",
        date=".eventlist-meta-date, time.event-date",
        location=".eventlist-meta-address",
        description=".eventlist-excerpt, .eventlist-description",
        confidence=0.74,
    ),
    CmsPattern(
        name="hcalendar",
        container=".vevent, .h-event",
        title=".summary, .p-name",
        date=".dtstart, .dt-start",
        location=".location, .p-location",
        description=".description, .p-summary",
        confidence=0.72,
    ),
    CmsPattern(
        name="wix-events",
        container='[data-hook="event-list-item"], [data-hook="events-card"]',
        title='[data-hook="ev-list-item-title"], [data-hook="title"]',
        date='[data-hook="ev-date"], [data-hook="date"]',
        location='[data-hook="ev-list-item-location"], [data-hook="location"]',
        confidence=0.7,
    ),
    CmsPattern(
        name="sportsengine",
        container=".eventAggregatorElement, .event-aggregator-item",
        title=".eventTitle, .event-title, h4",
        date=".eventDate, .dateImage, .event-date",
        location=".eventLocation, .event-location",
        confidence=0.7,
    ),
    CmsPattern(
        name="blog-post",
        container="article.type-post, article.post, .blog-post, .news-item, .entry",
        title=".entry-title, .post-title, h1, h2",
        description=".entry-summary, .excerpt, .entry-content p, p",
        confidence=0.55,
        requires_cue=True,
    ),
]


def _field(node: PageNode, selector: Optional[str]) -> Optional[str]:
    if not selector:
        return None
    found = node.select_one(selector)
    if found is None:
        return None
    return clean_text(found.text()) or found.attr("datetime") or None


def _from_pattern(
    node: PageNode,
    pattern: CmsPattern,
    source_url: str,
    source_name: str,
) -> Optional[RawClinicData]:
    text = node.text()
    if not is_hockey_related(text):
        return None
    if pattern.requires_cue and not REGISTRATION_OR_DATE.search(text):
        return None

    name = _field(node, pattern.title)
    if not name:
        return None

    link = node.select_one("a[href]")
    full_url = resolve_url(link.attr("href"), source_url) if link is not None else source_url

    date_text = _field(node, pattern.date)
    if not date_text:
        dates = extract_dates_from_text(text)
        date_text = dates[0] if dates else None
    price = _field(node, pattern.price)
    if not price:
        prices = extract_prices_from_text(text)
        price = prices[0] if prices else None
    ages = extract_age_range_from_text(text)
    img = node.select_one("img")
    image = (img.attr("src") or img.attr("data-src")) if img is not None else None

    return RawClinicData(
        source=source_name,
        source_url=full_url,
        name=name,
        description=(_field(node, pattern.description) or "")[:500] or None,
        date_text=date_text,
        location=_field(node, pattern.location),
        price=price,
        age_range=ages[0] if ages else None,
        image_url=resolve_url(image, source_url) if image else None,
        website_url=full_url,
        registration_url=full_url,
        confidence=pattern.confidence,
        extraction_method=f"cms:{pattern.name}",
    )


def extract_cms_patterns(doc: PageNode, source_url: str, source_name: str) -> list[RawClinicData]:
    """Strategy 6: known calendar plugins, then blog-post announcements."""
    results = []
    seen: set[PageNode] = set()
    for pattern in CMS_PATTERNS:
        for node in doc.select(pattern.container):
            # A node already claimed by a more specific plugin is skipped
            if node in seen:
                continue
            seen.add(node)
            candidate = _from_pattern(node, pattern, source_url, source_name)
            if candidate:
                results.append(candidate)
    return results
