"""Extract clinics from structured data: JSON-LD, microdata and meta tags."""

import json
from typing import Any, Optional

from clinic_pipeline.extractors.dom import PageNode
from clinic_pipeline.extractors.signals import (
    clean_text,
    extract_age_range_from_text,
    extract_amenities_from_text,
    extract_dates_from_text,
    extract_emails_from_text,
    extract_phones_from_text,
    extract_prices_from_text,
    extract_skill_level_from_text,
    extract_venue_from_text,
    is_hockey_related,
    resolve_url,
)
from clinic_pipeline.models import RawClinicData
from clinic_pipeline.normalizers.dates import parse_date


def _first(value: Any) -> Any:
    """Schema.org allows most properties to be a single value or a list."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(str(value).replace(",", "").strip())
    except ValueError:
        return None


def _image_url(image: Any) -> Optional[str]:
    image = _first(image)
    if isinstance(image, str):
        return image
    if isinstance(image, dict):
        return image.get("url") or image.get("contentUrl")
    return None


def format_address(address: Any) -> str:
    """Flatten a PostalAddress (or plain string) into one line."""
    if not address:
        return ""
    if isinstance(address, str):
        return address
    if isinstance(address, dict):
        parts = [
            address.get("streetAddress"),
            address.get("addressLocality"),
            address.get("addressRegion"),
            address.get("postalCode"),
            _country_name(address.get("addressCountry")),
        ]
        return ", ".join(str(p) for p in parts if p)
    return ""


def _country_name(country: Any) -> Optional[str]:
    if isinstance(country, dict):
        return country.get("name")
    return country


def _people_names(value: Any) -> list[str]:
    if not value:
        return []
    people = value if isinstance(value, list) else [value]
    names = []
    for person in people:
        if isinstance(person, dict) and person.get("name"):
            names.append(clean_text(person["name"]))
        elif isinstance(person, str):
            names.append(clean_text(person))
    return names


def extract_json_ld(doc: PageNode) -> list[dict]:
    """Extract all JSON-LD items from a page, flattening @graph and lists."""
    items: list[dict] = []

    def collect(data: Any) -> None:
        if isinstance(data, list):
            for entry in data:
                collect(entry)
        elif isinstance(data, dict):
            if "@graph" in data:
                collect(data["@graph"])
            else:
                items.append(data)

    for script in doc.find_all("script", type="application/ld+json"):
        try:
            collect(json.loads(script.raw_text()))
        except (json.JSONDecodeError, TypeError, RecursionError):
            continue

    return items


def _is_event(item: dict) -> bool:
    types = item.get("@type", "")
    if isinstance(types, str):
        types = [types]
    if not isinstance(types, list):
        return False
    return any(isinstance(t, str) and "Event" in t for t in types)


def _from_schema_event(item: dict, source_url: str, source_name: str) -> Optional[RawClinicData]:
    name = item.get("name") or item.get("headline") or ""
    description = item.get("description") or ""
    if not isinstance(name, str) or not isinstance(description, str):
        return None
    if not is_hockey_related(f"{name} {description}"):
        return None

    location = _first(item.get("location"))
    venue = city = state = country = None
    location_text = None
    if isinstance(location, dict):
        venue = location.get("name")
        address = _first(location.get("address"))
        location_text = format_address(address) or None
        if isinstance(address, dict):
            city = address.get("addressLocality")
            state = address.get("addressRegion")
            country = _country_name(address.get("addressCountry"))
    elif isinstance(location, str):
        location_text = location

    offers = _first(item.get("offers"))
    price = price_amount = currency = None
    if isinstance(offers, dict):
        raw_price = offers.get("price", offers.get("lowPrice"))
        price = str(raw_price) if raw_price is not None else None
        price_amount = _to_float(raw_price)
        currency = offers.get("priceCurrency")

    url = item.get("url")
    page_url = resolve_url(url, source_url) if isinstance(url, str) and url else source_url
    start_raw = item.get("startDate")

    return RawClinicData(
        source=source_name,
        source_url=source_url,
        name=clean_text(name),
        description=clean_text(description)[:500] or None,
        venue=venue,
        location=location_text,
        city=city,
        state=state,
        country=country,
        start_date=parse_date(start_raw) or start_raw,
        end_date=parse_date(item.get("endDate")) or item.get("endDate"),
        price=price,
        price_amount=price_amount,
        currency=currency,
        age_range=item.get("typicalAgeRange"),
        image_url=_image_url(item.get("image")),
        website_url=page_url,
        registration_url=page_url,
        coaches=_people_names(item.get("performer")),
        confidence=0.92 if start_raw else 0.9,
        extraction_method="json-ld",
    )


def extract_from_json_ld(doc: PageNode, source_url: str, source_name: str) -> list[RawClinicData]:
    """Strategy 1: schema.org Event items embedded as JSON-LD."""
    results = []
    for item in extract_json_ld(doc):
        if not _is_event(item):
            continue
        try:
            candidate = _from_schema_event(item, source_url, source_name)
        except (AttributeError, TypeError, ValueError):
            # One malformed item must not abort the page
            continue
        if candidate:
            results.append(candidate)
    return results


def _itemprop(scope: PageNode, prop: str) -> Optional[PageNode]:
    """First itemprop node owned by this scope (not by a nested itemscope)."""
    for node in scope.select(f'[itemprop~="{prop}"]'):
        if node.closest_with_attr("itemscope") == scope:
            return node
    return None


def _itemprop_value(node: Optional[PageNode]) -> Optional[str]:
    if node is None:
        return None
    for attr in ("content", "datetime", "href", "src"):
        value = node.attr(attr)
        if value:
            return value.strip()
    return node.text() or None


def extract_from_microdata(doc: PageNode, source_url: str, source_name: str) -> list[RawClinicData]:
    """Strategy 2: itemscope/itemtype Event markup."""
    results = []
    for scope in doc.select("[itemscope][itemtype]"):
        if "Event" not in (scope.attr("itemtype") or ""):
            continue

        name = _itemprop_value(_itemprop(scope, "name"))
        description = _itemprop_value(_itemprop(scope, "description")) or ""
        if not name or not is_hockey_related(f"{name} {description} {scope.text()}"):
            continue

        venue = city = state = country = location_text = None
        location = _itemprop(scope, "location")
        if location is not None:
            if location.has_attr("itemscope"):
                venue = _itemprop_value(_itemprop(location, "name"))
                address = _itemprop(location, "address")
                if address is not None and address.has_attr("itemscope"):
                    city = _itemprop_value(_itemprop(address, "addressLocality"))
                    state = _itemprop_value(_itemprop(address, "addressRegion"))
                    country = _itemprop_value(_itemprop(address, "addressCountry"))
                location_text = address.text() if address is not None else None
            else:
                location_text = location.text()

        price = price_amount = currency = None
        offers = _itemprop(scope, "offers")
        if offers is not None:
            price_node = _itemprop(offers, "price") if offers.has_attr("itemscope") else offers
            price = _itemprop_value(price_node)
            price_amount = _to_float(price)
            if offers.has_attr("itemscope"):
                currency = _itemprop_value(_itemprop(offers, "priceCurrency"))

        url = _itemprop_value(_itemprop(scope, "url"))
        page_url = resolve_url(url, source_url) if url else source_url
        image = _itemprop_value(_itemprop(scope, "image"))
        start_raw = _itemprop_value(_itemprop(scope, "startDate"))
        end_raw = _itemprop_value(_itemprop(scope, "endDate"))

        results.append(RawClinicData(
            source=source_name,
            source_url=source_url,
            name=clean_text(name),
            description=clean_text(description)[:500] or None,
            venue=venue,
            location=location_text,
            city=city,
            state=state,
            country=country,
            start_date=parse_date(start_raw) or start_raw,
            end_date=parse_date(end_raw) or end_raw,
            price=price,
            price_amount=price_amount,
            currency=currency,
            image_url=resolve_url(image, source_url) if image else None,
            website_url=page_url,
            registration_url=page_url,
            confidence=0.85,
            extraction_method="microdata",
        ))
    return results


def _meta(doc: PageNode, selector: str) -> Optional[str]:
    node = doc.select_one(selector)
    if node is None:
        return None
    value = node.attr("content")
    return value.strip() if value else None


def extract_from_meta_tags(doc: PageNode, source_url: str, source_name: str) -> Optional[RawClinicData]:
    """Strategy 3: one page-level candidate from OpenGraph/meta fields."""
    title_node = doc.select_one("title")
    name = _meta(doc, 'meta[property="og:title"]') or (title_node.text() if title_node else "")
    description = (
        _meta(doc, 'meta[property="og:description"]')
        or _meta(doc, 'meta[name="description"]')
        or ""
    )
    if not is_hockey_related(f"{name} {description}"):
        return None

    og_type = (_meta(doc, 'meta[property="og:type"]') or "").lower()
    event_start = _meta(doc, 'meta[property="event:start_time"]')
    event_end = _meta(doc, 'meta[property="event:end_time"]')
    is_event_page = "event" in og_type or bool(event_start)

    body = doc.select_one("body")
    page_text = body.text() if body else doc.text()
    dates = extract_dates_from_text(page_text)
    prices = extract_prices_from_text(page_text)
    emails = extract_emails_from_text(page_text)
    phones = extract_phones_from_text(page_text)
    venues = extract_venue_from_text(page_text)
    ages = extract_age_range_from_text(page_text)
    levels = extract_skill_level_from_text(page_text)

    image = (
        _meta(doc, 'meta[property="og:image"]')
        or _meta(doc, 'meta[property="og:image:secure_url"]')
    )

    return RawClinicData(
        source=source_name,
        source_url=source_url,
        name=clean_text(name),
        description=clean_text(description)[:500] or None,
        venue=venues[0] if venues else None,
        date_text=dates[0] if dates else None,
        start_date=parse_date(event_start),
        end_date=parse_date(event_end),
        price=prices[0] if prices else None,
        age_range=ages[0] if ages else None,
        skill_level=levels[0] if levels else None,
        contact_email=emails[0] if emails else None,
        contact_phone=phones[0] if phones else None,
        amenities=extract_amenities_from_text(page_text),
        image_url=resolve_url(image, source_url) if image else None,
        website_url=source_url,
        registration_url=source_url,
        confidence=0.65 if is_event_page else 0.5,
        extraction_method="meta",
    )
