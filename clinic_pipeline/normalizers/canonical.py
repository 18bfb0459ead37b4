"""Map raw candidates to canonical Clinic records."""

import hashlib
from datetime import date
from typing import Optional

from clinic_pipeline.models import (
    Clinic,
    ClinicLocation,
    Coach,
    DateRange,
    Price,
    RawClinicData,
)
from clinic_pipeline.models.clinic import CITY_UNKNOWN, VENUE_UNKNOWN
from clinic_pipeline.normalizers.classify import (
    calculate_duration,
    generate_tags,
    parse_age_groups,
    parse_clinic_type,
    parse_skill_levels,
)
from clinic_pipeline.normalizers.dates import parse_date_range
from clinic_pipeline.normalizers.location import (
    country_for_state,
    extract_city,
    get_country_code,
    infer_country,
    normalize_country,
)
from clinic_pipeline.normalizers.prices import parse_price

FEATURED_CONFIDENCE = 0.65
DEFAULT_CONFIDENCE_FLOOR = 0.25


def generate_clinic_id(raw: RawClinicData, start: str) -> str:
    """Stable id from url, name and start date."""
    key = f"{raw.source_url}|{raw.name or ''}|{start}"
    return "clinic-" + hashlib.sha256(key.encode()).hexdigest()[:12]


def resolve_country(raw: RawClinicData) -> str:
    return (
        normalize_country(raw.country)
        or country_for_state(raw.state)
        or infer_country(raw)
    )


def to_clinic(raw: RawClinicData, today: Optional[date] = None) -> Clinic:
    """Build a Clinic from one raw candidate. Never drops the record."""
    today = today or date.today()
    start, end = parse_date_range(raw.start_date, raw.end_date, raw.date_text, today)
    amount, currency = parse_price(raw.price, raw.price_amount, raw.currency)
    clinic_id = generate_clinic_id(raw, start)

    country = resolve_country(raw)
    venue = raw.venue or raw.location or VENUE_UNKNOWN
    address = raw.location if raw.venue and raw.location else ""

    description = raw.description or ""
    website_url = raw.website_url or raw.source_url
    registration_url = raw.registration_url or website_url

    return Clinic(
        id=clinic_id,
        name=(raw.name or "Hockey Clinic").strip(),
        type=parse_clinic_type(raw),
        description=description[:200],
        long_description=description,
        image_url=raw.image_url or "",
        gallery_urls=[raw.image_url] if raw.image_url else [],
        location=ClinicLocation(
            venue=venue,
            address=address,
            city=raw.city or extract_city(raw) or CITY_UNKNOWN,
            state=raw.state or "",
            country=country,
            country_code=get_country_code(country),
        ),
        dates=DateRange(start=start, end=end),
        duration=calculate_duration(start, end),
        price=Price(amount=amount, currency=currency),
        age_groups=parse_age_groups(raw),
        skill_levels=parse_skill_levels(raw),
        coaches=[
            Coach(id=f"coach-{clinic_id}-{i}", name=name)
            for i, name in enumerate(raw.coaches)
        ],
        registration_url=registration_url,
        website_url=website_url,
        contact_email=raw.contact_email or "",
        contact_phone=raw.contact_phone or "",
        amenities=raw.amenities,
        tags=generate_tags(raw),
        featured=raw.confidence >= FEATURED_CONFIDENCE,
        is_new=True,
        created_at=today.isoformat(),
        source=raw.source,
    )


def canonicalize(
    raw_list: list[RawClinicData],
    floor: float = DEFAULT_CONFIDENCE_FLOOR,
    today: Optional[date] = None,
) -> list[Clinic]:
    """Drop candidates under the confidence floor and canonicalize the rest."""
    return [to_clinic(raw, today) for raw in raw_list if raw.confidence >= floor]
