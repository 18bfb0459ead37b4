"""Shared test fixtures and configuration."""

from datetime import date

import pytest
from clinic_pipeline.models import Clinic, ClinicLocation, DateRange, Price, RawClinicData


TODAY = date(2026, 3, 1)


def make_clinic(
    name: str = "Summer Hockey Camp",
    start: str = "2026-07-14",
    end: str = "2026-07-18",
    city: str = "Boston",
    country: str = "United States",
    website_url: str = "https://camp.example.org/summer",
    **fields,
) -> Clinic:
    """Build a Clinic with sensible defaults; keyword fields override."""
    location = fields.pop("location", None) or ClinicLocation(
        venue="Warrior Ice Arena",
        city=city,
        state="MA",
        country=country,
        country_code="US",
    )
    return Clinic(
        id=fields.pop("id", "clinic-" + name.lower().replace(" ", "-") + "-" + start),
        name=name,
        location=location,
        dates=DateRange(start=start, end=end),
        website_url=website_url,
        **fields,
    )


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def clinic_factory():
    return make_clinic


@pytest.fixture
def sample_clinic() -> Clinic:
    """A fully populated clinic for testing."""
    return make_clinic(
        id="clinic-sample",
        description="Five days of skating and puck skills for youth players",
        price=Price(amount=350, currency="USD"),
        age_groups=["squirts", "peewee"],
        skill_levels=["intermediate"],
        tags=["summer"],
        rating=4.6,
        review_count=40,
    )


@pytest.fixture
def sample_raw() -> RawClinicData:
    return RawClinicData(
        source="Test Source",
        source_url="https://camp.example.org/summer",
        name="Youth Hockey Skills Camp",
        description="Summer hockey camp for ages 9-12 held in Boston",
        date_text="July 14-18, 2026",
        price="$350",
        confidence=0.7,
        extraction_method="card",
    )


@pytest.fixture
def json_ld_html() -> str:
    """A camp page whose only clinic data is one JSON-LD Event."""
    return """
    <html>
      <head>
        <title>Youth Hockey Skills Camp</title>
        <script type="application/ld+json">
        {
          "@context": "https://schema.org",
          "@type": "SportsEvent",
          "name": "Youth Hockey Skills Camp",
          "description": "A week of skating, passing and shooting for young hockey players.",
          "startDate": "2026-07-14",
          "endDate": "2026-07-18",
          "location": {
            "@type": "Place",
            "name": "Warrior Ice Arena",
            "address": {
              "@type": "PostalAddress",
              "addressLocality": "Boston",
              "addressRegion": "MA",
              "addressCountry": "US"
            }
          },
          "offers": {"@type": "Offer", "price": "350", "priceCurrency": "USD"}
        }
        </script>
      </head>
      <body>
        <div class="hero"><span>Summer programs</span></div>
      </body>
    </html>
    """
