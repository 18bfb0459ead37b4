"""Tests for date, price, classification, location and canonical normalizers."""

from datetime import date

import pytest
from clinic_pipeline.models import DateRange, RawClinicData
from clinic_pipeline.normalizers.canonical import canonicalize, generate_clinic_id, to_clinic
from clinic_pipeline.normalizers.classify import (
    calculate_duration,
    generate_tags,
    parse_age_groups,
    parse_clinic_type,
    parse_skill_levels,
)
from clinic_pipeline.normalizers.dates import add_months, parse_date, parse_date_range, parse_date_text
from clinic_pipeline.normalizers.location import (
    country_for_state,
    extract_city,
    get_country_code,
    get_country_coords,
    get_regional_names,
    infer_country,
    normalize_country,
)
from clinic_pipeline.normalizers.prices import parse_price


def raw(**fields) -> RawClinicData:
    return RawClinicData(source="Test Source", **fields)


class TestDates:
    """Date parsing and range resolution."""

    @pytest.mark.parametrize("text,expected", [
        ("2026-07-14", "2026-07-14"),
        ("2026-07-14T09:00:00Z", "2026-07-14"),
        ("July 14, 2026", "2026-07-14"),
        ("Jul. 14th, 2026", "2026-07-14"),
        ("14 July 2026", "2026-07-14"),
        ("07/14/2026", "2026-07-14"),
        ("14/07/2026", "2026-07-14"),
        ("Sept 5, 2026", "2026-09-05"),
    ])
    def test_formats(self, text: str, expected: str):
        assert parse_date(text) == expected

    @pytest.mark.parametrize("text", ["not a date", "", None, "2026-13-45"])
    def test_unparseable(self, text):
        assert parse_date(text) is None

    @pytest.mark.parametrize("text,expected", [
        ("July 14-18, 2026", ("2026-07-14", "2026-07-18")),
        ("July 28 - August 2, 2026", ("2026-07-28", "2026-08-02")),
        ("Camp runs 7/14/2026 - 7/18/2026", ("2026-07-14", "2026-07-18")),
        ("2026-07-14 to 2026-07-18", ("2026-07-14", "2026-07-18")),
        ("Starts August 3, 2026", ("2026-08-03", "2026-08-03")),
    ])
    def test_ranges_in_text(self, text: str, expected: tuple[str, str]):
        assert parse_date_text(text) == expected

    def test_typed_dates_win(self, today):
        assert parse_date_range("2026-07-14", "2026-07-18", "May 1, 2026", today) == ("2026-07-14", "2026-07-18")
        assert parse_date_range("2026-07-14", None, None, today) == ("2026-07-14", "2026-07-14")

    def test_placeholder_three_months_out(self, today):
        assert parse_date_range(None, None, "Dates TBD", today) == ("2026-06-01", "2026-06-01")

    def test_range_across_new_year(self, today):
        assert parse_date_text("Dec 28 - Jan 2, 2027") == ("2026-12-28", "2027-01-02")
        assert parse_date_range(None, None, "Winter camp Dec 28 - Jan 2, 2027", today) == ("2026-12-28", "2027-01-02")

    def test_inverted_typed_range_uses_placeholder(self, today):
        assert parse_date_range("2026-07-18", "2026-07-14", None, today) == ("2026-06-01", "2026-06-01")

    def test_add_months_clamps(self):
        assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
        assert add_months(date(2026, 11, 15), 3) == date(2027, 2, 15)

    def test_inverted_range_collapses(self):
        dates = DateRange(start="2026-07-18", end="2026-07-14")
        assert dates.start == dates.end
        assert dates.start != "2026-07-18"


class TestPrices:

    @pytest.mark.parametrize("text,expected", [
        ("$350", (350.0, "USD")),
        ("€1,200", (1200.0, "EUR")),
        ("£99.50", (99.5, "GBP")),
        ("CAD 450", (450.0, "CAD")),
        ("1500 kr", (1500.0, "SEK")),
        ("Free", (0.0, "USD")),
        (None, (0.0, "USD")),
    ])
    def test_price_text(self, text, expected):
        assert parse_price(text) == expected

    def test_typed_amount_wins(self):
        assert parse_price("$999", 275.0, "cad") == (275.0, "CAD")


class TestClassification:

    def test_age_groups(self):
        assert parse_age_groups(raw(name="Peewee and Bantam Camp")) == ["peewee", "bantam"]
        assert parse_age_groups(raw(name="Skills Camp", age_range="ages 9-12")) == ["squirts"]
        assert parse_age_groups(raw(name="Skills Camp")) == ["all"]

    def test_skill_levels(self):
        assert parse_skill_levels(raw(name="Elite AAA prospect camp")) == ["elite"]
        assert parse_skill_levels(raw(name="Learn to play hockey for beginners")) == ["beginner"]
        assert parse_skill_levels(raw(name="Skills Camp")) == ["all"]

    @pytest.mark.parametrize("name,expected", [
        ("Prospect Showcase", "showcase"),
        ("Spring Jamboree Tournament", "tournament"),
        ("Summer Hockey Camp", "camp"),
        ("Learn to Play", "development"),
        ("Power skating session", "clinic"),
    ])
    def test_clinic_type(self, name: str, expected: str):
        assert parse_clinic_type(raw(name=name)) == expected

    def test_tags_include_city_slug(self):
        tags = generate_tags(raw(name="Summer Goalie Camp", city="Fort Lauderdale"))
        assert tags == ["summer", "goaltending", "fort-lauderdale"]

    @pytest.mark.parametrize("start,end,expected", [
        ("2026-07-14", "2026-07-14", "1 day"),
        ("2026-07-14", "2026-07-18", "5 days"),
        ("2026-07-01", "2026-07-08", "1 week"),
        ("2026-07-01", "2026-07-14", "2 weeks"),
        ("bad", "2026-07-14", "1 day"),
    ])
    def test_duration(self, start: str, end: str, expected: str):
        assert calculate_duration(start, end) == expected


class TestLocation:
    """Country, city and region helpers."""

    @pytest.mark.parametrize("value,expected", [
        ("US", "United States"),
        ("usa", "United States"),
        ("Czechia", "Czech Republic"),
        ("sweden", "Sweden"),
        ("CA", "Canada"),
        ("Narnia", "Narnia"),
        (None, None),
        ("  ", None),
    ])
    def test_normalize_country(self, value, expected):
        assert normalize_country(value) == expected

    @pytest.mark.parametrize("state,expected", [
        ("MN", "United States"),
        ("Minnesota", "United States"),
        ("ON", "Canada"),
        ("Ontario", "Canada"),
        ("Bavaria", None),
        (None, None),
    ])
    def test_country_for_state(self, state, expected):
        assert country_for_state(state) == expected

    def test_infer_country(self):
        assert infer_country(raw(name="Summer Camp", source_url="https://www.hockeyskola.se/camp")) == "Sweden"
        assert infer_country(raw(name="Camp in Ontario")) == "Canada"
        assert infer_country(raw(name="Skills Camp")) == "United States"

    def test_country_code_and_coords(self):
        assert get_country_code("Finland") == "FI"
        assert get_country_code("Atlantis") == "US"
        assert get_country_coords("Canada") == (56.13, -106.35)
        assert get_country_coords("Atlantis") == (0.0, 0.0)

    def test_extract_city(self):
        assert extract_city(raw(location="Summer sessions held in Burnaby")) == "Burnaby"
        assert extract_city(raw(description="no place here")) is None

    @pytest.mark.parametrize("city,state,expected", [
        ("Fort Lauderdale", "FL", ["South Florida", "Broward County", "Miami-Fort Lauderdale"]),
        ("Boston", "MA", ["New England", "Greater Boston"]),
        ("Dallas", "TX", ["DFW", "North Texas"]),
        ("Austin", "TX", ["TX"]),
        ("Toronto", "ON", ["Greater Toronto Area", "GTA"]),
        ("", "", []),
    ])
    def test_regional_names(self, city: str, state: str, expected: list[str]):
        assert get_regional_names(city, state) == expected


class TestCanonical:
    """Raw candidate → canonical clinic."""

    def test_full_mapping(self, sample_raw, today):
        clinic = to_clinic(sample_raw, today)

        assert clinic.name == "Youth Hockey Skills Camp"
        assert clinic.type == "camp"
        assert clinic.dates.start == "2026-07-14"
        assert clinic.dates.end == "2026-07-18"
        assert clinic.price.amount == 350.0
        assert clinic.price.currency == "USD"
        assert clinic.age_groups == ["squirts"]
        assert clinic.location.city == "Boston"
        assert clinic.location.country == "United States"
        assert clinic.website_url == "https://camp.example.org/summer"
        assert clinic.registration_url == clinic.website_url
        assert clinic.featured
        assert clinic.is_new
        assert clinic.created_at == "2026-03-01"
        assert clinic.source == "Test Source"

    def test_defaults_for_empty_candidate(self, today):
        clinic = to_clinic(raw(confidence=0.5), today)

        assert clinic.name == "Hockey Clinic"
        assert clinic.location.venue == "Venue TBD"
        assert clinic.location.city == "Unknown"
        assert clinic.location.country == "United States"
        assert clinic.dates.start == "2026-06-01"
        assert clinic.price.amount == 0.0
        assert clinic.age_groups == ["all"]
        assert clinic.skill_levels == ["all"]
        assert not clinic.featured

    def test_inverted_dates_follow_today(self, today):
        clinic = to_clinic(raw(name="Camp", start_date="2026-07-18", end_date="2026-07-14"), today)
        assert clinic.dates.start == "2026-06-01"
        assert clinic.dates.end == "2026-06-01"

    def test_id_is_stable(self, sample_raw, today):
        first = to_clinic(sample_raw, today)
        second = to_clinic(sample_raw.model_copy(), today)
        assert first.id == second.id
        assert first.id.startswith("clinic-")
        assert len(first.id) == len("clinic-") + 12
        assert generate_clinic_id(sample_raw, "2026-07-15") != first.id

    def test_description_truncated(self, today):
        text = "hockey " * 60
        clinic = to_clinic(raw(name="Camp", description=text), today)
        assert len(clinic.description) == 200
        assert clinic.long_description == text

    def test_venue_and_address(self, today):
        clinic = to_clinic(raw(name="Camp", venue="Ice Den", location="9375 E Bell Rd, Scottsdale"), today)
        assert clinic.location.venue == "Ice Den"
        assert clinic.location.address == "9375 E Bell Rd, Scottsdale"

        clinic = to_clinic(raw(name="Camp", location="Scottsdale Ice Den"), today)
        assert clinic.location.venue == "Scottsdale Ice Den"
        assert clinic.location.address == ""

    def test_country_from_state(self, today):
        clinic = to_clinic(raw(name="Camp", state="Ontario"), today)
        assert clinic.location.country == "Canada"
        assert clinic.location.country_code == "CA"

    def test_coaches_get_ids(self, today):
        clinic = to_clinic(raw(name="Camp", coaches=["Jane Doe", "Sam Lee"]), today)
        assert [c.name for c in clinic.coaches] == ["Jane Doe", "Sam Lee"]
        assert clinic.coaches[1].id == f"coach-{clinic.id}-1"

    def test_confidence_floor(self, today):
        candidates = [
            raw(name="Generic page", confidence=0.2),
            raw(name="Borderline page", confidence=0.25),
            raw(name="Card listing", confidence=0.72),
        ]
        clinics = canonicalize(candidates, today=today)
        assert [c.name for c in clinics] == ["Borderline page", "Card listing"]
