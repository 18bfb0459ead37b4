"""Location normalizer: country inference, codes, centroids and metro names."""

import re
from typing import Optional

from clinic_pipeline.models import RawClinicData

# US state abbreviations to full names
US_STATES = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas",
    "CA": "California", "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware",
    "FL": "Florida", "GA": "Georgia", "HI": "Hawaii", "ID": "Idaho",
    "IL": "Illinois", "IN": "Indiana", "IA": "Iowa", "KS": "Kansas",
    "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine", "MD": "Maryland",
    "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota", "MS": "Mississippi",
    "MO": "Missouri", "MT": "Montana", "NE": "Nebraska", "NV": "Nevada",
    "NH": "New Hampshire", "NJ": "New Jersey", "NM": "New Mexico", "NY": "New York",
    "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio", "OK": "Oklahoma",
    "OR": "Oregon", "PA": "Pennsylvania", "RI": "Rhode Island", "SC": "South Carolina",
    "SD": "South Dakota", "TN": "Tennessee", "TX": "Texas", "UT": "Utah",
    "VT": "Vermont", "VA": "Virginia", "WA": "Washington", "WV": "West Virginia",
    "WI": "Wisconsin", "WY": "Wyoming", "DC": "District of Columbia",
}

# Canadian provinces/territories
CA_PROVINCES = {
    "AB": "Alberta", "BC": "British Columbia", "MB": "Manitoba", "NB": "New Brunswick",
    "NL": "Newfoundland and Labrador", "NS": "Nova Scotia", "NT": "Northwest Territories",
    "NU": "Nunavut", "ON": "Ontario", "PE": "Prince Edward Island", "QC": "Quebec",
    "SK": "Saskatchewan", "YT": "Yukon",
}

COUNTRY_CODES = {
    "United States": "US", "Canada": "CA", "Sweden": "SE", "Finland": "FI",
    "Czech Republic": "CZ", "Russia": "RU", "Switzerland": "CH", "Germany": "DE",
    "Norway": "NO", "Japan": "JP", "Australia": "AU", "France": "FR",
    "United Kingdom": "GB", "Denmark": "DK", "Austria": "AT", "Slovakia": "SK",
    "South Korea": "KR", "China": "CN", "Latvia": "LV", "Belarus": "BY",
    "Poland": "PL", "Italy": "IT", "Hungary": "HU", "Kazakhstan": "KZ",
    "New Zealand": "NZ", "India": "IN", "Thailand": "TH", "Singapore": "SG",
    "Israel": "IL", "South Africa": "ZA", "Mexico": "MX", "Brazil": "BR",
    "Argentina": "AR", "UAE": "AE",
}
CODE_TO_COUNTRY = {code: country for country, code in COUNTRY_CODES.items()}

COUNTRY_ALIASES = {
    "usa": "United States", "us": "United States", "u.s.": "United States",
    "u.s.a.": "United States", "united states of america": "United States",
    "uk": "United Kingdom", "great britain": "United Kingdom", "england": "United Kingdom",
    "czechia": "Czech Republic", "korea": "South Korea", "republic of korea": "South Korea",
    "united arab emirates": "UAE", "russian federation": "Russia",
}

# Checked in order; generic TLDs fall through to the United States last
COUNTRY_PATTERNS = [
    (r"canada|ontario|quebec|alberta|british columbia|manitoba|saskatchewan|\.ca\b", "Canada"),
    (r"sweden|swedish|stockholm|gothenburg|malmö|\.se\b|swehockey", "Sweden"),
    (r"finland|finnish|helsinki|tampere|\.fi\b|leijonat", "Finland"),
    (r"czech|prague|brno|\.cz\b|ceskyhokej", "Czech Republic"),
    (r"russia|russian|moscow|st\.?\s*petersburg|\.ru\b|fhr\.ru", "Russia"),
    (r"switzerland|swiss|zurich|zürich|davos|bern|\.ch\b|sihf", "Switzerland"),
    (r"germany|german|munich|münchen|berlin|düsseldorf|\.de\b|deb-online", "Germany"),
    (r"norway|norwegian|oslo|bergen|\.no\b|hockey\.no", "Norway"),
    (r"denmark|danish|copenhagen|\.dk\b|ishockey\.dk", "Denmark"),
    (r"austria|austrian|vienna|wien|innsbruck|\.at\b", "Austria"),
    (r"slovakia|slovak|bratislava|\.sk\b", "Slovakia"),
    (r"latvia|latvian|riga|\.lv\b", "Latvia"),
    (r"japan|japanese|tokyo|sapporo|nagano|\.jp\b|jihf", "Japan"),
    (r"south korea|korean|seoul|\.kr\b|kiha", "South Korea"),
    (r"china|chinese|beijing|shanghai|\.cn\b", "China"),
    (r"australia|australian|melbourne|sydney|brisbane|\.au\b|ihfa", "Australia"),
    (r"united kingdom|british|england|london|\.uk\b|eihl", "United Kingdom"),
    (r"france|french|paris|lyon|\.fr\b|hockeyfrance", "France"),
    (r"poland|polish|warsaw|\.pl\b|pzhl", "Poland"),
    (r"italy|italian|milan|rome|\.it\b|fisg", "Italy"),
    (r"hungary|hungarian|budapest|\.hu\b", "Hungary"),
    (r"belarus|belarusian|minsk|\.by\b", "Belarus"),
    (r"kazakhstan|almaty|\.kz\b", "Kazakhstan"),
    (r"usa|united states|america|\.com\b|\.org\b|\.net\b|usahockey", "United States"),
]

# Rough country centroids, used when a clinic cannot be geocoded
COUNTRY_CENTROIDS = {
    "United States": (39.83, -98.58),
    "Canada": (56.13, -106.35),
    "Sweden": (60.13, 18.64),
    "Finland": (61.92, 25.75),
    "Czech Republic": (49.82, 15.47),
    "Russia": (55.75, 37.62),
    "Switzerland": (46.82, 8.23),
    "Germany": (51.17, 10.45),
    "Norway": (60.47, 8.47),
    "Denmark": (56.26, 9.50),
    "Austria": (47.52, 14.55),
    "Slovakia": (48.67, 19.70),
    "Japan": (36.20, 138.25),
    "South Korea": (35.91, 127.77),
    "China": (35.86, 104.20),
    "Australia": (-25.27, 133.78),
    "United Kingdom": (55.38, -3.44),
    "France": (46.23, 2.21),
    "Poland": (51.92, 19.15),
    "Italy": (41.87, 12.57),
    "Latvia": (56.88, 24.60),
    "Belarus": (53.71, 27.95),
    "Hungary": (47.16, 19.50),
    "Kazakhstan": (48.02, 66.92),
}

FLORIDA_METROS = [
    (
        ["fort lauderdale", "miami", "coral springs", "pembroke pines", "sunrise",
         "boca raton", "hollywood", "pompano beach", "deerfield beach", "plantation",
         "weston", "davie", "coconut creek"],
        ["South Florida", "Broward County", "Miami-Fort Lauderdale"],
    ),
    (["tampa", "st petersburg", "clearwater", "brandon", "lakeland"], ["Tampa Bay", "Central Florida"]),
    (["orlando", "kissimmee"], ["Central Florida", "Orlando metro"]),
    (["jacksonville"], ["North Florida", "Jacksonville metro"]),
    (
        ["west palm beach", "palm beach", "jupiter", "boynton beach", "delray beach"],
        ["Palm Beach County", "South Florida"],
    ),
]

# (state keys, city keywords or None for any city, regional names)
STATE_REGIONS = [
    (["ma", "massachusetts"], None, ["New England", "Greater Boston"]),
    (["ct", "connecticut", "nh", "new hampshire", "vt", "vermont", "me", "maine",
      "ri", "rhode island"], None, ["New England"]),
    (["ny", "new york"], None, ["Tri-State area", "New York metro"]),
    (["nj", "new jersey"], None, ["Tri-State area", "New Jersey"]),
    (["mn", "minnesota"], None, ["Twin Cities", "Upper Midwest"]),
    (["mi", "michigan"], None, ["Great Lakes", "Michigan"]),
    (["co", "colorado"], None, ["Front Range", "Rocky Mountain"]),
    (["tx", "texas"], ["dallas", "fort worth", "frisco"], ["DFW", "North Texas"]),
    (["tx", "texas"], ["houston"], ["Houston metro", "Southeast Texas"]),
    (["ca", "california"], ["los angeles", "anaheim", "irvine"], ["Southern California", "LA metro"]),
    (["ca", "california"], ["san jose", "san francisco", "oakland"], ["Bay Area", "Northern California"]),
    (["il", "illinois"], None, ["Chicagoland", "Greater Chicago"]),
    (["pa", "pennsylvania"], ["pittsburgh"], ["Western Pennsylvania"]),
    (["pa", "pennsylvania"], None, ["Delaware Valley", "Greater Philadelphia"]),
    (["on", "ontario"], ["toronto"], ["Greater Toronto Area", "GTA"]),
    (["on", "ontario"], ["ottawa"], ["National Capital Region"]),
    (["on", "ontario"], None, ["Southern Ontario"]),
    (["qc", "quebec"], None, ["Greater Montreal", "Quebec"]),
    (["bc", "british columbia"], None, ["Lower Mainland", "BC"]),
    (["ab", "alberta"], ["calgary"], ["Alberta", "Calgary metro"]),
    (["ab", "alberta"], None, ["Alberta", "Edmonton metro"]),
]


def normalize_country(country: Optional[str]) -> Optional[str]:
    """Canonical country name for a name, alias or ISO-2 code."""
    if not country:
        return None
    value = country.strip()
    if not value:
        return None
    if value.upper() in CODE_TO_COUNTRY:
        return CODE_TO_COUNTRY[value.upper()]
    alias = COUNTRY_ALIASES.get(value.lower())
    if alias:
        return alias
    for name in COUNTRY_CODES:
        if name.lower() == value.lower():
            return name
    return value


def infer_country(raw: RawClinicData) -> str:
    """Guess the country from the listing text and its URL."""
    text = " ".join(
        p for p in (raw.name, raw.description, raw.location, raw.source_url) if p
    ).lower()
    for pattern, country in COUNTRY_PATTERNS:
        if re.search(pattern, text):
            return country
    return "United States"


def get_country_code(country: Optional[str]) -> str:
    return COUNTRY_CODES.get(normalize_country(country) or "", "US")


def region_code(country: Optional[str]) -> Optional[str]:
    """Source-table region code for a country, or None if unknown."""
    return COUNTRY_CODES.get(normalize_country(country) or "")


def country_for_state(state: Optional[str]) -> Optional[str]:
    """United States or Canada when the state/province is recognizable."""
    if not state:
        return None
    value = state.strip()
    if value.upper() in US_STATES or value.title() in US_STATES.values():
        return "United States"
    if value.upper() in CA_PROVINCES or value.title() in CA_PROVINCES.values():
        return "Canada"
    return None


def extract_city(raw: RawClinicData) -> Optional[str]:
    """City from an "in/at/near City" phrase in the location or description."""
    text = " ".join(p for p in (raw.location, raw.description) if p)
    match = re.search(r"(?:in|at|near)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)", text)
    return match.group(1) if match else None


def get_country_coords(country: Optional[str]) -> tuple[float, float]:
    """Country centroid, or (0, 0) when unknown."""
    return COUNTRY_CENTROIDS.get(normalize_country(country) or "", (0.0, 0.0))


def get_regional_names(city: str, state: str) -> list[str]:
    """Metro/regional names around a city, e.g. Fort Lauderdale, FL → South Florida."""
    city_lower = (city or "").lower()
    state_lower = (state or "").strip().lower()
    regions: list[str] = []

    if state_lower in ("fl", "florida"):
        for cities, names in FLORIDA_METROS:
            if any(c in city_lower for c in cities):
                regions.extend(names)
                break

    for states, cities, names in STATE_REGIONS:
        if state_lower not in states:
            continue
        if cities is None or any(c in city_lower for c in cities):
            regions.extend(names)
            break

    if not regions and state:
        regions.append(state)

    return list(dict.fromkeys(regions))
