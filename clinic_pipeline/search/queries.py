"""Search-API query generation.

Two modes:
1. A user query is expanded into phrasing variants (year, youth, camp/clinic,
   registration, location).
2. With no query, queries are selected in location tiers (city, region,
   state, country) and topped up with a randomized sample of the global
   corpus, one quota per category.

Corpus entries may contain "{year}", filled with the target season year.
"""

import random
import re
from datetime import date
from typing import Optional

from clinic_pipeline.normalizers.location import get_regional_names

MAX_EXPANSIONS = 18
QUERY_BUDGET = 27

SEARCH_QUERIES: dict[str, list[str]] = {
    "core": [
        "youth hockey clinic {year}",
        "youth hockey camp {year}",
        "youth hockey camp summer {year}",
        "youth hockey camp spring {year}",
        "youth hockey camp winter {year}",
        "kids hockey camp near me",
        "youth hockey development program",
        "hockey skills camp children",
        "learn to play hockey kids program",
        "hockey school registration open",
        "youth hockey showcase {year}",
        "hockey training camp youth registration",
        "ice hockey camp registration",
        "youth hockey tournament {year}",
        "hockey mini camp kids",
        "hockey day camp youth",
        "residential hockey camp",
        "overnight hockey camp youth",
        "hockey prospect camp",
    ],
    "specialty": [
        "youth goaltender camp {year}",
        "goalie hockey camp kids",
        "goaltending school youth",
        "hockey power skating clinic",
        "power skating camp youth",
        "edge work hockey clinic",
        "hockey skating development program",
        "defensive hockey clinic youth",
        "defenseman hockey camp",
        "forward skills hockey camp",
        "hockey shooting clinic youth",
        "stickhandling clinic kids",
        "puck handling camp youth hockey",
        "hockey checking clinic bantam",
        "hockey conditioning camp",
        "hockey speed training camp",
    ],
    "girls": [
        "girls hockey camp {year}",
        "girls ice hockey clinic",
        "women hockey development camp",
        "all-girls hockey camp",
        "female hockey camp youth",
    ],
    "age": [
        "mite hockey camp",
        "squirt hockey camp",
        "peewee hockey camp",
        "bantam hockey camp",
        "midget hockey camp",
        "U8 hockey camp",
        "U10 hockey camp",
        "U12 hockey camp",
        "U14 hockey camp",
        "U16 hockey camp",
        "U18 hockey camp",
        "learn to skate hockey program kids 4 5 6",
        "atom hockey clinic",
        "novice hockey camp",
    ],
    "level": [
        "beginner hockey camp",
        "intro to hockey program",
        "learn to play hockey no experience",
        "AAA hockey camp",
        "AA hockey camp",
        "travel hockey clinic",
        "elite hockey prospect camp",
        "select hockey camp",
        "competitive hockey training camp",
        "tier 1 hockey camp",
        "high performance hockey camp",
        "prep school hockey camp",
    ],
    "regional_us": [
        "USA Hockey player development camp",
        "USA Hockey ADM camp",
        "USA Hockey national camp",
        "hockey camp Massachusetts",
        "hockey camp Minnesota",
        "hockey camp Michigan",
        "hockey camp Connecticut",
        "hockey camp New York",
        "hockey camp New Jersey",
        "hockey camp Pennsylvania",
        "hockey camp Ohio",
        "hockey camp Illinois",
        "hockey camp Colorado",
        "hockey camp California",
        "hockey camp Texas",
        "hockey camp Wisconsin",
        "hockey camp New Hampshire",
        "hockey camp Vermont",
        "hockey camp Maine",
        "hockey camp North Dakota",
        "hockey camp Alaska",
        "hockey camp Florida",
        "hockey camp Washington state",
        "hockey camp Arizona",
        "hockey camp Missouri",
        "hockey camp Virginia",
    ],
    "regional_canada": [
        "Hockey Canada skills academy",
        "hockey camp Ontario",
        "hockey camp Quebec",
        "hockey camp Alberta",
        "hockey camp British Columbia",
        "hockey camp Manitoba",
        "hockey camp Saskatchewan",
        "hockey camp Nova Scotia",
        "hockey camp Toronto",
        "hockey camp Montreal",
        "hockey camp Vancouver",
        "hockey camp Calgary",
        "hockey camp Edmonton",
        "hockey camp Ottawa",
        "hockey camp Winnipeg",
        "camp de hockey pour jeunes Quebec",
    ],
    "regional_europe": [
        "ice hockey camp Sweden",
        "hockey camp Stockholm",
        "ishockeyskola Sverige",
        "ishockey camp ungdom Sverige",
        "SHL hockey school",
        "ice hockey camp Finland",
        "jääkiekkokoulu",
        "jääkiekkoleiri nuoret",
        "Liiga hockey school Finland",
        "ice hockey camp Czech Republic",
        "hokejový kemp mládež",
        "hockey camp Prague",
        "ice hockey camp Switzerland",
        "Eishockey Camp Jugend Schweiz",
        "hockey camp Davos",
        "ice hockey camp Germany",
        "Eishockey Camp Kinder",
        "Eishockey Schule Jugend",
        "DEL hockey school",
        "ice hockey camp Norway",
        "ishockey camp barn Norge",
        "ice hockey camp Denmark",
        "ishockey camp Danmark",
        "ice hockey camp Austria",
        "Eishockey Camp Österreich",
        "ice hockey camp Slovakia",
        "hokejový kemp Slovensko",
        "ice hockey camp Latvia",
        "ice hockey camp Russia",
        "хоккейный лагерь для детей",
        "хоккейная школа юных",
        "KHL hockey school",
        "ice hockey camp France",
        "hockey sur glace stage jeunes France",
        "ice hockey camp United Kingdom",
        "EIHL hockey camp UK",
        "ice hockey camp Poland",
        "hokej na lodzie obóz młodzieżowy",
        "ice hockey camp Italy",
        "hockey su ghiaccio camp giovani",
        "ice hockey camp Hungary",
    ],
    "regional_other": [
        "ice hockey camp Japan",
        "アイスホッケー キャンプ ジュニア",
        "ice hockey camp South Korea",
        "아이스하키 캠프",
        "ice hockey camp China",
        "冰球训练营 青少年",
        "ice hockey camp Australia",
        "AIHL hockey camp",
        "ice hockey camp New Zealand",
        "ice hockey camp UAE Dubai",
        "ice hockey camp Mexico",
    ],
    "coaches": [
        "Wayne Gretzky hockey camp",
        "Sidney Crosby hockey school",
        "Connor McDavid hockey camp",
        "Auston Matthews hockey clinic",
        "Nathan MacKinnon hockey camp",
        "Nicklas Lidstrom hockey camp",
        "Peter Forsberg hockey camp",
        "Henrik Lundqvist goalie camp",
        "Carey Price goalie camp",
        "Martin Brodeur goalie camp",
        "Laura Stamm power skating",
        "Robby Glantz skating",
        "Barb Underhill power skating",
        "Mitch Korn goalie school",
        "Darryl Belfry hockey skills",
        "Pavel Barber hockey skills",
        "How To Hockey camp",
    ],
    "organizations": [
        "Pro Ambitions hockey camp",
        "Bauer hockey camp",
        "CCM hockey camp",
        "Total Package Hockey camp",
        "Planet Hockey camp",
        "Hockey Opportunity Camp",
        "Northeast Elite Hockey camp",
        "American Hockey Camps",
        "International Hockey Camp",
        "World Pro Hockey Camp",
        "Pursuit of Excellence hockey",
        "Okanagan Hockey Academy",
        "Shattuck St Marys hockey",
        "IMG Academy hockey",
        "Ontario Hockey Academy",
    ],
    "nhl": [
        "Boston Bruins youth hockey camp",
        "Toronto Maple Leafs hockey camp",
        "Montreal Canadiens hockey camp",
        "New York Rangers youth camp",
        "Detroit Red Wings hockey camp",
        "Chicago Blackhawks youth camp",
        "Pittsburgh Penguins hockey camp",
        "Minnesota Wild hockey camp",
        "Colorado Avalanche youth camp",
        "Tampa Bay Lightning hockey camp",
        "Dallas Stars hockey camp",
        "Edmonton Oilers hockey camp",
        "Vancouver Canucks hockey camp",
        "Philadelphia Flyers hockey camp",
        "Washington Capitals hockey camp",
        "Florida Panthers hockey camp",
        "Los Angeles Kings hockey camp",
        "Seattle Kraken hockey camp",
        "Vegas Golden Knights hockey camp",
        "Buffalo Sabres hockey camp",
    ],
    "college": [
        "NCAA hockey camp",
        "college hockey camp prospect",
        "USHL hockey camp",
        "NAHL hockey camp",
        "OHL hockey camp",
        "WHL hockey camp",
        "QMJHL hockey camp",
        "USNTDP hockey camp",
        "Boston University hockey camp",
        "Boston College hockey camp",
        "Minnesota hockey camp Gophers",
        "Wisconsin hockey camp Badgers",
    ],
    "facilities": [
        "hockey camp at local rink",
        "arena youth hockey programs",
        "ice rink summer hockey camp",
        "community rink hockey clinic",
        "hockey training center camps",
    ],
}

# Global tier quotas, in pick order
CATEGORY_QUOTAS = [
    ("core", 3),
    ("specialty", 2),
    ("girls", 1),
    ("regional_us", 2),
    ("regional_canada", 1),
    ("regional_europe", 2),
    ("coaches", 2),
    ("organizations", 2),
    ("nhl", 2),
    ("college", 1),
]

BASE_TERMS = [
    "youth hockey camp",
    "hockey clinic",
    "hockey skills camp",
    "youth hockey development",
    "learn to play hockey",
    "hockey camp",
    "ice hockey camp",
]

COUNTRY_QUERIES = {
    "United States": ["USA Hockey player development camp", "youth hockey camp summer {year}"],
    "Canada": ["Hockey Canada skills academy", "hockey camp Ontario Quebec Alberta {year}"],
    "Sweden": ["ishockeyskola Sverige {year}", "SHL hockey school"],
    "Finland": ["jääkiekkokoulu {year}", "Liiga hockey school Finland"],
}


def target_year(today: Optional[date] = None) -> int:
    """Season year to search for: next year once September starts."""
    today = today or date.today()
    return today.year + 1 if today.month >= 9 else today.year


def expand_user_query(
    query: str,
    user_city: Optional[str] = None,
    user_state: Optional[str] = None,
    today: Optional[date] = None,
) -> list[str]:
    """Expand a user query into up to 18 phrasing variants, original first."""
    q = query.lower()
    year = target_year(today)
    expansions = [query]

    if not re.search(r"\b20\d{2}\b", q):
        expansions.append(f"{query} {year}")

    if not any(word in q for word in ("youth", "kids", "junior")):
        expansions.append(f"youth {query}")
        expansions.append(f"kids {query}")

    if "camp" not in q and "clinic" not in q:
        expansions.append(f"{query} camp")
        expansions.append(f"{query} clinic")

    expansions.append(f"{query} registration")

    if "hockey" in q:
        expansions.append(f"{query} near me")
        expansions.append(f"{query} summer")

    if user_city and user_city.lower() not in q:
        expansions.append(f"{query} {user_city}")
    if user_state and user_state.lower() not in q:
        expansions.append(f"{query} {user_state}")

    return list(dict.fromkeys(expansions))[:MAX_EXPANSIONS]


def _location_queries(
    city: Optional[str],
    state: Optional[str],
    country: Optional[str],
    year: int,
) -> list[str]:
    selected: list[str] = []

    if city or state:
        # Tier 1: city
        if city:
            selected.extend(f"{term} {city} {year}" for term in BASE_TERMS[:6])
            selected.append(f"hockey camp near {city}")
            selected.append(f"youth hockey {city} registration")

        # Tier 2: metro / region
        for region in get_regional_names(city or "", state or "")[:2]:
            selected.append(f"youth hockey camp {region} {year}")
            selected.append(f"hockey clinic {region}")

        # Tier 3: state / province
        if state:
            selected.append(f"hockey camp {state} {year}")
            selected.append(f"youth hockey development {state}")
            selected.append(f"ice hockey clinic {state} summer {year}")

    # Tier 4: country
    if country:
        templates = COUNTRY_QUERIES.get(country, [f"ice hockey camp {country} {{year}}"])
        selected.extend(t.format(year=year) for t in templates[:2])

    return selected


def select_search_queries(
    user_city: Optional[str] = None,
    user_state: Optional[str] = None,
    user_country: Optional[str] = None,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> list[str]:
    """Location-tiered query selection topped up from the global corpus."""
    rng = rng or random.Random()
    year = target_year(today)
    selected = _location_queries(user_city, user_state, user_country, year)

    # Tier 5: global sample
    pool: list[str] = []
    for category, count in CATEGORY_QUOTAS:
        queries = SEARCH_QUERIES[category]
        pool.extend(rng.sample(queries, min(count, len(queries))))

    seen = {q.lower() for q in selected}
    for template in pool:
        if len(selected) >= QUERY_BUDGET:
            break
        q = template.format(year=year)
        if q.lower() not in seen:
            selected.append(q)
            seen.add(q.lower())

    return selected


def all_corpus_queries(today: Optional[date] = None) -> list[str]:
    """Every corpus query with the year filled in."""
    year = target_year(today)
    return [q.format(year=year) for queries in SEARCH_QUERIES.values() for q in queries]
