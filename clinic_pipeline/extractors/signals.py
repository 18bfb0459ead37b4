"""Text signals: hockey relevance, dates, prices, contacts, venues, ages, levels.

Every function here is pure. Extractors take the first match as the best
guess unless a more trusted strategy already supplied the field.
"""

import re
from typing import Optional
from urllib.parse import urljoin

# One of these is enough to call a text hockey-related
STRONG_TERMS = [
    "hockey", "puck", "goaltend", "goalie", "netminder",
    "stickhandling", "stick handling", "slap shot", "slapshot",
    "power skating", "faceoff", "face-off", "blue line", "power play",
]

# Ice hockey in other languages
INTERNATIONAL_TERMS = [
    "eishockey", "ishockey", "jääkiekko", "jaakiekko", "hokej", "hokejs",
    "hockey sur glace", "hockey su ghiaccio", "jégkorong", "ledo ritulys",
    "хоккей", "хокей", "アイスホッケー", "아이스하키", "冰球",
]

# Weak on their own: an arena page is not necessarily a hockey page
SOFT_SIGNALS = [
    # Skating
    r"\bice\b", r"\barenas?\b", r"\brinks?\b", r"\bskat(?:e|es|ing|er|ers)\b",
    r"\bzamboni\b", r"\bon-ice\b",
    # Positions
    r"\bdefense(?:man|men)\b", r"\bwingers?\b", r"\bcenterman\b",
    r"\bleft wing\b", r"\bright wing\b",
    # Leagues
    r"\bnhl\b", r"\bahl\b", r"\bechl\b", r"\bushl\b", r"\bnahl\b", r"\bohl\b",
    r"\bwhl\b", r"\bqmjhl\b", r"\bchl\b", r"\bkhl\b", r"\bshl\b", r"\bbchl\b",
    # Divisions
    r"\bmites?\b", r"\bsquirts?\b", r"\bpee\s?wees?\b", r"\bbantams?\b",
    r"\bmidgets?\b", r"\batoms?\b", r"\bnovices?\b",
    r"\bu-?(?:8|9|10|11|12|13|14|15|16|17|18)\b", r"\b(?:8|10|12|14|16|18)u\b",
]
SOFT_PATTERNS = [re.compile(p, re.I) for p in SOFT_SIGNALS]

MONTHS = "January|February|March|April|May|June|July|August|September|October|November|December"

DATE_PATTERNS = [
    # July 14-18, 2026
    rf"(?:{MONTHS})\s+\d{{1,2}}\s*[-–]\s*\d{{1,2}},?\s*\d{{4}}",
    # July 14, 2026 - July 18, 2026
    rf"(?:{MONTHS})\s+\d{{1,2}},?\s*\d{{4}}\s*[-–]\s*(?:{MONTHS})\s+\d{{1,2}},?\s*\d{{4}}",
    # 7/14/2026
    r"\d{1,2}/\d{1,2}/\d{4}",
    # 2026-07-14
    r"\d{4}-\d{2}-\d{2}",
    # Jul 14, 2026
    r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\.?\s+\d{1,2},?\s*\d{4}",
]

CURRENCY_CODES = "USD|CAD|EUR|GBP|AUD|CHF|SEK|NOK|DKK|CZK|JPY"

PRICE_PATTERNS = [
    r"\$\s?\d[\d,]*(?:\.\d{2})?",
    r"€\s?\d[\d,]*(?:\.\d{2})?",
    r"£\s?\d[\d,]*(?:\.\d{2})?",
    rf"(?:{CURRENCY_CODES})\s*\$?\d[\d,]*(?:\.\d{{2}})?",
    rf"\d[\d,]*(?:\.\d{{2}})?\s*(?:{CURRENCY_CODES}|kr|Kč)",
]

EMAIL_PATTERN = r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"
PHONE_PATTERN = r"(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b"

VENUE_PATTERN = re.compile(
    r"\b((?:[A-Z][\w'.&-]*\s+){1,5}"
    r"(?:Arena|Ice Cent(?:er|re)|Ice Rink|Rink|Ice Complex|Iceplex|Ice Plex|"
    r"Sportsplex|Coliseum|Civic Cent(?:er|re)|Recreation Cent(?:er|re)|"
    r"Ice House|Ice Den|Ice Palace|Forum|Gardens))\b"
)

AGE_PATTERNS = [
    r"\bages?\s*\d{1,2}\s*(?:-|–|to)\s*\d{1,2}\b",
    r"\bages?\s*\d{1,2}\s*\+",
    r"\b[Uu]-?\d{1,2}\b",
    r"\b\d{1,2}U\b",
    r"\b(?:born|birth years?)\s+(?:in\s+)?(?:19|20)\d{2}(?:\s*[-–]\s*(?:19|20)\d{2})?",
    r"(?i)\b(?:mites?|squirts?|pee\s?wees?|bantams?|midgets?|atoms?|novices?|juniors?)\b",
]

SKILL_PATTERN = re.compile(
    r"\b(?:beginners?|intermediate|advanced|elite|AAA|AA|tier\s*[123]|house league|"
    r"recreational|competitive|high[- ]performance|all (?:skill )?levels|"
    r"learn to (?:play|skate)|first[- ]time(?:rs?)?)\b",
    re.I,
)

AMENITY_PATTERNS = [
    ("locker rooms", r"locker\s*rooms?"),
    ("pro shop", r"pro\s*shop"),
    ("skate sharpening", r"skate\s*sharpening"),
    ("lunch included", r"lunch\s*(?:is\s*)?(?:included|provided)"),
    ("jersey included", r"(?:jersey|t-shirt|tee)s?\s*(?:is\s*|are\s*)?(?:included|provided)"),
    ("video analysis", r"video\s*(?:analysis|review)"),
    ("off-ice training", r"off[- ]ice\s*(?:training|conditioning|sessions?)"),
    ("dryland training", r"dry\s*land"),
    ("parking", r"free\s*parking|parking\s*available"),
    ("wifi", r"\bwi-?fi\b"),
    ("concessions", r"concessions?|snack\s*bar|cafeteria"),
    ("housing", r"dormitor(?:y|ies)|on-campus\s*housing|overnight\s*accommodation"),
    ("fitness center", r"fitness\s*cent(?:er|re)|weight\s*room"),
    ("goalie coaching", r"goalie\s*coach(?:ing|es)?"),
]

# Search-hit relevance scoring
STRONG_PHRASES = [
    "hockey clinic", "hockey camp", "hockey school", "hockey academy",
    "skating clinic", "hockey training camp", "hockey program",
    "hockey development program", "learn to play hockey", "hockey skills camp",
    "hockey showcase", "hockey tournament", "goaltending camp",
    "power skating clinic", "hockey prospect camp", "hockey evaluation camp",
    "hockey instruction", "hockey session", "on-ice training",
    "ice hockey camp", "hockey summer camp", "hockey spring camp",
    "hockey winter camp", "hockey mini camp", "hockey day camp",
    "hockey overnight camp", "hockey residential camp",
]
YOUTH_PHRASES = [
    "youth", "kids", "children", "junior", "minor", "young player",
    "mite", "squirt", "peewee", "pee wee", "bantam", "midget",
    "atom", "novice", "u8", "u10", "u12", "u14", "u16", "u18",
    "ages 4", "ages 5", "ages 6", "ages 7", "ages 8", "ages 9",
    "ages 10", "ages 11", "ages 12", "ages 13", "ages 14",
    "ages 15", "ages 16", "ages 17", "ages 18",
    "boys and girls", "coed", "co-ed",
]
REGISTRATION_PHRASES = [
    "register now", "registration", "sign up", "enroll", "book now",
    "spots available", "limited spots", "early bird", "tuition",
    "cost per player", "per skater", "enrollment", "application",
]
VENUE_PHRASES = [
    "arena", "rink", "ice center", "ice complex", "ice plex",
    "sportsplex", "coliseum", "civic center", "recreation center",
]
NEGATIVE_PHRASES = [
    "nhl scores", "game recap", "trade rumor", "fantasy hockey",
    "watch live", "highlights", "standings", "playoff", "draft pick",
    "free agent", "contract extension", "injury report", "box score",
    "power rankings", "betting odds", "prop bet",
    "news article", "opinion column", "editorial", "blog post",
]


def _unique(matches: list[str]) -> list[str]:
    return list(dict.fromkeys(m.strip() for m in matches if m and m.strip()))


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace runs into single spaces."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def resolve_url(href: str, base_url: str) -> str:
    """Resolve a possibly relative link against the page URL."""
    try:
        return urljoin(base_url, href.strip())
    except ValueError:
        return href


def is_hockey_related(text: Optional[str]) -> bool:
    """True for one strong/international term, or two distinct soft signals."""
    if not text:
        return False
    lower = text.lower()

    if any(term in lower for term in STRONG_TERMS):
        return True
    if any(term in lower for term in INTERNATIONAL_TERMS):
        return True

    soft_hits = 0
    for pattern in SOFT_PATTERNS:
        if pattern.search(lower):
            soft_hits += 1
            if soft_hits >= 2:
                return True
    return False


def extract_dates_from_text(text: Optional[str]) -> list[str]:
    if not text:
        return []
    dates: list[str] = []
    for pattern in DATE_PATTERNS:
        dates.extend(re.findall(pattern, text, re.I))
    return _unique(dates)


def extract_prices_from_text(text: Optional[str]) -> list[str]:
    if not text:
        return []
    prices: list[str] = []
    for pattern in PRICE_PATTERNS:
        prices.extend(re.findall(pattern, text, re.I))
    return _unique(prices)


def extract_emails_from_text(text: Optional[str]) -> list[str]:
    if not text:
        return []
    return _unique(re.findall(EMAIL_PATTERN, text))


def extract_phones_from_text(text: Optional[str]) -> list[str]:
    if not text:
        return []
    return _unique(re.findall(PHONE_PATTERN, text))


def extract_venue_from_text(text: Optional[str]) -> list[str]:
    if not text:
        return []
    return _unique(VENUE_PATTERN.findall(text))


def extract_age_range_from_text(text: Optional[str]) -> list[str]:
    if not text:
        return []
    ages: list[str] = []
    for pattern in AGE_PATTERNS:
        ages.extend(re.findall(pattern, text))
    return _unique(ages)


def extract_skill_level_from_text(text: Optional[str]) -> list[str]:
    if not text:
        return []
    return _unique(SKILL_PATTERN.findall(text))


def extract_amenities_from_text(text: Optional[str]) -> list[str]:
    """Amenities come back as short labels, not raw matches."""
    if not text:
        return []
    return [label for label, pattern in AMENITY_PATTERNS if re.search(pattern, text, re.I)]


def relevance_contributions(
    title: Optional[str] = None,
    description: Optional[str] = None,
) -> dict[str, float]:
    """Named additive contributions to a search hit's confidence.

    The confidence is the clamped sum of these values, so two hits differ
    in score only by the entries they do not share.
    """
    if not title and not description:
        return {}
    text = f"{title or ''} {description or ''}".lower()
    contributions: dict[str, float] = {}

    strong_count = sum(1 for kw in STRONG_PHRASES if kw in text)
    if strong_count >= 1:
        contributions["strong"] = 0.25
    if strong_count >= 2:
        contributions["strong_second"] = 0.15
    if strong_count >= 3:
        contributions["strong_third"] = 0.1

    youth_count = sum(1 for kw in YOUTH_PHRASES if kw in text)
    if youth_count:
        contributions["youth"] = min(0.3, youth_count * 0.15)

    registration_count = sum(1 for kw in REGISTRATION_PHRASES if kw in text)
    if registration_count:
        contributions["registration"] = min(0.2, registration_count * 0.1)

    if any(kw in text for kw in VENUE_PHRASES):
        contributions["venue"] = 0.1

    if re.search(rf"(?:{MONTHS})\s+\d", text, re.I):
        contributions["month"] = 0.05
    if re.search(r"\b20[2-3]\d\b", text):
        contributions["year"] = 0.05

    for kw in NEGATIVE_PHRASES:
        if kw in text:
            contributions[f"negative:{kw}"] = -0.15

    return contributions


def calculate_confidence(title: Optional[str] = None, description: Optional[str] = None) -> float:
    """Confidence in [0, 1] that a search hit describes a youth hockey program."""
    total = sum(relevance_contributions(title, description).values())
    return max(0.0, min(1.0, round(total, 4)))
