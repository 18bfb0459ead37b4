"""Date parsing for free-text clinic listings."""

import calendar
import re
from datetime import date, datetime
from typing import Optional

# Tried in order; US month/day wins over day/month for slash dates
DATE_FORMATS = [
    "%Y-%m-%d",       # 2026-07-14
    "%B %d, %Y",      # July 14, 2026
    "%b %d, %Y",      # Jul 14, 2026
    "%B %d %Y",       # July 14 2026
    "%b %d %Y",       # Jul 14 2026
    "%d %B %Y",       # 14 July 2026
    "%d %b %Y",       # 14 Jul 2026
    "%m/%d/%Y",       # 07/14/2026
    "%d/%m/%Y",       # 14/07/2026
    "%Y/%m/%d",       # 2026/07/14
    "%d.%m.%Y",       # 14.07.2026
]

MONTH_WORD = r"[A-Za-z]{3,9}\.?"

# (pattern, builder) pairs; builder turns the match into (start_text, end_text)
RANGE_PATTERNS = [
    # July 28 - August 2, 2026
    (
        re.compile(rf"({MONTH_WORD})\s+(\d{{1,2}})\s*(?:[-–]|to)\s*({MONTH_WORD})\s+(\d{{1,2}}),?\s*(\d{{4}})"),
        lambda m: (f"{m[1]} {m[2]}, {m[5]}", f"{m[3]} {m[4]}, {m[5]}"),
    ),
    # July 14-18, 2026
    (
        re.compile(rf"({MONTH_WORD})\s+(\d{{1,2}})\s*(?:[-–]|to)\s*(\d{{1,2}}),?\s*(\d{{4}})"),
        lambda m: (f"{m[1]} {m[2]}, {m[4]}", f"{m[1]} {m[3]}, {m[4]}"),
    ),
    # July 14, 2026 - July 18, 2026
    (
        re.compile(rf"({MONTH_WORD}\s+\d{{1,2}},?\s*\d{{4}})\s*(?:[-–]|to)\s*({MONTH_WORD}\s+\d{{1,2}},?\s*\d{{4}})"),
        lambda m: (m[1], m[2]),
    ),
    # 7/14/2026 - 7/18/2026
    (
        re.compile(r"(\d{1,2}/\d{1,2}/\d{4})\s*(?:[-–]|to)\s*(\d{1,2}/\d{1,2}/\d{4})"),
        lambda m: (m[1], m[2]),
    ),
    # 2026-07-14 to 2026-07-18
    (
        re.compile(r"(\d{4}-\d{2}-\d{2})(?:T[\d:.]+Z?)?\s*(?:–|to|-)\s*(\d{4}-\d{2}-\d{2})"),
        lambda m: (m[1], m[2]),
    ),
]

SINGLE_PATTERNS = [
    re.compile(r"(\d{4}-\d{2}-\d{2})"),
    re.compile(rf"({MONTH_WORD}\s+\d{{1,2}},?\s*\d{{4}})"),
    re.compile(rf"(\d{{1,2}}\s+{MONTH_WORD}\s+\d{{4}})"),
    re.compile(r"(\d{1,2}/\d{1,2}/\d{4})"),
]


def add_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping to the last day of the month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def placeholder_date(today: Optional[date] = None) -> str:
    """Neutral start date for listings whose dates could not be read."""
    return add_months(today or date.today(), 3).isoformat()


def parse_date(date_str: Optional[str]) -> Optional[str]:
    """Parse various date formats to ISO YYYY-MM-DD."""
    if not date_str:
        return None

    date_str = date_str.strip()

    # ISO, possibly with a time component
    iso = re.match(r"^(\d{4}-\d{2}-\d{2})", date_str)
    if iso:
        try:
            return datetime.strptime(iso.group(1), "%Y-%m-%d").strftime("%Y-%m-%d")
        except ValueError:
            return None

    cleaned = re.sub(r"(?<=[A-Za-z])\.", "", date_str)
    cleaned = re.sub(r"\bSept\b", "Sep", cleaned, flags=re.I)
    cleaned = re.sub(r"(\d)(st|nd|rd|th)\b", r"\1", cleaned)
    cleaned = re.sub(r"\s*,\s*", ", ", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()

    for fmt in DATE_FORMATS:
        try:
            dt = datetime.strptime(cleaned, fmt)
            return dt.strftime("%Y-%m-%d")
        except ValueError:
            continue

    return None


def _year_before_if_wrapped(start: str, end: str) -> str:
    """Dec 28 - Jan 2, 2027 starts in 2026: the year is only written once."""
    start_day = date.fromisoformat(start)
    end_day = date.fromisoformat(end)
    if start_day.year == end_day.year and start_day.month > end_day.month:
        try:
            return start_day.replace(year=start_day.year - 1).isoformat()
        except ValueError:
            return start
    return start


def parse_date_text(text: Optional[str]) -> Optional[tuple[str, str]]:
    """Find a start/end pair in free text, or None if nothing parses."""
    if not text:
        return None

    for pattern, build in RANGE_PATTERNS:
        for match in pattern.finditer(text):
            start_text, end_text = build(match)
            start = parse_date(start_text)
            if start:
                end = parse_date(end_text) or start
                return _year_before_if_wrapped(start, end), end

    for pattern in SINGLE_PATTERNS:
        for match in pattern.finditer(text):
            start = parse_date(match.group(1))
            if start:
                return start, start

    return None


def parse_date_range(
    start_date: Optional[str],
    end_date: Optional[str],
    date_text: Optional[str],
    today: Optional[date] = None,
) -> tuple[str, str]:
    """Resolve a listing's date range.

    Typed start/end fields win, then the free-text date, then a placeholder
    three months out so the record is never dropped for lack of dates.
    """
    start = parse_date(start_date)
    if start:
        end = parse_date(end_date) or start
    else:
        start, end = parse_date_text(date_text) or (None, None)

    # An end before the start is unusable; fall back like a missing date
    if not start or end < start:
        placeholder = placeholder_date(today)
        return placeholder, placeholder
    return start, end
