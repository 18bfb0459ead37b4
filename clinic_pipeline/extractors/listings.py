"""Extract clinics from listing markup: event cards and tables."""

import re
from typing import Optional

from clinic_pipeline.extractors.dom import PageNode
from clinic_pipeline.extractors.signals import (
    clean_text,
    extract_age_range_from_text,
    extract_dates_from_text,
    extract_prices_from_text,
    extract_skill_level_from_text,
    is_hockey_related,
    resolve_url,
)
from clinic_pipeline.models import RawClinicData

# Card/listing conventions across site builders
CARD_SELECTORS = [
    # Generic event card patterns
    '[class*="event-card"]',
    '[class*="event-item"]',
    '[class*="event-listing"]',
    '[class*="camp-card"]',
    '[class*="camp-item"]',
    '[class*="clinic-card"]',
    '[class*="clinic-item"]',
    '[class*="program-card"]',
    '[class*="program-item"]',
    '[class*="session-card"]',
    # Article / card patterns
    'article[class*="event"]',
    'article[class*="camp"]',
    'article[class*="clinic"]',
    '.card[class*="event"]',
    '.card[class*="camp"]',
    # List items that look like events
    'li[class*="event"]',
    'li[class*="camp"]',
    'li[class*="clinic"]',
    # Data attribute patterns
    "[data-event-id]",
    "[data-camp-id]",
    '[data-type="event"]',
    # Site builders
    ".views-row",        # Drupal
    ".wp-block-post",    # WordPress blocks
    ".elementor-post",   # Elementor
    ".w-dyn-item",       # Webflow
    ".et_pb_post",       # Divi
    ".summary-item",     # Squarespace summary blocks
    ".grid-item",
    ".list-item",
]

CARD_TITLE = 'h1, h2, h3, h4, h5, [class*="title"], [class*="name"]'
CARD_DESCRIPTION = 'p, [class*="desc"], [class*="summary"], [class*="excerpt"]'
CARD_DATE = '[class*="date"], time, [datetime]'
CARD_PRICE = '[class*="price"], [class*="cost"], [class*="fee"]'
CARD_LOCATION = '[class*="location"], [class*="venue"], [class*="place"], address'

# Header text → semantic column, checked in this order for every header
COLUMN_PATTERNS = [
    ("date", re.compile(r"date|when|schedule|day", re.I)),
    ("price", re.compile(r"price|cost|fee|tuition|rate", re.I)),
    ("age", re.compile(r"\bage|level|division|group|birth", re.I)),
    ("location", re.compile(r"location|where|venue|rink|arena|facility", re.I)),
    ("link", re.compile(r"regist|sign.?up|link|url|book", re.I)),
    ("description", re.compile(r"description|details|notes|info|about", re.I)),
    ("name", re.compile(r"name|program|camp|clinic|event|title|session", re.I)),
]


def _card_image(card: PageNode, source_url: str) -> Optional[str]:
    img = card.select_one("img")
    if img is None:
        return None
    src = img.attr("src") or img.attr("data-src")
    return resolve_url(src, source_url) if src else None


def _card_date(card: PageNode, text: str) -> Optional[str]:
    node = card.select_one(CARD_DATE)
    if node is not None:
        value = node.text() or node.attr("datetime")
        if value:
            return value
    dates = extract_dates_from_text(text)
    return dates[0] if dates else None


def _node_text(card: PageNode, selector: str) -> Optional[str]:
    node = card.select_one(selector)
    if node is None:
        return None
    return clean_text(node.text()) or None


def extract_from_cards(doc: PageNode, source_url: str, source_name: str) -> list[RawClinicData]:
    """Strategy 4: event/camp/clinic/program cards."""
    results = []
    for card in doc.select(", ".join(CARD_SELECTORS)):
        text = card.text()
        if not is_hockey_related(text):
            continue

        name = _node_text(card, CARD_TITLE)
        if not name:
            continue

        link = card.select_one("a[href]")
        full_url = resolve_url(link.attr("href"), source_url) if link is not None else source_url

        price = _node_text(card, CARD_PRICE)
        if not price:
            prices = extract_prices_from_text(text)
            price = prices[0] if prices else None
        ages = extract_age_range_from_text(text)
        levels = extract_skill_level_from_text(text)

        results.append(RawClinicData(
            source=source_name,
            source_url=full_url,
            name=name,
            description=(_node_text(card, CARD_DESCRIPTION) or "")[:500] or None,
            image_url=_card_image(card, source_url),
            date_text=_card_date(card, text),
            price=price,
            location=_node_text(card, CARD_LOCATION),
            age_range=ages[0] if ages else None,
            skill_level=levels[0] if levels else None,
            website_url=full_url,
            registration_url=full_url,
            confidence=0.72,
            extraction_method="card",
        ))
    return results


def map_table_columns(headers: list[str]) -> dict[str, int]:
    """Map semantic column names to header indices (first header wins)."""
    columns: dict[str, int] = {}
    for index, header in enumerate(headers):
        for column, pattern in COLUMN_PATTERNS:
            if pattern.search(header):
                columns.setdefault(column, index)
                break
    return columns


def _cell(cells: list[str], columns: dict[str, int], column: str) -> Optional[str]:
    index = columns.get(column)
    if index is None or index >= len(cells):
        return None
    return cells[index] or None


def extract_from_tables(doc: PageNode, source_url: str, source_name: str) -> list[RawClinicData]:
    """Strategy 5: hockey tables, one candidate per relevant data row."""
    results = []
    for table in doc.select("table"):
        if not is_hockey_related(table.text()):
            continue

        header_row = table.select_one("thead tr") or table.select_one("tr")
        if header_row is None:
            continue
        header_cells = header_row.select("th") or header_row.select("td")
        headers = [cell.text().lower() for cell in header_cells]
        columns = map_table_columns(headers)
        if not columns:
            # No header row: treat every row as data
            header_row = None

        for row in table.select("tr"):
            if row == header_row:
                continue
            cells = [cell.text() for cell in row.select("td")]
            if len(cells) < 2:
                continue

            name = _cell(cells, columns, "name") or cells[0]
            if not name or not is_hockey_related(" ".join(cells)):
                continue

            link = row.select_one("a[href]")
            full_url = resolve_url(link.attr("href"), source_url) if link is not None else source_url

            results.append(RawClinicData(
                source=source_name,
                source_url=full_url,
                name=clean_text(name),
                description=_cell(cells, columns, "description"),
                date_text=_cell(cells, columns, "date"),
                location=_cell(cells, columns, "location"),
                price=_cell(cells, columns, "price"),
                age_range=_cell(cells, columns, "age"),
                website_url=full_url,
                registration_url=full_url,
                confidence=0.62,
                extraction_method="table",
            ))
    return results
