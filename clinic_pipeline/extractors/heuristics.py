"""Page-level heuristics: the generic fallback and enrichment context."""

from typing import Optional

from pydantic import BaseModel, Field

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

COACH_SELECTORS = '[class*="coach"], [class*="instructor"], [class*="staff"], [class*="trainer"]'
COACH_NAME = 'h3, h4, h5, [class*="name"]'

REGISTRATION_WORDS = ["register", "sign up", "signup", "enroll", "enrol", "book now", "apply"]

IMAGE_SKIP = ["logo", "icon", "avatar", "pixel", "spacer", "sprite"]
IMAGE_ALT_HINTS = ["hockey", "camp", "clinic", "skating", "rink", "player"]

# Main content containers, most specific first
CONTENT_SELECTORS = ["main", "#content", ".content", "article", "body"]


class PageContext(BaseModel):
    """Page-wide data used to fill gaps in every candidate on the page."""

    coaches: list[str] = Field(default_factory=list)
    emails: list[str] = Field(default_factory=list)
    phones: list[str] = Field(default_factory=list)
    registration_url: Optional[str] = None
    hero_image: Optional[str] = None
    images: list[str] = Field(default_factory=list)
    description: Optional[str] = None

    def as_fallback(self, source: str, source_url: str) -> RawClinicData:
        return RawClinicData(
            source=source,
            source_url=source_url,
            coaches=self.coaches[:5],
            contact_email=self.emails[0] if self.emails else None,
            contact_phone=self.phones[0] if self.phones else None,
            registration_url=self.registration_url,
            image_url=self.hero_image,
            description=self.description,
        )


def extract_coach_names(doc: PageNode) -> list[str]:
    coaches = []
    for node in doc.select(COACH_SELECTORS):
        name_node = node.select_one(COACH_NAME)
        if name_node is None:
            continue
        name = clean_text(name_node.text())
        if name and len(name.split(" ")) >= 2 and len(name) < 50:
            coaches.append(name)
    return list(dict.fromkeys(coaches))


def extract_images(doc: PageNode, base_url: str) -> list[str]:
    images = []
    for img in doc.select("img[src]"):
        src = img.attr("src") or ""
        alt = (img.attr("alt") or "").lower()
        if not src or any(skip in src.lower() for skip in IMAGE_SKIP):
            continue
        if alt and not any(hint in alt for hint in IMAGE_ALT_HINTS):
            continue
        images.append(resolve_url(src, base_url))
    return list(dict.fromkeys(images))[:5]


def find_registration_link(doc: PageNode, base_url: str) -> Optional[str]:
    for link in doc.select("a[href]"):
        text = link.text().lower()
        href = link.attr("href")
        if href and any(word in text for word in REGISTRATION_WORDS):
            return resolve_url(href, base_url)
    return None


def main_content(doc: PageNode) -> Optional[PageNode]:
    return doc.first_of(*CONTENT_SELECTORS)


def _first_paragraph(doc: PageNode) -> Optional[str]:
    node = doc.first_of("main p", ".content p", "article p", ".description", ".about")
    if node is None:
        return None
    return clean_text(node.text())[:500] or None


def collect_page_context(doc: PageNode, base_url: str) -> PageContext:
    """Gather page-level fallback fields."""
    content = main_content(doc)
    text = content.text() if content is not None else doc.text()
    images = extract_images(doc, base_url)

    og_image = doc.select_one('meta[property="og:image"]')
    hero = og_image.attr("content") if og_image is not None else None

    return PageContext(
        coaches=extract_coach_names(doc),
        emails=extract_emails_from_text(text),
        phones=extract_phones_from_text(text),
        registration_url=find_registration_link(doc, base_url),
        hero_image=resolve_url(hero, base_url) if hero else (images[0] if images else None),
        images=images,
        description=_first_paragraph(doc),
    )


def extract_generic_content(
    doc: PageNode,
    source_url: str,
    source_name: str,
    context: Optional[PageContext] = None,
) -> Optional[RawClinicData]:
    """Strategy 7: one candidate from the H1/title plus every text signal."""
    h1 = doc.select_one("h1")
    title_node = doc.select_one("title")
    title = (h1.text() if h1 else "") or (title_node.text() if title_node else "")

    content = main_content(doc)
    body_text = content.text() if content is not None else doc.text()
    if not title or not is_hockey_related(f"{title} {body_text}"):
        return None

    context = context or collect_page_context(doc, source_url)
    dates = extract_dates_from_text(body_text)
    prices = extract_prices_from_text(body_text)
    venues = extract_venue_from_text(body_text)
    ages = extract_age_range_from_text(body_text)
    levels = extract_skill_level_from_text(body_text)

    return RawClinicData(
        source=source_name,
        source_url=source_url,
        name=clean_text(title),
        description=context.description,
        venue=venues[0] if venues else None,
        date_text=dates[0] if dates else None,
        price=prices[0] if prices else None,
        age_range=ages[0] if ages else None,
        skill_level=levels[0] if levels else None,
        contact_email=context.emails[0] if context.emails else None,
        contact_phone=context.phones[0] if context.phones else None,
        coaches=context.coaches[:5],
        amenities=extract_amenities_from_text(body_text),
        image_url=context.images[0] if context.images else context.hero_image,
        website_url=source_url,
        registration_url=context.registration_url or source_url,
        confidence=0.5 if dates else 0.4,
        extraction_method="generic",
    )
