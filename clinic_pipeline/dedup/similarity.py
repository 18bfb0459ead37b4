"""Duplicate detection signals between canonical clinics."""

import re
from collections import Counter
from urllib.parse import urlparse

from clinic_pipeline.models import Clinic

DUPLICATE_THRESHOLD = 2.5


def normalize_name(text: str) -> str:
    """Lowercase, strip punctuation, collapse whitespace."""
    text = re.sub(r"[^a-z0-9\s]", "", (text or "").lower())
    return re.sub(r"\s+", " ", text).strip()


def string_similarity(a: str, b: str) -> float:
    """Sørensen–Dice coefficient over character bigrams (0.0-1.0).

    Bigrams are counted with multiplicity, so "aaaa" vs "aa" scores 0.5
    rather than 1.0.
    """
    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0

    bigrams = Counter(a[i:i + 2] for i in range(len(a) - 1))
    intersect = 0
    for i in range(len(b) - 1):
        bigram = b[i:i + 2]
        if bigrams[bigram] > 0:
            bigrams[bigram] -= 1
            intersect += 1

    return (2 * intersect) / (len(a) + len(b) - 2)


def get_domain(url: str) -> str:
    """Hostname of a URL, or "" when it has none."""
    if not url:
        return ""
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def duplicate_score(a: Clinic, b: Clinic) -> float:
    """Additive evidence that two records describe the same event (max 4)."""
    score = 0.0

    # Name similarity is the strongest signal
    name_sim = string_similarity(normalize_name(a.name), normalize_name(b.name))
    if name_sim > 0.8:
        score += 2
    elif name_sim > 0.6:
        score += 1

    same_start = a.dates.start == b.dates.start
    same_end = a.dates.end == b.dates.end
    if same_start and same_end:
        score += 1
    elif same_start or same_end:
        score += 0.5

    city_a = normalize_name(a.location.city)
    if city_a and city_a != "unknown" and city_a == normalize_name(b.location.city):
        score += 0.5

    domain_a = get_domain(a.website_url)
    if domain_a and domain_a == get_domain(b.website_url):
        score += 0.5

    return score


def are_duplicates(a: Clinic, b: Clinic) -> bool:
    return duplicate_score(a, b) >= DUPLICATE_THRESHOLD
