"""Additive relevance scoring and final ordering of search results."""

import math
from datetime import date
from typing import Optional

from clinic_pipeline.models import Clinic

EARTH_RADIUS_KM = 6371.0

# (max distance km, points), checked in order
DISTANCE_TIERS = [
    (50, 50),     # local city
    (150, 40),    # region
    (500, 30),    # state / province
    (2000, 20),   # country
]
GLOBAL_TIER_POINTS = 5
NEUTRAL_DISTANCE_POINTS = 15

EXCEPTIONAL_BONUS = 20


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_score(
    clinic: Clinic,
    user_lat: Optional[float],
    user_lng: Optional[float],
) -> int:
    """Tier points by distance, or a neutral value when either side lacks coordinates."""
    if user_lat is None or user_lng is None or user_lat == 0:
        return NEUTRAL_DISTANCE_POINTS
    if clinic.location.lat == 0 or clinic.location.lng == 0:
        return NEUTRAL_DISTANCE_POINTS

    distance = haversine_km(user_lat, user_lng, clinic.location.lat, clinic.location.lng)
    for max_km, points in DISTANCE_TIERS:
        if distance < max_km:
            return points
    return GLOBAL_TIER_POINTS


def is_exceptional(clinic: Clinic) -> bool:
    """Featured, rated 4.7+ and reviewed 100+ times: surfaces regardless of distance."""
    return clinic.featured and clinic.rating >= 4.7 and clinic.review_count > 100


def score_clinic(
    clinic: Clinic,
    user_lat: Optional[float] = None,
    user_lng: Optional[float] = None,
    today: Optional[date] = None,
) -> int:
    today = today or date.today()
    score = distance_score(clinic, user_lat, user_lng)

    # Quality
    if clinic.featured:
        score += 15
    if clinic.rating >= 4.5:
        score += 10
    elif clinic.rating >= 4.0:
        score += 5
    if clinic.review_count > 50:
        score += 5

    # Recency
    if clinic.is_new:
        score += 5
    try:
        days_until = (date.fromisoformat(clinic.dates.start) - today).days
    except ValueError:
        days_until = 0
    if 0 < days_until < 90:
        score += 5
    elif 0 < days_until < 180:
        score += 3

    if is_exceptional(clinic):
        score += EXCEPTIONAL_BONUS

    return score


def rank_clinics(
    clinics: list[Clinic],
    user_lat: Optional[float] = None,
    user_lng: Optional[float] = None,
    today: Optional[date] = None,
) -> list[Clinic]:
    """Sort by score descending, then start date ascending."""
    scored = [(score_clinic(c, user_lat, user_lng, today), c) for c in clinics]
    scored.sort(key=lambda pair: (-pair[0], pair[1].dates.start))
    return [clinic for _, clinic in scored]
