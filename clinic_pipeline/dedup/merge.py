"""Group duplicate clinics and merge each group into one record.

Merging is declarative: MERGE_RULES lists one combinator per field, applied
for every other member of the group onto a copy of the most complete record.
"""

import copy
from typing import Any, Callable, Optional

from clinic_pipeline.dedup.similarity import are_duplicates
from clinic_pipeline.models import Clinic
from clinic_pipeline.models.clinic import CITY_UNKNOWN, VENUE_UNKNOWN

MergeRule = Callable[[Clinic, Clinic], None]


def _get(obj: Any, path: str) -> Any:
    for part in path.split("."):
        obj = getattr(obj, part)
    return obj


def _set(obj: Any, path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    for part in parents:
        obj = getattr(obj, part)
    setattr(obj, leaf, value)


def _is_blank(value: Any) -> bool:
    return not value


def fill_if_empty(
    path: str,
    empty: Optional[Callable[[Any], bool]] = None,
    also: tuple[str, ...] = (),
) -> MergeRule:
    """Copy `path` (and the `also` paths with it) when the base has nothing."""
    is_empty = empty or _is_blank

    def rule(base: Clinic, other: Clinic) -> None:
        if is_empty(_get(base, path)) and not is_empty(_get(other, path)):
            for p in (path, *also):
                _set(base, p, copy.deepcopy(_get(other, p)))

    return rule


def union_if_list(path: str) -> MergeRule:
    """Order-preserving union of two lists."""

    def rule(base: Clinic, other: Clinic) -> None:
        merged = list(dict.fromkeys([*_get(base, path), *_get(other, path)]))
        _set(base, path, merged)

    return rule


def take_max(path: str) -> MergeRule:
    def rule(base: Clinic, other: Clinic) -> None:
        if _get(other, path) > _get(base, path):
            _set(base, path, _get(other, path))

    return rule


def take_any(path: str) -> MergeRule:
    def rule(base: Clinic, other: Clinic) -> None:
        if _get(other, path):
            _set(base, path, True)

    return rule


def _only_all(groups: list[str]) -> bool:
    return not groups or groups == ["all"]


MERGE_RULES: list[MergeRule] = [
    fill_if_empty("description"),
    fill_if_empty("long_description"),
    fill_if_empty("image_url"),
    fill_if_empty("contact_email"),
    fill_if_empty("contact_phone"),
    fill_if_empty("registration_url"),
    fill_if_empty("website_url"),
    fill_if_empty("location.venue", empty=lambda v: not v or v == VENUE_UNKNOWN),
    fill_if_empty("location.address"),
    fill_if_empty("location.city", empty=lambda v: not v or v == CITY_UNKNOWN),
    fill_if_empty("location.state"),
    fill_if_empty(
        "location.country",
        empty=lambda v: not v or v == CITY_UNKNOWN,
        also=("location.country_code",),
    ),
    fill_if_empty("location.lat", empty=lambda v: v == 0, also=("location.lng",)),
    fill_if_empty("coaches"),
    fill_if_empty("schedule"),
    fill_if_empty("price", empty=lambda p: p.amount <= 0),
    # Specific groups win over "all"
    fill_if_empty("age_groups", empty=_only_all),
    fill_if_empty("skill_levels", empty=_only_all),
    union_if_list("gallery_urls"),
    union_if_list("tags"),
    union_if_list("amenities"),
    union_if_list("includes"),
    take_max("rating"),
    take_max("review_count"),
    take_any("featured"),
]


def completeness_score(clinic: Clinic) -> int:
    """How many of the informative fields a record has filled (0-15)."""
    checks = [
        bool(clinic.name),
        bool(clinic.description),
        bool(clinic.long_description),
        bool(clinic.image_url),
        bool(clinic.location.venue) and clinic.location.venue != VENUE_UNKNOWN,
        bool(clinic.location.city) and clinic.location.city != CITY_UNKNOWN,
        clinic.location.lat != 0,
        bool(clinic.contact_email),
        bool(clinic.contact_phone),
        bool(clinic.coaches),
        clinic.price.amount > 0,
        bool(clinic.age_groups) and clinic.age_groups[0] != "all",
        bool(clinic.skill_levels) and clinic.skill_levels[0] != "all",
        bool(clinic.amenities),
        bool(clinic.schedule),
    ]
    return sum(checks)


def merge_duplicates(group: list[Clinic]) -> Clinic:
    """Merge a duplicate group into a copy of its most complete member."""
    if len(group) == 1:
        return group[0]

    # sorted() is stable: ties keep their input order
    ordered = sorted(group, key=completeness_score, reverse=True)
    base = ordered[0].model_copy(deep=True)
    for other in ordered[1:]:
        for rule in MERGE_RULES:
            rule(base, other)
    return base


def group_duplicates(clinics: list[Clinic]) -> list[list[Clinic]]:
    """Greedy clustering: each unassigned record seeds a group and claims
    every later unassigned record that duplicates the seed itself.

    Matches are not transitive: A~B and B~C with A≁C leaves C out of A's group.
    """
    groups: list[list[Clinic]] = []
    used: set[int] = set()

    for i, seed in enumerate(clinics):
        if i in used:
            continue
        group = [seed]
        used.add(i)
        for j in range(i + 1, len(clinics)):
            if j not in used and are_duplicates(seed, clinics[j]):
                group.append(clinics[j])
                used.add(j)
        groups.append(group)

    return groups


def deduplicate_clinics(clinics: list[Clinic]) -> list[Clinic]:
    """Collapse duplicate records, keeping first-seen group order.

    One pass is idempotent only when no duplicate chains exist. Grouping
    compares against the group seed, so with A~B, B~C and A≁C the merged AB
    can still match C, and a second pass would collapse them.
    """
    return [merge_duplicates(group) for group in group_duplicates(clinics)]
