"""Classify listings: age groups, skill levels, clinic type, tags, duration."""

import re
from datetime import date
from typing import Optional

from clinic_pipeline.models import AgeGroup, ClinicType, RawClinicData, SkillLevel

AGE_GROUP_PATTERNS: list[tuple[AgeGroup, str]] = [
    ("mites", r"mite|ages?\s*[4-8]\b|\bu[- ]?8\b|\b8u\b|\b[4-6]-8\b"),
    ("squirts", r"squirt|\batom|ages?\s*(?:9|10)\b|\bu[- ]?10\b|\b10u\b|\b8-10\b|\b9-10\b"),
    ("peewee", r"peewee|pee.?wee|ages?\s*(?:11|12)\b|\bu[- ]?12\b|\b12u\b|\b10-12\b|\b11-12\b"),
    ("bantam", r"bantam|ages?\s*(?:13|14)\b|\bu[- ]?14\b|\b14u\b|\b12-14\b|\b13-14\b"),
    ("midget", r"midget|ages?\s*(?:15|16|17)\b|\bu[- ]?1[68]\b|\b1[68]u\b|\b14-16\b|\b15-17\b|\b14-18\b"),
    ("junior", r"junior|ages?\s*(?:18|19|20)\b|\bu[- ]?20\b|\b16-20\b|\b17-20\b"),
]

SKILL_LEVEL_PATTERNS: list[tuple[SkillLevel, str]] = [
    ("beginner", r"beginner|learn to play|introduction|introductory|first time|no experience|never played"),
    ("intermediate", r"intermediate|some experience|recreational"),
    ("advanced", r"advanced|experienced"),
    ("elite", r"elite|\baaa\b|tier 1|select|travel|competitive|high performance|prospect|pre-nhl"),
]

# First match wins
TYPE_PATTERNS: list[tuple[ClinicType, str]] = [
    ("showcase", r"showcase|exposure|scouting|combine"),
    ("tournament", r"tournament|tourney|jamboree"),
    ("camp", r"camp|summer|week-long|overnight|residential|day camp"),
    ("development", r"development|learn to play|intro|beginner|first step"),
]

TAG_PATTERNS = [
    ("summer", r"summer"),
    ("winter", r"winter"),
    ("spring", r"spring"),
    ("fall", r"\bfall\b|autumn"),
    ("goaltending", r"goaltend|goalie|netminder"),
    ("power-skating", r"power skat"),
    ("shooting", r"shooting"),
    ("defense", r"defense|defensive"),
    ("forwards", r"forward"),
    ("stickhandling", r"stickhandl|puck\s*handl"),
    ("checking", r"checking"),
    ("conditioning", r"conditioning|fitness|off-ice"),
    ("beginner-friendly", r"beginner|learn to play"),
    ("elite", r"elite|\baaa\b|select"),
    ("girls-hockey", r"girls|women"),
    ("overnight", r"overnight|residential"),
    ("day-camp", r"day\s*camp"),
    ("showcase", r"prospect|showcase|scouting"),
    ("pro-instructors", r"\bnhl\b|\bpro\b"),
]


def _text(*parts: Optional[str]) -> str:
    return " ".join(p for p in parts if p).lower()


def parse_age_groups(raw: RawClinicData) -> list[AgeGroup]:
    text = _text(raw.name, raw.description, raw.age_range)
    groups = [group for group, pattern in AGE_GROUP_PATTERNS if re.search(pattern, text)]
    return groups or ["all"]


def parse_skill_levels(raw: RawClinicData) -> list[SkillLevel]:
    text = _text(raw.name, raw.description, raw.skill_level)
    levels = [level for level, pattern in SKILL_LEVEL_PATTERNS if re.search(pattern, text)]
    return levels or ["all"]


def parse_clinic_type(raw: RawClinicData) -> ClinicType:
    text = _text(raw.name, raw.description)
    for clinic_type, pattern in TYPE_PATTERNS:
        if re.search(pattern, text):
            return clinic_type
    return "clinic"


def generate_tags(raw: RawClinicData) -> list[str]:
    text = _text(raw.name, raw.description)
    tags = [tag for tag, pattern in TAG_PATTERNS if re.search(pattern, text)]
    if raw.city:
        tags.append(re.sub(r"\s+", "-", raw.city.strip().lower()))
    return list(dict.fromkeys(tags))


def calculate_duration(start: str, end: str) -> str:
    """Human duration: "1 day", "5 days", "2 weeks"."""
    try:
        days = (date.fromisoformat(end) - date.fromisoformat(start)).days + 1
    except ValueError:
        return "1 day"
    if days <= 1:
        return "1 day"
    if days <= 7:
        return f"{days} days"
    weeks = round(days / 7)
    return f"{weeks} week{'s' if weeks > 1 else ''}"
