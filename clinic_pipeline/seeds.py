"""Curated baseline clinics, merged into every search before deduplication."""

import json
import re
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console

from clinic_pipeline.models import Clinic

console = Console()

SEED_FILE = Path(__file__).parent / "data" / "seed_clinics.json"
SEED_SOURCE_NAME = "Curated Database"


def load_seed_clinics(path: Optional[Path] = None) -> list[Clinic]:
    """Load and validate the curated clinic file; invalid entries are skipped."""
    with open(path or SEED_FILE, encoding="utf-8") as f:
        raw_seeds = json.load(f)

    seeds = []
    for item in raw_seeds:
        try:
            seeds.append(Clinic.model_validate(item))
        except ValidationError as e:
            console.print(f"[yellow]Skipping invalid seed clinic: {e}[/yellow]")
    return seeds


def _seed_text(clinic: Clinic) -> str:
    loc = clinic.location
    parts = [clinic.name, clinic.description, loc.city, loc.state, loc.country, *clinic.tags]
    return " ".join(p for p in parts if p).lower()


def filter_seeds(seeds: list[Clinic], query: Optional[str]) -> list[Clinic]:
    """Seeds whose text contains any word of the query; all seeds when no query."""
    if not query:
        return list(seeds)
    words = [w for w in re.split(r"\s+", query.lower()) if w]
    if not words:
        return list(seeds)
    return [s for s in seeds if any(w in _seed_text(s) for w in words)]
