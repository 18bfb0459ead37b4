"""Cross-source duplicate detection and merging."""

from clinic_pipeline.dedup.merge import (
    completeness_score,
    deduplicate_clinics,
    group_duplicates,
    merge_duplicates,
)
from clinic_pipeline.dedup.similarity import (
    are_duplicates,
    duplicate_score,
    normalize_name,
    string_similarity,
)

__all__ = [
    "are_duplicates",
    "completeness_score",
    "deduplicate_clinics",
    "duplicate_score",
    "group_duplicates",
    "merge_duplicates",
    "normalize_name",
    "string_similarity",
]
