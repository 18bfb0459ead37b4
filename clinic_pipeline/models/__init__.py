"""Data models for the clinic pipeline."""

from clinic_pipeline.models.clinic import (
    AgeGroup,
    Clinic,
    ClinicLocation,
    ClinicType,
    Coach,
    DateRange,
    EarlyBird,
    Price,
    RawClinicData,
    ScheduleItem,
    SearchResult,
    SkillLevel,
    SourceReport,
)

__all__ = [
    "AgeGroup",
    "Clinic",
    "ClinicLocation",
    "ClinicType",
    "Coach",
    "DateRange",
    "EarlyBird",
    "Price",
    "RawClinicData",
    "ScheduleItem",
    "SearchResult",
    "SkillLevel",
    "SourceReport",
]
