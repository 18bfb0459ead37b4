"""Data models for the clinic pipeline."""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from clinic_pipeline.normalizers.dates import placeholder_date

ClinicType = Literal["camp", "clinic", "tournament", "showcase", "development"]
AgeGroup = Literal["mites", "squirts", "peewee", "bantam", "midget", "junior", "all"]
SkillLevel = Literal["beginner", "intermediate", "advanced", "elite", "all"]
SourceStatus = Literal["success", "error", "timeout"]

VENUE_UNKNOWN = "Venue TBD"
CITY_UNKNOWN = "Unknown"


class RawClinicData(BaseModel):
    """Unvalidated, partial listing produced by one strategy or one search hit."""

    source: str
    source_url: str = ""

    name: Optional[str] = None
    description: Optional[str] = None

    # Location as found on the page
    location: Optional[str] = None
    venue: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    # Dates, either typed or as raw text
    date_text: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    # Price, either typed or as raw text
    price: Optional[str] = None
    price_amount: Optional[float] = None
    currency: Optional[str] = None

    age_range: Optional[str] = None
    skill_level: Optional[str] = None

    image_url: Optional[str] = None
    registration_url: Optional[str] = None
    website_url: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None

    coaches: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)

    confidence: float = 0.0
    extraction_method: str = "unknown"

    class Config:
        extra = "ignore"

    @field_validator("confidence")
    @classmethod
    def clamp_confidence(cls, value: float) -> float:
        return max(0.0, min(1.0, value))

    def fill_missing(self, other: "RawClinicData") -> "RawClinicData":
        """Copy fields from `other` only where this record has nothing."""
        for field in type(self).model_fields:
            if field in ("source", "source_url", "confidence", "extraction_method"):
                continue
            current = getattr(self, field)
            value = getattr(other, field)
            if current in (None, "", []) and value not in (None, "", []):
                setattr(self, field, list(value) if isinstance(value, list) else value)
        return self


class Coach(BaseModel):
    id: str
    name: str
    title: str = "Instructor"
    bio: str = ""
    photo_url: str = ""
    credentials: list[str] = Field(default_factory=list)


class ClinicLocation(BaseModel):
    """Where a clinic runs. lat/lng of 0.0 means not geocoded yet."""

    venue: str = VENUE_UNKNOWN
    address: str = ""
    city: str = CITY_UNKNOWN
    state: str = ""
    country: str = CITY_UNKNOWN
    country_code: str = "US"
    lat: float = 0.0
    lng: float = 0.0

    @property
    def has_coordinates(self) -> bool:
        return self.lat != 0 and self.lng != 0


class DateRange(BaseModel):
    start: str  # ISO date
    end: str  # ISO date

    @model_validator(mode="after")
    def collapse_inverted_range(self) -> "DateRange":
        # ISO strings compare chronologically
        if self.end < self.start:
            placeholder = placeholder_date()
            self.start = placeholder
            self.end = placeholder
        return self


class ScheduleItem(BaseModel):
    day: str
    start_time: str = ""
    end_time: str = ""
    activity: str = ""


class EarlyBird(BaseModel):
    amount: float
    deadline: str


class Price(BaseModel):
    amount: float = 0.0
    currency: str = "USD"
    early_bird: Optional[EarlyBird] = None


class Clinic(BaseModel):
    """Canonical clinic/camp record."""

    # Identity
    id: str
    name: str
    type: ClinicType = "clinic"

    # Descriptive
    description: str = ""
    long_description: str = ""
    image_url: str = ""
    gallery_urls: list[str] = Field(default_factory=list)

    location: ClinicLocation = Field(default_factory=ClinicLocation)
    dates: DateRange
    schedule: list[ScheduleItem] = Field(default_factory=list)
    duration: str = ""
    price: Price = Field(default_factory=Price)

    # Classification
    age_groups: list[AgeGroup] = Field(default_factory=lambda: ["all"])
    skill_levels: list[SkillLevel] = Field(default_factory=lambda: ["all"])

    coaches: list[Coach] = Field(default_factory=list)
    max_participants: int = 50
    spots_remaining: int = 25

    # Contact
    registration_url: str = ""
    website_url: str = ""
    contact_email: str = ""
    contact_phone: str = ""

    amenities: list[str] = Field(default_factory=list)
    includes: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    # Quality signals
    featured: bool = False
    is_new: bool = False
    rating: float = 0.0
    review_count: int = 0

    created_at: str = Field(default_factory=lambda: date.today().isoformat())
    source: Optional[str] = None

    @field_validator("age_groups", "skill_levels")
    @classmethod
    def normalize_groups(cls, value: list[str]) -> list[str]:
        groups = list(dict.fromkeys(value))
        if not groups:
            return ["all"]
        if len(groups) > 1 and "all" in groups:
            groups.remove("all")
        return groups

    @field_validator("amenities", "includes", "tags", "gallery_urls")
    @classmethod
    def dedupe_list(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(v for v in value if v))

    def to_record(self) -> dict:
        """Convert to the camelCase shape API consumers expect."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "longDescription": self.long_description,
            "imageUrl": self.image_url,
            "galleryUrls": self.gallery_urls,
            "location": {
                "venue": self.location.venue,
                "address": self.location.address,
                "city": self.location.city,
                "state": self.location.state,
                "country": self.location.country,
                "countryCode": self.location.country_code,
                "lat": self.location.lat,
                "lng": self.location.lng,
            },
            "dates": {"start": self.dates.start, "end": self.dates.end},
            "schedule": [
                {
                    "day": s.day,
                    "startTime": s.start_time,
                    "endTime": s.end_time,
                    "activity": s.activity,
                }
                for s in self.schedule
            ],
            "duration": self.duration,
            "price": {
                "amount": self.price.amount,
                "currency": self.price.currency,
                **(
                    {"earlyBird": self.price.early_bird.model_dump()}
                    if self.price.early_bird
                    else {}
                ),
            },
            "ageGroups": self.age_groups,
            "skillLevels": self.skill_levels,
            "coaches": [
                {
                    "id": c.id,
                    "name": c.name,
                    "title": c.title,
                    "bio": c.bio,
                    "photoUrl": c.photo_url,
                    "credentials": c.credentials,
                }
                for c in self.coaches
            ],
            "maxParticipants": self.max_participants,
            "spotsRemaining": self.spots_remaining,
            "registrationUrl": self.registration_url,
            "websiteUrl": self.website_url,
            "contactEmail": self.contact_email,
            "contactPhone": self.contact_phone,
            "amenities": self.amenities,
            "includes": self.includes,
            "tags": self.tags,
            "featured": self.featured,
            "isNew": self.is_new,
            "rating": self.rating,
            "reviewCount": self.review_count,
            "createdAt": self.created_at,
            "source": self.source,
        }


class SourceReport(BaseModel):
    """One line of the per-source diagnostic report."""

    name: str
    count: int = 0
    status: SourceStatus = "success"
    error: Optional[str] = None


class SearchResult(BaseModel):
    clinics: list[Clinic] = Field(default_factory=list)
    sources: list[SourceReport] = Field(default_factory=list)
    total_raw: int = 0
    search_duration_ms: int = 0

    def to_record(self) -> dict:
        return {
            "clinics": [c.to_record() for c in self.clinics],
            "sources": [s.model_dump(exclude_none=True) for s in self.sources],
            "totalRaw": self.total_raw,
            "searchDuration": self.search_duration_ms,
        }
