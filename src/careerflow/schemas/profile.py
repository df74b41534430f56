from datetime import datetime
from enum import StrEnum

from pydantic import EmailStr, Field, field_validator

from careerflow.schemas import APIModel, APIRequest
from careerflow.schemas.geo import Coordinates


class Availability(StrEnum):
    AVAILABLE = "available"
    OPEN_TO_OFFERS = "open_to_offers"
    NOT_AVAILABLE = "not_available"


def _clean_terms(values: list[str]) -> list[str]:
    """Strip whitespace and drop blanks and case-insensitive duplicates."""
    seen: set[str] = set()
    cleaned: list[str] = []
    for value in values:
        term = value.strip()
        if term and term.lower() not in seen:
            seen.add(term.lower())
            cleaned.append(term)
    return cleaned


class CandidateProfile(APIModel):
    """Read-only snapshot of a job seeker used by the matching engine."""

    id: str
    first_name: str
    last_name: str
    email: str | None = None
    location: str | None = None
    coordinates: Coordinates | None = None
    skills: list[str] = []
    years_of_experience: float | None = None
    education: list[str] = []
    availability: Availability | None = None
    expected_salary: int | None = None
    preferred_categories: list[str] = []
    preferred_locations: list[str] = []
    personality_traits: list[str] = []
    interests: list[str] = []
    current_job_title: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def has_location_signal(self) -> bool:
        if self.coordinates is not None:
            return True
        if self.location and self.location.strip():
            return True
        return any(loc.strip() for loc in self.preferred_locations)


class ProfileCreate(APIRequest):
    id: str | None = Field(None, min_length=1, max_length=64)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr | None = None
    location: str | None = Field(None, max_length=200)
    coordinates: Coordinates | None = None
    skills: list[str] = []
    years_of_experience: float | None = Field(None, ge=0, le=70)
    education: list[str] = []
    availability: Availability | None = None
    expected_salary: int | None = Field(None, ge=0)
    preferred_categories: list[str] = []
    preferred_locations: list[str] = []
    personality_traits: list[str] = []
    interests: list[str] = []
    current_job_title: str | None = Field(None, max_length=200)

    @field_validator(
        "skills",
        "education",
        "preferred_categories",
        "preferred_locations",
        "personality_traits",
        "interests",
    )
    @classmethod
    def _clean(cls, values: list[str]) -> list[str]:
        return _clean_terms(values)


class ProfileUpdate(APIRequest):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    location: str | None = Field(None, max_length=200)
    coordinates: Coordinates | None = None
    skills: list[str] | None = None
    years_of_experience: float | None = Field(None, ge=0, le=70)
    education: list[str] | None = None
    availability: Availability | None = None
    expected_salary: int | None = Field(None, ge=0)
    preferred_categories: list[str] | None = None
    preferred_locations: list[str] | None = None
    personality_traits: list[str] | None = None
    interests: list[str] | None = None
    current_job_title: str | None = Field(None, max_length=200)

    @field_validator(
        "skills",
        "education",
        "preferred_categories",
        "preferred_locations",
        "personality_traits",
        "interests",
    )
    @classmethod
    def _clean(cls, values: list[str] | None) -> list[str] | None:
        return None if values is None else _clean_terms(values)


class ProfileRead(CandidateProfile):
    created_at: datetime
    updated_at: datetime


class CandidateSnapshot(APIModel):
    id: str
    first_name: str
    last_name: str
    skills: list[str]
    location: str | None = None
    availability: Availability | None = None
