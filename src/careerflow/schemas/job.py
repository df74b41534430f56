from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from careerflow.schemas import APIModel, APIRequest
from careerflow.schemas.geo import Coordinates


class JobCategory(StrEnum):
    SOFTWARE = "software"
    DESIGN = "design"
    MARKETING = "marketing"
    SALES = "sales"
    FINANCE = "finance"
    HEALTHCARE = "healthcare"
    EDUCATION = "education"
    OTHER = "other"


class JobSource(StrEnum):
    INTERNAL = "internal"
    LINKEDIN = "linkedin"
    NAUKRI = "naukri"
    EXTERNAL = "external"


class JobPosting(APIModel):
    """A job opening, either stored internally or fetched from an aggregator."""

    id: str
    title: str
    company: str
    description: str = ""
    location: str | None = None
    coordinates: Coordinates | None = None
    skills: list[str] = []
    category: JobCategory = JobCategory.OTHER
    salary: int | None = None
    employment_type: str | None = None
    source: JobSource = JobSource.INTERNAL
    poster_id: str | None = None
    external_url: str | None = None
    posted_date: str | None = None


class JobCreate(APIRequest):
    title: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    location: str | None = Field(None, max_length=200)
    coordinates: Coordinates | None = None
    skills: list[str] = []
    category: JobCategory = JobCategory.OTHER
    salary: int | None = Field(None, ge=0)
    employment_type: str | None = Field(None, max_length=50)
    poster_id: str | None = Field(None, max_length=64)
    is_active: bool = True

    @field_validator("skills")
    @classmethod
    def _strip_skills(cls, values: list[str]) -> list[str]:
        # Order and repeats are kept: both feed skill-gap importance.
        return [v.strip() for v in values if v.strip()]


class JobUpdate(APIRequest):
    title: str | None = Field(None, min_length=1, max_length=200)
    company: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    location: str | None = Field(None, max_length=200)
    coordinates: Coordinates | None = None
    skills: list[str] | None = None
    category: JobCategory | None = None
    salary: int | None = Field(None, ge=0)
    employment_type: str | None = Field(None, max_length=50)
    is_active: bool | None = None

    @field_validator("skills")
    @classmethod
    def _strip_skills(cls, values: list[str] | None) -> list[str] | None:
        if values is None:
            return None
        return [v.strip() for v in values if v.strip()]


class JobRead(JobPosting):
    is_active: bool
    created_at: datetime
    updated_at: datetime


class JobSearchParams(BaseModel):
    query: str = ""
    location: str = ""
    limit: int = Field(20, ge=1, le=200)
    category: str = ""


class ExternalJobsResponse(APIModel):
    success: bool
    data: list[JobPosting]
    count: int
    source: str
