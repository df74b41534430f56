from enum import StrEnum

from pydantic import Field

from careerflow.schemas import APIModel, APIRequest
from careerflow.schemas.job import JobSource
from careerflow.schemas.profile import CandidateSnapshot


class MatchQuality(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class SkillImportance(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CompatibilityFactors(APIModel):
    """Per-factor sub-scores, each normalised to [0, 100]."""

    skills: float = Field(..., ge=0.0, le=100.0)
    experience: float = Field(..., ge=0.0, le=100.0)
    location: float = Field(..., ge=0.0, le=100.0)
    salary: float = Field(..., ge=0.0, le=100.0)
    availability: float = Field(..., ge=0.0, le=100.0)
    education: float = Field(..., ge=0.0, le=100.0)
    personality: float = Field(..., ge=0.0, le=100.0)
    career_progression: float = Field(..., ge=0.0, le=100.0)
    cultural_fit: float = Field(..., ge=0.0, le=100.0)


class SkillGap(APIModel):
    skill: str
    importance: SkillImportance
    current_level: int
    required_level: int
    learning_resources: list[str] = []


class MatchResult(APIModel):
    job_id: str
    job_title: str
    company: str
    source: JobSource
    score: int = Field(..., ge=0, le=100)
    match_quality: MatchQuality
    matched_skills: list[str]
    reasons: list[str]
    distance: float | None = None
    distance_label: str | None = None
    compatibility_factors: CompatibilityFactors
    skill_gaps: list[SkillGap] | None = None
    career_advice: str | None = None


class MatchingSummary(APIModel):
    total_matches: int
    excellent_matches: int
    good_matches: int
    fair_matches: int
    poor_matches: int
    average_score: float
    top_skills: list[str]
    skill_gaps: list[str]
    recommendations: list[str]


class MatchOptions(APIRequest):
    limit: int = Field(10, ge=1, le=100)
    min_score: int = Field(40, ge=0, le=100)
    max_distance: float | None = Field(None, gt=0)
    sort_by_distance: bool = False


class MatchRequest(MatchOptions):
    # Optional so a missing id maps to 400 rather than a validation error.
    candidate_id: str | None = None
    include_skill_gaps: bool = True
    include_career_advice: bool = True


class MatchResponse(APIModel):
    matches: list[MatchResult]
    total_matches: int
    summary: str
    matching_summary: MatchingSummary
    candidate: CandidateSnapshot
