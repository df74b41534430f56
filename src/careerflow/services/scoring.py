"""Weighted multi-factor compatibility scoring between a candidate and a job.

Every factor yields a sub-score in [0, 100] rounded to one decimal. The
overall score is the weighted mean of the factors using ``FACTOR_WEIGHTS``
(which sum to 100), rounded to an integer. Scoring is pure: no I/O, no
clock, no randomness.
"""

import math
import re

from careerflow.schemas.job import JobPosting
from careerflow.schemas.match import (
    CompatibilityFactors,
    MatchQuality,
    MatchResult,
    SkillGap,
    SkillImportance,
)
from careerflow.schemas.profile import Availability, CandidateProfile
from careerflow.services.geo import distance_km, format_distance

FACTOR_WEIGHTS: dict[str, int] = {
    "skills": 30,
    "experience": 15,
    "location": 15,
    "salary": 10,
    "education": 10,
    "availability": 5,
    "personality": 5,
    "career_progression": 5,
    "cultural_fit": 5,
}

NEUTRAL_SCORE = 50.0

EXACT_SKILL_CREDIT = 1.0
PARTIAL_SKILL_CREDIT = 0.7
SYNONYM_SKILL_CREDIT = 0.6

LOCATION_CUTOFF_KM = 100.0
LOCATION_FLOOR_SCORE = 20.0
DISTANCE_REASON_RADII_KM = (5, 10, 25, 50)

EXCELLENT_THRESHOLD = 85
GOOD_THRESHOLD = 65
FAIR_THRESHOLD = 40

GAP_REQUIRED_LEVEL = 3

AVAILABILITY_SCORES: dict[Availability, float] = {
    Availability.AVAILABLE: 100.0,
    Availability.OPEN_TO_OFFERS: 60.0,
    Availability.NOT_AVAILABLE: 10.0,
}

# Checked top-down so "Senior Engineering Manager" resolves to manager.
_SENIORITY_KEYWORDS: tuple[tuple[int, frozenset[str]], ...] = (
    (5, frozenset({"manager", "head", "director", "vp"})),
    (4, frozenset({"lead", "principal", "staff", "architect"})),
    (3, frozenset({"senior", "sr"})),
    (1, frozenset({"junior", "jr", "entry", "intern", "internship", "graduate", "trainee"})),
    (2, frozenset({"mid", "intermediate"})),
)
_DEFAULT_SENIORITY = 2
_REQUIRED_YEARS_BY_LEVEL = {1: 0, 2: 3, 3: 5, 4: 5, 5: 5}
_DEFAULT_REQUIRED_YEARS = 2

_YEARS_PATTERN = re.compile(
    r"\b(\d{1,2})(?:\s*(?:-|to)\s*\d{1,2})?\s*(\+)?\s*(?:years?|yrs?)\b",
    re.IGNORECASE,
)
_EXPERIENCE_CUE = re.compile(r"\bexperience[ds]?\b", re.IGNORECASE)
# Characters either side of "N years" searched for an experience cue
_CUE_WINDOW = 40
_WORD_PATTERN = re.compile(r"[a-z0-9+#]+")

_EDUCATION_STOPWORDS = frozenset(
    {"with", "from", "and", "the", "university", "college", "institute", "school", "degree"}
)

_LEARNING_RESOURCES: dict[str, list[str]] = {
    "typescript": ["TypeScript Handbook", "Total TypeScript", "Execute Program"],
    "javascript": ["MDN Web Docs", "freeCodeCamp", "JavaScript.info"],
    "python": ["Python.org", "Real Python", "Codecademy"],
    "react": ["React Docs", "React Tutorial", "Egghead.io"],
    "sql": ["SQLBolt", "W3Schools SQL", "Mode Analytics"],
    "aws": ["AWS Training", "Cloud Academy", "A Cloud Guru"],
}
_GENERIC_RESOURCES = ["Coursera", "Udemy", "LinkedIn Learning", "YouTube"]

# Skills in one group earn synonym credit against each other.
_SKILL_SYNONYMS: tuple[frozenset[str], ...] = (
    frozenset({"javascript", "js", "ecmascript", "node.js", "nodejs"}),
    frozenset({"python", "py", "django", "flask"}),
    frozenset({"react", "reactjs", "react.js"}),
    frozenset({"vue", "vuejs", "vue.js"}),
    frozenset({"angular", "angularjs", "angular.js"}),
    frozenset({"sql", "database", "mysql", "postgresql", "oracle"}),
    frozenset({"aws", "amazon web services", "cloud"}),
    frozenset({"docker", "containerization", "containers"}),
    frozenset({"kubernetes", "k8s", "orchestration"}),
)

_TIER_ADVICE: dict[MatchQuality, str] = {
    MatchQuality.EXCELLENT: "This is an excellent match for your profile.",
    MatchQuality.GOOD: "This is a good match with some room to grow.",
    MatchQuality.FAIR: "This role has potential but needs some skill development.",
    MatchQuality.POOR: "Consider building core skills before applying to similar roles.",
}
_IMPORTANCE_ORDER = {SkillImportance.HIGH: 0, SkillImportance.MEDIUM: 1, SkillImportance.LOW: 2}


def match_quality(score: int) -> MatchQuality:
    if score >= EXCELLENT_THRESHOLD:
        return MatchQuality.EXCELLENT
    if score >= GOOD_THRESHOLD:
        return MatchQuality.GOOD
    if score >= FAIR_THRESHOLD:
        return MatchQuality.FAIR
    return MatchQuality.POOR


def _words(text: str) -> set[str]:
    return set(_WORD_PATTERN.findall(text.lower()))


def _job_text(job: JobPosting) -> str:
    return f"{job.title} {job.description} {job.category.value}".lower()


def _distinct(values: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        term = value.strip()
        if term and term.lower() not in seen:
            seen.add(term.lower())
            result.append(term)
    return result


def _skill_credit(candidate_skill: str, required_skill: str) -> float:
    """Credit for one candidate skill against one required skill (both lowercase)."""
    if candidate_skill == required_skill:
        return EXACT_SKILL_CREDIT
    if candidate_skill in required_skill or required_skill in candidate_skill:
        return PARTIAL_SKILL_CREDIT
    if any(candidate_skill in group and required_skill in group for group in _SKILL_SYNONYMS):
        return SYNONYM_SKILL_CREDIT
    return 0.0


def _skill_importance(skill: str, required: list[str]) -> SkillImportance:
    lowered = [s.strip().lower() for s in required if s.strip()]
    position = lowered.index(skill.lower())
    if position == 0 or lowered.count(skill.lower()) > 1:
        return SkillImportance.HIGH
    if position < math.ceil(len(lowered) / 2):
        return SkillImportance.MEDIUM
    return SkillImportance.LOW


def _learning_resources(skill: str) -> list[str]:
    lowered = skill.lower()
    for key, resources in _LEARNING_RESOURCES.items():
        if key in lowered:
            return list(resources)
    return list(_GENERIC_RESOURCES)


def _skills_factor(
    candidate: CandidateProfile, job: JobPosting
) -> tuple[float, list[str], list[SkillGap]]:
    """Return (sub-score, matched candidate skills, gaps for unmatched required skills)."""
    required = _distinct(job.skills)
    candidate_skills = _distinct(candidate.skills)
    if not required:
        return NEUTRAL_SCORE, [], []

    candidate_lower = [s.lower() for s in candidate_skills]
    total_credit = 0.0
    gaps: list[SkillGap] = []
    for skill in required:
        best = max((_skill_credit(c, skill.lower()) for c in candidate_lower), default=0.0)
        total_credit += best
        if best == 0.0:
            gaps.append(
                SkillGap(
                    skill=skill,
                    importance=_skill_importance(skill, job.skills),
                    current_level=0,
                    required_level=GAP_REQUIRED_LEVEL,
                    learning_resources=_learning_resources(skill),
                )
            )

    matched = [
        original
        for original, lowered in zip(candidate_skills, candidate_lower, strict=True)
        if any(_skill_credit(lowered, r.lower()) > 0 for r in required)
    ]
    return round(100 * total_credit / len(required), 1), matched, gaps


def _seniority_level(title: str | None) -> int | None:
    if not title:
        return None
    tokens = _words(title)
    for level, keywords in _SENIORITY_KEYWORDS:
        if tokens & keywords:
            return level
    return None


def _required_years(job: JobPosting) -> int:
    text = job.description
    for match in _YEARS_PATTERN.finditer(text):
        # Only look for the cue within the same sentence
        before = text[max(0, match.start() - _CUE_WINDOW) : match.start()].rsplit(".", 1)[-1]
        after = text[match.end() : match.end() + _CUE_WINDOW].split(".", 1)[0]
        if match.group(2) or _EXPERIENCE_CUE.search(before) or _EXPERIENCE_CUE.search(after):
            return int(match.group(1))
    level = _seniority_level(job.title)
    if level is None:
        return _DEFAULT_REQUIRED_YEARS
    return _REQUIRED_YEARS_BY_LEVEL[level]


def _experience_factor(candidate: CandidateProfile, job: JobPosting) -> float:
    if candidate.years_of_experience is None:
        return NEUTRAL_SCORE
    years = max(0.0, candidate.years_of_experience)
    required = _required_years(job)
    if years < required:
        return round(20 + 40 * years / required, 1)
    if years <= required + 5:
        return 100.0
    return 75.0


def _text_location_similarity(candidate_location: str, job_location: str) -> float:
    if candidate_location == job_location:
        return 100.0
    if candidate_location in job_location or job_location in candidate_location:
        return 80.0
    candidate_parts = {p.strip() for p in candidate_location.split(",") if p.strip()}
    job_parts = {p.strip() for p in job_location.split(",") if p.strip()}
    if candidate_parts & job_parts:
        return 60.0
    return 20.0


def _location_factor(
    candidate: CandidateProfile, job: JobPosting
) -> tuple[float, float | None, str | None]:
    """Return (sub-score, distance in km or None, reason or None)."""
    if candidate.coordinates is not None and job.coordinates is not None:
        distance = round(distance_km(candidate.coordinates, job.coordinates), 1)
        span = 100.0 - LOCATION_FLOOR_SCORE
        decay = span * min(distance, LOCATION_CUTOFF_KM) / LOCATION_CUTOFF_KM
        reason = next(
            (f"Within {r} km of job location" for r in DISTANCE_REASON_RADII_KM if distance <= r),
            None,
        )
        return round(100.0 - decay, 1), distance, reason

    job_location = (job.location or "").strip().lower()
    if "remote" in _words(job_location):
        return 90.0, None, "Remote-friendly role"

    candidate_locations = [
        loc.strip().lower()
        for loc in [candidate.location or "", *candidate.preferred_locations]
        if loc.strip()
    ]
    if not job_location or not candidate_locations:
        return NEUTRAL_SCORE, None, None

    best = max(_text_location_similarity(loc, job_location) for loc in candidate_locations)
    if best >= 80:
        return best, None, "Located in the job's area"
    if best >= 60:
        return best, None, "Same region as the job"
    return best, None, None


def _salary_factor(candidate: CandidateProfile, job: JobPosting) -> float:
    expectation = candidate.expected_salary
    offered = job.salary
    if not expectation or expectation <= 0 or offered is None or offered >= expectation:
        return 100.0
    return round(100 * max(offered, 0) / expectation, 1)


def _education_factor(candidate: CandidateProfile, job: JobPosting) -> float:
    entries = [e for e in candidate.education if e.strip()]
    if not entries:
        return 0.0
    keywords = {
        word
        for entry in entries
        for word in _words(entry)
        if len(word) >= 4 and word not in _EDUCATION_STOPWORDS
    }
    hits = len(keywords & _words(_job_text(job)))
    return min(100.0, 60.0 + 10.0 * hits)


def _personality_factor(candidate: CandidateProfile, job: JobPosting) -> float:
    traits = [t.strip().lower() for t in _distinct(candidate.personality_traits)]
    if not traits:
        return NEUTRAL_SCORE
    text = _job_text(job)
    hits = sum(1 for trait in traits if trait in text)
    return min(100.0, 60.0 + 20.0 * hits)


def _career_progression_factor(candidate: CandidateProfile, job: JobPosting) -> float:
    if not candidate.current_job_title or not candidate.current_job_title.strip():
        return NEUTRAL_SCORE
    current = _seniority_level(candidate.current_job_title) or _DEFAULT_SENIORITY
    target = _seniority_level(job.title) or _DEFAULT_SENIORITY
    step = target - current
    if step == 1:
        return 100.0
    if step == 0:
        return 75.0
    if step > 1:
        return 50.0
    return 30.0


def _cultural_fit_factor(candidate: CandidateProfile, job: JobPosting) -> float:
    preferred = {c.strip().lower() for c in candidate.preferred_categories if c.strip()}
    if preferred:
        return 100.0 if job.category.value in preferred else 30.0
    interests = [i.strip().lower() for i in candidate.interests if i.strip()]
    if interests and any(interest in _job_text(job) for interest in interests):
        return 70.0
    return NEUTRAL_SCORE


def _career_advice(quality: MatchQuality, gaps: list[SkillGap]) -> str:
    advice = _TIER_ADVICE[quality]
    ranked = sorted(gaps, key=lambda g: _IMPORTANCE_ORDER[g.importance])
    focus = [g.skill for g in ranked[:2]]
    if not focus:
        return f"{advice} You already cover every required skill."
    return f"{advice} Focus on developing {' and '.join(focus)}."


def score(candidate: CandidateProfile, job: JobPosting) -> MatchResult:
    """Score one job posting against one candidate profile."""
    skills_score, matched_skills, skill_gaps = _skills_factor(candidate, job)
    location_score, distance, location_reason = _location_factor(candidate, job)

    factors = CompatibilityFactors(
        skills=skills_score,
        experience=_experience_factor(candidate, job),
        location=location_score,
        salary=_salary_factor(candidate, job),
        availability=(
            AVAILABILITY_SCORES[candidate.availability]
            if candidate.availability is not None
            else NEUTRAL_SCORE
        ),
        education=_education_factor(candidate, job),
        personality=_personality_factor(candidate, job),
        career_progression=_career_progression_factor(candidate, job),
        cultural_fit=_cultural_fit_factor(candidate, job),
    )

    weighted = sum(
        FACTOR_WEIGHTS[name] * value for name, value in factors.model_dump().items()
    )
    total = min(100, max(0, round(weighted / 100)))
    quality = match_quality(total)

    reasons: list[str] = []
    if factors.skills >= 60 and matched_skills:
        reasons.append(f"Strong skill match: {', '.join(matched_skills)}")
    elif factors.skills >= 30 and matched_skills:
        reasons.append(f"Partial skill match: {', '.join(matched_skills)}")
    if factors.experience == 100.0 and candidate.years_of_experience is not None:
        reasons.append(f"{candidate.years_of_experience:g} years of experience fits this role")
    if location_reason:
        reasons.append(location_reason)
    if factors.salary == 100.0 and candidate.expected_salary and job.salary is not None:
        reasons.append("Salary meets your expectations")
    if candidate.availability == Availability.AVAILABLE:
        reasons.append("Currently available")
    if factors.education > 60:
        reasons.append("Has relevant education")
    if factors.personality >= 80:
        reasons.append("Personality traits fit the role description")
    if factors.career_progression == 100.0:
        reasons.append("Logical next step in your career")
    if factors.cultural_fit == 100.0:
        reasons.append(f"Matches your preferred category: {job.category.value}")

    return MatchResult(
        job_id=job.id,
        job_title=job.title,
        company=job.company,
        source=job.source,
        score=total,
        match_quality=quality,
        matched_skills=matched_skills,
        reasons=reasons,
        distance=distance,
        distance_label=format_distance(distance) if distance is not None else None,
        compatibility_factors=factors,
        skill_gaps=skill_gaps,
        career_advice=_career_advice(quality, skill_gaps),
    )
