from collections import Counter

from careerflow.schemas.job import JobPosting
from careerflow.schemas.match import MatchingSummary, MatchOptions, MatchQuality, MatchResult
from careerflow.schemas.profile import CandidateProfile
from careerflow.services import scoring

SUMMARY_TOP_N = 5

NO_JOBS_RECOMMENDATION = (
    "No jobs available for your profile right now. "
    "Try widening your filters or adding more skills and experience."
)


def _score_order(result: MatchResult) -> tuple:
    return (
        -result.score,
        result.distance is None,
        result.distance or 0.0,
        result.job_id,
    )


def _distance_order(result: MatchResult) -> tuple:
    return (
        result.distance is None,
        result.distance or 0.0,
        -result.score,
        result.job_id,
    )


def rank(
    candidate: CandidateProfile,
    jobs: list[JobPosting],
    options: MatchOptions | None = None,
) -> list[MatchResult]:
    """Score, filter, sort and truncate job postings for one candidate."""
    options = options or MatchOptions()
    results = [scoring.score(candidate, job) for job in jobs]

    if options.max_distance is not None:
        # An explicit distance filter drops postings whose distance is unknown
        results = [
            r for r in results if r.distance is not None and r.distance <= options.max_distance
        ]

    results = [r for r in results if r.score >= options.min_score]
    results.sort(key=_distance_order if options.sort_by_distance else _score_order)
    return results[: options.limit]


def _top_by_frequency(values: list[str], n: int) -> list[str]:
    # Counter preserves first-seen order, so ties keep their original order
    return [value for value, _ in Counter(values).most_common(n)]


def summarize(results: list[MatchResult]) -> MatchingSummary:
    """Aggregate a ranked batch into tier counts, top skills and recommendations."""
    if not results:
        return MatchingSummary(
            total_matches=0,
            excellent_matches=0,
            good_matches=0,
            fair_matches=0,
            poor_matches=0,
            average_score=0.0,
            top_skills=[],
            skill_gaps=[],
            recommendations=[NO_JOBS_RECOMMENDATION],
        )

    tiers = Counter(r.match_quality for r in results)
    average = round(sum(r.score for r in results) / len(results), 1)
    top_skills = _top_by_frequency([s for r in results for s in r.matched_skills], SUMMARY_TOP_N)
    top_gaps = _top_by_frequency(
        [g.skill for r in results for g in (r.skill_gaps or [])], SUMMARY_TOP_N
    )

    recommendations: list[str] = []
    if tiers[MatchQuality.EXCELLENT] > 0:
        recommendations.append("You have excellent matches! Consider applying to these positions.")
    if tiers[MatchQuality.GOOD] > 0:
        recommendations.append(
            "Good matches available. Focus on skill development for better scores."
        )
    if top_gaps:
        recommendations.append(f"Consider developing: {', '.join(top_gaps[:3])}")
    if average < 60:
        recommendations.append("Focus on building relevant skills and experience.")

    return MatchingSummary(
        total_matches=len(results),
        excellent_matches=tiers[MatchQuality.EXCELLENT],
        good_matches=tiers[MatchQuality.GOOD],
        fair_matches=tiers[MatchQuality.FAIR],
        poor_matches=tiers[MatchQuality.POOR],
        average_score=average,
        top_skills=top_skills,
        skill_gaps=top_gaps,
        recommendations=recommendations,
    )


def summary_text(summary: MatchingSummary, candidate: CandidateProfile) -> str:
    return (
        f"Found {summary.total_matches} job matches for {candidate.full_name}. "
        f"{summary.excellent_matches} excellent matches, {summary.good_matches} good matches. "
        f"Average match score: {summary.average_score:g}%."
    )
