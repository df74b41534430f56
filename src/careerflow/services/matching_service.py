"""Orchestrates one match request: load, enrich, rank and summarize."""

import asyncio
import logging

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from careerflow.core.config import Settings
from careerflow.core.exceptions import (
    AggregatorUnavailable,
    CandidateNotFoundError,
    GeocodeError,
    LocationRequiredError,
)
from careerflow.integrations.aggregator import ALL_SOURCES, JobAggregator
from careerflow.schemas.job import JobPosting, JobSearchParams
from careerflow.schemas.match import MatchRequest, MatchResponse
from careerflow.schemas.profile import CandidateProfile, CandidateSnapshot
from careerflow.services import geo, job_service, profile_service, ranking

logger = logging.getLogger(__name__)


def _lookup_budget(per_attempt: float, retries: int, settings: Settings) -> float:
    """Time allowed for one external lookup, kept under half the request timeout."""
    return min(per_attempt * (max(0, retries) + 1), settings.match_request_timeout_seconds / 2)


async def _load_internal_jobs(db: AsyncSession) -> list[JobPosting]:
    rows = await job_service.list_active_jobs(db)
    return [JobPosting.model_validate(row) for row in rows]


async def _load_external_jobs(aggregator: JobAggregator, settings: Settings) -> list[JobPosting]:
    params = JobSearchParams(limit=settings.aggregator_fetch_limit)
    try:
        return await asyncio.wait_for(
            aggregator.fetch_by_source(ALL_SOURCES, params),
            timeout=_lookup_budget(
                settings.aggregator_timeout_seconds, settings.aggregator_retries, settings
            ),
        )
    except AggregatorUnavailable as e:
        logger.warning("External jobs unavailable, matching internal postings only: %s", e)
    except TimeoutError:
        logger.warning("External job fetch timed out, matching internal postings only")
    return []


async def _with_coordinates(
    candidate: CandidateProfile,
    http_client: httpx.AsyncClient,
    settings: Settings,
) -> CandidateProfile:
    if candidate.coordinates is not None or not settings.geocoding_enabled:
        return candidate
    if not candidate.location or not candidate.location.strip():
        return candidate
    try:
        coords = await asyncio.wait_for(
            geo.geocode(
                http_client,
                candidate.location,
                base_url=settings.geocoding_base_url,
                retries=settings.geocoding_retries,
            ),
            timeout=_lookup_budget(
                settings.geocoding_timeout_seconds, settings.geocoding_retries, settings
            ),
        )
    except GeocodeError as e:
        logger.info("Could not geocode '%s' for %s: %s", candidate.location, candidate.id, e)
        return candidate
    except TimeoutError:
        logger.warning(
            "Geocoding '%s' timed out, matching without coordinates", candidate.location
        )
        return candidate
    return candidate.model_copy(update={"coordinates": coords})


async def handle_match_request(
    db: AsyncSession,
    candidate_id: str,
    options: MatchRequest,
    *,
    http_client: httpx.AsyncClient,
    aggregator: JobAggregator,
    settings: Settings,
) -> MatchResponse:
    """Rank every active internal and external posting for one candidate.

    Raises ``CandidateNotFoundError`` when the profile does not exist and
    ``LocationRequiredError`` when it carries no location signal at all.
    Geocoding and external feed failures only degrade the result.
    """
    row = await profile_service.get_profile(db, candidate_id)
    if row is None:
        raise CandidateNotFoundError(candidate_id)

    candidate = CandidateProfile.model_validate(row)
    if not candidate.has_location_signal:
        raise LocationRequiredError()

    internal, external, candidate = await asyncio.gather(
        _load_internal_jobs(db),
        _load_external_jobs(aggregator, settings),
        _with_coordinates(candidate, http_client, settings),
    )
    jobs = internal + external
    logger.debug(
        "Matching %s against %d internal and %d external postings",
        candidate.id,
        len(internal),
        len(external),
    )

    results = await asyncio.to_thread(ranking.rank, candidate, jobs, options)
    summary = ranking.summarize(results)

    if not options.include_skill_gaps or not options.include_career_advice:
        update: dict[str, None] = {}
        if not options.include_skill_gaps:
            update["skill_gaps"] = None
        if not options.include_career_advice:
            update["career_advice"] = None
        results = [r.model_copy(update=update) for r in results]

    logger.info(
        "Matched candidate %s: %d results, average score %s",
        candidate.id,
        summary.total_matches,
        summary.average_score,
    )
    return MatchResponse(
        matches=results,
        total_matches=len(results),
        summary=ranking.summary_text(summary, candidate),
        matching_summary=summary,
        candidate=CandidateSnapshot.model_validate(candidate),
    )
