import asyncio
import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from careerflow.api.deps import get_db, get_http_client, get_job_aggregator, get_settings
from careerflow.core.config import Settings
from careerflow.core.exceptions import BadRequestError
from careerflow.integrations.aggregator import JobAggregator
from careerflow.schemas.match import MatchRequest, MatchResponse
from careerflow.services import matching_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/match", tags=["matching"])


def _internal_error() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "matches": [], "totalMatches": 0},
    )


async def _run_match(
    request: MatchRequest,
    db: AsyncSession,
    http_client: httpx.AsyncClient,
    aggregator: JobAggregator,
    settings: Settings,
) -> MatchResponse | JSONResponse:
    if not request.candidate_id or not request.candidate_id.strip():
        raise BadRequestError("Candidate ID is required")

    try:
        return await asyncio.wait_for(
            matching_service.handle_match_request(
                db,
                request.candidate_id.strip(),
                request,
                http_client=http_client,
                aggregator=aggregator,
                settings=settings,
            ),
            timeout=settings.match_request_timeout_seconds,
        )
    except HTTPException:
        raise
    except TimeoutError:
        logger.error("Match request for %s timed out", request.candidate_id)
        return _internal_error()
    except Exception:
        logger.exception("Match request for %s failed", request.candidate_id)
        return _internal_error()


@router.post("", response_model=MatchResponse, response_model_exclude_none=True)
async def match_jobs(
    request: MatchRequest,
    db: AsyncSession = Depends(get_db),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    aggregator: JobAggregator = Depends(get_job_aggregator),
    settings: Settings = Depends(get_settings),
) -> MatchResponse | JSONResponse:
    """Rank internal and external jobs for a candidate."""
    return await _run_match(request, db, http_client, aggregator, settings)


@router.get("", response_model=MatchResponse, response_model_exclude_none=True)
async def match_jobs_query(
    candidate_id: str | None = Query(None, alias="candidateId"),
    limit: int = Query(10, ge=1, le=100),
    min_score: int = Query(40, ge=0, le=100, alias="minScore"),
    max_distance: float | None = Query(None, gt=0, alias="maxDistance"),
    sort_by_distance: bool = Query(False, alias="sortByDistance"),
    include_skill_gaps: bool = Query(True, alias="includeSkillGaps"),
    include_career_advice: bool = Query(True, alias="includeCareerAdvice"),
    db: AsyncSession = Depends(get_db),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    aggregator: JobAggregator = Depends(get_job_aggregator),
    settings: Settings = Depends(get_settings),
) -> MatchResponse | JSONResponse:
    """Same as ``POST /match`` with the options passed as query parameters."""
    request = MatchRequest(
        candidate_id=candidate_id,
        limit=limit,
        min_score=min_score,
        max_distance=max_distance,
        sort_by_distance=sort_by_distance,
        include_skill_gaps=include_skill_gaps,
        include_career_advice=include_career_advice,
    )
    return await _run_match(request, db, http_client, aggregator, settings)
