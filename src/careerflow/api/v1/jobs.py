from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from careerflow.api.deps import get_db, get_job_aggregator
from careerflow.core.exceptions import AggregatorUnavailable, BadGatewayError, NotFoundError
from careerflow.integrations.aggregator import ALL_SOURCES, JobAggregator
from careerflow.schemas import PaginatedResponse
from careerflow.schemas.job import (
    ExternalJobsResponse,
    JobCategory,
    JobCreate,
    JobRead,
    JobSearchParams,
    JobUpdate,
)
from careerflow.services import job_service

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("/", response_model=JobRead, status_code=status.HTTP_201_CREATED)
async def create_job(
    data: JobCreate,
    db: AsyncSession = Depends(get_db),
) -> JobRead:
    job = await job_service.create_job(db, data)
    return JobRead.model_validate(job)


@router.get("/", response_model=PaginatedResponse[JobRead])
async def list_jobs(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    is_active: bool | None = Query(None, alias="isActive"),
    category: JobCategory | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[JobRead]:
    items, total = await job_service.list_jobs(db, skip, limit, is_active, category)
    return PaginatedResponse(
        items=[JobRead.model_validate(j) for j in items],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/external", response_model=ExternalJobsResponse)
async def list_external_jobs(
    source: str = Query(ALL_SOURCES),
    query: str = Query(""),
    location: str = Query(""),
    limit: int = Query(20, ge=1, le=200),
    category: str = Query(""),
    aggregator: JobAggregator = Depends(get_job_aggregator),
) -> ExternalJobsResponse:
    """Fetch postings from external job boards without storing them."""
    source = source.lower()
    params = JobSearchParams(query=query, location=location, limit=limit, category=category)
    try:
        jobs = await aggregator.fetch_by_source(source, params)
    except AggregatorUnavailable as e:
        raise BadGatewayError(str(e)) from e
    return ExternalJobsResponse(success=True, data=jobs, count=len(jobs), source=source)


@router.get("/{job_id}", response_model=JobRead)
async def get_job(
    job_id: str,
    db: AsyncSession = Depends(get_db),
) -> JobRead:
    job = await job_service.get_job(db, job_id)
    if not job:
        raise NotFoundError("Job", job_id)
    return JobRead.model_validate(job)


@router.patch("/{job_id}", response_model=JobRead)
async def update_job(
    job_id: str,
    data: JobUpdate,
    db: AsyncSession = Depends(get_db),
) -> JobRead:
    job = await job_service.get_job(db, job_id)
    if not job:
        raise NotFoundError("Job", job_id)
    updated = await job_service.update_job(db, job, data)
    return JobRead.model_validate(updated)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(
    job_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    job = await job_service.get_job(db, job_id)
    if not job:
        raise NotFoundError("Job", job_id)
    await job_service.delete_job(db, job)
