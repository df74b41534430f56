from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from careerflow.api.deps import get_db, get_job_aggregator, get_settings
from careerflow.core.config import Settings
from careerflow.integrations.aggregator import JobAggregator
from careerflow.schemas.health import HealthResponse, StatusResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_db),
    aggregator: JobAggregator = Depends(get_job_aggregator),
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    try:
        await db.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError:
        db_status = "disconnected"

    return HealthResponse(
        status="healthy" if db_status == "connected" else "unhealthy",
        database=db_status,
        version=settings.app_version,
        external_sources=aggregator.available_sources(),
    )


@router.get("/status", response_model=StatusResponse)
async def liveness() -> StatusResponse:
    return StatusResponse(status="ok")
