import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from careerflow.api.v1.router import api_v1_router
from careerflow.core.config import get_settings
from careerflow.core.database import engine
from careerflow.core.http import create_http_client
from careerflow.core.logging import configure_logging
from careerflow.integrations.aggregator import JobAggregator
from careerflow.models import Base

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Startup
    settings = get_settings()
    if settings.database_create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    app.state.http_client = create_http_client(settings)
    app.state.job_aggregator = JobAggregator.from_settings(app.state.http_client, settings)
    logger.info(
        "Started %s %s, external sources: %s",
        settings.app_name,
        settings.app_version,
        app.state.job_aggregator.available_sources() or "none",
    )
    yield
    # Shutdown
    await app.state.http_client.aclose()
    await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.include_router(api_v1_router, prefix="/api/v1")
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "careerflow.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
