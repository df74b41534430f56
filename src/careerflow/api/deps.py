import httpx
from fastapi import Request

from careerflow.core.config import get_settings
from careerflow.core.database import get_db
from careerflow.integrations.aggregator import JobAggregator

__all__ = ["get_db", "get_http_client", "get_job_aggregator", "get_settings"]


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_job_aggregator(request: Request) -> JobAggregator:
    return request.app.state.job_aggregator
