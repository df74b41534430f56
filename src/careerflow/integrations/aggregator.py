import asyncio
import logging

import httpx

from careerflow.core.config import Settings
from careerflow.core.exceptions import AggregatorUnavailable
from careerflow.integrations.base import JobProvider
from careerflow.integrations.feeds import LinkedInProvider, NaukriProvider
from careerflow.schemas.job import JobPosting, JobSearchParams

logger = logging.getLogger(__name__)

ALL_SOURCES = "all"


class JobAggregator:
    """Combines postings from every configured external job provider."""

    def __init__(self, providers: list[JobProvider] | None = None) -> None:
        self.providers: list[JobProvider] = list(providers or [])

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient, settings: Settings) -> "JobAggregator":
        if not settings.aggregator_enabled:
            return cls()
        options = {
            "timeout": settings.aggregator_timeout_seconds,
            "retries": settings.aggregator_retries,
        }
        return cls(
            [
                LinkedInProvider(client, settings.aggregator_linkedin_url, **options),
                NaukriProvider(client, settings.aggregator_naukri_url, **options),
            ]
        )

    def available_sources(self) -> list[str]:
        return [p.name for p in self.providers if p.is_available()]

    async def fetch_by_source(self, source: str, params: JobSearchParams) -> list[JobPosting]:
        """Fetch from one named source, or from every available one with ``"all"``.

        A single named source propagates ``AggregatorUnavailable``. With
        ``"all"`` individual failures are logged and skipped; the call only
        fails when every available provider failed.
        """
        if source != ALL_SOURCES:
            provider = next((p for p in self.providers if p.name == source), None)
            if provider is None or not provider.is_available():
                return []
            return await provider.fetch_jobs(params)

        providers = [p for p in self.providers if p.is_available()]
        if not providers:
            return []

        results = await asyncio.gather(
            *(p.fetch_jobs(params) for p in providers), return_exceptions=True
        )

        jobs: list[JobPosting] = []
        failures = 0
        for provider, result in zip(providers, results, strict=True):
            if isinstance(result, BaseException):
                failures += 1
                logger.warning("Job provider %s failed: %s", provider.name, result)
                continue
            jobs.extend(result)

        if failures == len(providers):
            raise AggregatorUnavailable("All external job providers failed")

        # Newest first; postings without a date go last
        jobs.sort(key=lambda j: j.posted_date or "", reverse=True)
        return jobs
