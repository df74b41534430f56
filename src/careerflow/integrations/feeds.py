import logging
from typing import Any

import httpx
from pydantic import ValidationError

from careerflow.core.exceptions import AggregatorUnavailable
from careerflow.integrations.base import JobProvider
from careerflow.schemas.geo import Coordinates
from careerflow.schemas.job import JobCategory, JobPosting, JobSearchParams, JobSource

logger = logging.getLogger(__name__)


def _parse_coordinates(raw: dict[str, Any]) -> Coordinates | None:
    coords = raw.get("coordinates")
    if isinstance(coords, dict):
        lat, lon = coords.get("latitude"), coords.get("longitude")
    else:
        lat, lon = raw.get("latitude", raw.get("lat")), raw.get("longitude", raw.get("lon"))
    if lat is None or lon is None:
        return None
    try:
        return Coordinates(latitude=float(lat), longitude=float(lon))
    except (TypeError, ValueError, ValidationError):
        return None


def _parse_category(value: Any) -> JobCategory:
    try:
        return JobCategory(str(value).lower())
    except ValueError:
        return JobCategory.OTHER


class FeedJobProvider(JobProvider):
    """Reads postings from a JSON job feed over HTTP.

    The feed may answer with a bare list or an object holding the list under
    ``data`` or ``jobs``. Items use the camelCase field names of the job
    board exports (``externalUrl``, ``postedDate``, ``employmentType``).
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        source: JobSource,
        feed_url: str,
        timeout: float = 5.0,
        retries: int = 1,
    ) -> None:
        self._client = client
        self.source = source
        self.feed_url = feed_url
        self.timeout = timeout
        self.retries = retries

    def is_available(self) -> bool:
        return bool(self.feed_url)

    async def fetch_jobs(self, params: JobSearchParams) -> list[JobPosting]:
        if not self.is_available():
            return []

        query = {
            key: value
            for key, value in params.model_dump().items()
            if value not in ("", None)
        }
        payload = await self._get(query)

        items = payload
        if isinstance(payload, dict):
            items = payload.get("data", payload.get("jobs", []))
        if not isinstance(items, list):
            raise AggregatorUnavailable(f"{self.name} feed returned an unexpected payload")

        jobs: list[JobPosting] = []
        for raw in items:
            try:
                job = self._parse_job(raw) if isinstance(raw, dict) else None
            except ValidationError:
                job = None
            if job is None:
                continue
            if params.category and job.category.value != params.category.lower():
                continue
            jobs.append(job)

        skipped = len(items) - len(jobs)
        if skipped:
            logger.debug("Skipped %d postings from %s feed", skipped, self.name)
        return jobs[: params.limit]

    async def _get(self, query: dict[str, Any]) -> Any:
        attempts = max(0, self.retries) + 1
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                response = await self._client.get(self.feed_url, params=query, timeout=self.timeout)
                response.raise_for_status()
                return response.json()
            except (httpx.HTTPError, ValueError) as e:
                last_error = e
                logger.warning(
                    "%s feed request failed (attempt %d/%d): %s", self.name, attempt, attempts, e
                )
        raise AggregatorUnavailable(f"{self.name} feed unavailable: {last_error}") from last_error

    def _parse_job(self, raw: dict[str, Any]) -> JobPosting | None:
        raw_id = raw.get("id")
        title = raw.get("title")
        company = raw.get("company")
        if not raw_id or not title or not company:
            return None

        job_id = str(raw_id)
        if not job_id.startswith(f"{self.name}-"):
            job_id = f"{self.name}-{job_id}"

        salary = raw.get("salary")
        try:
            salary = int(salary) if salary is not None else None
        except (TypeError, ValueError):
            salary = None

        skills = raw.get("skills") or []
        return JobPosting(
            id=job_id,
            title=str(title),
            company=str(company),
            description=str(raw.get("description") or ""),
            location=raw.get("location"),
            coordinates=_parse_coordinates(raw),
            skills=[str(s) for s in skills if str(s).strip()] if isinstance(skills, list) else [],
            category=_parse_category(raw.get("category", "other")),
            salary=salary,
            employment_type=raw.get("employmentType"),
            source=self.source,
            poster_id=raw.get("posterId") or f"external-{self.name}",
            external_url=raw.get("externalUrl"),
            posted_date=raw.get("postedDate"),
        )


class LinkedInProvider(FeedJobProvider):
    def __init__(self, client: httpx.AsyncClient, feed_url: str, **kwargs: Any) -> None:
        super().__init__(client, JobSource.LINKEDIN, feed_url, **kwargs)


class NaukriProvider(FeedJobProvider):
    def __init__(self, client: httpx.AsyncClient, feed_url: str, **kwargs: Any) -> None:
        super().__init__(client, JobSource.NAUKRI, feed_url, **kwargs)
