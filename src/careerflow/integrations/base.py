from abc import ABC, abstractmethod

from careerflow.schemas.job import JobPosting, JobSearchParams, JobSource


class JobProvider(ABC):
    """An external source of job postings."""

    source: JobSource

    @property
    def name(self) -> str:
        return self.source.value

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider is configured well enough to be queried."""
        ...

    @abstractmethod
    async def fetch_jobs(self, params: JobSearchParams) -> list[JobPosting]:
        """Fetch postings matching the search. Raises AggregatorUnavailable on failure."""
        ...
