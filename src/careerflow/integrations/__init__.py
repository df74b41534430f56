from careerflow.integrations.aggregator import ALL_SOURCES, JobAggregator
from careerflow.integrations.base import JobProvider

__all__ = ["ALL_SOURCES", "JobAggregator", "JobProvider"]
