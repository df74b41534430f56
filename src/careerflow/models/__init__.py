from careerflow.models.base import Base
from careerflow.models.job import JobPosting
from careerflow.models.profile import UserProfile

__all__ = ["Base", "JobPosting", "UserProfile"]
