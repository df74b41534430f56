from sqlalchemy import JSON, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from careerflow.models.base import Base, StringPrimaryKeyMixin, TimestampMixin


class UserProfile(StringPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "users"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True, index=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    skills: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    years_of_experience: Mapped[float | None] = mapped_column(Float, nullable=True)
    education: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    availability: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    expected_salary: Mapped[int | None] = mapped_column(Integer, nullable=True)
    preferred_categories: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    preferred_locations: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    personality_traits: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    interests: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    current_job_title: Mapped[str | None] = mapped_column(String(200), nullable=True)

    @property
    def coordinates(self) -> dict[str, float] | None:
        if self.latitude is None or self.longitude is None:
            return None
        return {"latitude": self.latitude, "longitude": self.longitude}

    def __repr__(self) -> str:
        return f"<UserProfile {self.first_name} {self.last_name} ({self.id})>"
