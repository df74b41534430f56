import uuid
from collections.abc import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from careerflow.api.deps import get_db, get_http_client, get_job_aggregator, get_settings
from careerflow.core.config import Settings
from careerflow.integrations.aggregator import JobAggregator
from careerflow.main import create_app
from careerflow.models import Base
from careerflow.schemas.geo import Coordinates
from careerflow.schemas.job import JobPosting, JobSource
from careerflow.schemas.profile import CandidateProfile
from tests.mocks.mock_job_provider import InMemoryJobProvider

# Places the fake Nominatim knows about: name -> (lat, lon)
KNOWN_PLACES = {
    "san francisco, ca": ("37.7749", "-122.4194"),
    "oakland, ca": ("37.8044", "-122.2712"),
}


def fake_nominatim(request: httpx.Request) -> httpx.Response:
    """Minimal stand-in for the Nominatim /search and /reverse endpoints."""
    if request.url.path.endswith("/search"):
        query = request.url.params.get("q", "").strip().lower()
        if query in KNOWN_PLACES:
            lat, lon = KNOWN_PLACES[query]
            return httpx.Response(200, json=[{"lat": lat, "lon": lon}])
        return httpx.Response(200, json=[])
    if request.url.path.endswith("/reverse"):
        return httpx.Response(
            200,
            json={"address": {"city": "San Francisco", "state": "California"}},
        )
    return httpx.Response(404)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,  # Prevent reading .env file during tests
        geocoding_base_url="https://geo.test",
        geocoding_retries=0,
        aggregator_retries=0,
        match_request_timeout_seconds=5.0,
    )


@pytest_asyncio.fixture
async def http_client() -> AsyncGenerator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_nominatim)) as c:
        yield c


@pytest.fixture
def external_provider() -> InMemoryJobProvider:
    return InMemoryJobProvider(JobSource.LINKEDIN)


@pytest.fixture
def job_aggregator(external_provider) -> JobAggregator:
    return JobAggregator([external_provider])


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession]:
    """Session on a throwaway SQLite database, one per test."""
    session_factory = async_sessionmaker(test_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(db_session, http_client, job_aggregator, test_settings) -> FastAPI:
    app = create_app()

    # Override DB dependency: yield the test session directly, no commit
    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_http_client] = lambda: http_client
    app.dependency_overrides[get_job_aggregator] = lambda: job_aggregator
    app.dependency_overrides[get_settings] = lambda: test_settings
    return app


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", follow_redirects=True
    ) as ac:
        yield ac


def make_profile_payload(**overrides):
    """Helper to create a valid candidate profile payload with unique email."""
    data = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": f"ada.{uuid.uuid4().hex[:8]}@example.com",
        "location": "San Francisco, CA",
        "coordinates": {"latitude": 37.77, "longitude": -122.41},
        "skills": ["React", "Node.js"],
        "yearsOfExperience": 3,
        "availability": "available",
        "expectedSalary": 120000,
    }
    data.update(overrides)
    return data


def make_job_payload(**overrides):
    """Helper to create a valid internal job payload."""
    data = {
        "title": "Frontend Engineer",
        "company": "Acme",
        "description": "Build delightful user interfaces.",
        "location": "San Francisco, CA",
        "coordinates": {"latitude": 37.788, "longitude": -122.41},
        "skills": ["React", "TypeScript", "Node.js"],
        "category": "software",
        "salary": 130000,
        "employmentType": "full_time",
        "isActive": True,
    }
    data.update(overrides)
    return data


def make_candidate(**overrides) -> CandidateProfile:
    """Candidate used by the scoring scenarios: React/Node.js, 3 years, in SF."""
    data = {
        "id": "cand-1",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "skills": ["React", "Node.js"],
        "years_of_experience": 3,
        "availability": "available",
        "coordinates": Coordinates(latitude=37.77, longitude=-122.41),
        "expected_salary": 120000,
    }
    data.update(overrides)
    return CandidateProfile(**data)


def make_job(**overrides) -> JobPosting:
    """Job 2 km north of ``make_candidate`` asking for React, TypeScript and Node.js."""
    data = {
        "id": "job-1",
        "title": "Frontend Engineer",
        "company": "Acme",
        "description": "Build delightful user interfaces.",
        "skills": ["React", "TypeScript", "Node.js"],
        "coordinates": Coordinates(latitude=37.788, longitude=-122.41),
        "salary": 130000,
    }
    data.update(overrides)
    return JobPosting(**data)
