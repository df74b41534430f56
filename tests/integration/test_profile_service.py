"""Integration tests for the candidate profile service layer."""

import pytest
from sqlalchemy.exc import IntegrityError

from careerflow.schemas.profile import ProfileCreate, ProfileUpdate
from careerflow.services import profile_service
from tests.conftest import make_profile_payload

pytestmark = pytest.mark.integration


# ── helpers ──────────────────────────────────────────────────────────────


def _profile_create(**overrides) -> ProfileCreate:
    return ProfileCreate(**make_profile_payload(**overrides))


# ── tests ────────────────────────────────────────────────────────────────


async def test_create_profile(db_session):
    """create_profile persists every field and maps coordinates to columns."""
    profile = await profile_service.create_profile(db_session, _profile_create())

    assert profile.id
    assert profile.first_name == "Ada"
    assert profile.coordinates == {"latitude": 37.77, "longitude": -122.41}
    assert profile.skills == ["React", "Node.js"]
    assert profile.availability == "available"
    assert profile.expected_salary == 120000
    assert profile.created_at is not None


async def test_create_profile_with_explicit_id(db_session):
    profile = await profile_service.create_profile(db_session, _profile_create(id="user-42"))
    assert profile.id == "user-42"
    assert (await profile_service.get_profile(db_session, "user-42")) is not None


async def test_create_profile_duplicate_email(db_session):
    await profile_service.create_profile(db_session, _profile_create(email="same@example.com"))
    with pytest.raises(IntegrityError):
        await profile_service.create_profile(
            db_session, _profile_create(email="same@example.com")
        )


async def test_get_profile_not_found(db_session):
    assert await profile_service.get_profile(db_session, "missing") is None


async def test_list_profiles_filter_availability(db_session):
    await profile_service.create_profile(db_session, _profile_create())
    await profile_service.create_profile(
        db_session, _profile_create(availability="not_available")
    )

    items, total = await profile_service.list_profiles(db_session, availability="available")

    assert total == 1
    assert items[0].availability == "available"


async def test_update_profile(db_session):
    profile = await profile_service.create_profile(db_session, _profile_create())

    updated = await profile_service.update_profile(
        db_session,
        profile,
        ProfileUpdate(skills=["Go", "go", " Rust"], coordinates=None),
    )

    assert updated.skills == ["Go", "Rust"]
    assert updated.coordinates is None
    assert updated.first_name == "Ada"  # unchanged


async def test_delete_profile(db_session):
    profile = await profile_service.create_profile(db_session, _profile_create())
    pid = profile.id

    await profile_service.delete_profile(db_session, profile)

    assert await profile_service.get_profile(db_session, pid) is None
