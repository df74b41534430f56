from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from careerflow.models.profile import UserProfile
from careerflow.schemas.profile import ProfileCreate, ProfileUpdate


async def create_profile(db: AsyncSession, data: ProfileCreate) -> UserProfile:
    values = data.model_dump(exclude={"coordinates", "id"})
    if data.id:
        values["id"] = data.id
    if data.coordinates:
        values["latitude"] = data.coordinates.latitude
        values["longitude"] = data.coordinates.longitude
    profile = UserProfile(**values)
    db.add(profile)
    await db.flush()
    await db.refresh(profile)
    return profile


async def get_profile(db: AsyncSession, profile_id: str) -> UserProfile | None:
    result = await db.execute(select(UserProfile).where(UserProfile.id == profile_id))
    return result.scalar_one_or_none()


async def list_profiles(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    availability: str | None = None,
) -> tuple[list[UserProfile], int]:
    query = select(UserProfile)
    count_query = select(func.count()).select_from(UserProfile)

    if availability:
        query = query.where(UserProfile.availability == availability)
        count_query = count_query.where(UserProfile.availability == availability)

    total = (await db.execute(count_query)).scalar_one()
    results = await db.execute(
        query.offset(skip).limit(limit).order_by(UserProfile.created_at.desc(), UserProfile.id)
    )
    return list(results.scalars().all()), total


async def update_profile(
    db: AsyncSession, profile: UserProfile, data: ProfileUpdate
) -> UserProfile:
    update_data = data.model_dump(exclude_unset=True, exclude={"coordinates"})
    for field, value in update_data.items():
        setattr(profile, field, value)
    if "coordinates" in data.model_fields_set:
        coords = data.coordinates
        profile.latitude = coords.latitude if coords else None
        profile.longitude = coords.longitude if coords else None
    await db.flush()
    await db.refresh(profile)
    return profile


async def delete_profile(db: AsyncSession, profile: UserProfile) -> None:
    await db.delete(profile)
    await db.flush()
