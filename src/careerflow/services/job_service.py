from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from careerflow.models.job import JobPosting
from careerflow.schemas.job import JobCreate, JobUpdate


async def create_job(db: AsyncSession, data: JobCreate) -> JobPosting:
    values = data.model_dump(exclude={"coordinates"})
    if data.coordinates:
        values["latitude"] = data.coordinates.latitude
        values["longitude"] = data.coordinates.longitude
    job = JobPosting(**values)
    db.add(job)
    await db.flush()
    await db.refresh(job)
    return job


async def get_job(db: AsyncSession, job_id: str) -> JobPosting | None:
    result = await db.execute(select(JobPosting).where(JobPosting.id == job_id))
    return result.scalar_one_or_none()


async def list_jobs(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    is_active: bool | None = None,
    category: str | None = None,
) -> tuple[list[JobPosting], int]:
    query = select(JobPosting)
    count_query = select(func.count()).select_from(JobPosting)

    if is_active is not None:
        query = query.where(JobPosting.is_active == is_active)
        count_query = count_query.where(JobPosting.is_active == is_active)
    if category:
        query = query.where(JobPosting.category == category)
        count_query = count_query.where(JobPosting.category == category)

    total = (await db.execute(count_query)).scalar_one()
    results = await db.execute(
        query.offset(skip).limit(limit).order_by(JobPosting.created_at.desc(), JobPosting.id)
    )
    return list(results.scalars().all()), total


async def list_active_jobs(db: AsyncSession) -> list[JobPosting]:
    """Every active internal posting, the universe the matcher ranks."""
    results = await db.execute(
        select(JobPosting).where(JobPosting.is_active.is_(True)).order_by(JobPosting.id)
    )
    return list(results.scalars().all())


async def update_job(db: AsyncSession, job: JobPosting, data: JobUpdate) -> JobPosting:
    update_data = data.model_dump(exclude_unset=True, exclude={"coordinates"})
    for field, value in update_data.items():
        setattr(job, field, value)
    if "coordinates" in data.model_fields_set:
        coords = data.coordinates
        job.latitude = coords.latitude if coords else None
        job.longitude = coords.longitude if coords else None
    await db.flush()
    await db.refresh(job)
    return job


async def delete_job(db: AsyncSession, job: JobPosting) -> None:
    await db.delete(job)
    await db.flush()
