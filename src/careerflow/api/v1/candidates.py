from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from careerflow.api.deps import get_db
from careerflow.core.exceptions import CandidateNotFoundError, ConflictError
from careerflow.schemas import PaginatedResponse
from careerflow.schemas.profile import Availability, ProfileCreate, ProfileRead, ProfileUpdate
from careerflow.services import profile_service

router = APIRouter(prefix="/candidates", tags=["candidates"])


@router.post("/", response_model=ProfileRead, status_code=status.HTTP_201_CREATED)
async def create_candidate(
    data: ProfileCreate,
    db: AsyncSession = Depends(get_db),
) -> ProfileRead:
    try:
        profile = await profile_service.create_profile(db, data)
    except IntegrityError as e:
        raise ConflictError("A candidate with this id or email already exists") from e
    return ProfileRead.model_validate(profile)


@router.get("/", response_model=PaginatedResponse[ProfileRead])
async def list_candidates(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    availability: Availability | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[ProfileRead]:
    items, total = await profile_service.list_profiles(db, skip, limit, availability)
    return PaginatedResponse(
        items=[ProfileRead.model_validate(p) for p in items],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/{candidate_id}", response_model=ProfileRead)
async def get_candidate(
    candidate_id: str,
    db: AsyncSession = Depends(get_db),
) -> ProfileRead:
    profile = await profile_service.get_profile(db, candidate_id)
    if not profile:
        raise CandidateNotFoundError(candidate_id)
    return ProfileRead.model_validate(profile)


@router.patch("/{candidate_id}", response_model=ProfileRead)
async def update_candidate(
    candidate_id: str,
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
) -> ProfileRead:
    profile = await profile_service.get_profile(db, candidate_id)
    if not profile:
        raise CandidateNotFoundError(candidate_id)
    try:
        updated = await profile_service.update_profile(db, profile, data)
    except IntegrityError as e:
        raise ConflictError(f"A candidate with email '{data.email}' already exists") from e
    return ProfileRead.model_validate(updated)


@router.delete("/{candidate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_candidate(
    candidate_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    profile = await profile_service.get_profile(db, candidate_id)
    if not profile:
        raise CandidateNotFoundError(candidate_id)
    await profile_service.delete_profile(db, profile)
