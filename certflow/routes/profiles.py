"""
Profile endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from certflow.core.database import get_session
from certflow.core.exceptions import NotFoundError, PersistenceError
from certflow.models.profile import ProfileCreate, ProfileRead
from certflow.handlers.submissions import create_profile, get_profile

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post("/", response_model=ProfileRead, status_code=status.HTTP_201_CREATED)
async def create_profile_endpoint(
    profile: ProfileCreate,
    session: AsyncSession = Depends(get_session)
):
    """Register a new profile."""
    try:
        return await create_profile(session, profile)
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@router.get("/{profile_id}", response_model=ProfileRead)
async def get_profile_endpoint(
    profile_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Get profile by ID."""
    try:
        return await get_profile(session, profile_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
