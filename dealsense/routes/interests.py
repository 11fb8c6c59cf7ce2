"""Interest profile endpoints.

POST   /v1/interests               - Create or update a profile
GET    /v1/interests               - List profiles (optionally one id)
DELETE /v1/interests/{profile_id}  - Delete a profile
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealsense.schemas import (
    ErrorResponse,
    ProfileDeleteResponse,
    ProfileInput,
    ProfileListResponse,
    ProfileOutput,
)
from dealsense.services.interests import delete_interests, list_interests, upsert_interests
from dealsense.stores.postgres import get_db_session

router = APIRouter()


@router.post("", response_model=ProfileOutput)
async def upsert_profile(
    body: ProfileInput,
    session: AsyncSession = Depends(get_db_session),
) -> ProfileOutput:
    """Create or update an interest profile.

    Returns a profile_id usable with /v1/deals/by-interests.
    """
    return await upsert_interests(session, body)


@router.get("", response_model=ProfileListResponse)
async def get_profiles(
    profile_id: str | None = Query(default=None, description="Return only this profile"),
    session: AsyncSession = Depends(get_db_session),
) -> ProfileListResponse:
    """List saved interest profiles, most recently updated first."""
    return await list_interests(session, profile_id)


@router.delete(
    "/{profile_id}",
    response_model=ProfileDeleteResponse,
    responses={404: {"model": ErrorResponse}},
)
async def remove_profile(
    profile_id: str = Path(..., description="Profile ID"),
    session: AsyncSession = Depends(get_db_session),
) -> ProfileDeleteResponse:
    """Delete an interest profile. This cannot be undone."""
    return await delete_interests(session, profile_id)
