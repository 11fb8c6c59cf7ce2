"""Interest profile service: upsert, list, delete.

Profile terms are normalized on write (trimmed, empties dropped,
case-insensitive duplicates dropped, first spelling and order kept).
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from dealsense.models import Profile
from dealsense.schemas import (
    NormalizedProfile,
    ProfileDeleteResponse,
    ProfileInput,
    ProfileListItem,
    ProfileListResponse,
    ProfileOutput,
)
from dealsense.services.errors import ProfileNotFoundError
from dealsense.services.normalize import create_profile_summary, normalize_terms
from dealsense.stores import profiles as profiles_store

logger = logging.getLogger("uvicorn.error")


def _normalized(profile: Profile) -> NormalizedProfile:
    return NormalizedProfile(
        categories=profile.categories,
        keywords=profile.keywords,
        brands=profile.brands,
        price_max=profile.price_max,
        min_discount_rate=profile.min_discount_rate,
        exclude_keywords=profile.exclude_keywords,
    )


def to_profile_output(profile: Profile) -> ProfileOutput:
    """Build the upsert response for a stored profile."""
    return ProfileOutput(
        profile_id=profile.profile_id,
        summary=create_profile_summary(profile),
        normalized=_normalized(profile),
    )


async def upsert_interests(session: AsyncSession, data: ProfileInput) -> ProfileOutput:
    """Create or update a profile from user input."""
    profile = await profiles_store.upsert_profile(
        session,
        profile_id=(data.profile_id or "").strip() or None,
        categories=normalize_terms(data.categories),
        keywords=normalize_terms(data.keywords),
        brands=normalize_terms(data.brands),
        exclude_keywords=normalize_terms(data.exclude_keywords),
        price_max=data.price_max,
        min_discount_rate=data.min_discount_rate,
    )
    logger.info(f"Profile upserted: {profile.profile_id}")
    return to_profile_output(profile)


async def list_interests(session: AsyncSession, profile_id: str | None = None) -> ProfileListResponse:
    """List saved profiles (or just one when profile_id is given)."""
    profiles = await profiles_store.list_profiles(session, profile_id)
    return ProfileListResponse(
        profiles=[
            ProfileListItem(
                profile_id=p.profile_id,
                summary=create_profile_summary(p),
                normalized=_normalized(p),
                updated_at=p.updated_at,
            )
            for p in profiles
        ]
    )


async def delete_interests(session: AsyncSession, profile_id: str) -> ProfileDeleteResponse:
    """Delete a profile.

    Raises:
        ProfileNotFoundError: Unknown profile_id.
    """
    deleted = await profiles_store.delete_profile(session, profile_id)
    if not deleted:
        raise ProfileNotFoundError(profile_id)
    logger.info(f"Profile deleted: {profile_id}")
    return ProfileDeleteResponse()
