"""Profile repository (PostgreSQL)."""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealsense.models import Profile
from dealsense.models.profile import generate_profile_id


async def get_profile(session: AsyncSession, profile_id: str) -> Profile | None:
    """Get a profile by id."""
    result = await session.execute(select(Profile).where(Profile.profile_id == profile_id))
    return result.scalar_one_or_none()


async def list_profiles(session: AsyncSession, profile_id: str | None = None) -> list[Profile]:
    """List profiles, most recently updated first (optionally a single id)."""
    query = select(Profile).order_by(Profile.updated_at.desc(), Profile.profile_id.asc())
    if profile_id:
        query = query.where(Profile.profile_id == profile_id)
    result = await session.execute(query)
    return list(result.scalars().all())


async def upsert_profile(
    session: AsyncSession,
    *,
    profile_id: str | None,
    categories: list[str],
    keywords: list[str],
    brands: list[str],
    exclude_keywords: list[str],
    price_max: int | None,
    min_discount_rate: float | None,
) -> Profile:
    """Create a profile or replace the facets of an existing one.

    A new id is generated when `profile_id` is empty; created_at is kept on
    update.
    """
    profile = None
    if profile_id:
        profile = await get_profile(session, profile_id)

    if profile is None:
        profile = Profile(profile_id=profile_id or generate_profile_id())
        session.add(profile)

    profile.categories = categories
    profile.keywords = keywords
    profile.brands = brands
    profile.exclude_keywords = exclude_keywords
    profile.price_max = price_max
    profile.min_discount_rate = min_discount_rate

    await session.flush()
    await session.refresh(profile)
    return profile


async def delete_profile(session: AsyncSession, profile_id: str) -> bool:
    """Delete a profile.

    Returns:
        True if a row was deleted.
    """
    result = await session.execute(delete(Profile).where(Profile.profile_id == profile_id))
    return result.rowcount > 0


async def count_profiles(session: AsyncSession) -> int:
    """Count stored profiles."""
    result = await session.execute(select(func.count()).select_from(Profile))
    return result.scalar_one()
