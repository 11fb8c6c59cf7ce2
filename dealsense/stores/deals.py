"""Deal repository (PostgreSQL).

Query helpers over the deals table. All list queries return a
deterministic order (posted_at DESC, then deal_id ASC as tie-break) so
stable sorts downstream produce stable results.
"""

from datetime import datetime, timedelta, timezone
from typing import Literal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealsense.models import Deal

SortKey = Literal["popularity", "discount"]


async def get_deal(session: AsyncSession, deal_id: str) -> Deal | None:
    """Get a single deal by id."""
    result = await session.execute(select(Deal).where(Deal.deal_id == deal_id))
    return result.scalar_one_or_none()


async def get_all_deals(session: AsyncSession) -> list[Deal]:
    """Get every stored deal, newest first."""
    result = await session.execute(
        select(Deal).order_by(Deal.posted_at.desc(), Deal.deal_id.asc())
    )
    return list(result.scalars().all())


async def get_deals_in_window(
    session: AsyncSession,
    hours: int,
    sort: SortKey = "popularity",
    limit: int | None = None,
    now: datetime | None = None,
) -> list[Deal]:
    """Get deals posted within the last `hours`.

    Args:
        session: Database session.
        hours: Window size in hours.
        sort: "popularity" (popularity_score DESC) or "discount"
            (discount_rate DESC, nulls last).
        limit: Maximum rows (None = no limit).
        now: Reference time for the window.

    Returns:
        Deals in the requested order.
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(hours=hours)

    if sort == "discount":
        primary = Deal.discount_rate.desc().nulls_last()
    else:
        primary = Deal.popularity_score.desc()

    query = (
        select(Deal)
        .where(Deal.posted_at >= cutoff)
        .order_by(primary, Deal.posted_at.desc(), Deal.deal_id.asc())
    )
    if limit is not None:
        query = query.limit(limit)

    result = await session.execute(query)
    return list(result.scalars().all())


async def upsert_deal(session: AsyncSession, deal: Deal) -> Deal:
    """Insert or replace a deal by deal_id."""
    merged = await session.merge(deal)
    await session.flush()
    return merged


async def count_deals(session: AsyncSession) -> int:
    """Count stored deals."""
    result = await session.execute(select(func.count()).select_from(Deal))
    return result.scalar_one()
