"""Deal query service: hot list, personalized list, detail.

Per request:
1. Sample the clock once (`now`) and thread it through every trust call
2. Load deals from the store (explicit session)
3. Filter / score / rank with the pure core functions
4. Optionally collapse near-duplicates, then re-sort
5. Annotate with reasons and risk notes

Trust scores are recomputed per request. When TRUST_CACHE_ENABLED is set
and Redis is up, scores are cached per (deal_id, observation date); any
cache error falls back to recomputation.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal

from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from dealsense.models import Deal
from dealsense.schemas import (
    DealDetail,
    DealDetailResponse,
    DealListItem,
    HotDealsResponse,
    InterestDealsResponse,
    PriceComponents,
    Score,
)
from dealsense.services.dedup import deduplicate_deals
from dealsense.services.errors import DealNotFoundError, ProfileNotFoundError
from dealsense.services.explain import (
    generate_risk_note,
    generate_trending_reasons,
    generate_why_recommended,
)
from dealsense.services.matching import calculate_match_score, passes_filters
from dealsense.services.normalize import truncate
from dealsense.services.ranking import calculate_combined_score, create_score, rank_by_combined_score
from dealsense.services.trust import calculate_trust_score
from dealsense.settings import get_settings
from dealsense.stores import deals as deals_store
from dealsense.stores import profiles as profiles_store
from dealsense.stores.redis import get_trust_score_cache, is_redis_ready, set_trust_score_cache

logger = logging.getLogger("uvicorn.error")

Window = Literal["24h", "7d"]
HotSort = Literal["popularity", "discount"]

WINDOW_HOURS: dict[str, int] = {"24h": 24, "7d": 168}
HOT_LIMIT = 10
DEFAULT_INTEREST_LIMIT = 20
MAX_INTEREST_LIMIT = 30
MAX_NOTES = 3
TITLE_MAX_LEN = 120

NOTE_NO_MATCHES = "No deals match your criteria. Try relaxing filters."
FREE_SHIPPING_MARKERS = ("무료", "free")


@dataclass
class ScoredDeal:
    """A deal with its per-request score."""

    deal: Deal
    score: Score

    @property
    def combined(self) -> float:
        return calculate_combined_score(self.score)


# ============================================================
# Trust (with optional per-day cache)
# ============================================================


async def get_trust_score(deal: Deal, now: datetime) -> float:
    """Trust score for a stored deal at `now`, cached per observation date."""
    settings = get_settings()
    use_cache = settings.trust_cache_enabled and is_redis_ready()
    observed_on = now.date()

    if use_cache:
        try:
            cached = await get_trust_score_cache(deal.deal_id, observed_on)
            if cached is not None:
                return cached
        except (RedisError, ValueError) as e:
            logger.warning(f"Trust cache read failed for {deal.deal_id}: {e}")

    score = calculate_trust_score(deal, now)

    if use_cache:
        try:
            await set_trust_score_cache(deal.deal_id, observed_on, score)
        except RedisError as e:
            logger.warning(f"Trust cache write failed for {deal.deal_id}: {e}")

    return score


# ============================================================
# Response builders
# ============================================================


def build_list_item(
    deal: Deal,
    score: Score,
    why_recommended: list[str] | None = None,
) -> DealListItem:
    """Convert a stored deal into a list item (title truncated for display)."""
    return DealListItem(
        deal_id=deal.deal_id,
        title=truncate(deal.title, TITLE_MAX_LEN),
        price_current=deal.price_current,
        price_original=deal.price_original,
        discount_rate=deal.discount_rate,
        source=deal.source,
        merchant=deal.merchant,
        url=deal.url,
        category=deal.category,
        posted_at=deal.posted_at,
        score=score,
        why_recommended=why_recommended or [],
        risk_note=generate_risk_note(deal),
    )


def is_shipping_included(shipping_info: str | None) -> bool:
    """Check whether shipping info advertises free shipping."""
    if not shipping_info:
        return False
    info = shipping_info.lower()
    return any(marker in info for marker in FREE_SHIPPING_MARKERS)


# ============================================================
# Queries
# ============================================================


async def get_hot_deals(
    session: AsyncSession,
    window: Window = "24h",
    sort: HotSort = "popularity",
    now: datetime | None = None,
) -> HotDealsResponse:
    """Top trending deals posted within the window.

    `popularity` ranks by combined score (trust + popularity, no match);
    `discount` keeps the store order (discount DESC, nulls last).
    """
    now = now or datetime.now(timezone.utc)
    hours = WINDOW_HOURS[window]

    if sort == "discount":
        deals = await deals_store.get_deals_in_window(session, hours, "discount", HOT_LIMIT, now)
    else:
        deals = await deals_store.get_deals_in_window(session, hours, "popularity", None, now)

    scored = [
        ScoredDeal(deal, create_score(deal.popularity_score, await get_trust_score(deal, now)))
        for deal in deals
    ]
    if sort != "discount":
        scored = rank_by_combined_score(scored, lambda s: s.score)

    items = [
        build_list_item(
            s.deal,
            s.score,
            generate_trending_reasons(s.deal, s.score.popularity, now),
        )
        for s in scored[:HOT_LIMIT]
    ]
    return HotDealsResponse(window=window, items=items)


async def get_deals_by_interests(
    session: AsyncSession,
    profile_id: str,
    limit: int | None = None,
    dedupe: bool = True,
    now: datetime | None = None,
) -> InterestDealsResponse:
    """Personalized, ranked deals for a saved profile.

    Raises:
        ProfileNotFoundError: Unknown profile_id.
    """
    profile = await profiles_store.get_profile(session, profile_id)
    if profile is None:
        raise ProfileNotFoundError(profile_id)

    now = now or datetime.now(timezone.utc)
    notes: list[str] = []

    deals = await deals_store.get_all_deals(session)
    filtered = [d for d in deals if passes_filters(d, profile)]
    if not filtered:
        notes.append(NOTE_NO_MATCHES)

    scored = []
    for deal in filtered:
        match = calculate_match_score(deal, profile)
        trust = await get_trust_score(deal, now)
        scored.append(ScoredDeal(deal, create_score(deal.popularity_score, trust, match)))

    ranked = rank_by_combined_score(scored, lambda s: s.score)

    if dedupe:
        before = len(ranked)
        ranked = deduplicate_deals(
            ranked,
            score_fn=lambda s: s.combined,
            key_fn=lambda s: s.deal.fingerprint,
        )
        ranked = rank_by_combined_score(ranked, lambda s: s.score)
        removed = before - len(ranked)
        if removed > 0:
            notes.append(f"Removed {removed} duplicate deals")

    effective_limit = min(limit or DEFAULT_INTEREST_LIMIT, MAX_INTEREST_LIMIT)
    limited = ranked[:effective_limit]
    if len(limited) < len(ranked):
        notes.append(f"Showing top {len(limited)} of {len(ranked)} matches")

    items = [
        build_list_item(
            s.deal,
            s.score,
            generate_why_recommended(s.deal, profile, s.score.match or 0.0),
        )
        for s in limited
    ]

    logger.info(
        f"by_interests profile={profile_id}: total={len(deals)} passed={len(filtered)} "
        f"returned={len(items)} dedupe={dedupe}"
    )
    return InterestDealsResponse(items=items, notes=notes[:MAX_NOTES])


async def get_deal_detail(
    session: AsyncSession,
    deal_id: str,
    now: datetime | None = None,
) -> DealDetailResponse:
    """Full detail for one deal, including sidecar facts.

    Raises:
        DealNotFoundError: Unknown deal_id.
    """
    deal = await deals_store.get_deal(session, deal_id)
    if deal is None:
        raise DealNotFoundError(deal_id)

    now = now or datetime.now(timezone.utc)
    score = create_score(deal.popularity_score, await get_trust_score(deal, now))
    item = build_list_item(deal, score)
    extra = deal.extra

    detail = DealDetail(
        **item.model_dump(exclude={"score"}),
        score=score,
        conditions=extra.conditions,
        observations=extra.observations,
        price_components=PriceComponents(
            shipping_included=is_shipping_included(extra.shipping_info),
            shipping_fee=extra.shipping_fee,
        ),
    )
    return DealDetailResponse(deal=detail)
