"""Ingestion service: sources → normalize → fingerprint → trust → DB.

Flow:
1. Naver Shopping search for each configured category (skipped without
   credentials)
2. Ppomppu community RSS feed
3. Normalize each candidate into a Deal (stable id from URL, discount rate,
   neutral popularity)
4. Compute fingerprint and trust score
5. Insert-or-replace inside a savepoint

Failure policy:
- A failing source is logged and skipped; the run continues
- A row the database rejects (IntegrityError, DataError) is logged and skipped
"""

import hashlib
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dealsense.models import Deal
from dealsense.services.dedup import generate_fingerprint
from dealsense.services.errors import IngestionSourceError
from dealsense.services.naver_client import NaverShoppingClient, get_naver_client
from dealsense.services.normalize import calculate_discount_rate
from dealsense.services.ppomppu_feed import fetch_ppomppu_deals
from dealsense.services.raw_deal import RawDealCandidate
from dealsense.services.trust import calculate_trust_score
from dealsense.settings import get_settings
from dealsense.stores.deals import upsert_deal

logger = logging.getLogger("uvicorn.error")

# Popularity is an external signal; until one is wired in, every ingested
# deal gets the same neutral value.
DEFAULT_POPULARITY = 0.5
TITLE_MAX_LEN = 120
DEFAULT_MERCHANT = "Unknown"
DEFAULT_CATEGORY = "기타"


@dataclass
class IngestionStats:
    """Statistics from an ingestion run."""

    shop_fetched: int = 0
    community_fetched: int = 0
    stored: int = 0
    skipped: int = 0
    source_errors: int = 0

    @property
    def total_fetched(self) -> int:
        return self.shop_fetched + self.community_fetched


def make_deal_id(url: str) -> str:
    """Stable deal id derived from the listing URL."""
    return f"d_{hashlib.sha256(url.encode()).hexdigest()[:16]}"


def build_deal(candidate: RawDealCandidate, now: datetime) -> Deal:
    """Normalize a raw candidate into a Deal with derived fields."""
    price_current = max(candidate.price_current or 0, 0)
    extra: dict[str, object] = {}
    if candidate.conditions:
        extra["conditions"] = candidate.conditions
    if candidate.shipping_info:
        extra["shipping_info"] = candidate.shipping_info
    if candidate.brand:
        extra["brand"] = candidate.brand
    if candidate.image:
        extra["image"] = candidate.image

    deal = Deal(
        deal_id=make_deal_id(candidate.url),
        title=candidate.title[:TITLE_MAX_LEN],
        price_current=price_current,
        price_original=candidate.price_original,
        discount_rate=calculate_discount_rate(price_current, candidate.price_original),
        source=candidate.source or "shop",
        merchant=candidate.merchant or DEFAULT_MERCHANT,
        url=candidate.url,
        category=candidate.category or DEFAULT_CATEGORY,
        posted_at=candidate.posted_at or now,
        popularity_score=DEFAULT_POPULARITY,
        extra_json=json.dumps(extra, ensure_ascii=False),
    )
    deal.fingerprint = generate_fingerprint(deal)
    deal.trust_score = calculate_trust_score(deal, now)
    return deal


async def collect_candidates(
    stats: IngestionStats,
    categories: list[str] | None = None,
    naver_client: NaverShoppingClient | None = None,
    rss_url: str | None = None,
) -> list[RawDealCandidate]:
    """Fetch candidates from every source, skipping failing ones."""
    settings = get_settings()
    categories = categories if categories is not None else settings.ingest_categories
    client = naver_client or get_naver_client()
    candidates: list[RawDealCandidate] = []

    if client.is_configured:
        for category in categories:
            try:
                results = await client.search(category)
            except IngestionSourceError as e:
                logger.error(f"[Naver] Error for {category}: {e}")
                stats.source_errors += 1
                continue
            candidates.extend(results)
            stats.shop_fetched += len(results)
            logger.info(f"[Naver] Fetched {len(results)} deals for {category}")
    else:
        logger.info("[Naver] Credentials not configured, skipping shop source")

    try:
        community = await fetch_ppomppu_deals(rss_url)
    except IngestionSourceError as e:
        logger.error(f"[Ppomppu] Error: {e}")
        stats.source_errors += 1
    else:
        candidates.extend(community)
        stats.community_fetched += len(community)
        logger.info(f"[Ppomppu] Fetched {len(community)} deals")

    return candidates


async def store_candidates(
    session: AsyncSession,
    candidates: list[RawDealCandidate],
    stats: IngestionStats,
    now: datetime | None = None,
) -> None:
    """Normalize and insert-or-replace candidates (one savepoint each)."""
    now = now or datetime.now(timezone.utc)
    for candidate in candidates:
        if not candidate.url or not candidate.title:
            logger.warning(f"Skipping candidate without url/title: {candidate!r}")
            stats.skipped += 1
            continue

        deal = build_deal(candidate, now)
        try:
            async with session.begin_nested():
                await upsert_deal(session, deal)
        except (IntegrityError, DataError) as e:
            logger.warning(f"Skipping deal {deal.deal_id} ({deal.url}): {e.orig}")
            stats.skipped += 1
            continue
        stats.stored += 1


async def run_ingestion(
    session: AsyncSession,
    categories: list[str] | None = None,
    naver_client: NaverShoppingClient | None = None,
    rss_url: str | None = None,
) -> IngestionStats:
    """Run one full ingestion pass.

    Args:
        session: Database session (caller commits).
        categories: Shop queries (defaults to INGEST_CATEGORIES).
        naver_client: Shop client override.
        rss_url: Community feed override.

    Returns:
        IngestionStats with per-source and storage counts.
    """
    stats = IngestionStats()
    logger.info("[Ingestion] Starting data collection...")

    candidates = await collect_candidates(stats, categories, naver_client, rss_url)
    await store_candidates(session, candidates, stats)

    logger.info(
        f"[Ingestion] Completed: fetched={stats.total_fetched}, stored={stats.stored}, "
        f"skipped={stats.skipped}, source_errors={stats.source_errors}"
    )
    return stats
