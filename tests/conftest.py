"""Shared test factories.

Deals and profiles are built as detached ORM objects; nothing here touches
a database.
"""

import json
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest

from dealsense.models import Deal, Profile
from dealsense.services.dedup import generate_fingerprint

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_deal() -> Callable[..., Deal]:
    def _make(
        deal_id: str = "d_0001",
        title: str = "코베아 2인용 텐트",
        price_current: int = 45000,
        price_original: int | None = 89000,
        discount_rate: int | None = 49,
        source: str = "shop",
        merchant: str = "캠핑코리아",
        url: str = "https://example.com/deals/1",
        category: str = "캠핑",
        posted_at: datetime | None = None,
        hours_ago: float = 1,
        popularity_score: float = 0.5,
        trust_score: float = 1.0,
        fingerprint: str | None = None,
        extra: dict | None = None,
    ) -> Deal:
        deal = Deal(
            deal_id=deal_id,
            title=title,
            price_current=price_current,
            price_original=price_original,
            discount_rate=discount_rate,
            source=source,
            merchant=merchant,
            url=url,
            category=category,
            posted_at=posted_at or NOW - timedelta(hours=hours_ago),
            popularity_score=popularity_score,
            trust_score=trust_score,
            extra_json=json.dumps(extra or {}, ensure_ascii=False),
        )
        deal.fingerprint = fingerprint if fingerprint is not None else generate_fingerprint(deal)
        return deal

    return _make


@pytest.fixture
def make_profile() -> Callable[..., Profile]:
    # ORM list defaults only apply on flush, so every facet is set here.
    def _make(
        profile_id: str = "p_test",
        categories: list[str] | None = None,
        keywords: list[str] | None = None,
        brands: list[str] | None = None,
        exclude_keywords: list[str] | None = None,
        price_max: int | None = None,
        min_discount_rate: float | None = None,
        updated_at: datetime | None = None,
    ) -> Profile:
        return Profile(
            profile_id=profile_id,
            categories=categories or [],
            keywords=keywords or [],
            brands=brands or [],
            exclude_keywords=exclude_keywords or [],
            price_max=price_max,
            min_discount_rate=min_discount_rate,
            created_at=updated_at or NOW,
            updated_at=updated_at or NOW,
        )

    return _make
