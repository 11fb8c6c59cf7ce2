"""Deal query service tests (stores patched, no database)."""

from datetime import timedelta

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from dealsense.services import deals as deals_service
from dealsense.services.errors import DealNotFoundError, ProfileNotFoundError
from dealsense.settings import Settings
from dealsense.stores import deals as deals_store
from dealsense.stores import profiles as profiles_store


def patch_stores(monkeypatch: pytest.MonkeyPatch, deals: list, profiles: list = ()) -> dict:
    """Patch store reads with in-memory lists; returns recorded call args."""
    calls: dict = {}
    by_id = {p.profile_id: p for p in profiles}

    async def fake_get_all_deals(session):
        return list(deals)

    async def fake_get_deal(session, deal_id):
        return next((d for d in deals if d.deal_id == deal_id), None)

    async def fake_get_deals_in_window(session, hours, sort="popularity", limit=None, now=None):
        calls["window"] = {"hours": hours, "sort": sort, "limit": limit}
        return list(deals)[:limit] if limit else list(deals)

    async def fake_get_profile(session, profile_id):
        return by_id.get(profile_id)

    monkeypatch.setattr(deals_store, "get_all_deals", fake_get_all_deals)
    monkeypatch.setattr(deals_store, "get_deal", fake_get_deal)
    monkeypatch.setattr(deals_store, "get_deals_in_window", fake_get_deals_in_window)
    monkeypatch.setattr(profiles_store, "get_profile", fake_get_profile)
    return calls


@pytest.fixture
def camping_profile(make_profile):
    return make_profile(
        profile_id="p_camping",
        categories=["캠핑"],
        keywords=["텐트", "침낭"],
        brands=["코베아"],
        price_max=50000,
        exclude_keywords=["중고"],
    )


@pytest.mark.asyncio
async def test_by_interests_unknown_profile(monkeypatch, now) -> None:
    patch_stores(monkeypatch, deals=[])
    with pytest.raises(ProfileNotFoundError) as exc_info:
        await deals_service.get_deals_by_interests(None, "p_missing", now=now)
    assert exc_info.value.detail == {"profile_id": "p_missing"}


@pytest.mark.asyncio
async def test_by_interests_filters_scores_and_explains(
    monkeypatch, make_deal, camping_profile, now
) -> None:
    deals = [
        make_deal(deal_id="d_tent", title="코베아 2인용 텐트", price_current=45000),
        make_deal(deal_id="d_pricey", title="코베아 대형 텐트", price_current=120000),
        make_deal(deal_id="d_used", title="백패킹 침낭 중고급", price_current=42000),
        make_deal(deal_id="d_kitchen", title="냄비세트", category="주방", price_current=28000),
    ]
    patch_stores(monkeypatch, deals, [camping_profile])

    result = await deals_service.get_deals_by_interests(None, "p_camping", now=now)

    assert [i.deal_id for i in result.items] == ["d_tent", "d_kitchen"]
    top = result.items[0]
    assert top.score.match == 0.8
    assert top.why_recommended[:3] == [
        "Matches your interest in 캠핑",
        "Contains keywords: 텐트",
        "From preferred brand: 코베아",
    ]
    assert result.items[1].score.match == 0.0
    assert result.notes == []


@pytest.mark.asyncio
async def test_by_interests_dedupe_keeps_best(monkeypatch, make_deal, camping_profile, now) -> None:
    deals = [
        make_deal(deal_id="d_a", title="코베아 텐트 특가", merchant="캠핑코리아", popularity_score=0.2),
        make_deal(deal_id="d_b", title="[무료배송] 코베아 텐트", merchant="캠핑 코리아", popularity_score=0.9),
    ]
    assert deals[0].fingerprint == deals[1].fingerprint
    patch_stores(monkeypatch, deals, [camping_profile])

    result = await deals_service.get_deals_by_interests(None, "p_camping", now=now)
    assert [i.deal_id for i in result.items] == ["d_b"]
    assert result.notes == ["Removed 1 duplicate deals"]

    kept = await deals_service.get_deals_by_interests(None, "p_camping", dedupe=False, now=now)
    assert [i.deal_id for i in kept.items] == ["d_b", "d_a"]
    assert kept.notes == []


@pytest.mark.asyncio
async def test_by_interests_limit_notes(monkeypatch, make_deal, make_profile, now) -> None:
    profile = make_profile(profile_id="p_all")
    deals = [make_deal(deal_id=f"d_{i:02d}", title=f"상품 {i}", price_current=i * 10000) for i in range(25)]
    patch_stores(monkeypatch, deals, [profile])

    default = await deals_service.get_deals_by_interests(None, "p_all", now=now)
    assert len(default.items) == 20
    assert default.notes == ["Showing top 20 of 25 matches"]

    capped = await deals_service.get_deals_by_interests(None, "p_all", limit=100, now=now)
    assert len(capped.items) == 25
    assert capped.notes == []


@pytest.mark.asyncio
async def test_by_interests_no_matches_note(monkeypatch, make_deal, make_profile, now) -> None:
    profile = make_profile(profile_id="p_cheap", price_max=1000)
    patch_stores(monkeypatch, [make_deal()], [profile])

    result = await deals_service.get_deals_by_interests(None, "p_cheap", now=now)

    assert result.items == []
    assert result.notes == ["No deals match your criteria. Try relaxing filters."]


@pytest.mark.asyncio
async def test_hot_deals_ranks_by_trust_and_popularity(monkeypatch, make_deal, now) -> None:
    deals = [
        make_deal(deal_id="d_risky", title="랜덤 리퍼 텐트", popularity_score=0.9),
        make_deal(deal_id="d_clean", title="코베아 텐트", popularity_score=0.8),
        make_deal(deal_id="d_quiet", title="캠핑 의자", popularity_score=0.1),
    ]
    calls = patch_stores(monkeypatch, deals)

    result = await deals_service.get_hot_deals(None, window="7d", now=now)

    assert calls["window"] == {"hours": 168, "sort": "popularity", "limit": None}
    assert result.window == "7d"
    assert [i.deal_id for i in result.items] == ["d_clean", "d_quiet", "d_risky"]
    assert result.items[0].score.match is None
    assert result.items[0].why_recommended[0] == "High popularity score"
    assert result.items[2].risk_note == "refurbished/used item"


@pytest.mark.asyncio
async def test_hot_deals_discount_sort_keeps_store_order(monkeypatch, make_deal, now) -> None:
    deals = [make_deal(deal_id=f"d_{i:02d}", discount_rate=60 - i) for i in range(12)]
    calls = patch_stores(monkeypatch, deals)

    result = await deals_service.get_hot_deals(None, sort="discount", now=now)

    assert calls["window"] == {"hours": 24, "sort": "discount", "limit": 10}
    assert [i.deal_id for i in result.items] == [f"d_{i:02d}" for i in range(10)]


@pytest.mark.asyncio
async def test_hot_deals_caps_at_ten(monkeypatch, make_deal, now) -> None:
    patch_stores(monkeypatch, [make_deal(deal_id=f"d_{i:02d}") for i in range(15)])
    result = await deals_service.get_hot_deals(None, now=now)
    assert len(result.items) == 10


@pytest.mark.asyncio
async def test_deal_detail_includes_sidecar(monkeypatch, make_deal, now) -> None:
    deal = make_deal(
        deal_id="d_detail",
        title="스노우피크 침낭 겨울용",
        extra={
            "conditions": ["온라인 한정"],
            "observations": ["가격 변동 잦음"],
            "shipping_info": "무료배송",
        },
    )
    patch_stores(monkeypatch, [deal])

    result = await deals_service.get_deal_detail(None, "d_detail", now=now)

    assert result.deal.deal_id == "d_detail"
    assert result.deal.conditions == ["온라인 한정"]
    assert result.deal.observations == ["가격 변동 잦음"]
    assert result.deal.price_components.shipping_included is True
    assert result.deal.price_components.shipping_fee is None
    assert result.deal.score.trust == 1.0


@pytest.mark.asyncio
async def test_deal_detail_not_found(monkeypatch, now) -> None:
    patch_stores(monkeypatch, [])
    with pytest.raises(DealNotFoundError):
        await deals_service.get_deal_detail(None, "d_missing", now=now)


def test_build_list_item_truncates_title(make_deal) -> None:
    deal = make_deal(title="가" * 200)
    item = deals_service.build_list_item(deal, deals_service.create_score(0.5, 0.5))
    assert len(item.title) == 120
    assert item.title.endswith("...")


def test_is_shipping_included() -> None:
    assert deals_service.is_shipping_included("무료배송")
    assert deals_service.is_shipping_included("Free shipping over 30,000")
    assert not deals_service.is_shipping_included("배송비 별도")
    assert not deals_service.is_shipping_included(None)


@pytest.mark.asyncio
async def test_trust_score_skips_cache_when_disabled(monkeypatch, make_deal, now) -> None:
    async def fail_cache(*args, **kwargs):
        raise AssertionError("cache should not be used")

    monkeypatch.setattr(deals_service, "get_trust_score_cache", fail_cache)
    monkeypatch.setattr(deals_service, "is_redis_ready", lambda: False)

    deal = make_deal(posted_at=now - timedelta(days=10), url="https://example.com/1")
    assert await deals_service.get_trust_score(deal, now) == 0.8


@pytest.mark.asyncio
async def test_trust_score_uses_cache_per_day(monkeypatch, make_deal, now) -> None:
    cache: dict = {}

    async def fake_get(deal_id, observed_on):
        return cache.get((deal_id, observed_on))

    async def fake_set(deal_id, observed_on, score):
        cache[(deal_id, observed_on)] = score

    monkeypatch.setattr(deals_service, "get_settings", lambda: Settings(TRUST_CACHE_ENABLED=True))
    monkeypatch.setattr(deals_service, "is_redis_ready", lambda: True)
    monkeypatch.setattr(deals_service, "get_trust_score_cache", fake_get)
    monkeypatch.setattr(deals_service, "set_trust_score_cache", fake_set)

    deal = make_deal(deal_id="d_cached", url="https://example.com/1")
    assert await deals_service.get_trust_score(deal, now) == 1.0
    assert cache == {("d_cached", now.date()): 1.0}

    cache[("d_cached", now.date())] = 0.42
    assert await deals_service.get_trust_score(deal, now) == 0.42


@pytest.mark.asyncio
async def test_trust_score_falls_back_on_cache_error(monkeypatch, make_deal, now) -> None:
    async def broken(*args, **kwargs):
        raise RedisConnectionError("down")

    monkeypatch.setattr(deals_service, "get_settings", lambda: Settings(TRUST_CACHE_ENABLED=True))
    monkeypatch.setattr(deals_service, "is_redis_ready", lambda: True)
    monkeypatch.setattr(deals_service, "get_trust_score_cache", broken)
    monkeypatch.setattr(deals_service, "set_trust_score_cache", broken)

    deal = make_deal(url="https://example.com/1")
    assert await deals_service.get_trust_score(deal, now) == 1.0
