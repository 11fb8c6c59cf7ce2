from datetime import timedelta

from dealsense.services.trust import (
    calculate_cue_score,
    calculate_trust_score,
    calculate_trust_score_with_reasons,
    detect_risk_categories,
    get_risk_level,
    is_trusted_domain,
)


def test_clean_fresh_deal_scores_full(make_deal, now) -> None:
    deal = make_deal(title="코베아 텐트", url="https://example.com/1", hours_ago=2)
    score, reasons = calculate_trust_score_with_reasons(deal, now)
    assert score == 1.0
    assert reasons == []


def test_age_over_seven_days(make_deal, now) -> None:
    deal = make_deal(title="코베아 텐트", url="https://example.com/1", posted_at=now - timedelta(days=10))
    score, reasons = calculate_trust_score_with_reasons(deal, now)
    assert score == 0.8
    assert reasons == ["AGE_OVER_7D"]


def test_age_over_three_days(make_deal, now) -> None:
    deal = make_deal(title="코베아 텐트", url="https://example.com/1", posted_at=now - timedelta(days=5))
    assert calculate_trust_score(deal, now) == 0.9


def test_trusted_domain_bonus_is_clamped(make_deal, now) -> None:
    deal = make_deal(title="코베아 텐트", url="https://www.coupang.com/vp/products/1")
    score, reasons = calculate_trust_score_with_reasons(deal, now)
    assert score == 1.0
    assert reasons == ["TRUSTED_DOMAIN", "CLAMPED"]


def test_every_risk_category_clamps_to_zero(make_deal, now) -> None:
    deal = make_deal(title="옵션 품절 랜덤 중고 해외배송", url="https://example.com/1")
    score, reasons = calculate_trust_score_with_reasons(deal, now)
    assert score == 0.0
    assert reasons == [
        "RISK_OPTIONS",
        "RISK_STOCK",
        "RISK_RANDOM",
        "RISK_REFURBISHED",
        "RISK_SHIPPING",
        "CLAMPED",
    ]


def test_keywords_within_a_category_do_not_stack(make_deal, now) -> None:
    deal = make_deal(title="옵션 선택 추가금 텐트", url="https://example.com/1")
    assert calculate_trust_score(deal, now) == 0.85


def test_naive_posted_at_is_treated_as_utc(make_deal, now) -> None:
    naive = (now - timedelta(days=10)).replace(tzinfo=None)
    deal = make_deal(title="텐트", url="https://example.com/1", posted_at=naive)
    assert calculate_trust_score(deal, now) == 0.8


def test_detect_risk_categories_is_case_insensitive() -> None:
    kinds = [c.kind for c in detect_risk_categories("REFURB laptop, SOLD OUT soon")]
    assert kinds == ["stock", "refurbished"]


def test_is_trusted_domain_matches_host_only() -> None:
    assert is_trusted_domain("https://coupang.com/vp/1")
    assert is_trusted_domain("https://shopping.naver.com/item")
    assert not is_trusted_domain("https://coupang.com.evil.io/vp/1")
    assert not is_trusted_domain("https://example.com/?ref=coupang.com")
    assert not is_trusted_domain("")


def test_cue_score_ignores_age() -> None:
    assert calculate_cue_score("리퍼 옵션", "https://example.com/x") == 0.55
    assert calculate_cue_score("", "") == 1.0


def test_get_risk_level_thresholds() -> None:
    assert get_risk_level(1.0) == "low"
    assert get_risk_level(0.8) == "low"
    assert get_risk_level(0.79) == "medium"
    assert get_risk_level(0.5) == "medium"
    assert get_risk_level(0.49) == "high"
    assert get_risk_level(0.0) == "high"
