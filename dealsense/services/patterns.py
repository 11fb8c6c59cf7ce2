"""Pattern tables for title normalization, brand hints and trust scoring.

Goal:
- Keep every heuristic literal in one place as named, ordered tables.
- Scoring/normalization code iterates these tables and never embeds phrases.

Important:
- Phrases are matched as literal substrings (lowercased), NOT regex.
- Korean phrases come from the community/shop sources we ingest; English
  equivalents cover manually entered and translated listings.
"""

from __future__ import annotations

from dataclasses import dataclass


# Promotional filler removed from titles before fingerprinting.
NOISE_WORDS: tuple[str, ...] = (
    # Korean
    "무료배송",
    "당일배송",
    "특가",
    "핫딜",
    "쿠폰",
    "세일",
    "할인",
    "오늘만",
    "마감임박",
    "최저가",
    # English (multi-word phrases also match hyphen/underscore joins)
    "free shipping",
    "same day delivery",
    "today only",
    "lowest price",
    "flash sale",
    "hot deal",
    "limited time",
    "coupon",
    "discount",
    "sale",
)


# Curated brand hints. Order is significant: extract_brands() follows it.
CURATED_BRANDS: tuple[str, ...] = (
    "삼성",
    "애플",
    "Apple",
    "LG",
    "나이키",
    "Nike",
    "아디다스",
    "Adidas",
    "코카콜라",
    "네이버",
    "카카오",
)


KIND_OPTIONS = "options"
KIND_STOCK = "stock"
KIND_RANDOM = "random"
KIND_REFURBISHED = "refurbished"
KIND_SHIPPING = "shipping"


@dataclass(frozen=True)
class RiskCategory:
    """A family of title cues that lowers trust.

    `note` is the short label used in list risk notes (None = not surfaced
    there); `warning` is the sentence used by standalone verification.
    """

    kind: str
    keywords: tuple[str, ...]
    penalty: float
    reason_code: str
    warning: str
    note: str | None = None
    url_cues: tuple[str, ...] = ()


RISK_CATEGORIES: tuple[RiskCategory, ...] = (
    RiskCategory(
        kind=KIND_OPTIONS,
        keywords=("옵션", "선택", "추가금", "options", "extra charge"),
        penalty=0.15,
        reason_code="RISK_OPTIONS",
        warning="Options may change the final price.",
        note="options may vary price",
    ),
    RiskCategory(
        kind=KIND_STOCK,
        keywords=("품절", "예약", "sold out", "pre-order", "preorder", "reservation"),
        penalty=0.20,
        reason_code="RISK_STOCK",
        warning="Availability may be unstable.",
        note="availability uncertain",
    ),
    RiskCategory(
        kind=KIND_RANDOM,
        keywords=("랜덤", "무작위", "random"),
        penalty=0.25,
        reason_code="RISK_RANDOM",
        warning="Random selection - exact item not guaranteed.",
    ),
    RiskCategory(
        kind=KIND_REFURBISHED,
        keywords=("리퍼", "리퍼브", "중고", "refurb", "pre-owned", "second hand", "secondhand"),
        penalty=0.30,
        reason_code="RISK_REFURBISHED",
        warning="Refurb/used item possibility.",
        note="refurbished/used item",
    ),
    RiskCategory(
        kind=KIND_SHIPPING,
        keywords=("해외배송", "배송비별도", "overseas shipping", "international shipping", "shipping extra"),
        penalty=0.15,
        reason_code="RISK_SHIPPING",
        warning="Shipping fee may apply.",
        note="shipping fees may apply",
        url_cues=("shipping",),
    ),
)

# Order in which risk-note labels are emitted.
RISK_NOTE_ORDER: tuple[str, ...] = (KIND_OPTIONS, KIND_STOCK, KIND_SHIPPING, KIND_REFURBISHED)

# Order in which verification warnings are emitted.
WARNING_ORDER: tuple[str, ...] = (
    KIND_OPTIONS,
    KIND_STOCK,
    KIND_SHIPPING,
    KIND_REFURBISHED,
    KIND_RANDOM,
)


# Marketplaces whose listings we consider reliable. Matched against the URL
# host (exact or subdomain).
TRUSTED_DOMAINS: tuple[str, ...] = (
    "coupang.com",
    "naver.com",
    "gmarket.com",
    "11st.co.kr",
    "ssg.com",
    "auction.co.kr",
)

TRUSTED_DOMAIN_BONUS = 0.1

# Age decay bands: (min age in days, penalty, reason code), checked in order.
AGE_PENALTIES: tuple[tuple[float, float, str], ...] = (
    (7.0, 0.2, "AGE_OVER_7D"),
    (3.0, 0.1, "AGE_OVER_3D"),
)


def find_category(kind: str) -> RiskCategory:
    """Get a risk category by kind."""
    for category in RISK_CATEGORIES:
        if category.kind == kind:
            return category
    raise KeyError(kind)


def matches_any(text_lower: str, phrases: tuple[str, ...]) -> bool:
    """Check whether any phrase (lowercased) is a substring of text_lower."""
    return any(p.lower() in text_lower for p in phrases)
