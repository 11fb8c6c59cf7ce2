"""Explanation service: short human-readable justifications.

Builds the strings attached to list items and verification results from
the same signals the scorers use:
- why_recommended: profile overlap and strong numbers, fixed precedence
- risk_note: comma-joined labels for risk cue families in the title
- trending reasons (hot list), warnings and notes (verify)
"""

from datetime import datetime

from dealsense.models import Profile
from dealsense.services.matching import (
    DealLike,
    find_matching_brand,
    find_matching_category,
    find_matching_keywords,
)
from dealsense.services.normalize import truncate
from dealsense.services.patterns import (
    RISK_NOTE_ORDER,
    WARNING_ORDER,
    find_category,
    matches_any,
)
from dealsense.services.trust import RISK_LEVEL_LOW_MIN, RISK_LEVEL_MEDIUM_MIN, get_age_days

MAX_WHY_REASONS = 5
MAX_KEYWORDS_SHOWN = 3
MAX_TRENDING_REASONS = 3
MAX_WARNINGS = 5
MAX_VERIFY_NOTES = 3
RISK_NOTE_MAX_LEN = 140

HIGH_DISCOUNT_RATE = 30
STRONG_MATCH_SCORE = 0.8
HIGH_POPULARITY_SCORE = 0.7
RECENT_POSTING_HOURS = 24
LONG_TITLE_LEN = 100
SAMPLE_URL_HOST = "example.com"


def generate_why_recommended(
    deal: DealLike,
    profile: Profile,
    match_score: float,
) -> list[str]:
    """Explain why a deal was recommended for a profile.

    Precedence: category, keywords (up to 3), brand, high discount,
    strong match. At most 5 reasons.
    """
    reasons: list[str] = []

    category = find_matching_category(deal.category, profile)
    if category is not None:
        reasons.append(f"Matches your interest in {category}")

    keywords = find_matching_keywords(deal.title, profile)
    if keywords:
        reasons.append(f"Contains keywords: {', '.join(keywords[:MAX_KEYWORDS_SHOWN])}")

    brand = find_matching_brand(deal.title, deal.merchant, profile)
    if brand is not None:
        reasons.append(f"From preferred brand: {brand}")

    if deal.discount_rate is not None and deal.discount_rate >= HIGH_DISCOUNT_RATE:
        reasons.append(f"High discount rate: {deal.discount_rate}%")

    if match_score >= STRONG_MATCH_SCORE:
        reasons.append("Strong match with your profile")

    return reasons[:MAX_WHY_REASONS]


def generate_risk_note(deal: DealLike) -> str | None:
    """Summarize risk cues in the title, or None when there are none."""
    title_lower = (deal.title or "").lower()
    labels = []
    for kind in RISK_NOTE_ORDER:
        category = find_category(kind)
        if matches_any(title_lower, category.keywords):
            labels.append(category.note)

    if not labels:
        return None
    return truncate(", ".join(labels), RISK_NOTE_MAX_LEN)


def generate_trending_reasons(deal: DealLike, popularity: float, now: datetime) -> list[str]:
    """Reasons a deal shows up in the hot list."""
    reasons: list[str] = []

    if popularity >= HIGH_POPULARITY_SCORE:
        reasons.append("High popularity score")

    if deal.discount_rate is not None and deal.discount_rate >= HIGH_DISCOUNT_RATE:
        reasons.append(f"High discount rate: {deal.discount_rate}%")

    if get_age_days(deal.posted_at, now) * 24 <= RECENT_POSTING_HOURS:
        reasons.append("Recent posting")

    if not reasons:
        reasons.append("Trending deal")

    return reasons[:MAX_TRENDING_REASONS]


def generate_warnings(title: str, url: str) -> list[str]:
    """One warning per risk family present in the title (or URL cue)."""
    title_lower = (title or "").lower()
    url_lower = (url or "").lower()
    warnings = []
    for kind in WARNING_ORDER:
        category = find_category(kind)
        if matches_any(title_lower, category.keywords) or matches_any(url_lower, category.url_cues):
            warnings.append(category.warning)
    return warnings[:MAX_WARNINGS]


def generate_verify_notes(title: str, url: str, trust_score: float) -> list[str]:
    """Summary notes for a verification result."""
    if trust_score >= RISK_LEVEL_LOW_MIN:
        notes = ["Deal appears trustworthy based on analysis"]
    elif trust_score >= RISK_LEVEL_MEDIUM_MIN:
        notes = ["Moderate risk detected - verify details carefully"]
    else:
        notes = ["High risk detected - proceed with caution"]

    if SAMPLE_URL_HOST in (url or ""):
        notes.append("Sample URL - verify actual merchant domain")

    if len(title or "") > LONG_TITLE_LEN:
        notes.append("Long title may indicate complex conditions")

    return notes[:MAX_VERIFY_NOTES]
