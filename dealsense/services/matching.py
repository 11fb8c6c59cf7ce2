"""Profile matching service.

Two independent signals against a user profile:
- Match score (0.0-1.0): relevance from category, keyword and brand overlap
- Filter gate (bool): hard constraints (price ceiling, discount floor,
  excluded keywords)

A deal may score 0 and still pass the gate (no overlap, no violations);
callers must evaluate both.

All comparisons are case-insensitive substring matches.
"""

from typing import Any

from dealsense.models import Profile

CATEGORY_WEIGHT = 0.4
KEYWORD_WEIGHT = 0.4
BRAND_WEIGHT = 0.2

# Stored Deal or any object with title, merchant, category, price_current
# and discount_rate.
DealLike = Any


def find_excluded_keyword(title: str, profile: Profile) -> str | None:
    """Get the first exclude keyword found in the title, if any."""
    title_lower = (title or "").lower()
    for keyword in profile.exclude_keywords:
        if keyword.lower() in title_lower:
            return keyword
    return None


def find_matching_category(category: str, profile: Profile) -> str | None:
    """Get the first profile category contained in the deal category."""
    category_lower = (category or "").lower()
    for cat in profile.categories:
        if cat.lower() in category_lower:
            return cat
    return None


def find_matching_keywords(title: str, profile: Profile) -> list[str]:
    """Get profile keywords contained in the title (profile order, each once)."""
    title_lower = (title or "").lower()
    return [kw for kw in profile.keywords if kw.lower() in title_lower]


def find_matching_brand(title: str, merchant: str, profile: Profile) -> str | None:
    """Get the first profile brand found in the title or merchant."""
    title_lower = (title or "").lower()
    merchant_lower = (merchant or "").lower()
    for brand in profile.brands:
        brand_lower = brand.lower()
        if brand_lower in title_lower or brand_lower in merchant_lower:
            return brand
    return None


def calculate_match_score(deal: DealLike, profile: Profile) -> float:
    """Calculate relevance of a deal to a profile.

    An excluded keyword in the title vetoes the deal (score 0) before any
    other signal is considered.

    Returns:
        Match score (0.0-1.0).
    """
    if find_excluded_keyword(deal.title, profile) is not None:
        return 0.0

    score = 0.0

    if find_matching_category(deal.category, profile) is not None:
        score += CATEGORY_WEIGHT

    if profile.keywords:
        matched = find_matching_keywords(deal.title, profile)
        score += len(matched) / len(profile.keywords) * KEYWORD_WEIGHT

    if find_matching_brand(deal.title, deal.merchant, profile) is not None:
        score += BRAND_WEIGHT

    return round(max(0.0, min(1.0, score)), 4)


def passes_filters(deal: DealLike, profile: Profile) -> bool:
    """Check hard profile constraints.

    Missing discount information fails a discount floor.
    """
    if profile.price_max is not None and deal.price_current > profile.price_max:
        return False

    if profile.min_discount_rate is not None:
        if deal.discount_rate is None or deal.discount_rate < profile.min_discount_rate:
            return False

    if find_excluded_keyword(deal.title, profile) is not None:
        return False

    return True
