"""Trust score calculation service.

Trust Score (0.0-1.0) estimates how likely a listing's terms are as
advertised. Starting from 1.0:
- Risk cues in the title (options pricing, stock uncertainty, random items,
  refurbished/used, overseas/extra shipping): one penalty per category
- Trusted marketplace domain: flat bonus, once
- Listing age: -0.1 after 3 days, -0.2 after 7 days
- Result clamped to [0, 1]

The clock is the only time-varying input; callers sample `now` once per
request and pass it through so a scoring pass stays internally consistent.
"""

from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlparse

from dealsense.services.patterns import (
    AGE_PENALTIES,
    RISK_CATEGORIES,
    TRUSTED_DOMAIN_BONUS,
    TRUSTED_DOMAINS,
    RiskCategory,
    matches_any,
)

RISK_LEVEL_LOW_MIN = 0.8
RISK_LEVEL_MEDIUM_MIN = 0.5

# Stored Deal or any object with title, url and posted_at.
DealLike = Any


def detect_risk_categories(title: str) -> list[RiskCategory]:
    """Get risk categories whose cues appear in the title (table order)."""
    title_lower = (title or "").lower()
    return [c for c in RISK_CATEGORIES if matches_any(title_lower, c.keywords)]


def is_trusted_domain(url: str) -> bool:
    """Check whether the URL host is (a subdomain of) a trusted marketplace."""
    try:
        host = (urlparse(url or "").hostname or "").lower()
    except ValueError:
        return False
    if not host:
        return False
    return any(host == d or host.endswith(f".{d}") for d in TRUSTED_DOMAINS)


def get_age_days(posted_at: datetime, now: datetime) -> float:
    """Age of a posting in days (naive timestamps are treated as UTC)."""
    if posted_at.tzinfo is None:
        posted_at = posted_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - posted_at).total_seconds() / 86400


def _cue_adjustments(title: str, url: str) -> tuple[float, list[str]]:
    score = 1.0
    reasons: list[str] = []

    for category in detect_risk_categories(title):
        score -= category.penalty
        reasons.append(category.reason_code)

    if is_trusted_domain(url):
        score += TRUSTED_DOMAIN_BONUS
        reasons.append("TRUSTED_DOMAIN")

    return score, reasons


def _clamp(score: float, reasons: list[str]) -> float:
    clamped = max(0.0, min(1.0, score))
    if clamped != score:
        reasons.append("CLAMPED")
    return round(clamped, 4)


def calculate_trust_score_with_reasons(
    deal: DealLike,
    now: datetime | None = None,
) -> tuple[float, list[str]]:
    """Calculate trust score and return compact reason codes.

    Reason codes are stable strings intended for explainability.
    """
    now = now or datetime.now(timezone.utc)
    score, reasons = _cue_adjustments(deal.title, deal.url)

    age_days = get_age_days(deal.posted_at, now)
    for min_days, penalty, code in AGE_PENALTIES:
        if age_days > min_days:
            score -= penalty
            reasons.append(code)
            break

    return _clamp(score, reasons), reasons


def calculate_trust_score(deal: DealLike, now: datetime | None = None) -> float:
    """Calculate trust score for a deal.

    Args:
        deal: Deal with title, url and posted_at.
        now: Observation time; sampled once here when omitted.

    Returns:
        Trust score (0.0-1.0).
    """
    score, _ = calculate_trust_score_with_reasons(deal, now)
    return score


def calculate_cue_score(title: str, url: str) -> float:
    """Trust score from title cues and URL only (no age decay).

    Used for standalone verification of a title/url that is not stored.
    """
    score, reasons = _cue_adjustments(title, url)
    return _clamp(score, reasons)


def get_risk_level(trust_score: float) -> str:
    """Map a trust score to a coarse risk level."""
    if trust_score >= RISK_LEVEL_LOW_MIN:
        return "low"
    if trust_score >= RISK_LEVEL_MEDIUM_MIN:
        return "medium"
    return "high"
