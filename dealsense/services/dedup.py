"""Deduplication service for near-duplicate deal listings.

Fingerprint:
- Coarse identity key from normalized title + normalized merchant + price band
- The same physical offer reposted across sources with cosmetic title
  variation (noise words, case, punctuation) collapses onto one key
- Price banding (nearest 5,000) tolerates small drift such as coupon stacking

Dedup within a result list:
- Group by fingerprint (first-seen group order)
- Keep the best-scoring member per group
"""

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from dealsense.services.normalize import get_price_band, normalize_merchant, normalize_title

T = TypeVar("T")

# Deal or ingestion candidate; only title, merchant and price_current are read.
DealLike = Any


def generate_fingerprint(deal: DealLike) -> str:
    """Compute the fingerprint of a deal.

    Format: {normalized_title}|{merchant_lower_no_whitespace}|{price_band}

    Args:
        deal: Anything with title, merchant and price_current (stored Deal
            or an ingestion candidate).
    """
    title = normalize_title(deal.title)
    merchant = normalize_merchant(deal.merchant)
    return f"{title}|{merchant}|{get_price_band(deal.price_current)}"


def deduplicate_deals(
    deals: Sequence[T],
    score_fn: Callable[[T], float],
    key_fn: Callable[[T], str] = lambda d: d.fingerprint,
) -> list[T]:
    """Collapse same-fingerprint groups to their best-scoring member.

    Output follows group discovery order, not score order; callers that need
    a ranked list must re-sort. On equal scores the earliest member wins.

    Args:
        deals: Items carrying a fingerprint (deals or scored wrappers).
        score_fn: Score used to pick the survivor of each group.
        key_fn: Extracts the fingerprint (defaults to `.fingerprint`).

    Returns:
        One item per distinct fingerprint.
    """
    groups: dict[str, list[T]] = {}
    for deal in deals:
        groups.setdefault(key_fn(deal), []).append(deal)

    result: list[T] = []
    for group in groups.values():
        if len(group) == 1:
            result.append(group[0])
        else:
            result.append(sorted(group, key=score_fn, reverse=True)[0])
    return result
