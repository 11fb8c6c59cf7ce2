"""Text normalization helpers.

Used at ingestion time (fingerprints) and at query time (display, summaries).
All functions are total: any string input yields a defined output.
"""

import math
import re
from collections.abc import Iterable

from dealsense.models import Profile
from dealsense.services.patterns import CURATED_BRANDS, NOISE_WORDS

PRICE_BAND_UNIT = 5000
ELLIPSIS = "..."
NO_FILTERS_SUMMARY = "No filters set"
SUMMARY_SEPARATOR = " | "


def _noise_regex(phrase: str) -> re.Pattern[str]:
    # Words of a phrase may be joined by spaces, hyphens, underscores or nothing.
    words = [re.escape(w) for w in phrase.lower().split()]
    pattern = r"[\s\-_]*".join(words)
    if phrase.isascii():
        # English phrases only match whole words ("sale" but not "wholesale").
        pattern = rf"\b{pattern}\b"
    return re.compile(pattern, re.IGNORECASE)


_NOISE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(_noise_regex(w) for w in NOISE_WORDS)

# Everything except ASCII letters/digits, whitespace, Hangul jamo and syllables.
_DISALLOWED_CHARS = re.compile(r"[^a-z0-9\sㄱ-ㅣ가-힣]")
_WHITESPACE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """Canonicalize a deal title for comparison.

    Lowercases, removes promotional noise words, strips punctuation/symbols
    and collapses whitespace.

    Example:
        >>> normalize_title("free-shipping Kobea 2-person tent flash-sale")
        'kobea 2person tent'
    """
    normalized = (title or "").lower()
    for pattern in _NOISE_PATTERNS:
        normalized = pattern.sub("", normalized)
    normalized = _DISALLOWED_CHARS.sub("", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


def normalize_merchant(merchant: str) -> str:
    """Lowercase merchant name with all whitespace removed."""
    return _WHITESPACE.sub("", (merchant or "").lower())


def truncate(text: str, max_len: int) -> str:
    """Truncate text to max_len characters, ending with an ellipsis."""
    if len(text) <= max_len:
        return text
    if max_len < len(ELLIPSIS):
        return ELLIPSIS[:max_len]
    return text[: max_len - len(ELLIPSIS)] + ELLIPSIS


def extract_brands(text: str) -> list[str]:
    """Extract brand hints from free text.

    Substring (not token) match against the curated brand list, returned in
    curated-list order.
    """
    lower = (text or "").lower()
    return [brand for brand in CURATED_BRANDS if brand.lower() in lower]


def get_price_band(price: float) -> int:
    """Round price to the nearest 5,000 (half rounds up)."""
    return int(math.floor(price / PRICE_BAND_UNIT + 0.5)) * PRICE_BAND_UNIT


def calculate_discount_rate(price_current: int, price_original: int | None) -> int | None:
    """Discount percentage, or None when the original price implies no discount."""
    if not price_original or price_original <= price_current:
        return None
    return int(math.floor((price_original - price_current) / price_original * 100 + 0.5))


def normalize_terms(values: Iterable[str] | None) -> list[str]:
    """Trim terms, drop empties and case-insensitive duplicates (first spelling wins)."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values or []:
        term = _WHITESPACE.sub(" ", str(value)).strip()
        key = term.lower()
        if not term or key in seen:
            continue
        seen.add(key)
        result.append(term)
    return result


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value:,}"


def create_profile_summary(profile: Profile) -> str:
    """Create a one-line summary of a profile's filters."""
    parts: list[str] = []

    if profile.categories:
        parts.append(f"Categories: {', '.join(profile.categories)}")
    if profile.keywords:
        parts.append(f"Keywords: {', '.join(profile.keywords)}")
    if profile.brands:
        parts.append(f"Brands: {', '.join(profile.brands)}")
    if profile.price_max is not None:
        parts.append(f"Max price: {_format_number(profile.price_max)}원")
    if profile.min_discount_rate is not None:
        parts.append(f"Min discount: {_format_number(profile.min_discount_rate)}%")
    if profile.exclude_keywords:
        parts.append(f"Excluding: {', '.join(profile.exclude_keywords)}")

    return SUMMARY_SEPARATOR.join(parts) if parts else NO_FILTERS_SUMMARY
