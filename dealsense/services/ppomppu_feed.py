"""Ppomppu community RSS reader.

Public feed, no authentication. Titles carry the useful facts:

    "[쿠팡] 삼성 갤럭시 버즈 39,000원"
     ^merchant           ^price

The feed has no original price, so community deals never carry a
discount rate. Category is unknown ("기타").
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any

import feedparser
import httpx
from dateutil import parser as date_parser

from dealsense.services.errors import IngestionSourceError
from dealsense.services.raw_deal import RawDealCandidate
from dealsense.settings import get_settings

logger = logging.getLogger("uvicorn.error")

SOURCE_NAME = "ppomppu_rss"
DEFAULT_MERCHANT = "뽐뿌"
DEFAULT_CATEGORY = "기타"
TITLE_MAX_LEN = 120

_MERCHANT_TAG = re.compile(r"\[(.*?)\]")
_MERCHANT_TAG_PREFIX = re.compile(r"\[.*?\]\s*")
_PRICE = re.compile(r"(\d{1,3}(?:,\d{3})*)\s*원")
_WHITESPACE = re.compile(r"\s+")


def extract_price_and_merchant(title: str) -> tuple[int, str | None]:
    """Extract "NN,NNN원" price and "[merchant]" tag from a title.

    Returns:
        (price, merchant); price is 0 when absent.
    """
    merchant_match = _MERCHANT_TAG.search(title)
    merchant = merchant_match.group(1).strip() if merchant_match else None

    price_match = _PRICE.search(title)
    price = int(price_match.group(1).replace(",", "")) if price_match else 0

    return price, merchant or None


def clean_title(title: str) -> str:
    """Remove the merchant tag, collapse whitespace, cap at 120 chars."""
    cleaned = _MERCHANT_TAG_PREFIX.sub("", title, count=1)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    return cleaned[:TITLE_MAX_LEN]


def parse_posted_at(value: str | None, fallback: datetime) -> datetime:
    """Parse an RSS date string (naive values are treated as UTC)."""
    if not value:
        return fallback
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError) as e:
        logger.warning(f"Could not parse date '{value}': {e}")
        return fallback
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_feed_entry(entry: Any, fetched_at: datetime) -> RawDealCandidate | None:
    """Map one feed entry to a candidate (None without title or link)."""
    raw_title = (entry.get("title") or "").strip()
    link = (entry.get("link") or "").strip()
    if not raw_title or not link:
        return None

    price, merchant = extract_price_and_merchant(raw_title)
    return RawDealCandidate(
        title=clean_title(raw_title),
        price_current=price,
        price_original=None,
        merchant=merchant or DEFAULT_MERCHANT,
        url=link,
        category=DEFAULT_CATEGORY,
        source="community",
        posted_at=parse_posted_at(entry.get("published"), fetched_at),
    )


def parse_feed(content: str | bytes, fetched_at: datetime | None = None) -> list[RawDealCandidate]:
    """Parse RSS content into candidates."""
    fetched_at = fetched_at or datetime.now(timezone.utc)
    parsed_feed = feedparser.parse(content)

    if parsed_feed.bozo:
        logger.warning(f"RSS feed parsing warning: {parsed_feed.bozo_exception}")

    results = []
    for entry in parsed_feed.entries:
        candidate = parse_feed_entry(entry, fetched_at)
        if candidate is not None:
            results.append(candidate)
    return results


async def fetch_ppomppu_deals(url: str | None = None) -> list[RawDealCandidate]:
    """Fetch and parse the community feed.

    Raises:
        IngestionSourceError: Feed unreachable.
    """
    url = url or get_settings().ppomppu_rss_url
    try:
        async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.HTTPError as e:
        raise IngestionSourceError(SOURCE_NAME, f"fetch failed: {e}") from e

    results = parse_feed(response.content)
    logger.info(f"Ppomppu feed: {len(results)} entries parsed")
    return results
