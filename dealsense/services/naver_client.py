"""Naver Shopping search API client.

Official shop source for ingestion (free tier: 25,000 requests/day).

Setup:
- Register an application at https://developers.naver.com/
- Set NAVER_CLIENT_ID / NAVER_CLIENT_SECRET

Mapping:
- lprice → price_current, hprice → price_original (0/empty = unknown)
- category1 → category (fallback "기타")
- Titles come back with <b> highlight tags; they are stripped
- The API has no posting time; items are stamped with the fetch time
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any

import httpx

from dealsense.services.errors import IngestionSourceError
from dealsense.services.raw_deal import RawDealCandidate
from dealsense.settings import get_settings

logger = logging.getLogger("uvicorn.error")

SOURCE_NAME = "naver_shopping"
MAX_DISPLAY = 100
DEFAULT_CATEGORY = "기타"

_HTML_TAG = re.compile(r"<[^>]*>")


def clean_html_tags(text: str) -> str:
    """Remove HTML tags from API text fields."""
    return _HTML_TAG.sub("", text or "").strip()


def _parse_int(value: Any) -> int | None:
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


class NaverShoppingClient:
    """Client for the Naver Shopping search endpoint."""

    BASE_URL = "https://openapi.naver.com/v1/search/shop.json"

    def __init__(self, client_id: str | None = None, client_secret: str | None = None):
        """Initialize client with API credentials (defaults from settings)."""
        settings = get_settings()
        self.client_id = client_id if client_id is not None else settings.naver_client_id
        self.client_secret = client_secret if client_secret is not None else settings.naver_client_secret
        self._http_client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=30.0)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def search(self, query: str, display: int = MAX_DISPLAY) -> list[RawDealCandidate]:
        """Search newest shopping items for a query.

        Args:
            query: Search query (we use category names, e.g. "캠핑").
            display: Number of items (capped at 100 per request).

        Returns:
            Parsed candidates.

        Raises:
            IngestionSourceError: Missing credentials, HTTP failure or bad payload.
        """
        if not self.is_configured:
            raise IngestionSourceError(SOURCE_NAME, "API credentials not configured")

        params = {
            "query": query,
            "display": min(display, MAX_DISPLAY),
            "sort": "date",
        }
        headers = {
            "X-Naver-Client-Id": self.client_id,
            "X-Naver-Client-Secret": self.client_secret,
        }

        client = await self._get_client()
        try:
            response = await client.get(self.BASE_URL, params=params, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise IngestionSourceError(
                SOURCE_NAME,
                f"HTTP {e.response.status_code} for query={query}",
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise IngestionSourceError(SOURCE_NAME, f"request failed for query={query}: {e}") from e

        items = data.get("items", []) if isinstance(data, dict) else []
        fetched_at = datetime.now(timezone.utc)
        results = []
        for item in items:
            candidate = parse_shopping_item(item, fetched_at)
            if candidate is not None:
                results.append(candidate)

        logger.info(f"Naver search query={query}: {len(results)}/{len(items)} items parsed")
        return results


def parse_shopping_item(item: dict[str, Any], fetched_at: datetime) -> RawDealCandidate | None:
    """Map one API item to a candidate (None when price or link is missing)."""
    price_current = _parse_int(item.get("lprice"))
    link = (item.get("link") or "").strip()
    if price_current is None or not link:
        return None

    return RawDealCandidate(
        title=clean_html_tags(item.get("title", "")),
        price_current=price_current,
        price_original=_parse_int(item.get("hprice")),
        merchant=(item.get("mallName") or "").strip(),
        url=link,
        category=(item.get("category1") or "").strip() or DEFAULT_CATEGORY,
        source="shop",
        posted_at=fetched_at,
        brand=(item.get("brand") or item.get("maker") or None),
        image=item.get("image") or None,
    )


# Global client instance
_client: NaverShoppingClient | None = None


def get_naver_client() -> NaverShoppingClient:
    """Get global Naver Shopping client instance."""
    global _client
    if _client is None:
        _client = NaverShoppingClient()
    return _client
