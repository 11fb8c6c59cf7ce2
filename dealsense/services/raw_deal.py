"""Raw deal candidate produced by ingestion sources."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class RawDealCandidate:
    """A listing as fetched from a source, before normalization."""

    title: str
    price_current: int
    price_original: int | None
    merchant: str
    url: str
    category: str
    source: str  # community, shop, manual
    posted_at: datetime
    brand: str | None = None
    image: str | None = None
    conditions: list[str] = field(default_factory=list)
    shipping_info: str | None = None
