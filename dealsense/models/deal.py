"""Deal model.

Represents a single promotional listing from a community board, a shop API
or manual entry. Commerce facts are immutable once stored; fingerprint and
trust_score are derived at ingestion time (trust is recomputed per query).
"""

import json
import logging
from datetime import datetime

from pydantic import ValidationError
from sqlalchemy import CheckConstraint, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dealsense.schemas.deals import DealExtra
from dealsense.stores.postgres import Base

logger = logging.getLogger("uvicorn.error")


class Deal(Base):
    """Stored deal listing."""

    __tablename__ = "deals"
    __table_args__ = (
        CheckConstraint("source IN ('community', 'shop', 'manual')", name="ck_deals_source"),
        CheckConstraint("price_current >= 0", name="ck_deals_price_current_non_negative"),
    )

    deal_id: Mapped[str] = mapped_column(String(100), primary_key=True)

    # Commerce facts
    title: Mapped[str] = mapped_column(Text)
    price_current: Mapped[int] = mapped_column(Integer)
    price_original: Mapped[int | None] = mapped_column(Integer)
    discount_rate: Mapped[int | None] = mapped_column(Integer)  # percent, null if unknown

    # Provenance
    source: Mapped[str] = mapped_column(String(20))  # community, shop, manual
    merchant: Mapped[str] = mapped_column(String(200))
    url: Mapped[str] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(100))
    posted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    # Derived
    fingerprint: Mapped[str] = mapped_column(Text, index=True)
    popularity_score: Mapped[float] = mapped_column(Float, default=0.0)
    trust_score: Mapped[float] = mapped_column(Float, default=0.0)

    # Sidecar (conditions, observations, shipping info) as JSON
    extra_json: Mapped[str] = mapped_column(Text, default="{}")

    @property
    def extra(self) -> DealExtra:
        """Parsed sidecar; defaults when absent or malformed."""
        if not self.extra_json:
            return DealExtra()
        try:
            return DealExtra.model_validate(json.loads(self.extra_json))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Invalid extra_json for deal {self.deal_id}: {e}")
            return DealExtra()

    def __repr__(self) -> str:
        return f"<Deal {self.deal_id} {self.price_current}>"
