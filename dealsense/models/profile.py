"""Profile model.

A saved set of category/keyword/brand preferences and price/discount
constraints used to personalize matching. List facets are stored as JSON
arrays in insertion order.
"""

import secrets
from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from dealsense.stores.postgres import Base


def generate_profile_id() -> str:
    """Generate a new profile ID (p_ + 16 hex chars)."""
    return f"p_{secrets.token_hex(8)}"


class Profile(Base):
    """User interest profile."""

    __tablename__ = "profiles"

    profile_id: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
        default=generate_profile_id,
    )

    categories: Mapped[list[str]] = mapped_column(JSON, default=list)
    keywords: Mapped[list[str]] = mapped_column(JSON, default=list)
    brands: Mapped[list[str]] = mapped_column(JSON, default=list)
    exclude_keywords: Mapped[list[str]] = mapped_column(JSON, default=list)

    price_max: Mapped[int | None] = mapped_column(Integer)
    min_discount_rate: Mapped[float | None] = mapped_column(Float)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Profile {self.profile_id}>"
