"""Schemas for deal list, detail and verification endpoints."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, SerializerFunctionWrapHandler, model_serializer

DealSource = Literal["community", "shop", "manual"]
RiskLevel = Literal["low", "medium", "high"]


class DealExtra(BaseModel):
    """Typed sidecar stored alongside a deal (extra_json column)."""

    conditions: list[str] = Field(default_factory=list)
    observations: list[str] = Field(default_factory=list)
    shipping_info: str | None = None
    shipping_fee: int | None = None
    brand: str | None = None
    image: str | None = None


class Score(BaseModel):
    """Per-query score components, each in [0, 1].

    `match` is only present when the deal was scored against a profile.
    """

    popularity: float = Field(ge=0, le=1)
    match: float | None = Field(default=None, ge=0, le=1)
    trust: float = Field(ge=0, le=1)

    @model_serializer(mode="wrap")
    def _omit_missing_match(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if data.get("match") is None:
            data.pop("match", None)
        return data


class DealListItem(BaseModel):
    """A single deal in a list response."""

    deal_id: str
    title: str
    price_current: int
    price_original: int | None
    discount_rate: int | None
    source: DealSource
    merchant: str
    url: str
    category: str
    posted_at: datetime
    score: Score
    why_recommended: list[str] = Field(default_factory=list)
    risk_note: str | None = None


class PriceComponents(BaseModel):
    """Shipping breakdown derived from the deal sidecar."""

    shipping_included: bool
    shipping_fee: int | None = None


class DealDetail(DealListItem):
    """Full deal detail (list item plus sidecar facts)."""

    conditions: list[str] = Field(default_factory=list)
    observations: list[str] = Field(default_factory=list)
    price_components: PriceComponents


class HotDealsResponse(BaseModel):
    """Response payload for GET /v1/deals/hot10."""

    window: Literal["24h", "7d"]
    items: list[DealListItem] = Field(max_length=10)


class InterestDealsResponse(BaseModel):
    """Response payload for GET /v1/deals/by-interests."""

    items: list[DealListItem]
    notes: list[str] = Field(default_factory=list, max_length=3)


class DealDetailResponse(BaseModel):
    """Response payload for GET /v1/deals/{deal_id}."""

    deal: DealDetail


class VerifyRequest(BaseModel):
    """Request body for POST /v1/deals/verify. At least one field is required."""

    deal_id: str | None = None
    url: str | None = None
    title: str | None = None


class VerifyResponse(BaseModel):
    """Trust assessment for a single listing."""

    trust_score: float = Field(ge=0, le=1)
    warnings: list[str] = Field(default_factory=list, max_length=5)
    risk_level: RiskLevel
    notes: list[str] = Field(default_factory=list, max_length=3)
