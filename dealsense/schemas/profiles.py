"""Schemas for interest profile endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ProfileInput(BaseModel):
    """Request body for POST /v1/interests.

    Omitting profile_id creates a new profile.
    """

    profile_id: str | None = None
    categories: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    brands: list[str] = Field(default_factory=list)
    price_max: int | None = Field(default=None, ge=0)
    min_discount_rate: float | None = Field(default=None, ge=0, le=100)
    exclude_keywords: list[str] = Field(default_factory=list)


class NormalizedProfile(BaseModel):
    """Profile facets as stored after normalization."""

    categories: list[str]
    keywords: list[str]
    brands: list[str]
    price_max: int | None
    min_discount_rate: float | None
    exclude_keywords: list[str]


class ProfileOutput(BaseModel):
    """Response payload for a single profile."""

    profile_id: str
    summary: str
    normalized: NormalizedProfile


class ProfileListItem(ProfileOutput):
    """Profile entry in a list response."""

    updated_at: datetime


class ProfileListResponse(BaseModel):
    """Response payload for GET /v1/interests."""

    profiles: list[ProfileListItem]


class ProfileDeleteResponse(BaseModel):
    """Response payload for DELETE /v1/interests/{profile_id}."""

    status: Literal["ok"] = "ok"
