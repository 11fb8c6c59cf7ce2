"""Deal endpoints.

GET  /v1/deals/hot10         - Top 10 trending deals in a window
GET  /v1/deals/by-interests  - Personalized deals for a saved profile
POST /v1/deals/verify        - Trust/risk assessment for one listing
GET  /v1/deals/{deal_id}     - Full detail for one deal

Routers are thin: call services for business logic.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealsense.schemas import (
    DealDetailResponse,
    ErrorResponse,
    HotDealsResponse,
    InterestDealsResponse,
    VerifyRequest,
    VerifyResponse,
)
from dealsense.services.deals import get_deal_detail, get_deals_by_interests, get_hot_deals
from dealsense.services.verify import verify_deal
from dealsense.stores.postgres import get_db_session

router = APIRouter()


@router.get("/hot10", response_model=HotDealsResponse)
async def hot10(
    window: Literal["24h", "7d"] = Query(default="24h", description="Posting window"),
    sort: Literal["popularity", "discount"] = Query(default="popularity"),
    session: AsyncSession = Depends(get_db_session),
) -> HotDealsResponse:
    """Top 10 trending deals posted within the window."""
    return await get_hot_deals(session, window=window, sort=sort)


@router.get(
    "/by-interests",
    response_model=InterestDealsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def by_interests(
    profile_id: str = Query(..., description="Saved profile ID"),
    limit: int | None = Query(default=None, ge=1, description="Max items (default 20, capped at 30)"),
    dedupe: bool = Query(default=True, description="Collapse near-duplicate listings"),
    session: AsyncSession = Depends(get_db_session),
) -> InterestDealsResponse:
    """Scored, ranked and explained deals for a profile."""
    return await get_deals_by_interests(session, profile_id, limit=limit, dedupe=dedupe)


@router.post(
    "/verify",
    response_model=VerifyResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def verify(
    body: VerifyRequest,
    session: AsyncSession = Depends(get_db_session),
) -> VerifyResponse:
    """Assess a stored deal (deal_id) or a standalone title/url."""
    return await verify_deal(session, body)


@router.get(
    "/{deal_id}",
    response_model=DealDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_deal(
    deal_id: str = Path(..., description="Deal ID"),
    session: AsyncSession = Depends(get_db_session),
) -> DealDetailResponse:
    """Full detail for a single deal."""
    return await get_deal_detail(session, deal_id)
