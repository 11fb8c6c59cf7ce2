"""Pydantic schemas for API request/response validation."""

from dealsense.schemas.common import ErrorDetail, ErrorResponse
from dealsense.schemas.deals import (
    DealDetail,
    DealDetailResponse,
    DealExtra,
    DealListItem,
    HotDealsResponse,
    InterestDealsResponse,
    PriceComponents,
    Score,
    VerifyRequest,
    VerifyResponse,
)
from dealsense.schemas.profiles import (
    NormalizedProfile,
    ProfileDeleteResponse,
    ProfileInput,
    ProfileListItem,
    ProfileListResponse,
    ProfileOutput,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "DealDetail",
    "DealDetailResponse",
    "DealExtra",
    "DealListItem",
    "HotDealsResponse",
    "InterestDealsResponse",
    "PriceComponents",
    "Score",
    "VerifyRequest",
    "VerifyResponse",
    "NormalizedProfile",
    "ProfileDeleteResponse",
    "ProfileInput",
    "ProfileListItem",
    "ProfileListResponse",
    "ProfileOutput",
]
