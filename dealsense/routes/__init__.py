"""API routes."""

from fastapi import APIRouter, Depends

from dealsense.routes import admin, deals, interests
from dealsense.routes.deps import enforce_rate_limit, require_api_key

api_router = APIRouter(dependencies=[Depends(require_api_key), Depends(enforce_rate_limit)])

# Interest profiles
api_router.include_router(interests.router, prefix="/v1/interests", tags=["interests"])

# Deal queries (hot list, personalized, detail, verify)
api_router.include_router(deals.router, prefix="/v1/deals", tags=["deals"])

# Admin endpoints (ingestion)
api_router.include_router(admin.router, prefix="/v1/admin", tags=["admin"])
