"""Admin endpoints for ingestion.

These endpoints are intended for manual runs and cron triggers; they sit
behind the same API key as the rest of /v1.
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from dealsense.services.ingestion import run_ingestion
from dealsense.stores.postgres import get_db_session

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


class IngestionRequest(BaseModel):
    """Request body for ingestion endpoint."""

    categories: list[str] | None = Field(
        default=None,
        description="Shop queries (defaults to INGEST_CATEGORIES)",
    )


class IngestionResponse(BaseModel):
    """Response from ingestion endpoint."""

    success: bool
    stats: dict


@router.post("/ingest", response_model=IngestionResponse)
async def trigger_ingestion(
    request: IngestionRequest | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> IngestionResponse:
    """Run one ingestion pass over all sources.

    Failing sources and rejected inserts are skipped and counted in stats.
    """
    categories = request.categories if request else None
    stats = await run_ingestion(session, categories=categories)
    return IngestionResponse(
        success=True,
        stats={**asdict(stats), "total_fetched": stats.total_fetched},
    )
