"""FastAPI application entry point.

DealSense API - ranked, deduplicated, explained deal recommendations.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dealsense.routes import api_router
from dealsense.routes.deps import RateLimiter
from dealsense.services.errors import DealSenseError, ForbiddenOriginError
from dealsense.settings import Settings, get_settings
from dealsense.stores.postgres import init_db, close_db, ping_db
from dealsense.stores.redis import init_redis, close_redis

logger = logging.getLogger("uvicorn.error")


def _error_response(exc: DealSenseError) -> JSONResponse:
    headers = None
    if exc.code == "RATE_LIMITED":
        headers = {"Retry-After": str(exc.detail["retry_after_sec"])}
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.message,
                "detail": exc.detail,
            }
        },
        headers=headers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings: Settings = app.state.settings

    # Initialize database (skip in tests if no DB available)
    try:
        await init_db()
        await ping_db()
        logger.info("Postgres connected")
    except Exception:
        logger.exception("Postgres init failed")

    # Initialize Redis (trust cache only; the API works without it)
    try:
        await init_redis()
    except Exception:
        logger.exception("Redis init failed")

    if settings.api_key:
        logger.info("API key authentication enabled")
    if settings.cors_origins:
        logger.info(f"Origin allowlist: {settings.cors_origins}")
    if settings.rate_limit_enabled:
        logger.info(
            f"Rate limiting: {settings.rate_limit_max} requests per {settings.rate_limit_window_ms}ms"
        )

    yield

    # Shutdown
    await close_redis()
    await close_db()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Deal aggregation with trust scoring, matching and deduplication",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.state.settings = settings
    app.state.started_at = time.monotonic()
    app.state.rate_limiter = RateLimiter(
        max_requests=settings.rate_limit_max,
        window_sec=settings.rate_limit_window_ms / 1000,
    )

    # Origin allow-list: requests carrying a foreign Origin are refused
    @app.middleware("http")
    async def check_origin(request: Request, call_next):
        origin = request.headers.get("origin")
        if settings.cors_origins and origin and origin not in settings.cors_origins:
            return _error_response(ForbiddenOriginError(origin))
        return await call_next(request)

    # CORS middleware (empty allow-list = any origin)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],
        allow_credentials=bool(settings.cors_origins),
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-API-Key"],
    )

    @app.exception_handler(DealSenseError)
    async def dealsense_exception_handler(request: Request, exc: DealSenseError) -> JSONResponse:
        """Map domain errors to the structured error format."""
        if exc.status_code >= 500:
            logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
        return _error_response(exc)

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": str(exc) if settings.debug else "Internal server error",
                    "detail": None,
                }
            },
        )

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, str | int]:
        """Health check endpoint."""
        uptime_sec = int(time.monotonic() - app.state.started_at)
        return {"status": "ok", "uptimeSec": uptime_sec}

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "dealsense.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
