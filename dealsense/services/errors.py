"""Domain exceptions raised at the query and ingestion boundaries.

Pure scoring functions never raise; these surface missing records, bad
requests and unreachable sources. The API maps them to the structured
error body (see `dealsense.main`).
"""

from typing import Any


class DealSenseError(Exception):
    """Base exception for all DealSense errors."""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        detail: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.detail = detail
        super().__init__(message)


class NotFoundError(DealSenseError):
    """Raised when a profile or deal id does not exist."""

    status_code = 404


class ProfileNotFoundError(NotFoundError):
    """Raised when a profile id does not exist."""

    def __init__(self, profile_id: str):
        super().__init__(
            f"Profile not found: {profile_id}",
            code="PROFILE_NOT_FOUND",
            detail={"profile_id": profile_id},
        )


class DealNotFoundError(NotFoundError):
    """Raised when a deal id does not exist."""

    def __init__(self, deal_id: str):
        super().__init__(
            f"Deal not found: {deal_id}",
            code="DEAL_NOT_FOUND",
            detail={"deal_id": deal_id},
        )


class InvalidInputError(DealSenseError):
    """Raised when a request is missing required input."""

    status_code = 400

    def __init__(self, message: str, detail: dict[str, Any] | None = None):
        super().__init__(message, code="INVALID_INPUT", detail=detail)


class IngestionSourceError(DealSenseError):
    """Raised when an ingestion source cannot be fetched or parsed."""

    status_code = 502

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(
            f"{source}: {message}",
            code="INGESTION_SOURCE_ERROR",
            detail={"source": source},
        )


class UnauthorizedError(DealSenseError):
    """Raised when the API key is missing or wrong."""

    status_code = 401

    def __init__(self):
        super().__init__("Unauthorized", code="UNAUTHORIZED")


class ForbiddenOriginError(DealSenseError):
    """Raised when the request origin is not in the allow-list."""

    status_code = 403

    def __init__(self, origin: str):
        super().__init__(
            "Forbidden: Origin not allowed",
            code="FORBIDDEN_ORIGIN",
            detail={"origin": origin},
        )


class RateLimitedError(DealSenseError):
    """Raised when a client exceeds the request budget for the window."""

    status_code = 429

    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(
            "Too Many Requests",
            code="RATE_LIMITED",
            detail={"retry_after_sec": retry_after},
        )
