"""Common schemas used across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Structured error detail (e.g. the missing id or accepted fields)."""

    code: str
    message: str
    detail: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": { "code": str, "message": str, "detail": object } }
    Codes: PROFILE_NOT_FOUND, DEAL_NOT_FOUND, INVALID_INPUT, UNAUTHORIZED,
    FORBIDDEN_ORIGIN, RATE_LIMITED, INTERNAL_ERROR.
    """

    error: ErrorDetail
