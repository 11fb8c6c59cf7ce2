"""Shared route dependencies: API key auth and per-IP rate limiting.

Both read configuration from `app.state.settings` so an app built with
explicit settings (tests, scripts) does not depend on the process env.
The rate-limit table lives on `app.state.rate_limiter`.
"""

import math
import time
from dataclasses import dataclass, field

from fastapi import Request

from dealsense.services.errors import RateLimitedError, UnauthorizedError
from dealsense.settings import Settings


@dataclass
class _Bucket:
    count: int
    reset_at: float


@dataclass
class RateLimiter:
    """Fixed-window request counter keyed by client id (in memory)."""

    max_requests: int
    window_sec: float
    max_keys: int = 10_000
    _buckets: dict[str, _Bucket] = field(default_factory=dict)

    def hit(self, key: str, now: float | None = None) -> float | None:
        """Count a request.

        Returns:
            None if allowed, else seconds until the window resets.
        """
        now = time.monotonic() if now is None else now
        if len(self._buckets) >= self.max_keys:
            self._evict_expired(now)
        bucket = self._buckets.get(key)
        if bucket is None or now > bucket.reset_at:
            bucket = _Bucket(count=0, reset_at=now + self.window_sec)
            self._buckets[key] = bucket

        bucket.count += 1
        if bucket.count > self.max_requests:
            return max(bucket.reset_at - now, 0.0)
        return None

    def _evict_expired(self, now: float) -> None:
        expired = [k for k, b in self._buckets.items() if now > b.reset_at]
        for k in expired:
            del self._buckets[k]

    def reset(self) -> None:
        self._buckets.clear()


def client_ip(request: Request) -> str:
    """Best-effort client address (proxy headers first)."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client:
        return request.client.host
    return "unknown"


def _settings(request: Request) -> Settings:
    return request.app.state.settings


async def require_api_key(request: Request) -> None:
    """Reject requests without the configured X-API-Key (no-op when unset)."""
    expected = _settings(request).api_key
    if expected and request.headers.get("x-api-key") != expected:
        raise UnauthorizedError()


async def enforce_rate_limit(request: Request) -> None:
    """Apply the per-IP request budget (no-op when disabled)."""
    if not _settings(request).rate_limit_enabled:
        return
    limiter: RateLimiter = request.app.state.rate_limiter
    retry_after = limiter.hit(client_ip(request))
    if retry_after is not None:
        raise RateLimitedError(retry_after=math.ceil(retry_after))
