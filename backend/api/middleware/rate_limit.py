"""
Rate limiting.

Two layers:

- ``limiter``: slowapi limiter applying the global per-IP default to every
  route through SlowAPIMiddleware.
- ``FixedWindowRateLimiter`` presets: per-identity fixed windows for the
  expensive endpoints (blog generation, editing). The identity is the
  authenticated user id when there is one, otherwise the client IP.

Both use in-process memory storage by default, so counts are per worker and
are lost on restart.

Presets:
- user: 10 requests per minute
- ip: 100 requests per minute
- blog_generation: 5 requests per 5 minutes
- edit: 20 requests per minute
"""

import ipaddress
import logging
import re
from dataclasses import dataclass
from typing import Optional

from limits import RateLimitItem, parse
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter as _FixedWindowStrategy
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

# Simple pattern to quickly reject obviously invalid IPs before parsing
_IP_LIKE = re.compile(r"^[\d.:a-fA-F]+$")


def _is_valid_ip(value: str) -> bool:
    """Return True if *value* looks like a valid IPv4 or IPv6 address."""
    if not _IP_LIKE.match(value):
        return False
    try:
        ipaddress.ip_address(value)
        return True
    except ValueError:
        return False


def _forwarded_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        # X-Forwarded-For can be a comma-separated list; first entry is the client
        candidate = forwarded.split(",")[0].strip()
        if _is_valid_ip(candidate):
            return candidate
    return None


def get_client_ip(request: Request) -> str:
    """Client IP: first valid X-Forwarded-For entry, else the connection address."""
    return _forwarded_ip(request) or get_remote_address(request)


def rate_limit_identity(request: Request, user_id: Optional[str] = None) -> str:
    """Key for the fixed-window limiters: user id, then client IP, then 'anonymous'."""
    if user_id:
        return user_id
    forwarded = _forwarded_ip(request)
    if forwarded:
        return forwarded
    if request.client and request.client.host:
        return request.client.host
    return "anonymous"


@dataclass
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_time: int  # epoch milliseconds


class RateLimitExceededError(Exception):
    """Raised by ``enforce`` when a fixed window is exhausted; mapped to 429 in main."""

    def __init__(self, result: RateLimitResult):
        super().__init__("Rate limit exceeded")
        self.result = result


class FixedWindowRateLimiter:
    """
    Fixed-window counter keyed by caller identity.

    Windows start on the first request for a key. Once ``max_requests`` hits
    are counted, further requests are refused without incrementing until
    the window expires.
    """

    def __init__(self, limit: str):
        self.item: RateLimitItem = parse(limit)
        self._storage = MemoryStorage()
        self._strategy = _FixedWindowStrategy(self._storage)

    @property
    def max_requests(self) -> int:
        return self.item.amount

    def check(self, key: str) -> RateLimitResult:
        allowed = self._strategy.test(self.item, key) and self._strategy.hit(self.item, key)
        stats = self._strategy.get_window_stats(self.item, key)
        return RateLimitResult(
            allowed=allowed,
            remaining=max(stats.remaining, 0),
            reset_time=int(stats.reset_time * 1000),
        )

    def enforce(self, key: str) -> RateLimitResult:
        result = self.check(key)
        if not result.allowed:
            logger.warning("Rate limit exceeded for %s (%s)", key, self.item)
            raise RateLimitExceededError(result)
        return result

    def reset(self) -> None:
        self._storage.reset()


RATE_LIMIT_PRESETS = {
    "user": "10/minute",
    "ip": "100/minute",
    "blog_generation": "5/5 minutes",
    "edit": "20/minute",
}

rate_limiters = {name: FixedWindowRateLimiter(limit) for name, limit in RATE_LIMIT_PRESETS.items()}


def get_rate_limiter(name: str) -> FixedWindowRateLimiter:
    return rate_limiters[name]


def reset_rate_limiters() -> None:
    """Clear every window (tests)."""
    for rate_limiter in rate_limiters.values():
        rate_limiter.reset()
    limiter.reset()


if settings.rate_limit_storage_uri.startswith("memory://"):
    logger.warning("Rate limiter using in-memory storage; limits are per worker process")

limiter = Limiter(
    key_func=get_client_ip,
    storage_uri=settings.rate_limit_storage_uri,
    default_limits=[settings.rate_limit_default],
)
