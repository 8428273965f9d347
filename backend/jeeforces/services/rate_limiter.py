"""Fixed-window rate limiting backed by Redis."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from redis import Redis

from jeeforces.config import Settings


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float

    def as_details(self) -> dict:
        return {"limit": self.limit, "remaining": self.remaining, "reset_at": self.reset_at}


class FixedWindowRateLimiter:
    """
    Count actions per key inside aligned windows of ``window_seconds``.

    All state lives in Redis, so every server instance shares the same
    counters. The increment and the TTL are applied in one MULTI/EXEC.
    """

    def __init__(
        self,
        redis_client: Redis,
        *,
        limit: int,
        window_seconds: int,
        prefix: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if limit < 1 or window_seconds < 1:
            raise ValueError("limit and window_seconds must be positive")
        self._redis = redis_client
        self.limit = limit
        self.window_seconds = window_seconds
        self.prefix = prefix
        self._clock = clock

    def _bucket(self, key: str, window: int) -> str:
        return f"ratelimit:{self.prefix}:{key}:{window}"

    def check(self, key: str) -> RateLimitResult:
        now = self._clock()
        window = int(now // self.window_seconds)
        bucket = self._bucket(key, window)

        pipe = self._redis.pipeline(transaction=True)
        pipe.incr(bucket)
        pipe.expire(bucket, self.window_seconds + 1)
        count, _ = pipe.execute()

        return RateLimitResult(
            allowed=count <= self.limit,
            limit=self.limit,
            remaining=max(0, self.limit - count),
            reset_at=float((window + 1) * self.window_seconds),
        )

    def allow(self, key: str) -> bool:
        return self.check(key).allowed


@dataclass(frozen=True)
class RateLimiters:
    """The two limiters shared by the application."""
    general: FixedWindowRateLimiter
    agent: FixedWindowRateLimiter


def build_rate_limiters(redis_client: Redis, settings: Settings) -> RateLimiters:
    return RateLimiters(
        general=FixedWindowRateLimiter(
            redis_client,
            limit=settings.RATE_LIMIT_MAX_ACTIONS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
            prefix="general",
        ),
        agent=FixedWindowRateLimiter(
            redis_client,
            limit=settings.AGENT_RATE_LIMIT_MAX_ACTIONS,
            window_seconds=settings.AGENT_RATE_LIMIT_WINDOW_SECONDS,
            prefix="agent",
        ),
    )
