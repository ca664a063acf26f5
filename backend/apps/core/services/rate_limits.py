"""Sliding-window write throttling keyed by viewer, in memory or on Redis."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import Optional

import redis
from django.conf import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitConfig:
    window_seconds: int
    limit: int

    @classmethod
    def per_minute(cls, limit: int) -> "RateLimitConfig":
        return cls(window_seconds=60, limit=limit)


class RateLimitExceeded(Exception):
    def __init__(self, retry_after: float) -> None:
        super().__init__("Rate limit exceeded")
        self.retry_after = retry_after


class BaseRateLimiter(ABC):
    @abstractmethod
    def check(self, bucket: str, config: RateLimitConfig) -> None:
        """Record one hit on ``bucket`` or raise ``RateLimitExceeded``."""

    @abstractmethod
    def get_count(self, bucket: str, window_seconds: int = 60) -> int: ...

    def reset(self) -> None:  # pragma: no cover - only the in-memory limiter keeps state here
        pass


class InMemoryRateLimiter(BaseRateLimiter):
    """Per-process limiter for tests and single-worker development servers."""

    def __init__(self) -> None:
        self._hits: dict[str, deque[float]] = {}

    def _prune(self, bucket: str, window_seconds: int, now: float) -> deque[float]:
        hits = self._hits.setdefault(bucket, deque())
        cutoff = now - window_seconds
        while hits and hits[0] < cutoff:
            hits.popleft()
        return hits

    def check(self, bucket: str, config: RateLimitConfig) -> None:
        now = time.time()
        hits = self._prune(bucket, config.window_seconds, now)
        if len(hits) >= config.limit:
            raise RateLimitExceeded(max(hits[0] + config.window_seconds - now, 0.0))
        hits.append(now)

    def get_count(self, bucket: str, window_seconds: int = 60) -> int:
        if bucket not in self._hits:
            return 0
        return len(self._prune(bucket, window_seconds, time.time()))

    def reset(self) -> None:
        self._hits.clear()


class RedisRateLimiter(BaseRateLimiter):
    """Limiter shared across workers; each bucket is a sorted set of hit timestamps."""

    def __init__(self, client: redis.Redis) -> None:
        self.client = client

    @staticmethod
    def _key(bucket: str, window_seconds: int) -> str:
        return f"rate:{bucket}:{window_seconds}"

    def check(self, bucket: str, config: RateLimitConfig) -> None:
        key = self._key(bucket, config.window_seconds)
        now = time.time()

        with self.client.pipeline() as pipe:
            pipe.zremrangebyscore(key, 0, now - config.window_seconds)
            pipe.zcard(key)
            pipe.zrange(key, 0, 0, withscores=True)
            _, hits, oldest = pipe.execute()

        if hits >= config.limit:
            retry_after = 0.0
            if oldest:
                retry_after = max(oldest[0][1] + config.window_seconds - now, 0.0)
            raise RateLimitExceeded(retry_after)

        with self.client.pipeline() as pipe:
            pipe.zadd(key, {str(now): now})
            pipe.expire(key, config.window_seconds)
            pipe.execute()

    def get_count(self, bucket: str, window_seconds: int = 60) -> int:
        return int(self.client.zcard(self._key(bucket, window_seconds)))


_rate_limiter_singleton: Optional[BaseRateLimiter] = None


def build_rate_limiter() -> BaseRateLimiter:
    redis_url = getattr(settings, "REDIS_URL", None)
    if not redis_url:
        logger.info("REDIS_URL not set; throttling evaluation writes in memory")
        return InMemoryRateLimiter()

    try:
        client = redis.Redis.from_url(redis_url)
        client.ping()
    except redis.RedisError as exc:
        logger.warning("Redis at %s unavailable (%s); throttling in memory", redis_url, exc)
        return InMemoryRateLimiter()

    logger.info("Throttling evaluation writes through Redis at %s", redis_url)
    return RedisRateLimiter(client)


def get_rate_limiter() -> BaseRateLimiter:
    global _rate_limiter_singleton
    if _rate_limiter_singleton is None:
        _rate_limiter_singleton = build_rate_limiter()
    return _rate_limiter_singleton


__all__ = [
    "BaseRateLimiter",
    "RateLimitConfig",
    "RateLimitExceeded",
    "InMemoryRateLimiter",
    "RedisRateLimiter",
    "build_rate_limiter",
    "get_rate_limiter",
]
