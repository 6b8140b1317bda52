"""Application rate limiting – in-memory token-bucket implementation."""

from __future__ import annotations

import asyncio
import math
import threading
import zlib
from dataclasses import dataclass

from smskit.application.rate_limit.config import ProviderRateLimit, RateLimitConfig
from smskit.application.rate_limit.rate_limiter import (
    ALLOWED,
    Limited,
    RateLimitResult,
    RateLimiter,
)
from smskit.kernel.time import Clock, SystemClock
from smskit.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass
class TokenBucket:
    """Continuously refilling bucket.

    *capacity* – maximum tokens.
    *refill_rate* – tokens added per second.
    *last_refill* – monotonic timestamp of the last refill, doubles as
    "last seen" for eviction.
    """

    capacity: float
    refill_rate: float
    window_seconds: float
    tokens: float
    last_refill: float

    @classmethod
    def full(cls, policy: ProviderRateLimit, now: float) -> "TokenBucket":
        return cls(
            capacity=float(policy.max_requests),
            refill_rate=policy.refill_rate,
            window_seconds=float(policy.window_seconds),
            tokens=float(policy.max_requests),
            last_refill=now,
        )

    def _available(self, now: float) -> float:
        elapsed = max(0.0, now - self.last_refill)
        return min(self.capacity, self.tokens + elapsed * self.refill_rate)

    def refill(self, now: float) -> None:
        self.tokens = self._available(now)
        self.last_refill = max(self.last_refill, now)

    def try_consume(self, now: float) -> bool:
        self.refill(now)
        if self.tokens >= 1.0:
            self.tokens -= 1.0
            return True
        return False

    def retry_after(self) -> int:
        """Whole seconds until one token exists (never less than 1)."""
        needed = 1.0 - self.tokens
        wait = max(1, math.ceil(needed * self.window_seconds / self.capacity))
        if wait * self.refill_rate < needed:
            wait += 1
        return wait

    def snapshot(self, now: float) -> float:
        return self._available(now)


class _Shard:
    __slots__ = ("buckets", "lock")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.buckets: dict[str, TokenBucket] = {}


class LocalTokenBucketRateLimiter(RateLimiter):
    """Single-process token-bucket rate limiter.

    Buckets live in ``shards`` dicts, each guarded by its own lock; a key
    always maps to the same shard, so refill-and-consume for one key is a
    single atomic step while unrelated keys rarely contend.

    The policy for a key is resolved when its bucket is created.  A bucket
    idle for ``idle_windows`` windows has refilled to capacity, so dropping
    it loses nothing; :meth:`sweep` does that, either on demand, from
    :meth:`run_cleanup`, or opportunistically every
    ``sweep_interval_seconds`` during :meth:`check_rate_limit`.
    """

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        *,
        clock: Clock | None = None,
        shards: int = 16,
        idle_windows: float = 2.0,
        sweep_interval_seconds: float = 300.0,
    ) -> None:
        if shards < 1:
            raise ValueError("shards must be >= 1")
        if idle_windows < 1.0:
            raise ValueError("idle_windows must be >= 1 so evicted buckets are already full")
        self._config = config or RateLimitConfig()
        self._clock = clock or SystemClock()
        self._shards = [_Shard() for _ in range(shards)]
        self._idle_windows = idle_windows
        self._sweep_interval = sweep_interval_seconds
        self._sweep_lock = threading.Lock()
        self._last_sweep = self._clock.monotonic()

    @property
    def config(self) -> RateLimitConfig:
        return self._config

    def _shard(self, key: str) -> _Shard:
        return self._shards[zlib.crc32(key.encode()) % len(self._shards)]

    def check_rate_limit(self, key: str) -> RateLimitResult:
        if not self._config.enabled:
            return ALLOWED

        self._maybe_sweep()
        shard = self._shard(key)
        with shard.lock:
            now = self._clock.monotonic()
            bucket = shard.buckets.get(key)
            if bucket is None:
                bucket = TokenBucket.full(self._config.policy_for(key), now)
                shard.buckets[key] = bucket
            if bucket.try_consume(now):
                logger.debug("rate_limit_allowed", key=key, tokens=bucket.tokens)
                return ALLOWED
            retry_after = bucket.retry_after()

        logger.warning("rate_limit_exceeded", key=key, retry_after=retry_after)
        return Limited(retry_after=retry_after)

    def reset(self, key: str) -> None:
        shard = self._shard(key)
        with shard.lock:
            shard.buckets.pop(key, None)

    def remaining(self, key: str) -> float | None:
        """Tokens currently available to *key*, or ``None`` if it has no bucket."""
        shard = self._shard(key)
        with shard.lock:
            bucket = shard.buckets.get(key)
            if bucket is None:
                return None
            return bucket.snapshot(self._clock.monotonic())

    def bucket_count(self) -> int:
        return sum(len(shard.buckets) for shard in self._shards)

    def sweep(self) -> int:
        """Drop idle buckets; returns how many were evicted."""
        evicted = 0
        for shard in self._shards:
            with shard.lock:
                now = self._clock.monotonic()
                stale = [
                    key
                    for key, bucket in shard.buckets.items()
                    if now - bucket.last_refill >= self._idle_windows * bucket.window_seconds
                ]
                for key in stale:
                    del shard.buckets[key]
                evicted += len(stale)
        if evicted:
            logger.debug("rate_limit_buckets_evicted", count=evicted)
        return evicted

    def _maybe_sweep(self) -> None:
        now = self._clock.monotonic()
        if now - self._last_sweep < self._sweep_interval:
            return
        # one sweeper at a time; everyone else carries on
        if not self._sweep_lock.acquire(blocking=False):
            return
        try:
            self._last_sweep = now
            self.sweep()
        finally:
            self._sweep_lock.release()

    async def run_cleanup(
        self,
        interval: float | None = None,
        stop: asyncio.Event | None = None,
    ) -> None:
        """Sweep every *interval* seconds until *stop* is set."""
        period = interval if interval is not None else self._sweep_interval
        stop = stop or asyncio.Event()
        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=period)
            except TimeoutError:
                self.sweep()


__all__ = ["LocalTokenBucketRateLimiter", "TokenBucket"]
