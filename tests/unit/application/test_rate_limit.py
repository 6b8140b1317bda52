"""Unit tests for token-bucket rate limiting."""

from __future__ import annotations

import asyncio
import threading

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from smskit.application.rate_limit import (
    Allowed,
    Limited,
    LocalTokenBucketRateLimiter,
    ProviderRateLimit,
    RateLimitConfig,
    RateLimitDecision,
    RateLimiter,
    TokenBucket,
    provider_of,
)
from smskit.kernel.time import FrozenClock


def _limiter(
    max_requests: int = 5,
    window: float = 1,
    clock: FrozenClock | None = None,
    **kwargs: object,
) -> tuple[LocalTokenBucketRateLimiter, FrozenClock]:
    clock = clock or FrozenClock()
    config = RateLimitConfig(max_requests=max_requests, window_seconds=window, **kwargs)  # type: ignore[arg-type]
    return LocalTokenBucketRateLimiter(config, clock=clock), clock


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestRateLimitConfig:
    def test_defaults(self) -> None:
        config = RateLimitConfig()
        assert (config.max_requests, config.window_seconds, config.enabled) == (100, 60, True)

    def test_window_label(self) -> None:
        assert ProviderRateLimit(100, 60).window_label == "100 req/60s"

    def test_refill_rate(self) -> None:
        assert ProviderRateLimit(10, 60).refill_rate == pytest.approx(1 / 6)

    @pytest.mark.parametrize(("requests", "window"), [(0, 60), (-1, 60), (10, 0), (10, -5)])
    def test_non_positive_rejected(self, requests: int, window: float) -> None:
        with pytest.raises(ValueError):
            RateLimitConfig(max_requests=requests, window_seconds=window)

    @pytest.mark.parametrize("window", [float("nan"), float("inf")])
    def test_non_finite_window_rejected(self, window: float) -> None:
        with pytest.raises(ValueError, match="finite"):
            ProviderRateLimit(1, window)
        with pytest.raises(ValueError, match="finite"):
            RateLimitConfig(window_seconds=window)

    def test_per_provider_override(self) -> None:
        config = RateLimitConfig(per_provider={"twilio": ProviderRateLimit(1, 60)})
        assert config.policy_for("twilio:1.2.3.4") == ProviderRateLimit(1, 60)
        assert config.policy_for("plivo:1.2.3.4") == config.global_limit

    def test_per_provider_is_read_only(self) -> None:
        config = RateLimitConfig(per_provider={"twilio": ProviderRateLimit(1, 60)})
        with pytest.raises(TypeError):
            config.per_provider["plivo"] = ProviderRateLimit(1, 1)  # type: ignore[index]

    def test_provider_of(self) -> None:
        assert provider_of("plivo:10.0.0.1") == "plivo"
        assert provider_of("::1") == ""
        assert provider_of("bare") == "bare"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class TestResults:
    def test_allowed(self) -> None:
        assert Allowed().allowed is True
        assert Allowed.decision is RateLimitDecision.ALLOWED

    def test_limited(self) -> None:
        result = Limited(retry_after=3)
        assert result.allowed is False
        assert result.retry_after == 3
        assert result.decision is RateLimitDecision.LIMITED


# ---------------------------------------------------------------------------
# TokenBucket
# ---------------------------------------------------------------------------


class TestTokenBucket:
    def test_starts_full(self) -> None:
        bucket = TokenBucket.full(ProviderRateLimit(3, 3), now=0.0)
        assert bucket.tokens == 3

    def test_refill_is_capped(self) -> None:
        bucket = TokenBucket.full(ProviderRateLimit(3, 3), now=0.0)
        bucket.refill(1_000.0)
        assert bucket.tokens == 3

    def test_retry_after_rounds_up(self) -> None:
        bucket = TokenBucket.full(ProviderRateLimit(1, 60), now=0.0)
        assert bucket.try_consume(0.0)
        assert not bucket.try_consume(0.0)
        assert bucket.retry_after() == 60

    def test_retry_after_at_least_one(self) -> None:
        bucket = TokenBucket.full(ProviderRateLimit(1000, 1), now=0.0)
        bucket.tokens = 0.999
        assert bucket.retry_after() == 1


# ---------------------------------------------------------------------------
# LocalTokenBucketRateLimiter
# ---------------------------------------------------------------------------


class TestLocalTokenBucketRateLimiter:
    def test_is_rate_limiter(self) -> None:
        assert isinstance(LocalTokenBucketRateLimiter(), RateLimiter)

    def test_burst_then_limited(self) -> None:
        limiter, _ = _limiter(5, 1)
        results = [limiter.check_rate_limit("k") for _ in range(6)]
        assert all(r.allowed for r in results[:5])
        assert isinstance(results[5], Limited)
        assert results[5].retry_after >= 1

    def test_refills_after_window(self) -> None:
        limiter, clock = _limiter(5, 1)
        for _ in range(5):
            limiter.check_rate_limit("k")
        assert not limiter.check_rate_limit("k").allowed
        clock.advance(seconds=1)
        assert limiter.check_rate_limit("k").allowed

    def test_partial_refill(self) -> None:
        limiter, clock = _limiter(5, 1)
        for _ in range(5):
            limiter.check_rate_limit("k")
        clock.advance(seconds=0.25)
        assert limiter.check_rate_limit("k").allowed
        assert not limiter.check_rate_limit("k").allowed

    def test_keys_are_independent(self) -> None:
        limiter, _ = _limiter(1, 60)
        assert limiter.check_rate_limit("plivo:a").allowed
        assert not limiter.check_rate_limit("plivo:a").allowed
        assert limiter.check_rate_limit("plivo:b").allowed

    def test_per_provider_override(self) -> None:
        limiter, _ = _limiter(100, 60, per_provider={"twilio": ProviderRateLimit(1, 60)})
        assert limiter.check_rate_limit("twilio:x").allowed
        result = limiter.check_rate_limit("twilio:x")
        assert isinstance(result, Limited)
        assert result.retry_after == 60
        assert limiter.check_rate_limit("plivo:x").allowed
        assert limiter.check_rate_limit("plivo:x").allowed

    def test_disabled_always_allows(self) -> None:
        limiter, _ = _limiter(1, 60, enabled=False)
        assert all(limiter.check_rate_limit("k").allowed for _ in range(50))
        assert limiter.bucket_count() == 0

    def test_reset(self) -> None:
        limiter, _ = _limiter(1, 60)
        limiter.check_rate_limit("k")
        limiter.reset("k")
        assert limiter.check_rate_limit("k").allowed

    def test_reset_unknown_key_is_noop(self) -> None:
        limiter, _ = _limiter()
        limiter.reset("never-seen")

    def test_remaining(self) -> None:
        limiter, _ = _limiter(5, 1)
        assert limiter.remaining("k") is None
        limiter.check_rate_limit("k")
        assert limiter.remaining("k") == pytest.approx(4)

    def test_invalid_construction(self) -> None:
        with pytest.raises(ValueError):
            LocalTokenBucketRateLimiter(shards=0)
        with pytest.raises(ValueError):
            LocalTokenBucketRateLimiter(idle_windows=0.5)

    def test_concurrent_checks_admit_exactly_capacity(self) -> None:
        limiter, _ = _limiter(50, 3600)
        threads_n, per_thread = 8, 25
        barrier = threading.Barrier(threads_n)
        admitted: list[int] = []
        lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            count = sum(1 for _ in range(per_thread) if limiter.check_rate_limit("shared").allowed)
            with lock:
                admitted.append(count)

        threads = [threading.Thread(target=worker) for _ in range(threads_n)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(admitted) == 50


# ---------------------------------------------------------------------------
# Eviction
# ---------------------------------------------------------------------------


class TestEviction:
    def test_sweep_drops_idle_buckets(self) -> None:
        limiter, clock = _limiter(5, 1)
        limiter.check_rate_limit("a")
        limiter.check_rate_limit("b")
        clock.advance(seconds=2)
        assert limiter.sweep() == 2
        assert limiter.bucket_count() == 0

    def test_sweep_keeps_recent_buckets(self) -> None:
        limiter, clock = _limiter(5, 10)
        limiter.check_rate_limit("a")
        clock.advance(seconds=5)
        assert limiter.sweep() == 0
        assert limiter.bucket_count() == 1

    def test_eviction_is_lossless(self) -> None:
        limiter, clock = _limiter(2, 10)
        limiter.check_rate_limit("k")
        limiter.check_rate_limit("k")
        assert not limiter.check_rate_limit("k").allowed
        clock.advance(seconds=20)
        limiter.sweep()
        # a fresh bucket grants exactly what the old one would have
        assert limiter.check_rate_limit("k").allowed
        assert limiter.check_rate_limit("k").allowed
        assert not limiter.check_rate_limit("k").allowed

    def test_opportunistic_sweep(self) -> None:
        clock = FrozenClock()
        config = RateLimitConfig(max_requests=5, window_seconds=1)
        limiter = LocalTokenBucketRateLimiter(config, clock=clock, sweep_interval_seconds=10)
        limiter.check_rate_limit("old")
        clock.advance(seconds=11)
        limiter.check_rate_limit("new")
        assert limiter.bucket_count() == 1

    def test_run_cleanup_stops_on_event(self) -> None:
        limiter, clock = _limiter(5, 1)
        limiter.check_rate_limit("a")
        clock.advance(seconds=5)

        async def scenario() -> None:
            stop = asyncio.Event()
            task = asyncio.create_task(limiter.run_cleanup(interval=0.01, stop=stop))
            await asyncio.sleep(0.05)
            stop.set()
            await asyncio.wait_for(task, timeout=1)

        asyncio.run(scenario())
        assert limiter.bucket_count() == 0


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestRateLimitProperties:
    @settings(max_examples=50, deadline=None)
    @given(max_requests=st.integers(1, 50), window=st.integers(1, 120), extra=st.integers(1, 10))
    def test_burst_is_exactly_capacity(self, max_requests: int, window: int, extra: int) -> None:
        limiter, _ = _limiter(max_requests, window)
        results = [limiter.check_rate_limit("k").allowed for _ in range(max_requests + extra)]
        assert results.count(True) == max_requests
        assert results[:max_requests] == [True] * max_requests

    @settings(max_examples=50, deadline=None)
    @given(max_requests=st.integers(1, 50), window=st.integers(1, 120))
    def test_retry_after_is_enough(self, max_requests: int, window: int) -> None:
        limiter, clock = _limiter(max_requests, window)
        for _ in range(max_requests):
            limiter.check_rate_limit("k")
        result = limiter.check_rate_limit("k")
        assert isinstance(result, Limited)
        clock.advance(seconds=result.retry_after)
        assert limiter.check_rate_limit("k").allowed
