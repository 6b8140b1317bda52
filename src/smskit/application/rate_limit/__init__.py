"""Application rate limiting – token-bucket admission control."""
from smskit.application.rate_limit.config import ProviderRateLimit, RateLimitConfig, provider_of
from smskit.application.rate_limit.keys import DEFAULT_CLIENT_HEADERS, DefaultKeyGenerator, KeyGenerator
from smskit.application.rate_limit.local import LocalTokenBucketRateLimiter, TokenBucket
from smskit.application.rate_limit.rate_limiter import (
    Allowed,
    Limited,
    RateLimitDecision,
    RateLimitResult,
    RateLimiter,
)

__all__ = [
    "DEFAULT_CLIENT_HEADERS",
    "Allowed",
    "DefaultKeyGenerator",
    "KeyGenerator",
    "Limited",
    "LocalTokenBucketRateLimiter",
    "ProviderRateLimit",
    "RateLimitConfig",
    "RateLimitDecision",
    "RateLimitResult",
    "RateLimiter",
    "TokenBucket",
    "provider_of",
]
