"""Application – inbound webhook pipeline, rate limiting, outbound port."""

from smskit.application.notifications import InMemorySmsClient, SmsClient
from smskit.application.rate_limit import (
    KeyGenerator,
    LocalTokenBucketRateLimiter,
    RateLimitConfig,
    RateLimiter,
)
from smskit.application.webhooks import (
    InboundRegistry,
    InboundWebhook,
    WebhookProcessor,
    WebhookResponse,
)

__all__ = [
    "InMemorySmsClient",
    "InboundRegistry",
    "InboundWebhook",
    "KeyGenerator",
    "LocalTokenBucketRateLimiter",
    "RateLimitConfig",
    "RateLimiter",
    "SmsClient",
    "WebhookProcessor",
    "WebhookResponse",
]
