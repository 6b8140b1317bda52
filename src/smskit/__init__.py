"""
smskit – unified inbound SMS webhooks and outbound sends for Plivo, Twilio
and AWS SNS.

Import path convention::

    from smskit.application.webhooks import InboundRegistry, WebhookProcessor
    from smskit.application.rate_limit import LocalTokenBucketRateLimiter
    from smskit.adapters.plivo import PlivoClient
    from smskit.adapters.fastapi import create_app
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
