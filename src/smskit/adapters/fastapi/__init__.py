"""FastAPI adapter – unified webhook router, middleware and app factory."""
from smskit.adapters.fastapi.middleware import (
    BodySizeLimitMiddleware,
    RateLimitMiddleware,
    webhook_provider_from_path,
)
from smskit.adapters.fastapi.routers import create_app, health_router, webhook_router

__all__ = [
    "BodySizeLimitMiddleware",
    "RateLimitMiddleware",
    "create_app",
    "health_router",
    "webhook_router",
    "webhook_provider_from_path",
]
