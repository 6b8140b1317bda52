"""FastAPI adapter – unified webhook router and application factory.

No ``from __future__ import annotations`` here: FastAPI resolves route
annotations at definition time and the framework types are imported
lazily inside the factories.
"""
from typing import TYPE_CHECKING, Any

from smskit.application.webhooks import WebhookProcessor
from smskit.kernel.types import normalize_headers

if TYPE_CHECKING:
    from smskit.config.app import AppConfig


def _require_fastapi() -> None:
    try:
        import fastapi  # noqa: F401
    except ImportError as exc:
        raise ImportError(
            "Install 'smskit[fastapi]' to use the FastAPI adapter"
        ) from exc


def webhook_router(processor: WebhookProcessor, prefix: str = "/webhooks", tags: list[str] | None = None) -> Any:
    """Return an ``APIRouter`` serving ``POST {prefix}/{provider}``.

    The route hands the raw headers and body to *processor* on a worker
    thread and translates the :class:`WebhookResponse` back verbatim.
    """
    _require_fastapi()
    from fastapi import APIRouter, Request  # type: ignore[import-untyped]
    from fastapi.responses import Response  # type: ignore[import-untyped]
    from starlette.concurrency import run_in_threadpool

    router = APIRouter(prefix=prefix.rstrip("/"), tags=tags or ["webhooks"])

    @router.post("/{provider}")
    async def unified_webhook(provider: str, request: Request) -> Response:
        """Authenticate and normalise one carrier webhook."""
        body = await request.body()
        headers = normalize_headers(request.headers.raw)
        result = await run_in_threadpool(processor.process, provider, headers, body)
        return Response(content=result.body, status_code=result.status, media_type=result.content_type)

    return router


def health_router(processor: WebhookProcessor, path: str = "/health") -> Any:
    """Return a liveness router listing the registered providers."""
    _require_fastapi()
    from fastapi import APIRouter  # type: ignore[import-untyped]

    router = APIRouter(tags=["ops"])

    @router.get(path)
    async def liveness() -> dict[str, Any]:
        return {"status": "ok", "providers": processor.registry.providers()}

    return router


def create_app(config: "AppConfig | None" = None, *, processor: WebhookProcessor | None = None) -> Any:
    """Build the webhook service from *config* (loaded from the environment
    when omitted).

    Installs the webhook and health routers, the body-size guard and, when
    enabled, the rate-limit middleware.  The limiter's cleanup loop runs
    for the lifetime of the app.
    """
    _require_fastapi()
    import asyncio
    from contextlib import asynccontextmanager

    from fastapi import FastAPI  # type: ignore[import-untyped]

    from smskit.adapters.fastapi.middleware import BodySizeLimitMiddleware, RateLimitMiddleware
    from smskit.config.app import AppConfig, build_rate_limiter, build_registry
    from smskit.observability.logging import configure_logging, get_logger

    config = config or AppConfig.load()
    configure_logging(config.logging.level, fmt=config.logging.format)
    logger = get_logger(__name__)

    processor = processor or WebhookProcessor(build_registry(config))
    limiter = build_rate_limiter(config) if config.rate_limit.enabled else None

    @asynccontextmanager
    async def lifespan(app: Any):  # noqa: ANN202
        stop = asyncio.Event()
        task = asyncio.create_task(limiter.run_cleanup(stop=stop)) if limiter is not None else None
        logger.info(
            "server_starting",
            host=config.server.host,
            port=config.server.port,
            providers=processor.registry.providers(),
            rate_limit=limiter is not None,
            config=config.to_log_dict(),
        )
        try:
            yield
        finally:
            stop.set()
            if task is not None:
                await task
            logger.info("server_stopped")

    app = FastAPI(title="smskit", lifespan=lifespan)
    app.include_router(webhook_router(processor))
    app.include_router(health_router(processor))
    if limiter is not None:
        app.add_middleware(RateLimitMiddleware, limiter=limiter)
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=config.security.max_body_size)
    return app


__all__ = ["create_app", "health_router", "webhook_router"]
