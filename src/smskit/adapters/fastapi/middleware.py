"""FastAPI adapter – ASGI middleware.

RateLimitMiddleware   token-bucket admission for webhook routes
BodySizeLimitMiddleware  rejects oversized webhook bodies with 413
"""
from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Callable

from smskit.application.rate_limit import KeyGenerator, Limited, RateLimiter
from smskit.kernel.types import normalize_headers
from smskit.observability.logging import get_logger

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

__all__ = ["BodySizeLimitMiddleware", "RateLimitMiddleware", "webhook_provider_from_path"]

logger = get_logger(__name__)


def _require_fastapi() -> None:
    try:
        import fastapi  # noqa: F401
    except ImportError as exc:
        raise ImportError(
            "Install 'smskit[fastapi]' to use the FastAPI adapter"
        ) from exc


async def _send_json(
    send: "Send", status: int, payload: dict[str, Any], extra: tuple[tuple[bytes, bytes], ...] = ()
) -> None:
    body = json.dumps(payload).encode()
    headers = [
        (b"content-type", b"application/json"),
        (b"content-length", str(len(body)).encode()),
        *extra,
    ]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body})


def webhook_provider_from_path(prefix: str = "/webhooks") -> Callable[[str], str | None]:
    """Return a function mapping ``{prefix}/{provider}`` paths to the provider."""
    head = prefix.rstrip("/") + "/"

    def extract(path: str) -> str | None:
        if not path.startswith(head):
            return None
        provider = path[len(head):].strip("/")
        return provider if provider and "/" not in provider else None

    return extract


# ---------------------------------------------------------------------------
# Rate-limit middleware
# ---------------------------------------------------------------------------

class RateLimitMiddleware:
    """Enforce the :class:`RateLimiter` on webhook requests.

    The key is ``"{provider}:{client}"``; the client comes from the
    forwarding headers (see :class:`KeyGenerator`) and falls back to the
    socket peer.  Requests whose path names no provider pass through.
    Returns HTTP 429 with a ``Retry-After`` header when limited.
    """

    def __init__(
        self,
        app: "ASGIApp",
        limiter: RateLimiter,
        key_generator: KeyGenerator | None = None,
        provider_from_path: Callable[[str], str | None] | None = None,
    ) -> None:
        _require_fastapi()
        self.app = app
        self._limiter = limiter
        self._keys = key_generator or KeyGenerator()
        self._provider_from_path = provider_from_path or webhook_provider_from_path()

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        provider = self._provider_from_path(scope.get("path", ""))
        if provider is None:
            await self.app(scope, receive, send)
            return

        headers = normalize_headers(scope.get("headers", []))
        key = self._keys.key_for(provider, headers, default=_peer_address(scope))
        result = self._limiter.check_rate_limit(key)

        if isinstance(result, Limited):
            retry_after = str(result.retry_after)
            await _send_json(
                send,
                429,
                {"error": "rate limit exceeded", "retry_after": result.retry_after},
                ((b"retry-after", retry_after.encode()),),
            )
            return

        await self.app(scope, receive, send)


def _peer_address(scope: Any) -> str:
    client = scope.get("client")
    if client and isinstance(client, (tuple, list)):
        return str(client[0])
    return "unknown"


# ---------------------------------------------------------------------------
# Body-size middleware
# ---------------------------------------------------------------------------

class BodySizeLimitMiddleware:
    """Reject requests whose body exceeds *max_body_size* bytes with 413.

    A declared ``Content-Length`` is checked up front; chunked bodies are
    counted as they stream in.
    """

    def __init__(self, app: "ASGIApp", max_body_size: int) -> None:
        _require_fastapi()
        if max_body_size < 1:
            raise ValueError("max_body_size must be >= 1")
        self.app = app
        self._max = max_body_size

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        declared = headers.get(b"content-length", b"").decode().strip()
        if declared.isdigit() and int(declared) > self._max:
            logger.warning("webhook_body_too_large", size=int(declared), limit=self._max)
            await _send_json(send, 413, {"error": "payload too large"})
            return

        received = 0
        limit = self._max

        async def receive_counting() -> Any:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    raise _BodyTooLarge
            return message

        started = False

        async def send_tracking(message: Any) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await self.app(scope, receive_counting, send_tracking)
        except _BodyTooLarge:
            logger.warning("webhook_body_too_large", size=received, limit=limit)
            if not started:
                await _send_json(send, 413, {"error": "payload too large"})


class _BodyTooLarge(Exception):
    pass
