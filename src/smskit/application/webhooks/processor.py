"""Application webhooks – WebhookProcessor runs one inbound request end to end."""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum

from smskit.application.webhooks.registry import InboundRegistry
from smskit.kernel.errors import AuthError, InvalidPayloadError, SmsError
from smskit.kernel.types import Headers, InboundMessage
from smskit.observability.logging import get_logger

__all__ = ["HttpStatus", "WebhookProcessor", "WebhookResponse"]

logger = get_logger(__name__)


class HttpStatus(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500


@dataclass(frozen=True)
class WebhookResponse:
    """Transport-neutral response; framework bindings translate it."""

    status: int
    body: str
    content_type: str = "application/json"

    @classmethod
    def success(cls, message: InboundMessage) -> "WebhookResponse":
        return cls(status=HttpStatus.OK, body=message.to_json())

    @classmethod
    def error(cls, status: HttpStatus, message: str) -> "WebhookResponse":
        return cls(status=status, body=json.dumps({"error": message}, ensure_ascii=False))

    @property
    def ok(self) -> bool:
        return self.status == HttpStatus.OK


class WebhookProcessor:
    """Lookup → verify → parse → serialise.

    Stateless: safe to share between threads as long as the registry is not
    being mutated through the unsynchronised path (see
    :class:`InboundRegistry`).  :meth:`process` never raises; every failure
    becomes a status in ``{400, 401, 404, 500}``.

    Mapping
    -------
    unknown provider          → 404
    any failure in ``verify`` → 401 (no detail in the body)
    ``InvalidPayloadError``   → 400 (message in the body)
    ``AuthError`` from parse  → 401
    anything else             → 500
    """

    def __init__(self, registry: InboundRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> InboundRegistry:
        return self._registry

    def process(self, provider: str, headers: Headers, body: bytes) -> WebhookResponse:
        log = logger.bind(provider=provider)
        adapter = self._registry.get(provider)
        if adapter is None:
            log.info("webhook_unknown_provider", status=HttpStatus.NOT_FOUND.value)
            return WebhookResponse.error(HttpStatus.NOT_FOUND, "unknown provider")

        try:
            adapter.verify(headers, body)
        except Exception as exc:  # noqa: BLE001
            log.warning(
                "webhook_verification_failed",
                status=HttpStatus.UNAUTHORIZED.value,
                error_type=type(exc).__name__,
            )
            return WebhookResponse.error(HttpStatus.UNAUTHORIZED, "signature verification failed")

        try:
            message = adapter.parse_inbound(headers, body)
        except InvalidPayloadError as exc:
            log.info("webhook_invalid_payload", status=HttpStatus.BAD_REQUEST.value, error=exc.message)
            return WebhookResponse.error(HttpStatus.BAD_REQUEST, f"invalid payload: {exc.message}")
        except AuthError:
            log.warning("webhook_parse_auth_failed", status=HttpStatus.UNAUTHORIZED.value)
            return WebhookResponse.error(HttpStatus.UNAUTHORIZED, "signature verification failed")
        except SmsError as exc:
            log.error("webhook_processing_failed", status=HttpStatus.INTERNAL_SERVER_ERROR.value, error=str(exc))
            return WebhookResponse.error(HttpStatus.INTERNAL_SERVER_ERROR, f"processing error: {exc}")
        except Exception as exc:  # noqa: BLE001
            log.exception("webhook_adapter_crashed", status=HttpStatus.INTERNAL_SERVER_ERROR.value)
            return WebhookResponse.error(
                HttpStatus.INTERNAL_SERVER_ERROR, f"processing error: {type(exc).__name__}"
            )

        if message.provider != adapter.provider:
            log.error("webhook_provider_mismatch", message_provider=message.provider)
            return WebhookResponse.error(HttpStatus.INTERNAL_SERVER_ERROR, "processing error: provider mismatch")

        log.info("webhook_processed", status=HttpStatus.OK.value, message_id=message.id)
        return WebhookResponse.success(message)
