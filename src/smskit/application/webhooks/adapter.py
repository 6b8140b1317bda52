"""Application webhooks – InboundWebhook port implemented once per carrier."""
from __future__ import annotations

import abc
import json
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from smskit.application.webhooks.signature import form_params
from smskit.application.webhooks.verification import SignatureVerifier
from smskit.kernel.errors import InvalidPayloadError
from smskit.kernel.types import Headers, InboundMessage, get_header

__all__ = ["InboundWebhook", "decode_payload", "parse_timestamp", "require_field"]


class InboundWebhook(abc.ABC):
    """Port: authenticate and normalise one carrier's inbound webhooks.

    Implementations are immutable after construction and safe to share
    across threads.  ``verify`` always runs before ``parse_inbound``; the
    adapter's :class:`SignatureVerifier` decides the policy.
    """

    def __init__(self, verifier: SignatureVerifier) -> None:
        self._verifier = verifier

    @property
    @abc.abstractmethod
    def provider(self) -> str:
        """Stable lowercase identifier, e.g. ``"plivo"``."""

    @property
    def verifier(self) -> SignatureVerifier:
        return self._verifier

    @property
    def verifies_signatures(self) -> bool:
        return self._verifier.enabled

    def verify(self, headers: Headers, body: bytes) -> None:
        """Raise :class:`~smskit.kernel.errors.AuthError` if not authentic."""
        self._verifier.verify(headers, body)

    @abc.abstractmethod
    def parse_inbound(self, headers: Headers, body: bytes) -> InboundMessage:
        """Map the carrier's wire payload onto :class:`InboundMessage`."""


def decode_payload(headers: Headers, body: bytes) -> dict[str, Any]:
    """Decode a form-encoded or JSON body into a flat dict.

    JSON is chosen when ``Content-Type`` says so or the body looks like an
    object; everything else is treated as form data.  Repeated form keys
    keep their last value.
    """
    content_type = (get_header(headers, "content-type") or "").lower()
    stripped = body.lstrip()
    try:
        if "json" in content_type or stripped.startswith(b"{"):
            data = json.loads(body)
            if not isinstance(data, dict):
                raise InvalidPayloadError("expected a JSON object")
            return data
        return dict(form_params(body))
    except UnicodeDecodeError as exc:
        raise InvalidPayloadError(f"body is not valid UTF-8: {exc}", cause=exc) from exc
    except ValueError as exc:
        raise InvalidPayloadError(f"could not decode body: {exc}", cause=exc) from exc


def require_field(data: Mapping[str, Any], field: str) -> str:
    value = data.get(field)
    if value is None or value == "":
        raise InvalidPayloadError.missing_field(field)
    if not isinstance(value, str):
        raise InvalidPayloadError(f"field {field!r} must be a string", field=field)
    return value


_TIMESTAMP_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M:%S%z")


def parse_timestamp(value: Any) -> datetime | None:
    """Best-effort carrier timestamp parsing; unparseable values become ``None``."""
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = None
        for fmt in _TIMESTAMP_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
        if parsed is None:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
