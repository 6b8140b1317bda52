"""Observability – SensitiveFieldsFilter."""
from __future__ import annotations

from typing import Any

DEFAULT_SENSITIVE_FIELDS: frozenset[str] = frozenset({
    "auth_token", "authorization", "password", "secret", "secret_access_key",
    "signature", "token", "x-plivo-signature-v2", "x-plivo-signature-v3",
    "x-twilio-signature",
})


class SensitiveFieldsFilter:
    """Replace values of sensitive keys with ``[REDACTED]``.

    Carrier credentials and inbound signatures must never reach a log sink.
    """

    REDACTED = "[REDACTED]"

    def __init__(self, sensitive_fields: frozenset[str] | None = None) -> None:
        fields = DEFAULT_SENSITIVE_FIELDS | (sensitive_fields or frozenset())
        self._fields = frozenset(f.lower() for f in fields)

    def is_sensitive(self, key: str) -> bool:
        return key.lower() in self._fields

    def redact(self, data: dict[str, Any]) -> dict[str, Any]:
        return {k: (self.REDACTED if self.is_sensitive(k) else v) for k, v in data.items()}

    def redact_deep(self, data: dict[str, Any]) -> dict[str, Any]:
        """Recursively redact nested dicts and ``(name, value)`` header pairs."""
        result: dict[str, Any] = {}
        for k, v in data.items():
            if self.is_sensitive(k):
                result[k] = self.REDACTED
            elif isinstance(v, dict):
                result[k] = self.redact_deep(v)
            elif isinstance(v, (list, tuple)) and v and all(_is_pair(item) for item in v):
                result[k] = [
                    (name, self.REDACTED if self.is_sensitive(name) else value)
                    for name, value in v
                ]
            else:
                result[k] = v
        return result

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG002
        """structlog processor entry point."""
        return self.redact_deep(event_dict)


def _is_pair(item: Any) -> bool:
    return isinstance(item, (list, tuple)) and len(item) == 2 and isinstance(item[0], str)


__all__ = ["DEFAULT_SENSITIVE_FIELDS", "SensitiveFieldsFilter"]
