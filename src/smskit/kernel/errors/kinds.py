"""One error class per :class:`SmsErrorKind`."""

from __future__ import annotations

from typing import Any

from smskit.kernel.errors.base import SmsError, SmsErrorKind


class HttpError(SmsError):
    """Transport-level failure talking to a carrier."""

    kind = SmsErrorKind.HTTP
    default_code = "http_error"


class AuthError(SmsError):
    """Signature or credential check failed."""

    kind = SmsErrorKind.AUTH
    default_code = "auth_error"


class InvalidPayloadError(SmsError):
    """Malformed or incomplete payload.

    ``field`` names the offending wire field when one is known; the message
    always mentions it.
    """

    kind = SmsErrorKind.INVALID
    default_code = "invalid_payload"

    def __init__(self, message: str, *, field: str | None = None, **kwargs: Any) -> None:
        if field is not None and field not in message:
            message = f"{message} (field {field!r})"
        super().__init__(message, **kwargs)
        self.field = field

    @classmethod
    def missing_field(cls, field: str) -> "InvalidPayloadError":
        return cls(f"missing required field {field!r}", field=field)

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["field"] = self.field
        return base


class ProviderError(SmsError):
    """Carrier reported a business error (or sent something unsupported)."""

    kind = SmsErrorKind.PROVIDER
    default_code = "provider_error"

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.provider = provider
        self.status_code = status_code


class UnexpectedError(SmsError):
    """Anything not otherwise classified."""

    kind = SmsErrorKind.UNEXPECTED
    default_code = "unexpected"


__all__ = [
    "AuthError",
    "HttpError",
    "InvalidPayloadError",
    "ProviderError",
    "UnexpectedError",
]
