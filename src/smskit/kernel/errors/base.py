"""Root error class for the smskit error taxonomy."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, ClassVar


class SmsErrorKind(str, Enum):
    """Closed set of failure kinds shared by inbound and outbound paths."""

    HTTP = "http"
    AUTH = "auth"
    INVALID = "invalid"
    PROVIDER = "provider"
    UNEXPECTED = "unexpected"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS: dict[SmsErrorKind, str] = {
    SmsErrorKind.HTTP: "http error",
    SmsErrorKind.AUTH: "authentication error",
    SmsErrorKind.INVALID: "invalid request",
    SmsErrorKind.PROVIDER: "provider error",
    SmsErrorKind.UNEXPECTED: "unexpected",
}


class SmsError(Exception):
    """Root of the error taxonomy.

    Args:
        message: Human-readable description.
        code: Machine-readable slug (defaults to the subclass ``default_code``).
        detail: Arbitrary extra context (serialisable dict).
        cause: Original exception that triggered this error.
    """

    kind: ClassVar[SmsErrorKind] = SmsErrorKind.UNEXPECTED
    default_code: ClassVar[str] = "sms_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = detail or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.kind.label}: {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict (safe for logging)."""
        payload: dict[str, Any] = {
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)


__all__ = ["SmsError", "SmsErrorKind"]
