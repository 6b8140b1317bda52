"""Application webhooks – signature verification policies.

Every adapter is constructed with exactly one policy.  "No verification" is
an explicit :class:`SkipVerification` object rather than an inherited
default, so it shows up in configuration, logs and tests.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from smskit.application.webhooks.signature import HmacSigner
from smskit.kernel.errors import AuthError
from smskit.kernel.types import Headers, get_header

__all__ = ["HmacBodyVerifier", "SignatureVerifier", "SkipVerification"]


@runtime_checkable
class SignatureVerifier(Protocol):
    """Port: decide whether an inbound request is authentic."""

    @property
    def enabled(self) -> bool: ...

    def verify(self, headers: Headers, body: bytes) -> None:
        """Return normally when authentic; raise :class:`AuthError` otherwise."""
        ...


class SkipVerification:
    """Accept every request.  Use only where the carrier offers no HMAC."""

    enabled = False

    def verify(self, headers: Headers, body: bytes) -> None:  # noqa: ARG002
        return None

    def __repr__(self) -> str:
        return "SkipVerification()"


class HmacBodyVerifier:
    """HMAC over the raw body bytes, read from a named header.

    ``prefix`` strips a scheme marker such as ``sha256=`` from the header
    value before comparison.
    """

    enabled = True

    def __init__(
        self,
        secret: str,
        header: str,
        *,
        algorithm: str = "sha256",
        encoding: str = "hex",
        prefix: str = "",
    ) -> None:
        if not secret:
            raise ValueError("HmacBodyVerifier requires a non-empty secret")
        HmacSigner.digest(secret, b"", algorithm)  # validates the algorithm name
        self._secret = secret
        self._header = header
        self._algorithm = algorithm
        self._encoding = encoding
        self._prefix = prefix

    def verify(self, headers: Headers, body: bytes) -> None:
        supplied = get_header(headers, self._header)
        if not supplied:
            raise AuthError(f"missing {self._header} header")
        if self._prefix:
            if not supplied.startswith(self._prefix):
                raise AuthError("signature scheme mismatch")
            supplied = supplied[len(self._prefix):]
        expected = HmacSigner.sign(self._secret, body, self._algorithm, self._encoding)
        if not HmacSigner.compare(expected, supplied.strip()):
            raise AuthError("signature mismatch")

    def __repr__(self) -> str:
        return f"HmacBodyVerifier(header={self._header!r}, algorithm={self._algorithm!r})"
