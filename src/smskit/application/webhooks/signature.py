"""Application webhooks – HMAC signing primitives shared by carrier verifiers."""
from __future__ import annotations

import base64
import hashlib
import hmac
from collections.abc import Iterable
from urllib.parse import parse_qsl, urlsplit, urlunsplit

__all__ = [
    "HmacSigner",
    "form_params",
    "sorted_params_string",
    "url_without_query",
]


class HmacSigner:
    """Computes and compares HMAC signatures.

    Comparison always goes through :func:`hmac.compare_digest` on bytes so
    the time taken does not depend on how many leading bytes match.
    """

    ALGORITHMS = {"sha1": hashlib.sha1, "sha256": hashlib.sha256, "sha512": hashlib.sha512}

    @classmethod
    def digest(cls, secret: str | bytes, payload: str | bytes, algorithm: str = "sha256") -> bytes:
        try:
            digestmod = cls.ALGORITHMS[algorithm]
        except KeyError:
            raise ValueError(f"Unsupported HMAC algorithm: {algorithm!r}") from None
        key = secret.encode() if isinstance(secret, str) else secret
        data = payload.encode() if isinstance(payload, str) else payload
        return hmac.new(key, data, digestmod).digest()

    @classmethod
    def sign(
        cls,
        secret: str | bytes,
        payload: str | bytes,
        algorithm: str = "sha256",
        encoding: str = "base64",
    ) -> str:
        """Return the signature as ``base64`` or ``hex`` text."""
        raw = cls.digest(secret, payload, algorithm)
        if encoding == "base64":
            return base64.b64encode(raw).decode()
        if encoding == "hex":
            return raw.hex()
        raise ValueError(f"Unsupported signature encoding: {encoding!r}")

    @staticmethod
    def compare(expected: str | bytes, supplied: str | bytes) -> bool:
        a = expected.encode() if isinstance(expected, str) else expected
        b = supplied.encode() if isinstance(supplied, str) else supplied
        return hmac.compare_digest(a, b)


def form_params(body: bytes) -> list[tuple[str, str]]:
    """Decode an ``application/x-www-form-urlencoded`` body, keeping blanks
    and arrival order."""
    return parse_qsl(body.decode("utf-8"), keep_blank_values=True, strict_parsing=False)


def sorted_params_string(params: Iterable[tuple[str, str]]) -> str:
    """Concatenate ``key + value`` for every parameter sorted by key.

    Repeated keys keep all their values, sorted, so the result does not
    depend on arrival order.
    """
    return "".join(f"{k}{v}" for k, v in sorted(params))


def url_without_query(url: str) -> str:
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
