"""Application rate limiting – rate-limit key derivation."""
from __future__ import annotations

from collections.abc import Sequence

from smskit.kernel.types import Headers, get_header

__all__ = ["DEFAULT_CLIENT_HEADERS", "DefaultKeyGenerator", "KeyGenerator"]

DEFAULT_CLIENT_HEADERS: tuple[str, ...] = ("x-forwarded-for", "x-real-ip", "cf-connecting-ip")


class KeyGenerator:
    """Derives ``"{provider}:{client}"`` keys.

    Client address precedence is ``header_precedence`` in order: the first
    header with a non-empty value wins.  ``X-Forwarded-For`` contributes only
    its first hop.  Override by passing *header_precedence* or subclassing.
    """

    header_precedence: tuple[str, ...] = DEFAULT_CLIENT_HEADERS

    def __init__(self, header_precedence: Sequence[str] | None = None) -> None:
        if header_precedence is not None:
            self.header_precedence = tuple(h.lower() for h in header_precedence)

    def generate_key(self, provider: str, client_address: str) -> str:
        return f"{provider}:{client_address}"

    def extract_client_address(self, headers: Headers, default: str | None = None) -> str | None:
        """Return the client address, or *default* when no header carries one."""
        for name in self.header_precedence:
            value = get_header(headers, name)
            if not value:
                continue
            if name == "x-forwarded-for":
                value = value.split(",", 1)[0]
            value = value.strip()
            if value:
                return value
        return default

    def key_for(self, provider: str, headers: Headers, default: str = "unknown") -> str:
        client = self.extract_client_address(headers, default) or default
        return self.generate_key(provider, client)


DefaultKeyGenerator = KeyGenerator
