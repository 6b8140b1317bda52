"""Framework-neutral header representation.

Headers are an ordered sequence of ``(name, value)`` pairs.  Names compare
case-insensitively; duplicates are kept in arrival order because some
carriers sign over a specific occurrence.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TypeAlias

Headers: TypeAlias = Sequence[tuple[str, str]]


def get_header(headers: Headers, name: str) -> str | None:
    """Return the first value for *name* (case-insensitive) or ``None``."""
    wanted = name.lower()
    for key, value in headers:
        if key.lower() == wanted:
            return value
    return None


def get_all_headers(headers: Headers, name: str) -> list[str]:
    """Return every value for *name* in arrival order."""
    wanted = name.lower()
    return [value for key, value in headers if key.lower() == wanted]


def normalize_headers(
    source: Mapping[str, str] | Iterable[tuple[str | bytes, str | bytes]],
) -> list[tuple[str, str]]:
    """Coerce a mapping or a pair iterable (ASGI ``bytes`` pairs included)
    into :data:`Headers`."""
    pairs = source.items() if isinstance(source, Mapping) else source
    result: list[tuple[str, str]] = []
    for key, value in pairs:
        if isinstance(key, bytes):
            key = key.decode("latin-1")
        if isinstance(value, bytes):
            value = value.decode("latin-1")
        result.append((key, value))
    return result


__all__ = ["Headers", "get_all_headers", "get_header", "normalize_headers"]
