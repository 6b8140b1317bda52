"""Kernel time – Clock protocol + implementations."""
from __future__ import annotations

import time
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port: wall-clock and monotonic readings, swappable in tests."""

    def now(self) -> datetime: ...
    def monotonic(self) -> float: ...


class SystemClock:
    """Production clock backed by ``datetime.now(UTC)`` and ``time.monotonic``."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def monotonic(self) -> float:
        return time.monotonic()


class FrozenClock:
    """Test clock that only moves when told to.

    Both readings advance together, so rate-limit refill maths sees exactly
    the elapsed time passed to :meth:`advance`.
    """

    def __init__(self, fixed: datetime | None = None, monotonic_start: float = 1_000.0) -> None:
        self._fixed = fixed or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        self._mono = monotonic_start

    def now(self) -> datetime:
        return self._fixed

    def monotonic(self) -> float:
        return self._mono

    def advance(self, **kwargs: int | float) -> None:
        """Advance by the given ``timedelta`` kwargs (``seconds=0.2`` …)."""
        delta = timedelta(**kwargs)
        self._fixed += delta
        self._mono += delta.total_seconds()


__all__ = ["Clock", "FrozenClock", "SystemClock"]
