"""Application rate limiting – RateLimiter port and RateLimitResult variants."""
from __future__ import annotations

import abc
import dataclasses
from enum import Enum
from typing import ClassVar, TypeAlias


class RateLimitDecision(str, Enum):
    ALLOWED = "ALLOWED"
    LIMITED = "LIMITED"


@dataclasses.dataclass(frozen=True)
class Allowed:
    """The request may proceed."""

    decision: ClassVar[RateLimitDecision] = RateLimitDecision.ALLOWED

    @property
    def allowed(self) -> bool:
        return True


@dataclasses.dataclass(frozen=True)
class Limited:
    """The bucket is empty; ``retry_after`` is whole seconds until a token exists."""

    retry_after: int
    decision: ClassVar[RateLimitDecision] = RateLimitDecision.LIMITED

    @property
    def allowed(self) -> bool:
        return False


RateLimitResult: TypeAlias = Allowed | Limited

ALLOWED = Allowed()


class RateLimiter(abc.ABC):
    """Port: admission control keyed by an opaque string."""

    @abc.abstractmethod
    def check_rate_limit(self, key: str) -> RateLimitResult: ...

    @abc.abstractmethod
    def reset(self, key: str) -> None: ...


__all__ = ["ALLOWED", "Allowed", "Limited", "RateLimitDecision", "RateLimitResult", "RateLimiter"]
