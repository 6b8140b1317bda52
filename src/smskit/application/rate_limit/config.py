"""Application rate limiting – RateLimitConfig, ProviderRateLimit."""
from __future__ import annotations

import dataclasses
import math
from collections.abc import Mapping
from types import MappingProxyType

__all__ = ["ProviderRateLimit", "RateLimitConfig", "provider_of"]


@dataclasses.dataclass(frozen=True)
class ProviderRateLimit:
    """Quota override for one provider."""

    max_requests: int
    window_seconds: float

    def __post_init__(self) -> None:
        _check_positive(self.max_requests, self.window_seconds)

    @property
    def refill_rate(self) -> float:
        """Tokens added per second."""
        return self.max_requests / self.window_seconds

    @property
    def window_label(self) -> str:
        return f"{self.max_requests} req/{self.window_seconds:g}s"


@dataclasses.dataclass(frozen=True)
class RateLimitConfig:
    """Process-wide limiter policy.

    ``per_provider`` overrides apply to keys whose provider segment (text
    before the first ``:``) matches.  The mapping is stored read-only.
    """

    max_requests: int = 100
    window_seconds: float = 60
    enabled: bool = True
    per_provider: Mapping[str, ProviderRateLimit] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_positive(self.max_requests, self.window_seconds)
        object.__setattr__(self, "per_provider", MappingProxyType(dict(self.per_provider)))

    @property
    def global_limit(self) -> ProviderRateLimit:
        return ProviderRateLimit(self.max_requests, self.window_seconds)

    def policy_for(self, key: str) -> ProviderRateLimit:
        override = self.per_provider.get(provider_of(key))
        return override if override is not None else self.global_limit


def provider_of(key: str) -> str:
    return key.split(":", 1)[0]


def _check_positive(max_requests: int, window_seconds: float) -> None:
    if max_requests <= 0:
        raise ValueError(f"max_requests must be positive, got {max_requests}")
    if not math.isfinite(window_seconds) or window_seconds <= 0:
        raise ValueError(f"window_seconds must be positive and finite, got {window_seconds}")
