"""Application webhooks – InboundRegistry maps provider ids to adapters."""
from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from smskit.application.webhooks.adapter import InboundWebhook
from smskit.observability.logging import get_logger

__all__ = ["InboundRegistry"]

logger = get_logger(__name__)


class InboundRegistry:
    """Provider id → :class:`InboundWebhook`.

    The mapping is copy-on-write: every change builds a new read-only dict
    and swaps the reference, so :meth:`get` never takes a lock and never
    sees a half-applied update.  Build it with :meth:`with_adapter` (returns
    a new registry) or :meth:`register` (in place, serialised by a lock),
    then call :meth:`freeze` before traffic starts if no further changes
    are expected.
    """

    def __init__(self, adapters: Mapping[str, InboundWebhook] | None = None) -> None:
        self._adapters: Mapping[str, InboundWebhook] = MappingProxyType(dict(adapters or {}))
        self._write_lock = threading.Lock()
        self._frozen = False

    def with_adapter(self, adapter: InboundWebhook) -> "InboundRegistry":
        """Return a new registry that also contains *adapter*.

        An adapter registered under an existing id replaces it (last write
        wins).  ``self`` is left untouched.
        """
        return InboundRegistry(self._merged(adapter))

    def register(self, adapter: InboundWebhook) -> None:
        """Add *adapter* in place; raises ``RuntimeError`` once frozen."""
        with self._write_lock:
            if self._frozen:
                raise RuntimeError("InboundRegistry is frozen")
            self._adapters = MappingProxyType(self._merged(adapter))

    def freeze(self) -> "InboundRegistry":
        with self._write_lock:
            self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, provider: str) -> InboundWebhook | None:
        return self._adapters.get(provider)

    def providers(self) -> list[str]:
        return sorted(self._adapters)

    def _merged(self, adapter: InboundWebhook) -> dict[str, InboundWebhook]:
        key = adapter.provider
        current = self._adapters
        if key in current and current[key] is not adapter:
            logger.warning("inbound_adapter_replaced", provider=key)
        merged = dict(current)
        merged[key] = adapter
        return merged

    def __contains__(self, provider: object) -> bool:
        return provider in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)

    def __iter__(self) -> Iterator[str]:
        return iter(self.providers())

    def __repr__(self) -> str:
        return f"InboundRegistry(providers={self.providers()!r}, frozen={self._frozen})"
