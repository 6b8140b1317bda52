"""Canonical message value objects shared by every carrier."""

from __future__ import annotations

import dataclasses
import json
import uuid
from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType
from typing import Any

from smskit.kernel.errors import InvalidPayloadError


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(v) for v in value]
    return value


@dataclasses.dataclass(frozen=True)
class InboundMessage:
    """Normalised inbound SMS.

    ``raw`` is a deep read-only copy of the untouched provider payload, kept
    for audit and debugging: nested objects become mapping proxies and
    arrays become tuples.  ``provider`` always equals the id of the adapter
    that produced the message.
    """

    from_: str
    to: str
    text: str
    provider: str
    id: str | None = None
    timestamp: datetime | None = None
    raw: Mapping[str, Any] = dataclasses.field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", _freeze(self.raw or {}))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "from": self.from_,
            "to": self.to,
            "text": self.text,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "provider": self.provider,
            "raw": _thaw(self.raw),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InboundMessage":
        for key in ("from", "to", "text", "provider"):
            if not isinstance(data.get(key), str):
                raise InvalidPayloadError.missing_field(key)
        ts = data.get("timestamp")
        try:
            timestamp = datetime.fromisoformat(ts) if ts else None
        except (TypeError, ValueError) as exc:
            raise InvalidPayloadError(f"bad timestamp {ts!r}", field="timestamp", cause=exc) from exc
        return cls(
            id=data.get("id"),
            from_=data["from"],
            to=data["to"],
            text=data["text"],
            timestamp=timestamp,
            provider=data["provider"],
            raw=data.get("raw") or {},
        )

    @classmethod
    def from_json(cls, payload: str | bytes) -> "InboundMessage":
        try:
            data = json.loads(payload)
        except ValueError as exc:
            raise InvalidPayloadError(f"invalid JSON: {exc}", cause=exc) from exc
        if not isinstance(data, dict):
            raise InvalidPayloadError("expected a JSON object")
        return cls.from_dict(data)


@dataclasses.dataclass(frozen=True)
class SendRequest:
    """An outbound SMS."""

    to: str
    from_: str
    text: str


@dataclasses.dataclass(frozen=True)
class SendResponse:
    """Carrier acknowledgement of an outbound SMS."""

    id: str
    provider: str
    raw: Mapping[str, Any] = dataclasses.field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", _freeze(self.raw or {}))


def fallback_id() -> str:
    """Pseudo message id for carriers that do not return one."""
    return str(uuid.uuid4())


__all__ = ["InboundMessage", "SendRequest", "SendResponse", "fallback_id"]
