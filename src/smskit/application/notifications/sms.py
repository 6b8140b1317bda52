"""Application notifications – outbound SMS port and in-memory fake."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from smskit.kernel.types import SendRequest, SendResponse

__all__ = [
    "InMemorySmsClient",
    "SmsClient",
]


@runtime_checkable
class SmsClient(Protocol):
    """Port: send one text SMS through a carrier.

    Failures surface as :class:`~smskit.kernel.errors.SmsError` subclasses;
    implementations do not retry.
    """

    async def send(self, request: SendRequest) -> SendResponse: ...


class InMemorySmsClient:
    """Fake SmsClient that captures sent requests in memory."""

    def __init__(self, provider: str = "memory") -> None:
        self.provider = provider
        self.sent: list[SendRequest] = []

    async def send(self, request: SendRequest) -> SendResponse:
        self.sent.append(request)
        message_id = f"mem-sms-{len(self.sent)}"
        return SendResponse(id=message_id, provider=self.provider, raw={"id": message_id})

    def reset(self) -> None:
        self.sent.clear()

    @property
    def count(self) -> int:
        return len(self.sent)

    def last(self) -> SendRequest | None:
        return self.sent[-1] if self.sent else None
