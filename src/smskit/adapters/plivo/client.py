"""Plivo adapter – REST send client + inbound webhook."""
from __future__ import annotations

from typing import Any

from smskit.adapters.http import HttpxHttpClient
from smskit.adapters.plivo.signature import PlivoSignatureVerifier
from smskit.application.webhooks import (
    InboundWebhook,
    SignatureVerifier,
    SkipVerification,
    decode_payload,
    parse_timestamp,
    require_field,
)
from smskit.kernel.types import Headers, InboundMessage, SendRequest, SendResponse, fallback_id
from smskit.observability.logging import get_logger

__all__ = ["PLIVO", "PlivoClient"]

PLIVO = "plivo"

logger = get_logger(__name__)


class PlivoClient(InboundWebhook):
    """Sends through the Plivo REST API and normalises Plivo inbound SMS.

    Inbound wire fields (form-encoded by default, JSON accepted):
    ``From``, ``To``, ``Text`` (required), ``MessageUUID``, ``Time``,
    ``Type`` and anything else Plivo adds, all preserved in ``raw``.
    """

    def __init__(
        self,
        auth_id: str,
        auth_token: str,
        *,
        base_url: str = "https://api.plivo.com",
        callback_url: str | None = None,
        verify_signatures: bool = True,
        verifier: SignatureVerifier | None = None,
        timeout: float = 10.0,
    ) -> None:
        if verifier is None:
            if verify_signatures:
                if not callback_url:
                    raise ValueError("callback_url is required when verify_signatures is enabled")
                verifier = PlivoSignatureVerifier(auth_token, callback_url)
            else:
                verifier = SkipVerification()
        super().__init__(verifier)
        self.auth_id = auth_id
        self._auth_token = auth_token
        self.base_url = base_url.rstrip("/")
        self.callback_url = callback_url
        self._timeout = timeout

    @property
    def provider(self) -> str:
        return PLIVO

    async def send(self, request: SendRequest) -> SendResponse:
        url = f"{self.base_url}/v1/Account/{self.auth_id}/Message/"
        payload = {"src": request.from_, "dst": request.to, "text": request.text}
        async with HttpxHttpClient(PLIVO, timeout=self._timeout) as http:
            response = await http.post(url, json=payload, auth=(self.auth_id, self._auth_token))

        try:
            raw: Any = response.json()
        except ValueError:
            raw = {"raw": response.text}
        if not isinstance(raw, dict):
            raw = {"raw": raw}

        uuids = raw.get("message_uuid")
        message_id = uuids[0] if isinstance(uuids, list) and uuids and isinstance(uuids[0], str) else fallback_id()
        logger.info("sms_sent", provider=PLIVO, message_id=message_id)
        return SendResponse(id=message_id, provider=PLIVO, raw=raw)

    def parse_inbound(self, headers: Headers, body: bytes) -> InboundMessage:
        data = decode_payload(headers, body)
        return InboundMessage(
            id=data.get("MessageUUID") or None,
            from_=require_field(data, "From"),
            to=require_field(data, "To"),
            text=require_field(data, "Text"),
            timestamp=parse_timestamp(data.get("Time")),
            provider=PLIVO,
            raw=data,
        )

    def __repr__(self) -> str:
        return f"PlivoClient(auth_id={self.auth_id!r}, verifier={self.verifier!r})"
