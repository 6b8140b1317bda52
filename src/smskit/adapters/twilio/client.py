"""Twilio adapter – REST send client + inbound webhook."""
from __future__ import annotations

from typing import Any

from smskit.adapters.http import HttpxHttpClient
from smskit.adapters.twilio.signature import TwilioSignatureVerifier
from smskit.application.webhooks import (
    InboundWebhook,
    SignatureVerifier,
    SkipVerification,
    decode_payload,
    require_field,
)
from smskit.kernel.errors import ProviderError
from smskit.kernel.types import Headers, InboundMessage, SendRequest, SendResponse
from smskit.observability.logging import get_logger

__all__ = ["TWILIO", "TwilioClient"]

TWILIO = "twilio"

logger = get_logger(__name__)


class TwilioClient(InboundWebhook):
    """Sends through the Twilio Messages API and normalises Twilio inbound SMS.

    Inbound wire fields: ``From``, ``To``, ``Body`` (required) and
    ``MessageSid`` (``SmsSid`` on older accounts).  Twilio does not send a
    timestamp with inbound SMS.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        *,
        base_url: str = "https://api.twilio.com",
        callback_url: str | None = None,
        verify_signatures: bool = True,
        verifier: SignatureVerifier | None = None,
        timeout: float = 10.0,
    ) -> None:
        if verifier is None:
            if verify_signatures:
                if not callback_url:
                    raise ValueError("callback_url is required when verify_signatures is enabled")
                verifier = TwilioSignatureVerifier(auth_token, callback_url)
            else:
                verifier = SkipVerification()
        super().__init__(verifier)
        self.account_sid = account_sid
        self._auth_token = auth_token
        self.base_url = base_url.rstrip("/")
        self.callback_url = callback_url
        self._timeout = timeout

    @property
    def provider(self) -> str:
        return TWILIO

    async def send(self, request: SendRequest) -> SendResponse:
        url = f"{self.base_url}/2010-04-01/Accounts/{self.account_sid}/Messages.json"
        data = {"To": request.to, "From": request.from_, "Body": request.text}
        async with HttpxHttpClient(TWILIO, timeout=self._timeout) as http:
            response = await http.post(url, data=data, auth=(self.account_sid, self._auth_token))

        try:
            raw: Any = response.json()
        except ValueError as exc:
            raise ProviderError(
                "twilio: response is not JSON", provider=TWILIO, status_code=response.status_code, cause=exc
            ) from exc
        sid = raw.get("sid") if isinstance(raw, dict) else None
        if not isinstance(sid, str) or not sid:
            raise ProviderError(
                "twilio: response has no message sid", provider=TWILIO, status_code=response.status_code
            )
        logger.info("sms_sent", provider=TWILIO, message_id=sid)
        return SendResponse(id=sid, provider=TWILIO, raw=raw)

    def parse_inbound(self, headers: Headers, body: bytes) -> InboundMessage:
        data = decode_payload(headers, body)
        return InboundMessage(
            id=data.get("MessageSid") or data.get("SmsSid") or None,
            from_=require_field(data, "From"),
            to=require_field(data, "To"),
            text=require_field(data, "Body"),
            provider=TWILIO,
            raw=data,
        )

    def __repr__(self) -> str:
        return f"TwilioClient(account_sid={self.account_sid!r}, verifier={self.verifier!r})"
