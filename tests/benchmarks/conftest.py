"""conftest.py for benchmarks.

Shared fixtures for the webhook and rate-limit benchmarks.  Run with::

    pytest tests/benchmarks --benchmark-only
"""

from __future__ import annotations

from urllib.parse import urlencode

import pytest

from smskit.adapters.plivo import PlivoClient
from smskit.adapters.twilio import TwilioClient
from smskit.application.webhooks import HmacSigner, InboundRegistry, WebhookProcessor, sorted_params_string

PLIVO_URL = "https://sms.example.com/webhooks/plivo"
TWILIO_URL = "https://sms.example.com/webhooks/twilio"
TOKEN = "bench-token"

_PARAMS = {
    "From": "+14155550100",
    "To": "+14155550199",
    "Text": "benchmark message with a realistic length of text in it",
    "MessageUUID": "2f1a8a5e-0000-4000-8000-000000000000",
    "Type": "sms",
}


@pytest.fixture(scope="session")
def processor() -> WebhookProcessor:
    """Frozen registry with verifying Plivo and Twilio adapters."""
    registry = (
        InboundRegistry()
        .with_adapter(PlivoClient("MA1", TOKEN, callback_url=PLIVO_URL))
        .with_adapter(TwilioClient("AC1", TOKEN, callback_url=TWILIO_URL))
    )
    return WebhookProcessor(registry.freeze())


@pytest.fixture(scope="session")
def plivo_request() -> tuple[list[tuple[str, str]], bytes]:
    """A V3-signed Plivo form callback."""
    nonce = "12345678901234567890"
    payload = PLIVO_URL + sorted_params_string(_PARAMS.items()) + "." + nonce
    headers = [
        ("Content-Type", "application/x-www-form-urlencoded"),
        ("X-Plivo-Signature-V3", HmacSigner.sign(TOKEN, payload, "sha256", "base64")),
        ("X-Plivo-Signature-V3-Nonce", nonce),
    ]
    return headers, urlencode(_PARAMS).encode()


@pytest.fixture(scope="session")
def twilio_request() -> tuple[list[tuple[str, str]], bytes]:
    """A signed Twilio form callback."""
    params = {"MessageSid": "SM1", "From": _PARAMS["From"], "To": _PARAMS["To"], "Body": _PARAMS["Text"]}
    signature = HmacSigner.sign(TOKEN, TWILIO_URL + sorted_params_string(params.items()), "sha1", "base64")
    headers = [
        ("Content-Type", "application/x-www-form-urlencoded"),
        ("X-Twilio-Signature", signature),
    ]
    return headers, urlencode(params).encode()
