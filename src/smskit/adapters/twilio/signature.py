"""Twilio adapter – X-Twilio-Signature verification."""
from __future__ import annotations

import hashlib

from smskit.application.webhooks.signature import HmacSigner, form_params, sorted_params_string
from smskit.kernel.errors import AuthError
from smskit.kernel.types import Headers, get_header

__all__ = ["TWILIO_SIGNATURE_HEADER", "TwilioSignatureVerifier"]

TWILIO_SIGNATURE_HEADER = "X-Twilio-Signature"


class TwilioSignatureVerifier:
    """Checks ``base64(HMAC-SHA1(auth_token, url + sorted_params))``.

    Form bodies contribute ``key + value`` for every parameter, sorted by
    key.  For JSON bodies Twilio appends ``bodySHA256=<hex SHA-256 of the
    body>`` to the callback URL and signs that URL alone, so the hash is
    recomputed from each request body.
    """

    enabled = True

    def __init__(self, auth_token: str, url: str) -> None:
        if not auth_token:
            raise ValueError("TwilioSignatureVerifier requires an auth token")
        if not url:
            raise ValueError("TwilioSignatureVerifier requires the public callback URL")
        self._auth_token = auth_token
        self._url = url

    def signed_url(self, body: bytes) -> str:
        separator = "&" if "?" in self._url else "?"
        return f"{self._url}{separator}bodySHA256={hashlib.sha256(body).hexdigest()}"

    def expected(self, body: bytes, *, json_body: bool = False) -> str:
        payload = self.signed_url(body) if json_body else self._url + sorted_params_string(form_params(body))
        return HmacSigner.sign(self._auth_token, payload, "sha1", "base64")

    def verify(self, headers: Headers, body: bytes) -> None:
        signature = get_header(headers, TWILIO_SIGNATURE_HEADER)
        if not signature:
            raise AuthError(f"missing {TWILIO_SIGNATURE_HEADER} header")

        content_type = (get_header(headers, "content-type") or "").lower()
        json_body = "json" in content_type
        try:
            expected = self.expected(body, json_body=json_body)
        except UnicodeDecodeError as exc:
            raise AuthError("body is not valid UTF-8", cause=exc) from exc

        if not HmacSigner.compare(expected, signature.strip()):
            raise AuthError("Twilio signature mismatch")

    def __repr__(self) -> str:
        return f"TwilioSignatureVerifier(url={self._url!r})"
