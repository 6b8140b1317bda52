"""Plivo adapter – webhook signature verification (V2 and V3 schemes)."""
from __future__ import annotations

from smskit.application.webhooks.signature import (
    HmacSigner,
    form_params,
    sorted_params_string,
    url_without_query,
)
from smskit.kernel.errors import AuthError
from smskit.kernel.types import Headers, get_header

__all__ = ["PlivoSignatureVerifier"]

V2_HEADER = "X-Plivo-Signature-V2"
V2_NONCE_HEADER = "X-Plivo-Signature-V2-Nonce"
V3_HEADER = "X-Plivo-Signature-V3"
V3_NONCE_HEADER = "X-Plivo-Signature-V3-Nonce"


class PlivoSignatureVerifier:
    """Accepts a request signed with either Plivo scheme.

    V3: ``base64(HMAC-SHA256(token, url + sorted_params + "." + nonce))``;
    the header may carry several comma-separated signatures (token
    rotation), any of which may match.  JSON bodies contribute no params.

    V2: ``base64(HMAC-SHA256(token, url_without_query + nonce))``.

    A valid V2 signature is exactly as good as a valid V3 one.  *url* is
    the public callback URL configured at Plivo, since proxies in front of
    the app rewrite the one the app sees.
    """

    enabled = True

    def __init__(self, auth_token: str, url: str) -> None:
        if not auth_token:
            raise ValueError("PlivoSignatureVerifier requires an auth token")
        if not url:
            raise ValueError("PlivoSignatureVerifier requires the public callback URL")
        self._auth_token = auth_token
        self._url = url

    def expected_v3(self, body: bytes, nonce: str) -> str:
        params = [] if body.lstrip().startswith(b"{") else form_params(body)
        payload = f"{self._url}{sorted_params_string(params)}.{nonce}"
        return HmacSigner.sign(self._auth_token, payload, "sha256", "base64")

    def expected_v2(self, nonce: str) -> str:
        return HmacSigner.sign(self._auth_token, url_without_query(self._url) + nonce, "sha256", "base64")

    def verify(self, headers: Headers, body: bytes) -> None:
        v3_signature = get_header(headers, V3_HEADER)
        v3_nonce = get_header(headers, V3_NONCE_HEADER)
        v2_signature = get_header(headers, V2_HEADER)
        v2_nonce = get_header(headers, V2_NONCE_HEADER)

        if not (v3_signature and v3_nonce) and not (v2_signature and v2_nonce):
            raise AuthError("missing Plivo signature headers")

        if v3_signature and v3_nonce:
            try:
                expected = self.expected_v3(body, v3_nonce)
            except UnicodeDecodeError as exc:
                raise AuthError("body is not valid UTF-8", cause=exc) from exc
            matched = False
            for candidate in v3_signature.split(","):
                matched |= HmacSigner.compare(expected, candidate.strip())
            if matched:
                return

        if v2_signature and v2_nonce:
            if HmacSigner.compare(self.expected_v2(v2_nonce), v2_signature.strip()):
                return

        raise AuthError("Plivo signature mismatch")

    def __repr__(self) -> str:
        return f"PlivoSignatureVerifier(url={self._url!r})"
