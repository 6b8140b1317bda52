"""Unit tests for HMAC signing primitives and verification policies."""

from __future__ import annotations

import base64
import hashlib
import hmac

import pytest

from smskit.application.webhooks import (
    HmacBodyVerifier,
    HmacSigner,
    SignatureVerifier,
    SkipVerification,
    form_params,
    sorted_params_string,
    url_without_query,
)
from smskit.kernel.errors import AuthError


# ---------------------------------------------------------------------------
# HmacSigner
# ---------------------------------------------------------------------------


class TestHmacSigner:
    def test_base64_sha256_matches_stdlib(self) -> None:
        expected = base64.b64encode(hmac.new(b"k", b"payload", hashlib.sha256).digest()).decode()
        assert HmacSigner.sign("k", "payload") == expected

    def test_hex_sha1(self) -> None:
        expected = hmac.new(b"k", b"payload", hashlib.sha1).hexdigest()
        assert HmacSigner.sign("k", b"payload", "sha1", "hex") == expected

    def test_unknown_algorithm_rejected(self) -> None:
        with pytest.raises(ValueError):
            HmacSigner.sign("k", "p", "md5")

    def test_unknown_encoding_rejected(self) -> None:
        with pytest.raises(ValueError):
            HmacSigner.sign("k", "p", "sha256", "base32")

    def test_compare(self) -> None:
        assert HmacSigner.compare("abc", "abc")
        assert not HmacSigner.compare("abc", "abd")
        assert not HmacSigner.compare("abc", "ab")


class TestParamHelpers:
    def test_form_params_keeps_blanks_and_order(self) -> None:
        assert form_params(b"b=2&a=&c=%2B1") == [("b", "2"), ("a", ""), ("c", "+1")]

    def test_sorted_params_string(self) -> None:
        assert sorted_params_string([("To", "2"), ("Body", "hi"), ("From", "1")]) == "BodyhiFrom1To2"

    def test_sorted_params_independent_of_arrival_order(self) -> None:
        a = sorted_params_string([("k", "2"), ("k", "1")])
        b = sorted_params_string([("k", "1"), ("k", "2")])
        assert a == b == "k1k2"

    def test_url_without_query(self) -> None:
        assert url_without_query("https://h.example/a/b?x=1#frag") == "https://h.example/a/b"


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------


class TestSkipVerification:
    def test_accepts_anything(self) -> None:
        policy = SkipVerification()
        policy.verify([], b"anything")
        assert policy.enabled is False

    def test_is_a_signature_verifier(self) -> None:
        assert isinstance(SkipVerification(), SignatureVerifier)


class TestHmacBodyVerifier:
    def _verifier(self, **kwargs: str) -> HmacBodyVerifier:
        return HmacBodyVerifier("s3cret", "X-Signature", **kwargs)

    def test_valid_signature(self) -> None:
        sig = HmacSigner.sign("s3cret", b"body", "sha256", "hex")
        self._verifier().verify([("x-signature", sig)], b"body")

    def test_prefix_is_stripped(self) -> None:
        sig = HmacSigner.sign("s3cret", b"body", "sha256", "hex")
        self._verifier(prefix="sha256=").verify([("X-Signature", f"sha256={sig}")], b"body")

    def test_wrong_prefix_rejected(self) -> None:
        sig = HmacSigner.sign("s3cret", b"body", "sha256", "hex")
        with pytest.raises(AuthError, match="scheme"):
            self._verifier(prefix="sha256=").verify([("X-Signature", f"sha1={sig}")], b"body")

    def test_missing_header(self) -> None:
        with pytest.raises(AuthError, match="missing"):
            self._verifier().verify([], b"body")

    def test_tampered_body(self) -> None:
        sig = HmacSigner.sign("s3cret", b"body", "sha256", "hex")
        with pytest.raises(AuthError, match="mismatch"):
            self._verifier().verify([("X-Signature", sig)], b"body!")

    def test_empty_secret_rejected(self) -> None:
        with pytest.raises(ValueError):
            HmacBodyVerifier("", "X-Signature")

    def test_is_enabled(self) -> None:
        assert self._verifier().enabled is True
