"""Plivo adapter – send client, inbound webhook and signature verifier."""
from smskit.adapters.plivo.client import PLIVO, PlivoClient
from smskit.adapters.plivo.signature import PlivoSignatureVerifier

__all__ = ["PLIVO", "PlivoClient", "PlivoSignatureVerifier"]
