"""Twilio adapter – send client, inbound webhook and signature verifier."""
from smskit.adapters.twilio.client import TWILIO, TwilioClient
from smskit.adapters.twilio.signature import TWILIO_SIGNATURE_HEADER, TwilioSignatureVerifier

__all__ = ["TWILIO", "TWILIO_SIGNATURE_HEADER", "TwilioClient", "TwilioSignatureVerifier"]
