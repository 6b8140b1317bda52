"""Application webhooks – inbound adapters, registry, processor and signing."""
from smskit.application.webhooks.adapter import (
    InboundWebhook,
    decode_payload,
    parse_timestamp,
    require_field,
)
from smskit.application.webhooks.processor import HttpStatus, WebhookProcessor, WebhookResponse
from smskit.application.webhooks.registry import InboundRegistry
from smskit.application.webhooks.signature import (
    HmacSigner,
    form_params,
    sorted_params_string,
    url_without_query,
)
from smskit.application.webhooks.verification import (
    HmacBodyVerifier,
    SignatureVerifier,
    SkipVerification,
)

__all__ = [
    "HmacBodyVerifier",
    "HmacSigner",
    "HttpStatus",
    "InboundRegistry",
    "InboundWebhook",
    "SignatureVerifier",
    "SkipVerification",
    "WebhookProcessor",
    "WebhookResponse",
    "decode_payload",
    "form_params",
    "parse_timestamp",
    "require_field",
    "sorted_params_string",
    "url_without_query",
]
