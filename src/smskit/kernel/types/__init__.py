"""Kernel types – headers and canonical message shapes."""
from smskit.kernel.types.headers import Headers, get_all_headers, get_header, normalize_headers
from smskit.kernel.types.message import InboundMessage, SendRequest, SendResponse, fallback_id

__all__ = [
    "Headers",
    "InboundMessage",
    "SendRequest",
    "SendResponse",
    "fallback_id",
    "get_all_headers",
    "get_header",
    "normalize_headers",
]
