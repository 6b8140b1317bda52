"""Kernel – framework-agnostic building blocks shared by every carrier."""

from smskit.kernel.errors import (
    AuthError,
    HttpError,
    InvalidPayloadError,
    ProviderError,
    SmsError,
    SmsErrorKind,
    UnexpectedError,
)
from smskit.kernel.types import Headers, InboundMessage, SendRequest, SendResponse

__all__ = [
    "AuthError",
    "Headers",
    "HttpError",
    "InboundMessage",
    "InvalidPayloadError",
    "ProviderError",
    "SendRequest",
    "SendResponse",
    "SmsError",
    "SmsErrorKind",
    "UnexpectedError",
]
