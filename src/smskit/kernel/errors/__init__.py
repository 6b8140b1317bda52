"""Kernel error taxonomy – public re-export surface.

Hierarchy::

    SmsError                 (base.py, kind = UNEXPECTED)
    ├── HttpError            transport failure          → kind HTTP
    ├── AuthError            signature / credentials    → kind AUTH
    ├── InvalidPayloadError  malformed or incomplete    → kind INVALID
    ├── ProviderError        carrier business error     → kind PROVIDER
    └── UnexpectedError      anything else              → kind UNEXPECTED
"""

from smskit.kernel.errors.base import SmsError, SmsErrorKind
from smskit.kernel.errors.kinds import (
    AuthError,
    HttpError,
    InvalidPayloadError,
    ProviderError,
    UnexpectedError,
)

__all__ = [
    "AuthError",
    "HttpError",
    "InvalidPayloadError",
    "ProviderError",
    "SmsError",
    "SmsErrorKind",
    "UnexpectedError",
]
