"""Observability – structured logging helpers."""
from smskit.observability.logging.factory import configure_logging, parse_level
from smskit.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from smskit.observability.logging.processors import get_logger

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "SensitiveFieldsFilter",
    "configure_logging",
    "get_logger",
    "parse_level",
]
