"""Observability – structured logging."""

from smskit.observability.logging import SensitiveFieldsFilter, configure_logging, get_logger

__all__ = ["SensitiveFieldsFilter", "configure_logging", "get_logger"]
