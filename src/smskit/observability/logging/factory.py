"""Observability – structlog configuration."""
from __future__ import annotations

import logging
from typing import Any

import structlog

from smskit.observability.logging.filters import SensitiveFieldsFilter

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def parse_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    try:
        return _LEVELS[level.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level!r}") from None


def configure_logging(
    level: int | str = logging.INFO,
    fmt: str = "json",
    sensitive_fields: frozenset[str] | None = None,
) -> None:
    """Route structlog through the stdlib root logger.

    *fmt* is ``"json"`` (one object per line) or ``"pretty"`` (console
    renderer for local development).  Redaction always runs first so
    credentials never reach a renderer.
    """
    if fmt not in ("json", "pretty"):
        raise ValueError(f"Unknown log format: {fmt!r}")

    shared_processors: list[Any] = [
        SensitiveFieldsFilter(sensitive_fields),
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(parse_level(level))


__all__ = ["configure_logging", "parse_level"]
