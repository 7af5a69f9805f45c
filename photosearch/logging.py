"""Structured logging helpers."""

from __future__ import annotations

import logging
import re
from typing import Any, MutableMapping

import structlog

REDACTED = "***"
SENSITIVE_FIELDS = frozenset({"key", "api_key", "apikey"})

# Pixabay takes its credential as a ``key`` query parameter.
_KEY_PARAM = re.compile(r"(?<![A-Za-z0-9_])(key=)[^&\s'\"]+")


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credential fields and ``key=`` URL parameters in every event."""

    for field, value in list(event_dict.items()):
        if field.lower() in SENSITIVE_FIELDS:
            event_dict[field] = REDACTED
        elif isinstance(value, str) and "key=" in value:
            event_dict[field] = _KEY_PARAM.sub(rf"\g<1>{REDACTED}", value)
    return event_dict


def configure_logging(level: int | str = logging.INFO) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.set_exc_info,
            redact_secrets,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()

__all__ = ["configure_logging", "logger", "redact_secrets"]
