"""
Structured logging configuration using structlog.

Usage:
    from apps.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("otp_issued", phone=mask_phone(phone), otp_id=otp.id)

Every record carries the request context bound by RequestContextMiddleware
(trace_id, http.method, http.path) plus whatever the caller passes as
key-value pairs. Phone numbers must go through mask_phone() before logging.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

MASKED_PHONE_DIGITS = 4


def mask_phone(phone: str | None) -> str:
    """Return a phone number reduced to its last four digits, e.g. ``***9999``."""
    if not phone:
        return ""
    return f"***{phone[-MASKED_PHONE_DIGITS:]}"


def _drop_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Remove values that must never reach log storage.

    OTP codes and session tokens are stripped even if a caller binds them
    by mistake.
    """
    for key in ("code", "otp", "token", "session_token"):
        if key in event_dict:
            event_dict[key] = "[redacted]"
    return event_dict


def _convert_duration_to_nanoseconds(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Convert duration_ms to duration (nanoseconds)."""
    if "duration_ms" in event_dict:
        duration_ms = event_dict.pop("duration_ms")
        event_dict["duration"] = int(duration_ms * 1_000_000)
    return event_dict


def configure_logging(
    json_format: bool = True, log_level: str = "INFO", cache_loggers: bool = True
) -> None:
    """
    Configure structlog for the application.

    Uses stdlib integration so Django and third-party loggers share the same
    output format.

    Args:
        json_format: If True, output JSON (production). If False, pretty console output (development).
        log_level: Minimum log level to output.
        cache_loggers: Cache bound loggers on first use. Tests turn this off so
            structlog.testing.capture_logs() sees every logger.
    """
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _drop_sensitive_fields,
        _convert_duration_to_nanoseconds,
    ]

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
        pre_chain.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=cache_loggers,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level_int)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, typically for ``__name__``."""
    return structlog.get_logger(name)


def bind_contextvars(**kwargs: Any) -> None:
    """
    Bind key-value pairs to the current request/task context.

    Use dict unpacking for dotted keys:
        bind_contextvars(trace_id="abc", **{"usr.id": "42"})
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_contextvars() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
