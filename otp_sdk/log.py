"""
Logging Setup
=============
Optional structlog configuration for applications using the OTP SDK.

The SDK logs through `structlog.get_logger(__name__)` and never configures
logging on import. Call `configure_logging()` once at startup if the host
application has no structlog setup of its own.

Usage:
    from otp_sdk.log import configure_logging

    configure_logging(level="INFO", json_output=True)
"""

import logging

import structlog

SENSITIVE_KEYS = frozenset({"api_key", "x-api-key", "otp_code"})


def redact_sensitive(logger, method_name, event_dict):
    """Mask values of keys that may carry credentials or codes."""
    for key in list(event_dict):
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = "***"
    return event_dict


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structlog for the host application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON lines (production) instead of console output
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_sensitive,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
