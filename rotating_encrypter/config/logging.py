"""Structured Logging Configuration.

- JSON format for production (log aggregators)
- Human-readable format for development
- Key material and plaintext never reach the output

Usage:
    from rotating_encrypter.config.logging import setup_logging, get_logger

    setup_logging()  # Call once at startup
    logger = get_logger(__name__)
    logger.info("encrypter.previous_keys.loaded", count=2)

Logs go to stderr: stdout belongs to CLI output (``key:generate --show``).
Loggers are not cached: module-level loggers created before
``setup_logging()`` pick up the configuration on every call.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any

import structlog
from structlog.typing import EventDict

from .settings import get_settings

REDACTED = "[REDACTED]"

# Event fields that may hold keys, tokens or decrypted values
SENSITIVE_KEYS = frozenset({
    "key",
    "app_key",
    "previous_keys",
    "app_previous_keys",
    "env_encryption_key",
    "raw",
    "plaintext",
    "value",
    "payload",
    "secret",
    "token",
    "password",
    "cookie",
})

# Exported keys and ciphertexts start with a PASETO header
SENSITIVE_PREFIXES = ("v3.local.", "v4.local.", "v3.", "v4.")


def _redact(key: str, value: Any) -> Any:
    if key.lower() in SENSITIVE_KEYS:
        return REDACTED
    if isinstance(value, dict):
        return {k: _redact(k, v) for k, v in value.items()}
    if isinstance(value, str) and value.startswith(SENSITIVE_PREFIXES):
        return REDACTED
    return value


def filter_sensitive_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Replace sensitive values with '[REDACTED]'.

    Redacts fields named in SENSITIVE_KEYS (nested dicts included) and any
    string that looks like an exported key or a token.
    """
    for key, value in list(event_dict.items()):
        if key == "event":
            continue
        event_dict[key] = _redact(key, value)
    return event_dict


def add_timestamp(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add ISO format timestamp to log events."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_service_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add service name and environment."""
    settings = get_settings()
    event_dict["service"] = settings.app_name
    event_dict["environment"] = settings.environment
    return event_dict


def setup_logging() -> None:
    """Configure structlog and the stdlib root logger.

    settings.log_format:
    - console: colored key=value output
    - json: one JSON object per line
    """
    settings = get_settings()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        add_service_context,
        filter_sensitive_data,
    ]

    if settings.log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(settings.log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger (typically ``get_logger(__name__)``)."""
    return structlog.get_logger(name)
