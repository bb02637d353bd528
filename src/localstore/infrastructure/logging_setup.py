"""Process-wide structlog setup for localstore events."""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional, TextIO

import structlog

from localstore.kernel.fs.path import Path, PathView

_LOG_CONFIGURED = False


def render_paths(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Show ``Path`` and ``PathView`` values as UTF-8 text."""
    for key, value in event_dict.items():
        if isinstance(value, Path):
            event_dict[key] = value.to_utf8()
        elif isinstance(value, PathView):
            event_dict[key] = str(value)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    stream: Optional[TextIO] = None,
) -> bool:
    """Configure stdlib logging and structlog once per process.

    Returns False when logging was already configured and nothing changed.
    """
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return False

    normalized = str(level or "INFO").upper()
    log_level = getattr(logging, normalized, logging.INFO)
    output = stream or sys.stderr

    logging.basicConfig(level=log_level, format="%(message)s", stream=output)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        render_paths,
    ]
    if json_logs:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )

    _LOG_CONFIGURED = True
    return True


def reset_logging() -> None:
    """Drop the structlog configuration so ``configure_logging`` runs again."""
    global _LOG_CONFIGURED
    structlog.reset_defaults()
    _LOG_CONFIGURED = False
