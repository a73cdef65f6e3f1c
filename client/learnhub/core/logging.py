"""Structlog configuration for the client.

Log events go through the stdlib ``logging`` tree so that httpx and
application events share handlers:
- stderr, rendered for humans (console) or as JSON
- optionally a rotating JSON file
Every event gets the call context (request ID, user ID, action) and has
tokens and passwords masked before rendering.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor

from learnhub.core.context import get_context


if TYPE_CHECKING:
    from learnhub.config.settings import Settings


# Keys whose values never reach a log sink in clear
SENSITIVE_KEYS = frozenset(
    {"access", "refresh", "password", "password2", "authorization", "credentials"}
)
SENSITIVE_FRAGMENTS = ("password", "token", "secret")

# Values longer than this keep two characters at each end
_VISIBLE_EDGE = 2


def add_call_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Merge request_id, user_id and action into the event."""
    for key, value in get_context().items():
        event_dict.setdefault(key, value)
    return event_dict


def is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return lowered in SENSITIVE_KEYS or any(f in lowered for f in SENSITIVE_FRAGMENTS)


def mask_secret(value: str) -> str:
    """``'eyJhbGciOi...J9'`` -> ``'ey*******J9'``; short values become ``***``.

    A ``Bearer`` prefix is kept so headers stay recognizable.
    """
    prefix = ""
    if value.startswith("Bearer "):
        prefix, value = "Bearer ", value.removeprefix("Bearer ")
    if len(value) <= 2 * _VISIBLE_EDGE:
        return prefix + "***"
    hidden = "*" * (len(value) - 2 * _VISIBLE_EDGE)
    return prefix + value[:_VISIBLE_EDGE] + hidden + value[-_VISIBLE_EDGE:]


def _mask(key: str, value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _mask(k, v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_mask(key, item) for item in value]
    if isinstance(value, str) and is_sensitive_key(key):
        return mask_secret(value)
    return value


def filter_sensitive_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask tokens and passwords, including inside nested payloads."""
    return {key: _mask(key, value) for key, value in event_dict.items()}


def _shared_processors(settings: "Settings") -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_call_context,
        filter_sensitive_data,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.log_include_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            )
        )
    return processors


def _console_renderer(settings: "Settings") -> Processor:
    if settings.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def _file_handler(settings: "Settings") -> RotatingFileHandler:
    """Rotating handler writing ``<log_dir>/<app_name>.log``."""
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        filename=log_dir / f"{settings.app_name}.log",
        maxBytes=settings.log_file_max_bytes,
        backupCount=settings.log_file_backup_count,
        encoding="utf-8",
    )


def configure_structlog(settings: "Settings") -> None:
    """Route structlog through stdlib logging with the configured sinks.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output.
    """
    level = logging.getLevelName(settings.log_level)
    shared = _shared_processors(settings)

    sinks: list[tuple[logging.Handler, Processor]] = [
        (logging.StreamHandler(sys.stderr), _console_renderer(settings))
    ]
    if settings.log_to_file:
        # Log files are always JSON
        sinks.append((_file_handler(settings), structlog.processors.JSONRenderer()))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler, renderer in sinks:
        handler.setLevel(level)
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=renderer, foreign_pre_chain=shared
            )
        )
        root_logger.addHandler(handler)

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # httpx logs every request at INFO; ApiClient already does
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)
