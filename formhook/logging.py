"""
Structured logging for formhook.

Log calls made while a submission is being dispatched carry the submission id
and transmission format, bound with :func:`dispatch_context`.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

import structlog
from structlog.typing import EventDict, Processor

from .config import get_config

# Third-party loggers that log every request at INFO
CHATTY_LOGGERS = ("httpx", "httpcore")


def add_log_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add log level to event dict."""
    # logger.exception() logs at ERROR
    event_dict["level"] = "ERROR" if method_name == "exception" else method_name.upper()
    return event_dict


def _renderer(log_format: str) -> List[Processor]:
    if log_format == "json":
        return [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]


def setup_logging() -> None:
    """Configure structured logging from FORMHOOK_LOG_LEVEL and FORMHOOK_LOG_FORMAT."""
    config = get_config()
    level = getattr(logging, config.log_level)

    # stdout is reserved for command output
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    processors.extend(_renderer(config.log_format))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def dispatch_context(
    submission_id: Optional[str], transmission_format: str
) -> Iterator[None]:
    """Bind dispatch details to every log call made inside the block."""
    with structlog.contextvars.bound_contextvars(
        submission_id=submission_id,
        transmission_format=transmission_format,
    ):
        yield


def get_logger(name: str = "formhook") -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)
