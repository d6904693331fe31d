"""Structured logging for the rest layer.

Every event emitted while a call is in flight carries a ``request_id``, so
the attempts of one checked call (and the mock transport events they
trigger) can be grouped in the log stream.
"""

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

import structlog

from shared_rest.settings.app import RestSettings, get_settings


REQUEST_ID_KEY = "request_id"


def configure_logging(
    settings: RestSettings | None = None, output: TextIO = sys.stderr
) -> None:
    """Configure structlog from ``RestSettings``.

    Args:
        settings: Source of ``log_level`` and ``log_json``; read from the
            environment when omitted.
        output: Output stream (default: stderr).
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if settings.log_json:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(format="%(message)s", stream=output, level=level)


def new_request_id() -> str:
    """Generate a short random request id."""
    return uuid.uuid4().hex[:16]


def current_request_id() -> str | None:
    """Get the request id bound to the current context, if any."""
    value = structlog.contextvars.get_contextvars().get(REQUEST_ID_KEY)
    return str(value) if value is not None else None


@contextmanager
def request_context(request_id: str | None = None) -> Iterator[str]:
    """Bind a request id for the duration of a call.

    An id already bound by an enclosing scope is reused unless a new one
    is given explicitly, so nested client calls share the caller's id.

    Args:
        request_id: Id to bind; generated when omitted and none is bound.

    Yields:
        The request id in effect.
    """
    current = current_request_id()
    if request_id is None and current is not None:
        yield current
        return

    request_id = request_id or new_request_id()
    with structlog.contextvars.bound_contextvars(**{REQUEST_ID_KEY: request_id}):
        yield request_id
