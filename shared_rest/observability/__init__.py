"""Observability module for logging."""

from shared_rest.observability.logging import (
    configure_logging,
    current_request_id,
    new_request_id,
    request_context,
)


__all__ = [
    "configure_logging",
    "current_request_id",
    "new_request_id",
    "request_context",
]
