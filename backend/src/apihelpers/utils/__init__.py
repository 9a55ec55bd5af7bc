"""Utility modules for the request helpers."""

from apihelpers.utils.arrays import in_array
from apihelpers.utils.logging import (
    bind_event_context,
    clear_request_context,
    configure_logging,
    get_logger,
    set_request_context,
)

__all__ = [
    "bind_event_context",
    "clear_request_context",
    "configure_logging",
    "get_logger",
    "in_array",
    "set_request_context",
]
