"""Shared utilities (request tracing)."""

from .request_context import (
    format_request_id,
    generate_request_id,
    get_request_id,
    set_request_id,
)

__all__ = [
    "format_request_id",
    "generate_request_id",
    "get_request_id",
    "set_request_id",
]
