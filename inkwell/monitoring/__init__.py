"""
Logging, metrics and tracing for the Inkwell backend.

Logging is re-exported here; Prometheus collectors live in
``inkwell.monitoring.prometheus`` and OpenTelemetry setup in
``inkwell.monitoring.tracing``.

Usage
-----
>>> from inkwell.monitoring import get_logger
>>> logger = get_logger(__name__)
"""

from inkwell.monitoring.logging import (
    bind_request_id,
    clear_context,
    configure_logging,
    get_logger,
    redact_pii,
    sanitize_headers,
    sanitize_log_message,
)

__all__ = [
    "bind_request_id",
    "clear_context",
    "configure_logging",
    "get_logger",
    "redact_pii",
    "sanitize_headers",
    "sanitize_log_message",
]
