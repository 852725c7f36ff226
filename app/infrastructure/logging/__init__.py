"""Structured logging infrastructure.

Public API:
    - configure_logging(): Initialize logging for the process
    - get_module_logger(): Get a logger for the calling module
    - bind_event_context(): Context manager binding correlation ids

Example:
    from infrastructure.logging import configure_logging, get_module_logger

    configure_logging()
    logger = get_module_logger()
    logger.info("worker_pool_started", concurrency=10)
"""

from infrastructure.logging.setup import configure_logging, get_module_logger
from infrastructure.logging.context import bind_event_context
from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    mask_recipient,
    mask_recipients,
    mask_sensitive_data,
    truncate_large_values,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_event_context",
    "SENSITIVE_PATTERNS",
    "mask_recipient",
    "mask_recipients",
    "mask_sensitive_data",
    "truncate_large_values",
]
