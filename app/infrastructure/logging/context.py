"""Event-scoped context binding for structured logging.

Correlation ids arrive on every inbound domain event and travel with every
notification it produces. Binding them here makes each log line emitted
while handling the event, or delivering one of its notifications,
carry the same id.

Usage:
    from infrastructure.logging import bind_event_context

    with bind_event_context(correlation_id="corr-1", event_type="employee.created"):
        logger.info("event_received")
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_event_context(
    correlation_id: Optional[str] = None,
    event_type: Optional[str] = None,
    notification_id: Optional[str] = None,
    job_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind pipeline context to all logs within the block.

    Args:
        correlation_id: Correlation id of the source event. Generated if absent.
        event_type: Domain event type being handled.
        notification_id: Notification record being processed.
        job_id: Dispatch job being processed.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The correlation id that was bound.
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}

    if event_type is not None:
        context["event_type"] = event_type
    if notification_id is not None:
        context["notification_id"] = notification_id
    if job_id is not None:
        context["job_id"] = job_id

    context.update(extra_context)

    previous = structlog.contextvars.get_contextvars()
    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["correlation_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())
        restore = {k: v for k, v in previous.items() if k in context}
        if restore:
            structlog.contextvars.bind_contextvars(**restore)

