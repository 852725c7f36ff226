"""Exceptions for the notification pipeline.

All notification exceptions inherit from ``NotificationError`` and carry a
machine ``error_code`` so callers at the edge can map them without
inspecting messages.

Example:
    try:
        service.retry(notification_id)
    except InvalidStateError as e:
        logger.warning("retry_rejected", error_code=e.error_code, error=str(e))
"""

from typing import Optional


class NotificationError(Exception):
    """Base exception for all notification pipeline errors."""

    error_code = "NOTIFICATION_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        if error_code is not None:
            self.error_code = error_code


class ConfigurationError(NotificationError):
    """A channel adapter is missing credentials or settings.

    Raised inside adapter ``initialize()`` and caught there; the adapter
    stays unhealthy instead of failing startup.
    """

    error_code = "CONFIGURATION_ERROR"


class PreferenceLookupError(NotificationError):
    """The preference store could not be read. Submissions default to allow."""

    error_code = "PREFERENCE_LOOKUP_FAILED"


class TemplateNotFoundError(NotificationError):
    """Referenced template does not exist or is inactive. No record is created."""

    error_code = "TEMPLATE_NOT_FOUND"


class DeliveryError(NotificationError):
    """A channel adapter failed to deliver a message.

    Recorded on the notification as FAILED and never raised past the worker.
    """

    error_code = "DELIVERY_FAILED"


class RecipientResolutionError(DeliveryError):
    """No address is known for the record's user on its channel."""

    error_code = "RECIPIENT_RESOLUTION_FAILED"


class RecordNotFoundError(NotificationError):
    """A notification record does not exist."""

    error_code = "NOT_FOUND"


class InvalidStateError(NotificationError):
    """The record is not in a state that allows the requested transition."""

    error_code = "INVALID_STATE"


class RetryExhaustedError(InvalidStateError):
    """Explicit retry rejected because ``retry_count`` reached ``max_retries``."""

    error_code = "RETRY_EXHAUSTED"


class PermissionDeniedError(NotificationError):
    """The requesting user may not access or modify the record."""

    error_code = "PERMISSION_DENIED"
