"""Notification infrastructure: domain models, errors and channel adapters.

Example:
    from infrastructure.notifications import Channel, NotificationRequest

    request = NotificationRequest(
        type="SYSTEM_ALERT",
        channel=Channel.IN_APP,
        user_id="U1",
        message="Scheduled maintenance tonight",
    )
"""

from infrastructure.notifications.errors import (
    ConfigurationError,
    DeliveryError,
    InvalidStateError,
    NotificationError,
    PermissionDeniedError,
    PreferenceLookupError,
    RecipientResolutionError,
    RecordNotFoundError,
    RetryExhaustedError,
    TemplateNotFoundError,
)
from infrastructure.notifications.models import (
    Channel,
    DeliveryAction,
    DeliveryLogEntry,
    NotificationPriority,
    NotificationRecord,
    NotificationRequest,
    NotificationStatus,
    NotificationTemplate,
    NotificationType,
    OutboundMessage,
    QuietHours,
    UserPreference,
)

__all__ = [
    "Channel",
    "ConfigurationError",
    "DeliveryAction",
    "DeliveryError",
    "DeliveryLogEntry",
    "InvalidStateError",
    "NotificationError",
    "NotificationPriority",
    "NotificationRecord",
    "NotificationRequest",
    "NotificationStatus",
    "NotificationTemplate",
    "NotificationType",
    "OutboundMessage",
    "PermissionDeniedError",
    "PreferenceLookupError",
    "QuietHours",
    "RecipientResolutionError",
    "RecordNotFoundError",
    "RetryExhaustedError",
    "TemplateNotFoundError",
    "UserPreference",
]
