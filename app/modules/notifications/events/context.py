"""Context handed to every event handler."""

from dataclasses import dataclass
from typing import Any, Optional

from infrastructure.configuration.features import NotificationFeatureSettings
from infrastructure.notifications.models import (
    Channel,
    NotificationRecord,
    NotificationRequest,
    NotificationType,
)
from modules.notifications.service import NotificationService


@dataclass
class HandlerContext:
    """Per-event view of the dispatch entry point.

    ``notify`` stamps the event's correlation id on every request, so each
    notification produced by one event can be traced back to it.
    """

    service: NotificationService
    settings: NotificationFeatureSettings
    correlation_id: str
    source: str = "notification-service"

    def notify(
        self,
        notification_type: NotificationType,
        message: str,
        channel: Channel = Channel.EMAIL,
        source: Optional[str] = None,
        **fields: Any,
    ) -> Optional[NotificationRecord]:
        request = NotificationRequest(
            type=notification_type,
            channel=channel,
            message=message,
            correlation_id=self.correlation_id,
            source=source or self.source,
            **fields,
        )
        return self.service.submit(request)
