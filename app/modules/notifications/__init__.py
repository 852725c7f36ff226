"""HR notification module.

Turns HR domain events and direct submissions into per-channel deliveries:

- ``service``: submission, retry and inbox operations
- ``preferences``: channel/category switches and quiet hours
- ``templates``: ``{{variable}}`` rendering
- ``delivery``: the dispatch job processor run by the worker pool
- ``tracking``: record transitions and the delivery log
- ``analytics``: delivery and failure rates
- ``events``: HR event payloads and handlers
"""

from modules.notifications.analytics import DeliveryAnalytics
from modules.notifications.delivery import DeliveryProcessor
from modules.notifications.preferences import PreferenceFilter
from modules.notifications.service import (
    BulkItemResult,
    BulkSubmissionResult,
    NotificationPage,
    NotificationService,
)
from modules.notifications.templates import RenderedTemplate, TemplateRenderer
from modules.notifications.tracking import DeliveryTracker

__all__ = [
    "BulkItemResult",
    "BulkSubmissionResult",
    "DeliveryAnalytics",
    "DeliveryProcessor",
    "DeliveryTracker",
    "NotificationPage",
    "NotificationService",
    "PreferenceFilter",
    "RenderedTemplate",
    "TemplateRenderer",
]
