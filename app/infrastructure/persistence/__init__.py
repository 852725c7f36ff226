"""Persistence collaborators of the notification pipeline."""

from infrastructure.persistence.directory import (
    ContactDetails,
    InMemoryRecipientDirectory,
    RecipientDirectory,
)
from infrastructure.persistence.notifications import (
    DeliveryLog,
    InMemoryDeliveryLog,
    InMemoryNotificationStore,
    NotificationQuery,
    NotificationStore,
)
from infrastructure.persistence.preferences import (
    InMemoryPreferenceStore,
    PreferenceStore,
)
from infrastructure.persistence.templates import InMemoryTemplateStore, TemplateStore

__all__ = [
    "ContactDetails",
    "DeliveryLog",
    "InMemoryDeliveryLog",
    "InMemoryNotificationStore",
    "InMemoryPreferenceStore",
    "InMemoryRecipientDirectory",
    "InMemoryTemplateStore",
    "NotificationQuery",
    "NotificationStore",
    "PreferenceStore",
    "RecipientDirectory",
    "TemplateStore",
]
